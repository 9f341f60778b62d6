"""Red/blue chromostereopsis color composition.

Each pixel's luminance is split between the red and blue channels by a
logistic function of its depth: values above the threshold (near, for
inverse-depth models) trend red, values below it trend blue. Channel values
are truncated, not rounded.
"""

import numpy as np

from chromadepth.depth.grid import InvalidInputShapeError, as_depth_grid
from chromadepth.effect.params import EffectParams, clamp_percent
from chromadepth.utils.logger import get_logger

logger = get_logger(__name__)

MIN_STEEPNESS = 1e-3


def logistic_blend(depth, threshold: float, depth_scale: float, feather: float) -> np.ndarray:
    """
    Logistic blend weight of the red channel for each depth value.

    Args:
        depth: Depth values in [0, 1].
        threshold: Depth threshold, percent.
        depth_scale: Transition steepness, percent.
        feather: Softening of the transition, percent.

    Returns:
        Blend weights in [0, 1]; exactly 0.5 where depth equals the threshold.
    """
    threshold_norm = clamp_percent(threshold) / 100.0
    steepness = max(clamp_percent(depth_scale), MIN_STEEPNESS)
    feather_norm = clamp_percent(feather) / 100.0
    steepness_adjusted = steepness / (feather_norm * 10.0 + 1.0)

    exponent = -steepness_adjusted * (np.asarray(depth, dtype=np.float64) - threshold_norm)
    # exp overflow saturates the blend to 0, which is the intended limit
    with np.errstate(over="ignore"):
        return 1.0 / (1.0 + np.exp(exponent))


def compose(
    luminance: np.ndarray,
    depth,
    params: EffectParams,
    width: int,
    height: int,
) -> np.ndarray:
    """
    Combine a tone-adjusted luminance buffer and a depth grid into RGBA.

    Args:
        luminance: Flat [0, 1] buffer of length width * height.
        depth: Depth grid (height, width) in [0, 1].
        params: Effect parameters.
        width: Output width.
        height: Output height.

    Returns:
        RGBA uint8 image (height, width, 4) with green 0 and alpha 255.

    Raises:
        InvalidInputShapeError: If buffer or grid sizes disagree with width/height.
    """
    depth = as_depth_grid(depth)
    gray = np.asarray(luminance, dtype=np.float64).reshape(-1)

    if depth.shape != (height, width):
        raise InvalidInputShapeError(
            f"Depth grid {depth.shape[1]}x{depth.shape[0]} does not match "
            f"output size {width}x{height}"
        )
    if gray.size != width * height:
        raise InvalidInputShapeError(
            f"Luminance buffer has {gray.size} values, expected {width * height}"
        )

    gray = gray.reshape(height, width)
    blend = logistic_blend(depth, params.threshold, params.depth_scale, params.feather)

    # 50% -> 1.0, 100% -> 2.0
    red_factor = clamp_percent(params.red_brightness) / 50.0
    blue_factor = clamp_percent(params.blue_brightness) / 50.0

    red_output = red_factor * gray * blend
    blue_output = blue_factor * gray * (1.0 - blend)

    output = np.zeros((height, width, 4), dtype=np.uint8)
    output[..., 0] = _to_channel(red_output)
    output[..., 2] = _to_channel(blue_output)
    output[..., 3] = 255

    logger.debug(f"Composed chromostereopsis image {width}x{height}")
    return output


def _to_channel(values: np.ndarray) -> np.ndarray:
    scaled = np.nan_to_num(values * 255.0, nan=0.0)
    # astype truncates toward zero
    return np.clip(scaled, 0.0, 255.0).astype(np.uint8)
