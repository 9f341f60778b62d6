"""Chromostereopsis effect pipeline.

Depth: resize (bilinear exact) -> smooth.
Source: grayscale -> levels -> gamma.
Both feed the composer, which produces the effect image.

``run_pipeline`` also renders the grayscale and colormapped depth views.
Every call is independent: nothing is cached between invocations.
"""

import time
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

import numpy as np

from chromadepth.depth.grid import as_depth_grid, as_raster
from chromadepth.depth.resampler import Interpolation, resize
from chromadepth.depth.smoother import smooth
from chromadepth.effect.composer import compose
from chromadepth.effect.params import EffectParams
from chromadepth.effect.tone import adjust_tone
from chromadepth.utils.logger import get_logger
from chromadepth.utils.timing import StageTimer
from chromadepth.visualization.colormap import ColorMapKind
from chromadepth.visualization.renderer import render

logger = get_logger(__name__)


@dataclass
class PipelineResult:
    """Outputs of one pipeline run."""

    effect: np.ndarray  # RGBA (H, W, 4) chromostereopsis image
    depth_gray: np.ndarray  # RGBA (H, W, 4) grayscale depth
    depth_color: np.ndarray  # RGBA (H, W, 4) colormapped depth
    depth: np.ndarray  # Resized, smoothed depth grid (H, W)
    computation_time_ms: float
    stage_times_ms: Dict[str, float] = field(default_factory=dict)


def apply_effect(
    source,
    depth,
    params: Optional[EffectParams] = None,
    timer: Optional[StageTimer] = None,
) -> np.ndarray:
    """
    Apply the chromostereopsis effect to a source image.

    Args:
        source: RGB(A) source image (H, W, C).
        depth: Normalized depth grid of any size; resized to the source size.
        params: Effect parameters, defaults if None.
        timer: Optional timer that receives per-stage durations.

    Returns:
        RGBA uint8 image (H, W, 4).

    Raises:
        UpstreamUnavailableError: If source or depth is None.
        InvalidInputShapeError: If either input has an invalid shape.
    """
    image = as_raster(source)
    depth_grid = as_depth_grid(depth)
    params = params or EffectParams()
    timer = timer or StageTimer()

    output, _ = _run_effect(image, depth_grid, params, timer)
    logger.debug(f"Applied chromostereopsis effect ({timer.summary()})")
    return output


def _run_effect(image: np.ndarray, depth_grid: np.ndarray, params: EffectParams,
                timer: StageTimer) -> Tuple[np.ndarray, np.ndarray]:
    height, width = image.shape[:2]

    with timer.stage("resize"):
        resized = resize(depth_grid, width, height, Interpolation.BILINEAR_EXACT)

    with timer.stage("smooth"):
        smoothed = smooth(resized, params.smoothing)

    with timer.stage("tone"):
        luminance = adjust_tone(image, params.black_level, params.white_level, params.gamma)

    with timer.stage("compose"):
        output = compose(luminance, smoothed, params, width, height)

    return output, smoothed


def run_pipeline(
    source,
    depth,
    params: Optional[EffectParams] = None,
    colormap: ColorMapKind = ColorMapKind.GRAYSCALE,
) -> PipelineResult:
    """
    Produce the effect image and both depth views for one source image.

    Args:
        source: RGB(A) source image (H, W, C).
        depth: Normalized depth grid of any size.
        params: Effect parameters, defaults if None.
        colormap: Colormap of the colored depth view.

    Returns:
        PipelineResult with all rasters at source resolution.
    """
    start_time = time.time()
    timer = StageTimer()

    image = as_raster(source)
    depth_grid = as_depth_grid(depth)
    params = params or EffectParams()
    height, width = image.shape[:2]

    effect, smoothed = _run_effect(image, depth_grid, params, timer)

    with timer.stage("render"):
        depth_gray = render(depth_grid, width, height, ColorMapKind.GRAYSCALE)
        if colormap == ColorMapKind.GRAYSCALE:
            depth_color = depth_gray.copy()
        else:
            depth_color = render(depth_grid, width, height, colormap)

    computation_time_ms = (time.time() - start_time) * 1000
    logger.debug(f"Pipeline finished in {computation_time_ms:.1f}ms ({timer.summary()})")

    return PipelineResult(
        effect=effect,
        depth_gray=depth_gray,
        depth_color=depth_color,
        depth=smoothed,
        computation_time_ms=computation_time_ms,
        stage_times_ms=dict(timer.last_times),
    )
