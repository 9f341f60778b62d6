"""Tone adjustment of the source image: grayscale, levels and gamma.

Always applied in that order. All buffers are flat float64 arrays with one
value per pixel in row-major order.
"""

import numpy as np

from chromadepth.depth.grid import as_raster
from chromadepth.effect.params import clamp_percent

# ITU-R BT.601 luma weights
LUMA_R = 0.299
LUMA_G = 0.587
LUMA_B = 0.114

MIN_LEVEL_RANGE = 1e-10


def to_grayscale(raster) -> np.ndarray:
    """
    Convert an RGB(A) raster to a luminance buffer in 0-255.

    Single-channel rasters are already luminance and are only flattened.

    Args:
        raster: Image (H, W), (H, W, 3) or (H, W, 4); alpha is ignored.

    Returns:
        Flat float64 buffer of length H * W.
    """
    image = as_raster(raster)
    if image.ndim == 2:
        return image.astype(np.float64).reshape(-1)

    r = image[..., 0].astype(np.float64)
    g = image[..., 1].astype(np.float64)
    b = image[..., 2].astype(np.float64)

    gray = LUMA_R * r + LUMA_G * g + LUMA_B * b
    return gray.reshape(-1)


def apply_levels(buffer: np.ndarray, black_level: float, white_level: float) -> np.ndarray:
    """
    Remap black/white levels and clamp to [0, 1], in place.

    Args:
        buffer: Luminance buffer in 0-255 (float64).
        black_level: Black point, percent of 255.
        white_level: White point, percent of 255.

    Returns:
        The same buffer, now in [0, 1].
    """
    black = clamp_percent(black_level) * 2.55
    white = clamp_percent(white_level) * 2.55
    # white <= black collapses to a hard threshold at black
    denominator = max(white - black, MIN_LEVEL_RANGE)

    np.subtract(buffer, black, out=buffer)
    np.divide(buffer, denominator, out=buffer)
    np.clip(buffer, 0.0, 1.0, out=buffer)
    return buffer


def gamma_exponent(gamma: float) -> float:
    """Map a 0-100 gamma knob to an exponent in [0.1, 3.0]."""
    return 0.1 + (clamp_percent(gamma) / 100.0) * 2.9


def apply_gamma(buffer: np.ndarray, gamma: float) -> np.ndarray:
    """
    Raise every value of a [0, 1] buffer to the mapped gamma exponent, in place.

    Returns:
        The same buffer.
    """
    np.power(buffer, gamma_exponent(gamma), out=buffer)
    return buffer


def adjust_tone(raster, black_level: float, white_level: float, gamma: float) -> np.ndarray:
    """Grayscale, levels and gamma in one call. Returns a new [0, 1] buffer."""
    gray = to_grayscale(raster)
    apply_levels(gray, black_level, white_level)
    apply_gamma(gray, gamma)
    return gray
