"""Edge-aware smoothing of depth grids.

``smooth`` is the bilateral-style filter of the effect pipeline: 5x5 window,
one sigma shared by the spatial and range terms, values weighted on a 0-255
scale. Accumulation runs in a fixed dy-major order. Range weights come from
vectorized ``np.exp``, which can differ from scalar ``math.exp`` in the last
bit, so results agree with a per-pixel loop to within a few ulp.

``bilateral_filter`` and ``gaussian_blur`` are general-purpose OpenCV
filters for preprocessing raw depth grids; they are not used on the effect
path.
"""

import math

import cv2
import numpy as np

from chromadepth.depth.grid import as_depth_grid
from chromadepth.effect.params import clamp_percent
from chromadepth.utils.logger import get_logger

logger = get_logger(__name__)

KERNEL_DIAMETER = 5


def smooth(grid, strength_percent: float) -> np.ndarray:
    """
    Apply edge-preserving smoothing to a normalized depth grid.

    Args:
        grid: 2-D depth grid in [0, 1] (H, W).
        strength_percent: Smoothing strength, 0-100. 0 disables smoothing.

    Returns:
        New smoothed grid, or the input grid unchanged when strength is 0.
    """
    depth = as_depth_grid(grid)
    smoothing_radius = clamp_percent(strength_percent) / 10.0
    if smoothing_radius <= 0.0:
        return depth

    sigma = max(smoothing_radius * 10.0, 1.0)
    radius = KERNEL_DIAMETER // 2
    height, width = depth.shape
    two_sigma_sq = 2.0 * sigma * sigma

    scaled = depth * 255.0
    # Edge padding is the same as clamping neighbor indices
    padded = np.pad(scaled, radius, mode="edge")

    weight_sum = np.zeros_like(scaled)
    value_sum = np.zeros_like(scaled)

    for dy in range(-radius, radius + 1):
        for dx in range(-radius, radius + 1):
            neighbor = padded[radius + dy:radius + dy + height,
                              radius + dx:radius + dx + width]
            spatial = math.exp(-(dy * dy + dx * dx) / two_sigma_sq)
            diff = neighbor - scaled
            weight = spatial * np.exp(-(diff * diff) / two_sigma_sq)
            weight_sum += weight
            value_sum += neighbor * weight

    # NaN weights fail the positive test too and fall back to the center value
    degenerate = ~(weight_sum > 0.0)
    with np.errstate(divide="ignore", invalid="ignore"):
        result = (value_sum / weight_sum) / 255.0

    if degenerate.any():
        logger.debug(f"Zero or NaN filter weight at {int(degenerate.sum())} pixels, keeping center")
        result = np.where(degenerate, depth, result)

    logger.debug(f"Smoothed depth {width}x{height} (sigma={sigma:.1f})")
    return result


def bilateral_filter(grid, spatial_sigma: float, intensity_sigma: float) -> np.ndarray:
    """
    Bilateral filter with independent spatial and intensity sigmas.

    Works on the grid's own value scale; the window radius is
    ``ceil(3 * spatial_sigma)`` and borders are replicated.

    Args:
        grid: 2-D depth grid (H, W).
        spatial_sigma: Spatial Gaussian sigma in pixels.
        intensity_sigma: Range Gaussian sigma in depth units.

    Returns:
        New filtered float64 grid.
    """
    depth = as_depth_grid(grid)
    if spatial_sigma <= 0 or intensity_sigma <= 0:
        raise ValueError("spatial_sigma and intensity_sigma must be positive")

    radius = int(math.ceil(3 * spatial_sigma))
    filtered = cv2.bilateralFilter(
        depth.astype(np.float32),
        d=2 * radius + 1,
        sigmaColor=float(intensity_sigma),
        sigmaSpace=float(spatial_sigma),
        borderType=cv2.BORDER_REPLICATE,
    )
    return filtered.astype(np.float64)


def gaussian_blur(grid, sigma: float) -> np.ndarray:
    """
    Separable Gaussian blur with replicated borders.

    Args:
        grid: 2-D depth grid (H, W).
        sigma: Gaussian sigma; kernel size is ``ceil(6 * sigma)`` forced odd.

    Returns:
        New blurred float64 grid.
    """
    depth = as_depth_grid(grid)
    if sigma <= 0:
        raise ValueError("sigma must be positive")

    kernel_size = int(math.ceil(6 * sigma))
    if kernel_size % 2 == 0:
        kernel_size += 1

    blurred = cv2.GaussianBlur(
        depth,
        (kernel_size, kernel_size),
        sigmaX=sigma,
        sigmaY=sigma,
        borderType=cv2.BORDER_REPLICATE,
    )
    logger.debug(f"Applied Gaussian blur with sigma={sigma:.2f}, kernel size={kernel_size}")
    return blurred

