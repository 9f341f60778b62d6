"""Depth map rendering for human inspection.

Independent of the effect pipeline. Grayscale output uses the exact bilinear
resize and rounds to the nearest gray level; perceptual colormaps sample the
grid with nearest-neighbor lookup and truncate.
"""

import numpy as np

from chromadepth.depth.grid import InvalidInputShapeError, as_depth_grid, as_raster
from chromadepth.depth.resampler import Interpolation, resize
from chromadepth.utils.logger import get_logger
from chromadepth.visualization.colormap import ColorMapKind, apply_colormap, grayscale_levels

logger = get_logger(__name__)


def _to_rgba(rgb: np.ndarray) -> np.ndarray:
    height, width = rgb.shape[:2]
    rgba = np.empty((height, width, 4), dtype=np.uint8)
    rgba[..., :3] = rgb
    rgba[..., 3] = 255
    return rgba


def render(
    grid,
    target_width: int,
    target_height: int,
    kind: ColorMapKind = ColorMapKind.GRAYSCALE,
) -> np.ndarray:
    """
    Render a normalized depth grid as an RGBA image.

    Args:
        grid: Depth grid (H, W) in [0, 1].
        target_width: Output width.
        target_height: Output height.
        kind: Colormap, grayscale by default.

    Returns:
        RGBA uint8 image (target_height, target_width, 4).
    """
    depth = as_depth_grid(grid)

    if kind == ColorMapKind.GRAYSCALE:
        resized = resize(depth, target_width, target_height, Interpolation.BILINEAR_EXACT)
        gray = grayscale_levels(resized)
        rgb = np.stack([gray, gray, gray], axis=-1)
    else:
        resized = resize(depth, target_width, target_height, Interpolation.NEAREST)
        rgb = apply_colormap(resized, kind)

    logger.debug(f"Rendered depth map ({kind.value}): {target_width}x{target_height}")
    return _to_rgba(rgb)


def create_color_bar(
    width: int,
    height: int,
    kind: ColorMapKind = ColorMapKind.GRAYSCALE,
) -> np.ndarray:
    """
    Create a vertical legend sweeping 0 (top) to 1 (bottom).

    Row values are ``y / (height - 1)`` in single precision. The grayscale
    bar truncates to gray levels, unlike ``render``, which rounds.

    Args:
        width: Bar width in pixels.
        height: Bar height in pixels.
        kind: Colormap to sweep.

    Returns:
        RGBA uint8 image (height, width, 4).
    """
    if width <= 0 or height <= 0:
        raise InvalidInputShapeError(f"Color bar size must be positive, got {width}x{height}")

    if height == 1:
        values = np.zeros(1, dtype=np.float32)
    else:
        values = np.arange(height, dtype=np.float32) / np.float32(height - 1)

    if kind == ColorMapKind.GRAYSCALE:
        gray = np.clip(values * np.float32(255.0), 0, 255).astype(np.uint8)
        row_colors = np.stack([gray, gray, gray], axis=-1)
    else:
        row_colors = apply_colormap(values, kind)
    rgb = np.repeat(row_colors[:, np.newaxis, :], width, axis=1)
    return _to_rgba(rgb)


def enhance_depth_map(raster, contrast: float, brightness: float) -> np.ndarray:
    """
    Adjust contrast around mid-gray and add brightness.

    ``clip(trunc((c - 128) * contrast + 128 + brightness), 0, 255)`` per RGB
    channel; alpha is set opaque.

    Args:
        raster: RGB or RGBA uint8 image.
        contrast: Contrast multiplier (1.0 = unchanged).
        brightness: Offset added after contrast, in gray levels.

    Returns:
        New RGBA uint8 image.
    """
    image = as_raster(raster, name="depth raster")
    if image.ndim == 2:
        image = np.stack([image, image, image], axis=-1)

    channels = image[..., :3].astype(np.float64)
    adjusted = np.trunc((channels - 128.0) * contrast + 128.0 + brightness)
    rgb = np.clip(adjusted, 0, 255).astype(np.uint8)
    return _to_rgba(rgb)
