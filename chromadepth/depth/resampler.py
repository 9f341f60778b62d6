"""Depth grid resampling.

Three interpolation modes share one entry point, ``resize``:

- BILINEAR_EXACT: pixel-center convention ``(x + 0.5) * scale - 0.5`` with the
  source coordinate clamped before interpolation. Operation order is fixed
  so float64 results are reproducible bit for bit.
- BICUBIC: Catmull-Rom cubic over a 4x4 neighborhood, corner-aligned
  coordinates ``x * scale`` (no half-pixel offset).
- NEAREST: truncated corner-aligned coordinates, used for colormapped previews.

All modes take ``scale = source / target`` and clamp neighbor indices into
``[0, dim - 1]``, so 1x1 sources are valid.
"""

from enum import Enum

import numpy as np

from chromadepth.depth.grid import InvalidInputShapeError, as_depth_grid
from chromadepth.utils.logger import get_logger

logger = get_logger(__name__)


class Interpolation(Enum):
    """Resampling mode."""

    BILINEAR_EXACT = "bilinear_exact"
    BICUBIC = "bicubic"
    NEAREST = "nearest"


def resize(
    grid,
    target_width: int,
    target_height: int,
    interpolation: Interpolation = Interpolation.BILINEAR_EXACT,
) -> np.ndarray:
    """
    Resize a depth grid to (target_height, target_width).

    If the grid already has the target size it is returned unchanged.

    Args:
        grid: 2-D depth grid (H, W).
        target_width: Output width in pixels.
        target_height: Output height in pixels.
        interpolation: Resampling mode.

    Returns:
        New float64 grid (target_height, target_width), or the input grid.

    Raises:
        InvalidInputShapeError: If the grid or target size is invalid.
    """
    depth = as_depth_grid(grid)
    if target_width <= 0 or target_height <= 0:
        raise InvalidInputShapeError(
            f"Target size must be positive, got {target_width}x{target_height}"
        )

    source_height, source_width = depth.shape
    if source_width == target_width and source_height == target_height:
        return depth

    if interpolation == Interpolation.BILINEAR_EXACT:
        resized = _resize_bilinear_exact(depth, target_width, target_height)
    elif interpolation == Interpolation.BICUBIC:
        resized = _resize_bicubic(depth, target_width, target_height)
    elif interpolation == Interpolation.NEAREST:
        resized = _resize_nearest(depth, target_width, target_height)
    else:
        raise ValueError(f"Unknown interpolation: {interpolation}")

    logger.debug(
        f"Resized depth ({interpolation.value}): {source_width}x{source_height} "
        f"-> {target_width}x{target_height}"
    )
    return resized


def resize_flat(grid, target_width: int, target_height: int) -> np.ndarray:
    """
    Bicubic resize returning a flat row-major buffer.

    Returns:
        1-D float64 array of length target_width * target_height.
    """
    resized = resize(grid, target_width, target_height, Interpolation.BICUBIC)
    return np.ascontiguousarray(resized).reshape(-1)


def _resize_bilinear_exact(
    depth: np.ndarray, target_width: int, target_height: int
) -> np.ndarray:
    source_height, source_width = depth.shape
    scale_x = source_width / target_width
    scale_y = source_height / target_height

    source_x = (np.arange(target_width, dtype=np.float64) + 0.5) * scale_x - 0.5
    source_y = (np.arange(target_height, dtype=np.float64) + 0.5) * scale_y - 0.5

    # Clamp before interpolating
    source_x = np.maximum(0.0, np.minimum(source_width - 1.0, source_x))
    source_y = np.maximum(0.0, np.minimum(source_height - 1.0, source_y))

    x1 = np.floor(source_x).astype(np.intp)
    y1 = np.floor(source_y).astype(np.intp)
    x2 = np.minimum(x1 + 1, source_width - 1)
    y2 = np.minimum(y1 + 1, source_height - 1)

    dx = (source_x - x1)[np.newaxis, :]
    dy = (source_y - y1)[:, np.newaxis]

    v11 = depth[y1[:, None], x1[None, :]]
    v12 = depth[y1[:, None], x2[None, :]]
    v21 = depth[y2[:, None], x1[None, :]]
    v22 = depth[y2[:, None], x2[None, :]]

    # Term order is fixed; changing it changes the last bit
    return (v11 * (1.0 - dx) * (1.0 - dy) +
            v12 * dx * (1.0 - dy) +
            v21 * (1.0 - dx) * dy +
            v22 * dx * dy)


def _cubic(p0, p1, p2, p3, t):
    return p1 + 0.5 * t * (p2 - p0 + t * (2.0 * p0 - 5.0 * p1 + 4.0 * p2 - p3 +
                                          t * (3.0 * (p1 - p2) + p3 - p0)))


def _resize_bicubic(
    depth: np.ndarray, target_width: int, target_height: int
) -> np.ndarray:
    source_height, source_width = depth.shape
    scale_x = source_width / target_width
    scale_y = source_height / target_height

    source_x = np.arange(target_width, dtype=np.float64) * scale_x
    source_y = np.arange(target_height, dtype=np.float64) * scale_y

    x1 = np.floor(source_x).astype(np.intp)
    y1 = np.floor(source_y).astype(np.intp)
    tx = (source_x - x1)[np.newaxis, :]
    ty = source_y - y1

    # Interpolate in x for each of the four neighborhood rows, then in y
    rows = []
    for j in range(4):
        py = np.clip(y1 - 1 + j, 0, source_height - 1)
        taps = [
            depth[py[:, None], np.clip(x1 - 1 + i, 0, source_width - 1)[None, :]]
            for i in range(4)
        ]
        rows.append(_cubic(taps[0], taps[1], taps[2], taps[3], tx))

    return _cubic(rows[0], rows[1], rows[2], rows[3], ty[:, np.newaxis])


def _resize_nearest(
    depth: np.ndarray, target_width: int, target_height: int
) -> np.ndarray:
    source_height, source_width = depth.shape
    scale_x = source_width / target_width
    scale_y = source_height / target_height

    map_x = np.minimum(
        (np.arange(target_width) * scale_x).astype(np.intp), source_width - 1
    )
    map_y = np.minimum(
        (np.arange(target_height) * scale_y).astype(np.intp), source_height - 1
    )
    return depth[map_y[:, None], map_x[None, :]]
