"""Depth grid validation, reshaping and statistics.

A depth grid is a 2-D float64 numpy array of shape (height, width). The
helpers here turn caller input into that form or fail loudly.
"""

from typing import Any, Dict

import numpy as np

from chromadepth.utils.logger import get_logger

logger = get_logger(__name__)


class PipelineError(Exception):
    """Base exception for depth pipeline errors."""
    pass


class InvalidInputShapeError(PipelineError, ValueError):
    """Exception raised for empty, ragged or mismatched grids and rasters."""
    pass


class UpstreamUnavailableError(PipelineError):
    """Exception raised when a depth grid or source raster is missing."""
    pass


def as_depth_grid(grid: Any, name: str = "depth grid") -> np.ndarray:
    """
    Validate input and return it as a float64 depth grid.

    float64 arrays are returned as-is (no copy); anything else is converted.

    Args:
        grid: 2-D array-like of depth values.
        name: Name used in error messages.

    Returns:
        2-D float64 array (H, W).

    Raises:
        UpstreamUnavailableError: If grid is None.
        InvalidInputShapeError: If grid is ragged, not 2-D or empty.
    """
    if grid is None:
        raise UpstreamUnavailableError(f"{name} is not available")

    try:
        array = np.asarray(grid, dtype=np.float64)
    except (ValueError, TypeError) as e:
        raise InvalidInputShapeError(f"{name} is ragged or not numeric: {e}") from e

    if array.ndim != 2:
        raise InvalidInputShapeError(
            f"{name} must be 2-D, got shape {array.shape}"
        )

    if array.shape[0] == 0 or array.shape[1] == 0:
        raise InvalidInputShapeError(f"{name} has empty dimensions {array.shape}")

    return array


def as_raster(raster: Any, name: str = "source raster") -> np.ndarray:
    """
    Validate a raster image.

    Args:
        raster: Array-like of shape (H, W), (H, W, 3) or (H, W, 4).
        name: Name used in error messages.

    Returns:
        The raster as a numpy array.

    Raises:
        UpstreamUnavailableError: If raster is None.
        InvalidInputShapeError: If the raster shape is unsupported or empty.
    """
    if raster is None:
        raise UpstreamUnavailableError(f"{name} is not available")

    try:
        array = np.asarray(raster)
    except ValueError as e:
        raise InvalidInputShapeError(f"{name} is ragged: {e}") from e

    if array.dtype == object:
        raise InvalidInputShapeError(f"{name} is ragged or not numeric")

    if array.ndim not in (2, 3) or (array.ndim == 3 and array.shape[2] not in (3, 4)):
        raise InvalidInputShapeError(
            f"{name} must be (H, W), (H, W, 3) or (H, W, 4), got {array.shape}"
        )

    if array.shape[0] == 0 or array.shape[1] == 0:
        raise InvalidInputShapeError(f"{name} has empty dimensions {array.shape}")

    return array


def reshape_to_2d(data: Any, height: int, width: int) -> np.ndarray:
    """
    Reshape a flat row-major buffer into a (height, width) grid.

    Raises:
        InvalidInputShapeError: If the buffer length does not match.
    """
    flat = np.asarray(data, dtype=np.float64).ravel()
    if height <= 0 or width <= 0 or flat.size != height * width:
        raise InvalidInputShapeError(
            f"Data length {flat.size} doesn't match dimensions {height}x{width}"
        )
    return flat.reshape(height, width)


def grid_stats(grid: np.ndarray, name: str = "depth") -> Dict[str, float]:
    """
    Compute statistics over the finite values of a grid and log them.

    Args:
        grid: Array of values, NaN/Inf are ignored.
        name: Label used in the log line.

    Returns:
        Dict with min, max, mean, std (sample) and count of finite values.
    """
    values = np.asarray(grid, dtype=np.float64)
    finite = values[np.isfinite(values)]

    if finite.size == 0:
        stats = {"min": 0.0, "max": 0.0, "mean": 0.0, "std": 0.0, "count": 0}
    else:
        stats = {
            "min": float(finite.min()),
            "max": float(finite.max()),
            "mean": float(finite.mean()),
            "std": float(finite.std(ddof=1)) if finite.size > 1 else 0.0,
            "count": int(finite.size),
        }

    logger.debug(
        f"{name} stats - Shape: {list(values.shape)}, Min: {stats['min']:.3f}, "
        f"Max: {stats['max']:.3f}, Mean: {stats['mean']:.3f}"
    )
    return stats
