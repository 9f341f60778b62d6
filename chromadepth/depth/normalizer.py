"""Min/max normalization of depth values to [0, 1]."""

import numpy as np

from chromadepth.depth.grid import InvalidInputShapeError, as_depth_grid
from chromadepth.utils.logger import get_logger

logger = get_logger(__name__)


def normalize_min_max(grid) -> np.ndarray:
    """
    Rescale a depth grid to [0, 1] in place.

    NaN/Inf entries are ignored when searching min/max and replaced with 0.
    Finite entries become ``value - min`` and are divided by ``max - min``
    when that range is positive, so a flat grid becomes all zeros.

    Floating numpy arrays are modified in place and returned. Any other
    input is converted to a new float64 grid, which is returned.

    Args:
        grid: 2-D depth grid (H, W).

    Returns:
        The normalized grid.
    """
    if isinstance(grid, np.ndarray) and np.issubdtype(grid.dtype, np.floating):
        target = grid
        as_depth_grid(target)
    else:
        target = as_depth_grid(grid).copy()

    _normalize_in_place(target)
    return target


def normalize_array(array) -> np.ndarray:
    """
    Rescale a flat buffer to [0, 1] in place.

    Same rules as ``normalize_min_max``.

    Args:
        array: 1-D buffer of depth values.

    Returns:
        The normalized buffer.

    Raises:
        InvalidInputShapeError: If the buffer is not 1-D or is empty.
    """
    if isinstance(array, np.ndarray) and np.issubdtype(array.dtype, np.floating):
        target = array
    else:
        target = np.asarray(array, dtype=np.float64).copy()

    if target.ndim != 1 or target.size == 0:
        raise InvalidInputShapeError(
            f"Buffer must be 1-D and non-empty, got shape {target.shape}"
        )

    _normalize_in_place(target)
    return target


def _normalize_in_place(target: np.ndarray) -> None:
    # Scan in float64 whatever the storage precision
    values = target.astype(np.float64)
    finite = np.isfinite(values)

    if not finite.any():
        logger.debug("No finite depth values, zeroing grid")
        target[...] = 0.0
        return

    min_value = values[finite].min()
    shifted = np.where(finite, values - min_value, 0.0)
    value_range = shifted.max()

    if value_range > 0.0:
        shifted /= value_range
    else:
        logger.debug(f"Flat depth grid (min == max == {min_value:.6f}), skipping scale")

    target[...] = shifted
