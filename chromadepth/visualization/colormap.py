"""Colormaps for depth visualization.

Perceptual maps are piecewise-linear approximations with four segments split
at 0.25, 0.5 and 0.75. Each segment stores a start color and a per-segment
delta, so ``color = start + delta * t`` with ``t`` in [0, 1] inside the
segment.
"""

from enum import Enum

import numpy as np


class ColorMapKind(Enum):
    """Available depth colormaps."""

    GRAYSCALE = "grayscale"
    JET = "jet"
    VIRIDIS = "viridis"
    PLASMA = "plasma"
    INFERNO = "inferno"

    @classmethod
    def from_name(cls, name: str) -> "ColorMapKind":
        """
        Look up a colormap by case-insensitive name.

        Raises:
            ValueError: If the name is unknown.
        """
        try:
            return cls(name.strip().lower())
        except ValueError:
            available = [kind.value for kind in cls]
            raise ValueError(f"Unknown colormap: {name}. Available: {available}") from None


# (start RGB, delta RGB) per segment, channels in [0, 1]
SEGMENT_TABLES = {
    # blue -> cyan -> green -> yellow -> red
    ColorMapKind.JET: np.array([
        [[0.0, 0.0, 1.0], [0.0, 1.0, 0.0]],
        [[0.0, 1.0, 1.0], [0.0, 0.0, -1.0]],
        [[0.0, 1.0, 0.0], [1.0, 0.0, 0.0]],
        [[1.0, 1.0, 0.0], [0.0, -1.0, 0.0]],
    ]),
    ColorMapKind.VIRIDIS: np.array([
        [[0.004, 0.005, 0.329], [0.267, 0.222, 0.344]],
        [[0.267, 0.227, 0.673], [0.097, 0.319, 0.047]],
        [[0.364, 0.546, 0.720], [0.373, 0.290, -0.204]],
        [[0.737, 0.836, 0.516], [0.216, 0.122, -0.207]],
    ]),
    ColorMapKind.PLASMA: np.array([
        [[0.050, 0.029, 0.527], [0.298, 0.076, 0.135]],
        [[0.348, 0.105, 0.662], [0.252, 0.163, 0.043]],
        [[0.600, 0.268, 0.705], [0.239, 0.329, -0.149]],
        [[0.839, 0.597, 0.556], [0.101, 0.312, -0.168]],
    ]),
    ColorMapKind.INFERNO: np.array([
        [[0.001, 0.004, 0.013], [0.258, 0.024, 0.100]],
        [[0.259, 0.028, 0.113], [0.340, 0.121, 0.113]],
        [[0.599, 0.149, 0.226], [0.258, 0.364, -0.019]],
        [[0.857, 0.513, 0.207], [0.119, 0.415, 0.571]],
    ]),
}

SEGMENT_WIDTH = 0.25


def grayscale_levels(values) -> np.ndarray:
    """
    Map [0, 1] values to 0-255 gray levels, rounding half up.

    Returns:
        uint8 array with the shape of ``values``.
    """
    scaled = np.clip(np.asarray(values, dtype=np.float64) * 255.0, 0.0, 255.0)
    return np.floor(scaled + 0.5).astype(np.uint8)


def apply_colormap(values, kind: ColorMapKind = ColorMapKind.GRAYSCALE) -> np.ndarray:
    """
    Apply a colormap to depth values.

    Values are clamped to [0, 1] first. Perceptual maps truncate channel
    values to integers; grayscale rounds half up.

    Args:
        values: Depth values of any shape.
        kind: Colormap to apply.

    Returns:
        uint8 RGB array of shape ``values.shape + (3,)``.
    """
    values = np.clip(np.asarray(values, dtype=np.float64), 0.0, 1.0)

    if kind == ColorMapKind.GRAYSCALE:
        gray = grayscale_levels(values)
        return np.stack([gray, gray, gray], axis=-1)

    table = SEGMENT_TABLES.get(kind)
    if table is None:
        raise ValueError(f"Unknown colormap: {kind}")

    # v < 0.25 -> 0, v < 0.5 -> 1, v < 0.75 -> 2, otherwise 3
    segment = np.minimum((values / SEGMENT_WIDTH).astype(np.intp), 3)
    t = (values - segment * SEGMENT_WIDTH) / SEGMENT_WIDTH

    start = table[segment, 0]
    delta = table[segment, 1]
    rgb = delta * t[..., np.newaxis] + start

    return np.clip(rgb * 255.0, 0.0, 255.0).astype(np.uint8)


def endpoint_colors(kind: ColorMapKind) -> np.ndarray:
    """
    Colors of a map at 0.0 and 1.0 as a (2, 3) uint8 array.

    Read straight from the segment table, without interpolation.
    """
    if kind == ColorMapKind.GRAYSCALE:
        return np.array([[0, 0, 0], [255, 255, 255]], dtype=np.uint8)

    table = SEGMENT_TABLES[kind]
    first = table[0, 0]
    last = table[3, 0] + table[3, 1]
    return np.clip(np.stack([first, last]) * 255.0, 0.0, 255.0).astype(np.uint8)
