"""Effect parameters for the chromostereopsis pipeline."""

import math
from dataclasses import dataclass, replace


def clamp_percent(value: float) -> float:
    """Clamp a percentage knob into [0, 100]. NaN maps to 0."""
    value = float(value)
    if math.isnan(value):
        return 0.0
    return max(0.0, min(100.0, value))


@dataclass(frozen=True)
class EffectParams:
    """Tuning knobs of the effect, all percentages in [0, 100].

    Out-of-range values are accepted; each stage clamps the fields it uses.
    """

    threshold: float = 50.0
    depth_scale: float = 50.0
    feather: float = 10.0
    red_brightness: float = 50.0
    blue_brightness: float = 50.0
    gamma: float = 50.0
    black_level: float = 0.0
    white_level: float = 100.0
    smoothing: float = 0.0

    def with_changes(self, **changes) -> "EffectParams":
        """Return a copy with some fields replaced."""
        return replace(self, **changes)
