"""Chromostereopsis effect stages.

The full pipeline lives in ``chromadepth.effect.pipeline``.
"""

from .params import EffectParams, clamp_percent
from .tone import to_grayscale, apply_levels, apply_gamma, adjust_tone
from .composer import compose, logistic_blend

__all__ = [
    "EffectParams",
    "clamp_percent",
    "to_grayscale",
    "apply_levels",
    "apply_gamma",
    "adjust_tone",
    "compose",
    "logistic_blend",
]
