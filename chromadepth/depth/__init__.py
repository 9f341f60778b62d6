"""Depth grid processing: validation, resampling, normalization, smoothing.

Also holds the input/output mapping for the external depth model.
"""

from .grid import (
    PipelineError,
    InvalidInputShapeError,
    UpstreamUnavailableError,
    as_depth_grid,
    reshape_to_2d,
    grid_stats,
)
from .resampler import Interpolation, resize, resize_flat
from .normalizer import normalize_min_max, normalize_array
from .smoother import smooth, bilateral_filter, gaussian_blur
from .model_io import PreprocessInfo, prepare_model_input, restore_model_output

__all__ = [
    "PipelineError",
    "InvalidInputShapeError",
    "UpstreamUnavailableError",
    "as_depth_grid",
    "reshape_to_2d",
    "grid_stats",
    "Interpolation",
    "resize",
    "resize_flat",
    "normalize_min_max",
    "normalize_array",
    "smooth",
    "bilateral_filter",
    "gaussian_blur",
    "PreprocessInfo",
    "prepare_model_input",
    "restore_model_output",
]
