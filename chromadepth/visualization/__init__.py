"""Depth visualization utilities."""

from .colormap import ColorMapKind, apply_colormap, endpoint_colors
from .renderer import render, create_color_bar, enhance_depth_map

__all__ = [
    "ColorMapKind",
    "apply_colormap",
    "endpoint_colors",
    "render",
    "create_color_bar",
    "enhance_depth_map",
]
