"""chromadepth - depth map processing and chromostereopsis rendering.

Turns a depth estimate and a source image into a red/blue depth illusion,
a grayscale depth map and a colormapped depth view.
"""

__version__ = "1.0.0"
