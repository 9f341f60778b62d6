"""Input preparation and output restoration for the depth model.

The model itself runs elsewhere. It takes a square, ImageNet-normalized NCHW
tensor made by scaling the source so its shorter side equals the input size
and center-cropping the longer side. ``PreprocessInfo`` records that mapping
so the model's output can be placed back into source-image coordinates.
"""

import math
from dataclasses import dataclass
from typing import Tuple

import cv2
import numpy as np

from chromadepth.depth.grid import InvalidInputShapeError, as_raster
from chromadepth.depth.normalizer import normalize_min_max
from chromadepth.depth.resampler import Interpolation, resize
from chromadepth.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_INPUT_SIZE = 518

# ImageNet normalization values
IMAGENET_MEAN = np.array([0.485, 0.456, 0.406], dtype=np.float32)
IMAGENET_STD = np.array([0.229, 0.224, 0.225], dtype=np.float32)


@dataclass(frozen=True)
class PreprocessInfo:
    """How a source image was mapped into model space."""

    original_width: int
    original_height: int
    scale: float
    crop_x: int
    crop_y: int

    @property
    def scaled_size(self) -> Tuple[int, int]:
        """(width, height) of the source after scaling, before cropping."""
        return (
            _round_half_up(self.original_width * self.scale),
            _round_half_up(self.original_height * self.scale),
        )


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_preprocess_info(width: int, height: int,
                            input_size: int = DEFAULT_INPUT_SIZE) -> PreprocessInfo:
    """
    Compute the scale and crop offsets for a source of the given size.

    Raises:
        InvalidInputShapeError: If any dimension is not positive.
    """
    if width <= 0 or height <= 0 or input_size <= 0:
        raise InvalidInputShapeError(
            f"Invalid sizes: source {width}x{height}, input {input_size}"
        )

    scale = input_size / min(width, height)
    scaled_width = _round_half_up(width * scale)
    scaled_height = _round_half_up(height * scale)

    return PreprocessInfo(
        original_width=width,
        original_height=height,
        scale=scale,
        crop_x=(scaled_width - input_size) // 2,
        crop_y=(scaled_height - input_size) // 2,
    )


def prepare_model_input(image, input_size: int = DEFAULT_INPUT_SIZE
                        ) -> Tuple[np.ndarray, PreprocessInfo]:
    """
    Build the model input tensor from an RGB image.

    Args:
        image: RGB or RGBA uint8 image (H, W, C).
        input_size: Side of the square model input.

    Returns:
        Tuple of (float32 tensor (1, 3, input_size, input_size), PreprocessInfo).
    """
    rgb = as_raster(image)
    if rgb.ndim == 2:
        rgb = np.stack([rgb, rgb, rgb], axis=-1)
    rgb = np.ascontiguousarray(rgb[..., :3])

    height, width = rgb.shape[:2]
    info = compute_preprocess_info(width, height, input_size)
    scaled_width, scaled_height = info.scaled_size

    scaled = cv2.resize(rgb, (scaled_width, scaled_height), interpolation=cv2.INTER_LINEAR)
    cropped = scaled[info.crop_y:info.crop_y + input_size,
                     info.crop_x:info.crop_x + input_size]

    normalized = (cropped.astype(np.float32) / 255.0 - IMAGENET_MEAN) / IMAGENET_STD
    tensor = np.ascontiguousarray(normalized.transpose(2, 0, 1)[np.newaxis])

    logger.debug(
        f"Preprocessed (crop): {width}x{height} -> {scaled_width}x{scaled_height} "
        f"(scale={info.scale:.3f}, crop={info.crop_x},{info.crop_y})"
    )
    return tensor, info


def restore_model_output(
    raw_output,
    info: PreprocessInfo,
    interpolation: Interpolation = Interpolation.BILINEAR_EXACT,
) -> np.ndarray:
    """
    Map raw model output back to a normalized depth grid at source size.

    The output patch is pasted into a zero canvas of the scaled source size
    at the crop offsets, resized to the original size and normalized.

    Args:
        raw_output: Model output shaped (H, W), (1, H, W) or (1, 1, H, W).
        info: Mapping returned by ``prepare_model_input``.
        interpolation: Resampling mode for the final resize.

    Returns:
        float64 depth grid (original_height, original_width) in [0, 1].

    Raises:
        InvalidInputShapeError: If the output shape is unexpected or the patch
            does not fit the canvas.
    """
    raw = np.asarray(raw_output, dtype=np.float64)
    if raw.ndim == 4 and raw.shape[:2] == (1, 1):
        raw = raw[0, 0]
    elif raw.ndim == 3 and raw.shape[0] == 1:
        raw = raw[0]
    elif raw.ndim != 2:
        raise InvalidInputShapeError(f"Unexpected depth tensor shape: {list(raw.shape)}")

    height, width = raw.shape
    scaled_width, scaled_height = info.scaled_size
    if (info.crop_x < 0 or info.crop_y < 0 or
            info.crop_x + width > scaled_width or info.crop_y + height > scaled_height):
        raise InvalidInputShapeError(
            f"Depth patch {width}x{height} at ({info.crop_x},{info.crop_y}) "
            f"does not fit canvas {scaled_width}x{scaled_height}"
        )

    canvas = np.zeros((scaled_height, scaled_width), dtype=np.float64)
    canvas[info.crop_y:info.crop_y + height, info.crop_x:info.crop_x + width] = raw

    restored = resize(canvas, info.original_width, info.original_height, interpolation)
    normalize_min_max(restored)
    logger.debug(
        f"Restored depth {width}x{height} -> {info.original_width}x{info.original_height}"
    )
    return restored
