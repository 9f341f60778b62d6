"""
chromadepth - Chromostereopsis rendering from a depth map

Reads a source image and a raw depth grid (.npy), then writes the red/blue
depth illusion, a grayscale depth map and a colormapped depth view.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import numpy as np
import cv2

from chromadepth.config.settings import Settings, get_settings
from chromadepth.depth.grid import PipelineError, UpstreamUnavailableError, grid_stats
from chromadepth.depth.model_io import (
    compute_preprocess_info,
    prepare_model_input,
    restore_model_output,
)
from chromadepth.depth.normalizer import normalize_min_max
from chromadepth.effect.pipeline import PipelineResult, run_pipeline
from chromadepth.utils.logger import setup_logger, get_logger
from chromadepth.utils.timing import timestamp_ms
from chromadepth.visualization.colormap import ColorMapKind
from chromadepth.visualization.renderer import create_color_bar

EFFECT_OPTIONS = [
    "threshold",
    "depth_scale",
    "feather",
    "red_brightness",
    "blue_brightness",
    "gamma",
    "black_level",
    "white_level",
    "smoothing",
]


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="chromadepth - Chromostereopsis rendering from a depth map"
    )
    parser.add_argument('image', help='Source image path')
    parser.add_argument(
        'depth',
        nargs='?',
        help='Raw depth grid (.npy). Omit together with --dump-model-input'
    )
    parser.add_argument('--config', type=Path, help='Path to config.yaml')
    parser.add_argument('--output-dir', type=Path, help='Directory for output images')
    parser.add_argument(
        '--colormap',
        choices=[kind.value for kind in ColorMapKind],
        help='Colormap for the colored depth view'
    )
    parser.add_argument(
        '--model-space',
        action='store_true',
        help='Depth grid is raw model output for the center-cropped model input'
    )
    parser.add_argument(
        '--dump-model-input',
        type=Path,
        help='Write the model input tensor (.npy) for external inference'
    )
    parser.add_argument(
        '--color-bar',
        action='store_true',
        help='Also write a color bar legend'
    )
    for option in EFFECT_OPTIONS:
        parser.add_argument(
            f"--{option.replace('_', '-')}",
            type=float,
            dest=option,
            help=f"Effect {option.replace('_', ' ')} (0-100)"
        )
    return parser.parse_args(argv)


def load_image(path: Path) -> np.ndarray:
    """
    Load an image file as RGB.

    Raises:
        UpstreamUnavailableError: If the file cannot be read.
    """
    bgr = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if bgr is None:
        raise UpstreamUnavailableError(f"Could not read image: {path}")
    return cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB)


def load_depth(path: Path) -> np.ndarray:
    """
    Load a raw depth grid from a .npy file.

    Raises:
        UpstreamUnavailableError: If the file is missing or unreadable.
    """
    try:
        return np.load(path)
    except (OSError, ValueError) as e:
        raise UpstreamUnavailableError(f"Could not read depth grid {path}: {e}") from e


def save_rgba(path: Path, image: np.ndarray) -> bool:
    """Write an RGBA image; returns False if OpenCV fails."""
    path.parent.mkdir(parents=True, exist_ok=True)
    return bool(cv2.imwrite(str(path), cv2.cvtColor(image, cv2.COLOR_RGBA2BGRA)))


class ChromaDepthApp:
    """Command line application around the effect pipeline."""

    def __init__(self, args: argparse.Namespace):
        """
        Initialize the application.

        Args:
            args: Parsed command line arguments.
        """
        self.args = args
        self.settings: Settings = get_settings(args.config, reload=True)

        self.logger = setup_logger(
            level=self.settings.logging.level,
            fmt=self.settings.logging.format,
            use_colors=self.settings.logging.console_colors
        )
        self.output_dir = args.output_dir or Path(self.settings.output.directory)

    def _effect_params(self):
        """Configured effect parameters with command line overrides."""
        params = self.settings.effect.to_params()
        overrides = {
            option: getattr(self.args, option)
            for option in EFFECT_OPTIONS
            if getattr(self.args, option) is not None
        }
        if overrides:
            self.logger.debug(f"Effect overrides: {overrides}")
            params = params.with_changes(**overrides)
        return params

    def _colormap(self) -> ColorMapKind:
        if self.args.colormap:
            return ColorMapKind.from_name(self.args.colormap)
        return self.settings.visualization.colormap_kind

    def _prepare_depth(self, image: np.ndarray) -> np.ndarray:
        raw = load_depth(self.args.depth)
        grid_stats(raw, name="raw depth")

        if self.args.model_space:
            height, width = image.shape[:2]
            info = compute_preprocess_info(width, height, self.settings.depth.model_input_size)
            return restore_model_output(raw, info, self.settings.depth.interpolation)

        depth = np.array(raw, dtype=np.float64)
        return normalize_min_max(depth)

    def _save_outputs(self, result: PipelineResult, colormap: ColorMapKind) -> bool:
        output_cfg = self.settings.output
        outputs = [
            (output_cfg.effect_filename, result.effect),
            (output_cfg.depth_filename, result.depth_gray),
            (output_cfg.depth_color_filename, result.depth_color),
        ]
        if self.args.color_bar:
            color_bar = create_color_bar(
                self.settings.visualization.color_bar_width,
                self.settings.visualization.color_bar_height,
                colormap,
            )
            outputs.append((output_cfg.color_bar_filename, color_bar))

        ok = True
        for filename, image in outputs:
            path = self.output_dir / filename
            if save_rgba(path, image):
                self.logger.info(f"Saved {path}")
            else:
                self.logger.error(f"Failed to write {path}")
                ok = False
        return ok

    def run(self) -> int:
        """
        Run the pipeline end to end.

        Returns:
            Exit code.
        """
        start = timestamp_ms()
        try:
            image = load_image(Path(self.args.image))
            height, width = image.shape[:2]
            self.logger.info(f"Loaded image {self.args.image} ({width}x{height})")

            if self.args.dump_model_input:
                tensor, info = prepare_model_input(image, self.settings.depth.model_input_size)
                self.args.dump_model_input.parent.mkdir(parents=True, exist_ok=True)
                np.save(self.args.dump_model_input, tensor)
                self.logger.info(
                    f"Saved model input {list(tensor.shape)} to {self.args.dump_model_input} "
                    f"(scale={info.scale:.3f}, crop={info.crop_x},{info.crop_y})"
                )

            if self.args.depth is None:
                if self.args.dump_model_input:
                    return 0
                self.logger.error("No depth grid given")
                return 1

            depth = self._prepare_depth(image)
            colormap = self._colormap()
            result = run_pipeline(image, depth, self._effect_params(), colormap)
            self.logger.info(
                f"Pipeline finished in {result.computation_time_ms:.1f}ms"
            )

            if not self._save_outputs(result, colormap):
                return 1

        except PipelineError as e:
            self.logger.error(f"Processing failed: {e}")
            return 1

        self.logger.info(f"Done in {timestamp_ms() - start}ms")
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code.
    """
    args = parse_args(argv)
    app = ChromaDepthApp(args)
    return app.run()


if __name__ == "__main__":
    exit_code = main()
    sys.exit(exit_code)
