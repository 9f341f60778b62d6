"""Configuration management for chromadepth."""

import os
import yaml
from pathlib import Path
from typing import Optional
from pydantic import BaseModel, Field, field_validator
from dotenv import load_dotenv

from chromadepth.depth.resampler import Interpolation
from chromadepth.effect.params import EffectParams
from chromadepth.visualization.colormap import ColorMapKind

CONFIG_PATH_ENV = "CHROMADEPTH_CONFIG"
LOG_LEVEL_ENV = "CHROMADEPTH_LOG_LEVEL"


class EffectConfig(BaseModel):
    """Default chromostereopsis effect parameters (percentages)."""
    threshold: float = Field(default=50.0, ge=0.0, le=100.0)
    depth_scale: float = Field(default=50.0, ge=0.0, le=100.0)
    feather: float = Field(default=10.0, ge=0.0, le=100.0)
    red_brightness: float = Field(default=50.0, ge=0.0, le=100.0)
    blue_brightness: float = Field(default=50.0, ge=0.0, le=100.0)
    gamma: float = Field(default=50.0, ge=0.0, le=100.0)
    black_level: float = Field(default=0.0, ge=0.0, le=100.0)
    white_level: float = Field(default=100.0, ge=0.0, le=100.0)
    smoothing: float = Field(default=0.0, ge=0.0, le=100.0)

    def to_params(self) -> EffectParams:
        """Build the immutable parameter bundle used by the pipeline."""
        return EffectParams(**self.model_dump())


class VisualizationConfig(BaseModel):
    """Depth visualization configuration."""
    colormap: str = Field(default="grayscale")
    color_bar_width: int = Field(default=32, ge=1, le=1024)
    color_bar_height: int = Field(default=256, ge=1, le=4096)

    @field_validator('colormap')
    @classmethod
    def validate_colormap(cls, v):
        """Validate colormap name."""
        return ColorMapKind.from_name(v).value

    @property
    def colormap_kind(self) -> ColorMapKind:
        """Colormap as an enum value."""
        return ColorMapKind.from_name(self.colormap)


class DepthConfig(BaseModel):
    """Depth model mapping configuration."""
    model_input_size: int = Field(default=518, ge=14, le=4096)
    restore_interpolation: str = Field(default="bilinear_exact")

    @field_validator('restore_interpolation')
    @classmethod
    def validate_interpolation(cls, v):
        """Validate interpolation mode."""
        allowed = [mode.value for mode in Interpolation]
        v = v.lower()
        if v not in allowed:
            raise ValueError(f"restore_interpolation must be one of {allowed}")
        return v

    @property
    def interpolation(self) -> Interpolation:
        """Interpolation mode as an enum value."""
        return Interpolation(self.restore_interpolation)


class OutputConfig(BaseModel):
    """Output file configuration."""
    directory: str = Field(default="output")
    effect_filename: str = Field(default="chromostereopsis.png")
    depth_filename: str = Field(default="depth_gray.png")
    depth_color_filename: str = Field(default="depth_color.png")
    color_bar_filename: str = Field(default="color_bar.png")


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = Field(default="INFO")
    console_colors: bool = Field(default=True)
    format: str = Field(default="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    @field_validator('level')
    @classmethod
    def validate_level(cls, v):
        """Validate logging level."""
        allowed = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        v = v.upper()
        if v not in allowed:
            raise ValueError(f"level must be one of {allowed}")
        return v


class Settings(BaseModel):
    """Main application settings."""
    effect: EffectConfig = Field(default_factory=EffectConfig)
    visualization: VisualizationConfig = Field(default_factory=VisualizationConfig)
    depth: DepthConfig = Field(default_factory=DepthConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """
        Load settings from YAML file and environment variables.

        Args:
            config_path: Path to config.yaml file. If None, uses
                $CHROMADEPTH_CONFIG or the default location.

        Returns:
            Settings instance with loaded configuration.
        """
        # Load environment variables from .env file
        load_dotenv()

        if config_path is None:
            env_path = os.getenv(CONFIG_PATH_ENV)
            if env_path:
                config_path = Path(env_path)
            else:
                # Look for config.yaml in project root
                project_root = Path(__file__).parent.parent.parent
                config_path = project_root / "config" / "config.yaml"

        config_path = Path(config_path)
        if config_path.exists():
            with open(config_path, 'r') as f:
                config_data = yaml.safe_load(f) or {}
        else:
            # Use defaults if no config file found
            config_data = {}

        level_override = os.getenv(LOG_LEVEL_ENV)
        if level_override:
            config_data.setdefault('logging', {})['level'] = level_override

        # Create Settings instance (Pydantic will validate)
        return cls(**config_data)


# Singleton instance
_settings: Optional[Settings] = None


def get_settings(config_path: Optional[Path] = None, reload: bool = False) -> Settings:
    """
    Get application settings (singleton pattern).

    Args:
        config_path: Path to config.yaml file. Only used on first call or when reload=True.
        reload: Force reload of settings.

    Returns:
        Settings instance.
    """
    global _settings

    if _settings is None or reload:
        _settings = Settings.load(config_path)

    return _settings
