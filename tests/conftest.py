"""
Pytest configuration and fixtures
"""
import pytest
import os
import sys

import numpy as np

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from chromadepth.effect.params import EffectParams


@pytest.fixture
def white_raster():
    """2x2 all-white RGB raster"""
    return np.full((2, 2, 3), 255, dtype=np.uint8)


@pytest.fixture
def gradient_grid():
    """4x6 depth grid increasing left to right, top to bottom"""
    return np.arange(24, dtype=np.float64).reshape(4, 6) / 23.0


@pytest.fixture
def scenario_params():
    """Effect parameters used by the near/far separation scenario"""
    return EffectParams(
        threshold=50.0,
        depth_scale=100.0,
        feather=0.0,
        red_brightness=100.0,
        blue_brightness=100.0,
        gamma=50.0,
        black_level=0.0,
        white_level=100.0,
        smoothing=0.0,
    )


@pytest.fixture
def isolated_env(monkeypatch, tmp_path):
    """Run with a clean working directory and no chromadepth env overrides"""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("CHROMADEPTH_CONFIG", raising=False)
    monkeypatch.delenv("CHROMADEPTH_LOG_LEVEL", raising=False)
    return tmp_path


# Mark slow tests
def pytest_configure(config):
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
