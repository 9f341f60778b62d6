"""
Test edge-aware depth smoothing
"""
import math

import pytest
import numpy as np

from chromadepth.depth.smoother import bilateral_filter, gaussian_blur, smooth


def per_pixel_smooth(depth, strength):
    """Straightforward per-pixel version of the smoothing filter"""
    sigma = max(strength / 10.0 * 10.0, 1.0)
    two_sigma_sq = 2.0 * sigma * sigma
    height, width = depth.shape
    result = np.zeros_like(depth)
    for y in range(height):
        for x in range(width):
            center = depth[y, x] * 255.0
            weight_sum = 0.0
            value_sum = 0.0
            for dy in range(-2, 3):
                yy = min(max(y + dy, 0), height - 1)
                for dx in range(-2, 3):
                    xx = min(max(x + dx, 0), width - 1)
                    spatial = math.exp(-(dy * dy + dx * dx) / two_sigma_sq)
                    neighbor = depth[yy, xx] * 255.0
                    rng = math.exp(-((neighbor - center) * (neighbor - center)) / two_sigma_sq)
                    weight = spatial * rng
                    weight_sum += weight
                    value_sum += neighbor * weight
            result[y, x] = (value_sum / weight_sum) / 255.0
    return result


class TestNoOp:
    """Zero or negative strength disables smoothing"""

    def test_zero_strength_returns_input(self, gradient_grid):
        assert smooth(gradient_grid, 0) is gradient_grid

    def test_negative_strength_returns_input(self, gradient_grid):
        assert smooth(gradient_grid, -25) is gradient_grid


class TestSmoothing:
    """Bilateral-style smoothing"""

    def test_matches_per_pixel_loop(self):
        rng = np.random.default_rng(7)
        depth = rng.random((6, 9))
        for strength in (1.0, 10.0, 55.0):
            # np.exp and math.exp may disagree in the last bit
            np.testing.assert_array_max_ulp(
                smooth(depth, strength), per_pixel_smooth(depth, strength), maxulp=8
            )

    def test_constant_grid_unchanged(self):
        depth = np.full((5, 5), 0.3)
        np.testing.assert_allclose(smooth(depth, 40), 0.3, rtol=0, atol=1e-12)

    def test_edges_preserved(self):
        depth = np.zeros((6, 6))
        depth[:, 3:] = 1.0
        np.testing.assert_allclose(smooth(depth, 10), depth, rtol=0, atol=1e-9)

    def test_noise_pulled_toward_neighbors(self):
        depth = np.full((5, 5), 0.5)
        depth[2, 2] = 0.52
        result = smooth(depth, 10)
        assert 0.5 < result[2, 2] < 0.52

    def test_nan_neighbor_keeps_center_value(self):
        depth = np.full((5, 5), 0.5)
        depth[2, 2] = np.nan
        result = smooth(depth, 20)

        assert np.isnan(result[2, 2])
        finite = ~np.isnan(depth)
        assert np.all(result[finite] == 0.5)

    def test_input_not_modified(self, gradient_grid):
        original = gradient_grid.copy()
        result = smooth(gradient_grid, 30)
        assert result is not gradient_grid
        np.testing.assert_array_equal(gradient_grid, original)

    def test_single_pixel_grid(self):
        result = smooth(np.array([[0.8]]), 50)
        np.testing.assert_allclose(result, [[0.8]], rtol=0, atol=1e-12)

    @pytest.mark.slow
    def test_large_grid_shape(self):
        depth = np.random.default_rng(1).random((240, 320))
        result = smooth(depth, 20)
        assert result.shape == (240, 320)
        assert result.min() >= depth.min() - 1e-12
        assert result.max() <= depth.max() + 1e-12


class TestOpenCVFilters:
    """General-purpose OpenCV filters"""

    def test_bilateral_constant_grid(self):
        depth = np.full((8, 8), 0.25)
        result = bilateral_filter(depth, spatial_sigma=1.0, intensity_sigma=0.1)
        assert result.dtype == np.float64
        np.testing.assert_allclose(result, 0.25, atol=1e-6)

    def test_bilateral_rejects_bad_sigma(self):
        with pytest.raises(ValueError):
            bilateral_filter(np.ones((3, 3)), spatial_sigma=0.0, intensity_sigma=1.0)

    def test_gaussian_blur_preserves_mass(self):
        depth = np.zeros((15, 15))
        depth[7, 7] = 1.0
        result = gaussian_blur(depth, sigma=1.0)
        assert result[7, 7] < 1.0
        assert result.sum() == pytest.approx(1.0, abs=1e-9)

    def test_gaussian_blur_rejects_bad_sigma(self):
        with pytest.raises(ValueError):
            gaussian_blur(np.ones((3, 3)), sigma=-1.0)
