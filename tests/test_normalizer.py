"""
Test min/max depth normalization
"""
import pytest
import numpy as np

from chromadepth.depth.grid import InvalidInputShapeError
from chromadepth.depth.normalizer import normalize_array, normalize_min_max


class TestNormalizeMinMax:
    """2-D normalization"""

    def test_scales_to_unit_range(self):
        grid = np.array([[2.0, 4.0], [6.0, 10.0]])
        result = normalize_min_max(grid)
        np.testing.assert_array_equal(result, [[0.0, 0.25], [0.5, 1.0]])

    def test_in_place_for_float_arrays(self):
        grid = np.array([[1.0, 3.0]])
        result = normalize_min_max(grid)
        assert result is grid
        np.testing.assert_array_equal(grid, [[0.0, 1.0]])

    def test_float32_grid_in_place(self):
        grid = np.array([[0.0, 50.0, 100.0]], dtype=np.float32)
        result = normalize_min_max(grid)
        assert result is grid
        assert result.dtype == np.float32
        np.testing.assert_array_equal(result, np.array([[0.0, 0.5, 1.0]], dtype=np.float32))

    def test_list_input_returns_new_grid(self):
        result = normalize_min_max([[0, 5], [10, 20]])
        assert result.dtype == np.float64
        np.testing.assert_array_equal(result, [[0.0, 0.25], [0.5, 1.0]])

    def test_idempotent_on_normalized_grid(self):
        grid = np.array([[0.0, 0.3], [0.7, 1.0]])
        expected = grid.copy()
        normalize_min_max(grid)
        np.testing.assert_allclose(grid, expected, rtol=0, atol=1e-15)

    def test_constant_grid_becomes_zero(self):
        grid = np.full((3, 3), 5.0)
        normalize_min_max(grid)
        assert np.all(grid == 0.0)
        assert np.all(np.isfinite(grid))

    def test_non_finite_values_zeroed(self):
        grid = np.array([[np.nan, 2.0], [np.inf, 4.0], [-np.inf, 3.0]])
        normalize_min_max(grid)
        np.testing.assert_array_equal(grid, [[0.0, 0.0], [0.0, 1.0], [0.0, 0.5]])

    def test_all_non_finite(self):
        grid = np.array([[np.nan, np.inf]])
        normalize_min_max(grid)
        np.testing.assert_array_equal(grid, [[0.0, 0.0]])

    def test_negative_values(self):
        grid = np.array([[-2.0, 0.0, 2.0]])
        normalize_min_max(grid)
        np.testing.assert_array_equal(grid, [[0.0, 0.5, 1.0]])

    def test_rejects_1d_input(self):
        with pytest.raises(InvalidInputShapeError):
            normalize_min_max(np.array([1.0, 2.0]))


class TestNormalizeArray:
    """Flat buffer normalization"""

    def test_scales_to_unit_range(self):
        buffer = np.array([1.0, 2.0, 3.0, np.nan])
        result = normalize_array(buffer)
        assert result is buffer
        np.testing.assert_array_equal(result, [0.0, 0.5, 1.0, 0.0])

    def test_constant_buffer(self):
        result = normalize_array([5.0, 5.0, 5.0])
        np.testing.assert_array_equal(result, [0.0, 0.0, 0.0])

    def test_rejects_2d_input(self):
        with pytest.raises(InvalidInputShapeError):
            normalize_array(np.ones((2, 2)))

    def test_rejects_empty(self):
        with pytest.raises(InvalidInputShapeError):
            normalize_array([])
