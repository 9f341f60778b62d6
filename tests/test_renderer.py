"""
Test depth map rendering
"""
import pytest
import numpy as np

from chromadepth.depth.grid import InvalidInputShapeError, UpstreamUnavailableError
from chromadepth.visualization.colormap import ColorMapKind
from chromadepth.visualization.renderer import create_color_bar, enhance_depth_map, render


class TestRender:
    """render"""

    def test_mid_gray(self):
        image = render(np.full((3, 3), 0.5), 3, 3)
        assert image.shape == (3, 3, 4)
        assert np.all(image[..., :3] == 128)
        assert np.all(image[..., 3] == 255)

    def test_resizes_to_target(self, gradient_grid):
        image = render(gradient_grid, 12, 8)
        assert image.shape == (8, 12, 4)

    def test_grayscale_uses_bilinear(self):
        image = render(np.array([[0.0, 1.0]]), 4, 1)
        # source positions -0.25, 0.25, 0.75, 1.25
        assert image[0, :, 0].tolist() == [0, 64, 191, 255]

    def test_colormap_uses_nearest(self):
        image = render(np.array([[0.0, 1.0]]), 4, 1, ColorMapKind.JET)
        assert image[0, :, :3].tolist() == [
            [0, 0, 255], [0, 0, 255], [255, 0, 0], [255, 0, 0]
        ]

    def test_missing_grid(self):
        with pytest.raises(UpstreamUnavailableError):
            render(None, 2, 2)

    def test_invalid_target(self):
        with pytest.raises(InvalidInputShapeError):
            render(np.zeros((2, 2)), 0, 2)


class TestColorBar:
    """create_color_bar"""

    def test_grayscale_sweep(self):
        bar = create_color_bar(4, 256)
        assert bar.shape == (256, 4, 4)
        expected = [int(np.float32(y) / np.float32(255) * np.float32(255)) for y in range(256)]
        assert bar[:, 0, 0].tolist() == expected
        assert bar[0, 0, 0] == 0
        assert bar[-1, 0, 0] == 255
        assert np.all(bar[:, 0] == bar[:, 3])

    def test_grayscale_truncates(self):
        bar = create_color_bar(1, 3)
        # 0.5 * 255 = 127.5
        assert bar[:, 0, 0].tolist() == [0, 127, 255]
        assert np.all(bar[1, 0, :3] == 127)

    def test_jet_ends(self):
        bar = create_color_bar(2, 10, ColorMapKind.JET)
        assert bar[0, 0, :3].tolist() == [0, 0, 255]
        assert bar[-1, 0, :3].tolist() == [255, 0, 0]

    def test_single_row_is_low_end(self):
        bar = create_color_bar(3, 1, ColorMapKind.VIRIDIS)
        assert bar[0, 0, :3].tolist() == [1, 1, 83]

    def test_invalid_size(self):
        with pytest.raises(InvalidInputShapeError):
            create_color_bar(0, 10)
        with pytest.raises(InvalidInputShapeError):
            create_color_bar(10, -1)


class TestEnhance:
    """enhance_depth_map"""

    def test_identity(self):
        raster = np.array([[[0, 0, 0], [100, 128, 255]]], dtype=np.uint8)
        result = enhance_depth_map(raster, 1.0, 0.0)
        np.testing.assert_array_equal(result[..., :3], raster)
        assert np.all(result[..., 3] == 255)

    def test_contrast_and_brightness(self):
        raster = np.array([[[200, 100, 127]]], dtype=np.uint8)
        assert enhance_depth_map(raster, 2.0, 0.0)[0, 0, 0] == 255
        assert enhance_depth_map(raster, 0.5, 10.0)[0, 0, 1] == 124
        # 126.5 truncates
        assert enhance_depth_map(raster, 1.5, 0.0)[0, 0, 2] == 126

    def test_clips_low(self):
        raster = np.full((1, 1, 3), 10, dtype=np.uint8)
        assert enhance_depth_map(raster, 1.0, -50.0)[0, 0, 0] == 0

    def test_single_channel(self):
        result = enhance_depth_map(np.full((2, 2), 128, dtype=np.uint8), 3.0, 0.0)
        assert result.shape == (2, 2, 4)
        assert np.all(result[..., :3] == 128)
