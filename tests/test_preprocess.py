"""Tests for grid downsampling and luma reduction."""

import numpy as np
import pytest
from PIL import Image

from pixprint.errors import DecodeError, InputError
from pixprint.fingerprint.preprocess import preprocess


HALF_SPLIT_ROW = [0, 0, 0, 0, 255, 255, 255, 255]


class TestPreprocessImages:
    def test_uniform_image_gives_uniform_grid(self, uniform_image):
        """Every cell of a single-colour image has the same luma."""
        grid = preprocess(uniform_image)

        assert len(grid) == 64
        assert len(set(grid)) == 1
        assert all(isinstance(sample, int) for sample in grid)

    def test_half_split_image(self, half_split_image):
        """Box filtering keeps the black/white boundary exact."""
        grid = preprocess(half_split_image)

        assert grid == HALF_SPLIT_ROW * 8

    def test_rgb_half_split_image(self, half_split_image):
        """Pure black and white survive the luma reduction unchanged."""
        grid = preprocess(half_split_image.convert('RGB'))

        assert grid == HALF_SPLIT_ROW * 8

    def test_box_filter_averages_covered_pixels(self):
        """A single output cell is the mean of the pixels it covers."""
        img = Image.new('L', (2, 1))
        img.putpixel((0, 0), 0)
        img.putpixel((1, 0), 100)

        assert preprocess(img, width=1, height=1) == [50]

    def test_custom_grid_size(self, half_split_image):
        grid = preprocess(half_split_image, width=4, height=2)

        assert grid == [0, 0, 255, 255] * 2

    def test_image_smaller_than_grid(self):
        """A 1x1 image is stretched over the whole grid."""
        img = Image.new('L', (1, 1), color=77)

        assert preprocess(img) == [77] * 64

    def test_palette_image(self):
        img = Image.new('RGB', (16, 16), 'white').convert('P')

        assert preprocess(img) == [255] * 64

    def test_deterministic(self):
        rng = np.random.default_rng(7)
        img = Image.fromarray(rng.integers(0, 256, size=(50, 37, 3), dtype=np.uint8))

        assert preprocess(img) == preprocess(img.copy())


class TestPreprocessArrays:
    def test_grayscale_array_matches_image(self, half_split_image):
        array = np.asarray(half_split_image)

        assert preprocess(array) == preprocess(half_split_image)

    def test_channel_layouts(self, half_split_image):
        """Single-channel, RGB and RGBA arrays all reduce to the same grid."""
        gray = np.asarray(half_split_image)

        assert preprocess(gray[:, :, np.newaxis]) == HALF_SPLIT_ROW * 8
        assert preprocess(np.stack([gray] * 3, axis=-1)) == HALF_SPLIT_ROW * 8
        rgba = np.dstack([gray, gray, gray, np.full_like(gray, 255)])
        assert preprocess(rgba) == HALF_SPLIT_ROW * 8

    def test_nested_lists(self):
        rows = [[0] * 4 + [255] * 4 for _ in range(8)]

        assert preprocess(rows) == HALF_SPLIT_ROW * 8

    def test_float_array(self):
        array = np.full((10, 10), 99.6)

        assert preprocess(array) == [100] * 64

    def test_int_array_wider_dtype(self):
        array = np.full((8, 8), 200, dtype=np.int64)

        assert preprocess(array) == [200] * 64


class TestPreprocessErrors:
    def test_none_buffer(self):
        with pytest.raises(InputError):
            preprocess(None)

    @pytest.mark.parametrize("width,height", [(0, 8), (8, 0), (-1, 8)])
    def test_non_positive_grid(self, uniform_image, width, height):
        with pytest.raises(InputError):
            preprocess(uniform_image, width=width, height=height)

    def test_zero_sized_image(self):
        with pytest.raises(DecodeError):
            preprocess(Image.new('L', (0, 0)))

    @pytest.mark.parametrize("shape", [(0, 5), (5, 0), (0, 0, 3)])
    def test_zero_sized_array(self, shape):
        with pytest.raises(DecodeError):
            preprocess(np.zeros(shape, dtype=np.uint8))

    def test_empty_list(self):
        with pytest.raises(DecodeError):
            preprocess([])

    def test_ragged_rows(self):
        with pytest.raises(DecodeError):
            preprocess([[1, 2, 3], [4, 5]])

    def test_one_dimensional(self):
        with pytest.raises(DecodeError):
            preprocess([1, 2, 3, 4])

    def test_unsupported_channel_count(self):
        with pytest.raises(DecodeError):
            preprocess(np.zeros((4, 4, 2), dtype=np.uint8))

    def test_non_numeric(self):
        with pytest.raises(DecodeError):
            preprocess([["a", "b"], ["c", "d"]])

    @pytest.mark.parametrize("value", [-1, 256, 1000])
    def test_out_of_range_samples(self, value):
        with pytest.raises(DecodeError):
            preprocess(np.full((4, 4), value))

    def test_nan_samples(self):
        array = np.zeros((4, 4))
        array[1, 1] = np.nan

        with pytest.raises(DecodeError):
            preprocess(array)
