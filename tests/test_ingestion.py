"""Tests for loading images from disk and memory."""

import io

import pytest
from PIL import Image

from pixprint.config import Settings
from pixprint.errors import DecodeError, InputError
from pixprint.ingestion import fingerprint_bytes, fingerprint_file, load_image, load_image_bytes


def _png_bytes(img):
    buffer = io.BytesIO()
    img.save(buffer, format='PNG')
    return buffer.getvalue()


class TestLoadImage:
    def test_loads_png(self, tmp_path, half_split_image):
        path = tmp_path / "split.png"
        half_split_image.save(path)

        img = load_image(path)

        assert isinstance(img, Image.Image)
        assert img.size == (64, 64)

    def test_accepts_string_path(self, tmp_path, uniform_image):
        path = tmp_path / "uniform.png"
        uniform_image.save(path)

        assert load_image(str(path)).size == (64, 64)

    @pytest.mark.parametrize("path", [None, "", "   "])
    def test_missing_path(self, path):
        with pytest.raises(InputError):
            load_image(path)

    def test_nonexistent_file(self, tmp_path):
        with pytest.raises(DecodeError):
            load_image(tmp_path / "nonexistent.png")

    def test_corrupted_file(self, tmp_path):
        corrupted = tmp_path / "corrupted.png"
        corrupted.write_bytes(b"not an image")

        with pytest.raises(DecodeError):
            load_image(corrupted)


class TestLoadImageBytes:
    def test_decodes_bytes(self, half_split_image):
        img = load_image_bytes(_png_bytes(half_split_image))

        assert img.size == (64, 64)

    @pytest.mark.parametrize("data", [None, b""])
    def test_empty_data(self, data):
        with pytest.raises(InputError):
            load_image_bytes(data)

    def test_garbage_data(self):
        with pytest.raises(DecodeError):
            load_image_bytes(b"\x00\x01garbage")


class TestFingerprintFile:
    def test_half_split(self, tmp_path, half_split_image):
        path = tmp_path / "split.png"
        half_split_image.convert('RGB').save(path)

        assert str(fingerprint_file(path)) == "0f0f0f0f0f0f0f0f"

    def test_uniform(self, tmp_path, uniform_image):
        path = tmp_path / "uniform.png"
        uniform_image.save(path)

        assert str(fingerprint_file(path)) == "0000000000000000"

    def test_custom_grid(self, tmp_path, half_split_image):
        path = tmp_path / "split.png"
        half_split_image.save(path)

        fp = fingerprint_file(path, Settings(hash_width=16, hash_height=16))

        assert fp.bits == 256
        assert str(fp) == "00ff" * 16

    def test_bytes_match_file(self, tmp_path, half_split_image):
        path = tmp_path / "split.png"
        half_split_image.save(path)

        assert fingerprint_bytes(_png_bytes(half_split_image)) == fingerprint_file(path)
