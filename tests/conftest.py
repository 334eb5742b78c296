"""Test configuration for pytest."""

import logging
import os

import pytest
from PIL import Image


@pytest.fixture(autouse=True)
def configure_test_logging():
    """Configure logging for tests to be minimal."""
    os.environ['PIXPRINT_LOG_LEVEL'] = 'WARNING'
    logging.getLogger().setLevel(logging.WARNING)


@pytest.fixture
def half_split_image():
    """64x64 grayscale image, left half black and right half white."""
    img = Image.new('L', (64, 64), color=0)
    img.paste(255, (32, 0, 64, 64))
    return img


@pytest.fixture
def uniform_image():
    """64x64 RGB image of a single colour."""
    return Image.new('RGB', (64, 64), color=(120, 60, 200))
