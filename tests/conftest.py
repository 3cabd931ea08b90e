"""Shared synthetic images for the logovec test suite."""

import numpy as np
import pytest

from logovec.raster import encode_png


def solid(height, width, color):
    """Solid RGB or RGBA image."""
    img = np.zeros((height, width, len(color)), dtype=np.uint8)
    img[:, :] = color
    return img


@pytest.fixture
def square_on_white():
    """100x100 white image with a centered 40x40 black square."""
    img = solid(100, 100, (255, 255, 255))
    img[30:70, 30:70] = (0, 0, 0)
    return img


@pytest.fixture
def square_on_white_png(square_on_white):
    return encode_png(square_on_white)


@pytest.fixture
def transparent_image():
    """50x50 fully transparent RGBA image."""
    return np.zeros((50, 50, 4), dtype=np.uint8)


@pytest.fixture
def blue_on_red():
    """100x100 red image with a centered 40x40 blue square."""
    img = solid(100, 100, (255, 0, 0))
    img[30:70, 30:70] = (0, 0, 255)
    return img
