"""
Tests for gradient edge cleanup.
"""

import numpy as np

from logovec.cleanup import (
    clean_gradient_edges,
    count_transparent_neighbors,
    find_dominant_color,
)

RED = (200, 0, 0, 255)
DARK_RED = (120, 0, 0, 255)


def ringed_square(ring_width):
    """Transparent canvas, red 12x12 square wrapped in a darker red ring."""
    img = np.zeros((24, 24, 4), dtype=np.uint8)
    start, stop = 6 - ring_width, 18 + ring_width
    img[start:stop, start:stop] = DARK_RED
    img[6:18, 6:18] = RED
    return img


def visible(img):
    return int((img[:, :, 3] > 0).sum())


class TestDominantColor:
    """Test dominant color bucketing."""

    def test_most_common_bucket(self):
        """Test that the most populated bucket wins."""
        img = np.zeros((10, 10, 4), dtype=np.uint8)
        img[:6] = (255, 0, 0, 255)
        img[6:] = (0, 0, 255, 255)
        assert find_dominant_color(img) == (252, 4, 4)

    def test_ignores_transparent_pixels(self):
        """Test that translucent pixels are not counted."""
        img = np.zeros((10, 10, 4), dtype=np.uint8)
        img[:8] = (255, 255, 255, 50)
        img[8:] = (0, 255, 0, 255)
        assert find_dominant_color(img) == (4, 252, 4)

    def test_none_without_opaque_pixels(self, transparent_image):
        """Test the fully transparent case."""
        assert find_dominant_color(transparent_image) is None


class TestNeighborCount:
    """Test transparent neighbor counting."""

    def test_isolated_pixel(self):
        """Test an opaque pixel surrounded by transparency."""
        alpha = np.zeros((5, 5), dtype=np.uint8)
        alpha[2, 2] = 255
        counts = count_transparent_neighbors(alpha)
        assert counts[2, 2] == 8

    def test_image_border_does_not_count(self):
        """Test that out-of-bounds neighbors are not transparent."""
        alpha = np.full((3, 3), 255, dtype=np.uint8)
        assert count_transparent_neighbors(alpha).max() == 0


class TestCleanGradientEdges:
    """Test halo removal around shapes."""

    def test_level_zero_is_identity(self):
        """Test that level 0 returns an unchanged copy."""
        img = ringed_square(1)
        result = clean_gradient_edges(img, 0)
        assert result is not img
        assert np.array_equal(result, img)

    def test_removes_darker_halo(self):
        """Test that a blended ring is stripped."""
        img = ringed_square(1)
        result = clean_gradient_edges(img, 2)
        assert visible(result) == 144
        assert np.all(result[5, 5] == 0)
        assert tuple(result[6, 6]) == RED

    def test_passes_scale_with_level(self):
        """Test that higher levels run more passes."""
        img = ringed_square(2)
        # level 2 runs one pass and only reaches the outer ring
        assert visible(clean_gradient_edges(img, 2)) == 144 + 52
        # level 4 runs two passes
        assert visible(clean_gradient_edges(img, 4)) == 144

    def test_removes_isolated_speckle(self):
        """Test that a lone off-color pixel is removed."""
        img = ringed_square(0)
        img[1, 1] = (0, 0, 255, 255)
        result = clean_gradient_edges(img, 1)
        assert result[1, 1, 3] == 0
        assert visible(result) == 144

    def test_keeps_dominant_colored_edges(self):
        """Test that dominant-colored edges survive."""
        img = ringed_square(0)
        result = clean_gradient_edges(img, 6)
        assert np.array_equal(result, img)

    def test_no_opaque_pixels_is_noop(self, transparent_image):
        """Test a fully transparent image."""
        assert np.array_equal(clean_gradient_edges(transparent_image, 3), transparent_image)

    def test_does_not_modify_input(self):
        """Test that the input array is left alone."""
        img = ringed_square(1)
        before = img.copy()
        clean_gradient_edges(img, 2)
        assert np.array_equal(img, before)
