"""
Tests for color helpers.
"""

import numpy as np
import pytest

from logovec.colors import (
    chromaticity,
    colors_match,
    hex_to_rgb,
    luminance,
    match_mask,
    parse_color,
    rgb_to_hex,
)


class TestHexConversion:
    """Test hex parsing and formatting."""

    def test_hex_to_rgb(self):
        """Test six-digit hex parsing."""
        assert hex_to_rgb('#ffffff') == (255, 255, 255)
        assert hex_to_rgb('ff0010') == (255, 0, 16)

    def test_short_hex(self):
        """Test three-digit hex parsing."""
        assert hex_to_rgb('#abc') == (170, 187, 204)

    @pytest.mark.parametrize("value", ['#ggg000', '#12345', '', 'red'])
    def test_invalid_hex(self, value):
        """Test that malformed hex is rejected."""
        with pytest.raises(ValueError):
            hex_to_rgb(value)

    def test_rgb_to_hex(self):
        """Test hex formatting."""
        assert rgb_to_hex((255, 0, 16)) == '#ff0010'
        assert rgb_to_hex(np.array([0, 0, 0, 255], dtype=np.uint8)) == '#000000'

    def test_parse_color_accepts_sequences(self):
        """Test color parsing from sequences and strings."""
        assert parse_color([1, 2, 3]) == (1, 2, 3)
        assert parse_color('#010203') == (1, 2, 3)

    def test_parse_color_rejects_out_of_range(self):
        """Test that channels above 255 are rejected."""
        with pytest.raises(ValueError):
            parse_color((0, 256, 0))


class TestMatching:
    """Test tolerance matching."""

    def test_within_tolerance(self):
        """Test the tolerance boundary."""
        assert colors_match((10, 10, 10), (40, 40, 40), 30)
        assert not colors_match((10, 10, 10), (41, 40, 40), 30)

    def test_symmetric(self):
        """Test that matching is symmetric."""
        a, b = (200, 10, 30), (180, 25, 5)
        assert colors_match(a, b, 25) == colors_match(b, a, 25)

    def test_match_mask_matches_scalar_predicate(self):
        """Test that the vectorized mask agrees with the scalar check."""
        rng = np.random.default_rng(1)
        pixels = rng.integers(0, 256, (8, 8, 4), dtype=np.uint8)
        mask = match_mask(pixels, (128, 128, 128), 60)
        expected = [[colors_match(p, (128, 128, 128), 60) for p in row] for row in pixels]
        assert mask.tolist() == expected


class TestLuminance:
    """Test luminance and chromaticity."""

    def test_white_and_black(self):
        """Test luminance extremes."""
        assert luminance((255, 255, 255)) == pytest.approx(255.0)
        assert luminance((0, 0, 0)) == pytest.approx(0.0)

    def test_chromaticity_of_black_is_neutral(self):
        """Test chromaticity of black."""
        assert chromaticity((0, 0, 0)) == pytest.approx([1 / 3, 1 / 3, 1 / 3])

    def test_chromaticity_ignores_brightness(self):
        """Test that scaling a color keeps its chromaticity."""
        assert chromaticity((200, 100, 0)) == pytest.approx(chromaticity((100, 50, 0)))
