"""
Logovec Color Helpers.

Colors are plain ``(r, g, b)`` tuples of 0-255 integers. Two colors match
when every channel differs by at most the tolerance.
"""

import re
from typing import Sequence, Tuple, Union

import numpy as np

RGB = Tuple[int, int, int]
ColorLike = Union[str, Sequence[int]]

_HEX_RE = re.compile(r'^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$')

# Rec. 601 luma weights
LUMA_WEIGHTS = (0.299, 0.587, 0.114)


def hex_to_rgb(hex_color: str) -> RGB:
    """Convert '#rrggbb' (or '#rgb') to an RGB tuple."""
    match = _HEX_RE.match(hex_color.strip())
    if not match:
        raise ValueError(f"Invalid hex color: {hex_color!r}")
    digits = match.group(1)
    if len(digits) == 3:
        digits = ''.join(c * 2 for c in digits)
    return tuple(int(digits[i:i + 2], 16) for i in (0, 2, 4))


def rgb_to_hex(rgb: Sequence[int]) -> str:
    """Convert an RGB tuple to a lowercase '#rrggbb' string."""
    return '#{:02x}{:02x}{:02x}'.format(*(int(c) for c in rgb[:3]))


def parse_color(color: ColorLike) -> RGB:
    """
    Normalize a user supplied color.

    Accepts hex strings or any 3+ item sequence of channel values.
    """
    if isinstance(color, str):
        return hex_to_rgb(color)
    if len(color) < 3:
        raise ValueError(f"Color needs three channels, got {color!r}")
    rgb = tuple(int(c) for c in color[:3])
    if any(c < 0 or c > 255 for c in rgb):
        raise ValueError(f"Color channels must be in 0-255, got {color!r}")
    return rgb


def colors_match(c1: Sequence[int], c2: Sequence[int], tolerance: int) -> bool:
    """True if every channel differs by at most ``tolerance``."""
    return all(abs(int(a) - int(b)) <= tolerance for a, b in zip(c1[:3], c2[:3]))


def match_mask(pixels: np.ndarray, color: Sequence[int], tolerance: int) -> np.ndarray:
    """
    Vectorized ``colors_match`` over the last axis of ``pixels``.

    Args:
        pixels: Array whose last axis holds at least 3 channels (RGB first)
        color: Reference color
        tolerance: Maximum per-channel absolute difference

    Returns:
        Boolean array with the leading shape of ``pixels``
    """
    rgb = pixels[..., :3].astype(np.int16)
    ref = np.asarray(color[:3], dtype=np.int16)
    return np.all(np.abs(rgb - ref) <= tolerance, axis=-1)


def luminance(rgb) -> np.ndarray:
    """Rec. 601 luminance of a color or an array of colors."""
    arr = np.asarray(rgb, dtype=np.float64)[..., :3]
    return arr @ np.asarray(LUMA_WEIGHTS)


def chromaticity(rgb) -> np.ndarray:
    """
    Per-channel share of the channel sum.

    Black has no hue, so a zero sum maps to an even split.
    """
    arr = np.asarray(rgb, dtype=np.float64)[..., :3]
    total = arr.sum(axis=-1, keepdims=True)
    safe = np.where(total == 0, 1.0, total)
    return np.where(total == 0, 1.0 / 3.0, arr / safe)
