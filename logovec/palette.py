"""
Logovec Palette Module - flat color extraction and per-color masks.

Logos are flat-color art, so the palette is simply the most frequent exact
colors with near-duplicates (antialiased shades) folded into the more
prevalent representative.
"""

import logging
from typing import List, Optional, Sequence

import numpy as np

from .colors import RGB, match_mask
from .raster import ensure_alpha

logger = logging.getLogger(__name__)

OPAQUE_THRESHOLD = 128
DEFAULT_PALETTE_TOLERANCE = 20


def color_histogram(image: np.ndarray):
    """
    Exact RGB counts over opaque pixels, most frequent first.

    Returns:
        (colors, counts): ``colors`` is an (N, 3) uint8 array. Ties are ordered
        by ascending packed RGB value.
    """
    rgba = ensure_alpha(image)
    opaque = rgba[rgba[:, :, 3] >= OPAQUE_THRESHOLD][:, :3].astype(np.int32)
    if opaque.size == 0:
        return np.empty((0, 3), dtype=np.uint8), np.empty(0, dtype=np.int64)

    packed = (opaque[:, 0] << 16) | (opaque[:, 1] << 8) | opaque[:, 2]
    codes, counts = np.unique(packed, return_counts=True)
    order = np.argsort(-counts, kind='stable')
    codes, counts = codes[order], counts[order]

    colors = np.stack([(codes >> 16) & 0xFF, (codes >> 8) & 0xFF, codes & 0xFF], axis=1)
    return colors.astype(np.uint8), counts


def extract_unique_colors(
    image: np.ndarray,
    tolerance: int = DEFAULT_PALETTE_TOLERANCE,
    max_colors: Optional[int] = None,
) -> List[RGB]:
    """
    Ordered palette of distinct opaque colors.

    Args:
        image: RGB or RGBA raster
        tolerance: Colors within this per-channel distance of an already
            admitted color are folded into it
        max_colors: Optional cap on the palette length

    Returns:
        Colors ordered by prevalence; no two match within ``tolerance``.
    """
    colors, _ = color_histogram(image)
    palette: List[RGB] = []
    admitted = np.empty((0, 3), dtype=np.int16)

    for candidate in colors.astype(np.int16):
        if max_colors is not None and len(palette) >= max_colors:
            break
        if admitted.size and np.any(np.all(np.abs(admitted - candidate) <= tolerance, axis=1)):
            continue
        palette.append(tuple(int(c) for c in candidate))
        admitted = np.vstack([admitted, candidate])

    logger.debug("Extracted %d palette colors from %d distinct", len(palette), len(colors))
    return palette


def build_color_mask(
    image: np.ndarray,
    color: Sequence[int],
    tolerance: int = DEFAULT_PALETTE_TOLERANCE,
) -> np.ndarray:
    """
    Binary mask of one color layer.

    Returns:
        2-D uint8 array: 0 where the pixel is opaque and matches ``color``,
        255 everywhere else.
    """
    rgba = ensure_alpha(image)
    selected = (rgba[:, :, 3] >= OPAQUE_THRESHOLD) & match_mask(rgba, color, tolerance)
    return np.where(selected, 0, 255).astype(np.uint8)
