"""
Logovec Gradient Edge Cleanup.

Removing a flat background leaves a ring of antialiased pixels along the new
transparent boundary: the logo color blended towards the old backdrop. Traced
on their own they show up as thin stray shapes, so this stage erodes them.

A boundary pixel is dropped when it is clearly not the dominant logo color
and either looks like the dominant color at a different brightness (same
chromaticity, shifted luminance) or is mostly surrounded by transparency.
"""

import logging
import math
from typing import Optional

import numpy as np

from .colors import RGB, chromaticity, luminance, match_mask
from .raster import ensure_alpha

logger = logging.getLogger(__name__)

OPAQUE_THRESHOLD = 128
BUCKET_STEP = 8
BASE_TOLERANCE = 30
TOLERANCE_PER_LEVEL = 5
MIN_LUMINANCE_SHIFT = 20
MAX_LUMINANCE_SHIFT = 150
MAX_CHROMATICITY_SHIFT = 0.3
SPECKLE_NEIGHBORS = 4

_NEIGHBOR_OFFSETS = [
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1), (0, 1),
    (1, -1), (1, 0), (1, 1),
]


def find_dominant_color(image: np.ndarray) -> Optional[RGB]:
    """
    Most common opaque color, quantized to steps of 8.

    Returns:
        Center of the most populated bucket, or None if nothing is opaque.
        Ties resolve to the lowest bucket.
    """
    rgba = ensure_alpha(image)
    opaque = rgba[:, :, 3] >= OPAQUE_THRESHOLD
    if not opaque.any():
        return None

    buckets = rgba[opaque][:, :3].astype(np.int32) // BUCKET_STEP
    levels = 256 // BUCKET_STEP
    codes = (buckets[:, 0] * levels + buckets[:, 1]) * levels + buckets[:, 2]
    best = int(np.argmax(np.bincount(codes, minlength=levels ** 3)))

    r, rest = divmod(best, levels * levels)
    g, b = divmod(rest, levels)
    half = BUCKET_STEP // 2
    return (r * BUCKET_STEP + half, g * BUCKET_STEP + half, b * BUCKET_STEP + half)


def count_transparent_neighbors(alpha: np.ndarray) -> np.ndarray:
    """Number of transparent 8-neighbors per pixel. Out-of-bounds does not count."""
    transparent = np.pad(alpha < OPAQUE_THRESHOLD, 1, mode='constant', constant_values=False)
    h, w = alpha.shape
    counts = np.zeros((h, w), dtype=np.uint8)
    for dy, dx in _NEIGHBOR_OFFSETS:
        counts += transparent[1 + dy:1 + dy + h, 1 + dx:1 + dx + w]
    return counts


def clean_gradient_edges(image: np.ndarray, level: int) -> np.ndarray:
    """
    Erode the antialiasing halo around opaque content.

    Args:
        image: RGBA raster, usually the output of background removal
        level: Cleanup strength. 0 or less disables the stage; higher
            levels widen the dominant-color tolerance and run more passes.

    Returns:
        New RGBA raster. Removed pixels become (0, 0, 0, 0).
    """
    result = ensure_alpha(image)
    if level <= 0:
        return result

    dominant = find_dominant_color(result)
    if dominant is None:
        return result

    tolerance = BASE_TOLERANCE + level * TOLERANCE_PER_LEVEL
    passes = math.ceil(level / 2)

    # Color properties never change between passes, only alpha does.
    not_dominant = ~match_mask(result, dominant, tolerance)
    lum_shift = np.abs(luminance(result) - float(luminance(dominant)))
    chroma_shift = np.abs(chromaticity(result) - chromaticity(dominant)).max(axis=-1)
    blended = (
        (lum_shift > MIN_LUMINANCE_SHIFT)
        & (lum_shift < MAX_LUMINANCE_SHIFT)
        & (chroma_shift <= MAX_CHROMATICITY_SHIFT)
    )

    total = 0
    for index in range(passes):
        alpha = result[:, :, 3]
        neighbors = count_transparent_neighbors(alpha)
        edge = (alpha >= OPAQUE_THRESHOLD) & (neighbors > 0)
        remove = edge & not_dominant & (blended | (neighbors >= SPECKLE_NEIGHBORS))

        removed = int(remove.sum())
        if removed == 0:
            break
        result[remove] = 0
        total += removed
        logger.debug("Cleanup pass %d removed %d pixels", index + 1, removed)

    logger.debug("Gradient cleanup (level %d, dominant %s) removed %d pixels", level, dominant, total)
    return result
