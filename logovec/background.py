"""
Logovec Background Module - detect and remove flat backdrops.

A logo exported on a solid color carries that color in all four corners.
Detection averages small corner samples and refuses to call the color a
background when it also fills the center of the frame, so a logo that fills
the whole canvas is never erased.
"""

import logging
from typing import Optional, Tuple

import numpy as np

from .colors import RGB, ColorLike, colors_match, match_mask, parse_color
from .raster import ensure_alpha

logger = logging.getLogger(__name__)

# Per-channel tolerance used when comparing corner and center samples
DETECTION_TOLERANCE = 30
DEFAULT_TOLERANCE = 30
MAX_CORNER_SAMPLE = 10
MIN_CORNER_SAMPLE = 2


def _region_mean(image: np.ndarray, top: int, left: int, size: int) -> np.ndarray:
    """Mean RGBA over a square region. RGB images count as opaque."""
    region = image[top:top + size, left:left + size].reshape(-1, image.shape[2])
    means = region.astype(np.float64).mean(axis=0)
    if image.shape[2] == 3:
        means = np.append(means, 255.0)
    return means


def _as_rgb(values) -> RGB:
    return tuple(int(v) for v in np.rint(values[:3]))


def sample_corners(image: np.ndarray, size: int):
    """Mean RGBA of the four ``size`` x ``size`` corners (TL, TR, BL, BR)."""
    h, w = image.shape[:2]
    origins = [
        (0, 0),
        (0, w - size),
        (h - size, 0),
        (h - size, w - size),
    ]
    return [_region_mean(image, top, left, size) for top, left in origins]


def detect_background_color(image: np.ndarray) -> Optional[RGB]:
    """
    Guess the flat background color of a logo.

    Args:
        image: RGB or RGBA raster

    Returns:
        The averaged corner color, or None when there is no single backdrop
        (tiny image, transparent corners, mismatched corners, or the color
        also covers the center and is therefore the logo's own fill).
    """
    h, w = image.shape[:2]
    sample = min(MAX_CORNER_SAMPLE, min(w, h) // 10)
    if sample < MIN_CORNER_SAMPLE:
        logger.debug("Image %dx%d too small to sample corners", w, h)
        return None

    corners = sample_corners(image, sample)

    mean_alpha = float(np.mean([c[3] for c in corners]))
    if mean_alpha < 128:
        logger.debug("Corners already transparent (mean alpha %.1f)", mean_alpha)
        return None

    corner_colors = [_as_rgb(c) for c in corners]
    for i, first in enumerate(corner_colors):
        for second in corner_colors[i + 1:]:
            if not colors_match(first, second, DETECTION_TOLERANCE):
                logger.debug("Corner colors disagree: %s", corner_colors)
                return None

    candidate = _as_rgb(np.mean([c[:3] for c in corners], axis=0))

    center_size = max(1, min(2 * sample, min(w, h) // 4))
    center = _as_rgb(_region_mean(
        image, (h - center_size) // 2, (w - center_size) // 2, center_size
    ))
    if colors_match(center, candidate, DETECTION_TOLERANCE):
        logger.debug("Corner color %s also fills the center, keeping it", candidate)
        return None

    logger.debug("Detected background color %s", candidate)
    return candidate


def remove_background(
    image: np.ndarray,
    background_color: Optional[ColorLike] = None,
    tolerance: int = DEFAULT_TOLERANCE,
) -> np.ndarray:
    """
    Make the background color transparent.

    Args:
        image: RGB or RGBA raster
        background_color: Explicit color (hex or RGB); skips detection
        tolerance: Per-channel match tolerance

    Returns:
        New RGBA raster of the same size. Matching pixels become (0, 0, 0, 0),
        all others are kept as they were.
    """
    if background_color is not None:
        bg = parse_color(background_color)
    else:
        bg = detect_background_color(image)

    result = ensure_alpha(image)
    if bg is None:
        return result

    matched = match_mask(result, bg, tolerance)
    result[matched] = 0
    logger.debug(
        "Removed background %s: %d of %d pixels cleared",
        bg, int(matched.sum()), matched.size,
    )
    return result
