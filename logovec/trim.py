"""Logovec Alpha Trimming - crop away transparent margins."""

import logging

import numpy as np

from .raster import alpha_channel, crop

logger = logging.getLogger(__name__)

DEFAULT_MARGIN = 2


def content_bounds(image: np.ndarray):
    """
    Bounding box of pixels with alpha > 0.

    Returns:
        (left, top, right, bottom) inclusive, or None if nothing is visible
    """
    visible = alpha_channel(image) > 0
    rows = np.flatnonzero(visible.any(axis=1))
    if rows.size == 0:
        return None
    cols = np.flatnonzero(visible.any(axis=0))
    return int(cols[0]), int(rows[0]), int(cols[-1]), int(rows[-1])


def trim_alpha(image: np.ndarray, margin: int = DEFAULT_MARGIN) -> np.ndarray:
    """
    Crop to visible content plus ``margin`` pixels, clamped to the image.

    A fully transparent image is returned unchanged (as a copy).
    """
    bounds = content_bounds(image)
    if bounds is None:
        return image.copy()

    h, w = image.shape[:2]
    left, top, right, bottom = bounds
    left = max(0, left - margin)
    top = max(0, top - margin)
    right = min(w - 1, right + margin)
    bottom = min(h - 1, bottom + margin)

    trimmed = crop(image, left, top, right - left + 1, bottom - top + 1)
    logger.debug("Trimmed %dx%d to %dx%d", w, h, trimmed.shape[1], trimmed.shape[0])
    return trimmed
