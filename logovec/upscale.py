"""
Logovec Upscaling.

Tracing a larger raster gives potrace more pixels per edge. The document keeps
the pre-upscale size as its display size, so the extra resolution only ends
up in the viewBox.
"""

import logging
from typing import NamedTuple, Tuple

import numpy as np

from .raster import image_size, resize

logger = logging.getLogger(__name__)

MAX_DIMENSION = 4000


class UpscaleResult(NamedTuple):
    image: np.ndarray
    scale: float
    original_size: Tuple[int, int]


def effective_scale(width: int, height: int, factor: float, max_dimension: int = MAX_DIMENSION) -> float:
    """Scale factor after capping the long side at ``max_dimension``."""
    longest = max(width, height)
    if longest * factor > max_dimension:
        return max_dimension / longest
    return factor


def upscale_image(
    image: np.ndarray,
    factor: float,
    max_dimension: int = MAX_DIMENSION,
    kernel: str = 'lanczos',
) -> UpscaleResult:
    """
    Enlarge a raster by ``factor`` with a high quality kernel.

    Args:
        image: Raster to enlarge
        factor: Requested scale factor
        max_dimension: Ceiling for the long side of the result
        kernel: Resampling kernel name (see ``raster.RESAMPLING_KERNELS``)

    Returns:
        UpscaleResult with the new raster, the scale actually applied and the
        original (width, height). A scale of 1 or less leaves the raster as is.
    """
    if factor <= 0:
        raise ValueError(f"Upscale factor must be positive, got {factor}")

    width, height = image_size(image)
    scale = effective_scale(width, height, factor, max_dimension)
    if scale <= 1:
        return UpscaleResult(image.copy(), 1.0, (width, height))

    new_width = max(1, int(round(width * scale)))
    new_height = max(1, int(round(height * scale)))
    logger.debug("Upscaling %dx%d by %.3f to %dx%d", width, height, scale, new_width, new_height)
    return UpscaleResult(resize(image, new_width, new_height, kernel), scale, (width, height))
