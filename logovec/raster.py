"""
Logovec Raster I/O.

Thin wrappers around Pillow and OpenCV. Rasters are ``uint8`` NumPy arrays
shaped ``(height, width, channels)`` with 3 (RGB) or 4 (RGBA) channels.
Every helper returns a new array.
"""

import io
import logging
from pathlib import Path
from typing import Sequence, Tuple, Union

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from .errors import ImageLoadError

logger = logging.getLogger(__name__)

ImageSource = Union[bytes, bytearray, str, Path]

RESAMPLING_KERNELS = {
    'nearest': cv2.INTER_NEAREST,
    'linear': cv2.INTER_LINEAR,
    'cubic': cv2.INTER_CUBIC,
    'area': cv2.INTER_AREA,
    'lanczos': cv2.INTER_LANCZOS4,
}


def _has_alpha(img: Image.Image) -> bool:
    return img.mode in ('RGBA', 'LA', 'PA') or (
        img.mode == 'P' and 'transparency' in img.info
    )


def load_image(source: ImageSource) -> np.ndarray:
    """
    Decode image bytes or a file into an RGB or RGBA array.

    Images carrying transparency decode to RGBA, everything else to RGB.

    Raises:
        ImageLoadError: If the file is missing or the data is not an image
    """
    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.is_file():
            raise ImageLoadError(f"Could not load image: {path} does not exist")
        data = path.read_bytes()
    else:
        data = bytes(source)

    if not data:
        raise ImageLoadError("Could not load image: no data")

    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            mode = 'RGBA' if _has_alpha(img) else 'RGB'
            arr = np.array(img.convert(mode), dtype=np.uint8)
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise ImageLoadError(f"Could not decode image: {e}") from e

    logger.debug("Decoded %dx%d %s image", arr.shape[1], arr.shape[0], mode)
    return arr


def encode_png(image: np.ndarray) -> bytes:
    """Encode an RGB, RGBA or single-channel array as PNG bytes."""
    buf = io.BytesIO()
    Image.fromarray(np.ascontiguousarray(image)).save(buf, format='PNG')
    return buf.getvalue()


def image_size(image: np.ndarray) -> Tuple[int, int]:
    """(width, height) of a raster."""
    return image.shape[1], image.shape[0]


def ensure_alpha(image: np.ndarray) -> np.ndarray:
    """Return an RGBA copy, adding an opaque alpha channel when missing."""
    if image.ndim != 3 or image.shape[2] not in (3, 4):
        raise ValueError(f"Expected an RGB or RGBA raster, got shape {image.shape}")
    if image.shape[2] == 4:
        return image.copy()
    alpha = np.full(image.shape[:2] + (1,), 255, dtype=np.uint8)
    return np.concatenate([image, alpha], axis=2)


def alpha_channel(image: np.ndarray) -> np.ndarray:
    """Alpha plane of a raster; RGB rasters are fully opaque."""
    if image.shape[2] == 4:
        return image[:, :, 3]
    return np.full(image.shape[:2], 255, dtype=np.uint8)


def crop(image: np.ndarray, left: int, top: int, width: int, height: int) -> np.ndarray:
    """Copy out the rectangle starting at (left, top)."""
    return image[top:top + height, left:left + width].copy()


def resize(image: np.ndarray, width: int, height: int, kernel: str = 'lanczos') -> np.ndarray:
    """Resize with a named resampling kernel."""
    try:
        interpolation = RESAMPLING_KERNELS[kernel]
    except KeyError:
        raise ValueError(
            f"Unknown resampling kernel: {kernel}. "
            f"Available: {', '.join(RESAMPLING_KERNELS)}"
        ) from None
    size = (int(width), int(height))
    if image.ndim == 3 and image.shape[2] == 4:
        return _resize_premultiplied(image, size, interpolation)
    resized = cv2.resize(image, size, interpolation=interpolation)
    if resized.ndim == 2 and image.ndim == 3:
        resized = resized[:, :, np.newaxis]
    return resized


def _resize_premultiplied(image: np.ndarray, size: Tuple[int, int], interpolation: int) -> np.ndarray:
    """
    Resample RGBA in premultiplied space.

    Cleared (0, 0, 0, 0) pixels contribute no color to their neighbors.
    Pixels whose resampled alpha rounds to 0 come back as (0, 0, 0, 0).
    """
    rgba = image.astype(np.float32)
    rgba[:, :, :3] *= rgba[:, :, 3:4] / 255.0

    resized = cv2.resize(rgba, size, interpolation=interpolation)
    alpha = resized[:, :, 3:4]
    visible = alpha > 0.5
    safe_alpha = np.where(visible, alpha, 1.0)
    rgb = np.where(visible, resized[:, :, :3] * 255.0 / safe_alpha, 0.0)

    out = np.concatenate([rgb, alpha], axis=2)
    return np.clip(np.rint(out), 0, 255).astype(np.uint8)


def flatten(image: np.ndarray, background: Sequence[int] = (255, 255, 255)) -> np.ndarray:
    """Alpha-composite an RGBA raster over a solid color, returning RGB."""
    if image.shape[2] == 3:
        return image.copy()
    h, w = image.shape[:2]
    base = Image.new('RGBA', (w, h), tuple(int(c) for c in background[:3]) + (255,))
    composed = Image.alpha_composite(base, Image.fromarray(image, 'RGBA'))
    return np.array(composed.convert('RGB'), dtype=np.uint8)


def to_grayscale(image: np.ndarray, background: Sequence[int] = (255, 255, 255)) -> np.ndarray:
    """8-bit luminance of a raster after flattening transparency onto ``background``."""
    rgb = flatten(image, background)
    return np.array(Image.fromarray(rgb, 'RGB').convert('L'), dtype=np.uint8)
