"""
Logovec - Raster Logo to SVG Conversion

Logovec turns a bitmap logo (PNG, JPG) into a compact, color-preserving SVG:
it strips a flat background, cleans antialiasing halos, splits the artwork
into flat colors and traces each color layer with potrace.
"""

from .background import detect_background_color, remove_background
from .cleanup import clean_gradient_edges, find_dominant_color
from .document import PathFragment, VectorDocument, compose_document
from .errors import ImageLoadError, LogoVecError, TracingError, ViewBoxMismatchError
from .palette import build_color_mask, extract_unique_colors
from .pipeline import (
    ConvertOptions,
    PRESETS,
    convert,
    convert_file,
    convert_image,
    trace_colors,
    trace_grayscale,
    vectorize_colors,
)
from .tracing import Tracer, TurnPolicy, parse_trace_output
from .trim import trim_alpha
from .upscale import UpscaleResult, upscale_image

__version__ = "0.1.0"

__all__ = [
    # Pipeline
    'convert',
    'convert_file',
    'convert_image',
    'ConvertOptions',
    'PRESETS',
    'vectorize_colors',
    'trace_grayscale',
    'trace_colors',
    # Stages
    'detect_background_color',
    'remove_background',
    'clean_gradient_edges',
    'find_dominant_color',
    'trim_alpha',
    'upscale_image',
    'UpscaleResult',
    'extract_unique_colors',
    'build_color_mask',
    # Tracing and output
    'Tracer',
    'TurnPolicy',
    'parse_trace_output',
    'PathFragment',
    'VectorDocument',
    'compose_document',
    # Errors
    'LogoVecError',
    'ImageLoadError',
    'TracingError',
    'ViewBoxMismatchError',
]
