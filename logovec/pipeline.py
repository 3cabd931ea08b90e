"""
Logovec Pipeline - raster logo to SVG.

Stages run strictly in order, each consuming the whole previous raster:

    decode -> remove background -> clean gradient edges (optional) -> trim
        -> upscale -> extract palette -> mask per color -> trace -> compose

Two sibling back ends share the remove/clean/trim front end:
``vectorize_colors`` (one traced layer per palette color) and
``trace_grayscale`` (black and white threshold trace, or posterized gray
layers when ``color_count > 2``).

Usage:
    from logovec import convert, ConvertOptions

    svg = convert(png_bytes, ConvertOptions(cleanup_level=2))
"""

import concurrent.futures
import dataclasses
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from .background import DEFAULT_TOLERANCE, remove_background
from .cleanup import clean_gradient_edges
from .colors import RGB, parse_color, rgb_to_hex
from .document import PathFragment, VectorDocument, compose_document
from .errors import ViewBoxMismatchError
from .palette import DEFAULT_PALETTE_TOLERANCE, build_color_mask, extract_unique_colors
from .raster import ImageSource, image_size, load_image, to_grayscale
from .tracing import DEFAULT_THRESHOLD, Tracer, TurnPolicy
from .trim import trim_alpha
from .upscale import MAX_DIMENSION, upscale_image

logger = logging.getLogger(__name__)


# ============================================================================
# OPTIONS
# ============================================================================

@dataclass
class ConvertOptions:
    """
    Every knob of a conversion.

    Defaults are the plain conversion with gradient cleanup off. The
    'balanced' preset differs only in turning cleanup on at level 1.
    """
    background_color: Optional[str] = None
    color_tolerance: int = DEFAULT_TOLERANCE
    palette_tolerance: int = DEFAULT_PALETTE_TOLERANCE
    max_colors: Optional[int] = None
    cleanup_level: int = 0
    preserve_colors: bool = True
    upscale: float = 2.0
    max_dimension: int = MAX_DIMENSION
    turn_policy: str = TurnPolicy.minority.value
    turd_size: int = 2
    alpha_max: float = 1.0
    opt_curve: bool = True
    opt_tolerance: float = 0.2
    threshold: int = DEFAULT_THRESHOLD
    invert: bool = False
    color_count: int = 2
    keep_source_size: bool = True
    max_workers: Optional[int] = None

    def __post_init__(self):
        if self.background_color is not None:
            self.background_color = rgb_to_hex(parse_color(self.background_color))
        self.turn_policy = TurnPolicy(self.turn_policy).value
        if self.upscale <= 0:
            raise ValueError(f"upscale must be positive, got {self.upscale}")
        if self.color_tolerance < 0 or self.palette_tolerance < 0:
            raise ValueError("Tolerances must not be negative")
        if self.cleanup_level < 0:
            raise ValueError(f"cleanup_level must not be negative, got {self.cleanup_level}")
        if self.color_count < 2:
            raise ValueError(f"color_count must be at least 2, got {self.color_count}")
        if not 0 <= self.threshold <= 255:
            raise ValueError(f"threshold must be within 0-255, got {self.threshold}")

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> 'ConvertOptions':
        """Build options from a mapping; keys may use hyphens or underscores."""
        known = {f.name for f in dataclasses.fields(cls)}
        normalized = {k.replace('-', '_'): v for k, v in values.items()}
        unknown = sorted(set(normalized) - known)
        if unknown:
            raise ValueError(f"Unknown option(s): {', '.join(unknown)}")
        return cls(**normalized)

    @classmethod
    def from_preset(cls, name: str, **overrides) -> 'ConvertOptions':
        """Options from a named preset with selected fields overridden."""
        values = dict(get_preset(name))
        values.update(overrides)
        return cls.from_dict(values)

    def replace(self, **changes) -> 'ConvertOptions':
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    def make_tracer(self, color: str = 'black', background: str = 'transparent') -> Tracer:
        return Tracer(
            turn_policy=self.turn_policy,
            turd_size=self.turd_size,
            alpha_max=self.alpha_max,
            opt_curve=self.opt_curve,
            opt_tolerance=self.opt_tolerance,
            threshold=DEFAULT_THRESHOLD,
            color=color,
            background=background,
        )


PRESETS = {
    "clean": {
        'cleanup_level': 2,
        'palette_tolerance': 32,
        'upscale': 2.0,
        'turd_size': 4,
        'alpha_max': 1.0,
        'opt_tolerance': 0.4,
    },
    "balanced": {
        'cleanup_level': 1,
        'palette_tolerance': 20,
        'upscale': 2.0,
        'turd_size': 2,
        'alpha_max': 1.0,
        'opt_tolerance': 0.2,
    },
    "detailed": {
        'cleanup_level': 0,
        'palette_tolerance': 12,
        'upscale': 4.0,
        'turd_size': 1,
        'alpha_max': 0.8,
        'opt_tolerance': 0.1,
    },
}

PRESET_DESCRIPTIONS = {
    "clean": "Aggressive edge cleanup and color merging for simple flat logos",
    "balanced": "Light cleanup, 2x upscale (recommended)",
    "detailed": "No cleanup, fine palette and 4x upscale for intricate marks",
}


def get_preset(name: str) -> Dict[str, Any]:
    """Settings of a named preset."""
    if name not in PRESETS:
        raise ValueError(f"Unknown preset: {name}. Available: {', '.join(PRESETS)}")
    return PRESETS[name].copy()


def load_config(path: Union[str, Path]) -> Dict[str, Any]:
    """Read option overrides from a JSON file."""
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")
    return data


# ============================================================================
# FRONT END
# ============================================================================

def prepare_image(image: np.ndarray, options: ConvertOptions) -> np.ndarray:
    """Remove the background, optionally clean its edges, and trim."""
    cleared = remove_background(image, options.background_color, options.color_tolerance)
    if options.cleanup_level > 0:
        cleared = clean_gradient_edges(cleared, options.cleanup_level)
    return trim_alpha(cleared)


# ============================================================================
# COLOR BRANCH
# ============================================================================

def _trace_all(
    tracer: Tracer,
    image: np.ndarray,
    palette: Sequence[RGB],
    tolerance: int,
    max_workers: Optional[int],
):
    # Serial runs build each mask only when its trace starts
    masks = (build_color_mask(image, color, tolerance) for color in palette)
    if max_workers and max_workers > 1 and len(palette) > 1:
        with concurrent.futures.ProcessPoolExecutor(max_workers=max_workers) as executor:
            # map() yields in submission order
            return list(executor.map(tracer.trace_mask, masks))
    return [tracer.trace_mask(mask) for mask in masks]


def trace_colors(
    image: np.ndarray,
    palette: Sequence[RGB],
    options: ConvertOptions,
    display_size: Tuple[int, int],
) -> VectorDocument:
    """
    Trace one layer per palette color and compose the document.

    Args:
        image: Trimmed (and possibly upscaled) RGBA raster
        palette: Colors in paint order
        options: Conversion options (tolerance and potrace settings)
        display_size: (width, height) the document is declared at

    Returns:
        VectorDocument whose viewBox is the traced coordinate space, or an
        empty document at ``display_size`` when nothing could be traced.

    Raises:
        TracingError: If potrace fails for any color
        ViewBoxMismatchError: If layers report different coordinate spaces
    """
    if not palette:
        logger.info("No opaque colors to trace")
        return compose_document([], display_size)

    tracer = options.make_tracer()
    results = _trace_all(tracer, image, palette, options.palette_tolerance, options.max_workers)

    fragments: List[PathFragment] = []
    view_box = None
    for color, result in zip(palette, results):
        if not result.path_data:
            logger.debug("Color %s produced no path", rgb_to_hex(color))
            continue
        if result.view_box is not None:
            if view_box is None:
                view_box = result.view_box
            elif tuple(result.view_box) != tuple(view_box):
                raise ViewBoxMismatchError(view_box, result.view_box)
        fragments.append(PathFragment(rgb_to_hex(color), result.path_data, result.view_box))

    if not fragments:
        logger.info("Every trace came back empty")
        return compose_document([], display_size)

    return compose_document(fragments, display_size, view_box or image_size(image))


def vectorize_colors(
    image: np.ndarray,
    options: ConvertOptions,
    display_size: Optional[Tuple[int, int]] = None,
) -> VectorDocument:
    """Color-preserving back end: upscale, extract palette, trace per color."""
    upscaled = upscale_image(image, options.upscale, options.max_dimension)
    if display_size is None:
        display_size = upscaled.original_size

    palette = extract_unique_colors(upscaled.image, options.palette_tolerance, options.max_colors)
    logger.info(
        "Tracing %d colors at %.2fx (%dx%d)",
        len(palette), upscaled.scale, upscaled.image.shape[1], upscaled.image.shape[0],
    )
    return trace_colors(upscaled.image, palette, options, display_size)


# ============================================================================
# GRAYSCALE BRANCH
# ============================================================================

def posterize_levels(gray: np.ndarray, threshold: int, steps: int):
    """
    Thresholds and fill opacities for a posterized trace.

    ``steps`` layers use thresholds ``threshold * (i + 1) / steps``. Layer i
    covers every pixel darker than its threshold. Painted from the lightest
    (largest) layer down, the stacked opacity over each band between two
    thresholds equals the band's mean darkness.

    Returns:
        List of (threshold, opacity) from darkest to lightest layer
    """
    thresholds = [threshold * (i + 1) / steps for i in range(steps)]
    darkness = []
    lower = 0.0
    for upper in thresholds:
        band = gray[(gray >= lower) & (gray < upper)]
        mean = float(band.mean()) if band.size else (lower + upper) / 2
        darkness.append(1.0 - mean / 255.0)
        lower = upper

    opacities = [0.0] * steps
    opacities[-1] = darkness[-1]
    for k in range(steps - 2, -1, -1):
        remaining = 1.0 - darkness[k + 1]
        opacity = 1.0 - (1.0 - darkness[k]) / remaining if remaining > 0 else 1.0
        opacities[k] = min(1.0, max(0.0, opacity))
    return list(zip(thresholds, opacities))


def trace_grayscale(
    image: np.ndarray,
    options: ConvertOptions,
    display_size: Optional[Tuple[int, int]] = None,
) -> VectorDocument:
    """
    Non-color-preserving back end.

    The trimmed raster is flattened onto white and reduced to luminance. With
    ``color_count`` 2 it is traced once at ``options.threshold``; above that
    it is posterized into ``color_count - 1`` stacked layers. ``invert``
    paints white shapes on a black backdrop.
    """
    width, height = image_size(image)
    if display_size is None:
        display_size = (width, height)

    gray = to_grayscale(image)
    fill, background = ('#ffffff', '#000000') if options.invert else ('#000000', None)
    tracer = options.make_tracer(color=fill)

    if options.color_count <= 2:
        levels = [(options.threshold, 1.0)]
    else:
        levels = posterize_levels(gray, options.threshold, options.color_count - 1)

    fragments: List[PathFragment] = []
    for threshold, opacity in reversed(levels):
        mask = np.where(gray < threshold, 0, 255).astype(np.uint8)
        result = tracer.trace_mask(mask)
        if result.path_data and opacity > 0:
            fragments.append(PathFragment(fill, result.path_data, result.view_box, opacity))

    logger.info("Grayscale trace produced %d layers", len(fragments))
    return compose_document(fragments, display_size, (width, height), background)


# ============================================================================
# ENTRY POINTS
# ============================================================================

Backend = Callable[[np.ndarray, ConvertOptions, Optional[Tuple[int, int]]], VectorDocument]


def select_branch(options: ConvertOptions) -> Backend:
    """Color-preserving or grayscale back end."""
    return vectorize_colors if options.preserve_colors else trace_grayscale


def convert_image(image: np.ndarray, options: Optional[ConvertOptions] = None) -> VectorDocument:
    """Run the full pipeline on a decoded RGB/RGBA raster."""
    options = options or ConvertOptions()
    source_size = image_size(image)

    trimmed = prepare_image(image, options)
    display_size = source_size if options.keep_source_size else image_size(trimmed)

    doc = select_branch(options)(trimmed, options, display_size)
    logger.info(
        "Converted %dx%d image into %d paths (viewBox %sx%s)",
        source_size[0], source_size[1], len(doc.fragments), doc.view_box[0], doc.view_box[1],
    )
    return doc


def convert(data: ImageSource, options: Optional[ConvertOptions] = None) -> str:
    """
    Convert raster image bytes (or a path) into SVG text.

    Raises:
        ImageLoadError: If the input cannot be decoded
        TracingError: If potrace fails
    """
    image = load_image(data)
    return convert_image(image, options).to_svg()


def convert_file(
    input_path: Union[str, Path],
    output_path: Optional[Union[str, Path]] = None,
    options: Optional[ConvertOptions] = None,
) -> Path:
    """Convert an image file, writing ``<input>.svg`` unless told otherwise."""
    input_path = Path(input_path)
    output_path = Path(output_path) if output_path else input_path.with_suffix('.svg')
    svg = convert(input_path, options)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(svg, encoding='utf-8')
    logger.info("Saved %s (%d bytes)", output_path, len(svg))
    return output_path
