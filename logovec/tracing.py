"""
Logovec Tracing - potrace adapter.

``Tracer`` turns a binary mask (0 = shape, 255 = background) into a small SVG
document holding one compound path and a viewBox, the same shape of output
node-potrace and the potrace CLI produce. ``parse_trace_output`` reads the
path geometry and coordinate space back out of such a document.
"""

import logging
import xml.etree.ElementTree as ET
from enum import Enum
from typing import List, NamedTuple, Optional, Tuple

import numpy as np
import potrace
import svgwrite

from .errors import TracingError

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 128


class TurnPolicy(str, Enum):
    """How potrace resolves ambiguous pixel corners."""
    black = "black"
    white = "white"
    left = "left"
    right = "right"
    minority = "minority"
    majority = "majority"


_POTRACE_POLICIES = {
    TurnPolicy.black: potrace.POTRACE_TURNPOLICY_BLACK,
    TurnPolicy.white: potrace.POTRACE_TURNPOLICY_WHITE,
    TurnPolicy.left: potrace.POTRACE_TURNPOLICY_LEFT,
    TurnPolicy.right: potrace.POTRACE_TURNPOLICY_RIGHT,
    TurnPolicy.minority: potrace.POTRACE_TURNPOLICY_MINORITY,
    TurnPolicy.majority: potrace.POTRACE_TURNPOLICY_MAJORITY,
}


class TraceResult(NamedTuple):
    path_data: str
    view_box: Optional[Tuple[float, float]]


def _fmt(value: float) -> str:
    text = f"{value:.3f}".rstrip('0').rstrip('.')
    return '0' if text in ('-0', '') else text


def _point(p) -> str:
    return f"{_fmt(p.x)} {_fmt(p.y)}"


def curves_to_path_data(curves) -> str:
    """SVG path data for potrace curves; one closed subpath per curve."""
    parts: List[str] = []
    for curve in curves:
        parts.append(f"M {_point(curve.start_point)}")
        for segment in curve:
            if segment.is_corner:
                parts.append(f"L {_point(segment.c)} L {_point(segment.end_point)}")
            else:
                parts.append(
                    f"C {_point(segment.c1)}, {_point(segment.c2)}, {_point(segment.end_point)}"
                )
        parts.append("Z")
    return " ".join(parts)


class Tracer:
    """
    Potrace wrapper.

    Args:
        turn_policy: Ambiguity resolution (see ``TurnPolicy``)
        turd_size: Speckles up to this many pixels are suppressed
        alpha_max: Corner threshold, 0 (sharp polygons) to 1.3334 (no corners)
        opt_curve: Join adjacent Bezier segments
        opt_tolerance: Error allowed when joining segments
        threshold: Mask values below this are foreground
        color: Fill of the traced shape
        background: 'transparent' or a fill color for a backdrop rect
    """

    def __init__(
        self,
        turn_policy="minority",
        turd_size: int = 2,
        alpha_max: float = 1.0,
        opt_curve: bool = True,
        opt_tolerance: float = 0.2,
        threshold: int = DEFAULT_THRESHOLD,
        color: str = "black",
        background: str = "transparent",
    ):
        try:
            self.turn_policy = TurnPolicy(turn_policy)
        except ValueError:
            raise ValueError(
                f"Unknown turn policy: {turn_policy}. "
                f"Available: {', '.join(p.value for p in TurnPolicy)}"
            ) from None
        if not 0 <= alpha_max <= 1.3334:
            raise ValueError(f"alpha_max must be within 0-1.3334, got {alpha_max}")
        self.turd_size = turd_size
        self.alpha_max = alpha_max
        self.opt_curve = opt_curve
        self.opt_tolerance = opt_tolerance
        self.threshold = threshold
        self.color = color
        self.background = background

    def trace_curves(self, mask: np.ndarray):
        """Run potrace on a mask and return its curves."""
        if mask.ndim != 2:
            raise ValueError(f"Expected a single-channel mask, got shape {mask.shape}")
        # potracer traces False pixels, so background must be True
        bitmap = potrace.Bitmap(mask >= self.threshold)
        try:
            path = bitmap.trace(
                turdsize=self.turd_size,
                turnpolicy=_POTRACE_POLICIES[self.turn_policy],
                alphamax=self.alpha_max,
                opticurve=self.opt_curve,
                opttolerance=self.opt_tolerance,
            )
        except Exception as e:
            raise TracingError(f"potrace failed: {e}") from e
        return path.curves

    def trace(self, mask: np.ndarray) -> str:
        """
        Trace a mask into an SVG document.

        The document's viewBox is the mask size; the path is omitted when
        nothing was traced.
        """
        height, width = mask.shape[:2]
        path_data = curves_to_path_data(self.trace_curves(mask))

        dwg = svgwrite.Drawing(size=(width, height), profile='full', debug=False)
        dwg.viewbox(0, 0, width, height)
        if self.background != 'transparent':
            dwg.add(dwg.rect(insert=(0, 0), size=(width, height), fill=self.background))
        if path_data:
            dwg.add(dwg.path(d=path_data, fill=self.color, stroke='none', fill_rule='evenodd'))

        logger.debug("Traced %dx%d mask into %d bytes of path data", width, height, len(path_data))
        return dwg.tostring()

    def trace_mask(self, mask: np.ndarray) -> TraceResult:
        """``trace`` followed by ``parse_trace_output``."""
        return parse_trace_output(self.trace(mask))


def _parse_view_box(value: str) -> Tuple[float, float]:
    numbers = [float(v) for v in value.replace(',', ' ').split()]
    if len(numbers) != 4:
        raise TracingError(f"Malformed viewBox: {value!r}")
    return numbers[2], numbers[3]


def _parse_length(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    try:
        return float(value.strip().rstrip('px'))
    except ValueError:
        return None


def parse_trace_output(svg: str) -> TraceResult:
    """
    Pull the first path's geometry and the viewBox size out of a trace.

    Falls back to the root width/height when there is no viewBox. Path data
    is returned verbatim, or as an empty string if the trace has no path.

    Raises:
        TracingError: If the output is not well-formed SVG
    """
    try:
        root = ET.fromstring(svg)
    except ET.ParseError as e:
        raise TracingError(f"Unreadable trace output: {e}") from e

    view_box = None
    if root.get('viewBox'):
        view_box = _parse_view_box(root.get('viewBox'))
    else:
        width, height = _parse_length(root.get('width')), _parse_length(root.get('height'))
        if width is not None and height is not None:
            view_box = (width, height)

    path_data = ''
    for element in root.iter():
        if element.tag.split('}')[-1] == 'path':
            path_data = (element.get('d') or '').strip()
            break

    return TraceResult(path_data, view_box)
