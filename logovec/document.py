"""
Logovec Document Module - assemble and serialize the output SVG.

Display size and viewBox differ: paths are traced on an upscaled raster and
the viewBox maps them back onto the declared width and height.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import svgwrite

logger = logging.getLogger(__name__)

Size = Tuple[float, float]


@dataclass
class PathFragment:
    color: str
    path_data: str
    view_box: Optional[Size] = None
    opacity: float = 1.0


@dataclass
class VectorDocument:
    """Terminal artifact of a conversion."""
    width: int
    height: int
    view_box: Size
    fragments: List[PathFragment] = field(default_factory=list)
    background: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.fragments

    @property
    def colors(self) -> List[str]:
        return [f.color for f in self.fragments]

    def to_svg(self) -> str:
        """Serialize as an SVG string."""
        dwg = svgwrite.Drawing(size=(self.width, self.height), profile='full', debug=False)
        dwg.viewbox(0, 0, _number(self.view_box[0]), _number(self.view_box[1]))

        if self.background:
            dwg.add(dwg.rect(insert=(0, 0), size=self.view_box, fill=self.background))

        for fragment in self.fragments:
            attrs = {'d': fragment.path_data, 'fill': fragment.color, 'fill_rule': 'evenodd'}
            if fragment.opacity < 1.0:
                attrs['fill_opacity'] = round(fragment.opacity, 4)
            dwg.add(dwg.path(**attrs))

        return dwg.tostring()


def _number(value: float):
    return int(value) if float(value).is_integer() else value


def compose_document(
    fragments: Sequence[PathFragment],
    display_size: Tuple[int, int],
    view_box: Optional[Size] = None,
    background: Optional[str] = None,
) -> VectorDocument:
    """
    Build the final document.

    Args:
        fragments: Traced layers in paint order
        display_size: (width, height) the logo is declared at
        view_box: Traced coordinate space; defaults to the display size
        background: Optional backdrop fill painted under all fragments

    Returns:
        VectorDocument with fragments kept in the given order
    """
    width, height = display_size
    if view_box is None:
        view_box = (width, height)
    doc = VectorDocument(int(width), int(height), view_box, list(fragments), background)
    logger.debug(
        "Composed %dx%d document, viewBox %sx%s, %d paths",
        doc.width, doc.height, view_box[0], view_box[1], len(doc.fragments),
    )
    return doc
