"""
Tests for document composition and SVG output.
"""

import xml.etree.ElementTree as ET

from logovec.document import PathFragment, compose_document

SVG_NS = '{http://www.w3.org/2000/svg}'


def parse(svg):
    return ET.fromstring(svg)


def view_box(root):
    return root.get('viewBox').replace(',', ' ').split()


class TestComposeDocument:
    """Test document composition and serialization."""

    def test_sizes(self):
        """Test display size and viewBox attributes."""
        doc = compose_document([PathFragment('#000000', 'M 0 0 L 1 1 Z', (88, 88))], (100, 100), (88, 88))
        root = parse(doc.to_svg())
        assert root.get('width') == '100'
        assert root.get('height') == '100'
        assert view_box(root) == ['0', '0', '88', '88']

    def test_view_box_defaults_to_display_size(self):
        """Test the viewBox default."""
        doc = compose_document([], (50, 40))
        assert doc.view_box == (50, 40)
        assert doc.is_empty
        root = parse(doc.to_svg())
        assert view_box(root) == ['0', '0', '50', '40']
        assert root.find(f'{SVG_NS}path') is None

    def test_paths_in_order(self):
        """Test that paths keep their paint order."""
        fragments = [
            PathFragment('#ff0000', 'M 0 0 L 10 0 L 10 10 Z'),
            PathFragment('#0000ff', 'M 2 2 L 5 2 L 5 5 Z'),
        ]
        doc = compose_document(fragments, (10, 10), (20, 20))
        paths = parse(doc.to_svg()).findall(f'{SVG_NS}path')
        assert [p.get('fill') for p in paths] == ['#ff0000', '#0000ff']
        assert [p.get('d') for p in paths] == [f.path_data for f in fragments]
        assert all(p.get('fill-rule') == 'evenodd' for p in paths)
        assert doc.colors == ['#ff0000', '#0000ff']

    def test_fractional_view_box(self):
        """Test a non-integral viewBox."""
        doc = compose_document([], (10, 10), (12.5, 12.5))
        assert view_box(parse(doc.to_svg())) == ['0', '0', '12.5', '12.5']

    def test_opacity(self):
        """Test translucent fragments."""
        doc = compose_document([PathFragment('#000000', 'M 0 0 Z', opacity=0.25)], (5, 5))
        path = parse(doc.to_svg()).find(f'{SVG_NS}path')
        assert float(path.get('fill-opacity')) == 0.25

    def test_opaque_fragments_have_no_opacity(self):
        """Test that opaque fragments omit fill-opacity."""
        doc = compose_document([PathFragment('#000000', 'M 0 0 Z')], (5, 5))
        assert parse(doc.to_svg()).find(f'{SVG_NS}path').get('fill-opacity') is None

    def test_background_rect(self):
        """Test that the backdrop is painted first."""
        doc = compose_document([PathFragment('#ffffff', 'M 0 0 Z')], (5, 5), background='#000000')
        root = parse(doc.to_svg())
        rect = root.find(f'{SVG_NS}rect')
        assert rect is not None and rect.get('fill') == '#000000'
        tags = [child.tag for child in root]
        assert tags.index(f'{SVG_NS}rect') < tags.index(f'{SVG_NS}path')
