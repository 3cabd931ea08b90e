"""
Tests for the logovec command line.
"""

import json
import xml.etree.ElementTree as ET

import pytest
from typer.testing import CliRunner

from logovec.cli import app

runner = CliRunner()


@pytest.fixture
def logo_file(tmp_path, square_on_white_png):
    path = tmp_path / 'logo.png'
    path.write_bytes(square_on_white_png)
    return path


class TestConvertCommand:
    """Test the convert command."""

    def test_writes_svg(self, logo_file):
        """Test that the SVG lands next to the input."""
        result = runner.invoke(app, ['convert', str(logo_file)])
        assert result.exit_code == 0, result.output
        output = logo_file.with_suffix('.svg')
        root = ET.fromstring(output.read_text())
        assert root.get('width') == '100'

    def test_explicit_output_gets_svg_suffix(self, logo_file, tmp_path):
        """Test that an output path is forced to .svg."""
        result = runner.invoke(app, ['convert', str(logo_file), str(tmp_path / 'out' / 'mark.txt')])
        assert result.exit_code == 0, result.output
        assert (tmp_path / 'out' / 'mark.svg').exists()

    def test_grayscale_invert(self, logo_file):
        """Test the inverted grayscale mode."""
        result = runner.invoke(app, ['convert', str(logo_file), '--grayscale', '--invert', '--force'])
        assert result.exit_code == 0, result.output
        svg = logo_file.with_suffix('.svg').read_text()
        assert '#ffffff' in svg

    def test_config_file(self, logo_file, tmp_path):
        """Test that a JSON config file is applied."""
        config = tmp_path / 'config.json'
        config.write_text(json.dumps({'keep_source_size': False}))
        result = runner.invoke(app, ['convert', str(logo_file), '--config', str(config), '--preset', 'clean'])
        assert result.exit_code == 0, result.output
        root = ET.fromstring(logo_file.with_suffix('.svg').read_text())
        assert root.get('width') == '44'

    def test_missing_input(self, tmp_path):
        """Test a nonexistent input file."""
        result = runner.invoke(app, ['convert', str(tmp_path / 'nope.png')])
        assert result.exit_code == 1

    def test_unsupported_format(self, tmp_path):
        """Test an input with an unsupported extension."""
        path = tmp_path / 'logo.svg'
        path.write_text('<svg/>')
        result = runner.invoke(app, ['convert', str(path)])
        assert result.exit_code == 1

    def test_invalid_background(self, logo_file):
        """Test an unparseable background color."""
        result = runner.invoke(app, ['convert', str(logo_file), '--background', 'zzz'])
        assert result.exit_code == 1

    def test_undecodable_image(self, tmp_path):
        """Test an input that is not an image."""
        path = tmp_path / 'broken.png'
        path.write_bytes(b'not a png')
        result = runner.invoke(app, ['convert', str(path)])
        assert result.exit_code == 1

    def test_declines_overwrite(self, logo_file):
        """Test that declining the prompt keeps the old output."""
        output = logo_file.with_suffix('.svg')
        output.write_text('keep me')
        result = runner.invoke(app, ['convert', str(logo_file)], input='n\n')
        assert result.exit_code == 0
        assert output.read_text() == 'keep me'


class TestOtherCommands:
    """Test the info, presets and version commands."""

    def test_info(self, logo_file):
        """Test that info reports background and palette."""
        result = runner.invoke(app, ['info', str(logo_file)])
        assert result.exit_code == 0, result.output
        assert '#ffffff' in result.output
        assert '#000000' in result.output

    def test_presets(self):
        """Test that every preset is listed."""
        result = runner.invoke(app, ['presets'])
        assert result.exit_code == 0
        for name in ('clean', 'balanced', 'detailed'):
            assert name in result.output

    def test_version(self):
        """Test the version flag."""
        from logovec import __version__
        result = runner.invoke(app, ['--version'])
        assert result.exit_code == 0
        assert __version__ in result.output
