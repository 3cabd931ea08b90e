"""
Logovec CLI - convert raster logos to SVG from the command line.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Optional, Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich import box

from .background import detect_background_color, remove_background
from .colors import rgb_to_hex
from .errors import LogoVecError
from .palette import color_histogram, extract_unique_colors
from .pipeline import (
    ConvertOptions,
    PRESETS,
    PRESET_DESCRIPTIONS,
    convert_image,
    load_config,
    prepare_image,
)
from .raster import load_image
from .tracing import TurnPolicy

app = typer.Typer(
    name="logovec",
    help="🎨 [bold cyan]Logovec[/] - Raster logo to SVG conversion\n\n"
         "Strips flat backgrounds, separates flat colors and traces each one.",
    rich_markup_mode="rich",
    add_completion=False,
    no_args_is_help=True,
    pretty_exceptions_show_locals=False,
)

console = Console()
error_console = Console(stderr=True, style="bold red")

SUPPORTED_FORMATS = {'.png', '.jpg', '.jpeg', '.bmp', '.gif', '.tiff', '.tif', '.webp'}


class Preset(str, Enum):
    """Named option presets."""
    clean = "clean"
    balanced = "balanced"
    detailed = "detailed"


def setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def version_callback(value: bool):
    """Show version and exit."""
    if value:
        from logovec import __version__
        console.print(f"[bold cyan]Logovec[/] version [bold green]{__version__}[/]")
        raise typer.Exit()


def validate_input_file(path: Path) -> Path:
    """Validate that input file exists and is a supported image format."""
    if not path.exists():
        error_console.print(f"❌ Input file not found: [yellow]{path}[/]")
        raise typer.Exit(1)

    if path.suffix.lower() not in SUPPORTED_FORMATS:
        error_console.print(
            f"❌ Unsupported format: [yellow]{path.suffix}[/]\n"
            f"   Supported formats: {', '.join(sorted(SUPPORTED_FORMATS))}"
        )
        raise typer.Exit(1)

    return path


def validate_output_file(path: Path) -> Path:
    """Force an .svg suffix and create the parent directory."""
    if path.suffix.lower() != '.svg':
        path = path.with_suffix('.svg')
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def format_size(size_bytes: int) -> str:
    if size_bytes < 1024:
        return f"{size_bytes} B"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    return f"{size_bytes / (1024 * 1024):.2f} MB"


def color_swatch(hex_color: str) -> Text:
    text = Text("██ ", style=hex_color)
    text.append(hex_color)
    return text


def build_options(preset: Optional[Preset], config: Optional[Path], **flags) -> ConvertOptions:
    """Layer options: defaults < preset < config file < command-line flags."""
    values = {}
    if preset is not None:
        values.update(PRESETS[preset.value])
    if config is not None:
        values.update(load_config(config))
    values.update({k: v for k, v in flags.items() if v is not None})
    return ConvertOptions.from_dict(values)


@app.command("convert", rich_help_panel="Commands")
def convert(
    input_file: Annotated[
        Path,
        typer.Argument(help="Path to input image (PNG, JPG, etc.)", show_default=False),
    ],
    output_file: Annotated[
        Optional[Path],
        typer.Argument(help="Path for output SVG [dim](default: input_name.svg)[/]", show_default=False),
    ] = None,
    preset: Annotated[
        Optional[Preset],
        typer.Option("--preset", "-p", help="Option preset", rich_help_panel="Configuration"),
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", help="JSON file with option overrides", rich_help_panel="Configuration"),
    ] = None,
    background: Annotated[
        Optional[str],
        typer.Option("--background", "-b", help="Background color to remove (hex). Auto-detect if not set.",
                     rich_help_panel="Background"),
    ] = None,
    tolerance: Annotated[
        Optional[int],
        typer.Option("--tolerance", "-t", min=0, max=255, help="Background match tolerance",
                     rich_help_panel="Background"),
    ] = None,
    cleanup: Annotated[
        Optional[int],
        typer.Option("--cleanup", min=0, max=10, help="Gradient edge cleanup level (0 disables)",
                     rich_help_panel="Background"),
    ] = None,
    palette_tolerance: Annotated[
        Optional[int],
        typer.Option("--palette-tolerance", min=0, max=255, help="Tolerance for merging similar colors",
                     rich_help_panel="Colors"),
    ] = None,
    max_colors: Annotated[
        Optional[int],
        typer.Option("--max-colors", min=1, help="Cap on traced colors", rich_help_panel="Colors"),
    ] = None,
    grayscale: Annotated[
        bool,
        typer.Option("--grayscale", "-g", help="Trace a grayscale rendering instead of colors",
                     rich_help_panel="Colors"),
    ] = False,
    colors: Annotated[
        Optional[int],
        typer.Option("--colors", "-c", min=2, max=256, help="Gray levels in grayscale mode (>2 posterizes)",
                     rich_help_panel="Colors"),
    ] = None,
    threshold: Annotated[
        Optional[int],
        typer.Option("--threshold", min=0, max=255, help="Black/white threshold in grayscale mode",
                     rich_help_panel="Colors"),
    ] = None,
    invert: Annotated[
        bool,
        typer.Option("--invert", help="White shapes on black in grayscale mode", rich_help_panel="Colors"),
    ] = False,
    upscale: Annotated[
        Optional[float],
        typer.Option("--upscale", "-u", min=0.1, help="Upscale factor before tracing", rich_help_panel="Tracing"),
    ] = None,
    turn_policy: Annotated[
        Optional[TurnPolicy],
        typer.Option("--turn-policy", help="Potrace ambiguity policy", rich_help_panel="Tracing"),
    ] = None,
    turd_size: Annotated[
        Optional[int],
        typer.Option("--turd-size", min=0, help="Suppress speckles up to this size", rich_help_panel="Tracing"),
    ] = None,
    alpha_max: Annotated[
        Optional[float],
        typer.Option("--alpha-max", min=0.0, max=1.3334, help="Corner threshold", rich_help_panel="Tracing"),
    ] = None,
    opt_tolerance: Annotated[
        Optional[float],
        typer.Option("--opt-tolerance", min=0.0, help="Curve optimization tolerance", rich_help_panel="Tracing"),
    ] = None,
    workers: Annotated[
        Optional[int],
        typer.Option("--workers", "-w", min=1, help="Trace colors in parallel processes", rich_help_panel="Tracing"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show detailed progress information"),
    ] = False,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite output file if it exists"),
    ] = False,
):
    """
    🖼️  Convert a raster logo to SVG.

    [bold]Examples:[/]

      [dim]# Auto-detect background, keep colors[/]
      $ logovec convert logo.png

      [dim]# Explicit white background, clean antialiased edges[/]
      $ logovec convert logo.jpg out.svg -b "#ffffff" --cleanup 2

      [dim]# Single color trace[/]
      $ logovec convert logo.png --grayscale
    """
    setup_logging(verbose)
    input_path = validate_input_file(input_file)
    if output_file is None:
        output_file = input_path.with_suffix('.svg')
    output_path = validate_output_file(output_file)

    if output_path.exists() and not force:
        overwrite = typer.confirm(f"Output file {output_path} already exists. Overwrite?", default=False)
        if not overwrite:
            console.print("[yellow]Operation cancelled.[/]")
            raise typer.Exit(0)

    try:
        options = build_options(
            preset,
            config,
            background_color=background,
            color_tolerance=tolerance,
            cleanup_level=cleanup,
            palette_tolerance=palette_tolerance,
            max_colors=max_colors,
            preserve_colors=False if grayscale else None,
            color_count=colors,
            threshold=threshold,
            invert=True if invert else None,
            upscale=upscale,
            turn_policy=turn_policy.value if turn_policy else None,
            turd_size=turd_size,
            alpha_max=alpha_max,
            opt_tolerance=opt_tolerance,
            max_workers=workers,
        )
    except (ValueError, OSError) as e:
        error_console.print(f"❌ Invalid options: {e}")
        raise typer.Exit(1)

    try:
        with console.status("[cyan]Vectorizing logo...[/]"):
            image = load_image(input_path)
            doc = convert_image(image, options)
            svg = doc.to_svg()
            output_path.write_text(svg, encoding='utf-8')
    except LogoVecError as e:
        error_console.print(f"❌ Conversion failed: {e}")
        if verbose:
            console.print_exception()
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]⚠️ Operation cancelled by user.[/]")
        raise typer.Exit(130)

    result_table = Table(box=box.ROUNDED, show_header=False, border_style="green")
    result_table.add_column("Property", style="cyan")
    result_table.add_column("Value")
    result_table.add_row("📁 Input", str(input_path))
    result_table.add_row("📄 Output", str(output_path))
    result_table.add_row("🔧 Mode", "Color layers" if options.preserve_colors else "Grayscale")
    result_table.add_row("📐 Size", f"{doc.width} × {doc.height}")
    result_table.add_row("🔍 ViewBox", f"{doc.view_box[0]:g} × {doc.view_box[1]:g}")
    result_table.add_row("🧩 Paths", str(len(doc.fragments)))
    result_table.add_row("💾 File Size", format_size(len(svg.encode('utf-8'))))

    title = "🎨 Conversion Complete" if not doc.is_empty else "⚠️ Nothing to trace"
    console.print(Panel(result_table, title=title, border_style="green" if not doc.is_empty else "yellow"))


@app.command("info", rich_help_panel="Commands")
def info(
    input_file: Annotated[Path, typer.Argument(help="Path to input image", show_default=False)],
    background: Annotated[
        Optional[str],
        typer.Option("--background", "-b", help="Background color to remove (hex)"),
    ] = None,
    palette_tolerance: Annotated[
        int,
        typer.Option("--palette-tolerance", min=0, max=255, help="Tolerance for merging similar colors"),
    ] = 20,
):
    """
    📊 Show the detected background and the palette that would be traced.
    """
    input_path = validate_input_file(input_file)
    try:
        image = load_image(input_path)
        options = ConvertOptions(background_color=background, palette_tolerance=palette_tolerance)
    except (LogoVecError, ValueError) as e:
        error_console.print(f"❌ {e}")
        raise typer.Exit(1)

    detected = detect_background_color(image)
    distinct, _ = color_histogram(remove_background(image, options.background_color))
    trimmed = prepare_image(image, options)
    palette = extract_unique_colors(trimmed, options.palette_tolerance)

    table = Table(box=box.ROUNDED, show_header=False, border_style="cyan")
    table.add_column("Property", style="bold")
    table.add_column("Value")
    table.add_row("Dimensions", f"{image.shape[1]} × {image.shape[0]}")
    table.add_row("Channels", "RGBA" if image.shape[2] == 4 else "RGB")
    table.add_row("Detected background", color_swatch(rgb_to_hex(detected)) if detected else Text("none"))
    if background:
        table.add_row("Explicit background", color_swatch(options.background_color))
    table.add_row("Trimmed size", f"{trimmed.shape[1]} × {trimmed.shape[0]}")
    table.add_row("Distinct opaque colors", str(len(distinct)))
    table.add_row("Palette", str(len(palette)))
    console.print(Panel(table, title=f"📊 {input_path.name}", border_style="cyan"))

    if palette:
        palette_table = Table(box=box.SIMPLE, header_style="bold cyan")
        palette_table.add_column("#", justify="right")
        palette_table.add_column("Color")
        for i, color in enumerate(palette, 1):
            palette_table.add_row(str(i), color_swatch(rgb_to_hex(color)))
        console.print(palette_table)


@app.command("presets", rich_help_panel="Utilities")
def presets():
    """📋 List option presets."""
    table = Table(box=box.ROUNDED, header_style="bold cyan")
    table.add_column("Preset", style="bold")
    table.add_column("Settings")
    table.add_column("Description", style="dim")
    for name, settings in PRESETS.items():
        table.add_row(
            name,
            ", ".join(f"{k}={v}" for k, v in settings.items()),
            PRESET_DESCRIPTIONS.get(name, ""),
        )
    console.print(table)


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", "-V", help="Show version and exit.", callback=version_callback, is_eager=True),
    ] = None,
):
    """
    🎨 [bold cyan]Logovec[/] - Raster logo to SVG conversion
    """


def run():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
