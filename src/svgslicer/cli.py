"""
Command-line interface for svgslicer.

Provides commands to turn SVG artwork or raster images into G-code and to
inspect the effective settings.
"""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from svgslicer import __version__
from svgslicer.core.config import HatchStyle, JobSettings, load_settings
from svgslicer.core.exceptions import SlicerError
from svgslicer.core.loaders import load_source
from svgslicer.core.logging import configure_logging
from svgslicer.pipeline import GenerationPipeline

# G-code may be written to stdout, so everything for humans goes to stderr
console = Console(stderr=True)


def _settings(settings_path: Optional[Path]) -> JobSettings:
    if settings_path is None:
        return JobSettings()
    return load_settings(settings_path)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Minimum log level",
)
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON lines")
def main(log_level: str, json_logs: bool) -> None:
    """svgslicer - SVG and image to G-code for pen plotters and 3D printers."""
    configure_logging(level=log_level, json_output=json_logs)


# =============================================================================
# Generation Commands
# =============================================================================


@main.command("generate")
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output G-code file (default: stdout)",
)
@click.option(
    "--settings",
    "-s",
    "settings_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML settings file",
)
@click.option("--plotter/--standard", "plotter_mode", default=None, help="Machine regime")
@click.option("--scale", type=float, help="XY scale (source units to mm)")
@click.option("--target-height", type=float, help="Print height in mm")
@click.option("--fill-density", type=float, help="Infill density in percent")
@click.option("--no-infill", is_flag=True, help="Skip scanline infill")
@click.option(
    "--hatch-style",
    type=click.Choice([s.value for s in HatchStyle]),
    help="Hatch preset for raster plotting",
)
@click.option("--prefix", help="Raw G-code inserted after the header")
def generate(
    input_path: Path,
    output: Optional[Path],
    settings_path: Optional[Path],
    plotter_mode: Optional[bool],
    scale: Optional[float],
    target_height: Optional[float],
    fill_density: Optional[float],
    no_infill: bool,
    hatch_style: Optional[str],
    prefix: Optional[str],
) -> None:
    """Generate G-code for an SVG or image file."""
    try:
        settings = _settings(settings_path).with_model_overrides(
            plotter_mode=plotter_mode,
            scale=scale,
            target_height=target_height,
            fill_density=fill_density,
            generate_infill=False if no_infill else None,
            hatch_style=hatch_style,
        )
        if prefix is not None:
            settings = settings.model_copy(update={"prefix": prefix})

        source = load_source(input_path)
        result = GenerationPipeline(settings).execute(source)
        if not result.success:
            raise result.error
    except SlicerError as e:
        console.print(f"[red]✗[/red] Generation failed: {e}")
        raise SystemExit(1)

    if output is None:
        sys.stdout.write(result.gcode)
    else:
        output.write_text(result.gcode)
        console.print(f"[green]✓[/green] Wrote {output}")

    toolpath = result.toolpath
    table = Table(title=f"G-code: {input_path.name}")
    table.add_column("Property", style="cyan")
    table.add_column("Value")
    table.add_row("Mode", result.job.kind.label)
    table.add_row("Layers", str(toolpath.total_layers))
    table.add_row("Segments", str(toolpath.segment_count()))
    table.add_row("Moves", str(result.program.move_count))
    table.add_row("Lines", str(result.program.line_count))
    table.add_row("Filament (mm)", f"{result.program.state.extrusion:.2f}")
    table.add_row("Time (s)", f"{sum(result.timings.values()):.3f}")
    console.print(table)


# =============================================================================
# Configuration Commands
# =============================================================================


@main.command("settings")
@click.option(
    "--settings",
    "-s",
    "settings_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML settings file",
)
def show_settings(settings_path: Optional[Path]) -> None:
    """Show the effective printer and model settings."""
    try:
        settings = _settings(settings_path)
    except SlicerError as e:
        console.print(f"[red]✗[/red] Failed to load settings: {e}")
        raise SystemExit(1)

    for title, section in (("Printer", settings.printer), ("Model", settings.model)):
        table = Table(title=title)
        table.add_column("Setting", style="cyan")
        table.add_column("Value")
        for name, value in section.model_dump(mode="json").items():
            table.add_row(name, str(value))
        console.print(table)

    if settings.prefix:
        console.print(f"Prefix: {settings.prefix!r}")


if __name__ == "__main__":
    main()
