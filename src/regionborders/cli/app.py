"""CLI application entry point for regionborders.

This module provides the main CLI interface using Typer.
"""

import os
import time
from collections.abc import Callable
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from regionborders import __version__
from regionborders.cli.output import (
    console,
    create_progress,
    print_artifact_success,
    print_cancellation_notice,
    print_cancellation_summary,
    print_contours_found,
    print_error,
    print_extract_success,
    print_header,
    print_map_info,
    print_processing_info,
    print_step,
)
from regionborders.config import (
    DistanceFieldConfig,
    LocatorKind,
    LoggingConfig,
    OutputConfig,
    OverlayConfig,
    ProcessingConfig,
    ProjectionConfig,
    RegionBordersSettings,
    TracerConfig,
)
from regionborders.core import BorderProcessor
from regionborders.exceptions import (
    ArtifactSaveError,
    ImageLoadError,
    MeshLoadError,
    RegionBordersError,
)

# Create the Typer app
app = typer.Typer(
    name="regionborders",
    help="Derive border polylines, overlays and distance fields from region ID maps.",
    add_completion=False,
    no_args_is_help=True,
)

InputMap = Annotated[
    Path,
    typer.Argument(
        help="Path to the region ID map image",
        show_default=False,
    ),
]
LogFile = Annotated[
    Path | None,
    typer.Option(
        "--log-file",
        help="Write detailed logs to file",
    ),
]
LogLevel = Annotated[
    str,
    typer.Option(
        "--log-level",
        help="Logging level (DEBUG|INFO|WARNING|ERROR)",
    ),
]
Verbose = Annotated[
    bool,
    typer.Option(
        "--verbose",
        "-v",
        help="Verbose console output",
    ),
]
Quiet = Annotated[
    bool,
    typer.Option(
        "--quiet",
        "-q",
        help="Minimal console output",
    ),
]
MinLength = Annotated[
    int,
    typer.Option(
        "--min-length",
        "-m",
        help="Discard contours with this many points or fewer",
        min=0,
    ),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Region Borders[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Derive border artefacts from region ID maps."""


def _validate_common(input_map: Path, verbose: bool, quiet: bool) -> None:
    """Validate options shared by every command."""
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    if not input_map.exists():
        print_error(
            f"Input file not found: {input_map}",
            details=f"The file '{input_map}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    if not input_map.is_file():
        print_error(
            f"Input path is not a file: {input_map}",
            details="Please provide a path to an ID map image.",
        )
        raise typer.Exit(code=1)


def _logging_config(log_file: Path | None, log_level: str, quiet: bool) -> LoggingConfig:
    return LoggingConfig(log_file=log_file, log_level=log_level if not quiet else "ERROR")


def _run_guarded(action: Callable[[], None]) -> None:
    """Run a command body, mapping errors to exit codes."""
    try:
        action()
    except ImageLoadError as e:
        print_error(f"Could not load ID map: {e.reason}")
        raise typer.Exit(code=1)
    except MeshLoadError as e:
        print_error(f"Could not load mesh: {e.reason}")
        raise typer.Exit(code=1)
    except ArtifactSaveError as e:
        print_error(
            "Could not save output",
            details="\n  ".join(f"{path}: {reason}" for path, reason in e.failures),
        )
        raise typer.Exit(code=1)
    except RegionBordersError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        # Re-raise typer.Exit to allow clean exits
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)


@app.command()
def info(
    input_map: InputMap,
    min_length: MinLength = 10,
    log_file: LogFile = None,
    log_level: LogLevel = "WARNING",
    quiet: Quiet = False,
) -> None:
    """Trace the ID map and list the border contours found."""
    _validate_common(input_map, False, quiet)

    settings = RegionBordersSettings(
        tracer=TracerConfig(min_contour_length=min_length),
        logging=_logging_config(log_file, log_level, quiet),
    )

    def action() -> None:
        if not quiet:
            print_header(__version__)
            print_step("Loading ID map")

        processor = BorderProcessor(settings)
        grid = processor.load_grid(input_map)

        if not quiet:
            print_map_info(str(input_map), grid.width, grid.height)
            print_step("Tracing contours")

        contours = processor.trace(grid)
        if quiet:
            console.print(str(len(contours)))
        else:
            print_contours_found(contours, verbose=True)

    _run_guarded(action)


@app.command()
def extract(
    input_map: InputMap,
    mesh: Annotated[
        Path,
        typer.Option(
            "--mesh",
            "-M",
            help="UV-mapped mesh (OBJ/PLY/GLB or .npz with vertices, uvs, triangles)",
            show_default=False,
        ),
    ],
    output_dir: Annotated[
        Path,
        typer.Option(
            "--output-dir",
            "-o",
            help="Directory for border polyline files",
        ),
    ] = Path("BorderData"),
    prefix: Annotated[
        str,
        typer.Option(
            "--prefix",
            help="File name prefix for border files",
        ),
    ] = "Border",
    min_length: MinLength = 10,
    locator: Annotated[
        str,
        typer.Option(
            "--locator",
            help="Triangle lookup strategy (linear|grid)",
        ),
    ] = "linear",
    scale: Annotated[
        float,
        typer.Option(
            "--scale",
            help="Uniform scale applied to the mesh",
        ),
    ] = 1.0,
    workers: Annotated[
        int | None,
        typer.Option(
            "--workers",
            "-j",
            help="Number of parallel workers (default: auto)",
            min=1,
        ),
    ] = None,
    log_file: LogFile = None,
    log_level: LogLevel = "WARNING",
    verbose: Verbose = False,
    quiet: Quiet = False,
) -> None:
    """Trace border contours and project them onto a globe mesh."""
    _validate_common(input_map, verbose, quiet)

    try:
        locator_kind = LocatorKind(locator.lower())
    except ValueError:
        print_error(f"Invalid locator: {locator}", details="Valid values: linear, grid")
        raise typer.Exit(code=1)

    settings = RegionBordersSettings(
        tracer=TracerConfig(min_contour_length=min_length),
        projection=ProjectionConfig(locator=locator_kind, mesh_scale=(scale, scale, scale)),
        processing=ProcessingConfig(max_workers=workers),
        output=OutputConfig(output_dir=output_dir, border_prefix=prefix),
        logging=_logging_config(log_file, log_level, quiet),
    )

    def action() -> None:
        if not quiet:
            print_header(__version__)
            actual_workers = workers if workers else os.cpu_count() or 1
            print_step("Extracting borders")
            print_processing_info(actual_workers, is_auto=(workers is None))

        processor = BorderProcessor(settings)

        try:
            if not quiet:
                with create_progress() as progress:
                    task_id = progress.add_task("Projecting contours", total=None)

                    def update_progress(completed: int, total: int) -> None:
                        progress.update(task_id, completed=completed, total=total)

                    result = processor.run_extract(
                        input_map, mesh, output_dir, progress_callback=update_progress
                    )
            else:
                result = processor.run_extract(input_map, mesh, output_dir)
        except KeyboardInterrupt:
            if not quiet:
                stats = processor.processing_logger.stats
                print_cancellation_notice()
                print_cancellation_summary(
                    processed=stats.contours_projected,
                    cancelled=stats.cancelled_count,
                )
            raise typer.Exit(code=130) from None  # Standard Unix SIGINT exit code

        if not quiet:
            stats = result.stats
            if verbose:
                print_contours_found(result.contours, verbose=True)
            print_extract_success(
                output_dir=str(output_dir),
                total_time_s=stats.duration_seconds,
                polylines=len(result.polylines),
                dropped=stats.polylines_dropped,
                errors=stats.error_count,
                avg_time_ms=stats.avg_contour_time_ms,
                min_time_ms=stats.min_contour_time_ms,
                max_time_ms=stats.max_contour_time_ms,
            )

    _run_guarded(action)


@app.command()
def overlay(
    input_map: InputMap,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path (default: {name}-borders.png)",
        ),
    ] = None,
    thickness: Annotated[
        float,
        typer.Option(
            "--thickness",
            "-t",
            help="Line thickness in pixels (0.5-10)",
            min=0.5,
            max=10.0,
        ),
    ] = 1.5,
    color: Annotated[
        str,
        typer.Option(
            "--color",
            "-c",
            help="Line colour as hex RGB",
        ),
    ] = "#000000",
    log_file: LogFile = None,
    log_level: LogLevel = "WARNING",
    verbose: Verbose = False,
    quiet: Quiet = False,
) -> None:
    """Render an anti-aliased border overlay (PNG)."""
    _validate_common(input_map, verbose, quiet)

    try:
        overlay_config = OverlayConfig(line_thickness=thickness, line_color=color)
    except ValidationError:
        print_error(f"Invalid colour: {color}", details="Use a hex value like #1a2b3c")
        raise typer.Exit(code=1)

    settings = RegionBordersSettings(
        overlay=overlay_config,
        logging=_logging_config(log_file, log_level, quiet),
    )

    def action() -> None:
        if not quiet:
            print_header(__version__)
            print_step("Rendering overlay")

        start = time.time()
        processor = BorderProcessor(settings)
        _, output_path = processor.run_overlay(input_map, output)

        if not quiet:
            print_artifact_success(
                str(output_path), _format_file_size(output_path), time.time() - start
            )

    _run_guarded(action)


@app.command()
def sdf(
    input_map: InputMap,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path (default: {name}-sdf.tiff)",
        ),
    ] = None,
    spread: Annotated[
        int,
        typer.Option(
            "--spread",
            "-s",
            help="Distance in pixels mapped to 1.0 (8-128)",
            min=8,
            max=128,
        ),
    ] = 64,
    log_file: LogFile = None,
    log_level: LogLevel = "WARNING",
    verbose: Verbose = False,
    quiet: Quiet = False,
) -> None:
    """Build a border distance field with jump flooding (float TIFF)."""
    _validate_common(input_map, verbose, quiet)

    settings = RegionBordersSettings(
        distance=DistanceFieldConfig(spread=spread),
        logging=_logging_config(log_file, log_level, quiet),
    )

    def action() -> None:
        if not quiet:
            print_header(__version__)
            print_step("Building distance field")

        start = time.time()
        processor = BorderProcessor(settings)
        _, output_path = processor.run_distance_field(input_map, output)

        if not quiet:
            print_artifact_success(
                str(output_path), _format_file_size(output_path), time.time() - start
            )

    _run_guarded(action)


def _format_file_size(path: Path) -> str:
    """Format file size in human-readable form.

    Args:
        path: Path to file

    Returns:
        Human-readable file size (e.g., "428 KB")
    """
    try:
        size_bytes = path.stat().st_size
        if size_bytes < 1024:
            return f"{size_bytes} B"
        elif size_bytes < 1024 * 1024:
            return f"{size_bytes / 1024:.0f} KB"
        else:
            return f"{size_bytes / (1024 * 1024):.1f} MB"
    except OSError:
        return "unknown"


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
