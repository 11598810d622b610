"""Console rendering for the regionborders CLI.

All terminal output of the commands goes through the Rich console defined
here: step markers, the map summary, the contour table, the projection
progress bar and the final summaries.
"""

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text

from regionborders.domain import Contour

console = Console()

MARK_STEP = "▸"
MARK_DONE = "✓"
MARK_FAIL = "✗"
SEP = "·"

# Rows shown by the contour table before it is cut off
MAX_TABLE_ROWS = 50


def create_progress() -> Progress:
    """Build the progress bar shown while contours are projected."""
    return Progress(
        TextColumn("  [dim]{task.description}[/dim]"),
        BarColumn(bar_width=36, complete_style="cyan", finished_style="green"),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def print_header(version: str) -> None:
    console.print(f"\n[bold]Region Borders[/bold] [dim]v{version}[/dim]")
    console.rule(style="dim")


def print_step(message: str) -> None:
    console.print(f"\n{MARK_STEP} {message}")


def print_map_info(map_path: str, width: int, height: int) -> None:
    """Show the input map path and its pixel size.

    Args:
        map_path: Path to the ID map
        width: Width in pixels
        height: Height in pixels
    """
    # Text keeps square brackets in paths from being read as markup
    console.print(Text.assemble("  ", map_path))
    console.print(f"  {width:,} x {height:,} px")


def _contour_state(contour: Contour) -> str:
    if contour.closed:
        return "closed"
    if contour.truncated:
        return "[yellow]truncated[/yellow]"
    return "open"


def print_contours_found(contours: list[Contour], verbose: bool) -> None:
    """Show how many contours were kept, optionally as a table.

    Args:
        contours: Contours kept by the tracer
        verbose: Whether to list each contour
    """
    console.print(f"  [green]{len(contours)}[/green] contours")
    if not verbose or not contours:
        return

    table = Table(box=None, padding=(0, 2))
    table.add_column("#", justify="right")
    table.add_column("start")
    table.add_column("points", justify="right")
    table.add_column("state")
    for index, contour in enumerate(contours[:MAX_TABLE_ROWS]):
        start = contour.start
        table.add_row(
            str(index), f"({start.x}, {start.y})", f"{len(contour):,}", _contour_state(contour)
        )
    console.print(table)

    hidden = len(contours) - MAX_TABLE_ROWS
    if hidden > 0:
        console.print(f"  [dim]{hidden} more not shown[/dim]")


def format_duration(seconds: float) -> str:
    """Render a duration as ms, seconds or minutes depending on its size."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, rest = divmod(seconds, 60)
    return f"{int(minutes)}m {rest:.0f}s"


def print_processing_info(workers: int, is_auto: bool = False) -> None:
    suffix = " (auto)" if is_auto else ""
    console.print(f"  {workers} worker process(es){suffix} {SEP} press Ctrl+C to stop")


def print_extract_success(
    output_dir: str,
    total_time_s: float,
    polylines: int,
    dropped: int,
    errors: int,
    avg_time_ms: float | None = None,
    min_time_ms: float | None = None,
    max_time_ms: float | None = None,
) -> None:
    """Summarise a finished extraction.

    Args:
        output_dir: Directory holding the polyline files
        total_time_s: Wall time of the run in seconds
        polylines: Number of polylines written
        dropped: Contours that vanished or got too short after projection
        errors: Contours whose projection failed
        avg_time_ms: Mean projection time per contour
        min_time_ms: Fastest contour projection
        max_time_ms: Slowest contour projection
    """
    console.print(f"\n[bold green]{MARK_DONE} Done[/bold green] in {format_duration(total_time_s)}")
    console.print(Text.assemble("  ", (output_dir, "bold")))

    colour = "red" if errors else "green"
    console.print(
        f"  {polylines} borders written {SEP} {dropped} dropped {SEP} "
        f"[{colour}]{errors} failed[/{colour}]"
    )

    if avg_time_ms is None:
        return
    timing = f"  {avg_time_ms:.1f}ms per contour"
    if min_time_ms is not None and max_time_ms is not None:
        timing += f" [dim](min {min_time_ms:.1f}ms, max {max_time_ms:.1f}ms)[/dim]"
    console.print(timing)


def print_artifact_success(output_path: str, file_size: str, total_time_s: float) -> None:
    """Summarise a single written artefact (overlay or distance field)."""
    console.print(f"\n[bold green]{MARK_DONE} Done[/bold green] in {format_duration(total_time_s)}")
    console.print(Text.assemble("  ", (output_path, "bold"), f" ({file_size})"))


def print_error(message: str, details: str | None = None) -> None:
    console.print(f"\n[bold red]{MARK_FAIL} Error:[/bold red] {message}")
    if details:
        console.print(Text.assemble("  ", details))


def print_cancellation_notice() -> None:
    console.print(f"\n{SEP} Stopping, waiting for running workers to finish")


def print_cancellation_summary(processed: int, cancelled: int) -> None:
    """Report how far an interrupted extraction got.

    Args:
        processed: Contours projected before the interrupt
        cancelled: Queued contours that never ran
    """
    console.print(f"\n{SEP} [bold]Cancelled[/bold]")
    console.print(f"  {processed} contours projected {SEP} {cancelled} skipped")
    console.print("  No border files were written")
