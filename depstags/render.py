"""
Rendering functions for depstags output.

This module handles table formatting for interactive terminals.
Services return data, this module makes it human-readable.
"""

from rich.table import Table
from rich.console import Console
from rich import box
from typing import List, Optional

from .domain import OperationStatus, OperationSummary, TagsResult

console = Console()

_STATUS_STYLES = {
    OperationStatus.SUCCESS: "green",
    OperationStatus.SKIPPED: "dim",
    OperationStatus.FAILED: "red",
    OperationStatus.DRY_RUN: "yellow",
}


def render_table(headers: List[str], rows: List[List[str]], title: Optional[str] = None) -> None:
    """
    Render a generic table with the given headers and rows.

    Args:
        headers: List of column headers
        rows: List of rows, where each row is a list of values
        title: Optional table title
    """
    if not rows:
        console.print("[yellow]No data to display.[/yellow]")
        return

    table = Table(
        title=title,
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )

    for header in headers:
        table.add_column(header)

    for row in rows:
        table.add_row(*[str(val) for val in row])

    console.print(table)


def render_results_table(results: List[TagsResult], summary: Optional[OperationSummary] = None) -> None:
    """Render the outcome of a tags update, one row per root."""
    if not results:
        console.print("[yellow]No tags roots found.[/yellow]")
        return

    table = Table(title="Tags roots", box=box.ROUNDED, show_header=True, header_style="bold magenta")
    table.add_column("Root", style="cyan")
    table.add_column("Action")
    table.add_column("Tags file")
    table.add_column("Error", style="red")

    for result in sorted(results, key=lambda r: r.root_name):
        style = _STATUS_STYLES.get(result.status, "")
        table.add_row(
            result.root_name,
            f"[{style}]{result.action}[/{style}]" if style else result.action,
            result.tags_file,
            result.error or "",
        )

    console.print(table)

    if summary is not None:
        console.print(
            f"{summary.total} roots: [green]{summary.successful} generated[/green], "
            f"{summary.skipped} skipped, [red]{summary.failed} failed[/red]"
        )
