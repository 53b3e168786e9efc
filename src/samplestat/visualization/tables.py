"""Rich-powered tables for parsed samples and their statistics."""
from __future__ import annotations

from typing import Sequence

from rich import box
from rich.console import Console
from rich.table import Table

from ..aggregators.statistics import StatisticsSummary
from ..pipeline import RowError
from ..records import Person

_console = Console()


def print_samples_table(
    people: Sequence[Person],
    title: str = "Samples",
    max_rows: int = 100,
    console: Console | None = None,
) -> None:
    """Render parsed samples as a Rich table.

    Args:
        people:    Records in file order.
        title:     Table title shown in the header.
        max_rows:  Hard cap; longer lists are truncated with a notice.
        console:   Target console, stdout by default.
    """
    out = console or _console
    if not people:
        out.print("[yellow]No samples to display.[/yellow]")
        return

    table = Table(title=title, box=box.ROUNDED, show_lines=False)
    table.add_column("name", overflow="fold", max_width=50)
    table.add_column("age", justify="right", style="cyan")
    table.add_column("height", justify="right", style="cyan")

    for person in people[:max_rows]:
        style = "yellow" if person.name_truncated else ""
        table.add_row(person.name, str(person.age), str(person.height), style=style)

    out.print(table)
    if len(people) > max_rows:
        out.print(
            f"[dim]... and {len(people) - max_rows} more rows (use --limit to adjust)[/dim]"
        )


def print_statistics_table(
    summary: StatisticsSummary,
    title: str = "Statistics",
    console: Console | None = None,
) -> None:
    """Render a ``StatisticsSummary`` with one row per numeric field."""
    out = console or _console
    table = Table(title=f"{title} ({summary.count} samples)", box=box.MINIMAL_DOUBLE_HEAD)
    table.add_column("Field", style="bold")
    table.add_column("min", justify="right", style="cyan")
    table.add_column("max", justify="right", style="cyan")
    table.add_column("mean", justify="right", style="cyan")

    for name, field_summary in (("age", summary.age), ("height", summary.height)):
        table.add_row(
            name,
            str(field_summary.minimum),
            str(field_summary.maximum),
            f"{field_summary.mean:.2f}",
        )

    out.print(table)


def print_errors_table(
    errors: Sequence[RowError],
    title: str = "Discarded rows",
    console: Console | None = None,
) -> None:
    out = console or _console
    table = Table(title=title, box=box.SIMPLE_HEAVY)
    table.add_column("Line", style="dim", justify="right", width=6)
    table.add_column("Error", style="red")
    table.add_column("Reason", overflow="fold")

    for row in errors:
        table.add_row(str(row.line_number), type(row.error).__name__, str(row.error))

    out.print(table)
