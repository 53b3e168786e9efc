"""samplestat CLI entry point.

Commands:
    samplestat parse <file>    Parse and display samples
    samplestat stats <file>    Min/max/mean of age and height
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from .config import Settings
from .errors import FatalError
from .pipeline import ProcessingReport, run
from .records import Person

console = Console()
err_console = Console(stderr=True)

# ── Helpers ─────────────────────────────────────────────────────────────────


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _settings_from_options(options: dict[str, Any]) -> Settings:
    overrides = {k: v for k, v in options.items() if v is not None}
    try:
        return Settings(_env_file=".env", **overrides)
    except ValidationError as exc:
        raise click.BadParameter(str(exc)) from exc


def _reader_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by every command that reads a sample file."""
    options = [
        click.option("--sep", "-s", "separator", default=None, help="Field separator (default: ',')."),
        click.option("--line-capacity", type=int, default=None, help="Line buffer size (default: 256)."),
        click.option("--name-capacity", type=int, default=None, help="Name buffer size (default: 50)."),
        click.option(
            "--name-policy", default=None,
            type=click.Choice(["truncate", "reject"], case_sensitive=False),
            help="What to do with names longer than the name buffer.",
        ),
        click.option(
            "--overflow", default=None,
            type=click.Choice(["fail", "saturate"], case_sensitive=False),
            help="Integer overflow policy for age and height.",
        ),
        click.option("--verbose", "-v", count=True, help="-v for progress, -vv for every line."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _prepare(verbose: int, options: dict[str, Any]) -> Settings:
    settings = _settings_from_options(options)
    level = {0: settings.log_level, 1: "INFO"}.get(verbose, "DEBUG")
    _configure_logging(level)
    return settings


def _run_or_exit(
    file: Path,
    settings: Settings,
    on_record: Callable[[Person], None] | None = None,
) -> ProcessingReport:
    try:
        return run(file, settings, on_record=on_record)
    except FatalError as exc:
        err_console.print(f"[bold red]FATAL:[/bold red] {exc}")
        sys.exit(1)


def _finish(report: ProcessingReport) -> None:
    if report.close_error is not None:
        err_console.print(f"[yellow]Warning:[/yellow] {report.close_error}")
    if report.fatal is not None:
        err_console.print(f"[bold red]FATAL:[/bold red] {report.fatal}")
        sys.exit(1)


# ── CLI root ─────────────────────────────────────────────────────────────────


@click.group()
@click.version_option(version="0.1.0", prog_name="samplestat")
def main() -> None:
    """samplestat: streaming name/age/height sample statistics."""


# ── parse ────────────────────────────────────────────────────────────────────


@main.command()
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--output", "-o", "output_fmt", default="stream",
    type=click.Choice(["table", "stream", "json"], case_sensitive=False),
    help="Output format.",
    show_default=True,
)
@click.option("--limit", "-n", default=0, type=int, help="Max samples to display (0 = all).")
@_reader_options
def parse(file: Path, output_fmt: str, limit: int, verbose: int, **options: Any) -> None:
    """Parse a sample file and display every valid record.

    Malformed rows are logged to stderr and skipped.

    \b
    Examples:
      samplestat parse data.txt
      samplestat parse data.txt --output table
      samplestat parse data.txt --sep ";" --output json
    """
    settings = _prepare(verbose, options)
    collected: list[Person] = []
    shown = 0

    def _show(person: Person) -> None:
        nonlocal shown
        if limit and shown >= limit:
            return
        shown += 1
        if output_fmt == "json":
            click.echo(json.dumps(person.to_dict()))
        elif output_fmt == "table":
            collected.append(person)
        else:
            console.print(
                f"[bold]{person.name}[/bold]  age [cyan]{person.age}[/cyan]"
                f"  height [cyan]{person.height}[/cyan]"
            )

    report = _run_or_exit(file, settings, on_record=_show)

    if output_fmt == "table":
        from .visualization.tables import print_samples_table

        print_samples_table(collected, title=file.name, max_rows=max(len(collected), 1), console=console)

    err_console.print(
        f"[dim]Parsed {report.accepted} samples from {file.name}, "
        f"{report.discarded} discarded[/dim]"
    )
    _finish(report)


# ── stats ────────────────────────────────────────────────────────────────────


@main.command()
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Print the summary as JSON.")
@click.option("--show-errors", is_flag=True, help="List discarded rows.")
@_reader_options
def stats(file: Path, as_json: bool, show_errors: bool, verbose: int, **options: Any) -> None:
    """Show min, max and mean of age and height.

    \b
    Examples:
      samplestat stats data.txt
      samplestat stats data.txt --show-errors
      samplestat stats data.txt --json
    """
    from .visualization.tables import print_errors_table, print_statistics_table

    settings = _prepare(verbose, options)
    report = _run_or_exit(file, settings)
    summary = report.summary

    if as_json:
        click.echo(json.dumps({
            "file": str(file),
            "accepted": report.accepted,
            "discarded": report.discarded,
            "statistics": summary.to_dict() if summary is not None else None,
        }))
    else:
        console.print(
            f"\n[bold]File:[/bold] {file.name}  [bold]Samples:[/bold] {report.accepted}"
            f"  [bold]Discarded:[/bold] {report.discarded}"
        )
        if summary is None:
            console.print("[yellow]No samples, statistics skipped.[/yellow]")
        else:
            print_statistics_table(summary, title=file.name, console=console)
        if show_errors and report.errors:
            print_errors_table(report.errors, console=console)

    _finish(report)


if __name__ == "__main__":
    main()
