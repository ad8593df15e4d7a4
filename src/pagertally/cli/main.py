from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from pagertally.attribution import ATTRIBUTION_ORDER, process_schedule_user_shifts
from pagertally.config import ScheduleConfig, load_config, reporting_period
from pagertally.core import (
    ConfigError,
    DataSourceError,
    PagerTallyValueError,
    configure_logging,
)
from pagertally.datasources import build_sources
from pagertally.outputs import CSVOutput, Output, OutputData, TableOutput, duration_format, print_outputs
from pagertally.pagerduty import PagerDutyClient, read_shifts
from pagertally.timespan import Span

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Tally PagerDuty on-call time by business hours, after-hours, weekends and holidays.",
)
console = Console()

TOKEN_ENVVAR = "PAGERDUTY_TOKEN"


def _load(config_path: Path, month: str | None, year: int | None) -> tuple[ScheduleConfig, Span]:
    try:
        config = load_config(config_path)
    except ConfigError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        raise typer.Exit(1)
    try:
        period = reporting_period(config.tzinfo, month, year)
    except PagerTallyValueError as e:
        console.print(f"[red]Invalid period:[/red] {e}")
        raise typer.Exit(1)
    return config, period


@app.command()
def report(
    config_path: Path = typer.Option(
        ...,
        "--config",
        "-c",
        exists=True,
        dir_okay=False,
        help="YAML file with time zone, business hours, holidays and company days.",
    ),
    token: str = typer.Option(
        "",
        "--token",
        envvar=TOKEN_ENVVAR,
        show_default=False,
        help=f"PagerDuty API token (defaults to ${TOKEN_ENVVAR}).",
    ),
    schedules: list[str] | None = typer.Option(
        None,
        "--schedule",
        "-s",
        help="PagerDuty schedule id; repeat for several. Defaults to the configured schedules.",
    ),
    month: str | None = typer.Option(None, "--month", "-m", help="Month to report, e.g. January."),
    year: int | None = typer.Option(None, "--year", "-y", help="Year of the reported month."),
    csv_dir: Path | None = typer.Option(
        None,
        "--csv-dir",
        file_okay=False,
        help="Also write one CSV per schedule to this directory.",
    ),
    details: bool = typer.Option(False, "--details", help="List every attributed shift span."),
    workers: int = typer.Option(1, "--workers", "-w", min=1, help="Threads used for attribution."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log per-user breakdowns."),
):
    """Attribute on-call time for a month and print the per-user summary."""
    configure_logging(verbose)
    config, period = _load(config_path, month, year)

    schedule_ids = list(schedules or config.schedules)
    if not schedule_ids:
        console.print("[red]No schedules:[/red] pass --schedule or list them in the config file.")
        raise typer.Exit(1)

    try:
        client = PagerDutyClient(token)
        shifts = read_shifts(client, schedule_ids, period.start, period.end)
        category_sources = build_sources(config, period)
        results = process_schedule_user_shifts(shifts, category_sources, max_workers=workers)
    except DataSourceError as e:
        console.print(f"[red]Data source error:[/red] {e}")
        raise typer.Exit(1)

    data = OutputData.from_results(results, period)
    outputs: list[Output] = [TableOutput(console, shift_details=details)]
    if csv_dir is not None:
        outputs.append(CSVOutput(csv_dir))
    errors = print_outputs(data, outputs)
    for error in errors:
        console.print(f"[red]Output failed:[/red] {error}")
    if errors:
        raise typer.Exit(1)


@app.command()
def sources(
    config_path: Path = typer.Option(..., "--config", "-c", exists=True, dir_okay=False),
    month: str | None = typer.Option(None, "--month", "-m"),
    year: int | None = typer.Option(None, "--year", "-y"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Print the company-day, holiday, weekend and after-hours spans for a month."""
    configure_logging(verbose)
    config, period = _load(config_path, month, year)
    try:
        category_sources = build_sources(config, period)
    except DataSourceError as e:
        console.print(f"[red]Data source error:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"Period: {period.start:%Y-%m-%d %H:%M %Z} -> {period.end:%Y-%m-%d %H:%M %Z}")
    for category, source in zip(ATTRIBUTION_ORDER, category_sources):
        t = Table(title=f"{category.label} ({type(source).__name__})", title_justify="left")
        t.add_column("From")
        t.add_column("To")
        t.add_column("Duration", justify="right")
        for span in source.spans():
            t.add_row(
                f"{span.start:%a %Y-%m-%d %H:%M}",
                f"{span.end:%a %Y-%m-%d %H:%M}",
                duration_format(span.duration),
            )
        console.print(t)


if __name__ == "__main__":
    app()
