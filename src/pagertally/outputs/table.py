"""Terminal tables rendered with rich."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from .summary import SUMMARY_COLUMNS, OutputData, ScheduleSummary, duration_format

TABLE_HEADERS = ["User", "Business Hours", "Afterhours", "Weekend", "Stat", "Company days", "Total time"]


class TableOutput:
    """Print one table per schedule, plus a cross-schedule total when there are several."""

    def __init__(self, console: Console | None = None, *, shift_details: bool = False) -> None:
        self.console = console or Console()
        self.shift_details = shift_details

    def print(self, data: OutputData) -> None:
        period = data.date_range
        self.console.print(
            f"[bold cyan]On-call[/] {period.start:%Y-%m-%d} -> {period.end:%Y-%m-%d}"
        )
        for schedule in data.schedules:
            self._print_schedule(data, schedule)
        if len(data.schedules) > 1:
            totals = data.totals_dataframe()
            self.console.print(self._table("All schedules", totals.values.tolist()))

    def _print_schedule(self, data: OutputData, schedule: ScheduleSummary) -> None:
        df = data.schedule_dataframe(schedule)
        self.console.print(self._table(f"Schedule: {schedule.name}", df[SUMMARY_COLUMNS].values.tolist()))
        if self.shift_details:
            for summary in schedule.user_shifts:
                self.console.print(self._details_table(summary))

    @staticmethod
    def _table(title: str, rows: list[list[str]]) -> Table:
        table = Table(title=title, title_justify="left", header_style="bold")
        for index, header in enumerate(TABLE_HEADERS):
            table.add_column(header, justify="left" if index == 0 else "right")
        for row in rows:
            table.add_row(*(str(value) for value in row))
        return table

    @staticmethod
    def _details_table(summary) -> Table:
        table = Table(title=f"{summary.user.name}'s shifts", title_justify="left", show_lines=True)
        table.add_column("Shift")
        table.add_column("Category")
        table.add_column("From")
        table.add_column("To")
        table.add_column("Duration", justify="right")
        for index, (shift, attributed) in enumerate(summary.attributed_shifts, start=1):
            for item in attributed:
                table.add_row(
                    str(index),
                    item.category.label,
                    f"{item.start:%a %Y-%m-%d %H:%M}",
                    f"{item.end:%a %Y-%m-%d %H:%M}",
                    duration_format(item.duration),
                )
            table.add_row(
                str(index), "[bold]Total[/]", f"{shift.start:%a %Y-%m-%d %H:%M}",
                f"{shift.end:%a %Y-%m-%d %H:%M}", duration_format(shift.duration),
            )
        return table


__all__ = ["TableOutput", "TABLE_HEADERS"]
