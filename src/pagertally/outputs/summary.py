"""Summaries of attribution results ready for rendering."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Protocol

import pandas as pd

from pagertally.core.errors import OutputError
from pagertally.timespan import AttributedSpans, ScheduleName, Span, User, UserShiftResult

__all__ = [
    "SUMMARY_COLUMNS",
    "TypeDurations",
    "ShiftsSummary",
    "ScheduleSummary",
    "OutputData",
    "Output",
    "print_outputs",
    "duration_format",
    "sheet_duration_format",
]

SUMMARY_COLUMNS = [
    "User",
    "BusinessHours",
    "AfterHours",
    "Weekend",
    "StatDays",
    "CompanyDays",
    "Total",
]


def duration_format(duration: timedelta) -> str:
    """Human readable duration, e.g. ``48h 30m``; ``-`` when nothing was worked."""
    seconds_total = int(duration.total_seconds())
    if seconds_total < 1:
        return "-"
    hours, remainder = divmod(seconds_total, 3600)
    minutes, seconds = divmod(remainder, 60)
    parts = [f"{hours}h"]
    if minutes:
        parts.append(f"{minutes}m")
    if seconds:
        parts.append(f"{seconds}s")
    return " ".join(parts)


def sheet_duration_format(duration: timedelta) -> str:
    """Spreadsheet duration, e.g. ``48:30:25.000``. Sub-second precision is dropped."""
    seconds_total = int(duration.total_seconds())
    hours, remainder = divmod(seconds_total, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.000"


@dataclass(frozen=True, slots=True)
class TypeDurations:
    """Time on call per category for one user."""

    on_call: timedelta = timedelta()
    business: timedelta = timedelta()
    after_hours: timedelta = timedelta()
    weekend: timedelta = timedelta()
    stat: timedelta = timedelta()
    company_day: timedelta = timedelta()

    @classmethod
    def from_breakdown(cls, breakdown: AttributedSpans) -> TypeDurations:
        return cls(
            on_call=breakdown.total_dur(),
            business=breakdown.business_hours_dur(),
            after_hours=breakdown.after_hours_dur(),
            weekend=breakdown.weekend_dur(),
            stat=breakdown.stat_dur(),
            company_day=breakdown.company_day_dur(),
        )

    def __add__(self, other: TypeDurations) -> TypeDurations:
        if not isinstance(other, TypeDurations):
            return NotImplemented
        return TypeDurations(
            on_call=self.on_call + other.on_call,
            business=self.business + other.business,
            after_hours=self.after_hours + other.after_hours,
            weekend=self.weekend + other.weekend,
            stat=self.stat + other.stat,
            company_day=self.company_day + other.company_day,
        )

    def row(self, formatter=duration_format) -> list[str]:
        """Formatted values in ``SUMMARY_COLUMNS`` order (without the user column)."""
        return [
            formatter(self.business),
            formatter(self.after_hours),
            formatter(self.weekend),
            formatter(self.stat),
            formatter(self.company_day),
            formatter(self.on_call),
        ]


@dataclass(slots=True)
class ShiftsSummary:
    """Per-user summary on one schedule.

    Attributes
    ----------
    user:
        The on-call user.
    attributed_shifts:
        Each raw shift paired with the attributed spans that overlap it, in order.
    durations:
        Category totals of the user's breakdown.
    company_days:
        Number of distinct company-day spans worked.
    """

    user: User
    attributed_shifts: list[tuple[Span, AttributedSpans]]
    durations: TypeDurations
    company_days: int

    @classmethod
    def from_result(cls, result: UserShiftResult) -> ShiftsSummary:
        attributed = [
            (shift, AttributedSpans(item for item in result.breakdown if item.overlaps(shift)).sorted())
            for shift in result.shifts
        ]
        return cls(
            user=result.user,
            attributed_shifts=attributed,
            durations=TypeDurations.from_breakdown(result.breakdown),
            company_days=result.breakdown.company_day_count(),
        )


@dataclass(slots=True)
class ScheduleSummary:
    name: ScheduleName
    user_shifts: list[ShiftsSummary] = field(default_factory=list)


@dataclass(slots=True)
class OutputData:
    """Final data handed to every output.

    Attributes
    ----------
    raw_results:
        Attribution results per schedule, as returned by the engine.
    date_range:
        Reporting period.
    schedules:
        Schedule summaries, sorted by schedule name.
    """

    raw_results: Mapping[ScheduleName, Sequence[UserShiftResult]]
    date_range: Span
    schedules: list[ScheduleSummary]

    @classmethod
    def from_results(
        cls,
        results: Mapping[ScheduleName, Sequence[UserShiftResult]],
        period: Span,
    ) -> OutputData:
        schedules = [
            ScheduleSummary(
                name=name,
                user_shifts=sorted(
                    (ShiftsSummary.from_result(result) for result in user_results),
                    key=lambda summary: summary.user.name,
                ),
            )
            for name, user_results in sorted(results.items())
        ]
        return cls(raw_results=results, date_range=period, schedules=schedules)

    def user_totals(self) -> dict[str, TypeDurations]:
        """Durations summed per user name across every schedule, sorted by name."""
        totals: dict[str, TypeDurations] = {}
        for schedule in self.schedules:
            for summary in schedule.user_shifts:
                name = summary.user.name
                totals[name] = totals.get(name, TypeDurations()) + summary.durations
        return dict(sorted(totals.items()))

    def schedule_dataframe(self, schedule: ScheduleSummary, formatter=duration_format) -> pd.DataFrame:
        """Tabular summary of one schedule, one row per user (``SUMMARY_COLUMNS``)."""
        rows = [
            [summary.user.name, *summary.durations.row(formatter)]
            for summary in schedule.user_shifts
        ]
        if not rows:
            return pd.DataFrame(columns=SUMMARY_COLUMNS)
        df = pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
        return df.sort_values("User", kind="stable").reset_index(drop=True)

    def totals_dataframe(self, formatter=duration_format) -> pd.DataFrame:
        rows = [[name, *durations.row(formatter)] for name, durations in self.user_totals().items()]
        if not rows:
            return pd.DataFrame(columns=SUMMARY_COLUMNS)
        return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


class Output(Protocol):
    """A report destination such as the terminal or a CSV directory."""

    def print(self, data: OutputData) -> None: ...


def print_outputs(data: OutputData, outputs: Sequence[Output]) -> list[OutputError]:
    """Run every output, collecting failures instead of stopping at the first one."""
    errors: list[OutputError] = []
    for output in outputs:
        try:
            output.print(data)
        except OutputError as exc:
            errors.append(exc)
    return errors
