"""Category-tagged spans and per-user attribution results."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import IntEnum
from typing import overload

from .span import Span


class Category(IntEnum):
    """Classification of an on-call sub-interval.

    Attribution priority is the reverse of declaration order: a company day beats a
    statutory holiday, which beats a weekend, then after-hours, then business hours.
    """

    UNKNOWN = 0
    BUSINESS = 1
    AFTER_HOURS = 2
    WEEKEND = 3
    STAT_HOLIDAY = 4
    COMPANY_DAY = 5

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    Category.UNKNOWN: "Unknown",
    Category.BUSINESS: "Business Hours",
    Category.AFTER_HOURS: "Afterhours",
    Category.WEEKEND: "Weekend",
    Category.STAT_HOLIDAY: "Stat",
    Category.COMPANY_DAY: "Company days",
}


@dataclass(frozen=True, slots=True)
class AttributedSpan:
    """A span tagged with the category it was attributed to."""

    span: Span
    category: Category

    @property
    def start(self) -> datetime:
        return self.span.start

    @property
    def end(self) -> datetime:
        return self.span.end

    @property
    def duration(self) -> timedelta:
        return self.span.duration

    def overlaps(self, other: Span) -> bool:
        return self.span.overlaps(other)


class AttributedSpans(Sequence[AttributedSpan]):
    """Immutable ordered collection of :class:`AttributedSpan` with aggregate helpers."""

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[AttributedSpan] = ()) -> None:
        self._items: tuple[AttributedSpan, ...] = tuple(items)

    @overload
    def __getitem__(self, index: int) -> AttributedSpan: ...

    @overload
    def __getitem__(self, index: slice) -> AttributedSpans: ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return AttributedSpans(self._items[index])
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[AttributedSpan]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, AttributedSpans):
            return self._items == other._items
        if isinstance(other, (list, tuple)):
            return list(self._items) == list(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._items)

    def __add__(self, other: Iterable[AttributedSpan]) -> AttributedSpans:
        return AttributedSpans((*self._items, *other))

    def __repr__(self) -> str:
        return f"AttributedSpans({list(self._items)!r})"

    def sorted(self) -> AttributedSpans:
        """Return a copy ordered by start time (stable for equal starts)."""
        return AttributedSpans(sorted(self._items, key=lambda item: item.span.utc_start))

    def of(self, category: Category) -> AttributedSpans:
        return AttributedSpans(item for item in self._items if item.category is category)

    def duration(self, category: Category) -> timedelta:
        return sum((item.duration for item in self._items if item.category is category), timedelta())

    def count_of(self, category: Category) -> int:
        return sum(1 for item in self._items if item.category is category)

    def total_dur(self) -> timedelta:
        return sum((item.duration for item in self._items), timedelta())

    def business_hours_dur(self) -> timedelta:
        return self.duration(Category.BUSINESS)

    def after_hours_dur(self) -> timedelta:
        return self.duration(Category.AFTER_HOURS)

    def weekend_dur(self) -> timedelta:
        return self.duration(Category.WEEKEND)

    def stat_dur(self) -> timedelta:
        return self.duration(Category.STAT_HOLIDAY)

    def company_day_dur(self) -> timedelta:
        return self.duration(Category.COMPANY_DAY)

    def company_day_count(self) -> int:
        """Number of discrete company-day spans (not their duration)."""
        return self.count_of(Category.COMPANY_DAY)


ScheduleName = str


@dataclass(frozen=True, slots=True)
class User:
    """A PagerDuty user as seen in a rendered schedule."""

    name: str
    timezone: str | None = None


UserShifts = dict[User, list[Span]]
ScheduleUserShifts = dict[ScheduleName, UserShifts]


@dataclass(frozen=True, slots=True)
class UserShiftResult:
    """Attribution outcome for one user on one schedule.

    Attributes
    ----------
    user:
        The user who worked the shifts.
    schedule:
        Name of the PagerDuty schedule the shifts came from.
    shifts:
        Raw shift spans, as supplied to the attribution engine.
    breakdown:
        Disjoint, start-ordered, category-tagged partition of ``shifts``.
    """

    user: User
    schedule: ScheduleName
    shifts: tuple[Span, ...]
    breakdown: AttributedSpans

    @property
    def total_shifts(self) -> int:
        return len(self.shifts)

    def shifts_duration(self) -> timedelta:
        return sum((shift.duration for shift in self.shifts), timedelta())

    def is_balanced(self) -> bool:
        """``True`` when the breakdown accounts for exactly the shift duration."""
        return self.shifts_duration() == self.breakdown.total_dur()


__all__ = [
    "Category",
    "AttributedSpan",
    "AttributedSpans",
    "ScheduleName",
    "User",
    "UserShifts",
    "ScheduleUserShifts",
    "UserShiftResult",
]
