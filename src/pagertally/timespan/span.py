"""Immutable time range primitive used throughout pagertally."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone

from pagertally.core.errors import PagerTallyValueError

_ZERO_INSTANT = datetime(1, 1, 1, tzinfo=timezone.utc)


def instant(value: datetime) -> datetime:
    """``value`` as a UTC datetime, so comparisons and arithmetic use elapsed time.

    Two datetimes sharing one ``ZoneInfo`` compare and subtract by wall clock, which is
    off by the DST shift whenever a daylight-saving transition falls between them.
    """
    return value.astimezone(timezone.utc)


def _require_aware(value: datetime, label: str) -> None:
    if not isinstance(value, datetime):
        raise PagerTallyValueError(f"Span {label} must be a datetime, got {type(value).__name__}")
    if value.tzinfo is None or value.utcoffset() is None:
        raise PagerTallyValueError(f"Span {label} must be timezone-aware, got naive {value!r}")


@dataclass(frozen=True, slots=True, eq=False)
class Span:
    """Range between two timezone-aware instants.

    The constructor swaps its operands when ``end`` precedes ``start`` so that
    ``start <= end`` always holds. ``start`` and ``end`` keep the zone they were given
    (for display and day splitting), while durations, ordering, equality and hashing
    all work on the UTC instants. Two spans expressed in different time zones are
    equal when they cover the same period.

    Attributes
    ----------
    start:
        Earliest instant of the span.
    end:
        Latest instant of the span. Overlap checks treat it as exclusive; containment
        and equality treat it as inclusive.
    utc_start, utc_end:
        The same bounds converted to UTC.
    """

    start: datetime
    end: datetime
    utc_start: datetime = field(init=False, repr=False)
    utc_end: datetime = field(init=False, repr=False)

    def __post_init__(self) -> None:
        _require_aware(self.start, "start")
        _require_aware(self.end, "end")
        utc_start, utc_end = instant(self.start), instant(self.end)
        if utc_end < utc_start:
            start, end = self.end, self.start
            object.__setattr__(self, "start", start)
            object.__setattr__(self, "end", end)
            utc_start, utc_end = utc_end, utc_start
        object.__setattr__(self, "utc_start", utc_start)
        object.__setattr__(self, "utc_end", utc_end)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Span):
            return NotImplemented
        return self.utc_start == other.utc_start and self.utc_end == other.utc_end

    def __hash__(self) -> int:
        return hash((self.utc_start, self.utc_end))

    def __repr__(self) -> str:
        return f"Span({self.start.isoformat()} -> {self.end.isoformat()})"

    @property
    def duration(self) -> timedelta:
        return self.utc_end - self.utc_start

    @property
    def is_zero(self) -> bool:
        """Zero-length spans stand for "no span" wherever a span is optional."""
        return self.utc_start == self.utc_end

    def after(self, moment: datetime) -> bool:
        """Return ``True`` when the span begins after ``moment``."""
        return self.utc_start > instant(moment)

    def before(self, moment: datetime) -> bool:
        """Return ``True`` when the span ends before ``moment``."""
        return self.utc_end < instant(moment)

    def borders(self, other: Span) -> bool:
        """Return ``True`` when the two spans touch end-to-start."""
        return self.utc_start == other.utc_end or self.utc_end == other.utc_start

    def contains_time(self, moment: datetime) -> bool:
        return self.utc_start <= instant(moment) <= self.utc_end

    def contains(self, other: Span) -> bool:
        """Return ``True`` when ``other`` lies entirely inside this span (bounds inclusive)."""
        return self.utc_start <= other.utc_start and other.utc_end <= self.utc_end

    def encompass(self, other: Span) -> Span:
        """Smallest span covering both spans."""
        return Span(min(self.start, other.start, key=instant), max(self.end, other.end, key=instant))

    def follows(self, other: Span) -> bool:
        return self.utc_start >= other.utc_end

    def precedes(self, other: Span) -> bool:
        return self.utc_end <= other.utc_start

    def overlaps(self, other: Span) -> bool:
        """Return ``True`` when the spans share a positive-length portion.

        Spans that merely touch (``a.end == b.start``) do not overlap.
        """
        return self.utc_start < other.utc_end and self.utc_end > other.utc_start

    def intersection(self, other: Span) -> Span | None:
        """Return the overlapping portion, or ``None`` when the spans do not overlap.

        Identical spans always intersect, including zero-length ones.
        """
        if self == other:
            return self
        if not self.overlaps(other):
            return None
        return Span(max(self.start, other.start, key=instant), min(self.end, other.end, key=instant))

    def gap(self, other: Span) -> Span | None:
        """Return the period between the spans, or ``None`` if they overlap."""
        if self.overlaps(other):
            return None
        return Span(min(self.end, other.end, key=instant), max(self.start, other.start, key=instant))

    def trim_if_overlaps(self, other: Span) -> tuple[Span, bool]:
        """Cut ``other`` out of this span from whichever side it overlaps.

        Returns
        -------
        tuple[Span, bool]
            ``(self, False)`` when there is no overlap, ``(ZERO_SPAN, True)`` when this span
            is fully covered by ``other``, otherwise the remaining one-sided fragment and
            ``True``. When ``other`` sits strictly inside this span only the leading
            fragment is kept; :func:`~pagertally.timespan.subtract_spans` keeps both.
        """
        if self == other or (self.overlaps(other) and other.contains(self)):
            return ZERO_SPAN, True
        if not self.overlaps(other):
            return self, False
        if self.utc_start < other.utc_start:
            return Span(self.start, other.start), True
        return Span(other.end, self.end), True

    def offset(self, delta: timedelta) -> Span:
        """Shift both bounds by ``delta`` of elapsed time, keeping their zones."""
        return Span(
            (self.utc_start + delta).astimezone(self.start.tzinfo),
            (self.utc_end + delta).astimezone(self.end.tzinfo),
        )

    def dates(self) -> list[date]:
        """Calendar dates (in the start's time zone) the span covers.

        A span ending exactly at midnight does not cover the following date.
        """
        tz = self.start.tzinfo
        first = self.start.date()
        end_local = self.end.astimezone(tz)
        last = end_local.date()
        if last > first and end_local.time() == time(0):
            last -= timedelta(days=1)
        return [first + timedelta(days=offset) for offset in range((last - first).days + 1)]

    def split_by_day(self) -> list[Span]:
        """Split the span at local midnights (start's time zone)."""
        tz = self.start.tzinfo
        pieces: list[Span] = []
        cursor = self.start
        for day in self.dates()[1:]:
            midnight = datetime.combine(day, time(0), tzinfo=tz)
            pieces.append(Span(cursor, midnight))
            cursor = midnight
        pieces.append(Span(cursor, self.end))
        return pieces


ZERO_SPAN = Span(_ZERO_INSTANT, _ZERO_INSTANT)


__all__ = ["Span", "ZERO_SPAN", "instant"]
