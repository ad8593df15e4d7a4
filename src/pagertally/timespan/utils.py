"""Interval-set helpers: de-duplication, merging, subtraction and day boundaries."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime, time, timedelta, tzinfo

from .span import Span, instant


def _by_start(span: Span) -> tuple[datetime, datetime]:
    return span.utc_start, span.utc_end


def deduplicate(spans: Iterable[Span]) -> list[Span]:
    """Return a new start-ordered list with exact duplicates collapsed.

    Running the function on its own output returns an equal list.
    """
    result: list[Span] = []
    for span in sorted(spans, key=_by_start):
        if result and result[-1] == span:
            continue
        result.append(span)
    return result


def merge_spans(spans: Iterable[Span], *, bordering: bool = True) -> list[Span]:
    """Merge spans into maximal contiguous runs.

    Parameters
    ----------
    spans:
        Spans in any order.
    bordering:
        When ``True`` (default) spans that merely touch are folded into the same run, so
        per-day windows such as ``[Fri 17:00, Sat 00:00)`` and ``[Sat 00:00, Mon 09:00)``
        become one span. When ``False`` only spans with a positive-length overlap merge.

    Returns
    -------
    list[Span]
        Start-ordered, pairwise non-overlapping spans covering the same instants.
    """
    merged: list[Span] = []
    run: Span | None = None
    for span in sorted(spans, key=_by_start):
        if run is None:
            run = span
            continue
        joins = span.utc_start <= run.utc_end if bordering else span.utc_start < run.utc_end
        if joins:
            if span.utc_end > run.utc_end:
                run = Span(run.start, span.end)
            continue
        merged.append(run)
        run = span
    if run is not None:
        merged.append(run)
    return merged


def subtract_spans(span: Span, union: Sequence[Span]) -> list[Span]:
    """Remove every instant of ``union`` from ``span``.

    ``union`` must be start-ordered and non-overlapping (the output of :func:`merge_spans`).
    The result holds the zero, one or more leftover fragments in chronological order.
    """
    leftovers: list[Span] = []
    cursor = span.start
    for cut in union:
        if cut.utc_end <= instant(cursor):
            continue
        if cut.utc_start >= span.utc_end:
            break
        if cut.utc_start > instant(cursor):
            leftovers.append(Span(cursor, cut.start))
        cursor = max(cursor, cut.end, key=instant)
        if instant(cursor) >= span.utc_end:
            break
    if instant(cursor) < span.utc_end:
        leftovers.append(Span(cursor, span.end))
    return leftovers


def total_duration(spans: Iterable[Span]) -> timedelta:
    return sum((span.duration for span in spans), timedelta())


def at_time(day: date, clock: time, tz: tzinfo) -> datetime:
    """Wall-clock ``clock`` on ``day`` in ``tz``."""
    return datetime.combine(day, clock, tzinfo=tz)


def start_of_day(instant: datetime) -> datetime:
    """Local midnight at the beginning of ``instant``'s day."""
    return datetime.combine(instant.date(), time(0), tzinfo=instant.tzinfo)


def end_of_day(instant: datetime) -> datetime:
    """Local midnight at the end of ``instant``'s day (exclusive bound)."""
    return datetime.combine(instant.date() + timedelta(days=1), time(0), tzinfo=instant.tzinfo)


def is_start_of_day(instant: datetime) -> bool:
    return instant.time() == time(0)


def day_span(day: date, tz: tzinfo) -> Span:
    """Span from local midnight of ``day`` to the following local midnight."""
    return Span(at_time(day, time(0), tz), at_time(day + timedelta(days=1), time(0), tz))


def clip(spans: Iterable[Span], window: Span) -> list[Span]:
    """Intersect each span with ``window`` and drop the ones outside it."""
    clipped: list[Span] = []
    for span in spans:
        portion = span.intersection(window)
        if portion is not None and not portion.is_zero:
            clipped.append(portion)
    return clipped


__all__ = [
    "deduplicate",
    "merge_spans",
    "subtract_spans",
    "total_duration",
    "at_time",
    "start_of_day",
    "end_of_day",
    "is_start_of_day",
    "day_span",
    "clip",
]
