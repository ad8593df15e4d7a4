"""Reporting period helpers."""

from __future__ import annotations

from datetime import datetime, tzinfo

from pagertally.core.errors import PagerTallyValueError
from pagertally.timespan import Span

_MONTH_FORMATS = ("%B", "%b")


def parse_month(value: str | int) -> int:
    """Return the month number for ``"January"``, ``"jan"``, ``"1"`` or ``1``."""
    if isinstance(value, int) or (isinstance(value, str) and value.strip().isdigit()):
        month = int(value)
        if 1 <= month <= 12:
            return month
        raise PagerTallyValueError(f"month must be between 1 and 12, got {value!r}")
    for fmt in _MONTH_FORMATS:
        try:
            return datetime.strptime(value.strip().title(), fmt).month
        except ValueError:
            continue
    raise PagerTallyValueError(f"unable to parse month {value!r}; use a name such as 'January'")


def reporting_period(
    tz: tzinfo,
    month: str | int | None = None,
    year: int | None = None,
    *,
    now: datetime | None = None,
) -> Span:
    """Span covering one calendar month in ``tz``.

    ``month`` and ``year`` default to the current month; the span ends at local midnight
    on the first day of the following month.
    """
    current = (now or datetime.now(tz)).astimezone(tz)
    month_number = current.month if month is None else parse_month(month)
    year_number = current.year if year is None else year
    start = datetime(year_number, month_number, 1, tzinfo=tz)
    if month_number == 12:
        end = datetime(year_number + 1, 1, 1, tzinfo=tz)
    else:
        end = datetime(year_number, month_number + 1, 1, tzinfo=tz)
    return Span(start, end)


__all__ = ["parse_month", "reporting_period"]
