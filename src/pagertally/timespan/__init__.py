"""Time span primitives and category-tagged aggregates."""

from .attributed import (
    AttributedSpan,
    AttributedSpans,
    Category,
    ScheduleName,
    ScheduleUserShifts,
    User,
    UserShiftResult,
    UserShifts,
)
from .span import ZERO_SPAN, Span, instant
from .utils import (
    at_time,
    clip,
    day_span,
    deduplicate,
    end_of_day,
    is_start_of_day,
    merge_spans,
    start_of_day,
    subtract_spans,
    total_duration,
)

__all__ = [
    "Span",
    "ZERO_SPAN",
    "instant",
    "Category",
    "AttributedSpan",
    "AttributedSpans",
    "ScheduleName",
    "ScheduleUserShifts",
    "User",
    "UserShiftResult",
    "UserShifts",
    "at_time",
    "clip",
    "day_span",
    "deduplicate",
    "end_of_day",
    "is_start_of_day",
    "merge_spans",
    "start_of_day",
    "subtract_spans",
    "total_duration",
]
