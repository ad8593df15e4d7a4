"""Attribute PagerDuty on-call time to business hours, after-hours, weekends and holidays."""

from pagertally.attribution import attribute_shift, process_schedule_user_shifts
from pagertally.config import ScheduleConfig, load_config
from pagertally.timespan import AttributedSpan, AttributedSpans, Category, Span

__version__ = "0.1.0"

__all__ = [
    "AttributedSpan",
    "AttributedSpans",
    "Category",
    "ScheduleConfig",
    "Span",
    "attribute_shift",
    "load_config",
    "process_schedule_user_shifts",
    "__version__",
]
