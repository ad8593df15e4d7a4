"""Interval attribution engine."""

from .engine import (
    ATTRIBUTION_ORDER,
    CATCH_ALL,
    attribute_shift,
    build_deciders,
    business_hours_intersector,
    intersector_for,
    process_schedule_user_shifts,
    remove_matched_spans,
)

__all__ = [
    "ATTRIBUTION_ORDER",
    "CATCH_ALL",
    "attribute_shift",
    "build_deciders",
    "business_hours_intersector",
    "intersector_for",
    "process_schedule_user_shifts",
    "remove_matched_spans",
]
