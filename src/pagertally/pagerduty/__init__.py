"""PagerDuty collaborator: fetches raw on-call shifts per schedule and user."""

from .client import DEFAULT_BASE_URL, PagerDutyClient, read_shifts, user_shifts_from_schedule

__all__ = ["DEFAULT_BASE_URL", "PagerDutyClient", "read_shifts", "user_shifts_from_schedule"]
