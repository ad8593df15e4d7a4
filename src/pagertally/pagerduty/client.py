"""Minimal PagerDuty REST client for rendered on-call schedules."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

import requests

from pagertally.core.errors import DataSourceError
from pagertally.timespan import ScheduleUserShifts, Span, User, UserShifts, merge_spans

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.pagerduty.com"
DEFAULT_TIMEOUT = 30.0
ACCEPT_HEADER = "application/vnd.pagerduty+json;version=2"


class PagerDutyClient:
    """Thin wrapper around a ``requests.Session`` authenticated with an API token.

    Parameters
    ----------
    token:
        PagerDuty REST API token (read-only is sufficient).
    base_url:
        API root, overridable for testing.
    timeout:
        Per-request timeout in seconds.
    session:
        Optional pre-configured session; headers are added to it.
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        if not token:
            raise DataSourceError("a PagerDuty API token is required")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Accept": ACCEPT_HEADER,
                "Authorization": f"Token token={token}",
                "Content-Type": "application/json",
            }
        )

    def get_schedule(self, schedule_id: str, since: datetime, until: datetime) -> dict[str, Any]:
        """Return the ``schedule`` object rendered between ``since`` and ``until``."""
        url = f"{self.base_url}/schedules/{schedule_id}"
        params = {"since": since.isoformat(), "until": until.isoformat()}
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.RequestException as exc:
            raise DataSourceError(f"failed to fetch PagerDuty schedule {schedule_id}: {exc}") from exc
        except ValueError as exc:
            raise DataSourceError(f"PagerDuty schedule {schedule_id} returned invalid JSON") from exc
        schedule = payload.get("schedule") if isinstance(payload, dict) else None
        if not isinstance(schedule, dict):
            raise DataSourceError(f"PagerDuty schedule {schedule_id} response has no 'schedule' object")
        return schedule


def _parse_timestamp(value: object, schedule_id: str) -> datetime:
    if not isinstance(value, str):
        raise DataSourceError(f"schedule {schedule_id}: expected an ISO timestamp, got {value!r}")
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        raise DataSourceError(f"schedule {schedule_id}: unable to parse timestamp {value!r}") from exc
    if parsed.tzinfo is None:
        raise DataSourceError(f"schedule {schedule_id}: timestamp {value!r} carries no UTC offset")
    return parsed


def user_shifts_from_schedule(schedule: Mapping[str, Any], schedule_id: str = "") -> UserShifts:
    """Group rendered schedule entries by user and merge each user's contiguous shifts."""
    entries: Iterable[Mapping[str, Any]] = (
        (schedule.get("final_schedule") or {}).get("rendered_schedule_entries") or []
    )
    time_zone = schedule.get("time_zone")
    raw: dict[User, list[Span]] = {}
    for entry in entries:
        user_info = entry.get("user") or {}
        name = user_info.get("summary") or user_info.get("id")
        if not name:
            raise DataSourceError(f"schedule {schedule_id}: entry without a user: {entry!r}")
        span = Span(
            _parse_timestamp(entry.get("start"), schedule_id),
            _parse_timestamp(entry.get("end"), schedule_id),
        )
        raw.setdefault(User(name=name, timezone=time_zone), []).append(span)
    return {user: merge_spans(spans) for user, spans in raw.items()}


def read_shifts(
    client: PagerDutyClient,
    schedule_ids: Iterable[str],
    start: datetime,
    end: datetime,
) -> ScheduleUserShifts:
    """Fetch each schedule and return its users' merged shifts keyed by schedule name."""
    schedule_shifts: ScheduleUserShifts = {}
    for schedule_id in schedule_ids:
        schedule = client.get_schedule(schedule_id, start, end)
        name = schedule.get("name") or schedule_id
        user_shifts = user_shifts_from_schedule(schedule, schedule_id)
        logger.debug("Schedule %s (%s): %d user(s)", name, schedule_id, len(user_shifts))
        schedule_shifts[name] = user_shifts
    return schedule_shifts


__all__ = ["PagerDutyClient", "read_shifts", "user_shifts_from_schedule", "DEFAULT_BASE_URL"]
