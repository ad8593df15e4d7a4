from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest
import requests

from pagertally.config import ScheduleConfig, reporting_period
from pagertally.timespan import Span

FIXTURES = Path(__file__).parent / "fixtures"
AKL = ZoneInfo("Pacific/Auckland")


def at(text: str, tz=AKL) -> datetime:
    """``"2018-12-05 17:00"`` in Auckland time (or ``tz``)."""
    return datetime.strptime(text, "%Y-%m-%d %H:%M").replace(tzinfo=tz)


def span(start: str, end: str, tz=AKL) -> Span:
    return Span(at(start, tz), at(end, tz))


@pytest.fixture
def akl_config() -> ScheduleConfig:
    return ScheduleConfig(
        timezone="Pacific/Auckland",
        business_hours={"start": "08:00", "end": "17:30"},
        holidays=["Christmas Day", "Boxing Day"],
        company_days=["24/12/2018", "27/12/2018", "28/12/2018", "31/12/2018"],
    )


@pytest.fixture
def december_2018() -> Span:
    return reporting_period(AKL, "December", 2018)


@pytest.fixture
def january_2019() -> Span:
    """1 Jan 2019 until (not including) 31 Jan 2019, Auckland time."""
    return span("2019-01-01 00:00", "2019-01-31 00:00")


@pytest.fixture
def holidays_ics() -> bytes:
    return (FIXTURES / "holidays.ics").read_bytes()


@pytest.fixture
def schedule_payload() -> dict:
    with (FIXTURES / "pagerduty" / "schedule_december_2018.json").open(encoding="utf-8") as handle:
        return json.load(handle)


class FakeResponse:
    def __init__(self, payload=None, *, status_code: int = 200, content: bytes = b"") -> None:
        self._payload = payload
        self.status_code = status_code
        self.content = content

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} error", response=self)

    def json(self):
        if self._payload is None:
            raise ValueError("no JSON body")
        return self._payload


class FakeSession:
    """Records requests and replays canned responses keyed by URL suffix."""

    def __init__(self, responses: dict[str, FakeResponse]) -> None:
        self.headers: dict[str, str] = {}
        self.responses = responses
        self.calls: list[tuple[str, dict | None]] = []

    def get(self, url: str, params=None, timeout=None):
        self.calls.append((url, params))
        for suffix, response in self.responses.items():
            if url.endswith(suffix):
                return response
        return FakeResponse(status_code=404)
