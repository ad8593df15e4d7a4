"""Category sources: company days, public holidays, weekends and after-hours."""

from __future__ import annotations

import requests

from pagertally.config import ScheduleConfig
from pagertally.timespan import Span

from .base import CategorySource, StaticSource
from .calendar import PublicHolidaySource, fetch_ical
from .common import AfterHoursSource, WeekendSource
from .company_days import CompanyDaySource


def build_sources(
    config: ScheduleConfig,
    period: Span,
    *,
    ics_text: str | bytes | None = None,
    session: requests.Session | None = None,
) -> tuple[CompanyDaySource, PublicHolidaySource, WeekendSource, AfterHoursSource]:
    """Instantiate the four category sources in attribution priority order."""
    return (
        CompanyDaySource(config, period),
        PublicHolidaySource(config, period, ics_text=ics_text, session=session),
        WeekendSource(config, period),
        AfterHoursSource(config, period),
    )


__all__ = [
    "CategorySource",
    "StaticSource",
    "CompanyDaySource",
    "PublicHolidaySource",
    "WeekendSource",
    "AfterHoursSource",
    "build_sources",
    "fetch_ical",
]
