"""Company-mandated days off read from configuration."""

from __future__ import annotations

import logging

from pagertally.config import ScheduleConfig
from pagertally.timespan import Span, day_span

logger = logging.getLogger(__name__)


class CompanyDaySource:
    """One midnight-to-midnight span per configured company day inside the period."""

    def __init__(self, config: ScheduleConfig, period: Span) -> None:
        self.config = config
        self.period = period
        self._spans = self._read_company_days()

    def _read_company_days(self) -> list[Span]:
        tz = self.config.tzinfo
        spans: list[Span] = []
        for day in sorted(set(self.config.company_days)):
            span = day_span(day, tz)
            if not span.overlaps(self.period):
                logger.debug("Skipping company day %s outside %s", day.isoformat(), self.period)
                continue
            spans.append(span)
        return spans

    def spans(self) -> list[Span]:
        return list(self._spans)


__all__ = ["CompanyDaySource"]
