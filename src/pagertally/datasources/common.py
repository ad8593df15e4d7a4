"""Generic weekend and after-hours sources derived from business hours."""

from __future__ import annotations

from datetime import date, time, timedelta

from pagertally.config import ScheduleConfig
from pagertally.timespan import Span, at_time, clip, merge_spans

MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY, SUNDAY = range(7)


class _DailyWindowSource:
    """Builds per-day windows over the period, then merges bordering ones.

    Subclasses implement :meth:`windows_for` returning the windows of a single local date.
    Windows are clipped to the reporting period before merging, so e.g. the Friday
    evening, Saturday, Sunday and Monday morning pieces become one Friday-COB to
    Monday-opening span.
    """

    def __init__(self, config: ScheduleConfig, period: Span) -> None:
        self.config = config
        self.period = period
        self._spans = self._build()

    def _build(self) -> list[Span]:
        tz = self.config.tzinfo
        local_period = Span(self.period.start.astimezone(tz), self.period.end.astimezone(tz))
        windows: list[Span] = []
        for day in local_period.dates():
            windows.extend(self.windows_for(day))
        return merge_spans(clip(windows, self.period))

    def _morning(self, day: date) -> Span:
        opening, _ = self.config.business_hours_for_date(day)
        return Span(at_time(day, time(0), self.config.tzinfo), opening)

    def _evening(self, day: date) -> Span:
        _, closing = self.config.business_hours_for_date(day)
        return Span(closing, at_time(day + timedelta(days=1), time(0), self.config.tzinfo))

    def _whole_day(self, day: date) -> Span:
        return Span(
            at_time(day, time(0), self.config.tzinfo),
            at_time(day + timedelta(days=1), time(0), self.config.tzinfo),
        )

    def windows_for(self, day: date) -> list[Span]:  # pragma: no cover - abstract
        raise NotImplementedError

    def spans(self) -> list[Span]:
        return list(self._spans)


class WeekendSource(_DailyWindowSource):
    """Friday close of business until Monday opening of business."""

    def windows_for(self, day: date) -> list[Span]:
        weekday = day.weekday()
        if weekday in (SATURDAY, SUNDAY):
            return [self._whole_day(day)]
        if weekday == FRIDAY:
            return [self._evening(day)]
        if weekday == MONDAY:
            return [self._morning(day)]
        return []


class AfterHoursSource(_DailyWindowSource):
    """Weekday nights outside business hours that are not already weekend."""

    def windows_for(self, day: date) -> list[Span]:
        weekday = day.weekday()
        if weekday == MONDAY:
            # The morning before opening belongs to the weekend.
            return [self._evening(day)]
        if weekday in (TUESDAY, WEDNESDAY, THURSDAY):
            return [self._morning(day), self._evening(day)]
        if weekday == FRIDAY:
            # After close of business on Friday is weekend.
            return [self._morning(day)]
        return []


__all__ = ["WeekendSource", "AfterHoursSource"]
