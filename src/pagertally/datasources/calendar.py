"""Statutory holidays read from an iCal public-holiday feed."""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, tzinfo
from pathlib import Path

import requests
from icalendar import Calendar

from pagertally.config import ScheduleConfig
from pagertally.core.errors import DataSourceError
from pagertally.timespan import Span, at_time, merge_spans, subtract_spans

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def fetch_ical(
    location: str,
    *,
    session: requests.Session | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> bytes:
    """Return the raw iCal payload from an ``http(s)`` URL or a local file path."""
    if location.startswith(("http://", "https://")):
        http = session or requests.Session()
        try:
            response = http.get(location, timeout=timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as exc:
            raise DataSourceError(f"failed to retrieve public holidays from {location}: {exc}") from exc
        return response.content
    try:
        return Path(location).expanduser().read_bytes()
    except OSError as exc:
        raise DataSourceError(f"failed to read public holiday calendar {location}: {exc}") from exc


def _as_instant(value: date | datetime, tz: tzinfo) -> datetime:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=tz)
        return value.astimezone(tz)
    return at_time(value, time(0), tz)


class PublicHolidaySource:
    """Whitelisted iCal events overlapping the reporting period.

    Parameters
    ----------
    config:
        Supplies the feed location (``ical_url``), the summary whitelist (``holidays``)
        and the time zone applied to all-day and floating events.
    period:
        Reporting period; events that do not overlap it are ignored.
    ics_text:
        Pre-fetched calendar payload. When omitted the feed is fetched from
        ``config.ical_url``; when that is unset too the source is empty.
    session:
        Optional ``requests`` session used for the download.
    """

    def __init__(
        self,
        config: ScheduleConfig,
        period: Span,
        *,
        ics_text: str | bytes | None = None,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.config = config
        self.period = period
        self._spans: list[Span] = []
        if ics_text is None:
            if not config.ical_url:
                logger.info("No ical_url configured; statutory holidays disabled")
                return
            ics_text = fetch_ical(config.ical_url, session=session, timeout=timeout)
        self._parse_and_filter(ics_text)
        self._spans.sort(key=lambda span: span.utc_start)

    def _parse_and_filter(self, ics_text: str | bytes) -> None:
        try:
            calendar = Calendar.from_ical(ics_text)
        except ValueError as exc:
            raise DataSourceError(f"failed to parse public holiday calendar: {exc}") from exc

        whitelist = set(self.config.holidays)
        tz = self.config.tzinfo
        for event in calendar.walk("VEVENT"):
            summary = str(event.get("summary", "")).strip()
            if summary not in whitelist:
                continue
            dtstart = event.get("dtstart")
            if dtstart is None:
                logger.warning("Skipping holiday %r without DTSTART", summary)
                continue
            start = _as_instant(dtstart.dt, tz)
            span = Span(start, self._event_end(event, dtstart.dt, start, tz))
            if not span.overlaps(self.period):
                continue
            logger.debug("Public holiday %s: %s", summary, span)
            self._add_span(span)

    @staticmethod
    def _event_end(event, raw_start: date | datetime, start: datetime, tz: tzinfo) -> datetime:
        dtend = event.get("dtend")
        if dtend is not None:
            return _as_instant(dtend.dt, tz)
        duration = event.get("duration")
        if duration is not None:
            return start + duration.dt
        if isinstance(raw_start, datetime):
            return start
        # All-day event without an end lasts the whole day.
        return at_time(raw_start + timedelta(days=1), time(0), tz)

    def _add_span(self, span: Span) -> None:
        """Append the parts of ``span`` not already covered by earlier events.

        An event containing an earlier one leaves fragments on both sides, and every
        fragment is kept, so the covered time does not depend on feed order.
        """
        fragments = subtract_spans(span, merge_spans(self._spans))
        if not fragments:
            logger.debug("Holiday %s already covered", span)
        self._spans.extend(fragments)

    def spans(self) -> list[Span]:
        return list(self._spans)


__all__ = ["PublicHolidaySource", "fetch_ical"]
