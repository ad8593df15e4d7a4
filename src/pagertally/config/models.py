"""Pydantic models describing pagertally schedule configuration."""

from __future__ import annotations

from datetime import date, datetime, time
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from pagertally.timespan import at_time

COMPANY_DAY_DATE_FORMAT = "%d/%m/%Y"
BUSINESS_TIME_FORMAT = "%H:%M"


class BusinessHours(BaseModel):
    """Daily opening window used to derive weekend and after-hours spans.

    Attributes
    ----------
    start:
        Opening of business (wall clock, ``HH:MM`` in YAML).
    end:
        Close of business (wall clock, ``HH:MM``). Must be later than ``start``.
    """

    model_config = ConfigDict(frozen=True)

    start: time = time(9, 0)
    end: time = time(17, 0)

    @field_validator("start", "end", mode="before")
    @classmethod
    def _parse_clock(cls, value: object) -> object:
        if isinstance(value, str):
            try:
                return datetime.strptime(value.strip(), BUSINESS_TIME_FORMAT).time()
            except ValueError as exc:
                raise ValueError(f"business hours must use HH:MM, got {value!r}") from exc
        if isinstance(value, int):
            # YAML 1.1 reads unquoted 17:30 as a sexagesimal integer (minutes).
            hours, minutes = divmod(value, 60)
            return time(hours, minutes)
        return value

    @model_validator(mode="after")
    def _start_before_end(self) -> BusinessHours:
        if self.start >= self.end:
            raise ValueError("business_hours.start must be earlier than business_hours.end")
        return self


class ScheduleConfig(BaseModel):
    """Immutable settings shared by every category source of a report run.

    Attributes
    ----------
    timezone:
        IANA zone name in which business hours, weekends and company days are evaluated.
    business_hours:
        Opening and closing times applied to every working day.
    ical_url:
        URL or local path of the public-holiday iCal feed. ``None`` disables statutory
        holidays.
    holidays:
        Whitelist of iCal event summaries that count as statutory holidays.
    company_days:
        Company-mandated days off (``dd/mm/yyyy`` in YAML).
    schedules:
        Default PagerDuty schedule identifiers when none are given on the command line.
    """

    model_config = ConfigDict(frozen=True)

    timezone: str = "UTC"
    business_hours: BusinessHours = BusinessHours()
    ical_url: str | None = None
    holidays: tuple[str, ...] = ()
    company_days: tuple[date, ...] = ()
    schedules: tuple[str, ...] = ()

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown timezone {value!r}; use an IANA name") from exc
        return value

    @field_validator("company_days", mode="before")
    @classmethod
    def _parse_company_days(cls, value: object) -> object:
        if value is None:
            return ()
        if not isinstance(value, (list, tuple)):
            raise ValueError("company_days must be a list of dd/mm/yyyy dates")
        parsed: list[object] = []
        for item in value:
            if isinstance(item, str):
                try:
                    parsed.append(datetime.strptime(item.strip(), COMPANY_DAY_DATE_FORMAT).date())
                except ValueError as exc:
                    raise ValueError(f"company day {item!r} is not a dd/mm/yyyy date") from exc
            else:
                parsed.append(item)
        return parsed

    @field_validator("holidays", "schedules", mode="before")
    @classmethod
    def _none_as_empty(cls, value: object) -> object:
        return () if value is None else value

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def business_hours_for_date(self, day: date) -> tuple[datetime, datetime]:
        """Opening and closing instants of business on ``day`` in the configured zone."""
        tz = self.tzinfo
        return at_time(day, self.business_hours.start, tz), at_time(day, self.business_hours.end, tz)


__all__ = ["BusinessHours", "ScheduleConfig", "COMPANY_DAY_DATE_FORMAT", "BUSINESS_TIME_FORMAT"]
