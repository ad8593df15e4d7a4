"""Schedule configuration models, loaders and reporting periods."""

from .loaders import load_config, parse_config
from .models import COMPANY_DAY_DATE_FORMAT, BusinessHours, ScheduleConfig
from .period import parse_month, reporting_period

__all__ = [
    "BusinessHours",
    "ScheduleConfig",
    "COMPANY_DAY_DATE_FORMAT",
    "load_config",
    "parse_config",
    "parse_month",
    "reporting_period",
]
