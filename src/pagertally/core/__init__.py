"""Core utilities shared across pagertally modules."""

from .errors import ConfigError, DataSourceError, OutputError, PagerTallyValueError
from .log import configure_logging

__all__ = [
    "PagerTallyValueError",
    "ConfigError",
    "DataSourceError",
    "OutputError",
    "configure_logging",
]
