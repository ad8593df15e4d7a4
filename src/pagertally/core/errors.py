"""Common pagertally-specific exceptions."""


class PagerTallyValueError(ValueError):
    """Raised when pagertally detects invalid user-provided data."""


class ConfigError(PagerTallyValueError):
    """Raised when the schedule configuration is missing or invalid."""


class DataSourceError(RuntimeError):
    """Raised when an external feed (PagerDuty, iCal) cannot be fetched or parsed."""


class OutputError(RuntimeError):
    """Raised when a report cannot be written to its destination."""


__all__ = ["PagerTallyValueError", "ConfigError", "DataSourceError", "OutputError"]
