"""YAML configuration loading."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError

from pagertally.core.errors import ConfigError

from .models import ScheduleConfig

__all__ = ["load_config", "parse_config"]


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ())) or "<root>"
        parts.append(f"{location}: {error.get('msg')}")
    return "; ".join(parts)


def parse_config(payload: object, *, source: str = "<config>") -> ScheduleConfig:
    """Validate an already-decoded YAML mapping."""
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ConfigError(f"{source}: configuration must be a mapping, got {type(payload).__name__}")
    try:
        return ScheduleConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"{source}: {_format_validation_error(exc)}") from exc


def load_config(path: str | Path) -> ScheduleConfig:
    """Load a :class:`ScheduleConfig` from a YAML file.

    Raises
    ------
    ConfigError
        If the file cannot be read, is not valid YAML, or fails validation.
    """
    config_path = Path(path)
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle)
    except OSError as exc:
        raise ConfigError(f"unable to read configuration file {config_path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"{config_path}: invalid YAML ({exc})") from exc
    return parse_config(payload, source=str(config_path))
