from __future__ import annotations

import codecs
import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_LINE_LENGTH = 65_536
CONFIG_TABLE = "scut"

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class ConfigError(RuntimeError):
    pass


class ScutSettings(BaseModel):
    max_line_length: int = Field(default=DEFAULT_MAX_LINE_LENGTH, ge=1)
    input_encoding: str = Field(default="latin-1", min_length=1)
    flush_each_line: bool = False
    log_level: str = Field(default="WARNING")

    @field_validator("input_encoding")
    @classmethod
    def validate_encoding(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError as error:
            raise ValueError(f"Unknown encoding '{value}'.") from error
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in _LOG_LEVELS:
            allowed = ", ".join(sorted(_LOG_LEVELS))
            raise ValueError(f"Unknown log level '{value}'. Allowed: {allowed}")
        return normalized


def _read_toml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    try:
        with path.open("rb") as handle:
            payload = tomllib.load(handle)
    except (tomllib.TOMLDecodeError, OSError) as error:
        raise ConfigError(f"Unable to read config file {path}: {error}") from error

    section = payload.get(CONFIG_TABLE, payload)
    if not isinstance(section, dict):
        raise ConfigError(f"Config file {path}: [{CONFIG_TABLE}] must be a table.")
    return {key: value for key, value in section.items() if key in ScutSettings.model_fields}


def load_settings(
    config_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> ScutSettings:
    """Build settings from defaults, an optional TOML file, then ``overrides``.

    Only the file passed as ``config_path`` is read; nothing is discovered
    from the working directory, home directory or environment.
    """
    values: dict[str, Any] = {}
    if config_path is not None:
        LOGGER.debug("Loading settings from %s", config_path)
        values.update(_read_toml(config_path))
    values.update({key: value for key, value in (overrides or {}).items() if value is not None})

    try:
        return ScutSettings.model_validate(values)
    except ValidationError as error:
        details = "; ".join(
            f"{'.'.join(str(part) for part in item['loc'])}: {item['msg']}" for item in error.errors()
        )
        raise ConfigError(f"Invalid settings: {details}") from error
