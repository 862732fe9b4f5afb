"""SQLsmith configuration loaded from environment variables."""

from __future__ import annotations

import logging
from enum import Enum

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sqlsmith.errors import ConfigurationError
from sqlsmith.models.dialect import Dialect
from sqlsmith.output.formatter import MergeOptions

logger = logging.getLogger(__name__)


class LogLevel(str, Enum):
    ERROR = "error"
    WARN = "warn"
    WARNING = "warning"
    INFO = "info"
    DEBUG = "debug"

    @property
    def level(self) -> int:
        if self is LogLevel.WARN:
            return logging.WARNING
        return logging.getLevelName(self.value.upper())


class Settings(BaseSettings):
    """Application settings loaded from environment variables with SQLSMITH_ prefix."""

    model_config = SettingsConfigDict(
        env_prefix="SQLSMITH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Parsing
    dialect: Dialect = Dialect.POSTGRESQL

    # Ordering
    allow_reorder: bool = False

    # Output layout
    add_comments: bool = True
    include_header: bool = True
    separate_statements: bool = True

    # Logging
    log_level: LogLevel = LogLevel.INFO
    structured_logging: bool = False

    @field_validator("dialect", "log_level", mode="before")
    @classmethod
    def lowercase_enum_value(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    def merge_options(self) -> MergeOptions:
        return MergeOptions(
            add_comments=self.add_comments,
            include_header=self.include_header,
            separate_statements=self.separate_statements,
        )


def load_settings(**overrides: object) -> Settings:
    """Load settings from environment, with optional overrides (CLI flags, tests)."""
    try:
        settings = Settings(**overrides)  # type: ignore[arg-type]
    except ValidationError as exc:
        first = exc.errors()[0]
        option = ".".join(str(part) for part in first["loc"]) or "settings"
        raise ConfigurationError(option, first.get("input")) from exc
    logger.debug("Loaded settings: dialect=%s allow_reorder=%s", settings.dialect.value, settings.allow_reorder)
    return settings
