"""Request logger configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _as_tuple(value: Any) -> tuple[Any, ...] | None:
    if value is None:
        return None
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(value)
    return (value,)


class LogFilter(BaseModel):
    """Allow-list narrowing which requests get logged.

    Each dimension is optional. A scalar value is treated as a one-element
    set. Values are kept as given, without validation: a value that can never
    equal an event field (``"200"`` for status, ``"DEBUG"`` for level) simply
    never matches on that dimension.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    level: tuple[Any, ...] | None = None
    status: tuple[Any, ...] | None = None
    method: tuple[Any, ...] | None = None

    @field_validator("level", "status", "method", mode="before")
    @classmethod
    def normalize_dimension(cls, v: Any) -> tuple[Any, ...] | None:
        return _as_tuple(v)


class Settings(BaseSettings):
    """Request logger settings loaded from ``REQLOG_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="REQLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: str = "development"

    # Diagnostic logging
    log_level: str = "INFO"
    log_format: str = "auto"  # auto (based on app_env), console, or json

    # Access log
    ip: bool = False
    custom_log_format: str | None = None  # None -> DEFAULT_LOG_FORMAT
    log_filter: LogFilter | None = None  # None -> log every request
    colors: bool | None = None  # None -> colorize when stdout is a tty
    skip_paths: list[str] = []

    @field_validator("skip_paths", mode="before")
    @classmethod
    def parse_skip_paths(cls, v: Any) -> list[str]:
        if isinstance(v, str):
            return [p.strip() for p in v.split(",") if p.strip()]
        return v

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
