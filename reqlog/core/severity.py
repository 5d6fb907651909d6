"""Severity classification and terminal styles.

Levels are derived from the HTTP status code only:

- status < 400        -> INFO
- 400 <= status < 500 -> WARN
- status >= 500       -> ERROR

The style tables are ANSI SGR sequences. They are read-only mappings built
once at import time and shared by every render call.
"""

from enum import Enum
from types import MappingProxyType


class LogLevel(str, Enum):
    """Severity of a logged request."""

    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


RESET = "\x1b[0m"

LEVEL_STYLES = MappingProxyType(
    {
        LogLevel.INFO: "\x1b[30;42m",  # black on green
        LogLevel.WARN: "\x1b[30;43m",  # black on yellow
        LogLevel.ERROR: "\x1b[30;41m",  # black on red
    }
)

STATUS_STYLES = MappingProxyType(
    {
        LogLevel.INFO: "\x1b[32m",
        LogLevel.WARN: "\x1b[33m",
        LogLevel.ERROR: "\x1b[31m",
    }
)

METHOD_STYLES = MappingProxyType(
    {
        "GET": "\x1b[32m",
        "POST": "\x1b[33m",
        "PUT": "\x1b[34m",
        "DELETE": "\x1b[31m",
        "PATCH": "\x1b[35m",
        "OPTIONS": "\x1b[36m",
        "HEAD": "\x1b[92m",
        "TRACE": "\x1b[96m",
        "CONNECT": "\x1b[95m",
    }
)


def classify(status: int) -> LogLevel:
    """Map an HTTP status code to a log level."""
    if status >= 500:
        return LogLevel.ERROR
    if status >= 400:
        return LogLevel.WARN
    return LogLevel.INFO


def level_style(level: LogLevel) -> str:
    return LEVEL_STYLES[level]


def status_style(status: int) -> str:
    return STATUS_STYLES[classify(status)]


def method_style(method: str) -> str | None:
    """Style for a method token, or None for methods without one."""
    return METHOD_STYLES.get(method.upper())


def colorize(text: str, style: str | None, enabled: bool) -> str:
    if not enabled or not style:
        return text
    return f"{style}{text}{RESET}"
