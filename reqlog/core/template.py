"""Log format compilation and rendering.

A format string such as ``"{method} {pathname} {status} IP: {ip}"`` is
parsed once into a ``CompiledTemplate``: an immutable sequence of literal
text and placeholder segments. Rendering walks the segments in order and
substitutes each placeholder from a ``LogEvent``.

Braces follow ``str.format`` conventions, so ``{{`` and ``}}`` produce
literal braces. Placeholders take no format spec or conversion.

Usage:
    template = compile_template("{method} {pathname} {status}")
    line = template.render(event, colors=False)
"""

import string
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from types import MappingProxyType
from typing import Callable

from reqlog.core.exceptions import TemplateError
from reqlog.core.models import LogEvent
from reqlog.core.severity import colorize, level_style, method_style, status_style

DEFAULT_LOG_FORMAT = "{now} {level} {duration} {method} {pathname} {status} {message} {ip}"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
MISSING_ADDRESS = "null"

_DURATION_UNITS = (
    ("s", 1_000_000_000),
    ("ms", 1_000_000),
    ("µs", 1_000),
)


def format_duration(duration_ns: int) -> str:
    """Render a duration in the largest unit it fills, e.g. ``1.52ms``."""
    for unit, size in _DURATION_UNITS:
        if duration_ns >= size:
            return f"{duration_ns / size:.2f}{unit}"
    return f"{duration_ns}ns"


def format_timestamp(timestamp: datetime) -> str:
    return timestamp.strftime(TIMESTAMP_FORMAT)


_RENDERERS: MappingProxyType[str, Callable[[LogEvent, bool], str]] = MappingProxyType(
    {
        "now": lambda event, colors: format_timestamp(event.timestamp),
        "duration": lambda event, colors: format_duration(event.duration_ns),
        "level": lambda event, colors: colorize(
            event.level.value, level_style(event.level), colors
        ),
        "method": lambda event, colors: colorize(
            event.method, method_style(event.method), colors
        ),
        "pathname": lambda event, colors: event.pathname,
        "status": lambda event, colors: colorize(
            str(event.status), status_style(event.status), colors
        ),
        "message": lambda event, colors: event.message,
        "ip": lambda event, colors: (
            event.client_address if event.client_address is not None else MISSING_ADDRESS
        ),
    }
)

PLACEHOLDERS = frozenset(_RENDERERS)


@dataclass(frozen=True)
class LiteralSegment:
    text: str


@dataclass(frozen=True)
class PlaceholderSegment:
    name: str


Segment = LiteralSegment | PlaceholderSegment


@dataclass(frozen=True)
class CompiledTemplate:
    """Parsed log format, safe to share between concurrent requests."""

    source: str
    segments: tuple[Segment, ...]

    @property
    def placeholders(self) -> tuple[str, ...]:
        return tuple(s.name for s in self.segments if isinstance(s, PlaceholderSegment))

    def render(self, event: LogEvent, colors: bool = False) -> str:
        return render(self, event, colors=colors)


_formatter = string.Formatter()


@lru_cache(maxsize=64)
def compile_template(fmt: str) -> CompiledTemplate:
    """
    Compile a log format string.

    Args:
        fmt: Format string with ``{placeholder}`` tokens

    Returns:
        The compiled template

    Raises:
        TemplateError: If a placeholder is unknown, carries a format spec
            or conversion, or the braces are unbalanced
    """
    try:
        parsed = list(_formatter.parse(fmt))
    except ValueError as e:
        raise TemplateError(fmt, str(e)) from e

    segments: list[Segment] = []
    for literal_text, field_name, format_spec, conversion in parsed:
        if literal_text:
            # "{{" splits literal text into adjacent pieces
            if segments and isinstance(segments[-1], LiteralSegment):
                segments[-1] = LiteralSegment(segments[-1].text + literal_text)
            else:
                segments.append(LiteralSegment(literal_text))

        if field_name is None:
            continue
        if not field_name:
            raise TemplateError(fmt, "empty placeholder '{}'")
        if field_name not in PLACEHOLDERS:
            raise TemplateError(
                fmt,
                f"unknown placeholder '{{{field_name}}}', "
                f"expected one of {', '.join(sorted(PLACEHOLDERS))}",
            )
        if format_spec or conversion:
            raise TemplateError(
                fmt, f"placeholder '{{{field_name}}}' does not take a format spec or conversion"
            )
        segments.append(PlaceholderSegment(field_name))

    return CompiledTemplate(source=fmt, segments=tuple(segments))


def render(template: CompiledTemplate, event: LogEvent, colors: bool = False) -> str:
    """Render ``event`` with ``template``. Never raises for a valid event."""
    return "".join(
        segment.text
        if isinstance(segment, LiteralSegment)
        else _RENDERERS[segment.name](event, colors)
        for segment in template.segments
    )
