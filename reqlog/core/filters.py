"""Request log filtering.

A request is logged only if every configured dimension of the ``LogFilter``
matches. Dimensions left unset never exclude anything; a dimension
configured with an empty collection excludes everything.
"""

from typing import Any, Callable, Iterable

from reqlog.config import LogFilter
from reqlog.core.models import LogEvent
from reqlog.core.severity import LogLevel


def _level_matches(candidate: Any, level: LogLevel) -> bool:
    return isinstance(candidate, str) and candidate == level.value


def _status_matches(candidate: Any, status: int) -> bool:
    # bool is an int subclass; True must not match status 1
    return isinstance(candidate, int) and not isinstance(candidate, bool) and candidate == status


def _method_matches(candidate: Any, method: str) -> bool:
    return isinstance(candidate, str) and candidate.upper() == method.upper()


def _dimension_matches(
    allowed: Iterable[Any] | None,
    value: Any,
    matches: Callable[[Any, Any], bool],
) -> bool:
    if allowed is None:
        return True
    return any(matches(candidate, value) for candidate in allowed)


def should_log(event: LogEvent, log_filter: LogFilter | None) -> bool:
    """Return True if ``event`` passes ``log_filter``.

    Args:
        event: The assembled request event
        log_filter: Filter configuration, or None to allow everything

    Returns:
        True if the event should be emitted, False otherwise
    """
    if log_filter is None:
        return True

    return (
        _dimension_matches(log_filter.level, event.level, _level_matches)
        and _dimension_matches(log_filter.status, event.status, _status_matches)
        and _dimension_matches(log_filter.method, event.method, _method_matches)
    )
