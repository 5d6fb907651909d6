"""Build ``LogEvent``s from raw request inputs."""

import time
from dataclasses import dataclass
from typing import Mapping

from reqlog.core.logging import get_logger
from reqlog.core.models import LogEvent, RequestInfo

logger = get_logger(__name__)

# Checked in order; the first header present wins
FORWARDING_HEADERS = ("x-forwarded-for", "x-real-ip")


def client_address_from_headers(headers: Mapping[str, str]) -> str | None:
    """
    Extract the client address candidate from forwarding headers.

    Takes the first (client-most) entry of ``X-Forwarded-For``, falling back
    to ``X-Real-IP``. The socket peer address is deliberately not used.

    Args:
        headers: Request headers with lower-case lookup (Starlette ``Headers``
            are case-insensitive)

    Returns:
        The candidate address, or None when no forwarding header is present
    """
    for name in FORWARDING_HEADERS:
        value = headers.get(name)
        if value:
            return value.split(",")[0].strip()
    return None


def _measure_duration(info: RequestInfo) -> int:
    if info.duration_ns is not None:
        elapsed = info.duration_ns
    elif info.start_ns is not None and info.end_ns is not None:
        elapsed = info.end_ns - info.start_ns
    else:
        elapsed = 0

    if elapsed < 0:
        logger.debug("negative_duration_clamped", duration_ns=elapsed)
        return 0
    return elapsed


def _client_address(candidate: str | None, ip_enabled: bool) -> str | None:
    if not ip_enabled or candidate is None:
        return None
    return candidate.strip() or None


def assemble_event(info: RequestInfo, ip_enabled: bool) -> LogEvent:
    """
    Normalize raw request inputs into a ``LogEvent``.

    Args:
        info: Raw request inputs
        ip_enabled: Whether client addresses are recorded at all

    Returns:
        The event; a negative duration is clamped to zero, and the client
        address is None when IP logging is off or no candidate was given
    """
    return LogEvent(
        timestamp=info.timestamp,
        duration_ns=_measure_duration(info),
        method=info.method.upper(),
        pathname=info.pathname,
        status=info.status,
        message=info.message,
        client_address=_client_address(info.client_address, ip_enabled),
    )


@dataclass(frozen=True)
class RequestContext:
    """
    Timing state of one in-flight request.

    Created when the request arrives and completed once the response has
    been sent. Owned by that request only.

    Usage:
        context = RequestContext.start()
        ...  # handle request
        info = context.complete(method="GET", pathname="/", status=200)
    """

    start_ns: int

    @classmethod
    def start(cls) -> "RequestContext":
        return cls(start_ns=time.perf_counter_ns())

    def complete(
        self,
        method: str,
        pathname: str,
        status: int,
        message: str = "",
        client_address: str | None = None,
    ) -> RequestInfo:
        return RequestInfo(
            method=method,
            pathname=pathname,
            status=status,
            message=message,
            client_address=client_address,
            start_ns=self.start_ns,
            end_ns=time.perf_counter_ns(),
        )
