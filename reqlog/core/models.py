"""Request log models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field

from reqlog.core.severity import LogLevel, classify


def _now() -> datetime:
    return datetime.now().astimezone()


class RequestInfo(BaseModel):
    """Raw per-request inputs handed to the request logger.

    Timing is either a monotonic ``start_ns``/``end_ns`` pair
    (``time.perf_counter_ns()``) or an explicit ``duration_ns``; the explicit
    duration wins when both are given. ``client_address`` is the unparsed
    candidate taken from forwarding headers, ``None`` when there was none.
    """

    model_config = ConfigDict(frozen=True)

    method: str
    pathname: str
    status: int
    message: str = ""
    client_address: str | None = None
    start_ns: int | None = None
    end_ns: int | None = None
    duration_ns: int | None = None
    timestamp: datetime = Field(default_factory=_now)


class LogEvent(BaseModel):
    """Normalized record of one completed request.

    ``level`` is computed from ``status`` and cannot be passed in.
    ``client_address`` is ``None`` when absent, which is distinct from an
    empty string.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    timestamp: datetime
    duration_ns: int = Field(ge=0)
    method: str
    pathname: str
    status: int = Field(ge=100, le=599)
    message: str = ""
    client_address: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def level(self) -> LogLevel:
        return classify(self.status)
