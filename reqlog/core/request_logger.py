"""Request logger: assemble, filter, render and emit one line per request."""

import logging
import sys
from typing import Callable

from reqlog.config import Settings, get_settings
from reqlog.core.assembler import RequestContext, assemble_event
from reqlog.core.exceptions import TemplateError
from reqlog.core.filters import should_log
from reqlog.core.logging import get_access_logger, get_logger
from reqlog.core.models import LogEvent, RequestInfo
from reqlog.core.template import DEFAULT_LOG_FORMAT, compile_template

logger = get_logger(__name__)

Sink = Callable[[str], None]


def resolve_colors(colors: bool | None) -> bool:
    """Explicit setting wins; otherwise colorize only when stdout is a tty."""
    if colors is not None:
        return colors
    return sys.stdout is not None and sys.stdout.isatty()


class AccessLogSink:
    """Writes each line through the ``reqlog.access`` logger, one record per line."""

    def __init__(self, access_logger: logging.Logger | None = None) -> None:
        self.access_logger = access_logger or get_access_logger()

    def __call__(self, line: str) -> None:
        self.access_logger.info(line)


class RequestLogger:
    """
    Per-application request logger.

    Compiles the log format once at construction; a bad format raises
    ``TemplateError`` here, before any request is served. Afterwards every
    call works only on its own inputs plus read-only shared state, so one
    instance serves any number of concurrent requests.

    Usage:
        request_logger = RequestLogger(Settings(ip=True))
        context = request_logger.start()
        ...  # handle request
        request_logger.process(context.complete(method="GET", pathname="/", status=200))
    """

    def __init__(self, settings: Settings | None = None, sink: Sink | None = None) -> None:
        self.settings = settings or get_settings()

        log_format = self.settings.custom_log_format or DEFAULT_LOG_FORMAT
        try:
            self.template = compile_template(log_format)
        except TemplateError as e:
            logger.error("log_template_invalid", template=log_format, error=e.reason)
            raise

        self.log_filter = self.settings.log_filter
        self.ip_enabled = self.settings.ip
        self.colors = resolve_colors(self.settings.colors)
        self.sink = sink or AccessLogSink()

        logger.debug(
            "request_logger_configured",
            template=log_format,
            ip=self.ip_enabled,
            filtered=self.log_filter is not None,
            colors=self.colors,
        )

    def start(self) -> RequestContext:
        """Capture the start of a request."""
        return RequestContext.start()

    def format_event(self, event: LogEvent) -> str | None:
        """Render ``event``, or return None if the filter rejects it."""
        if not should_log(event, self.log_filter):
            return None
        return self.template.render(event, colors=self.colors)

    def process(self, info: RequestInfo) -> str | None:
        """
        Log one completed request.

        Args:
            info: Raw request inputs

        Returns:
            The line handed to the sink, or None if the request was filtered out
        """
        event = assemble_event(info, self.ip_enabled)
        line = self.format_event(event)
        if line is not None:
            self.sink(line)
        return line
