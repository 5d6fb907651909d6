"""Logging configuration and the request logging middleware.

Two kinds of output leave this package:

- Access lines: one rendered line per request, written verbatim through the
  stdlib logger ``reqlog.access``.
- Diagnostics: reqlog's own structured logs (startup, misconfiguration,
  logging failures), emitted with structlog.
  - Development: Human-readable colored console output
  - Production: JSON formatted output for log aggregation

Usage:
    from reqlog.core.logging import setup_logging, get_logger

    # Initialize at app startup
    setup_logging()

    # Get a logger
    logger = get_logger(__name__)
    logger.info("event_name", key="value")
"""

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from starlette.datastructures import Headers
from structlog.types import Processor

if TYPE_CHECKING:
    from reqlog.config import Settings
    from reqlog.core.assembler import RequestContext
    from reqlog.core.request_logger import RequestLogger

ACCESS_LOGGER_NAME = "reqlog.access"


def get_log_level(level_name: str) -> int:
    """Convert log level name to logging constant."""
    levels = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return levels.get(level_name.upper(), logging.INFO)


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "auto",
    is_development: bool = True,
) -> None:
    """
    Configure diagnostic logging and the access logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format - 'auto' (based on environment), 'console', or 'json'
        is_development: Whether running in development mode
    """
    level = get_log_level(log_level)

    # Determine format based on settings
    if log_format == "auto":
        use_json = not is_development
    else:
        use_json = log_format == "json"

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if use_json:
        formatter = structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
            foreign_pre_chain=shared_processors,
        )
    else:
        formatter = structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            ),
            foreign_pre_chain=shared_processors,
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    # Access lines are already rendered; they bypass the structlog formatter
    get_access_logger()

    _configure_library_loggers(level)


def get_access_logger() -> logging.Logger:
    """
    Get the logger that receives rendered access lines.

    The logger writes ``%(message)s`` to stdout and does not propagate, so
    each line reaches the terminal exactly as rendered. Handler locking
    keeps lines from concurrent requests from interleaving.
    """
    access_logger = logging.getLogger(ACCESS_LOGGER_NAME)
    if not access_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(message)s"))
        access_logger.addHandler(handler)
        access_logger.setLevel(logging.INFO)
        access_logger.propagate = False
    return access_logger


def _configure_library_loggers(app_level: int) -> None:
    """Set appropriate log levels for third-party libraries."""
    # reqlog replaces the server's own access log
    noisy_loggers = [
        "uvicorn.access",
        "httpx",
        "httpcore",
        "asyncio",
    ]

    min_level = max(logging.WARNING, app_level)

    for logger_name in noisy_loggers:
        logging.getLogger(logger_name).setLevel(min_level)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        A bound logger instance with structured logging capabilities

    Example:
        logger = get_logger(__name__)
        logger.warning("request_log_failed", error=str(e))
    """
    return structlog.stdlib.get_logger(name)


class LoggingMiddleware:
    """
    ASGI middleware for request logging.

    Times every HTTP request and hands the result to a ``RequestLogger``,
    which filters, renders and emits one access line. Requests to
    ``skip_paths`` are not logged. Logging never fails a request: errors
    raised while logging are reported as diagnostics and swallowed, while
    exceptions raised by the application are logged as status 500 and
    re-raised.
    """

    def __init__(
        self,
        app: Any,
        request_logger: "RequestLogger | None" = None,
        settings: "Settings | None" = None,
    ) -> None:
        from reqlog.core.request_logger import RequestLogger

        self.app = app
        self.request_logger = request_logger or RequestLogger(settings)
        self.skip_paths = set(self.request_logger.settings.skip_paths)
        self.logger = get_logger("reqlog.http")

    async def __call__(self, scope: dict, receive: Any, send: Any) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path = scope.get("path", "")

        if path in self.skip_paths:
            await self.app(scope, receive, send)
            return

        context = self.request_logger.start()

        # Bind context for diagnostics emitted within this request
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            path=path,
            method=scope.get("method", ""),
        )

        # Track response status
        status_code = 500
        error_message = ""

        async def send_wrapper(message: dict) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 500)
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as e:
            status_code = 500
            error_message = str(e)
            raise
        finally:
            self._log_request(context, scope, path, status_code, error_message)
            structlog.contextvars.clear_contextvars()

    def _log_request(
        self,
        context: "RequestContext",
        scope: dict,
        path: str,
        status_code: int,
        message: str,
    ) -> None:
        from reqlog.core.assembler import client_address_from_headers

        try:
            info = context.complete(
                method=scope.get("method", ""),
                pathname=path,
                status=status_code,
                message=message,
                client_address=client_address_from_headers(Headers(scope=scope)),
            )
            self.request_logger.process(info)
        except Exception as e:
            self.logger.warning("request_log_failed", error=str(e), exc_info=True)
