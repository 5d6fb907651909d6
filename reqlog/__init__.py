"""Request log formatting and filtering for ASGI applications."""

__version__ = "0.1.0"

from reqlog.config import LogFilter, Settings, get_settings  # noqa: E402
from reqlog.core.exceptions import ReqlogError, TemplateError  # noqa: E402
from reqlog.core.logging import LoggingMiddleware, setup_logging  # noqa: E402
from reqlog.core.request_logger import AccessLogSink, RequestLogger  # noqa: E402

__all__ = [
    "__version__",
    "LogFilter",
    "Settings",
    "get_settings",
    "ReqlogError",
    "TemplateError",
    "LoggingMiddleware",
    "setup_logging",
    "AccessLogSink",
    "RequestLogger",
]
