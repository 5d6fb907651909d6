"""Request logging core."""

from reqlog.core.assembler import RequestContext, assemble_event, client_address_from_headers
from reqlog.core.filters import should_log
from reqlog.core.models import LogEvent, RequestInfo
from reqlog.core.severity import LogLevel, classify
from reqlog.core.template import (
    DEFAULT_LOG_FORMAT,
    CompiledTemplate,
    compile_template,
    render,
)

__all__ = [
    "RequestContext",
    "assemble_event",
    "client_address_from_headers",
    "should_log",
    "LogEvent",
    "RequestInfo",
    "LogLevel",
    "classify",
    "DEFAULT_LOG_FORMAT",
    "CompiledTemplate",
    "compile_template",
    "render",
]
