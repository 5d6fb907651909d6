"""Exceptions raised by reqlog."""


class ReqlogError(Exception):
    """Base class for reqlog errors."""


class TemplateError(ReqlogError, ValueError):
    """A log format string could not be compiled.

    Raised at startup, when the request logger is built, so that a bad
    ``custom_log_format`` never reaches request handling.
    """

    def __init__(self, template: str, reason: str) -> None:
        self.template = template
        self.reason = reason
        super().__init__(f"Invalid log format {template!r}: {reason}")
