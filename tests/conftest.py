"""
Shared pytest fixtures for reqlog tests.

Test categories:
    - Unit tests: pure functions and models, no ASGI app
    - Integration tests: the middleware driven through a FastAPI app with
      httpx's ASGITransport (no network, no server process)

Access lines are captured by passing ``access_lines.append`` as the request
logger's sink, so tests never depend on stdout.
"""

import logging
import os
from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

import pytest
import structlog
from httpx import ASGITransport, AsyncClient

# Keep the developer's environment out of Settings()
os.environ.setdefault("REQLOG_APP_ENV", "testing")
os.environ.setdefault("REQLOG_LOG_LEVEL", "WARNING")

from reqlog.config import Settings  # noqa: E402
from reqlog.core.models import LogEvent, RequestInfo  # noqa: E402
from reqlog.core.request_logger import RequestLogger  # noqa: E402
from reqlog.main import create_app  # noqa: E402

FIXED_TIMESTAMP = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


# =============================================================================
# Model Factories
# =============================================================================


@pytest.fixture
def make_event() -> Callable[..., LogEvent]:
    """Build a LogEvent with sensible defaults."""

    def _make(**overrides: Any) -> LogEvent:
        fields: dict[str, Any] = {
            "timestamp": FIXED_TIMESTAMP,
            "duration_ns": 1_500_000,
            "method": "GET",
            "pathname": "/",
            "status": 200,
            "message": "",
            "client_address": None,
        }
        fields.update(overrides)
        return LogEvent(**fields)

    return _make


@pytest.fixture
def make_info() -> Callable[..., RequestInfo]:
    """Build a RequestInfo with sensible defaults."""

    def _make(**overrides: Any) -> RequestInfo:
        fields: dict[str, Any] = {
            "method": "GET",
            "pathname": "/",
            "status": 200,
            "start_ns": 1_000,
            "end_ns": 2_001_000,
            "timestamp": FIXED_TIMESTAMP,
        }
        fields.update(overrides)
        return RequestInfo(**fields)

    return _make


# =============================================================================
# Request Logger Fixtures
# =============================================================================


@pytest.fixture
def access_lines() -> list[str]:
    """Lines emitted by the request logger under test."""
    return []


@pytest.fixture
def make_request_logger(access_lines: list[str]) -> Callable[..., RequestLogger]:
    """Build a colorless RequestLogger whose sink appends to ``access_lines``."""

    def _make(**settings_overrides: Any) -> RequestLogger:
        settings_overrides.setdefault("colors", False)
        return RequestLogger(Settings(**settings_overrides), sink=access_lines.append)

    return _make


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest.fixture
def make_client(
    make_request_logger: Callable[..., RequestLogger],
) -> Callable[..., Any]:
    """
    Create an async test client for an app configured with the given settings.

    Usage:
        async with make_client(ip=True) as client:
            await client.get("/")
    """

    @asynccontextmanager
    async def _make(
        raise_app_exceptions: bool = True, **settings_overrides: Any
    ) -> AsyncGenerator[AsyncClient, None]:
        request_logger = make_request_logger(**settings_overrides)
        app = create_app(request_logger.settings, request_logger)

        @app.get("/boom")
        async def boom() -> str:
            raise RuntimeError("handler exploded")

        async with AsyncClient(
            transport=ASGITransport(app=app, raise_app_exceptions=raise_app_exceptions),
            base_url="http://test",
        ) as client:
            yield client

    return _make


@pytest.fixture
def restore_logging():
    """Undo global logging changes made by setup_logging()."""
    root_logger = logging.getLogger()
    access_logger = logging.getLogger("reqlog.access")
    saved = (
        list(root_logger.handlers),
        root_logger.level,
        list(access_logger.handlers),
        access_logger.level,
        access_logger.propagate,
        logging.getLogger("uvicorn.access").level,
    )

    yield

    root_logger.handlers = saved[0]
    root_logger.setLevel(saved[1])
    access_logger.handlers = saved[2]
    access_logger.setLevel(saved[3])
    access_logger.propagate = saved[4]
    logging.getLogger("uvicorn.access").setLevel(saved[5])
    structlog.reset_defaults()
