"""FastAPI application factory with request logging installed."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from reqlog import __version__
from reqlog.config import Settings, get_settings
from reqlog.core.logging import LoggingMiddleware, get_logger, setup_logging
from reqlog.core.request_logger import RequestLogger


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifecycle management."""
    settings: Settings = app.state.settings

    setup_logging(
        log_level=settings.log_level,
        log_format=settings.log_format,
        is_development=settings.is_development,
    )

    logger = get_logger(__name__)
    logger.info("application_started", environment=settings.app_env, ip_logging=settings.ip)

    yield

    logger.info("application_shutdown_complete")


def create_app(
    settings: Settings | None = None,
    request_logger: RequestLogger | None = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    The request logger is built here rather than on the first request, so a
    malformed log format fails application startup.
    """
    settings = settings or get_settings()
    request_logger = request_logger or RequestLogger(settings)

    app = FastAPI(
        title="reqlog",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.request_logger = request_logger

    app.add_middleware(LoggingMiddleware, request_logger=request_logger)

    @app.get("/")
    async def index() -> str:
        return "reqlog getting"

    @app.post("/reqlog")
    async def create() -> str:
        return "reqlog posting"

    return app
