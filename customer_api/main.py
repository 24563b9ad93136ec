"""FastAPI application entry point."""

from __future__ import annotations

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request

from customer_api import __version__
from customer_api.api.customers import router as customers_router
from customer_api.api.health import router as health_router
from customer_api.config import Settings
from customer_api.database import create_engine
from customer_api.errors.exceptions import AsyncRequestTimeoutError
from customer_api.errors.handlers import register_error_handlers, render_error
from customer_api.models.base import Base

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable

    from starlette.responses import Response

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(debug: bool) -> None:
    """Send service and library logs to stdout.

    Debug mode lowers ``customer_api`` to DEBUG and turns on SQL statement
    logging; otherwise SQLAlchemy only reports warnings.
    """
    logging.basicConfig(
        level=logging.INFO,
        format=LOG_FORMAT,
        stream=sys.stdout,
        force=True,
    )
    logging.getLogger("customer_api").setLevel(logging.DEBUG if debug else logging.INFO)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if debug else logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def ensure_sqlite_dir(database_url: str) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    if not database_url.startswith("sqlite"):
        return
    db_path = database_url.split("///", 1)[-1] if "///" in database_url else None
    if db_path and db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan: startup and shutdown."""
    settings: Settings = app.state.settings
    configure_logging(settings.debug)
    logger.info("Starting customer API (debug=%s)", settings.debug)

    ensure_sqlite_dir(settings.database_url)

    try:
        engine, session_factory = create_engine(settings)
        app.state.engine = engine
        app.state.session_factory = session_factory
    except Exception as exc:
        logger.critical(
            "Failed to initialize database: %s. Check database URL and permissions.", exc
        )
        raise

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except Exception as exc:
        logger.critical("Failed to create database schema: %s.", exc)
        raise

    yield

    try:
        await engine.dispose()
    except Exception as exc:
        logger.error("Error during engine disposal: %s", exc, exc_info=True)

    logger.info("Customer API stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings()

    docs_enabled = settings.debug or settings.expose_docs

    app = FastAPI(
        title="Customer API",
        description="Customer CRUD with centralized error classification",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )
    app.state.settings = settings

    timeout_seconds = settings.request_timeout_seconds
    if timeout_seconds is not None:

        @app.middleware("http")
        async def request_deadline(
            request: Request,
            call_next: Callable[[Request], Awaitable[Response]],
        ) -> Response:
            try:
                async with asyncio.timeout(timeout_seconds) as deadline:
                    return await call_next(request)
            except TimeoutError:
                if not deadline.expired():
                    raise
                return render_error(request, AsyncRequestTimeoutError(timeout_seconds))

    app.include_router(health_router)
    app.include_router(customers_router)

    register_error_handlers(app)

    return app


app = create_app()


def cli_entry() -> None:
    """CLI entry point for running the server."""
    import uvicorn

    settings: Settings = app.state.settings
    uvicorn.run(
        "customer_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
