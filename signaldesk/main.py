"""FastAPI application - SignalDesk Position Exit Engine.

Clean Architecture layout:
- Domain: Position aggregate, exit rules, trailing stops, P&L
- Application: monitor scheduler, closer, manual close use cases
- Infrastructure: SQLAlchemy, quote providers, event bus
- Presentation: this HTTP control surface

The lifespan builds one ExitEngine per process, starts the monitor when
``MONITOR_AUTOSTART`` is set, and stops it (waiting for the in-flight pass)
on shutdown.
"""

import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import httpx
import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from signaldesk import __version__
from signaldesk.application.trading import ExitEngine
from signaldesk.config import Settings, get_logger, get_settings, setup_logging
from signaldesk.domain.market_data.ports import PriceSource
from signaldesk.infrastructure.market_data import create_price_source
from signaldesk.infrastructure.messaging import EventBus
from signaldesk.infrastructure.persistence.sqlalchemy import (
    create_engine,
    create_session_factory,
    create_tables,
    create_unit_of_work,
)
from signaldesk.presentation.api.v1.routes import monitor_router, positions_router

logger = get_logger(__name__)


# ============================================================================
# LIFESPAN EVENTS (startup/shutdown)
# ============================================================================


def _build_lifespan(settings: Settings, price_source: Optional[PriceSource]):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup: DB engine, price source, event bus, exit engine.

        Shutdown: stop the monitor, close HTTP client and DB connections.
        """
        setup_logging(settings)
        logger.info("application.startup.started", environment=settings.environment)

        db_engine = create_engine(settings)
        if not settings.is_production:
            # Production schemas are managed outside the app
            await create_tables(db_engine)
        session_factory = create_session_factory(db_engine)

        http_client = httpx.AsyncClient()
        source = price_source or create_price_source(settings, http_client)

        event_bus = EventBus()
        exit_engine = ExitEngine.build(
            uow_factory=lambda: create_unit_of_work(session_factory),
            price_source=source,
            event_bus=event_bus,
            interval_seconds=settings.monitor_interval_seconds,
        )

        app.state.settings = settings
        app.state.event_bus = event_bus
        app.state.exit_engine = exit_engine

        if settings.monitor_autostart:
            exit_engine.start_trade_monitor()

        logger.info("application.startup.completed")

        try:
            yield
        finally:
            logger.info("application.shutdown.started")

            await exit_engine.aclose()
            await http_client.aclose()
            await db_engine.dispose()
            app.state.exit_engine = None

            logger.info("application.shutdown.completed")

    return lifespan


# ============================================================================
# MIDDLEWARE
# ============================================================================


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind a request correlation ID to all log messages."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))

        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            path=request.url.path,
            method=request.method,
        )

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            structlog.contextvars.unbind_contextvars("request_id", "path", "method")


# ============================================================================
# ERROR HANDLERS
# ============================================================================


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors with a 422 and error details."""
    logger.warning(
        "api.validation_error",
        path=request.url.path,
        errors=jsonable_errors(exc),
    )

    return JSONResponse(
        status_code=422,
        content={
            "error": "ValidationError",
            "message": "Request validation failed",
            "details": jsonable_errors(exc),
        },
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    # ctx may hold Decimal / exception objects
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions with a 500."""
    logger.exception(
        "api.unhandled_exception",
        path=request.url.path,
        error=str(exc),
        error_type=type(exc).__name__,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "InternalServerError",
            "message": "An unexpected error occurred. Please try again later.",
        },
    )


# ============================================================================
# CREATE FASTAPI APPLICATION
# ============================================================================


def create_app(
    settings: Optional[Settings] = None,
    price_source: Optional[PriceSource] = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Settings to use (defaults to get_settings()).
        price_source: Price source override (defaults to the configured
            TwelveData → Alpaca fallback chain).

    Returns:
        FastAPI app; the exit engine exists once the lifespan has started.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="""
        Position Exit Engine for paper-traded signals.

        ## Features
        - Recurring monitor: stop-loss, profit targets, ATR trailing stop
        - Exactly-once close (conditional UPDATE on OPEN)
        - TwelveData → Alpaca price fallback with circuit breakers
        - Manual close and trailing-stop activation
        """,
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=_build_lifespan(settings, price_source),
    )

    app.add_middleware(RequestContextMiddleware)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    @app.get(
        "/health",
        tags=["Health"],
        summary="Health check (liveness)",
    )
    async def health_check(request: Request) -> dict:
        exit_engine: Optional[ExitEngine] = getattr(request.app.state, "exit_engine", None)
        return {
            "status": "healthy",
            "version": __version__,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "environment": settings.environment,
            "monitor_running": bool(exit_engine and exit_engine.monitor.is_running),
        }

    app.include_router(monitor_router, prefix="/api/v1")
    app.include_router(positions_router, prefix="/api/v1")

    return app


app = create_app()


# ============================================================================
# RUN APPLICATION (for development)
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    # Run with: python -m signaldesk.main
    uvicorn.run(
        "signaldesk.main:app",
        host="0.0.0.0",
        port=8000,
        log_level="info",
    )
