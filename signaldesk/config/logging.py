"""Structured Logging Configuration.

Logging setup for the exit engine:
- JSON format for production (easy parsing by log aggregators)
- Human-readable format for development
- Per-pass correlation IDs for the position monitor
- Provider credentials never reach the output

Usage:
    from signaldesk.config.logging import setup_logging, get_logger

    setup_logging()  # Call once at startup
    logger = get_logger(__name__)
    logger.info("position.closed", ticker="AAPL", pnl="45.00")
"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Optional

import structlog
from structlog.typing import EventDict

from signaldesk import __version__

from .settings import Settings, get_settings


# ============================================================================
# SENSITIVE DATA FILTER
# ============================================================================


SENSITIVE_KEYS = frozenset({
    "apikey",
    "api_key",
    "api_secret",
    "secret",
    "password",
    "token",
    "authorization",
    "apca-api-key-id",
    "apca-api-secret-key",
    "twelvedata_api_key",
    "alpaca_api_key",
    "alpaca_api_secret",
})


def filter_sensitive_data(
    logger: logging.Logger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Replace values of sensitive keys with '[REDACTED]'.

    Nested dicts (e.g. request headers or params) are filtered too.
    """
    for key in list(event_dict.keys()):
        if key.lower() in SENSITIVE_KEYS:
            event_dict[key] = "[REDACTED]"
        elif isinstance(event_dict[key], dict):
            event_dict[key] = _filter_dict(event_dict[key])
    return event_dict


def _filter_dict(d: dict[str, Any]) -> dict[str, Any]:
    result = {}
    for key, value in d.items():
        if str(key).lower() in SENSITIVE_KEYS:
            result[key] = "[REDACTED]"
        elif isinstance(value, dict):
            result[key] = _filter_dict(value)
        else:
            result[key] = value
    return result


# ============================================================================
# CUSTOM PROCESSORS
# ============================================================================


def add_timestamp(
    logger: logging.Logger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Add ISO format timestamp to log events."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _service_context(settings: Settings) -> structlog.types.Processor:
    def add_service_context(
        logger: logging.Logger,
        method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        event_dict["service"] = "signaldesk-exit-engine"
        event_dict["environment"] = settings.environment
        event_dict["version"] = __version__
        return event_dict

    return add_service_context


# ============================================================================
# LOGGING SETUP
# ============================================================================


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Configure structured logging for the application.

    Call this once at application startup (in main.py lifespan).

    Configuration based on settings.log_format:
    - console: colored output for local runs
    - json: one JSON document per line for log aggregation

    Args:
        settings: Settings to configure from (defaults to get_settings()).
    """
    settings = settings or get_settings()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.stdlib.ExtraAdder(),
        add_timestamp,
        _service_context(settings),
        filter_sensitive_data,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
        formatter = structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.format_exc_info,
                renderer,
            ],
            foreign_pre_chain=shared_processors,
        )
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)
        formatter = structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
            foreign_pre_chain=shared_processors,
        )

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(getattr(logging, settings.log_level))

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.DEBUG if settings.db_echo else logging.WARNING
    )
    # httpx logs full URLs, which carry the TwelveData apikey
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Configured structlog logger.
    """
    return structlog.get_logger(name)


# ============================================================================
# PASS CONTEXT (correlation IDs for monitoring passes)
# ============================================================================


def bind_pass_context(pass_id: str, **extra: Any) -> None:
    """Bind monitoring-pass context to all subsequent log calls.

    Args:
        pass_id: Unique identifier of the current pass.
        **extra: Additional context to bind.
    """
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(pass_id=pass_id, **extra)


def clear_pass_context() -> None:
    """Clear pass context (call at the end of a pass)."""
    structlog.contextvars.clear_contextvars()
