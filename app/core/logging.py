import logging
import sys
from typing import Any

import structlog

from app.config.settings import get_settings


def _renderer(environment: str) -> structlog.types.Processor:
    # Human-readable lines locally, one JSON object per line everywhere else
    if environment == "development":
        return structlog.dev.ConsoleRenderer(colors=False)
    return structlog.processors.JSONRenderer()


def configure_logging() -> None:
    """Configure structlog once at startup; level follows ``settings.debug``."""
    settings = get_settings()
    level = logging.DEBUG if settings.debug else logging.INFO

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _renderer(settings.environment),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Lazy logger proxy; picks up the processors set by ``configure_logging``."""
    return structlog.get_logger(name)


def add_log_context(**kwargs: Any) -> None:
    """Bind values into every event logged by the current request."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_log_context() -> None:
    structlog.contextvars.clear_contextvars()
