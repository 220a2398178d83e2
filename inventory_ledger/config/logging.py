"""
structlog setup for the ledger service.

Development renders colored console lines; every other environment emits one
JSON object per event. Quantities and money travel through log calls as
``Decimal`` and are rendered as plain strings ("12.50").
"""

import logging
import sys
from decimal import Decimal
from enum import Enum

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from inventory_ledger.config.settings import get_settings

# Third-party loggers that are too chatty at the application's level
NOISY_LOGGERS = ("aiosqlite", "uvicorn.access", "httpx")


def add_service_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    settings = get_settings()
    event_dict.setdefault("service", settings.app_name)
    event_dict.setdefault("environment", settings.environment)
    return event_dict


def stringify_ledger_values(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Render Decimal and Enum values the way the API serializes them."""
    for key, value in event_dict.items():
        if isinstance(value, Decimal):
            event_dict[key] = str(value)
        elif isinstance(value, Enum):
            event_dict[key] = value.value
    return event_dict


def configure_logging(level: str | None = None) -> None:
    """
    Configure structlog over the stdlib root logger.

    Args:
        level: Overrides ``settings.log_level`` when given
    """
    settings = get_settings()
    level = level or settings.log_level

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        add_service_context,
        stringify_ledger_values,
    ]
    if settings.environment == "development":
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    else:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Module logger: ``logger = get_logger(__name__)``."""
    return structlog.get_logger(name)
