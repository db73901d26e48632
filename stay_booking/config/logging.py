"""Structured logging configuration using structlog.

Booking sessions bind ``property_id`` and the client logs ``booking_id`` on
submissions and cancellations. Both are lifted into a bracketed prefix on the
event text so console output can be grepped per listing or per booking.
"""
import logging
import sys
from typing import Any

import structlog
from pythonjsonlogger import jsonlogger

from stay_booking.config.settings import settings

# Bound keys shown in the event prefix, in order
PREFIX_KEYS = ("property_id", "booking_id")


def add_booking_context_prefix(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Prefix the event with ``[property_id booking_id]`` when either is bound.

    Runs before the renderer so the prefix shows in JSON and console output.
    The keys themselves stay in the event dict for JSON consumers.

    Args:
        logger: The logger instance
        method_name: The name of the method being called
        event_dict: The event dictionary containing log data

    Returns:
        Modified event dictionary
    """
    parts = [str(event_dict[key]) for key in PREFIX_KEYS if event_dict.get(key)]
    if parts:
        event_dict["event"] = f"[{' '.join(parts)}] {event_dict.get('event', '')}"
    return event_dict


def configure_logging() -> None:
    """Route structlog through the root logger using the LOG_LEVEL and LOG_FORMAT settings."""

    log_level = getattr(logging, settings.logging.level)

    handler = logging.StreamHandler(sys.stdout)
    if settings.logging.format == "json":
        handler.setFormatter(jsonlogger.JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
    handler.setLevel(log_level)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # The client logs each booking API call itself
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            add_booking_context_prefix,
            structlog.processors.JSONRenderer()
            if settings.logging.format == "json"
            else structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.typing.FilteringBoundLogger:
    """Get a configured logger instance.

    Args:
        name: Logger name, typically __name__

    Returns:
        Configured logger instance
    """
    return structlog.get_logger(name)
