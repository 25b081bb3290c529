"""Structured logging for typedstore.

Modules log key/value events through ``get_logger(__name__)``. Applications
call ``configure_logging`` once to pick console or JSON output; until then
structlog's defaults apply.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from typedstore.core.config import Settings, get_settings


def add_logger_name(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Record the emitting logger, falling back to the package name."""
    event_dict["logger"] = getattr(logger, "name", None) or "typedstore"
    return event_dict


def rename_message_field(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Emit the event text under ``message`` for JSON consumers."""
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


def build_processors(log_format: str) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "console":
        processors.append(
            structlog.dev.ConsoleRenderer(colors=True, exception_formatter=structlog.dev.plain_traceback)
        )
    else:
        processors.append(structlog.processors.format_exc_info)
        processors.append(rename_message_field)
        processors.append(structlog.processors.JSONRenderer())
    return processors


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog and stdlib logging from settings.

    Args:
        settings: Settings to use; loaded from the environment when omitted.
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level)

    structlog.configure(
        processors=build_processors(settings.log_format),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )

    # SQLAlchemy engine echo goes through stdlib logging
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to ``name`` (default ``typedstore``)."""
    return structlog.get_logger(name or "typedstore")
