"""
Structured logging for easql.

Manifesto:
    The adapter sits on every database call, so its logs need to be cheap,
    structured and safe: SQL text and argument *counts* are logged, argument
    values and passwords never are.

Architecture:
    ::

        configure_logging(level="INFO", json_format=None, service="easql")
            |
            v
        structlog processor chain:
          1. TimeStamper (iso)
          2. merge_contextvars / add_log_level
          3. service.name
          4. clip_sql           (long statements shortened)
          5. ecs field names    (JSON only)
          6. JSONRenderer or ConsoleRenderer

    ``get_logger(__name__)`` returns a lazy proxy carrying ``logger_name``;
    it picks up whatever configuration is active when it first logs, so
    module-level loggers may be created before ``configure_logging`` runs.

Examples:
    >>> from easql.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", json_format=False)
    >>> logger = get_logger(__name__)
    >>> logger.debug("sql_compiled", op="get", args=1)

Tags:
    logging, structlog, observability, easql
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

# JSON output uses Elastic Common Schema names
ECS_FIELDS = {
    "timestamp": "@timestamp",
    "level": "log.level",
    "logger_name": "log.logger",
}

DEFAULT_MAX_SQL_CHARS = 2000


def _service_name(service: str) -> Processor:
    def add_service(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service.name", service)
        return event_dict

    return add_service


def _clip_sql(max_chars: int) -> Processor:
    """Shorten the ``sql`` field of generated statements (IN lists, bulk values)."""

    def clip(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        sql = event_dict.get("sql")
        if isinstance(sql, str) and len(sql) > max_chars:
            event_dict["sql"] = f"{sql[:max_chars]}... ({len(sql)} chars)"
        return event_dict

    return clip


def _ecs_field_names(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    for key, ecs_key in ECS_FIELDS.items():
        if key in event_dict:
            event_dict[ecs_key] = event_dict.pop(key)
    return event_dict


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "easql",
    add_timestamp: bool = True,
    max_sql_chars: int = DEFAULT_MAX_SQL_CHARS,
) -> None:
    """Configure structlog for easql and the application embedding it.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR), any case
        json_format: True for JSON, False for console, None for JSON unless
            stdout is a terminal
        service: Value of the ``service.name`` field
        add_timestamp: Include an ISO timestamp
        max_sql_chars: Longest ``sql`` field logged before it is clipped
    """
    if json_format is None:
        json_format = not sys.stdout.isatty()

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _service_name(service),
        _clip_sql(max_sql_chars),
    ]
    if add_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_format:
        processors += [_ecs_field_names, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger (usually ``get_logger(__name__)``)."""
    if name is None:
        return structlog.get_logger()
    return structlog.get_logger(name, logger_name=name)


__all__ = [
    "configure_logging",
    "get_logger",
]
