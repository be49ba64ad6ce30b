"""Structured logging — structlog rendering through stdlib handlers."""

from __future__ import annotations

import logging
import logging.config
import os
from collections.abc import MutableMapping
from typing import Any

import structlog

# Event keys whose values never reach a log line
SENSITIVE_KEYS = frozenset({"password", "password_hash", "token", "csrf_token", "cookie"})
_REDACTED = "***"

# Third-party loggers pinned regardless of BOATHUB_LOG_LEVEL
_LIBRARY_LEVELS = {
    "uvicorn.access": "WARNING",
    "uvicorn.error": "INFO",
    "sqlalchemy.engine": "WARNING",
    "asyncpg": "WARNING",
    "aiosqlite": "WARNING",
}


def redact_sensitive(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor masking credential-bearing keys."""
    for key in SENSITIVE_KEYS.intersection(event_dict):
        event_dict[key] = _REDACTED
    return event_dict


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def setup_logging() -> None:
    """Configure structlog and the stdlib root logger.

    ``BOATHUB_LOG_LEVEL`` sets the level of the ``boathub`` loggers
    (default INFO); ``BOATHUB_LOG_FORMAT`` picks ``console`` or ``json``.
    """
    log_level = os.environ.get("BOATHUB_LOG_LEVEL", "INFO").upper()
    log_format = os.environ.get("BOATHUB_LOG_FORMAT", "console").lower()

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        redact_sensitive,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    loggers: dict[str, dict[str, str]] = {"boathub": {"level": log_level}}
    loggers.update({name: {"level": level} for name, level in _LIBRARY_LEVELS.items()})

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "boathub": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": pre_chain,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        _renderer(log_format),
                    ],
                },
            },
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                    "formatter": "boathub",
                },
            },
            "root": {"handlers": ["stdout"], "level": log_level},
            "loggers": loggers,
        }
    )
