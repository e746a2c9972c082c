"""
Structured logging utilities for the Character DMS.

Centralizes logging configuration so the CLI, store and import adapters log
consistently. Standard library logging with a human-readable formatter by
default and an optional JSON formatter for structured logs.

The store and the import/export adapters attach their context through
`extra=`; the fields they use are listed in `CONTEXT_FIELDS`:

- `character_id` / `handle`: the record a store mutation touched
- `kind`: failure category of a rejected record or import line
- `line`: 1-based line number within an import
- `path`: data file being imported or report being exported
- `added` / `skipped`: import tallies

Both formatters surface these fields: the console formatter appends them as
`key=value` pairs, the JSON formatter emits them first, followed by any other
extras.

Usage:
    from character_dms.utils.logging import configure_logging, get_logger

    configure_logging(level="INFO", json_logs=False)
    log = get_logger(__name__)
    log.info("Character added", extra={"character_id": 7, "handle": "Doofnita"})
"""

from __future__ import annotations

import json
import logging
import logging.config
from typing import Any, Dict, Optional

CONTEXT_FIELDS = ("character_id", "handle", "kind", "line", "path", "added", "skipped")

# Attributes every LogRecord carries; anything else arrived through `extra=`.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime", "taskName"}


def _json_formatter(record: logging.LogRecord) -> str:
    """Render a log record as JSON string, record context first."""
    payload: Dict[str, Any] = {
        "level": record.levelname,
        "logger": record.name,
        "message": record.getMessage(),
    }
    for key in CONTEXT_FIELDS:
        if hasattr(record, key):
            payload[key] = getattr(record, key)
    for key, value in vars(record).items():
        if key in _RESERVED_ATTRS or key == "extra" or key in payload:
            continue
        payload[key] = value
    if record.exc_info:
        payload["exc_info"] = logging.Formatter().formatException(record.exc_info)
    if record.stack_info:
        payload["stack_info"] = record.stack_info
    if hasattr(record, "extra") and isinstance(record.extra, dict):
        payload.update(record.extra)
    return json.dumps(payload, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human formatter that appends the record context as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = " ".join(
            f"{key}={getattr(record, key)}" for key in CONTEXT_FIELDS if hasattr(record, key)
        )
        return f"{line} | {context}" if context else line


class JsonFormatter(logging.Formatter):
    """Minimal JSON formatter for structured logs."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        return _json_formatter(record)


def configure_logging(
    level: str = "INFO",
    json_logs: bool = False,
    force: bool = True,
) -> None:
    """
    Configure root logging.

    Parameters
    ----------
    level : str
        Logging level name (e.g., "DEBUG", "INFO", "WARNING").
    json_logs : bool
        Whether to emit logs as JSON. If False, uses a concise human formatter.
    force : bool
        Whether to override an existing root configuration. When False and the
        root logger already has handlers, nothing is changed.
    """
    if not force and logging.getLogger().handlers:
        return

    formatter_name = "json" if json_logs else "console"

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "console": {
                    "()": ConsoleFormatter,
                    "fmt": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
                "json": {
                    "()": JsonFormatter,
                },
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": formatter_name,
                    "level": level,
                    "stream": "ext://sys.stderr",
                }
            },
            "root": {
                "handlers": ["default"],
                "level": level,
            },
        }
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger with the given name. If name is None, returns the root logger.
    """
    return logging.getLogger(name)


__all__ = ["CONTEXT_FIELDS", "ConsoleFormatter", "JsonFormatter", "configure_logging", "get_logger"]
