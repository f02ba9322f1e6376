"""Structured Logging — JSON records carrying store context for every operation.

Invariants:
    - Each record has timestamp (from the record, not format time), level, logger, message
    - Store context fields (collection, operation, document_id, error_code, counts)
      appear only when the call site passed them via extra=
    - setup_logging() is idempotent: a repeated call swaps docmapper's handler,
      never stacks a second one

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - Opt-in (Settings.configure_logging): a library must not reconfigure its
      host's root logger by default
    - Driver loggers (sqlalchemy.engine, aiosqlite) held at WARNING so DEBUG
      shows mapping decisions, not every SQL statement
"""

import json
import logging
from datetime import datetime, timezone

EXTRA_FIELDS = (
    "collection", "operation", "document_id", "error_code",
    "matched_count", "deleted_count",
)
DRIVER_LOGGERS = ("sqlalchemy.engine", "aiosqlite")

_installed_handler: logging.Handler | None = None


def _store_context(record: logging.LogRecord) -> dict:
    context = {}
    for key in EXTRA_FIELDS:
        value = getattr(record, key, None)
        if value is not None:
            context[key] = value
    return context


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_store_context(record),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install docmapper's root handler (replacing a previous one). Returns it."""
    global _installed_handler

    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))

    if _installed_handler is not None:
        logging.root.removeHandler(_installed_handler)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for name in DRIVER_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _installed_handler = handler
    return handler
