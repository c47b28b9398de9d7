"""Structured Logging - one JSON object per line, context fields from `extra`.

Invariants:
    - Every record carries timestamp, level, logger and message
    - Workflow context (principal, project, task, scope, event, ...) is copied from
      `extra` only when present; values are stringified (UUIDs, enums)
    - setup_logging() is idempotent: calling it twice never duplicates output

Design Decisions:
    - stdlib logging + a small formatter instead of a logging framework
    - "text" format for local development, "json" everywhere else
"""

import json
import logging
from datetime import datetime, timezone

CONTEXT_FIELDS = (
    "principal_id", "project_id", "task_id", "notification_id",
    "connection_id", "scope", "event", "error_code", "path",
)

_TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

# Chatty third-party loggers kept at WARNING unless the app runs at DEBUG
_QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "httpx")

_handler: logging.Handler | None = None


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(context_of(record))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def context_of(record: logging.LogRecord) -> dict[str, str]:
    """Workflow context fields attached to a record via `extra`."""
    context = {}
    for key in CONTEXT_FIELDS:
        value = getattr(record, key, None)
        if value is None:
            continue
        context[key] = str(getattr(value, "value", value))
    return context


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install the root handler (replacing one installed earlier)."""
    global _handler
    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)

    _handler = logging.StreamHandler()
    _handler.setFormatter(
        JSONFormatter() if fmt == "json" else logging.Formatter(_TEXT_FORMAT),
    )
    root.addHandler(_handler)

    root_level = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(root_level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(root_level, logging.WARNING))
