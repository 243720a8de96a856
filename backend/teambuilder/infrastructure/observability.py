"""Structured Logging — JSON and text formatters carrying team/user/invitation ids.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Domain ids passed via extra= (team_id, user_id, invitation_id) appear in
      both formats, so a membership change can be traced by id in any environment
    - setup_logging is idempotent: root handlers replaced, never stacked

Design Decisions:
    - Standard-library logging with a custom formatter: no extra dependency
    - SQLAlchemy engine logger pinned to WARNING unless level is DEBUG
"""

import json
import logging
from datetime import datetime, timezone

CONTEXT_KEYS = ("team_id", "user_id", "invitation_id")
_EXTRA_KEYS = CONTEXT_KEYS + ("error_code", "path", "count")


def _extras(record: logging.LogRecord) -> dict[str, str]:
    return {
        key: str(record.__dict__[key])
        for key in _EXTRA_KEYS
        if record.__dict__.get(key) is not None
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_extras(record),
        }
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


class ContextTextFormatter(logging.Formatter):
    """Human-readable lines with the domain ids appended as key=value."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s - %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = _extras(record)
        if extras:
            line += " [" + " ".join(f"{k}={v}" for k, v in extras.items()) + "]"
        return line


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure root logging once at startup."""
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if fmt == "json" else ContextTextFormatter())
    logging.root.handlers.clear()
    logging.root.addHandler(handler)
    root_level = getattr(logging, level.upper(), logging.INFO)
    logging.root.setLevel(root_level)
    if root_level > logging.DEBUG:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
