"""Structured Logging — one stream handler, JSON or text, with domain extras.

Invariants:
    - Every JSON record has timestamp, level, logger and message
    - user_id / project_id / target_id / error_code / operation / path are
      copied from `extra=` when present, so a request's log lines can be joined
      on the ids it touched
    - setup_logging is idempotent: calling it twice never doubles output
    - SQL statement logging is off unless log_sql is set
"""

import json
import logging
from datetime import datetime, timezone

_EXTRA_FIELDS = (
    "user_id", "project_id", "target_id", "error_code", "operation", "path",
)
_HANDLER_NAME = "codify"
_TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s%(ids)s"


def _extras(record: logging.LogRecord) -> dict:
    return {
        key: record.__dict__[key]
        for key in _EXTRA_FIELDS
        if record.__dict__.get(key) is not None
    }


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_extras(record),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Development output: extras appended as key=value."""

    def __init__(self):
        super().__init__(_TEXT_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        extras = _extras(record)
        record.ids = (
            " [" + " ".join(f"{k}={v}" for k, v in extras.items()) + "]"
            if extras else ""
        )
        return super().format(record)


def setup_logging(level: str = "INFO", fmt: str = "json", log_sql: bool = False):
    """Install the root handler. Called once from the app lifespan."""
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if log_sql else logging.WARNING,
    )
