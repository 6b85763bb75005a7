"""
Logging setup for the tracker.

- Development: one colored line per record
- Production: one JSON object per record (for the log collector)
- Level: LOG_LEVEL env variable, else DEBUG / INFO / WARNING for
  development / production / testing

Records logged while a request is active are stamped with the request id
and session user by ``RequestContextFilter``, so service-layer messages
("Worklog WL-20260701-001 created ...") can be tied back to the request
line written by the timing middleware.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone

from flask import g, has_request_context

# Record attributes copied into the JSON payload when present
_EXTRA_FIELDS = (
    "request_id",
    "user_id",
    "method",
    "path",
    "status",
    "duration_ms",
    "remote_addr",
)

_QUIET_LOGGERS = ("urllib3", "werkzeug", "google.auth", "gspread")


class RequestContextFilter(logging.Filter):
    """Attach ``request_id`` / ``user_id`` from flask.g to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if has_request_context():
            if getattr(record, "request_id", None) is None:
                record.request_id = g.get("request_id")
            if getattr(record, "user_id", None) is None:
                session = g.get("session") or {}
                record.user_id = (session.get("user") or {}).get("id")
        return True


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value
        if record.exc_info and record.exc_info[0] is not None:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


class ReadableFormatter(logging.Formatter):
    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, "")
        stamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        line = f"{color}{stamp} {record.levelname:<8}{self.RESET} {record.name}: {record.getMessage()}"

        tags = []
        if getattr(record, "request_id", None):
            tags.append(f"req={record.request_id}")
        if getattr(record, "user_id", None):
            tags.append(f"user={record.user_id}")
        if getattr(record, "duration_ms", None) is not None:
            tags.append(f"{record.duration_ms:.0f}ms")
        if tags:
            line += "  [" + " ".join(tags) + "]"

        if record.exc_info and record.exc_info[0] is not None:
            line += "\n" + self.formatException(record.exc_info)
        return line


def _default_level(app) -> str:
    if app.config.get("TESTING"):
        return "WARNING"
    return "DEBUG" if app.config.get("DEBUG") else "INFO"


def configure_logging(app):
    """Install a single root handler for the app's environment."""
    as_json = not app.config.get("DEBUG") and not app.config.get("TESTING")
    level_name = os.getenv("LOG_LEVEL", _default_level(app)).upper()
    level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if as_json else ReadableFormatter())
    handler.addFilter(RequestContextFilter())
    handler.setLevel(level)

    # replace, so repeated create_app() calls don't stack handlers
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    app.logger.setLevel(level)

    if not app.config.get("TESTING"):
        app.logger.info("Logging configured: level=%s format=%s", level_name, "json" if as_json else "readable")
