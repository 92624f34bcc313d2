"""
Structured logging configuration.

- JSON lines in production, readable text in development
- Every record emitted while serving a request carries that request's id
- One access-log line per non-static request
"""

from __future__ import annotations

import json
import logging
import re
import time
import uuid

from flask import Flask, g, has_app_context, request

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s [%(request_id)s]: %(message)s"

# Accepted client-supplied X-Request-ID values; anything else is replaced.
_REQUEST_ID_RE = re.compile(r"[A-Za-z0-9._-]{1,64}")


class RequestIdFilter(logging.Filter):
    """Stamp records with the current request id ("-" outside requests)."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            rid = "-"
            if has_app_context():
                rid = g.get("request_id", "-")
            record.request_id = rid
        return True


class JSONFormatter(logging.Formatter):
    """Emit log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", "-"),
        }
        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def build_handler(log_format: str) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.addFilter(RequestIdFilter())
    if log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def init_logging(app: Flask) -> None:
    """Configure root logging from app config and install request hooks."""
    log_format = app.config.get("LOG_FORMAT", "text")
    log_level = app.config.get("LOG_LEVEL", "INFO")

    root = logging.getLogger()
    root.setLevel(getattr(logging, str(log_level).upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(build_handler(log_format))

    # Our access line replaces werkzeug's
    logging.getLogger("werkzeug").setLevel(logging.WARNING)

    @app.before_request
    def _attach_request_id():
        supplied = request.headers.get("X-Request-ID", "")
        if _REQUEST_ID_RE.fullmatch(supplied):
            g.request_id = supplied
        else:
            g.request_id = uuid.uuid4().hex[:12]
        g.request_start = time.time()

    @app.after_request
    def _log_request(response):
        response.headers["X-Request-ID"] = g.get("request_id", "-")
        if request.path.startswith("/static"):
            return response
        duration_ms = (time.time() - g.get("request_start", time.time())) * 1000
        app.logger.info(
            "%s %s %s %.0fms",
            request.method,
            request.path,
            response.status_code,
            duration_ms,
        )
        return response
