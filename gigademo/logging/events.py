"""Structured JSON event logging for the demo gateway.

Logs go to stdout as JSON lines. Optional file output via the LOG_FILE
env var. Token values and credentials must never be passed in
``event_data``; log expiry timestamps and status codes instead. Every
handler also carries a SecretRedactingFilter that masks Bearer and Basic
credentials in messages, event fields and tracebacks.
"""

import json
import logging
import re
import sys
import time
import uuid
from datetime import datetime, timezone
from contextvars import ContextVar

from gigademo.config.settings import get_settings

LOGGER_NAME = "gigademo.events"

# Request-scoped context for correlating log entries
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Authorization scheme followed by its credential: "Bearer eyJ...", "Basic dXNl..."
_CREDENTIAL_PATTERN = re.compile(r"\b(Bearer|Basic)\s+[A-Za-z0-9._~+/=-]+")
REDACTED = "[REDACTED]"


def redact_secrets(text: str) -> str:
    """Mask authorization credentials in a string."""
    return _CREDENTIAL_PATTERN.sub(lambda m: f"{m.group(1)} {REDACTED}", text)


class SecretRedactingFilter(logging.Filter):
    """Scrubs credentials from a record before any handler formats it."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = redact_secrets(record.getMessage())
        record.args = ()
        event_data = getattr(record, "event_data", None)
        if isinstance(event_data, dict):
            record.event_data = {
                key: redact_secrets(value) if isinstance(value, str) else value
                for key, value in event_data.items()
            }
        return True


class JSONFormatter(logging.Formatter):
    """Formats log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": request_id_var.get(""),
        }
        # Merge any extra fields passed via `extra={}` kwarg
        if hasattr(record, "event_data"):
            log_entry.update(record.event_data)
        if record.exc_info:
            log_entry["exception"] = redact_secrets(self.formatException(record.exc_info))
        return json.dumps(log_entry, default=str)


def setup_logging() -> None:
    """Configure the event logger with JSON output."""
    settings = get_settings()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    logger.handlers.clear()

    formatter = JSONFormatter()
    redactor = SecretRedactingFilter()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    stdout_handler.addFilter(redactor)
    logger.addHandler(stdout_handler)

    if settings.log_file:
        file_handler = logging.FileHandler(settings.log_file)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(redactor)
        logger.addHandler(file_handler)

    logger.propagate = False


def get_event_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def generate_request_id() -> str:
    return uuid.uuid4().hex[:12]


class RequestTimer:
    """Context manager to measure call latency."""

    def __init__(self):
        self.start_time: float = 0
        self.elapsed_ms: float = 0

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args):
        self.elapsed_ms = round((time.perf_counter() - self.start_time) * 1000, 2)
