"""Logging setup: JSON or text lines, request ids, credential redaction."""

from __future__ import annotations

import json
import logging
import re
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .config import settings


request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# Attributes every LogRecord has; anything else came in through ``extra=``
_RECORD_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS}


class StructuredFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if request_id := request_id_var.get():
            entry["request_id"] = request_id
        entry.update(_extra_fields(record))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        if settings.debug:
            entry["location"] = f"{record.filename}:{record.lineno}"
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Readable lines for local runs."""

    def format(self, record: logging.LogRecord) -> str:
        when = datetime.fromtimestamp(record.created, timezone.utc).strftime("%H:%M:%S")
        request_id = request_id_var.get()
        rid = f" [{request_id[:8]}]" if request_id else ""
        line = f"{when} {record.levelname:<7}{rid} {record.name}: {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class SensitiveDataFilter(logging.Filter):
    """Mask session tokens and secrets before a record is written.

    Login codes are not masked; the server log is where they are delivered.
    """

    KEYS = ("token", "secret", "authorization", "cookie", "session_id")
    _KEY_VALUE = re.compile(
        rf"""(["']?(?:{'|'.join(KEYS)})["']?\s*[=:]\s*)[^\s,;}}\]]+""", re.IGNORECASE
    )
    # Compact JWS: header.payload.signature, all base64url
    _JWT = re.compile(r"\beyJ[\w-]+\.[\w-]+\.[\w-]+")

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = self._JWT.sub("[REDACTED]", self._KEY_VALUE.sub(r"\1[REDACTED]", message))
        if redacted != message:
            record.msg, record.args = redacted, None
        return True


def setup_logging() -> None:
    """Route all logging to stdout in the configured format."""
    level = getattr(logging, settings.log_level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(StructuredFormatter() if settings.log_format == "json" else TextFormatter())
    handler.addFilter(SensitiveDataFilter())

    root = logging.getLogger()
    root.setLevel(level)
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)

    for noisy in ("uvicorn.access", "httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Logger under the ``stockresearch`` namespace."""
    return logging.getLogger(f"stockresearch.{name}")
