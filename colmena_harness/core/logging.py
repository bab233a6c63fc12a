"""Structured logging configuration with check name tracking."""

from __future__ import annotations

import json
import logging
import re
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .config import Settings, get_settings


# Context variable for the check currently being executed
check_name_var: ContextVar[Optional[str]] = ContextVar("check_name", default=None)


class StructuredFormatter(logging.Formatter):
    """JSON structured log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        check_name = check_name_var.get()
        if check_name:
            log_data["check"] = check_name

        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter for terminals."""

    def format(self, record: logging.LogRecord) -> str:
        check_name = check_name_var.get()
        check = f"[{check_name}] " if check_name else ""
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        base = f"{timestamp} {record.levelname:8} {check}{record.name}: {record.getMessage()}"

        if record.exc_info:
            base += "\n" + self.formatException(record.exc_info)

        return base


class SensitiveDataFilter(logging.Filter):
    """Redact the superadmin password from log messages."""

    # key=value, 'key': value and "key": value forms
    PATTERNS = tuple(
        re.compile(pattern, re.IGNORECASE)
        for pattern in (
            r"(password\s*[=:]\s*)[^\s,}\]]+",
            r"('password'\s*:\s*)[^\s,}\]]+",
            r'("password"\s*:\s*)[^\s,}\]]+',
        )
    )

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        if "password" in message.lower():
            for pattern in self.PATTERNS:
                message = pattern.sub(r"\1[REDACTED]", message)
            record.msg = message
            record.args = None
        return True


def setup_logging(settings: Settings | None = None) -> None:
    """Configure harness logging."""
    settings = settings or get_settings()
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.log_level))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(getattr(logging, settings.log_level))

    if settings.log_format == "json":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(TextFormatter())

    handler.addFilter(SensitiveDataFilter())

    root_logger.addHandler(handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("docker").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the colmena_harness prefix."""
    return logging.getLogger(f"colmena_harness.{name}")
