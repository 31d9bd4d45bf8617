"""
Structured Logging Configuration.

Supports two modes:
- text: Human-readable format for development
- json: Structured JSON format for production log shipping

Set LOG_FORMAT to "json" for production.
"""

import json
import logging
import sys
from typing import Any, Dict, Optional


class JSONFormatter(logging.Formatter):
    """Formatter that outputs JSON strings with tracing context."""

    def format(self, record: logging.LogRecord) -> str:
        from repo_radar.core.tracing import TracingContext

        ctx = TracingContext.get()

        log_record: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "line": record.lineno,
            "correlation_id": ctx.get("correlation_id", ""),
            "user_id": ctx.get("user_id", ""),
            "radar_id": ctx.get("radar_id", ""),
            "task_name": ctx.get("task_name", ""),
        }

        if hasattr(record, "task_id"):
            log_record["task_id"] = record.task_id

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_record)


class TextFormatter(logging.Formatter):
    """Human-readable lines prefixed with the short correlation id, when set."""

    def format(self, record: logging.LogRecord) -> str:
        from repo_radar.core.tracing import TracingContext

        line = super().format(record)
        prefix = TracingContext.get_log_prefix()
        return f"{prefix} {line}" if prefix else line


def setup_logging(log_format: Optional[str] = None) -> None:
    """
    Setup structured logging for the application.

    ``log_format`` defaults to ``settings.LOG_FORMAT``:
    - "json": Structured JSON
    - "text": Human-readable for development
    """
    root_logger = logging.getLogger()

    # Avoid adding multiple handlers
    if root_logger.handlers:
        return

    if log_format is None:
        from repo_radar.config import settings

        log_format = settings.LOG_FORMAT

    root_logger.setLevel(logging.INFO)

    handler = logging.StreamHandler(sys.stdout)

    if log_format.lower() == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            TextFormatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )

    root_logger.addHandler(handler)

    # Set lower level for noisy libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
