"""
Request and task context carried through log records.

A correlation id ties together every log line of one API request or one
Celery task run. The signed-in user and the radar being worked on are
attached as soon as they are known.

Usage:
    with tracing_scope(correlation_id=request_id) as correlation_id:
        TracingContext.set(user_id="65f0...")
        logger.info("...")  # JSON logs carry the ids
"""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Dict, Iterator

_FIELDS = ("correlation_id", "user_id", "radar_id", "task_name")

_context: Dict[str, ContextVar[str]] = {
    field: ContextVar(field, default="") for field in _FIELDS
}


class TracingContext:
    """Context for the request or task currently executing."""

    @staticmethod
    def set(**values: str) -> None:
        """Set the given fields; empty values leave the current value alone."""
        for field, value in values.items():
            if field not in _context:
                raise ValueError(f"Unknown tracing field: {field}")
            if value:
                _context[field].set(value)

    @staticmethod
    def get() -> Dict[str, str]:
        return {field: var.get() for field, var in _context.items()}

    @staticmethod
    def get_correlation_id() -> str:
        return _context["correlation_id"].get()

    @staticmethod
    def get_or_create_correlation_id() -> str:
        corr_id = _context["correlation_id"].get()
        if not corr_id:
            corr_id = uuid.uuid4().hex
            _context["correlation_id"].set(corr_id)
        return corr_id

    @staticmethod
    def get_log_prefix() -> str:
        """Short ``[corr=...]`` tag for text log lines."""
        corr_id = _context["correlation_id"].get()
        return f"[corr={corr_id[:8]}]" if corr_id else ""

    @staticmethod
    def clear() -> None:
        for var in _context.values():
            var.set("")


@contextmanager
def tracing_scope(correlation_id: str = "", task_name: str = "") -> Iterator[str]:
    """Fresh context for one request or task run; yields the correlation id."""
    TracingContext.clear()
    TracingContext.set(correlation_id=correlation_id, task_name=task_name)
    try:
        yield TracingContext.get_or_create_correlation_id()
    finally:
        TracingContext.clear()
