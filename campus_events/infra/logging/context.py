"""Contextvar-backed log context.

Fields set here (request_id, event_id, mutation, ...) are copied onto every
LogRecord emitted in the same task by ``ContextInjectingFilter``, so a
notification dispatch can be traced back to the request that triggered it.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any

_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})


def set_log_context(**kwargs: Any) -> None:
    """Merge fields into the log context of the current task.

    Args:
        **kwargs: Fields to attach to every subsequent record, e.g.
            ``request_id`` or ``event_id``.
    """
    current = _log_context.get().copy()
    current.update(kwargs)
    _log_context.set(current)


def get_log_context() -> dict[str, Any]:
    """Return a copy of the current log context."""
    return _log_context.get().copy()


def clear_log_context() -> None:
    """Reset the log context for the current task."""
    _log_context.set({})


def remove_from_log_context(*keys: str) -> None:
    """Drop the given keys from the current log context."""
    current = _log_context.get().copy()
    for key in keys:
        current.pop(key, None)
    _log_context.set(current)


class ContextInjectingFilter(logging.Filter):
    """Copy contextvar fields onto each LogRecord.

    Installed on the root logger by ``configure_logging`` so formatters see
    the fields as regular record attributes. Existing attributes win.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _log_context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
