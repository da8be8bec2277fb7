"""Trace context for correlating log lines and events of one quote request."""

import contextvars
import uuid
from collections.abc import Iterator
from contextlib import contextmanager

_trace_id_context: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "trace_id", default=None
)


def create_trace() -> str:
    """
    Generate a new trace ID and make it current.

    Returns:
        A UUID4 string
    """
    trace_id = str(uuid.uuid4())
    _trace_id_context.set(trace_id)
    return trace_id


def get_current_trace() -> str | None:
    return _trace_id_context.get()


def set_trace(trace_id: str | None) -> None:
    _trace_id_context.set(trace_id)


def clear_trace() -> None:
    _trace_id_context.set(None)


@contextmanager
def trace_scope(trace_id: str | None = None) -> Iterator[str]:
    """
    Run a block under a trace ID, restoring the previous one afterwards.

    A new ID is generated when none is given.
    """
    new_id = trace_id or str(uuid.uuid4())
    token = _trace_id_context.set(new_id)
    try:
        yield new_id
    finally:
        _trace_id_context.reset(token)
