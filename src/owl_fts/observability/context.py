"""Context propagation for trace correlation between spans and log lines."""

from __future__ import annotations

from contextvars import ContextVar, Token
from uuid import uuid4


# Per-context trace ids picked up by the JSON log formatter
trace_context: ContextVar[dict | None] = ContextVar("owl_fts_trace_context", default=None)


def generate_trace_id() -> str:
    """Generate a 32-char hex trace ID."""
    return uuid4().hex


def generate_span_id() -> str:
    """Generate a 16-char hex span ID."""
    return uuid4().hex[:16]


def get_trace_context() -> dict:
    """Get current trace context with trace_id and span_id."""
    ctx = trace_context.get()
    if ctx is None or not ctx.get("trace_id"):
        ctx = {"trace_id": generate_trace_id(), "span_id": generate_span_id()}
        trace_context.set(ctx)
    return ctx


def set_trace_context(trace_id: str, span_id: str, **extra: object) -> None:
    trace_context.set({"trace_id": trace_id, "span_id": span_id, **extra})


def update_span_id(span_id: str) -> Token:
    """Update span_id while preserving trace_id and extras.

    Returns the token that restores the previous context via ``trace_context.reset``.
    """
    return trace_context.set({**get_trace_context(), "span_id": span_id})
