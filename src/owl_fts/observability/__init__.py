"""Observability module for tracing, metrics, and structured logging."""

from owl_fts.observability.context import get_trace_context, set_trace_context, trace_context
from owl_fts.observability.logging import JsonFormatter, configure_logging, configure_logging_from_settings
from owl_fts.observability.metrics import (
    DECODE_COUNT,
    DECODE_LATENCY,
    SEARCH_LATENCY,
    SEARCH_RESULTS,
    get_metrics,
    get_metrics_content_type,
    init_metrics,
    track_latency,
)
from owl_fts.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "DECODE_COUNT",
    "DECODE_LATENCY",
    "SEARCH_LATENCY",
    "SEARCH_RESULTS",
    "JsonFormatter",
    "configure_logging",
    "configure_logging_from_settings",
    "create_span",
    "get_metrics",
    "get_metrics_content_type",
    "get_trace_context",
    "get_tracer",
    "init_metrics",
    "init_tracing",
    "set_trace_context",
    "trace_context",
    "track_latency",
]
