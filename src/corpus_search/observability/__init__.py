"""Observability helpers: structured logging, run context and Prometheus metrics."""

from corpus_search.observability.context import (
    generate_run_id,
    get_run_context,
    operation,
    run_context,
    set_run_context,
)
from corpus_search.observability.logging import JsonFormatter, configure_logging
from corpus_search.observability.metrics import (
    DOCUMENTS_INDEXED,
    DOCUMENTS_SKIPPED,
    INDEX_TERM_COUNT,
    QUERY_COUNT,
    QUERY_LATENCY,
    SNIPPET_SOURCE_MISSING,
    get_metrics,
    track_latency,
)


__all__ = [
    "DOCUMENTS_INDEXED",
    "DOCUMENTS_SKIPPED",
    "INDEX_TERM_COUNT",
    "QUERY_COUNT",
    "QUERY_LATENCY",
    "SNIPPET_SOURCE_MISSING",
    "JsonFormatter",
    "configure_logging",
    "generate_run_id",
    "get_metrics",
    "get_run_context",
    "operation",
    "run_context",
    "set_run_context",
    "track_latency",
]
