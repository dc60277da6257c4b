"""Prometheus metrics for index builds, queries and snippet extraction."""

from __future__ import annotations

from contextlib import contextmanager
import time
from typing import TYPE_CHECKING

from prometheus_client import Counter, Gauge, Histogram, generate_latest


if TYPE_CHECKING:
    from collections.abc import Generator


DOCUMENTS_INDEXED = Counter(
    "corpus_documents_indexed_total",
    "Documents added to an inverted index",
    ["kind"],
)

DOCUMENTS_SKIPPED = Counter(
    "corpus_documents_skipped_total",
    "Documents skipped during an index build",
)

INDEX_TERM_COUNT = Gauge(
    "corpus_index_terms",
    "Distinct terms in the most recently built or loaded index",
    ["stemming"],
)

QUERY_COUNT = Counter(
    "corpus_queries_total",
    "Boolean AND queries evaluated",
    ["outcome"],
)

QUERY_LATENCY = Histogram(
    "corpus_query_latency_seconds",
    "Boolean AND query latency",
    buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25),
)

SNIPPET_SOURCE_MISSING = Counter(
    "corpus_snippet_source_missing_total",
    "Documents skipped during snippet extraction because their source was unavailable",
)


@contextmanager
def track_latency(histogram: Histogram, **labels: str) -> Generator[None, None, None]:
    """Context manager to track operation latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        target = histogram.labels(**labels) if labels else histogram
        target.observe(time.perf_counter() - start)


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()
