"""Unit tests for logging, run context and metrics helpers."""

from __future__ import annotations

import logging
from pathlib import Path
import sys

import orjson
from prometheus_client import REGISTRY, CollectorRegistry, Histogram
import pytest

from corpus_search.observability import (
    QUERY_LATENCY,
    JsonFormatter,
    configure_logging,
    get_metrics,
    get_run_context,
    operation,
    run_context,
    set_run_context,
    track_latency,
)


@pytest.fixture(autouse=True)
def reset_run_context():
    token = run_context.set(None)
    yield
    run_context.reset(token)


def _record(message: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord("corpus_search.search.indexer", logging.INFO, __file__, 1, message, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.mark.unit
class TestRunContext:
    """Run ids are created lazily and operations nest."""

    def test_get_run_context_creates_run_id(self):
        ctx = get_run_context()

        assert len(ctx["run_id"]) == 32
        assert get_run_context()["run_id"] == ctx["run_id"]

    def test_set_run_context(self):
        set_run_context("abc", stage="test")

        assert get_run_context() == {"run_id": "abc", "stage": "test"}

    def test_operation_scopes_label(self):
        set_run_context("abc")

        with operation("build", corpus="/tmp/c") as ctx:
            assert ctx["operation"] == "build"
            assert get_run_context()["corpus"] == "/tmp/c"
            with operation("search"):
                assert get_run_context()["operation"] == "search"
            assert get_run_context()["operation"] == "build"

        assert "operation" not in get_run_context()


@pytest.mark.unit
class TestJsonFormatter:
    """Structured log lines carry run correlation and extra fields."""

    def test_basic_fields(self):
        set_run_context("run-1")

        with operation("build"):
            entry = orjson.loads(JsonFormatter().format(_record()))

        assert entry["message"] == "hello"
        assert entry["level"] == "INFO"
        assert entry["logger"] == "corpus_search.search.indexer"
        assert entry["component"] == "indexer"
        assert entry["run_id"] == "run-1"
        assert entry["operation"] == "build"

    def test_extra_fields_are_serialized_and_redacted(self):
        entry = orjson.loads(
            JsonFormatter().format(_record(path=Path("/tmp/x"), terms={"b", "a"}, token="secret-value"))
        )

        assert entry["path"] == "/tmp/x"
        assert entry["terms"] == ["a", "b"]
        assert entry["token"] == "[REDACTED]"

    def test_long_messages_are_truncated(self):
        entry = orjson.loads(JsonFormatter().format(_record("x" * 5000)))

        assert len(entry["message"]) == JsonFormatter.MAX_MESSAGE_LEN + 3

    def test_exception_info(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.LogRecord("corpus_search", logging.ERROR, __file__, 1, "failed", (), None)
            record.exc_info = sys.exc_info()

        entry = orjson.loads(JsonFormatter().format(record))

        assert "ValueError: boom" in entry["exception"]
        assert "component" not in entry


@pytest.mark.unit
class TestConfigureLogging:
    """Root logger setup."""

    def test_installs_single_handler(self):
        configure_logging("debug", json_output=True)

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_plain_text_formatter(self):
        configure_logging("warning")

        handler = logging.getLogger().handlers[0]
        assert not isinstance(handler.formatter, JsonFormatter)


@pytest.mark.unit
class TestMetrics:
    """Prometheus helpers."""

    def test_track_latency_observes_once(self):
        registry = CollectorRegistry()
        histogram = Histogram("corpus_test_latency_seconds", "test histogram", registry=registry)

        with track_latency(histogram):
            pass

        assert registry.get_sample_value("corpus_test_latency_seconds_count") == 1
        assert registry.get_sample_value("corpus_test_latency_seconds_sum") >= 0

    def test_track_latency_observes_on_error(self):
        before = REGISTRY.get_sample_value("corpus_query_latency_seconds_count") or 0.0

        with pytest.raises(RuntimeError), track_latency(QUERY_LATENCY):
            raise RuntimeError("fail")

        assert REGISTRY.get_sample_value("corpus_query_latency_seconds_count") == before + 1

    def test_exposition(self):
        assert b"corpus_queries_total" in get_metrics()
