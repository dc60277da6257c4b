"""Unit tests for boolean AND retrieval and index lookups."""

from __future__ import annotations

from pathlib import Path

import pytest
from prometheus_client import REGISTRY

from corpus_search.search.documents import CorpusDocumentSource
from corpus_search.search.indexer import build_index
from corpus_search.search.query import QueryEngine
from corpus_search.search.stopwords import StopwordSet
from corpus_search.search.storage import SnapshotStore


pytestmark = pytest.mark.unit


def _engine(corpus_dir: Path, stopword_file: Path, *, stemming: bool = False) -> QueryEngine:
    index, _ = build_index(
        CorpusDocumentSource(corpus_dir),
        stopwords=StopwordSet.from_file(stopword_file),
        stemming=stemming,
    )
    return QueryEngine(index)


@pytest.fixture
def engine(corpus_dir: Path, stopword_file: Path) -> QueryEngine:
    return _engine(corpus_dir, stopword_file)


@pytest.mark.parametrize(
    ("query", "expected"),
    [
        ("cat", {"doc1.txt", "doc2.txt", "page.html"}),
        ("cat dog", {"doc2.txt"}),
        ("CAT   Mat", {"doc1.txt"}),
        ("cat unicorn", set()),
        ("unicorn cat", set()),
        ("the", set()),
        ("", set()),
        ("   ", set()),
    ],
)
def test_boolean_and_query(engine: QueryEngine, query: str, expected: set[str]) -> None:
    assert engine.boolean_and_query(query) == expected


def test_query_terms_are_not_stemmed_for_plain_index(engine: QueryEngine) -> None:
    assert engine.boolean_and_query("cats") == {"page.html"}
    assert engine.boolean_and_query("run") == set()


def test_query_terms_are_stemmed_for_stemmed_index(corpus_dir: Path, stopword_file: Path) -> None:
    engine = _engine(corpus_dir, stopword_file, stemming=True)

    assert engine.boolean_and_query("cats") == {"doc1.txt", "doc2.txt", "page.html"}
    assert engine.boolean_and_query("run") == {"doc2.txt"}
    assert engine.boolean_and_query("Running dogs") == {"doc2.txt"}
    assert engine.boolean_and_query("was") == {"doc2.txt"}


def test_result_is_a_fresh_set(engine: QueryEngine) -> None:
    engine.boolean_and_query("dog").add("bogus.txt")

    assert engine.boolean_and_query("dog") == {"doc2.txt"}


def test_lookup_term(engine: QueryEngine) -> None:
    assert engine.lookup_term("DOG") == {"doc2.txt": [2, 7]}
    assert engine.lookup_term("unicorn") == {}


def test_lookup_document(engine: QueryEngine) -> None:
    assert engine.lookup_document("DOC1.TXT") == {"cat": [2], "sat": [3], "mat": [6]}
    assert engine.lookup_document("nothing.txt") == {}


def test_run_queries_preserves_order(engine: QueryEngine) -> None:
    results = engine.run_queries(["dog", "mat", "unicorn"])

    assert list(results) == ["dog", "mat", "unicorn"]
    assert results["mat"] == {"doc1.txt"}
    assert results["unicorn"] == set()


def test_query_outcomes_are_counted(engine: QueryEngine) -> None:
    hits = REGISTRY.get_sample_value("corpus_queries_total", {"outcome": "hit"}) or 0.0
    misses = REGISTRY.get_sample_value("corpus_queries_total", {"outcome": "miss"}) or 0.0

    engine.boolean_and_query("cat")
    engine.boolean_and_query("unicorn")

    assert REGISTRY.get_sample_value("corpus_queries_total", {"outcome": "hit"}) == hits + 1
    assert REGISTRY.get_sample_value("corpus_queries_total", {"outcome": "miss"}) == misses + 1


@pytest.mark.parametrize("stemming", [False, True])
def test_term_order_does_not_change_results(corpus_dir: Path, stopword_file: Path, stemming: bool) -> None:
    engine = _engine(corpus_dir, stopword_file, stemming=stemming)
    terms = sorted(engine.index.terms()) + ["unicorn"]

    for first in terms:
        for second in terms:
            forward = engine.boolean_and_query(f"{first} {second}")
            assert forward == engine.boolean_and_query(f"{second} {first}")
            assert forward == engine.boolean_and_query(first) & engine.boolean_and_query(second)


@pytest.mark.parametrize("stemming", [False, True])
def test_reloaded_snapshot_answers_identically(
    corpus_dir: Path, stopword_file: Path, tmp_path: Path, stemming: bool
) -> None:
    engine = _engine(corpus_dir, stopword_file, stemming=stemming)
    store = SnapshotStore(tmp_path / "snapshots")
    store.save(engine.index)
    reloaded = QueryEngine(store.load(stemming))

    for term in engine.index.terms():
        assert reloaded.lookup_term(term) == engine.lookup_term(term)
        assert reloaded.boolean_and_query(term) == engine.boolean_and_query(term)
    for document_id in engine.index.documents():
        assert reloaded.lookup_document(document_id) == engine.lookup_document(document_id)
    assert reloaded.boolean_and_query("cat dog") == engine.boolean_and_query("cat dog")
