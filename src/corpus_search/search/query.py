"""Boolean AND query engine over an ``InvertedIndex``."""

from __future__ import annotations

from collections.abc import Iterable
import logging

from corpus_search.observability import QUERY_COUNT, QUERY_LATENCY, track_latency
from corpus_search.search.analyzers import TermAnalyzer
from corpus_search.search.index import InvertedIndex, Postings


logger = logging.getLogger(__name__)


class QueryEngine:
    """Read-only lookups and boolean AND retrieval.

    Query terms are normalized exactly like indexed tokens: lowercased and,
    when the index was built with stemming, stemmed.
    """

    def __init__(self, index: InvertedIndex) -> None:
        self.index = index
        self.analyzer = TermAnalyzer(apply_stemming=index.stemming)

    def normalize(self, term: str) -> str:
        return self.analyzer.normalize(term)

    def lookup_term(self, term: str) -> Postings:
        """Return document -> positions for ``term``, or an empty mapping."""

        return self.index.postings(self.normalize(term))

    def lookup_document(self, document_id: str) -> dict[str, list[int]]:
        """Return term -> positions for every term occurring in ``document_id``."""

        return self.index.document_postings(document_id.lower())

    def boolean_and_query(self, query_text: str) -> set[str]:
        """Documents containing every whitespace-separated term of ``query_text``."""

        with track_latency(QUERY_LATENCY):
            result = self._intersect(query_text.split())
        QUERY_COUNT.labels(outcome="hit" if result else "miss").inc()
        logger.debug("Query %r matched %d document(s)", query_text, len(result))
        return result

    def _intersect(self, terms: list[str]) -> set[str]:
        result: set[str] | None = None
        for term in terms:
            documents = self.index.documents_for(self.normalize(term))
            if not documents:
                return set()
            result = set(documents) if result is None else result & documents
        return result or set()

    def run_queries(self, queries: Iterable[str]) -> dict[str, set[str]]:
        """Evaluate each query in order; repeated queries keep their first slot."""

        results: dict[str, set[str]] = {}
        for query in queries:
            logger.info("Processing query: %s", query)
            results[query] = self.boolean_and_query(query)
        return results
