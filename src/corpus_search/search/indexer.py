"""Index builder: turns corpus documents into a positional inverted index.

Every token advances the document's position counter, including stopwords
that are dropped before indexing. Positions therefore line up with the raw
token stream that snippet extraction re-derives later.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
import logging
import time

from corpus_search.observability import DOCUMENTS_INDEXED, DOCUMENTS_SKIPPED, INDEX_TERM_COUNT, operation
from corpus_search.search.analyzers import TermAnalyzer
from corpus_search.search.documents import CorpusDocumentSource, Document, DocumentLoadError
from corpus_search.search.index import InvertedIndex
from corpus_search.search.stopwords import StopwordSet


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndexBuildResult:
    """Outcome of a corpus indexing run."""

    documents_indexed: int
    documents_skipped: int
    errors: tuple[str, ...]
    term_count: int
    duration_s: float


class IndexBuilder:
    """Populate one ``InvertedIndex`` from documents, one document at a time."""

    def __init__(
        self,
        *,
        stopwords: StopwordSet | Iterable[str] | None = None,
        stemming: bool = False,
    ) -> None:
        self.analyzer = TermAnalyzer(stopwords=stopwords, apply_stemming=stemming)
        self.index = InvertedIndex(stemming=stemming)
        self._indexed: set[str] = set()

    @property
    def stemming(self) -> bool:
        return self.index.stemming

    def index_text(self, document_id: str, text: str) -> int:
        """Index ``text`` under ``document_id``; returns the number of postings added.

        Raises:
            ValueError: if the document was already indexed by this builder.
        """

        normalized_id = document_id.lower()
        if normalized_id in self._indexed:
            raise ValueError(f"Document already indexed: {normalized_id}")
        self._indexed.add(normalized_id)

        added = 0
        for token in self.analyzer.stream(text):
            self.index.add_posting(token.text, normalized_id, token.position)
            added += 1
        return added

    def index_document(self, document: Document) -> int:
        added = self.index_text(document.document_id, document.read_text())
        kind = "html" if document.is_html else "text"
        DOCUMENTS_INDEXED.labels(kind=kind).inc()
        logger.info("Indexed %s document: %s", kind, document.document_id)
        return added

    def build(self, source: CorpusDocumentSource) -> IndexBuildResult:
        """Index every document of ``source`` in identifier order.

        Raises:
            CorpusError: when the corpus location is invalid or unreadable.
        """

        start = time.perf_counter()
        documents_indexed = 0
        documents_skipped = 0
        errors: list[str] = []

        with operation("build", corpus=str(source.corpus_dir)):
            documents = source.documents()
            if not documents:
                logger.warning("No text or HTML files found in the directory: %s", source.corpus_dir)

            for document in documents:
                try:
                    self.index_document(document)
                except DocumentLoadError as exc:
                    logger.warning("Failed to index %s: %s", document.document_id, exc)
                    errors.append(f"{document.document_id}: {exc}")
                    documents_skipped += 1
                    DOCUMENTS_SKIPPED.inc()
                    continue
                documents_indexed += 1

            INDEX_TERM_COUNT.labels(stemming=str(self.stemming).lower()).set(len(self.index))

        return IndexBuildResult(
            documents_indexed=documents_indexed,
            documents_skipped=documents_skipped,
            errors=tuple(errors),
            term_count=len(self.index),
            duration_s=time.perf_counter() - start,
        )


def build_index(
    source: CorpusDocumentSource,
    *,
    stopwords: StopwordSet | Iterable[str] | None = None,
    stemming: bool = False,
) -> tuple[InvertedIndex, IndexBuildResult]:
    """Build a fresh index for ``source``."""

    builder = IndexBuilder(stopwords=stopwords, stemming=stemming)
    result = builder.build(source)
    logger.info(
        "Index built: %d documents, %d terms in %.3fs",
        result.documents_indexed,
        result.term_count,
        result.duration_s,
    )
    return builder.index, result
