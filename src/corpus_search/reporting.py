"""Plain-text report formatting for search results, snippets and index contents.

Documents and terms are listed in sorted order so reports are reproducible
regardless of how the index happens to be laid out in memory.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import logging
from pathlib import Path

from corpus_search.search.index import InvertedIndex
from corpus_search.search.snippet import SnippetResult


logger = logging.getLogger(__name__)


def format_search_results(results: Mapping[str, set[str]]) -> str:
    lines: list[str] = []
    for query, documents in results.items():
        lines.append(f"Query: {query}")
        if documents:
            lines.append(f"Results: {', '.join(sorted(documents))}")
        else:
            lines.append("Results: No matching documents.")
        lines.append("")
    return "".join(f"{line}\n" for line in lines)


def format_snippets(query: str, result: SnippetResult) -> str:
    lines = [f"Query: {query}"]
    for document_id, snippets in result.snippets.items():
        lines.append(f"Document: {document_id}")
        lines.extend(f"  Position {snippet.position}: {snippet.render()}" for snippet in snippets)
    return "".join(f"{line}\n" for line in lines)


def format_term_info(term: str, postings: Mapping[str, Sequence[int]]) -> str:
    """Describe where ``term`` occurs, one block per document."""

    if not postings:
        return f"The word '{term}' does not appear in any document.\n"
    lines = [f"The word '{term}' appears in {len(postings)} document(s):"]
    for document_id in sorted(postings):
        positions = list(postings[document_id])
        lines.append(f"  Document: {document_id}")
        lines.append(f"    Frequency: {len(positions)}")
        lines.append(f"    Positions: {positions}")
    return "".join(f"{line}\n" for line in lines)


def format_document_info(document_id: str, postings: Mapping[str, Sequence[int]]) -> str:
    """Describe every indexed term of ``document_id``."""

    if not postings:
        return f"The document '{document_id}' does not contain any indexed words.\n"
    lines = [f"The document '{document_id}' contains {len(postings)} word(s):"]
    for term in sorted(postings):
        positions = list(postings[term])
        lines.append(f"  Word: {term}")
        lines.append(f"    Frequency: {len(positions)}")
        lines.append(f"    Positions: {positions}")
    return "".join(f"{line}\n" for line in lines)


def format_index_dump(index: InvertedIndex) -> str:
    lines: list[str] = []
    for term in sorted(index.terms()):
        lines.append(f"Word: {term}")
        postings = index.postings(term)
        lines.extend(f"  Document: {document_id} -> {postings[document_id]}" for document_id in sorted(postings))
    return "".join(f"{line}\n" for line in lines)


def write_report(path: str | Path, text: str, *, append: bool = False) -> Path:
    target = Path(path)
    if target.parent != Path():
        target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("a" if append else "w", encoding="utf-8") as handle:
        handle.write(text)
    logger.info("Report written to %s", target)
    return target


def read_queries(path: str | Path) -> list[str]:
    """Return the non-blank, stripped lines of a query file."""

    content = Path(path).read_text(encoding="utf-8")
    return [line.strip() for line in content.splitlines() if line.strip()]
