"""Position-window snippet extraction.

For a matched position ``p`` (1-based) and radius ``r`` the window covers the
0-based raw token indices ``max(0, p - r - 1)`` through
``min(len(tokens) - 1, p + r - 1)`` inclusive. Tokens are the original-case
surface forms re-derived from the document source, labelled with their 1-based
positions.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
import logging
from typing import Protocol

from corpus_search.observability import SNIPPET_SOURCE_MISSING
from corpus_search.search.analyzers import TermAnalyzer, raw_tokens
from corpus_search.search.index import InvertedIndex


logger = logging.getLogger(__name__)


class TextSource(Protocol):
    """Anything that can hand back a document's tokenizable text."""

    def read(self, document_id: str) -> str | None:  # pragma: no cover - interface definition
        ...


@dataclass(frozen=True)
class SnippetToken:
    position: int
    text: str

    def render(self) -> str:
        return f"[Index {self.position}: {self.text}]"


@dataclass(frozen=True)
class Snippet:
    """Context window around one matched position."""

    document_id: str
    position: int
    tokens: tuple[SnippetToken, ...]

    def render(self) -> str:
        return " ".join(token.render() for token in self.tokens)


@dataclass
class SnippetResult:
    """Snippets grouped by document plus documents whose source was unavailable."""

    term: str
    radius: int
    snippets: dict[str, list[Snippet]] = field(default_factory=dict)
    missing: list[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.snippets)


def window_bounds(position: int, radius: int, token_count: int) -> tuple[int, int]:
    """Return inclusive 0-based ``(start, end)`` indices of the window."""

    start = max(0, position - radius - 1)
    end = min(token_count - 1, position + radius - 1)
    return start, end


def extract_window(tokens: Sequence[str], position: int, radius: int) -> tuple[SnippetToken, ...]:
    if radius < 0:
        raise ValueError(f"Snippet radius must be non-negative, got {radius}")
    start, end = window_bounds(position, radius, len(tokens))
    return tuple(SnippetToken(position=i + 1, text=tokens[i]) for i in range(start, end + 1))


class SnippetExtractor:
    """Build snippets for a term from the index and the documents' raw token streams."""

    def __init__(self, index: InvertedIndex, source: TextSource) -> None:
        self.index = index
        self.source = source
        self.analyzer = TermAnalyzer(apply_stemming=index.stemming)

    def search(self, query_term: str, radius: int) -> SnippetResult:
        """Normalize ``query_term`` like an indexed token, then extract."""

        return self.extract(self.analyzer.normalize(query_term), radius)

    def extract(self, term: str, radius: int) -> SnippetResult:
        """Extract snippets for an already-normalized ``term``."""

        if radius < 0:
            raise ValueError(f"Snippet radius must be non-negative, got {radius}")

        result = SnippetResult(term=term, radius=radius)
        postings = self.index.postings(term)
        for document_id in sorted(postings):
            text = self.source.read(document_id)
            if text is None:
                logger.warning("File not found: %s", document_id)
                SNIPPET_SOURCE_MISSING.inc()
                result.missing.append(document_id)
                continue

            tokens = raw_tokens(text)
            result.snippets[document_id] = [
                Snippet(
                    document_id=document_id,
                    position=position,
                    tokens=extract_window(tokens, position, radius),
                )
                for position in postings[document_id]
            ]
        return result
