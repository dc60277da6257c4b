"""Tokenizer and token filters used for indexing and query normalization.

The tokenizer splits text on runs of ASCII non-word characters. Positions are
1-based and assigned before any filtering, so a dropped stopword still
consumes its slot in the document's token stream. Filters never renumber.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
import re
from typing import Any, Protocol

from corpus_search.search.stemmer import stem
from corpus_search.search.stopwords import StopwordSet


_WORD_PATTERN = r"[A-Za-z0-9_]+"


@dataclass
class Token:
    """A token emitted by the tokenizer."""

    text: str
    position: int
    start_char: int
    end_char: int

    def copy_with(self, **updates: Any) -> Token:
        data = {
            "text": self.text,
            "position": self.position,
            "start_char": self.start_char,
            "end_char": self.end_char,
        }
        data.update(updates)
        return Token(**data)


class TokenFilter(Protocol):
    """Protocol implemented by token filters."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


class RegexTokenizer:
    """Yields maximal runs of ASCII word characters with 1-based positions."""

    def __init__(self, pattern: str = _WORD_PATTERN) -> None:
        self.pattern = re.compile(pattern, re.ASCII)

    def __call__(self, text: str) -> Iterator[Token]:
        for position, match in enumerate(self.pattern.finditer(text or ""), start=1):
            yield Token(
                text=match.group(0),
                position=position,
                start_char=match.start(),
                end_char=match.end(),
            )


_DEFAULT_TOKENIZER = RegexTokenizer()


class TokenStream:
    """Lazy token sequence that restarts from the first token on every iteration."""

    def __init__(self, text: str, tokenizer: RegexTokenizer = _DEFAULT_TOKENIZER) -> None:
        self.text = text
        self.tokenizer = tokenizer

    def __iter__(self) -> Iterator[Token]:
        return self.tokenizer(self.text)


def tokenize(text: str) -> TokenStream:
    """Tokenize ``text`` with the default ASCII word tokenizer."""

    return TokenStream(text)


def raw_tokens(text: str) -> list[str]:
    """Return the surface form of every token, in order."""

    return [token.text for token in tokenize(text)]


class LowercaseFilter:
    """Filter that lowercases token text."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            lowered = token.text.lower()
            if lowered == token.text:
                yield token
            else:
                yield token.copy_with(text=lowered)


class StopFilter:
    """Removes stopwords from the stream, keeping the positions of survivors."""

    def __init__(self, stopwords: StopwordSet | Iterable[str] | None = None) -> None:
        if isinstance(stopwords, StopwordSet):
            self.stopwords = stopwords
        else:
            self.stopwords = StopwordSet(stopwords or ())

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            if not self.stopwords.contains(token.text):
                yield token


class StemFilter:
    """Applies the reduced Porter stemmer to each token."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            yield token.copy_with(text=stem(token.text))


class AnalyzerPipeline:
    """Composable analyzer pipeline (tokenizer + filters)."""

    def __init__(self, tokenizer: RegexTokenizer, filters: Sequence[TokenFilter] | None = None) -> None:
        self.tokenizer = tokenizer
        self.filters = list(filters or [])

    def stream(self, text: str) -> Iterator[Token]:
        tokens: Iterable[Token] = self.tokenizer(text)
        for token_filter in self.filters:
            tokens = token_filter(tokens)
        yield from tokens

    def __call__(self, text: str) -> list[Token]:
        return list(self.stream(text))


class TermAnalyzer:
    """Index-time analyzer: lowercase, drop stopwords, optionally stem.

    ``normalize`` applies the same lowercase/stem treatment to a single query
    term. Query terms are not checked against the stopword list, so a query
    for a stopword simply finds nothing.
    """

    def __init__(
        self,
        *,
        stopwords: StopwordSet | Iterable[str] | None = None,
        apply_stemming: bool = False,
    ) -> None:
        self.apply_stemming = apply_stemming
        self.stop_filter = StopFilter(stopwords)
        filters: list[TokenFilter] = [LowercaseFilter(), self.stop_filter]
        if apply_stemming:
            filters.append(StemFilter())
        self.pipeline = AnalyzerPipeline(_DEFAULT_TOKENIZER, filters)

    @property
    def stopwords(self) -> StopwordSet:
        return self.stop_filter.stopwords

    def normalize(self, term: str) -> str:
        lowered = term.lower()
        return stem(lowered) if self.apply_stemming else lowered

    def stream(self, text: str) -> Iterator[Token]:
        return self.pipeline.stream(text)

    def __call__(self, text: str) -> list[Token]:
        return self.pipeline(text)
