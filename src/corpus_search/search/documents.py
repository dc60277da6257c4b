"""Filesystem document source for plain-text and HTML corpora.

Documents are the ``.txt`` and ``.html`` files directly inside the corpus
directory (suffix match is case-insensitive). Each document is identified by
its lowercased filename. HTML payloads are reduced to their text content with
whitespace collapsed before they reach the tokenizer.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
import logging
from pathlib import Path
import re

from bs4 import BeautifulSoup

from corpus_search.errors import CorpusError


logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")

TEXT_SUFFIX = ".txt"
HTML_SUFFIX = ".html"
SUPPORTED_SUFFIXES = (TEXT_SUFFIX, HTML_SUFFIX)


class DocumentLoadError(RuntimeError):
    """Raised when a single document cannot be read from disk."""


def strip_html(html: str) -> str:
    """Drop markup and collapse whitespace runs into single spaces."""

    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    text = soup.get_text(separator=" ")
    return _WHITESPACE.sub(" ", text).strip()


def document_id_for(path: Path) -> str:
    return path.name.lower()


@dataclass(frozen=True)
class Document:
    """A single corpus file."""

    document_id: str
    path: Path

    @property
    def is_html(self) -> bool:
        return self.path.suffix.lower() == HTML_SUFFIX

    def read_text(self) -> str:
        try:
            raw = self.path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise DocumentLoadError(f"Unable to read {self.path}: {exc}") from exc
        return strip_html(raw) if self.is_html else raw


class CorpusDocumentSource:
    """Enumerates and reads the documents of one corpus directory."""

    def __init__(self, corpus_dir: str | Path) -> None:
        self.corpus_dir = Path(corpus_dir)

    def validate(self) -> Path:
        if not self.corpus_dir.exists() or not self.corpus_dir.is_dir():
            raise CorpusError(f"The provided corpus directory path is invalid: {self.corpus_dir}")
        return self.corpus_dir

    def documents(self) -> list[Document]:
        """Return supported documents sorted by identifier.

        Raises:
            CorpusError: when the corpus directory is missing or unreadable.
        """

        root = self.validate()
        try:
            candidates = [path for path in root.iterdir() if path.is_file()]
        except OSError as exc:
            raise CorpusError(f"Unable to list corpus directory {root}: {exc}") from exc

        by_id: dict[str, Document] = {}
        for path in sorted(candidates, key=lambda p: p.name):
            if path.suffix.lower() not in SUPPORTED_SUFFIXES:
                continue
            document_id = document_id_for(path)
            if document_id in by_id:
                logger.warning(
                    "Skipping %s: document id '%s' already taken by %s",
                    path.name,
                    document_id,
                    by_id[document_id].path.name,
                )
                continue
            by_id[document_id] = Document(document_id=document_id, path=path)

        return [by_id[key] for key in sorted(by_id)]

    def __iter__(self) -> Iterator[Document]:
        return iter(self.documents())

    def find(self, document_id: str) -> Document | None:
        """Locate a document by its lowercased identifier."""

        normalized = document_id.lower()
        if not self.corpus_dir.is_dir():
            return None
        direct = self.corpus_dir / normalized
        if direct.is_file() and direct.suffix.lower() in SUPPORTED_SUFFIXES:
            return Document(document_id=normalized, path=direct)
        try:
            for path in sorted(self.corpus_dir.iterdir(), key=lambda p: p.name):
                if (
                    path.is_file()
                    and path.suffix.lower() in SUPPORTED_SUFFIXES
                    and document_id_for(path) == normalized
                ):
                    return Document(document_id=normalized, path=path)
        except OSError:
            logger.debug("Unable to scan %s for %s", self.corpus_dir, normalized)
        return None

    def read(self, document_id: str) -> str | None:
        """Return the tokenizable payload for ``document_id`` or ``None`` if unavailable."""

        document = self.find(document_id)
        if document is None:
            return None
        try:
            return document.read_text()
        except DocumentLoadError as exc:
            logger.warning("%s", exc)
            return None
