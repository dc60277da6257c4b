"""Positional inverted index data model.

``InvertedIndex`` maps a term to the documents containing it and, per
document, to the ascending 1-based positions at which the term occurs. The
builder is the only writer; once built the index is treated as read-only and
lookups hand out copies.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from typing import Any


SNAPSHOT_FORMAT_VERSION = 1

Postings = dict[str, list[int]]


class InvertedIndex:
    """Term -> document -> positions mapping plus the stemming mode it was built with."""

    def __init__(self, *, stemming: bool = False) -> None:
        self.stemming = stemming
        self._terms: dict[str, Postings] = {}

    def add_posting(self, term: str, document_id: str, position: int) -> None:
        positions = self._terms.setdefault(term, {}).setdefault(document_id, [])
        if positions and position <= positions[-1]:
            msg = f"Position {position} for '{term}' in {document_id} is not after {positions[-1]}"
            raise ValueError(msg)
        positions.append(position)

    def postings(self, term: str) -> Postings:
        """Return a copy of the document -> positions mapping for an exact term."""

        entry = self._terms.get(term)
        if entry is None:
            return {}
        return {document_id: list(positions) for document_id, positions in entry.items()}

    def documents_for(self, term: str) -> frozenset[str]:
        entry = self._terms.get(term)
        return frozenset(entry) if entry else frozenset()

    def document_postings(self, document_id: str) -> dict[str, list[int]]:
        """Linear scan returning term -> positions for one document."""

        found: dict[str, list[int]] = {}
        for term, entry in self._terms.items():
            positions = entry.get(document_id)
            if positions is not None:
                found[term] = list(positions)
        return found

    def terms(self) -> list[str]:
        return list(self._terms)

    def documents(self) -> set[str]:
        return {document_id for entry in self._terms.values() for document_id in entry}

    def items(self) -> Iterator[tuple[str, Postings]]:
        for term in self._terms:
            yield term, self.postings(term)

    def __contains__(self, term: object) -> bool:
        return term in self._terms

    def __len__(self) -> int:
        return len(self._terms)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, InvertedIndex):
            return NotImplemented
        return self.stemming == other.stemming and self._terms == other._terms

    def __repr__(self) -> str:
        return f"InvertedIndex(terms={len(self._terms)}, stemming={self.stemming})"

    # --- serialization ----------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": SNAPSHOT_FORMAT_VERSION,
            "stemming": self.stemming,
            "terms": {
                term: {document_id: list(entry[document_id]) for document_id in sorted(entry)}
                for term, entry in sorted(self._terms.items())
            },
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> InvertedIndex:
        version = data.get("version")
        if version != SNAPSHOT_FORMAT_VERSION:
            raise ValueError(f"Unsupported snapshot version: {version!r}")
        terms = data.get("terms")
        if not isinstance(terms, Mapping):
            raise ValueError("Snapshot is missing the 'terms' mapping")

        index = cls(stemming=bool(data.get("stemming", False)))
        for term, entry in terms.items():
            if not isinstance(entry, Mapping):
                raise ValueError(f"Postings for '{term}' must be a mapping")
            for document_id, positions in entry.items():
                if not isinstance(positions, Sequence):
                    raise ValueError(f"Positions for '{term}' in {document_id} must be a list")
                for position in positions:
                    index.add_posting(str(term), str(document_id), int(position))
        return index
