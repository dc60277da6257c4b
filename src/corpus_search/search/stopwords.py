"""Stopword set loaded from a newline-delimited file."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
import logging
from pathlib import Path

from corpus_search.errors import StopwordLoadError


logger = logging.getLogger(__name__)


def _normalize(word: str) -> str:
    return word.strip().lower()


class StopwordSet:
    """Insertion-ordered, case- and whitespace-normalized stopword collection."""

    def __init__(self, words: Iterable[str] | None = None) -> None:
        # dict keeps first-insertion order for write()
        self._words: dict[str, None] = {}
        for word in words or ():
            self.add(word)

    @classmethod
    def from_file(cls, path: str | Path) -> StopwordSet:
        stopwords = cls()
        stopwords.load(path)
        return stopwords

    def load(self, path: str | Path) -> int:
        """Load stopwords from ``path``; returns the number of new entries."""

        source = Path(path)
        try:
            content = source.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise StopwordLoadError(f"Unable to read stopword file {source}: {exc}") from exc

        added = 0
        for line in content.splitlines():
            word = _normalize(line)
            if not word:
                continue
            if word in self._words:
                logger.debug("Duplicate stopword detected and ignored: %s", word)
                continue
            self._words[word] = None
            added += 1
        logger.info("Loaded %d stopwords from %s", added, source)
        return added

    def write(self, path: str | Path) -> Path:
        target = Path(path)
        target.write_text("".join(f"{word}\n" for word in self._words), encoding="utf-8")
        logger.info("Stopwords have been written to %s", target)
        return target

    def add(self, word: str | None) -> bool:
        if word is None:
            return False
        normalized = _normalize(word)
        if not normalized:
            return False
        if normalized in self._words:
            logger.debug("Stopword already exists: %s", normalized)
            return False
        self._words[normalized] = None
        return True

    def remove(self, word: str) -> bool:
        normalized = _normalize(word)
        if normalized not in self._words:
            return False
        del self._words[normalized]
        return True

    def contains(self, word: str) -> bool:
        return _normalize(word) in self._words

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and self.contains(word)

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def __len__(self) -> int:
        return len(self._words)
