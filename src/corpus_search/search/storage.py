"""Snapshot persistence for built indexes.

Each stemming mode gets its own snapshot file so that a stemmed and an
unstemmed index of the same corpus can live side by side. Snapshots are
minified JSON written through a temporary file and an atomic rename.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import orjson

from corpus_search.errors import SnapshotError
from corpus_search.observability import INDEX_TERM_COUNT
from corpus_search.search.index import InvertedIndex


logger = logging.getLogger(__name__)

STEMMED_SNAPSHOT_NAME = "inverted_index_stemmed.json"
NONSTEMMED_SNAPSHOT_NAME = "inverted_index_nonstemmed.json"


def snapshot_filename(stemming: bool) -> str:
    return STEMMED_SNAPSHOT_NAME if stemming else NONSTEMMED_SNAPSHOT_NAME


class SnapshotStore:
    """Save and load ``InvertedIndex`` snapshots in one directory."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def path_for(self, stemming: bool) -> Path:
        return self.directory / snapshot_filename(stemming)

    def exists(self, stemming: bool) -> bool:
        return self.path_for(stemming).is_file()

    def save(self, index: InvertedIndex) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(index.stemming)
        self._atomic_write_json(path, index.to_dict())
        logger.info("Inverted index has been saved to %s", path)
        return path

    def load(self, stemming: bool) -> InvertedIndex | None:
        """Return the stored index for ``stemming`` or ``None`` when no snapshot exists.

        Raises:
            SnapshotError: when the snapshot is unreadable, corrupt or was
                built with a different stemming mode.
        """

        path = self.path_for(stemming)
        if not path.exists():
            logger.info("%s not found. Creating a new index.", path)
            return None

        try:
            payload: Any = orjson.loads(path.read_bytes())
        except (OSError, orjson.JSONDecodeError) as exc:
            raise SnapshotError(f"Unable to read snapshot {path}: {exc}") from exc
        if not isinstance(payload, dict):
            raise SnapshotError(f"Snapshot {path} does not contain an index object")

        try:
            index = InvertedIndex.from_dict(payload)
        except (TypeError, ValueError) as exc:
            raise SnapshotError(f"Corrupt snapshot {path}: {exc}") from exc

        if index.stemming != stemming:
            raise SnapshotError(
                f"Snapshot {path} was built with stemming={index.stemming}, expected stemming={stemming}"
            )
        INDEX_TERM_COUNT.labels(stemming=str(stemming).lower()).set(len(index))
        logger.info("Inverted index has been loaded from %s", path)
        return index

    def _atomic_write_json(self, path: Path, payload: Any) -> None:
        tmp_path = path.with_name(path.name + ".tmp")
        tmp_path.write_bytes(orjson.dumps(payload))
        tmp_path.replace(path)
