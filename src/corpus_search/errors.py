"""Exception types raised by the corpus search stack."""

from __future__ import annotations


class CorpusSearchError(RuntimeError):
    """Base class for fatal, caller-reported failures."""


class CorpusError(CorpusSearchError):
    """Raised when the corpus location is missing, not a directory or unreadable."""


class StopwordLoadError(CorpusSearchError):
    """Raised when the stopword source cannot be read."""


class SnapshotError(CorpusSearchError):
    """Raised when a persisted index snapshot is corrupt or incompatible."""
