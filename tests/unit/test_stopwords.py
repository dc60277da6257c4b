"""Unit tests for stopword loading and normalization."""

from __future__ import annotations

from pathlib import Path

import pytest

from corpus_search.errors import StopwordLoadError
from corpus_search.search.stopwords import StopwordSet


pytestmark = pytest.mark.unit


def test_from_file_trims_lowercases_and_dedupes(stopword_file: Path) -> None:
    stopwords = StopwordSet.from_file(stopword_file)

    assert list(stopwords) == ["the", "a", "on"]
    assert len(stopwords) == 3


def test_load_returns_new_entry_count(stopword_file: Path) -> None:
    stopwords = StopwordSet(["on"])

    assert stopwords.load(stopword_file) == 2
    assert list(stopwords) == ["on", "the", "a"]


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(StopwordLoadError):
        StopwordSet.from_file(tmp_path / "absent.txt")


def test_undecodable_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "binary.txt"
    path.write_bytes(b"\xff\xfe\xfa")

    with pytest.raises(StopwordLoadError):
        StopwordSet.from_file(path)


def test_empty_file_yields_empty_set(tmp_path: Path) -> None:
    path = tmp_path / "empty.txt"
    path.write_text("", encoding="utf-8")

    assert len(StopwordSet.from_file(path)) == 0


def test_contains_is_case_insensitive() -> None:
    stopwords = StopwordSet(["The"])

    assert stopwords.contains("THE")
    assert "the" in stopwords
    assert " the " in stopwords
    assert 42 not in stopwords


def test_add_and_remove() -> None:
    stopwords = StopwordSet()

    assert stopwords.add("And")
    assert not stopwords.add("and")
    assert not stopwords.add("   ")
    assert not stopwords.add(None)
    assert stopwords.remove("AND")
    assert not stopwords.remove("and")
    assert len(stopwords) == 0


def test_write_emits_one_normalized_word_per_line(stopword_file: Path, tmp_path: Path) -> None:
    target = tmp_path / "normalized.txt"

    StopwordSet.from_file(stopword_file).write(target)

    assert target.read_text(encoding="utf-8") == "the\na\non\n"
