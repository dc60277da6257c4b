"""Shared test fixtures and configuration."""

import logging
import os
from pathlib import Path

import pytest


# Environment values every test starts from; tests override via monkeypatch.
TEST_ENV = {
    "CORPUS_SEARCH_ENABLE_STEMMING": "false",
    "CORPUS_SEARCH_SNIPPET_RADIUS": "0",
    "CORPUS_SEARCH_LOG_LEVEL": "warning",
    "CORPUS_SEARCH_LOG_JSON": "false",
}

_CLEARED_KEYS = (
    "CORPUS_SEARCH_STOPWORD_FILE",
    "CORPUS_SEARCH_CORPUS_DIR",
    "CORPUS_SEARCH_SNAPSHOT_DIR",
)


for key, value in TEST_ENV.items():
    os.environ[key] = value
for key in _CLEARED_KEYS:
    os.environ.pop(key, None)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Reset configuration environment variables before each test."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)
    for key in _CLEARED_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def restore_root_logging():
    """The CLI reconfigures the root logger; put pytest's handlers back afterwards."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


CORPUS_FILES = {
    "doc1.txt": "The cat sat on a mat",
    "doc2.txt": "A dog chased the cat.\nThe dog was running fast!",
    "Page.HTML": (
        "<html><head><title>Cats</title></head>\n"
        "<body><p>The <b>cat</b>\n   napped</p></body></html>"
    ),
    "notes.md": "cat cat cat",
}


@pytest.fixture
def corpus_dir(tmp_path: Path) -> Path:
    """Small corpus: two text documents, one HTML page and one ignored file."""
    root = tmp_path / "corpus"
    root.mkdir()
    for name, content in CORPUS_FILES.items():
        (root / name).write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def stopword_file(tmp_path: Path) -> Path:
    path = tmp_path / "stopwords.txt"
    path.write_text("the\na\n  The \n\non\n", encoding="utf-8")
    return path
