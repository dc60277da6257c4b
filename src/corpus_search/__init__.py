"""Positional inverted index with boolean AND search, a reduced Porter stemmer and snippets."""

__version__ = "0.1.0"
