"""
Indexing and query package.

This package provides the core search stack:
- stemmer: reduced Porter-style stemmer
- analyzers: ASCII word tokenizer and token filters (lowercase, stop, stem)
- stopwords: stopword set loading and editing
- documents: corpus directory document source with HTML stripping
- index: positional inverted index data model
- indexer: index builder
- query: boolean AND query engine
- snippet: position-window snippet extraction
- storage: snapshot persistence
"""
