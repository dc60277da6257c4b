"""Command-line interface for building, querying and inspecting a corpus index."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
import logging
from pathlib import Path
import sys

from pydantic import ValidationError

from corpus_search.config import Settings
from corpus_search.errors import CorpusSearchError
from corpus_search.observability import configure_logging, generate_run_id, get_metrics, operation, set_run_context
from corpus_search.reporting import (
    format_document_info,
    format_index_dump,
    format_search_results,
    format_snippets,
    format_term_info,
    read_queries,
    write_report,
)
from corpus_search.search.documents import CorpusDocumentSource
from corpus_search.search.index import InvertedIndex
from corpus_search.search.indexer import build_index
from corpus_search.search.query import QueryEngine
from corpus_search.search.snippet import SnippetExtractor
from corpus_search.search.stemmer import stem
from corpus_search.search.stopwords import StopwordSet
from corpus_search.search.storage import SnapshotStore


logger = logging.getLogger(__name__)


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="corpus-search",
        description="Positional inverted index with boolean AND search and snippets",
    )
    parser.add_argument("--log-level", help="Override the configured log level")
    parser.add_argument("--log-json", action="store_true", default=None, help="Emit JSON log lines")
    subparsers = parser.add_subparsers(dest="command", required=True)

    index_parser = subparsers.add_parser("index", help="Build or load an index, then search and report")
    index_parser.add_argument("--stopword", type=Path, help="Stopword file (one word per line)")
    index_parser.add_argument("--corpus", type=Path, help="Directory containing .txt and .html documents")
    index_parser.add_argument("--snapshot-dir", type=Path, help="Directory for index snapshots")
    index_parser.add_argument(
        "--stem",
        "-st",
        action="store_true",
        default=None,
        help="Normalize terms with the reduced Porter stemmer",
    )
    index_parser.add_argument(
        "--rebuild",
        action="store_true",
        help="Ignore an existing snapshot and rebuild from the corpus",
    )
    queries = index_parser.add_mutually_exclusive_group()
    queries.add_argument("--query", help="Single boolean AND query")
    queries.add_argument("--query-file", type=Path, help="File with one query per line")
    index_parser.add_argument("--search-output", type=Path, help="Write search results for the queries here")
    index_parser.add_argument("--snip", type=int, help="Snippet radius in tokens (0 disables snippets)")
    index_parser.add_argument("--snip-output", type=Path, help="Append snippets for the queries here")
    index_parser.add_argument("--output", type=Path, help="Dump the full inverted index here")
    index_parser.add_argument("--word", help="Report postings of a single word")
    index_parser.add_argument("--word-output", type=Path, help="Destination for the --word report")
    index_parser.add_argument("--doc", help="Report indexed words of a single document")
    index_parser.add_argument("--doc-output", type=Path, help="Destination for the --doc report")
    index_parser.add_argument("--metrics-output", type=Path, help="Write Prometheus metrics for this run here")

    stopword_parser = subparsers.add_parser("stopwords", help="Normalize and deduplicate a stopword file")
    stopword_parser.add_argument("--input", "-i", type=Path, required=True, help="Stopword file to read")
    stopword_parser.add_argument("--output", "-o", type=Path, required=True, help="Normalized stopword file")

    stem_parser = subparsers.add_parser("stem", help="Print the stem of each word")
    stem_parser.add_argument("words", nargs="+", metavar="WORD")

    return parser


def _merge_settings(settings: Settings, args: argparse.Namespace) -> Settings:
    overrides: dict[str, object] = {}
    for flag, field_name in (
        ("stopword", "stopword_file"),
        ("corpus", "corpus_dir"),
        ("snapshot_dir", "snapshot_dir"),
        ("stem", "enable_stemming"),
        ("snip", "snippet_radius"),
        ("log_level", "log_level"),
        ("log_json", "log_json"),
    ):
        value = getattr(args, flag, None)
        if value is not None:
            overrides[field_name] = value
    if not overrides:
        return settings
    return Settings.model_validate({**settings.model_dump(), **overrides})


def _load_or_build(settings: Settings, stopwords: StopwordSet, *, rebuild: bool) -> InvertedIndex:
    store = SnapshotStore(settings.snapshot_dir)
    stemming = settings.enable_stemming
    logger.info("Stemming enabled: %s", stemming)
    logger.info("Using snapshot file: %s", settings.snapshot_path())

    index = None if rebuild else store.load(stemming)
    if index is not None:
        return index

    corpus_dir = settings.resolve_corpus_dir()
    if corpus_dir is None:
        logger.warning("No corpus directory given and no snapshot found; continuing with an empty index")
        return InvertedIndex(stemming=stemming)

    index, result = build_index(CorpusDocumentSource(corpus_dir), stopwords=stopwords, stemming=stemming)
    for error in result.errors:
        logger.warning("Skipped during build: %s", error)
    store.save(index)
    return index


def _collect_queries(args: argparse.Namespace) -> list[str]:
    if args.query_file is not None:
        return read_queries(args.query_file)
    if args.query:
        return [args.query]
    return []


def run_index_command(args: argparse.Namespace, settings: Settings) -> int:
    if settings.stopword_file is None:
        logger.error("A stopword file is required (--stopword or CORPUS_SEARCH_STOPWORD_FILE)")
        return 1

    stopwords = StopwordSet.from_file(settings.stopword_file)
    index = _load_or_build(settings, stopwords, rebuild=args.rebuild)
    engine = QueryEngine(index)
    queries = _collect_queries(args)

    if args.search_output is not None:
        with operation("search"):
            results = engine.run_queries(queries)
        write_report(args.search_output, format_search_results(results))

    if settings.snippet_radius > 0 and args.snip_output is not None:
        corpus_dir = settings.resolve_corpus_dir()
        if corpus_dir is None:
            logger.warning("Snippets need --corpus to re-read documents; skipping snippet extraction")
        else:
            extractor = SnippetExtractor(index, CorpusDocumentSource(corpus_dir))
            with operation("snippets"):
                for query in queries:
                    logger.info("Extracting snippets for query: %s", query)
                    snippets = extractor.search(query, settings.snippet_radius)
                    write_report(args.snip_output, format_snippets(query, snippets), append=True)

    if args.word is not None:
        report = format_term_info(args.word.lower(), engine.lookup_term(args.word))
        _emit(report, args.word_output)

    if args.doc is not None:
        report = format_document_info(args.doc.lower(), engine.lookup_document(args.doc))
        _emit(report, args.doc_output)

    if args.output is not None:
        logger.info("Saving inverted index to file: %s", args.output)
        write_report(args.output, format_index_dump(index))

    if args.metrics_output is not None:
        write_report(args.metrics_output, get_metrics().decode("utf-8"))

    return 0


def _emit(report: str, destination: Path | None) -> None:
    if destination is None:
        sys.stdout.write(report)
    else:
        write_report(destination, report)


def run_stopwords_command(args: argparse.Namespace) -> int:
    stopwords = StopwordSet.from_file(args.input)
    stopwords.write(args.output)
    return 0


def run_stem_command(args: argparse.Namespace) -> int:
    for word in args.words:
        sys.stdout.write(f"{word}\t{stem(word)}\n")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_argument_parser()
    args = parser.parse_args(argv)

    try:
        settings = _merge_settings(Settings(), args)
    except ValidationError as exc:
        configure_logging()
        logger.error("Invalid configuration: %s", exc)
        return 1
    configure_logging(settings.log_level, settings.log_json)
    set_run_context(generate_run_id(), command=args.command)

    try:
        if args.command == "stopwords":
            return run_stopwords_command(args)
        if args.command == "stem":
            return run_stem_command(args)
        return run_index_command(args, settings)
    except CorpusSearchError as exc:
        logger.error("%s", exc)
        return 1
    except OSError as exc:
        logger.error("I/O error: %s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
