"""
Rank a file of documents for a query with a TF-IDF weighting scheme.

Usage:
    ranking-tfidf <docs.txt> "<query>" [--normals Ptn] [--slope 0.2] [--delta 1.0] [--top-k 10]

Each line of the documents file is one document. Output is one line per
result: rank, line number (1-based) and score, tab separated. Documents that
score zero or less are not printed.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from ranking_tfidf.config import DEFAULT_DELTA, DEFAULT_NORMALS, DEFAULT_SLOPE
from ranking_tfidf.corpus import Corpus, TfIdfRanker, tokenize
from ranking_tfidf.errors import InvalidConfigurationError
from ranking_tfidf.tfidf import TfIdfWeight

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ranking-tfidf", description="Rank documents with a TF-IDF weighting scheme"
    )
    parser.add_argument("documents", type=Path, help="Text file with one document per line")
    parser.add_argument("query", help="Query text")
    parser.add_argument(
        "--normals", default=DEFAULT_NORMALS, help=f"Normalization string (default: {DEFAULT_NORMALS})"
    )
    parser.add_argument("--slope", type=float, default=DEFAULT_SLOPE, help="Pivoted normalization slope")
    parser.add_argument("--delta", type=float, default=DEFAULT_DELTA, help="Pivoted normalization offset")
    parser.add_argument("--top-k", type=int, default=10, help="Number of results to print")
    parser.add_argument("--verbose", action="store_true", help="Verbose output")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        scheme = TfIdfWeight(args.normals, args.slope, args.delta)
    except InvalidConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    if not args.documents.exists():
        print(f"Error: Documents file not found: {args.documents}", file=sys.stderr)
        return 1

    lines = args.documents.read_text().splitlines()
    corpus = Corpus.from_texts(lines)
    logger.info("Loaded %d documents from %s", len(corpus), args.documents)

    ranker = TfIdfRanker(corpus, scheme)
    indices, scores = ranker.rank(tokenize(args.query), top_k=args.top_k)
    for rank, (idx, score) in enumerate(zip(indices, scores), start=1):
        if score <= 0.0:
            break
        print(f"{rank}\t{idx + 1}\t{score:.6f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
