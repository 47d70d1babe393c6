#!/usr/bin/env python3
"""
Query the chunk corpus from the command line.

Loads .env.local/.env, configures logging, loads chunks.json (CHUNKS_PATH or
the default locations) and prints the ranked results with their scores.

Usage:
    python scripts/search_chunks.py "SNS 선거운동 가능한가요"
    python scripts/search_chunks.py "재외선거 투표" --max-results 8 --min-score 40 --dedupe --backfill
    python scripts/search_chunks.py --categories
"""

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from legalsearch.bm25 import clean_text
from legalsearch.config import Settings, load_environment
from legalsearch.corpus import CorpusNotFoundError, CorpusParseError
from legalsearch.engine import ChunkSearchEngine
from legalsearch.logging_config import setup_logging

PREVIEW_CHARS = 160


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Search the election-law chunk corpus")
    parser.add_argument("query", nargs="?", help="Free-text query")
    parser.add_argument("--chunks", type=Path, help="Path to chunks.json (overrides CHUNKS_PATH)")
    parser.add_argument("--max-results", type=int, help="Result cap (default: SEARCH_MAX_RESULTS)")
    parser.add_argument("--min-score", type=float, help="Minimum score floor (default: SEARCH_MIN_SCORE)")
    parser.add_argument("--dedupe", action="store_true", help="One result per citable source")
    parser.add_argument("--backfill", action="store_true", help="Append topic coverage chunks")
    parser.add_argument("--categories", action="store_true", help="List categories and exit")
    return parser.parse_args(argv)


def describe(chunk) -> str:
    metadata = chunk.metadata
    location = f"p.{metadata.page}" if metadata.page else (metadata.case_number or f"#{chunk.index}")
    return f"{metadata.file_name or '문서'}, {location}"


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    load_environment()
    settings = Settings.from_env()
    setup_logging(settings.log_file, console_level=settings.log_level)
    logger = logging.getLogger(__name__)

    if not args.query and not args.categories:
        print("Nothing to do: pass a query or --categories")
        return 2

    engine = ChunkSearchEngine(settings=settings)
    try:
        engine.load(args.chunks)
    except (CorpusNotFoundError, CorpusParseError) as e:
        logger.error(str(e))
        return 1

    if args.categories:
        for category in sorted(engine.list_categories()):
            print(category)
        return 0

    results = engine.search(
        args.query,
        max_results=args.max_results,
        min_score=args.min_score,
        dedupe=args.dedupe,
        backfill=args.backfill,
    )
    scored = {item.chunk.index: item for item in engine.rank(args.query)}

    print(f"\n{len(results)} result(s) for: {args.query}")
    print("=" * 80)

    if not results:
        print("No relevant chunks found.")
        return 0

    for position, chunk in enumerate(results, start=1):
        item = scored[chunk.index]
        print(
            f"[{position}] {describe(chunk)} | score={item.score:.2f} "
            f"(bm25={item.bm25_score:.2f}, heuristic={item.heuristic_score:.1f})"
        )
        print(f"    {clean_text(chunk.content)[:PREVIEW_CHARS]}...")

    return 0


if __name__ == "__main__":
    sys.exit(main())
