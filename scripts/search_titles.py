#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import logging
import sys

from title_search.config import PROVIDERS, SearchSettings, build_searcher
from title_search.search.context import SearchContext
from title_search.search.errors import SearchError
from title_search.search.models import SearchResult


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="search_titles",
        description="Search movie/TV titles on a metadata provider (TMDb or OMDb).",
    )
    parser.add_argument("query", help="Title text to search for.")
    parser.add_argument(
        "--provider",
        choices=sorted(PROVIDERS),
        default=None,
        help="Provider to query (defaults to SEARCH_PROVIDER, then tmdb).",
    )
    parser.add_argument("--limit", type=int, default=10, help="Maximum number of results (default: 10).")
    parser.add_argument("--timeout", type=float, default=None, help="Deadline in seconds for the whole search.")
    parser.add_argument("--json", action="store_true", help="Print results as a JSON array.")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")
    return parser.parse_args(argv)


def _format_result(result: SearchResult) -> str:
    year = result.year or "-"
    imdb_id = result.imdb_id or "-"
    return f"{result.type.value:<8} {year:<10} {result.title} ({imdb_id})"


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = SearchSettings.from_env()
        searcher = build_searcher(settings, provider=args.provider)
    except (ValueError, RuntimeError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2

    timeout = args.timeout if args.timeout is not None else settings.timeout_seconds
    ctx = SearchContext(timeout_seconds=timeout)

    try:
        results = searcher.search(ctx, args.query, args.limit)
    except SearchError as exc:
        print(f"ERROR: {type(exc).__name__}: {exc}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps([r.to_dict() for r in results], indent=2))
    else:
        for result in results:
            print(_format_result(result))
        if args.verbose:
            print(f"search_titles: query={args.query!r} results={len(results)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
