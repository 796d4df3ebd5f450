"""
Amoeba Launcher - Process entry point.

Builds the query engine from settings, registers the search handlers and
runs a single query from the command line, printing results as a GUI
frame loop would receive them.

Usage:
  amoeba rust
  amoeba -m wiki rust programming
  amoeba --list
"""

import argparse
import asyncio
import sys
from typing import Optional

from loguru import logger
from search import Query, QueryEngine, QueryEngineError
from search.handlers import MockSearchHandler, WikipediaConfig, WikipediaSearchHandler
from utils.helpers import load_settings


def configure_logging(level: str) -> None:
    """Replace loguru's default sink with a single stderr sink at level."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


def build_engine(settings: dict) -> QueryEngine:
    """
    Create the engine and register every handler under its modifier.

    Raises:
        QueryEngineError: if two handlers claim the same modifier
    """
    engine = QueryEngine()
    engine.register("test", MockSearchHandler())
    engine.register("wiki", WikipediaSearchHandler(WikipediaConfig.from_settings(settings)))
    return engine


async def run_query(engine: QueryEngine, text: str, modifier: Optional[str], timeout_ms: int) -> list:
    """Dispatch one query and collect what arrived before it returned."""
    engine.reset_channels()
    await engine.query(Query(text), modifier, timeout_ms)
    return engine.recv_any()


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="amoeba", description="Quick-search launcher")
    parser.add_argument("query", nargs="*", help="text to search for")
    parser.add_argument("-m", "--modifier", help="search with a single handler")
    parser.add_argument("-t", "--timeout-ms", type=int, help="how long to wait for results")
    parser.add_argument("--list", action="store_true", help="list available modifiers")
    args = parser.parse_args(argv)

    settings = load_settings()
    configure_logging(settings["launcher"]["log_level"])

    try:
        engine = build_engine(settings)
    except QueryEngineError as e:
        logger.error(str(e))
        return 1

    if args.list:
        for modifier in engine.modifiers():
            print(modifier)
        return 0

    modifier = args.modifier.lower() if args.modifier else None
    timeout_ms = args.timeout_ms or settings["launcher"]["query_timeout_ms"]

    results = asyncio.run(run_query(engine, " ".join(args.query), modifier, timeout_ms))
    for result in results:
        location = getattr(result, "url", None) or getattr(result, "location", "")
        print(f"{result.title} - {location}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
