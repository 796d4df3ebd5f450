"""
Mock Search Handler - Deterministic stand-in for a real backend.

Sleeps for a fixed delay, then yields one canned result that echoes the
query. Useful for exercising dispatch, timeouts and resets without a
network.
"""

import asyncio

from loguru import logger
from search.channel import ResultSender
from search.engine import SearchHandler
from search.results import Query, SiteResult

MOCK_DELAY_MS = 400


class MockSearchHandler(SearchHandler):
    """Return a single synthetic result after a short delay."""

    name = "mock_search"

    def __init__(self, delay_ms: int = MOCK_DELAY_MS):
        self.delay_ms = delay_ms

    async def search(self, query: Query, sender: ResultSender) -> None:
        logger.debug(f"MockSearchHandler.search: {query.text!r}")
        await asyncio.sleep(self.delay_ms / 1000)
        await sender.send(SiteResult(
            title=f"Test search result ({query.text})",
            url="https://www.google.com",
            excerpt="MockSearchHandler.search",
        ))
        logger.debug("MockSearchHandler.search done")
