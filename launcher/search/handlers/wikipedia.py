"""
Wikipedia Search Handler - Article search via the Wikipedia REST API.

Queries:
  GET {base_url}/w/rest.php/v1/search/page?q=<query>&limit=5

Retry policy (max_attempts, default 3):
  429       → back off 1s, retry
  200       → wait 500ms (politeness throttle), accept
  otherwise → log, retry

When every attempt fails the search ends quietly with no results. Each
article is pushed to the sender as soon as it is parsed, so a caller that
stops waiting early still gets whatever was ready.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx
from loguru import logger
from search.channel import ResultSender
from search.engine import SearchHandler
from search.results import Query, SiteResult
from utils.helpers import APP_VERSION, build_user_agent

SEARCH_PATH = "/w/rest.php/v1/search/page"


@dataclass(frozen=True)
class WikipediaConfig:
    """Connection and retry settings, fixed at startup."""
    user_agent: str
    base_url: str = "https://en.wikipedia.org"
    result_limit: int = 5
    max_attempts: int = 3
    rate_limit_backoff_ms: int = 1000
    throttle_ms: int = 500
    request_timeout_ms: int = 5000

    @classmethod
    def from_settings(cls, settings: Dict[str, Any]) -> "WikipediaConfig":
        """Build from the merged settings dict returned by load_settings()."""
        app = settings["app"]
        wiki = settings["wikipedia"]
        return cls(
            user_agent=build_user_agent(app["name"], APP_VERSION, app["author"]),
            base_url=wiki["base_url"].rstrip("/"),
            result_limit=wiki["result_limit"],
            max_attempts=wiki["max_attempts"],
            rate_limit_backoff_ms=wiki["rate_limit_backoff_ms"],
            throttle_ms=wiki["throttle_ms"],
            request_timeout_ms=wiki["request_timeout_ms"],
        )

    @property
    def search_url(self) -> str:
        return f"{self.base_url}{SEARCH_PATH}"

    def article_url(self, key: str) -> str:
        return f"{self.base_url}/wiki/{key}"


class WikipediaSearchHandler(SearchHandler):
    """Stream Wikipedia article matches for a query."""

    name = "wikipedia"

    def __init__(
        self,
        config: WikipediaConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.config = config
        self._transport = transport
        self._sleep = sleep

    async def search(self, query: Query, sender: ResultSender) -> None:
        response = await self._fetch(query, sender)
        if response is None:
            return

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"Could not parse Wikipedia search results: {e}")
            return

        pages = payload.get("pages") if isinstance(payload, dict) else None
        if not isinstance(pages, list):
            logger.error("Wikipedia search response has no 'pages' list")
            return

        for page in pages:
            result = self._page_to_result(page)
            if result is not None:
                await sender.send(result)

    async def _fetch(self, query: Query, sender: ResultSender) -> Optional[httpx.Response]:
        """Run the retry loop. Returns the accepted response, or None."""
        params = {"q": query.text, "limit": str(self.config.result_limit)}
        headers = {"User-Agent": self.config.user_agent}

        async with httpx.AsyncClient(
            headers=headers,
            timeout=self.config.request_timeout_ms / 1000,
            transport=self._transport,
        ) as client:
            logger.info(f"Querying Wikipedia for '{query}' at {self.config.search_url}")

            for attempt in range(1, self.config.max_attempts + 1):
                if sender.closed:
                    logger.debug(f"Wikipedia search for '{query}' detached, not retrying")
                    return None

                try:
                    response = await client.get(self.config.search_url, params=params)
                except httpx.HTTPError as e:
                    logger.warning(
                        f"Failed to fetch Wikipedia search results: {e!r} "
                        f"(attempt {attempt}/{self.config.max_attempts}). Retrying..."
                    )
                    continue

                if response.status_code == httpx.codes.TOO_MANY_REQUESTS:
                    logger.warning(
                        f"Rate limited by Wikipedia "
                        f"(attempt {attempt}/{self.config.max_attempts}), backing off"
                    )
                    await self._sleep(self.config.rate_limit_backoff_ms / 1000)
                elif response.status_code == httpx.codes.OK:
                    await self._sleep(self.config.throttle_ms / 1000)
                    return response
                else:
                    logger.warning(
                        f"Failed to fetch Wikipedia search results: HTTP {response.status_code} "
                        f"(attempt {attempt}/{self.config.max_attempts}). Retrying..."
                    )

        logger.info(f"Failed to fetch Wikipedia search results for '{query}', aborting search")
        return None

    def _page_to_result(self, page: Any) -> Optional[SiteResult]:
        """Convert one page record, or None if it should be skipped."""
        if not isinstance(page, dict):
            logger.warning(f"Skipping malformed Wikipedia page record: {page!r}")
            return None

        key = page.get("key")
        if not isinstance(key, str):
            logger.warning(f"Skipping Wikipedia page without a key: {page.get('title')!r}")
            return None

        try:
            url = httpx.URL(self.config.article_url(key))
        except httpx.InvalidURL:
            logger.warning(f"Failed to parse Wikipedia search result URL with key {key!r}, skipping")
            return None

        excerpt = page.get("excerpt")
        return SiteResult(
            title=str(page.get("title") or key),
            url=str(url),
            excerpt=excerpt if isinstance(excerpt, str) else None,
        )
