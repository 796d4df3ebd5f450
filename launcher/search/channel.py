"""
Result Channel - Bounded, generation-stamped queue between handlers and the UI.

Every dispatch generation gets its own channel. When the engine resets,
the old channel is closed: anything still buffered is thrown away and
senders holding it drop further results without raising.
"""

import asyncio

from loguru import logger
from search.results import SearchResult

CHANNEL_CAPACITY = 100

# How often a sender blocked on a full channel re-checks for space
SEND_POLL_INTERVAL = 0.01


class ResultChannel:
    """Queue of results for a single dispatch generation."""

    def __init__(self, generation: int, capacity: int = CHANNEL_CAPACITY):
        self.generation = generation
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=capacity)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def sender(self) -> "ResultSender":
        return ResultSender(self)

    def drain(self) -> list[SearchResult]:
        """Return everything currently buffered without waiting."""
        results = []
        if self._closed:
            return results

        while True:
            try:
                results.append(self._queue.get_nowait())
            except asyncio.QueueEmpty:
                break
        return results

    def close(self) -> None:
        """Detach this channel. Buffered results are discarded."""
        self._closed = True
        while True:
            try:
                self._queue.get_nowait()
            except asyncio.QueueEmpty:
                break

    def _try_put(self, result: SearchResult) -> bool:
        try:
            self._queue.put_nowait(result)
            return True
        except asyncio.QueueFull:
            return False


class ResultSender:
    """Handle a handler uses to push results into one channel."""

    def __init__(self, channel: ResultChannel):
        self._channel = channel

    @property
    def generation(self) -> int:
        return self._channel.generation

    @property
    def closed(self) -> bool:
        return self._channel.closed

    async def send(self, result: SearchResult) -> bool:
        """
        Queue a result, waiting while the channel is full.

        Returns:
            True if the result was queued, False if the channel was
            detached before it could be.
        """
        while not self._channel.closed:
            if self._channel._try_put(result):
                return True
            await asyncio.sleep(SEND_POLL_INTERVAL)

        logger.debug(f"Dropping result for stale generation {self.generation}: {result.title}")
        return False
