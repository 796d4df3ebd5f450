"""
Query Engine - Dispatches search queries to registered handlers.

Handlers are registered under a modifier name. A query either targets the
single handler named by its modifier or fans out to every handler at once.
Results stream into a channel that the UI drains once per frame.

Cancellation works by detachment: reset_channels() starts a new dispatch
generation, and whatever the old generation's handlers still produce is
dropped on the floor.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Iterator, Optional

from loguru import logger
from search.channel import CHANNEL_CAPACITY, ResultChannel, ResultSender
from search.errors import AlreadyRegisteredError
from search.results import Query, SearchResult

DEFAULT_TIMEOUT_MS = 2000


class SearchHandler(ABC):
    """Base class for all search handlers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Handler identifier."""
        ...

    @abstractmethod
    async def search(self, query: Query, sender: ResultSender) -> None:
        """Push each result into sender as soon as it is found."""
        ...


class QueryEngine:
    """Registry of handlers plus the current dispatch generation."""

    def __init__(self, capacity: int = CHANNEL_CAPACITY):
        self._registry: dict[str, SearchHandler] = {}
        self._capacity = capacity
        self._generation = 0
        self._channel = ResultChannel(self._generation, capacity)
        self._tasks: set[asyncio.Task] = set()

    def register(self, name: str, handler: SearchHandler) -> None:
        """
        Register a handler under a modifier name.

        Raises:
            AlreadyRegisteredError: if the name is taken. The existing
                registration is left untouched.
        """
        if name in self._registry:
            raise AlreadyRegisteredError(name)
        self._registry[name] = handler
        logger.debug(f"Registered handler '{handler.name}' as '{name}'")

    def in_registry(self, name: str) -> bool:
        return name in self._registry

    def modifiers(self) -> Iterator[str]:
        """Registered modifier names in sorted order."""
        for name in sorted(self._registry):
            yield name

    def matching_modifiers(self, prefix: str) -> Iterator[str]:
        """Modifiers the picker should offer for partially typed input."""
        return (name for name in self.modifiers() if name.startswith(prefix))

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def pending(self) -> int:
        """Handler tasks that have not finished yet, from any generation."""
        return len(self._tasks)

    def reset_channels(self) -> None:
        """Detach from all in-flight output and start a fresh generation."""
        self._channel.close()
        self._generation += 1
        self._channel = ResultChannel(self._generation, self._capacity)
        logger.debug(f"Reset result channel, now at generation {self._generation}")

    def recv_any(self) -> list[SearchResult]:
        """Collect whatever results have arrived so far, without waiting."""
        return self._channel.drain()

    async def query(
        self,
        query: Query,
        modifier: Optional[str] = None,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
    ) -> None:
        """
        Dispatch a query and wait for the handlers, at most timeout_ms.

        Args:
            query: The search query
            modifier: Restricts the query to one handler. An unregistered
                modifier targets no handler at all.
            timeout_ms: How long to wait for the handlers. Handlers still
                running when it elapses are left to finish on their own.
        """
        handlers = self._select(modifier)
        if not handlers:
            logger.info(f"No handler for modifier '{modifier}', nothing to dispatch")
            return

        logger.info(
            f"Dispatching '{query}' to {', '.join(h.name for h in handlers)} "
            f"(generation {self._generation})"
        )

        tasks = []
        for handler in handlers:
            task = asyncio.create_task(self._run(handler, query, self._channel.sender()))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            tasks.append(task)

        _done, still_running = await asyncio.wait(tasks, timeout=timeout_ms / 1000)
        if still_running:
            logger.info(
                f"Query '{query}' timed out after {timeout_ms}ms, "
                f"{len(still_running)} handler(s) still running"
            )

    def _select(self, modifier: Optional[str]) -> list[SearchHandler]:
        if modifier is None:
            return [self._registry[name] for name in self.modifiers()]
        handler = self._registry.get(modifier)
        return [handler] if handler is not None else []

    async def _run(self, handler: SearchHandler, query: Query, sender: ResultSender) -> None:
        try:
            await handler.search(query, sender)
        except Exception:
            logger.exception(f"Handler '{handler.name}' failed for query '{query}'")
