"""
Tests for error handling across the engine and handlers.

Verifies graceful degradation when things go wrong:
- Handler raising unexpectedly
- Network down for every attempt
- Registration conflicts
"""

import httpx
import pytest
from loguru import logger

from conftest import StaticHandler
from search.engine import QueryEngine
from search.errors import AlreadyRegisteredError
from search.handlers.wikipedia import WikipediaSearchHandler
from search.results import Query


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during a test."""
    messages = []
    sink_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(sink_id)


class ExplodingHandler(StaticHandler):
    async def search(self, query, sender):
        raise ValueError("bad payload")


@pytest.mark.asyncio
class TestHandlerFailures:

    async def test_handler_exception_is_logged_not_raised(self, log_messages):
        engine = QueryEngine()
        engine.register("boom", ExplodingHandler("boom", []))

        await engine.query(Query("q"), None, timeout_ms=1000)

        assert engine.recv_any() == []
        assert any("Handler 'boom' failed" in m for m in log_messages)

    async def test_network_down_is_swallowed(self, wiki_config, recording_sleep, log_messages):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        engine = QueryEngine()
        engine.register("wiki", WikipediaSearchHandler(
            wiki_config, transport=httpx.MockTransport(refuse), sleep=recording_sleep,
        ))

        await engine.query(Query("rust"), None, timeout_ms=1000)

        assert engine.recv_any() == []
        assert sum("Retrying" in m for m in log_messages) == 3
        assert any("aborting search" in m for m in log_messages)
        assert not any("failed for query" in m for m in log_messages)

    async def test_timeout_is_logged(self, log_messages):
        engine = QueryEngine()
        engine.register("slow", StaticHandler("slow", ["late"], delay=0.5))

        await engine.query(Query("q"), None, timeout_ms=20)

        assert any("timed out after 20ms" in m for m in log_messages)


class TestRegistrationConflicts:

    def test_error_message_names_modifier(self):
        engine = QueryEngine()
        engine.register("wiki", StaticHandler("a", []))
        with pytest.raises(AlreadyRegisteredError, match="already registered: wiki"):
            engine.register("wiki", StaticHandler("b", []))

    def test_registry_unchanged_after_conflict(self):
        engine = QueryEngine()
        engine.register("wiki", StaticHandler("a", []))
        with pytest.raises(AlreadyRegisteredError):
            engine.register("wiki", StaticHandler("b", []))
        assert list(engine.modifiers()) == ["wiki"]
