"""
Shared test fixtures for the Amoeba launcher test suite.

Provides a temporary settings file, canned Wikipedia payloads and a few
tiny handlers. HTTP never leaves the process: Wikipedia responses are
served by httpx.MockTransport.
"""

import asyncio

import pytest
import toml

from search.engine import SearchHandler
from search.handlers.wikipedia import WikipediaConfig
from search.results import SiteResult


def make_page(key, title=None, excerpt=None):
    """Build one Wikipedia page record as the REST API returns it."""
    return {
        "id": abs(hash(key)) % 100000,
        "key": key,
        "title": title or key.replace("_", " "),
        "excerpt": excerpt or f"Article about {key}",
        "matched_title": None,
        "description": None,
        "thumbnail": None,
    }


class RecordingSleep:
    """Stand-in for asyncio.sleep that records requested delays."""

    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)
        await asyncio.sleep(0)


class StaticHandler(SearchHandler):
    """Handler that sends a fixed list of titles, optionally after a delay."""

    def __init__(self, name, titles, delay=0.0):
        self._name = name
        self.titles = titles
        self.delay = delay
        self.calls = 0

    @property
    def name(self):
        return self._name

    async def search(self, query, sender):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        for title in self.titles:
            await sender.send(SiteResult(title=f"{title}: {query.text}", url=f"https://example.com/{title}"))


@pytest.fixture
def wiki_pages():
    """Five well-formed page records."""
    return [
        make_page("Rust_(programming_language)", "Rust (programming language)"),
        make_page("Rust"),
        make_page("Rust_Belt", "Rust Belt"),
        make_page("Rust_(video_game)", "Rust (video game)"),
        make_page("Corrosion"),
    ]


@pytest.fixture
def wiki_config():
    return WikipediaConfig(user_agent="amoeba-tests/0.0 (tests)")


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def tmp_settings(tmp_path):
    """Create a real settings TOML file overriding a few keys."""
    settings_path = tmp_path / "settings.toml"
    data = {
        "launcher": {"query_timeout_ms": 3000},
        "app": {"author": "Test Author"},
        "wikipedia": {"max_attempts": 2, "base_url": "https://fr.wikipedia.org/"},
    }
    settings_path.write_text(toml.dumps(data))
    return settings_path
