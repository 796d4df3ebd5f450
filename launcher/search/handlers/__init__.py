"""
Search handlers - Pluggable query backends.

Each handler streams typed results for a query into the engine's channel.
"""

from .mock_search import MockSearchHandler
from .wikipedia import WikipediaConfig, WikipediaSearchHandler

__all__ = [
    "MockSearchHandler",
    "WikipediaConfig",
    "WikipediaSearchHandler",
]
