"""
Search package - Query dispatch and handler framework.

Provides a pluggable search system where a query is fanned out to
registered handlers (mock, Wikipedia, ...) and their results are
streamed back through a generation-scoped channel.
"""

from .engine import QueryEngine, SearchHandler
from .errors import AlreadyRegisteredError, QueryEngineError
from .results import FileResult, Query, SearchResult, SiteResult

__all__ = [
    "QueryEngine",
    "SearchHandler",
    "AlreadyRegisteredError",
    "QueryEngineError",
    "Query",
    "SearchResult",
    "SiteResult",
    "FileResult",
]
