"""Errors raised by the query engine."""


class QueryEngineError(Exception):
    """Base class for query engine failures."""


class AlreadyRegisteredError(QueryEngineError):
    """A handler is already registered under this modifier."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Query engine already registered: {name}")
