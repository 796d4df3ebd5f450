"""
Result model - Query value and the result kinds handlers can produce.

Results are frozen so a single instance can be pushed into the shared
channel without copying.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union


@dataclass(frozen=True)
class Query:
    """Raw search text as typed by the user."""
    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class SiteResult:
    """A web page result."""
    title: str
    url: str
    excerpt: Optional[str] = None

    @property
    def result_type(self) -> str:
        return "web"


@dataclass(frozen=True)
class FileResult:
    """A local file result."""
    title: str
    location: Path
    excerpt: Optional[str] = None

    @property
    def result_type(self) -> str:
        return "file"


SearchResult = Union[SiteResult, FileResult]
