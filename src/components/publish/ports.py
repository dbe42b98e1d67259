"""Publish component port definitions - protocols for dependencies."""

from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from src.domain.entities import Article, ArticleStatus, CatalogEntry


class ArticleRepoPort(Protocol):
    """Protocol for article record store operations."""

    def get_by_id(self, article_id: UUID) -> Article | None:
        """Retrieve an article by ID."""
        ...

    def save(self, article: Article) -> Article:
        """Insert or update an article."""
        ...

    def list_by_status(self, status: ArticleStatus) -> list[Article]:
        """List articles with the given status."""
        ...


class CatalogRepoPort(Protocol):
    """Protocol for the site catalog used for internal cross-linking."""

    def upsert(self, entry: CatalogEntry) -> CatalogEntry:
        """Insert or replace the entry keyed by its URL."""
        ...

    def get_by_url(self, url: str) -> CatalogEntry | None:
        """Retrieve an entry by URL."""
        ...


class PublishEndpointPort(Protocol):
    """Protocol for the remote publishing endpoint."""

    def post(self, url: str, payload: Mapping[str, Any]) -> dict[str, Any]:
        """
        Send one payload and return the decoded response body.

        Raises TransportError on network failure or a non-2xx response.
        """
        ...


class ClockPort(Protocol):
    """Protocol for time operations."""

    def now(self) -> datetime:
        """Return current UTC time."""
        ...


class SleeperPort(Protocol):
    """Protocol for pausing between dispatches."""

    def sleep(self, seconds: float) -> None: ...


class DetachedTaskRunner(Protocol):
    """Protocol for fire-and-forget work that must not fail the caller."""

    def submit(self, name: str, fn: Callable[[], Any]) -> None:
        """Run fn outside the caller's flow, logging any failure."""
        ...
