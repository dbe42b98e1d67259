"""In-memory stores for tests and dry runs."""

from __future__ import annotations

from uuid import UUID

from src.domain.entities import (
    Article,
    ArticleStatus,
    CatalogEntry,
    MonetizationCategory,
    MonetizationLevel,
)


class InMemoryArticleRepo:
    def __init__(self, articles: list[Article] | None = None) -> None:
        self._items: dict[UUID, Article] = {a.id: a for a in articles or []}

    def get_by_id(self, article_id: UUID) -> Article | None:
        return self._items.get(article_id)

    def save(self, article: Article) -> Article:
        self._items[article.id] = article
        return article

    def list_by_status(self, status: ArticleStatus) -> list[Article]:
        return [a for a in self._items.values() if a.status == status]


class InMemoryCatalogRepo:
    def __init__(self) -> None:
        self._entries: dict[str, CatalogEntry] = {}

    def upsert(self, entry: CatalogEntry) -> CatalogEntry:
        self._entries[entry.url] = entry
        return entry

    def get_by_url(self, url: str) -> CatalogEntry | None:
        return self._entries.get(url)


class InMemoryIdentifierRegistry:
    def __init__(
        self,
        categories: list[MonetizationCategory] | None = None,
        levels: list[MonetizationLevel] | None = None,
    ) -> None:
        self._categories = {
            (c.category_id, c.concentration_id): c for c in categories or [] if c.is_active
        }
        self._levels = {level.level_code: level for level in levels or []}

    def get_category(
        self, category_id: int, concentration_id: int
    ) -> MonetizationCategory | None:
        return self._categories.get((category_id, concentration_id))

    def get_level(self, level_code: int) -> MonetizationLevel | None:
        return self._levels.get(level_code)
