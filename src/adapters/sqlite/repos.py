import json
import sqlite3
from datetime import datetime
from typing import Any
from uuid import UUID

from src.domain.entities import (
    Article,
    ArticleStatus,
    CatalogEntry,
    FAQItem,
    MonetizationCategory,
    MonetizationLevel,
    RiskLevel,
)


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


def parse_dt(s: str | None) -> datetime | None:
    return datetime.fromisoformat(s) if s else None


class _SQLiteRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn


class SQLiteArticleRepo(_SQLiteRepo):
    def save(self, article: Article) -> Article:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO articles (
                    id, title, content, author, excerpt, meta_title,
                    meta_description, focus_keyword, slug, faqs_json,
                    word_count, quality_score, risk_level, risk_flags_json,
                    status, wordpress_post_id, published_url, published_at,
                    autopublish_deadline, human_reviewed, reviewed_at,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    title=excluded.title,
                    content=excluded.content,
                    author=excluded.author,
                    excerpt=excluded.excerpt,
                    meta_title=excluded.meta_title,
                    meta_description=excluded.meta_description,
                    focus_keyword=excluded.focus_keyword,
                    slug=excluded.slug,
                    faqs_json=excluded.faqs_json,
                    word_count=excluded.word_count,
                    quality_score=excluded.quality_score,
                    risk_level=excluded.risk_level,
                    risk_flags_json=excluded.risk_flags_json,
                    status=excluded.status,
                    wordpress_post_id=excluded.wordpress_post_id,
                    published_url=excluded.published_url,
                    published_at=excluded.published_at,
                    autopublish_deadline=excluded.autopublish_deadline,
                    human_reviewed=excluded.human_reviewed,
                    reviewed_at=excluded.reviewed_at,
                    updated_at=excluded.updated_at
            """,
                (
                    str(article.id),
                    article.title,
                    article.content,
                    article.author,
                    article.excerpt,
                    article.meta_title,
                    article.meta_description,
                    article.focus_keyword,
                    article.slug,
                    json.dumps([faq.model_dump() for faq in article.faqs]),
                    article.word_count,
                    article.quality_score,
                    article.risk_level.value if article.risk_level else None,
                    json.dumps(article.risk_flags),
                    article.status,
                    article.wordpress_post_id,
                    article.published_url,
                    article.published_at.isoformat() if article.published_at else None,
                    (
                        article.autopublish_deadline.isoformat()
                        if article.autopublish_deadline
                        else None
                    ),
                    int(article.human_reviewed),
                    article.reviewed_at.isoformat() if article.reviewed_at else None,
                    article.created_at.isoformat(),
                    article.updated_at.isoformat(),
                ),
            )
            conn.commit()
            return article
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get_by_id(self, article_id: UUID) -> Article | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM articles WHERE id = ?", (str(article_id),)
            ).fetchone()
            return self._row_to_article(row) if row else None
        finally:
            conn.close()

    def list_by_status(self, status: ArticleStatus) -> list[Article]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM articles WHERE status = ? ORDER BY created_at ASC", (status,)
            ).fetchall()
            return [self._row_to_article(row) for row in rows]
        finally:
            conn.close()

    def _row_to_article(self, row: dict[str, Any]) -> Article:
        return Article(
            id=UUID(row["id"]),
            title=row["title"],
            content=row["content"],
            author=row["author"],
            excerpt=row["excerpt"],
            meta_title=row["meta_title"],
            meta_description=row["meta_description"],
            focus_keyword=row["focus_keyword"],
            slug=row["slug"],
            faqs=[FAQItem(**faq) for faq in json.loads(row["faqs_json"])],
            word_count=row["word_count"],
            quality_score=row["quality_score"],
            risk_level=RiskLevel(row["risk_level"]) if row["risk_level"] else None,
            risk_flags=json.loads(row["risk_flags_json"]),
            status=row["status"],
            wordpress_post_id=row["wordpress_post_id"],
            published_url=row["published_url"],
            published_at=parse_dt(row["published_at"]),
            autopublish_deadline=parse_dt(row["autopublish_deadline"]),
            human_reviewed=bool(row["human_reviewed"]),
            reviewed_at=parse_dt(row["reviewed_at"]),
            created_at=parse_dt(row["created_at"]) or datetime.min,
            updated_at=parse_dt(row["updated_at"]) or datetime.min,
        )


class SQLiteCatalogRepo(_SQLiteRepo):
    def upsert(self, entry: CatalogEntry) -> CatalogEntry:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO site_catalog (
                    url, slug, title, meta_description, excerpt, content_html,
                    content_text, word_count, content_type, degree_level,
                    subject_area, topics_json, primary_topic, author_name,
                    published_at, scraped_at, needs_rewrite, times_linked_to
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(url) DO UPDATE SET
                    slug=excluded.slug,
                    title=excluded.title,
                    meta_description=excluded.meta_description,
                    excerpt=excluded.excerpt,
                    content_html=excluded.content_html,
                    content_text=excluded.content_text,
                    word_count=excluded.word_count,
                    content_type=excluded.content_type,
                    degree_level=excluded.degree_level,
                    subject_area=excluded.subject_area,
                    topics_json=excluded.topics_json,
                    primary_topic=excluded.primary_topic,
                    author_name=excluded.author_name,
                    published_at=excluded.published_at,
                    scraped_at=excluded.scraped_at,
                    needs_rewrite=excluded.needs_rewrite,
                    times_linked_to=excluded.times_linked_to
            """,
                (
                    entry.url,
                    entry.slug,
                    entry.title,
                    entry.meta_description,
                    entry.excerpt,
                    entry.content_html,
                    entry.content_text,
                    entry.word_count,
                    entry.content_type,
                    entry.degree_level,
                    entry.subject_area,
                    json.dumps(entry.topics) if entry.topics is not None else None,
                    entry.primary_topic,
                    entry.author_name,
                    entry.published_at.isoformat(),
                    entry.scraped_at.isoformat(),
                    1 if entry.needs_rewrite else 0,
                    entry.times_linked_to,
                ),
            )
            conn.commit()
            return entry
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get_by_url(self, url: str) -> CatalogEntry | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT * FROM site_catalog WHERE url = ?", (url,)).fetchone()
            if not row:
                return None
            return CatalogEntry(
                url=row["url"],
                slug=row["slug"],
                title=row["title"],
                meta_description=row["meta_description"],
                excerpt=row["excerpt"],
                content_html=row["content_html"],
                content_text=row["content_text"],
                word_count=row["word_count"],
                content_type=row["content_type"],
                degree_level=row["degree_level"],
                subject_area=row["subject_area"],
                topics=json.loads(row["topics_json"]) if row["topics_json"] else None,
                primary_topic=row["primary_topic"],
                author_name=row["author_name"],
                published_at=parse_dt(row["published_at"]) or datetime.min,
                scraped_at=parse_dt(row["scraped_at"]) or datetime.min,
                needs_rewrite=bool(row["needs_rewrite"]),
                times_linked_to=row["times_linked_to"],
            )
        finally:
            conn.close()


class SQLiteIdentifierRegistry(_SQLiteRepo):
    """Monetization category and degree level lookups."""

    def get_category(
        self, category_id: int, concentration_id: int
    ) -> MonetizationCategory | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                """
                SELECT * FROM monetization_categories
                WHERE category_id = ? AND concentration_id = ? AND is_active = 1
                """,
                (category_id, concentration_id),
            ).fetchone()
            if not row:
                return None
            return MonetizationCategory(
                category_id=row["category_id"],
                concentration_id=row["concentration_id"],
                category=row["category"],
                concentration=row["concentration"],
                is_active=bool(row["is_active"]),
            )
        finally:
            conn.close()

    def get_level(self, level_code: int) -> MonetizationLevel | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM monetization_levels WHERE level_code = ?", (level_code,)
            ).fetchone()
            if not row:
                return None
            return MonetizationLevel(level_code=row["level_code"], level_name=row["level_name"])
        finally:
            conn.close()

    def add_category(self, category: MonetizationCategory) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT OR REPLACE INTO monetization_categories
                (category_id, concentration_id, category, concentration, is_active)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    category.category_id,
                    category.concentration_id,
                    category.category,
                    category.concentration,
                    1 if category.is_active else 0,
                ),
            )
            conn.commit()
        finally:
            conn.close()

    def add_level(self, level: MonetizationLevel) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                "INSERT OR REPLACE INTO monetization_levels (level_code, level_name) VALUES (?, ?)",
                (level.level_code, level.level_name),
            )
            conn.commit()
        finally:
            conn.close()
