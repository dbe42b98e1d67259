from datetime import UTC, datetime
from uuid import uuid4

import pytest

from src.adapters.sqlite.repos import (
    SQLiteArticleRepo,
    SQLiteCatalogRepo,
    SQLiteIdentifierRegistry,
)
from src.domain.entities import (
    CatalogEntry,
    FAQItem,
    MonetizationCategory,
    MonetizationLevel,
    RiskLevel,
)


@pytest.fixture
def article_repo(db_path):
    return SQLiteArticleRepo(db_path)


@pytest.fixture
def catalog_repo(db_path):
    return SQLiteCatalogRepo(db_path)


@pytest.fixture
def registry(db_path):
    return SQLiteIdentifierRegistry(db_path)


class TestArticleRepo:
    def test_round_trip(self, article_repo, make_article):
        article = make_article(
            faqs=[FAQItem(question="Is it accredited?", answer="Yes")],
            risk_level=RiskLevel.HIGH,
            risk_flags=["missing_bls_citation"],
            word_count=1700,
        )
        article_repo.save(article)

        loaded = article_repo.get_by_id(article.id)

        assert loaded is not None
        assert loaded.title == article.title
        assert loaded.content == article.content
        assert loaded.faqs == article.faqs
        assert loaded.risk_level == RiskLevel.HIGH
        assert loaded.risk_flags == ["missing_bls_citation"]
        assert loaded.word_count == 1700
        assert loaded.created_at == article.created_at

    def test_missing(self, article_repo):
        assert article_repo.get_by_id(uuid4()) is None

    def test_update_in_place(self, article_repo, make_article):
        article = article_repo.save(make_article())
        published_at = datetime(2024, 6, 15, 12, 0, tzinfo=UTC)
        article_repo.save(
            article.model_copy(
                update={
                    "status": "published",
                    "published_at": published_at,
                    "wordpress_post_id": "77",
                    "published_url": "https://www.geteducated.com/x/",
                }
            )
        )

        loaded = article_repo.get_by_id(article.id)
        assert loaded.status == "published"
        assert loaded.published_at == published_at
        assert loaded.wordpress_post_id == "77"

    def test_list_by_status(self, article_repo, make_article):
        draft = article_repo.save(make_article())
        article_repo.save(make_article(status="published"))

        drafts = article_repo.list_by_status("draft")
        assert [a.id for a in drafts] == [draft.id]

    def test_auto_publish_fields_round_trip(self, article_repo, make_article):
        deadline = datetime(2024, 6, 20, 12, 0, tzinfo=UTC)
        reviewed_at = datetime(2024, 6, 16, 9, 30, tzinfo=UTC)
        article = article_repo.save(
            make_article(
                status="ready_to_publish",
                autopublish_deadline=deadline,
                human_reviewed=True,
                reviewed_at=reviewed_at,
            )
        )
        untouched = article_repo.save(make_article(status="ready_to_publish"))

        ready = {a.id: a for a in article_repo.list_by_status("ready_to_publish")}

        assert ready[article.id].autopublish_deadline == deadline
        assert ready[article.id].human_reviewed is True
        assert ready[article.id].reviewed_at == reviewed_at
        assert ready[untouched.id].autopublish_deadline is None
        assert ready[untouched.id].human_reviewed is False


class TestCatalogRepo:
    def _entry(self, **overrides) -> CatalogEntry:
        data = {
            "url": "https://www.geteducated.com/online-mba/",
            "slug": "online-mba",
            "title": "Online MBA",
            "topics": ["online mba", "masters"],
            "published_at": datetime(2024, 6, 15, tzinfo=UTC),
            "scraped_at": datetime(2024, 6, 15, tzinfo=UTC),
        }
        data.update(overrides)
        return CatalogEntry(**data)

    def test_upsert_keyed_by_url(self, catalog_repo):
        catalog_repo.upsert(self._entry())
        catalog_repo.upsert(self._entry(title="Online MBA (updated)", word_count=1800))

        loaded = catalog_repo.get_by_url("https://www.geteducated.com/online-mba/")
        assert loaded.title == "Online MBA (updated)"
        assert loaded.word_count == 1800
        assert loaded.topics == ["online mba", "masters"]

    def test_missing(self, catalog_repo):
        assert catalog_repo.get_by_url("https://nowhere.test/") is None

    def test_null_topics(self, catalog_repo):
        catalog_repo.upsert(self._entry(topics=None))
        assert catalog_repo.get_by_url(self._entry().url).topics is None


class TestIdentifierRegistry:
    def test_category_lookup(self, registry):
        registry.add_category(
            MonetizationCategory(
                category_id=5, concentration_id=12, category="Business", concentration="MBA"
            )
        )

        found = registry.get_category(5, 12)
        assert found is not None
        assert found.concentration == "MBA"
        assert registry.get_category(5, 13) is None

    def test_inactive_category_not_found(self, registry):
        registry.add_category(
            MonetizationCategory(
                category_id=1, concentration_id=1, category="A", concentration="B", is_active=False
            )
        )
        assert registry.get_category(1, 1) is None

    def test_level_lookup(self, registry):
        registry.add_level(MonetizationLevel(level_code=2, level_name="Master's"))
        assert registry.get_level(2).level_name == "Master's"
        assert registry.get_level(9) is None
