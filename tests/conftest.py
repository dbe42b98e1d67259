from collections.abc import Callable
from typing import Any

import pytest

from src.adapters.sqlite.migrator import SQLiteMigrator
from src.domain.entities import Article, FAQItem

FILLER = " ".join(["word"] * 1600)
GOOD_BODY = (
    "<h2>Overview</h2><p>" + FILLER + "</p>"
    '<h2>Programs</h2><p><a href="/online-degrees/">degrees</a> '
    '<a href="/online-schools/">schools</a> '
    '<a href="https://www.geteducated.com/rankings/">rankings</a></p>'
    '<h2>Salary</h2><p><a href="https://www.bls.gov/ooh/">BLS</a></p>'
)
MONETIZATION = '[degree_table category="5" concentration="12"]'


@pytest.fixture
def make_article() -> Callable[..., Article]:
    """Factory for an article that passes every check unless overridden."""

    def _make(**overrides: Any) -> Article:
        data: dict[str, Any] = {
            "title": "Online MBA Programs",
            "content": GOOD_BODY + MONETIZATION,
            "author": "Kayleigh Gilbert",
            "quality_score": 90,
            "faqs": [FAQItem(question=f"Q{i}?", answer="A") for i in range(3)],
        }
        data.update(overrides)
        return Article(**data)

    return _make


@pytest.fixture
def db_path(tmp_path) -> str:
    path = str(tmp_path / "editorial_gate.db")
    SQLiteMigrator(path, "migrations").run_migrations()
    return path
