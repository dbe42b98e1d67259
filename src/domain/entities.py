from datetime import UTC, datetime
from enum import Enum
from typing import Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

# --- Enums / Literals ---
ArticleStatus = Literal["draft", "ready_to_publish", "published"]
PublishEnvironment = Literal["staging", "production"]
TargetStatus = Literal["draft", "publish"]
ContentKind = Literal["guide", "ranking", "career", "how_to"]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class RiskLevel(str, Enum):
    """Editorial risk, ordered LOW < MEDIUM < HIGH < CRITICAL."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @property
    def rank(self) -> int:
        return _RISK_ORDER.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank >= other.rank


_RISK_ORDER = (RiskLevel.LOW, RiskLevel.MEDIUM, RiskLevel.HIGH, RiskLevel.CRITICAL)


def max_risk(*levels: RiskLevel | None) -> RiskLevel:
    present = [level for level in levels if level is not None]
    if not present:
        return RiskLevel.LOW
    return max(present, key=lambda level: level.rank)


# --- Articles ---

class FAQItem(BaseModel):
    question: str
    answer: str = ""


class Article(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    title: str
    content: str = ""
    author: str | None = None  # contributor name, matched against approved authors

    excerpt: str | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    focus_keyword: str | None = None
    slug: str | None = None

    faqs: list[FAQItem] = Field(default_factory=list)
    word_count: int | None = None

    # Assigned upstream by the scoring pipeline
    quality_score: int = Field(default=0, ge=0, le=100)
    risk_level: RiskLevel | None = None
    risk_flags: list[str] = Field(default_factory=list)

    status: ArticleStatus = "draft"
    wordpress_post_id: str | None = None
    published_url: str | None = None
    published_at: datetime | None = None

    # Auto-publish window; a human review takes the article out of it
    autopublish_deadline: datetime | None = None
    human_reviewed: bool = False
    reviewed_at: datetime | None = None

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


# --- Site catalog (internal cross-linking) ---

class CatalogEntry(BaseModel):
    url: str
    slug: str
    title: str
    meta_description: str | None = None
    excerpt: str = ""
    content_html: str = ""
    content_text: str = ""
    word_count: int = 0
    content_type: ContentKind = "guide"
    degree_level: str | None = None
    subject_area: str | None = None
    topics: list[str] | None = None
    primary_topic: str | None = None
    author_name: str | None = None
    published_at: datetime = Field(default_factory=_utcnow)
    scraped_at: datetime = Field(default_factory=_utcnow)
    needs_rewrite: bool = False
    times_linked_to: int = 0


# --- Monetization registry ---

class MonetizationCategory(BaseModel):
    category_id: int
    concentration_id: int
    category: str
    concentration: str
    is_active: bool = True


class MonetizationLevel(BaseModel):
    level_code: int
    level_name: str
