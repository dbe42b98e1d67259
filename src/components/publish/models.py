"""
Publish component - Data models.

Dispatch options, payloads, results and endpoint configuration.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

from src.components.validation import CheckResult, ValidationIssue, ValidationVerdict
from src.domain.entities import PublishEnvironment, TargetStatus
from src.domain.state import PublishState
from src.rules.models import EditorialRules

ENVIRONMENTS: tuple[str, ...] = ("staging", "production")


class TransportError(Exception):
    """Raised by endpoint adapters when a dispatch does not reach a 2xx response."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body


# --- Configuration ---


@dataclass(frozen=True)
class PublishConfig:
    """Byline mapping and dispatch tuning."""

    author_display_names: Mapping[str, str] = field(default_factory=dict)
    site_origin: str = "https://www.geteducated.com"
    excerpt_length: int = 160
    bulk_delay_seconds: float = 0.5
    default_environment: PublishEnvironment = "staging"

    @classmethod
    def from_rules(cls, rules: EditorialRules) -> PublishConfig:
        return cls(
            author_display_names=dict(rules.authors.display_names),
            site_origin=rules.links.site_origin,
            excerpt_length=rules.publish.excerpt_length,
            bulk_delay_seconds=rules.publish.bulk_delay_seconds,
            default_environment=rules.publish.default_environment,
        )

    @classmethod
    def default(cls) -> PublishConfig:
        return cls.from_rules(EditorialRules())

    def display_name(self, author: str | None) -> str | None:
        if not author:
            return None
        return self.author_display_names.get(author, author)


@dataclass(frozen=True)
class PublishEndpoints:
    """Endpoint URL per environment. Production falls back to staging."""

    staging: str | None = None
    production: str | None = None

    def url_for(self, environment: str) -> str:
        if environment not in ENVIRONMENTS:
            raise ValueError(f"Unknown publish environment: {environment}")
        if environment == "production":
            url = self.production or self.staging
        else:
            url = self.staging
        if not url:
            raise ValueError(f"No publish endpoint configured for {environment}")
        return url


@dataclass(frozen=True)
class PublishOptions:
    """Per-call overrides. None means the configured default applies."""

    status: TargetStatus = "draft"
    environment: PublishEnvironment | None = None
    validate_first: bool = True
    require_min_quality_score: int | None = None
    block_high_risk: bool | None = None
    require_monetization: bool | None = None
    block_unknown_shortcodes: bool | None = None
    use_registry: bool = True
    update_record: bool = True


# --- Payload ---


@dataclass(frozen=True)
class PublishPayload:
    """Outbound projection of an article. Built fresh for every attempt."""

    article_id: str
    title: str
    content: str
    excerpt: str
    author: str | None
    author_display_name: str | None
    meta_title: str
    meta_description: str
    focus_keyword: str
    slug: str
    faqs: tuple[Mapping[str, str], ...]
    status: TargetStatus
    environment: PublishEnvironment
    published_at: str
    quality_score: int
    risk_level: str
    word_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "article_id": self.article_id,
            "title": self.title,
            "content": self.content,
            "excerpt": self.excerpt,
            "author": self.author,
            "author_display_name": self.author_display_name,
            "meta_title": self.meta_title,
            "meta_description": self.meta_description,
            "focus_keyword": self.focus_keyword,
            "slug": self.slug,
            "faqs": [dict(faq) for faq in self.faqs],
            "status": self.status,
            "environment": self.environment,
            "published_at": self.published_at,
            "quality_score": self.quality_score,
            "risk_level": self.risk_level,
            "word_count": self.word_count,
        }


# --- Results ---


@dataclass(frozen=True)
class PublishResult:
    success: bool
    article_id: UUID
    state: PublishState
    environment: str
    external_response: Mapping[str, Any] | None = None
    error: str | None = None
    blocking_issues: tuple[ValidationIssue, ...] = ()
    verdict: ValidationVerdict | None = None
    published_at: datetime | None = None

    @property
    def post_id(self) -> str | None:
        if not self.external_response:
            return None
        value = self.external_response.get("post_id") or self.external_response.get(
            "wordpress_post_id"
        )
        return str(value) if value is not None else None

    @property
    def published_url(self) -> str | None:
        if not self.external_response:
            return None
        return self.external_response.get("url") or self.external_response.get(
            "published_url"
        )


@dataclass(frozen=True)
class BulkDispatchResult:
    total: int
    successful: int
    failed: int
    results: tuple[PublishResult, ...]


@dataclass(frozen=True)
class PublishEligibility:
    eligible: bool
    risk_level: str
    quality_score: int
    blocking_issues: tuple[ValidationIssue, ...]
    warnings: tuple[ValidationIssue, ...]
    checks: Mapping[str, CheckResult]


@dataclass(frozen=True)
class AutoPublishDetail:
    type: str  # published, failed, skipped, error, info
    message: str | None = None
    article_id: UUID | None = None
    title: str | None = None
    reasons: tuple[str, ...] = ()


@dataclass(frozen=True)
class AutoPublishReport:
    articles_checked: int = 0
    articles_published: int = 0
    articles_failed: int = 0
    articles_skipped: int = 0
    details: tuple[AutoPublishDetail, ...] = ()


# --- Input / Output Models ---


@dataclass(frozen=True)
class PublishArticleInput:
    article_id: UUID
    options: PublishOptions = field(default_factory=PublishOptions)


@dataclass(frozen=True)
class RetryPublishInput:
    article_id: UUID
    options: PublishOptions = field(default_factory=PublishOptions)


@dataclass(frozen=True)
class BulkPublishInput:
    article_ids: tuple[UUID, ...]
    options: PublishOptions = field(default_factory=PublishOptions)
