"""
Validation component - Data models.

Verdicts, issues, per-check results and the validation policy.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Literal

from src.domain.entities import Article, RiskLevel
from src.rules.models import AutoPublishRules, EditorialRules, ValidationDefaults

# Check names, in the order they run and are reported
CHECK_NAMES = ("author", "links", "risk", "quality", "content", "shortcodes")

# Blocking kinds
NO_AUTHOR = "no_author"
UNAUTHORIZED_AUTHOR = "unauthorized_author"
BLOCKED_LINK = "blocked_link"
CRITICAL_RISK = "critical_risk"
HIGH_RISK = "high_risk"
UNKNOWN_SHORTCODE = "unknown_shortcode"
INVALID_SHORTCODE = "invalid_shortcode"
INVALID_REFERENCE = "invalid_reference"

# Warning kinds
LINK_WARNING = "link_warning"
LINK_ERROR = "link_error"
LOW_QUALITY_SCORE = "low_quality_score"
CONTENT_ISSUE = "content_issue"
MISSING_SHORTCODE = "missing_shortcode"
SHORTCODE_UNVERIFIED = "shortcode_unverified"


# --- Configuration ---


@dataclass(frozen=True)
class ValidationPolicy:
    """Caller-selected switches for one validation run."""

    min_quality_score: int = 70
    block_high_risk: bool = True
    enforce_approved_authors: bool = True
    check_links: bool = True
    check_shortcodes: bool = True
    require_monetization: bool = True
    block_unknown_shortcodes: bool = True

    @classmethod
    def from_rules(cls, rules: EditorialRules | ValidationDefaults) -> ValidationPolicy:
        defaults = rules.validation if isinstance(rules, EditorialRules) else rules
        return cls(**defaults.model_dump())


@dataclass(frozen=True)
class ValidatorConfig:
    """Approved authors and structural floors."""

    approved_authors: tuple[str, ...]
    min_word_count: int = 1500
    min_faqs: int = 3
    min_h2_headings: int = 3

    @classmethod
    def from_rules(cls, rules: EditorialRules) -> ValidatorConfig:
        return cls(
            approved_authors=tuple(rules.authors.approved),
            min_word_count=rules.content.min_word_count,
            min_faqs=rules.content.min_faqs,
            min_h2_headings=rules.content.min_h2_headings,
        )

    @classmethod
    def default(cls) -> ValidatorConfig:
        return cls.from_rules(EditorialRules())


@dataclass(frozen=True)
class AutoPublishPolicy:
    enabled: bool = False
    block_high_risk: bool = True
    min_quality_score: int = 80
    max_risk_level: RiskLevel = RiskLevel.LOW
    max_articles_per_run: int = 10
    days_until_auto_publish: int = 5

    @classmethod
    def from_rules(cls, rules: EditorialRules | AutoPublishRules) -> AutoPublishPolicy:
        if isinstance(rules, EditorialRules):
            auto = rules.auto_publish
            block_high_risk = rules.validation.block_high_risk
        else:
            auto = rules
            block_high_risk = True
        return cls(
            enabled=auto.enabled,
            block_high_risk=block_high_risk,
            min_quality_score=auto.min_quality_score,
            max_risk_level=RiskLevel(auto.max_risk_level.upper()),
            max_articles_per_run=auto.max_articles_per_run,
            days_until_auto_publish=auto.days_until_auto_publish,
        )


# --- Results ---


@dataclass(frozen=True)
class ValidationIssue:
    kind: str
    message: str
    url: str | None = None


@dataclass(frozen=True)
class CheckResult:
    passed: bool
    message: str


@dataclass(frozen=True)
class ValidationVerdict:
    """
    Outcome of one validation run.

    can_publish is derived from blocking_issues and cannot be set directly.
    """

    blocking_issues: tuple[ValidationIssue, ...]
    warnings: tuple[ValidationIssue, ...]
    risk_level: RiskLevel
    quality_score: int
    checks: Mapping[str, CheckResult]

    @property
    def can_publish(self) -> bool:
        return len(self.blocking_issues) == 0

    def kinds(self, *, blocking: bool = True) -> list[str]:
        issues = self.blocking_issues if blocking else self.warnings
        return [issue.kind for issue in issues]


@dataclass(frozen=True)
class ValidationSummary:
    passed_checks: int
    total_checks: int
    percentage: int
    status: Literal["ready", "blocked"]
    status_message: str


# --- Input / Output Models ---


@dataclass(frozen=True)
class ValidateArticleInput:
    article: Article
    policy: ValidationPolicy = field(default_factory=ValidationPolicy)
    use_registry: bool = False


@dataclass(frozen=True)
class ValidateArticleOutput:
    verdict: ValidationVerdict
    summary: ValidationSummary
