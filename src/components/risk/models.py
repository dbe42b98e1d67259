"""
Risk component - Data models.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Literal

from src.components.links import LinkScan
from src.domain.entities import Article, RiskLevel
from src.rules.models import EditorialRules

IssueSeverity = Literal["major", "minor"]


# --- Configuration ---


@dataclass(frozen=True)
class RiskConfig:
    """Issue weights, level bands and the approved author set."""

    weights: Mapping[str, int]
    approved_authors: tuple[str, ...]
    default_weight: int = 10
    major_weight: int = 20
    min_internal_links: int = 3

    critical_score: int = 100
    high_score: int = 50
    medium_score: int = 20
    high_quality_below: int = 70
    medium_quality_below: int = 85

    @classmethod
    def from_rules(cls, rules: EditorialRules) -> RiskConfig:
        bands = rules.risk.bands
        return cls(
            weights=dict(rules.risk.weights),
            approved_authors=tuple(rules.authors.approved),
            default_weight=rules.risk.default_weight,
            major_weight=rules.risk.major_weight,
            min_internal_links=rules.links.min_internal_links,
            critical_score=bands.critical_score,
            high_score=bands.high_score,
            medium_score=bands.medium_score,
            high_quality_below=bands.high_quality_below,
            medium_quality_below=bands.medium_quality_below,
        )

    @classmethod
    def default(cls) -> RiskConfig:
        return cls.from_rules(EditorialRules())

    def weight_of(self, issue_type: str) -> int:
        return self.weights.get(issue_type, self.default_weight)


# --- Inputs ---


@dataclass(frozen=True)
class PrecomputedChecks:
    """Results the caller already has; reused instead of recomputed."""

    link_scan: LinkScan | None = None
    shortcode_violations: tuple[str, ...] = ()


@dataclass(frozen=True)
class RiskOptions:
    check_links: bool = True
    check_author: bool = True


# --- Results ---


@dataclass(frozen=True)
class RiskIssue:
    type: str
    severity: IssueSeverity
    message: str
    url: str | None = None


@dataclass(frozen=True)
class RiskAssessment:
    risk_level: RiskLevel
    risk_score: int
    quality_score: int
    # Level from issues only; the quality band can only raise risk_level
    issue_level: RiskLevel = RiskLevel.LOW
    issues: tuple[RiskIssue, ...] = ()
    blocking_issues: tuple[RiskIssue, ...] = ()
    warnings: tuple[RiskIssue, ...] = ()
    can_auto_publish: bool = True
    requires_review: bool = False
    publish_blocked: bool = False
    summary: str = ""


@dataclass(frozen=True)
class AutoPublishSettings:
    block_high_risk: bool = True
    min_quality_score: int = 80


@dataclass(frozen=True)
class AutoPublishEligibility:
    eligible: bool
    reason: str | None = None


# --- Input / Output Models ---


@dataclass(frozen=True)
class AssessRiskInput:
    article: Article
    precomputed: PrecomputedChecks | None = None
    options: RiskOptions = field(default_factory=RiskOptions)


@dataclass(frozen=True)
class AssessRiskOutput:
    assessment: RiskAssessment
    eligibility: AutoPublishEligibility
