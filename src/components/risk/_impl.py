"""
Editorial risk assessment.

Risk levels:
- LOW: safe for auto-publish
- MEDIUM: review recommended
- HIGH: review required
- CRITICAL: publish blocked

The assessor is a pure function of the article, the precomputed checks and
its configuration.
"""

from __future__ import annotations

from src.components.links import LinkPolicyEvaluator
from src.domain.entities import Article, RiskLevel, max_risk

from .models import (
    AutoPublishEligibility,
    AutoPublishSettings,
    PrecomputedChecks,
    RiskAssessment,
    RiskConfig,
    RiskIssue,
    RiskOptions,
)

ISSUE_MESSAGES = {
    "blocked_link": "Contains blocked links (competitors or .edu)",
    "unauthorized_author": "Author is not on the approved list",
    "no_author": "No author assigned",
    "invalid_shortcode": "Contains an invalid shortcode",
    "unknown_shortcode": "Contains an unknown shortcode",
    "missing_shortcode": "Monetization links missing required shortcodes",
    "missing_internal_links": "Not enough internal links to site content",
    "missing_external_links": "Missing authoritative external citations",
    "word_count_low": "Article is below minimum word count (1500 words)",
    "word_count_high": "Article exceeds recommended word count (2500 words)",
    "poor_readability": "Readability score needs improvement",
    "weak_headings": "Heading structure needs improvement",
    "missing_faqs": "Missing FAQ section (minimum 3 questions)",
    "external_link_warning": "External link not on approved whitelist",
    "missing_bls_citation": "Missing BLS citation for salary/career data",
    "keyword_density_issue": "Focus keyword density outside optimal range",
}


def issue_message(issue_type: str) -> str:
    return ISSUE_MESSAGES.get(issue_type, issue_type)


def _first_issue(issues: tuple[str, ...], fallback_type: str) -> str:
    return issues[0] if issues else issue_message(fallback_type)


def issue_risk_level(score: int, has_blocking: bool, config: RiskConfig) -> RiskLevel:
    """Level from the weighted issues alone, ignoring the quality score."""
    if has_blocking or score >= config.critical_score:
        return RiskLevel.CRITICAL
    if score >= config.high_score:
        return RiskLevel.HIGH
    if score >= config.medium_score:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def risk_level_for(
    score: int, quality_score: int, has_blocking: bool, config: RiskConfig
) -> RiskLevel:
    """Map a score to a level using fixed inclusive bands."""
    quality_level = RiskLevel.LOW
    if quality_score < config.high_quality_below:
        quality_level = RiskLevel.HIGH
    elif quality_score < config.medium_quality_below:
        quality_level = RiskLevel.MEDIUM
    return max_risk(issue_risk_level(score, has_blocking, config), quality_level)


def generate_summary(
    level: RiskLevel, issue_count: int, blocking_count: int, quality_score: int
) -> str:
    if level == RiskLevel.CRITICAL:
        if blocking_count:
            return f"Publishing blocked: {blocking_count} critical issue(s) must be resolved."
        return f"Publishing blocked: risk score too high. Quality score: {quality_score}."
    if level == RiskLevel.HIGH:
        return (
            f"High risk: {issue_count} issue(s) require attention. "
            f"Quality score: {quality_score}."
        )
    if level == RiskLevel.MEDIUM:
        return (
            f"Review recommended: {issue_count} minor issue(s). "
            f"Quality score: {quality_score}."
        )
    return f"Ready for publishing. Quality score: {quality_score}."


class RiskAssessor:
    """Weighted issue scoring over upstream flags, links, author and shortcodes."""

    def __init__(
        self,
        config: RiskConfig | None = None,
        link_evaluator: LinkPolicyEvaluator | None = None,
    ) -> None:
        self._config = config or RiskConfig.default()
        self._links = link_evaluator or LinkPolicyEvaluator()

    @property
    def config(self) -> RiskConfig:
        return self._config

    def assess(
        self,
        article: Article,
        precomputed: PrecomputedChecks | None = None,
        options: RiskOptions | None = None,
    ) -> RiskAssessment:
        cfg = self._config
        precomputed = precomputed or PrecomputedChecks()
        options = options or RiskOptions()

        score = 0
        issues: list[RiskIssue] = []
        blocking: list[RiskIssue] = []
        warnings: list[RiskIssue] = []

        # Flags assigned upstream by the scoring pipeline
        for flag in article.risk_flags:
            weight = cfg.weight_of(flag)
            score += weight
            issues.append(
                RiskIssue(
                    type=flag,
                    severity="major" if weight >= cfg.major_weight else "minor",
                    message=issue_message(flag),
                )
            )

        if options.check_links and article.content:
            scan = precomputed.link_scan
            if scan is None:
                scan = self._links.scan(article.content)

            for finding in scan.blocking_issues:
                blocking.append(
                    RiskIssue(
                        type="blocked_link",
                        severity="major",
                        message=_first_issue(finding.issues, "blocked_link"),
                        url=finding.url,
                    )
                )
                score += cfg.weight_of("blocked_link")

            for finding in scan.warnings:
                warnings.append(
                    RiskIssue(
                        type="external_link_warning",
                        severity="minor",
                        message=_first_issue(finding.issues, "external_link_warning"),
                        url=finding.url,
                    )
                )
                score += cfg.weight_of("external_link_warning")

            if scan.internal_count < cfg.min_internal_links:
                issues.append(
                    RiskIssue(
                        type="missing_internal_links",
                        severity="major",
                        message=(
                            f"Only {scan.internal_count} internal links found "
                            f"(minimum: {cfg.min_internal_links})"
                        ),
                    )
                )
                score += cfg.weight_of("missing_internal_links")

        if options.check_author:
            author = (article.author or "").strip()
            if not author:
                blocking.append(
                    RiskIssue(type="no_author", severity="major", message="No author assigned")
                )
                score += cfg.weight_of("no_author")
            elif author not in cfg.approved_authors:
                blocking.append(
                    RiskIssue(
                        type="unauthorized_author",
                        severity="major",
                        message=f'Author "{author}" is not an approved author',
                    )
                )
                score += cfg.weight_of("unauthorized_author")

        for violation in precomputed.shortcode_violations:
            blocking.append(
                RiskIssue(type="invalid_shortcode", severity="major", message=violation)
            )
            score += cfg.weight_of("invalid_shortcode")

        quality = article.quality_score
        level = risk_level_for(score, quality, bool(blocking), cfg)
        issue_level = issue_risk_level(score, bool(blocking), cfg)

        return RiskAssessment(
            risk_level=level,
            risk_score=score,
            quality_score=quality,
            issue_level=issue_level,
            issues=tuple(issues),
            blocking_issues=tuple(blocking),
            warnings=tuple(warnings),
            can_auto_publish=level == RiskLevel.LOW,
            requires_review=level != RiskLevel.LOW,
            publish_blocked=level == RiskLevel.CRITICAL,
            summary=generate_summary(level, len(issues), len(blocking), quality),
        )


def check_auto_publish_eligibility(
    assessment: RiskAssessment,
    settings: AutoPublishSettings | None = None,
) -> AutoPublishEligibility:
    settings = settings or AutoPublishSettings()

    if assessment.publish_blocked:
        return AutoPublishEligibility(
            eligible=False, reason="Article has critical issues that block publishing"
        )

    if settings.block_high_risk and assessment.risk_level >= RiskLevel.HIGH:
        return AutoPublishEligibility(
            eligible=False,
            reason=f"{assessment.risk_level.value} risk articles require manual review",
        )

    if assessment.quality_score < settings.min_quality_score:
        return AutoPublishEligibility(
            eligible=False,
            reason=(
                f"Quality score ({assessment.quality_score}) "
                f"below minimum ({settings.min_quality_score})"
            ),
        )

    return AutoPublishEligibility(eligible=True)
