"""
Pre-publish validation.

Runs six checks in a fixed order and reports every problem at once:

1. author     - approved contributor required (blocking)
2. links      - .edu and competitor links (blocking), off-list links (warning)
3. risk       - CRITICAL always blocks, HIGH blocks when the policy says so,
               a low quality score alone never blocks
4. quality    - score below the minimum (warning)
5. content    - word count, FAQ count, H2 count floors (warning)
6. shortcodes - unknown or malformed shortcodes (blocking), no monetization (warning)

The verdict can publish iff no blocking issue was raised.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from src.components.links import LinkPolicyEvaluator, can_publish_links
from src.components.risk import (
    AutoPublishEligibility,
    RiskAssessor,
    RiskOptions,
)
from src.components.shortcodes import (
    REGISTRY_CHECKED_TYPES,
    InvalidReferenceError,
    ShortcodePolicyEvaluator,
    ShortcodeType,
)
from src.domain.entities import Article, RiskLevel, max_risk
from src.domain.text import count_h2, count_words

from .models import (
    BLOCKED_LINK,
    CONTENT_ISSUE,
    CRITICAL_RISK,
    HIGH_RISK,
    INVALID_REFERENCE,
    INVALID_SHORTCODE,
    LINK_ERROR,
    LINK_WARNING,
    LOW_QUALITY_SCORE,
    MISSING_SHORTCODE,
    NO_AUTHOR,
    SHORTCODE_UNVERIFIED,
    UNAUTHORIZED_AUTHOR,
    UNKNOWN_SHORTCODE,
    AutoPublishPolicy,
    CheckResult,
    ValidationIssue,
    ValidationPolicy,
    ValidationSummary,
    ValidationVerdict,
    ValidatorConfig,
)

logger = logging.getLogger(__name__)


class _Findings:
    """Mutable accumulator for a single run."""

    def __init__(self) -> None:
        self.blocking: list[ValidationIssue] = []
        self.warnings: list[ValidationIssue] = []
        self.checks: dict[str, CheckResult] = {}

    def block(self, kind: str, message: str, url: str | None = None) -> None:
        self.blocking.append(ValidationIssue(kind=kind, message=message, url=url))

    def warn(self, kind: str, message: str, url: str | None = None) -> None:
        self.warnings.append(ValidationIssue(kind=kind, message=message, url=url))


class PrePublishValidator:
    """Orchestrates the link, shortcode and risk evaluators into one verdict."""

    def __init__(
        self,
        config: ValidatorConfig | None = None,
        link_evaluator: LinkPolicyEvaluator | None = None,
        shortcode_evaluator: ShortcodePolicyEvaluator | None = None,
        risk_assessor: RiskAssessor | None = None,
    ) -> None:
        self._config = config or ValidatorConfig.default()
        self._links = link_evaluator or LinkPolicyEvaluator()
        self._shortcodes = shortcode_evaluator or ShortcodePolicyEvaluator()
        self._risk = risk_assessor or RiskAssessor(link_evaluator=self._links)

    @property
    def has_registry(self) -> bool:
        return self._shortcodes.has_registry

    def validate(
        self, article: Article, policy: ValidationPolicy | None = None
    ) -> ValidationVerdict:
        policy = policy or ValidationPolicy()
        findings = _Findings()

        self._check_author(article, policy, findings)
        self._check_links(article, policy, findings)
        risk_level = self._check_risk(article, policy, findings)
        self._check_quality(article, policy, findings)
        self._check_content(article, findings)
        self._check_shortcodes(article, policy, findings)

        verdict = ValidationVerdict(
            blocking_issues=tuple(findings.blocking),
            warnings=tuple(findings.warnings),
            risk_level=risk_level,
            quality_score=article.quality_score,
            checks=findings.checks,
        )
        logger.debug(
            "Validated article %s: can_publish=%s blocking=%d warnings=%d",
            article.id,
            verdict.can_publish,
            len(verdict.blocking_issues),
            len(verdict.warnings),
        )
        return verdict

    def validate_with_registry(
        self, article: Article, policy: ValidationPolicy | None = None
    ) -> ValidationVerdict:
        """
        Synchronous verdict refined by identifier registry lookups.

        Without a registry the synchronous verdict is returned unchanged.
        An unreachable registry downgrades the lookups to warnings.
        """
        policy = policy or ValidationPolicy()
        verdict = self.validate(article, policy)
        if not policy.check_shortcodes or not self._shortcodes.has_registry:
            return verdict

        blocking: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []
        registry_down = False

        for instance in self._shortcodes.extract(article.content):
            if instance.type not in REGISTRY_CHECKED_TYPES:
                continue
            if self._shortcodes.structural_errors(instance):
                continue  # already reported as invalid_shortcode

            if registry_down:
                warnings.append(
                    ValidationIssue(
                        kind=SHORTCODE_UNVERIFIED,
                        message=f"Could not verify {instance.raw}",
                    )
                )
                continue

            try:
                self._shortcodes.verify_references(instance)
            except InvalidReferenceError as e:
                blocking.append(
                    ValidationIssue(
                        kind=INVALID_REFERENCE, message=f"{instance.raw}: {e}"
                    )
                )
            except Exception as e:
                logger.warning("Identifier registry unreachable: %s", e)
                registry_down = True
                warnings.append(
                    ValidationIssue(
                        kind=SHORTCODE_UNVERIFIED,
                        message=f"Could not verify {instance.raw}",
                    )
                )

        if not blocking and not warnings:
            return verdict

        checks = dict(verdict.checks)
        if blocking:
            checks["shortcodes"] = CheckResult(
                passed=False,
                message=f"{len(blocking)} shortcode reference(s) not found",
            )
        return replace(
            verdict,
            blocking_issues=verdict.blocking_issues + tuple(blocking),
            warnings=verdict.warnings + tuple(warnings),
            checks=checks,
        )

    # --- Checks ---

    def _check_author(
        self, article: Article, policy: ValidationPolicy, findings: _Findings
    ) -> None:
        if not policy.enforce_approved_authors:
            findings.checks["author"] = CheckResult(True, "Author check disabled")
            return

        author = (article.author or "").strip()
        if not author:
            findings.checks["author"] = CheckResult(False, "No author assigned")
            findings.block(
                NO_AUTHOR, "Article must have an assigned author before publishing"
            )
        elif author not in self._config.approved_authors:
            findings.checks["author"] = CheckResult(
                False, f'"{author}" is not an approved author'
            )
            findings.block(
                UNAUTHORIZED_AUTHOR,
                f'Author "{author}" is not approved. Only '
                f"{_join_names(self._config.approved_authors)} are allowed.",
            )
        else:
            findings.checks["author"] = CheckResult(True, f"{author} (approved)")

    def _check_links(
        self, article: Article, policy: ValidationPolicy, findings: _Findings
    ) -> None:
        if not policy.check_links or not article.content:
            findings.checks["links"] = CheckResult(True, "Link check skipped")
            return

        scan = self._links.scan(article.content)
        allowed, reason = can_publish_links(scan)

        for finding in scan.blocking_issues:
            findings.block(BLOCKED_LINK, finding.issues[0], url=finding.url)
        for finding in scan.warnings:
            findings.warn(LINK_WARNING, finding.issues[0], url=finding.url)
        for finding in scan.errors:
            findings.warn(LINK_ERROR, finding.issues[0], url=finding.url)

        if allowed:
            findings.checks["links"] = CheckResult(
                True, f"{scan.internal_count} internal, {scan.external_count} external"
            )
        else:
            findings.checks["links"] = CheckResult(False, reason or "Blocked links")

    def _check_risk(
        self, article: Article, policy: ValidationPolicy, findings: _Findings
    ) -> RiskLevel:
        # Links and author are reported by their own checks
        assessment = self._risk.assess(
            article, options=RiskOptions(check_links=False, check_author=False)
        )
        level = max_risk(assessment.risk_level, article.risk_level)
        # A low quality score raises the reported level but is only ever a warning
        gate = max_risk(assessment.issue_level, article.risk_level)

        if gate == RiskLevel.CRITICAL:
            findings.checks["risk"] = CheckResult(False, "CRITICAL risk requires manual review")
            findings.block(
                CRITICAL_RISK, "Article has CRITICAL risk level and cannot be published"
            )
        elif gate == RiskLevel.HIGH and policy.block_high_risk:
            findings.checks["risk"] = CheckResult(False, "HIGH risk requires manual review")
            findings.block(
                HIGH_RISK, "Article has HIGH risk level and requires manual review"
            )
        elif level > gate and level >= RiskLevel.HIGH:
            findings.checks["risk"] = CheckResult(
                False, f"{level.value} risk from quality score, review recommended"
            )
        else:
            findings.checks["risk"] = CheckResult(True, f"Risk level: {level.value}")
        return level

    def _check_quality(
        self, article: Article, policy: ValidationPolicy, findings: _Findings
    ) -> None:
        score = article.quality_score
        minimum = policy.min_quality_score
        if score >= minimum:
            findings.checks["quality"] = CheckResult(True, f"Score: {score}/100")
            return
        findings.checks["quality"] = CheckResult(
            False, f"Score {score} below minimum {minimum}"
        )
        findings.warn(
            LOW_QUALITY_SCORE,
            f"Quality score ({score}) is below the recommended minimum ({minimum})",
        )

    def _check_content(self, article: Article, findings: _Findings) -> None:
        cfg = self._config
        problems: list[str] = []

        word_count = (
            article.word_count
            if article.word_count is not None
            else count_words(article.content)
        )
        if word_count < cfg.min_word_count:
            problems.append(f"Word count below {cfg.min_word_count}")
        if len(article.faqs) < cfg.min_faqs:
            problems.append(f"Fewer than {cfg.min_faqs} FAQ items")
        if count_h2(article.content) < cfg.min_h2_headings:
            problems.append(f"Fewer than {cfg.min_h2_headings} H2 headings")

        if not problems:
            findings.checks["content"] = CheckResult(True, "All content requirements met")
            return
        findings.checks["content"] = CheckResult(False, ", ".join(problems))
        for problem in problems:
            findings.warn(CONTENT_ISSUE, problem)

    def _check_shortcodes(
        self, article: Article, policy: ValidationPolicy, findings: _Findings
    ) -> None:
        if not policy.check_shortcodes:
            findings.checks["shortcodes"] = CheckResult(True, "Shortcode check skipped")
            return

        blocking_before = len(findings.blocking)
        content = article.content

        unknown = self._shortcodes.check_unknown(
            content, block_unknown=policy.block_unknown_shortcodes
        )
        if unknown.unknown:
            if policy.block_unknown_shortcodes:
                findings.block(UNKNOWN_SHORTCODE, unknown.message)
            else:
                findings.warn(UNKNOWN_SHORTCODE, unknown.message)

        instances = self._shortcodes.extract(content)
        for instance in instances:
            if instance.type == ShortcodeType.UNRECOGNIZED:
                continue
            errors = self._shortcodes.structural_errors(instance)
            if errors:
                findings.block(
                    INVALID_SHORTCODE, f"Invalid shortcode {instance.raw}: {'; '.join(errors)}"
                )

        presence = self._shortcodes.check_monetization_presence(content)
        if policy.require_monetization and not presence.has_monetization:
            findings.warn(
                MISSING_SHORTCODE,
                presence.recommendation or "No monetization shortcode found",
            )

        failures = len(findings.blocking) - blocking_before
        if failures:
            findings.checks["shortcodes"] = CheckResult(
                False, f"{failures} shortcode issue(s) must be fixed"
            )
        else:
            findings.checks["shortcodes"] = CheckResult(
                True,
                f"{len(instances)} shortcode(s), {presence.count} monetization",
            )


def _join_names(names: tuple[str, ...]) -> str:
    if len(names) <= 1:
        return "".join(names)
    return ", ".join(names[:-1]) + f", and {names[-1]}"


def summarize(verdict: ValidationVerdict) -> ValidationSummary:
    passed = sum(1 for check in verdict.checks.values() if check.passed)
    total = len(verdict.checks)
    return ValidationSummary(
        passed_checks=passed,
        total_checks=total,
        percentage=round(passed / total * 100) if total else 0,
        status="ready" if verdict.can_publish else "blocked",
        status_message=(
            "Ready to publish"
            if verdict.can_publish
            else f"{len(verdict.blocking_issues)} blocking issue(s)"
        ),
    )


def can_auto_publish(
    validator: PrePublishValidator,
    article: Article,
    settings: AutoPublishPolicy | None = None,
) -> AutoPublishEligibility:
    settings = settings or AutoPublishPolicy()

    if not settings.enabled:
        return AutoPublishEligibility(eligible=False, reason="Auto-publish is disabled")

    verdict = validator.validate(
        article,
        ValidationPolicy(
            min_quality_score=settings.min_quality_score,
            block_high_risk=settings.block_high_risk,
        ),
    )
    if not verdict.can_publish:
        return AutoPublishEligibility(
            eligible=False, reason=verdict.blocking_issues[0].message
        )

    if verdict.risk_level >= RiskLevel.HIGH:
        return AutoPublishEligibility(
            eligible=False,
            reason=f"{verdict.risk_level.value} risk articles require manual review",
        )

    if verdict.risk_level > settings.max_risk_level:
        return AutoPublishEligibility(
            eligible=False,
            reason=(
                f"Risk level {verdict.risk_level.value} above auto-publish maximum "
                f"{settings.max_risk_level.value}"
            ),
        )

    if article.quality_score < settings.min_quality_score:
        return AutoPublishEligibility(
            eligible=False,
            reason=(
                f"Quality score ({article.quality_score}) "
                f"below minimum ({settings.min_quality_score})"
            ),
        )

    return AutoPublishEligibility(eligible=True)
