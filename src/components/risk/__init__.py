"""
Risk component - Editorial risk assessment.

Scores an article and maps the score to LOW, MEDIUM, HIGH or CRITICAL.
"""

from ._impl import (
    ISSUE_MESSAGES,
    RiskAssessor,
    check_auto_publish_eligibility,
    generate_summary,
    issue_message,
    issue_risk_level,
    risk_level_for,
)
from .component import run_assess
from .models import (
    AssessRiskInput,
    AssessRiskOutput,
    AutoPublishEligibility,
    AutoPublishSettings,
    PrecomputedChecks,
    RiskAssessment,
    RiskConfig,
    RiskIssue,
    RiskOptions,
)

__all__ = [
    # Entry points
    "run_assess",
    # Input models
    "AssessRiskInput",
    "PrecomputedChecks",
    "RiskOptions",
    "AutoPublishSettings",
    # Output models
    "AssessRiskOutput",
    "RiskAssessment",
    "RiskIssue",
    "AutoPublishEligibility",
    # Configuration
    "RiskConfig",
    # Service
    "RiskAssessor",
    "check_auto_publish_eligibility",
    "risk_level_for",
    "issue_risk_level",
    "generate_summary",
    "issue_message",
    "ISSUE_MESSAGES",
]
