"""
Risk component - Editorial risk assessment.

Shell Layer - wraps the assessor for callers that work with input/output models.
"""

from __future__ import annotations

from ._impl import RiskAssessor, check_auto_publish_eligibility
from .models import AssessRiskInput, AssessRiskOutput, AutoPublishSettings


def run_assess(
    input_data: AssessRiskInput,
    assessor: RiskAssessor,
    settings: AutoPublishSettings | None = None,
) -> AssessRiskOutput:
    """Assess an article and its auto-publish eligibility."""
    assessment = assessor.assess(
        input_data.article,
        precomputed=input_data.precomputed,
        options=input_data.options,
    )
    return AssessRiskOutput(
        assessment=assessment,
        eligibility=check_auto_publish_eligibility(assessment, settings),
    )
