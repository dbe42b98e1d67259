"""
Links component - Hyperlink policy checks.

Shell Layer - wraps the evaluator for callers that work with input/output models.
"""

from __future__ import annotations

from ._impl import LinkPolicyEvaluator, can_publish_links
from .models import ClassifyLinkInput, ClassifyLinkOutput, ScanLinksInput, ScanLinksOutput


def run_classify(
    input_data: ClassifyLinkInput,
    evaluator: LinkPolicyEvaluator,
) -> ClassifyLinkOutput:
    """Classify one URL."""
    return ClassifyLinkOutput(classification=evaluator.classify(input_data.url))


def run_scan(
    input_data: ScanLinksInput,
    evaluator: LinkPolicyEvaluator,
) -> ScanLinksOutput:
    """Scan an HTML body and decide whether its links allow publishing."""
    scan = evaluator.scan(input_data.html)
    allowed, reason = can_publish_links(scan)
    return ScanLinksOutput(
        scan=scan,
        can_publish=allowed,
        reason=reason,
        blocking_issues=scan.blocking_issues,
    )
