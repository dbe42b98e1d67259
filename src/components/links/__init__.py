"""
Links component - Hyperlink policy evaluation.

Classifies links as internal, external, anchor or invalid and flags
.edu, competitor and off-list external links.
"""

from ._impl import LinkPolicyEvaluator, can_publish_links, extract_links
from .component import run_classify, run_scan
from .models import (
    ClassifyLinkInput,
    ClassifyLinkOutput,
    ExtractedLink,
    LinkClassification,
    LinkFinding,
    LinkPolicyConfig,
    LinkScan,
    LinkSeverity,
    LinkType,
    ScanLinksInput,
    ScanLinksOutput,
)

__all__ = [
    # Entry points
    "run_classify",
    "run_scan",
    # Input models
    "ClassifyLinkInput",
    "ScanLinksInput",
    # Output models
    "ClassifyLinkOutput",
    "ScanLinksOutput",
    "LinkClassification",
    "LinkFinding",
    "LinkScan",
    "ExtractedLink",
    "LinkType",
    "LinkSeverity",
    # Configuration
    "LinkPolicyConfig",
    # Service
    "LinkPolicyEvaluator",
    "can_publish_links",
    "extract_links",
]
