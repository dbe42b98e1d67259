"""
Validation component - Pre-publish validation.

Combines author, link, risk, quality, content and shortcode checks into a
single publish verdict.
"""

from ._impl import PrePublishValidator, can_auto_publish, summarize
from .component import run_validate
from .models import (
    CHECK_NAMES,
    AutoPublishPolicy,
    CheckResult,
    ValidateArticleInput,
    ValidateArticleOutput,
    ValidationIssue,
    ValidationPolicy,
    ValidationSummary,
    ValidationVerdict,
    ValidatorConfig,
)

__all__ = [
    # Entry points
    "run_validate",
    # Input models
    "ValidateArticleInput",
    "ValidationPolicy",
    "AutoPublishPolicy",
    # Output models
    "ValidateArticleOutput",
    "ValidationVerdict",
    "ValidationIssue",
    "ValidationSummary",
    "CheckResult",
    "CHECK_NAMES",
    # Configuration
    "ValidatorConfig",
    # Service
    "PrePublishValidator",
    "summarize",
    "can_auto_publish",
]
