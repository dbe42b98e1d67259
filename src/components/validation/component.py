"""
Validation component - Pre-publish validation.

Shell Layer - wraps the validator for callers that work with input/output models.
"""

from __future__ import annotations

from ._impl import PrePublishValidator, summarize
from .models import ValidateArticleInput, ValidateArticleOutput


def run_validate(
    input_data: ValidateArticleInput,
    validator: PrePublishValidator,
) -> ValidateArticleOutput:
    """Validate an article, consulting the registry when asked and available."""
    if input_data.use_registry:
        verdict = validator.validate_with_registry(input_data.article, input_data.policy)
    else:
        verdict = validator.validate(input_data.article, input_data.policy)
    return ValidateArticleOutput(verdict=verdict, summary=summarize(verdict))
