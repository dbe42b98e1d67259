"""
Shortcodes component - Shortcode policy checks.

Shell Layer - wraps the evaluator for callers that work with input/output models.
"""

from __future__ import annotations

from ._impl import ShortcodePolicyEvaluator
from .models import (
    CheckMonetizationInput,
    ExtractShortcodesInput,
    ExtractShortcodesOutput,
    MonetizationPresence,
    ShortcodeIssue,
    ShortcodeType,
    ValidateShortcodesInput,
    ValidateShortcodesOutput,
)


def run_extract(
    input_data: ExtractShortcodesInput,
    evaluator: ShortcodePolicyEvaluator,
) -> ExtractShortcodesOutput:
    """Extract shortcode instances from a body."""
    instances = tuple(evaluator.extract(input_data.html))
    return ExtractShortcodesOutput(instances=instances, total=len(instances))


def run_validate(
    input_data: ValidateShortcodesInput,
    evaluator: ShortcodePolicyEvaluator,
) -> ValidateShortcodesOutput:
    """Validate every recognized shortcode and report unknown tags."""
    invalid: list[ShortcodeIssue] = []
    unverified = []

    for instance in evaluator.extract(input_data.html):
        if instance.type == ShortcodeType.UNRECOGNIZED:
            continue
        check = evaluator.validate_params(instance, use_registry=input_data.use_registry)
        if not check.is_valid:
            invalid.append(
                ShortcodeIssue(raw=instance.raw, tag=instance.tag, errors=check.errors)
            )
        elif not check.verified:
            unverified.append(instance)

    unknown = evaluator.check_unknown(input_data.html)
    return ValidateShortcodesOutput(
        is_valid=not invalid and unknown.is_valid,
        invalid=tuple(invalid),
        unverified=tuple(unverified),
        unknown=unknown,
    )


def run_check_monetization(
    input_data: CheckMonetizationInput,
    evaluator: ShortcodePolicyEvaluator,
) -> MonetizationPresence:
    """Check that the body carries at least one monetization shortcode."""
    return evaluator.check_monetization_presence(input_data.html)
