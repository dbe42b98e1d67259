"""
Shortcodes component - Shortcode policy evaluation.

Parses monetization and link shortcodes, validates their parameters and
flags unknown tags.
"""

from ._impl import (
    REGISTRY_CHECKED_TYPES,
    ShortcodePolicyEvaluator,
    ShortcodeTagRegistry,
    build_degree_offer_shortcode,
    build_degree_table_shortcode,
    build_external_citation_shortcode,
    build_internal_link_shortcode,
    build_monetization_shortcode,
    parse_params,
    tokenize,
)
from .component import run_check_monetization, run_extract, run_validate
from .models import (
    MONETIZATION_TYPES,
    CheckMonetizationInput,
    ExtractShortcodesInput,
    ExtractShortcodesOutput,
    InvalidReferenceError,
    MonetizationPresence,
    ShortcodeConfig,
    ShortcodeInstance,
    ShortcodeIssue,
    ShortcodeParamCheck,
    ShortcodeToken,
    ShortcodeType,
    UnknownShortcodeCheck,
    ValidateShortcodesInput,
    ValidateShortcodesOutput,
)
from .ports import IdentifierRegistryPort

__all__ = [
    # Entry points
    "run_extract",
    "run_validate",
    "run_check_monetization",
    # Input models
    "ExtractShortcodesInput",
    "ValidateShortcodesInput",
    "CheckMonetizationInput",
    # Output models
    "ExtractShortcodesOutput",
    "ValidateShortcodesOutput",
    "ShortcodeIssue",
    "MonetizationPresence",
    "UnknownShortcodeCheck",
    "ShortcodeParamCheck",
    "ShortcodeInstance",
    "ShortcodeToken",
    "ShortcodeType",
    "MONETIZATION_TYPES",
    "REGISTRY_CHECKED_TYPES",
    "InvalidReferenceError",
    # Configuration
    "ShortcodeConfig",
    # Ports
    "IdentifierRegistryPort",
    # Service
    "ShortcodePolicyEvaluator",
    "ShortcodeTagRegistry",
    "tokenize",
    "parse_params",
    # Generators
    "build_monetization_shortcode",
    "build_degree_table_shortcode",
    "build_degree_offer_shortcode",
    "build_internal_link_shortcode",
    "build_external_citation_shortcode",
]
