"""
Shortcodes component - Data models.

Shortcode types, parsed instances and check results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from src.rules.models import EditorialRules, ShortcodeRules


class ShortcodeType(str, Enum):
    MONETIZATION = "monetization"  # legacy ge_monetization
    DEGREE_TABLE = "degree_table"
    DEGREE_OFFER = "degree_offer"
    INTERNAL_LINK = "internal_link"
    EXTERNAL_CITED = "external_cited"
    PASSTHROUGH = "passthrough"  # allow-listed tag with no parameter rules
    UNRECOGNIZED = "unrecognized"

    @property
    def is_monetization(self) -> bool:
        return self in MONETIZATION_TYPES

    @property
    def is_paired(self) -> bool:
        return self in PAIRED_TYPES


MONETIZATION_TYPES = frozenset(
    {ShortcodeType.MONETIZATION, ShortcodeType.DEGREE_TABLE, ShortcodeType.DEGREE_OFFER}
)
PAIRED_TYPES = frozenset({ShortcodeType.INTERNAL_LINK, ShortcodeType.EXTERNAL_CITED})


class InvalidReferenceError(Exception):
    """A shortcode identifier does not exist in the identifier registry."""

    def __init__(self, identifier: str, value: object, message: str | None = None) -> None:
        self.identifier = identifier
        self.value = value
        super().__init__(message or f"Invalid {identifier}: {value}")


# --- Configuration ---


@dataclass(frozen=True)
class ShortcodeConfig:
    """Known tags and their types, plus tags allowed through without rules."""

    tags: tuple[tuple[str, ShortcodeType], ...]
    extra_allowed_tags: tuple[str, ...] = ()

    @classmethod
    def from_rules(cls, rules: EditorialRules | ShortcodeRules) -> ShortcodeConfig:
        sc_rules = rules.shortcodes if isinstance(rules, EditorialRules) else rules
        return cls(
            tags=tuple(
                (tag.lower(), ShortcodeType(type_value))
                for tag, type_value in sc_rules.tags.items()
            ),
            extra_allowed_tags=tuple(t.lower() for t in sc_rules.extra_allowed_tags),
        )

    @classmethod
    def default(cls) -> ShortcodeConfig:
        return cls.from_rules(ShortcodeRules())


# --- Parsed content ---


@dataclass(frozen=True)
class ShortcodeToken:
    """Any shortcode-like token, known or not."""

    raw: str
    tag: str
    is_closing: bool
    attributes: str
    position: int

    @property
    def end(self) -> int:
        return self.position + len(self.raw)


@dataclass(frozen=True)
class ShortcodeInstance:
    """A shortcode occurrence with its parameters and parsed identifiers."""

    tag: str
    type: ShortcodeType
    raw: str
    position: int
    params: dict[str, str] = field(default_factory=dict)
    is_closing: bool = False

    category_id: int | None = None
    concentration_id: int | None = None
    level_code: int | None = None
    max_programs: int | None = None
    sponsored_first: bool | None = None

    program_id: str | None = None
    school_id: str | None = None
    highlight: bool | None = None

    url: str | None = None
    anchor_text: str | None = None


# --- Results ---


@dataclass(frozen=True)
class ShortcodeParamCheck:
    """Parameter validation result for one instance."""

    is_valid: bool
    errors: tuple[str, ...] = ()
    # False when a registry lookup was needed but could not be made
    verified: bool = True


@dataclass(frozen=True)
class MonetizationPresence:
    has_monetization: bool
    count: int
    breakdown: dict[str, int]
    recommendation: str | None = None
    shortcodes: tuple[ShortcodeInstance, ...] = ()


@dataclass(frozen=True)
class UnknownShortcodeCheck:
    is_valid: bool
    unknown: tuple[ShortcodeToken, ...] = ()
    unique_tags: tuple[str, ...] = ()
    message: str = "All shortcodes are valid"


# --- Input / Output Models ---


@dataclass(frozen=True)
class ExtractShortcodesInput:
    html: str | None


@dataclass(frozen=True)
class ExtractShortcodesOutput:
    instances: tuple[ShortcodeInstance, ...]
    total: int


@dataclass(frozen=True)
class ValidateShortcodesInput:
    """Validate every recognized shortcode in a body."""

    html: str | None
    use_registry: bool = True


@dataclass(frozen=True)
class ShortcodeIssue:
    raw: str
    tag: str
    errors: tuple[str, ...]


@dataclass(frozen=True)
class ValidateShortcodesOutput:
    is_valid: bool
    invalid: tuple[ShortcodeIssue, ...] = ()
    unverified: tuple[ShortcodeInstance, ...] = ()
    unknown: UnknownShortcodeCheck | None = None


@dataclass(frozen=True)
class CheckMonetizationInput:
    html: str | None
