"""
Links component - Data models.

Link classification, scan results and the immutable policy lists.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from src.rules.models import EditorialRules, LinkRules


class LinkType(str, Enum):
    INTERNAL = "internal"
    EXTERNAL = "external"
    ANCHOR = "anchor"
    INVALID = "invalid"


class LinkSeverity(str, Enum):
    NONE = "none"
    WARNING = "warning"
    ERROR = "error"
    BLOCKING = "blocking"


# --- Configuration ---


@dataclass(frozen=True)
class LinkPolicyConfig:
    """Static link policy lists, injected at construction."""

    local_domains: tuple[str, ...]
    competitor_domains: tuple[str, ...]
    allowed_external_domains: tuple[str, ...]
    blocked_suffix: str = ".edu"
    site_origin: str = "https://www.geteducated.com"

    @classmethod
    def from_rules(cls, rules: EditorialRules | LinkRules) -> LinkPolicyConfig:
        link_rules = rules.links if isinstance(rules, EditorialRules) else rules
        return cls(
            local_domains=tuple(d.lower() for d in link_rules.local_domains),
            competitor_domains=tuple(d.lower() for d in link_rules.competitor_domains),
            allowed_external_domains=tuple(
                d.lower() for d in link_rules.allowed_external_domains
            ),
            blocked_suffix=link_rules.blocked_suffix.lower(),
            site_origin=link_rules.site_origin.rstrip("/"),
        )

    @classmethod
    def default(cls) -> LinkPolicyConfig:
        return cls.from_rules(LinkRules())


# --- Results ---


@dataclass(frozen=True)
class ExtractedLink:
    """A hyperlink as found in the body."""

    url: str
    anchor_text: str
    start_tag: str


@dataclass(frozen=True)
class LinkClassification:
    """Classification of a single hyperlink."""

    url: str
    type: LinkType
    severity: LinkSeverity = LinkSeverity.NONE
    issues: tuple[str, ...] = ()
    anchor_text: str = ""

    @property
    def is_valid(self) -> bool:
        return self.severity not in (LinkSeverity.ERROR, LinkSeverity.BLOCKING)


@dataclass(frozen=True)
class LinkFinding:
    """A link with a non-clean severity, as reported in a scan."""

    url: str
    anchor_text: str
    issues: tuple[str, ...]


@dataclass(frozen=True)
class LinkScan:
    """Result of scanning an HTML body."""

    links: tuple[LinkClassification, ...] = ()
    internal_count: int = 0
    external_count: int = 0
    anchor_count: int = 0
    invalid_count: int = 0
    blocking_issues: tuple[LinkFinding, ...] = ()
    errors: tuple[LinkFinding, ...] = ()
    warnings: tuple[LinkFinding, ...] = ()

    @property
    def is_compliant(self) -> bool:
        return len(self.blocking_issues) == 0

    @property
    def total_links(self) -> int:
        return len(self.links)


# --- Input / Output Models ---


@dataclass(frozen=True)
class ClassifyLinkInput:
    """Input for classifying one URL."""

    url: str | None


@dataclass(frozen=True)
class ClassifyLinkOutput:
    """Output for classifying one URL."""

    classification: LinkClassification


@dataclass(frozen=True)
class ScanLinksInput:
    """Input for scanning an HTML body."""

    html: str | None


@dataclass(frozen=True)
class ScanLinksOutput:
    """Output for scanning an HTML body."""

    scan: LinkScan
    can_publish: bool
    reason: str | None = None
    blocking_issues: tuple[LinkFinding, ...] = field(default_factory=tuple)
