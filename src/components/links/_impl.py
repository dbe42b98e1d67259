"""
Link policy evaluation.

Classifies every hyperlink in an article body against the site's linking rules.

Key behaviors:
- Direct .edu links are blocking (school pages on the local site must be used)
- Competitor links are blocking
- External links outside the approved list are warnings
- Malformed URLs are errors, never blocking
- First matching rule wins, checks run in a fixed order
"""

from __future__ import annotations

from html.parser import HTMLParser
from urllib.parse import urlsplit

from src.domain.text import slugify

from .models import (
    ExtractedLink,
    LinkClassification,
    LinkFinding,
    LinkPolicyConfig,
    LinkScan,
    LinkSeverity,
    LinkType,
)

SCHOOL_PAGE_PATH = "/online-schools/"
DEGREE_PAGE_PATH = "/online-degrees/"
RANKING_REPORT_PATH = "/online-college-ratings-and-rankings/"


class _AnchorExtractor(HTMLParser):
    """Collect every <a href> with the text it encloses, including nested markup."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.links: list[ExtractedLink] = []
        self._open: tuple[str, str] | None = None
        self._text: list[str] = []

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag != "a":
            return
        # An unclosed anchor ends where the next one starts
        self._finish()
        href = next((value for name, value in attrs if name == "href" and value), None)
        if href is None or not href.strip():
            return
        self._open = (href.strip(), self.get_starttag_text() or "")
        self._text = []

    def handle_data(self, data: str) -> None:
        if self._open is not None:
            self._text.append(data)

    def handle_endtag(self, tag: str) -> None:
        if tag == "a":
            self._finish()

    def close(self) -> None:
        super().close()
        self._finish()

    def _finish(self) -> None:
        if self._open is None:
            return
        url, start_tag = self._open
        anchor_text = " ".join("".join(self._text).split())
        self.links.append(ExtractedLink(url=url, anchor_text=anchor_text, start_tag=start_tag))
        self._open = None
        self._text = []


def extract_links(html: str | None) -> list[ExtractedLink]:
    """Return anchors with an href, in order of appearance."""
    if not html:
        return []
    parser = _AnchorExtractor()
    parser.feed(html)
    parser.close()
    return parser.links


def _matches_domain(host: str, domain: str) -> bool:
    return host == domain or host.endswith("." + domain)


class LinkPolicyEvaluator:
    """Stateless evaluator over an immutable policy configuration."""

    def __init__(self, config: LinkPolicyConfig | None = None) -> None:
        self._config = config or LinkPolicyConfig.default()

    @property
    def config(self) -> LinkPolicyConfig:
        return self._config

    def classify(self, url: str | None, anchor_text: str = "") -> LinkClassification:
        if not url or not isinstance(url, str):
            return LinkClassification(
                url=url or "",
                type=LinkType.INVALID,
                severity=LinkSeverity.ERROR,
                issues=("Empty or invalid URL",),
                anchor_text=anchor_text,
            )

        if url.startswith("#"):
            return LinkClassification(url=url, type=LinkType.ANCHOR, anchor_text=anchor_text)

        if url.startswith("/"):
            return LinkClassification(url=url, type=LinkType.INTERNAL, anchor_text=anchor_text)

        host = self._host_of(url)
        if host is None:
            return LinkClassification(
                url=url,
                type=LinkType.INVALID,
                severity=LinkSeverity.ERROR,
                issues=("Invalid URL format",),
                anchor_text=anchor_text,
            )

        cfg = self._config
        if any(_matches_domain(host, d) for d in cfg.local_domains):
            return LinkClassification(url=url, type=LinkType.INTERNAL, anchor_text=anchor_text)

        if host.endswith(cfg.blocked_suffix):
            return LinkClassification(
                url=url,
                type=LinkType.EXTERNAL,
                severity=LinkSeverity.BLOCKING,
                issues=(
                    "Direct .edu links are not allowed. "
                    "Use school pages on the site instead.",
                ),
                anchor_text=anchor_text,
            )

        for competitor in cfg.competitor_domains:
            if _matches_domain(host, competitor):
                return LinkClassification(
                    url=url,
                    type=LinkType.EXTERNAL,
                    severity=LinkSeverity.BLOCKING,
                    issues=(
                        f"Competitor link detected: {competitor}. This link is not allowed.",
                    ),
                    anchor_text=anchor_text,
                )

        if any(_matches_domain(host, d) for d in cfg.allowed_external_domains):
            return LinkClassification(url=url, type=LinkType.EXTERNAL, anchor_text=anchor_text)

        return LinkClassification(
            url=url,
            type=LinkType.EXTERNAL,
            severity=LinkSeverity.WARNING,
            issues=(
                f"External link to {host} is not on the approved list. "
                "Consider using BLS, government, or nonprofit sources.",
            ),
            anchor_text=anchor_text,
        )

    def scan(self, html: str | None) -> LinkScan:
        classifications: list[LinkClassification] = []
        counts = {t: 0 for t in LinkType}
        blocking: list[LinkFinding] = []
        errors: list[LinkFinding] = []
        warnings: list[LinkFinding] = []

        for link in extract_links(html):
            result = self.classify(link.url, link.anchor_text)
            classifications.append(result)
            counts[result.type] += 1

            finding = LinkFinding(
                url=link.url, anchor_text=link.anchor_text, issues=result.issues
            )
            if result.severity == LinkSeverity.BLOCKING:
                blocking.append(finding)
            elif result.severity == LinkSeverity.ERROR:
                errors.append(finding)
            elif result.severity == LinkSeverity.WARNING:
                warnings.append(finding)

        return LinkScan(
            links=tuple(classifications),
            internal_count=counts[LinkType.INTERNAL],
            external_count=counts[LinkType.EXTERNAL],
            anchor_count=counts[LinkType.ANCHOR],
            invalid_count=counts[LinkType.INVALID],
            blocking_issues=tuple(blocking),
            errors=tuple(errors),
            warnings=tuple(warnings),
        )

    # --- Site page helpers ---

    def is_school_page(self, url: str | None) -> bool:
        return self._is_site_path(url, SCHOOL_PAGE_PATH)

    def is_degree_page(self, url: str | None) -> bool:
        return self._is_site_path(url, DEGREE_PAGE_PATH)

    def is_ranking_report(self, url: str | None) -> bool:
        return self._is_site_path(url, RANKING_REPORT_PATH)

    def school_page_url(self, school_name: str | None) -> str:
        """Site school directory URL for a school name."""
        slug = slugify(school_name)
        if not slug:
            return ""
        return f"{self._config.site_origin}{SCHOOL_PAGE_PATH}{slug}/"

    def _is_site_path(self, url: str | None, path_prefix: str) -> bool:
        if not url:
            return False
        host = self._host_of(url)
        if host is None or not any(
            _matches_domain(host, d) for d in self._config.local_domains
        ):
            return False
        return urlsplit(url).path.startswith(path_prefix)

    @staticmethod
    def _host_of(url: str) -> str | None:
        """Lower-cased host of an absolute URL, None when it cannot be parsed."""
        try:
            parts = urlsplit(url)
            host = parts.hostname
        except ValueError:
            return None
        if not parts.scheme or not host:
            return None
        return host.lower()


def can_publish_links(scan: LinkScan) -> tuple[bool, str | None]:
    """Publish gate for a scan: any blocking link stops publishing."""
    if not scan.is_compliant:
        count = len(scan.blocking_issues)
        return False, f"{count} blocking link issue(s) must be fixed before publishing"
    return True, None
