"""
Links component unit tests.

Tests for link classification, body scans and site page helpers.
"""

from __future__ import annotations

import pytest

from src.components.links import (
    ClassifyLinkInput,
    LinkPolicyConfig,
    LinkPolicyEvaluator,
    LinkSeverity,
    LinkType,
    ScanLinksInput,
    extract_links,
    run_classify,
    run_scan,
)
from src.rules.models import EditorialRules, LinkRules

# --- Fixtures ---


@pytest.fixture
def evaluator() -> LinkPolicyEvaluator:
    return LinkPolicyEvaluator()


# --- Classification Tests ---


class TestClassify:
    def test_empty_url_is_invalid_error(self, evaluator: LinkPolicyEvaluator) -> None:
        result = evaluator.classify("")
        assert result.type == LinkType.INVALID
        assert result.severity == LinkSeverity.ERROR
        assert result.issues == ("Empty or invalid URL",)
        assert result.is_valid is False

    def test_none_url_is_invalid(self, evaluator: LinkPolicyEvaluator) -> None:
        assert evaluator.classify(None).type == LinkType.INVALID

    def test_anchor_is_clean(self, evaluator: LinkPolicyEvaluator) -> None:
        result = evaluator.classify("#faq")
        assert result.type == LinkType.ANCHOR
        assert result.severity == LinkSeverity.NONE

    def test_relative_path_is_internal(self, evaluator: LinkPolicyEvaluator) -> None:
        result = evaluator.classify("/online-degrees/nursing/")
        assert result.type == LinkType.INTERNAL
        assert result.severity == LinkSeverity.NONE

    def test_local_domain_is_internal(self, evaluator: LinkPolicyEvaluator) -> None:
        assert evaluator.classify("https://www.geteducated.com/x").type == LinkType.INTERNAL
        assert evaluator.classify("https://geteducated.com/x").type == LinkType.INTERNAL

    def test_local_subdomain_is_internal(self, evaluator: LinkPolicyEvaluator) -> None:
        assert evaluator.classify("https://blog.geteducated.com/").type == LinkType.INTERNAL

    def test_host_is_case_insensitive(self, evaluator: LinkPolicyEvaluator) -> None:
        assert evaluator.classify("https://WWW.GetEducated.COM/").type == LinkType.INTERNAL

    def test_missing_scheme_is_invalid(self, evaluator: LinkPolicyEvaluator) -> None:
        result = evaluator.classify("www.example.com/page")
        assert result.type == LinkType.INVALID
        assert result.severity == LinkSeverity.ERROR
        assert result.issues == ("Invalid URL format",)

    def test_unparseable_url_is_invalid(self, evaluator: LinkPolicyEvaluator) -> None:
        result = evaluator.classify("http://[::1")
        assert result.type == LinkType.INVALID

    def test_edu_is_blocking(self, evaluator: LinkPolicyEvaluator) -> None:
        result = evaluator.classify("https://www.harvard.edu/programs")
        assert result.type == LinkType.EXTERNAL
        assert result.severity == LinkSeverity.BLOCKING
        assert result.issues[0].startswith("Direct .edu links are not allowed")

    def test_edu_check_precedes_allow_list(self, evaluator: LinkPolicyEvaluator) -> None:
        # aacsb.edu is allow-listed but the suffix rule wins
        result = evaluator.classify("https://aacsb.edu/accreditation")
        assert result.severity == LinkSeverity.BLOCKING

    def test_competitor_is_blocking(self, evaluator: LinkPolicyEvaluator) -> None:
        result = evaluator.classify("https://www.usnews.com/best-colleges")
        assert result.severity == LinkSeverity.BLOCKING
        assert "Competitor link detected: usnews.com" in result.issues[0]

    def test_competitor_lookalike_is_not_blocking(
        self, evaluator: LinkPolicyEvaluator
    ) -> None:
        result = evaluator.classify("https://notusnews.com/")
        assert result.severity == LinkSeverity.WARNING

    def test_allow_listed_external_is_clean(self, evaluator: LinkPolicyEvaluator) -> None:
        result = evaluator.classify("https://www.bls.gov/ooh/")
        assert result.type == LinkType.EXTERNAL
        assert result.severity == LinkSeverity.NONE
        assert result.issues == ()

    def test_other_external_is_warning(self, evaluator: LinkPolicyEvaluator) -> None:
        result = evaluator.classify("https://example.com/article")
        assert result.severity == LinkSeverity.WARNING
        assert "example.com" in result.issues[0]
        assert result.is_valid is True

    def test_classification_is_deterministic(self, evaluator: LinkPolicyEvaluator) -> None:
        urls = ["https://mit.edu", "/x", "https://example.org", "#a", "bad"]
        first = [evaluator.classify(u) for u in urls]
        second = [evaluator.classify(u) for u in urls]
        assert first == second


class TestConfig:
    def test_from_rules_uses_rule_lists(self) -> None:
        rules = EditorialRules(
            links=LinkRules(
                local_domains=["example.org"],
                competitor_domains=["rival.com"],
                allowed_external_domains=["trusted.org"],
            )
        )
        evaluator = LinkPolicyEvaluator(LinkPolicyConfig.from_rules(rules))
        assert evaluator.classify("https://example.org/a").type == LinkType.INTERNAL
        assert evaluator.classify("https://rival.com").severity == LinkSeverity.BLOCKING
        assert evaluator.classify("https://trusted.org").severity == LinkSeverity.NONE
        assert evaluator.classify("https://www.usnews.com").severity == LinkSeverity.WARNING

    def test_config_is_immutable(self) -> None:
        config = LinkPolicyConfig.default()
        assert isinstance(config.competitor_domains, tuple)
        with pytest.raises(AttributeError):
            config.blocked_suffix = ".org"  # type: ignore[misc]


# --- Scan Tests ---


class TestScan:
    def test_extracts_links_in_order(self) -> None:
        html = (
            '<p><a href="/one">One</a> and <a class="x" href=\'https://bls.gov\'>BLS</a>'
            '<A HREF="#top">Top</A></p>'
        )
        links = extract_links(html)
        assert [link.url for link in links] == ["/one", "https://bls.gov", "#top"]
        assert links[1].anchor_text == "BLS"

    def test_extracts_anchors_with_nested_markup(self) -> None:
        html = '<p><a href="https://www.mit.edu/"><strong>MIT</strong>  <em>online</em></a></p>'
        links = extract_links(html)
        assert [link.url for link in links] == ["https://www.mit.edu/"]
        assert links[0].anchor_text == "MIT online"
        assert links[0].start_tag == '<a href="https://www.mit.edu/">'

    def test_extracts_unquoted_and_unclosed_hrefs(self) -> None:
        html = "<a href=https://www.niche.com/x>Niche</a><a href='/a'>open<a href=\"/b\">b</a>"
        links = extract_links(html)
        assert [link.url for link in links] == ["https://www.niche.com/x", "/a", "/b"]
        assert [link.anchor_text for link in links] == ["Niche", "open", "b"]

    def test_anchor_without_href_is_skipped(self) -> None:
        assert extract_links('<a name="top">Top</a><a href="">empty</a>') == []

    def test_empty_body_has_no_links(self, evaluator: LinkPolicyEvaluator) -> None:
        scan = evaluator.scan("")
        assert scan.total_links == 0
        assert scan.is_compliant is True

    def test_counts_and_buckets(self, evaluator: LinkPolicyEvaluator) -> None:
        html = (
            '<a href="/a">a</a>'
            '<a href="https://www.geteducated.com/b">b</a>'
            '<a href="#c">c</a>'
            '<a href="https://stanford.edu">Stanford</a>'
            '<a href="https://example.com">ex</a>'
            '<a href="nonsense">bad</a>'
        )
        scan = evaluator.scan(html)
        assert scan.internal_count == 2
        assert scan.anchor_count == 1
        assert scan.external_count == 2
        assert scan.invalid_count == 1
        assert scan.is_compliant is False
        assert [f.url for f in scan.blocking_issues] == ["https://stanford.edu"]
        assert scan.blocking_issues[0].anchor_text == "Stanford"
        assert [f.url for f in scan.warnings] == ["https://example.com"]
        assert [f.url for f in scan.errors] == ["nonsense"]

    def test_blocking_regardless_of_anchor_text(
        self, evaluator: LinkPolicyEvaluator
    ) -> None:
        html = '<a href="https://www.niche.com/">an official government source</a>'
        scan = evaluator.scan(html)
        assert scan.links[0].severity == LinkSeverity.BLOCKING


# --- Site Page Helper Tests ---


class TestSitePages:
    def test_school_page(self, evaluator: LinkPolicyEvaluator) -> None:
        assert evaluator.is_school_page("https://www.geteducated.com/online-schools/asu/")
        assert not evaluator.is_school_page("https://www.geteducated.com/online-degrees/")
        assert not evaluator.is_school_page(None)

    def test_degree_page(self, evaluator: LinkPolicyEvaluator) -> None:
        assert evaluator.is_degree_page("https://www.geteducated.com/online-degrees/mba/")

    def test_ranking_report(self, evaluator: LinkPolicyEvaluator) -> None:
        assert evaluator.is_ranking_report(
            "https://www.geteducated.com/online-college-ratings-and-rankings/best-mba/"
        )
        assert not evaluator.is_ranking_report("https://example.com/online-college-ratings-and-rankings/")

    def test_school_page_url(self, evaluator: LinkPolicyEvaluator) -> None:
        assert (
            evaluator.school_page_url("Arizona State University!")
            == "https://www.geteducated.com/online-schools/arizona-state-university/"
        )
        assert evaluator.school_page_url("") == ""


# --- Shell Function Tests ---


class TestShell:
    def test_run_classify(self, evaluator: LinkPolicyEvaluator) -> None:
        output = run_classify(ClassifyLinkInput(url="https://mit.edu"), evaluator)
        assert output.classification.severity == LinkSeverity.BLOCKING

    def test_run_scan_blocked(self, evaluator: LinkPolicyEvaluator) -> None:
        output = run_scan(ScanLinksInput(html='<a href="https://mit.edu">MIT</a>'), evaluator)
        assert output.can_publish is False
        assert output.reason is not None
        assert len(output.blocking_issues) == 1

    def test_run_scan_clean(self, evaluator: LinkPolicyEvaluator) -> None:
        output = run_scan(ScanLinksInput(html='<a href="/x">x</a>'), evaluator)
        assert output.can_publish is True
        assert output.reason is None
