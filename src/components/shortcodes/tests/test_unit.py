"""
Shortcodes component unit tests.

Tests for parsing, parameter rules, registry checks and generators.
"""

from __future__ import annotations

import pytest

from src.components.shortcodes import (
    CheckMonetizationInput,
    ExtractShortcodesInput,
    InvalidReferenceError,
    ShortcodeConfig,
    ShortcodePolicyEvaluator,
    ShortcodeType,
    ValidateShortcodesInput,
    build_degree_offer_shortcode,
    build_degree_table_shortcode,
    build_external_citation_shortcode,
    build_internal_link_shortcode,
    build_monetization_shortcode,
    run_check_monetization,
    run_extract,
    run_validate,
)
from src.domain.entities import MonetizationCategory, MonetizationLevel
from src.rules.models import ShortcodeRules

# --- Mock Implementations ---


class MockRegistry:
    """In-memory identifier registry for testing."""

    def __init__(self) -> None:
        self.categories: dict[tuple[int, int], MonetizationCategory] = {
            (5, 12): MonetizationCategory(
                category_id=5, concentration_id=12, category="Nursing", concentration="RN to BSN"
            )
        }
        self.levels: dict[int, MonetizationLevel] = {
            3: MonetizationLevel(level_code=3, level_name="Bachelor")
        }
        self.calls = 0

    def get_category(
        self, category_id: int, concentration_id: int
    ) -> MonetizationCategory | None:
        self.calls += 1
        return self.categories.get((category_id, concentration_id))

    def get_level(self, level_code: int) -> MonetizationLevel | None:
        self.calls += 1
        return self.levels.get(level_code)


class UnreachableRegistry:
    def get_category(self, category_id: int, concentration_id: int) -> MonetizationCategory:
        raise ConnectionError("registry down")

    def get_level(self, level_code: int) -> MonetizationLevel:
        raise ConnectionError("registry down")


# --- Fixtures ---


@pytest.fixture
def evaluator() -> ShortcodePolicyEvaluator:
    return ShortcodePolicyEvaluator()


@pytest.fixture
def registry() -> MockRegistry:
    return MockRegistry()


# --- Extraction Tests ---


class TestExtract:
    def test_empty_body(self, evaluator: ShortcodePolicyEvaluator) -> None:
        assert evaluator.extract("") == []
        assert evaluator.extract(None) == []

    def test_legacy_monetization(self, evaluator: ShortcodePolicyEvaluator) -> None:
        [sc] = evaluator.extract(
            '<p>[ge_monetization category_id="5" concentration_id="12" level="3"]</p>'
        )
        assert sc.type == ShortcodeType.MONETIZATION
        assert sc.category_id == 5
        assert sc.concentration_id == 12
        assert sc.level_code == 3
        assert sc.position == 3

    def test_degree_table_defaults(self, evaluator: ShortcodePolicyEvaluator) -> None:
        [sc] = evaluator.extract('[degree_table category="5" concentration="12"]')
        assert sc.type == ShortcodeType.DEGREE_TABLE
        assert sc.max_programs == 5
        assert sc.sponsored_first is True

    def test_degree_table_explicit(self, evaluator: ShortcodePolicyEvaluator) -> None:
        [sc] = evaluator.extract(
            "[degree_table category='5' concentration='12' max='8' sponsored_first='false']"
        )
        assert sc.max_programs == 8
        assert sc.sponsored_first is False

    def test_degree_offer(self, evaluator: ShortcodePolicyEvaluator) -> None:
        [sc] = evaluator.extract('[degree_offer program_id="abc-1" school_id="9"]')
        assert sc.type == ShortcodeType.DEGREE_OFFER
        assert sc.program_id == "abc-1"
        assert sc.school_id == "9"
        assert sc.highlight is True

    def test_paired_link_folds_closing_tag(self, evaluator: ShortcodePolicyEvaluator) -> None:
        html = 'See [ge_internal_link url="/online-degrees/"]our degrees[/ge_internal_link].'
        [sc] = evaluator.extract(html)
        assert sc.type == ShortcodeType.INTERNAL_LINK
        assert sc.url == "/online-degrees/"
        assert sc.anchor_text == "our degrees"
        assert sc.raw.endswith("[/ge_internal_link]")

    def test_order_of_appearance(self, evaluator: ShortcodePolicyEvaluator) -> None:
        html = (
            '[degree_offer program_id="p"]'
            '[ge_external_cited url="https://bls.gov"]BLS[/ge_external_cited]'
            '[ge_monetization category_id="1" concentration_id="2"]'
        )
        types = [sc.type for sc in evaluator.extract(html)]
        assert types == [
            ShortcodeType.DEGREE_OFFER,
            ShortcodeType.EXTERNAL_CITED,
            ShortcodeType.MONETIZATION,
        ]

    def test_unknown_tags_are_unrecognized(self, evaluator: ShortcodePolicyEvaluator) -> None:
        instances = evaluator.extract("[gallery ids='1,2'][/gallery]")
        assert [i.type for i in instances] == [
            ShortcodeType.UNRECOGNIZED,
            ShortcodeType.UNRECOGNIZED,
        ]
        assert instances[1].is_closing is True

    def test_tags_are_case_insensitive(self, evaluator: ShortcodePolicyEvaluator) -> None:
        [sc] = evaluator.extract('[DEGREE_OFFER program_id="p"]')
        assert sc.type == ShortcodeType.DEGREE_OFFER

    def test_extra_allowed_tag_is_passthrough(self) -> None:
        config = ShortcodeConfig.from_rules(ShortcodeRules(extra_allowed_tags=["caption"]))
        evaluator = ShortcodePolicyEvaluator(config)
        [sc] = evaluator.extract("[caption width='300']")
        assert sc.type == ShortcodeType.PASSTHROUGH
        assert evaluator.validate_params(sc).is_valid is True


# --- Structural Parameter Tests ---


class TestStructuralRules:
    def test_monetization_requires_positive_ids(
        self, evaluator: ShortcodePolicyEvaluator
    ) -> None:
        [sc] = evaluator.extract('[ge_monetization category_id="0" concentration_id="x"]')
        check = evaluator.validate_params(sc)
        assert check.is_valid is False
        assert "category_id must be a positive integer" in check.errors
        assert "concentration_id must be a positive integer" in check.errors

    def test_monetization_optional_level_must_be_positive(
        self, evaluator: ShortcodePolicyEvaluator
    ) -> None:
        [sc] = evaluator.extract('[ge_monetization category_id="1" concentration_id="2" level="-1"]')
        assert evaluator.validate_params(sc).errors == ("level must be a positive integer",)

    def test_degree_table_missing_category(self, evaluator: ShortcodePolicyEvaluator) -> None:
        [sc] = evaluator.extract('[degree_table concentration="2"]')
        assert "category must be a positive integer" in evaluator.validate_params(sc).errors

    def test_degree_table_bad_flag(self, evaluator: ShortcodePolicyEvaluator) -> None:
        [sc] = evaluator.extract(
            '[degree_table category="1" concentration="2" sponsored_first="maybe"]'
        )
        assert evaluator.validate_params(sc).is_valid is False

    def test_degree_offer_requires_program(self, evaluator: ShortcodePolicyEvaluator) -> None:
        [sc] = evaluator.extract('[degree_offer school_id="3"]')
        assert evaluator.validate_params(sc).errors == ("program_id is required",)

    def test_link_requires_url(self, evaluator: ShortcodePolicyEvaluator) -> None:
        [sc] = evaluator.extract("[ge_internal_link]text[/ge_internal_link]")
        assert evaluator.validate_params(sc).errors == ("url is required",)

    def test_unrecognized_is_invalid(self, evaluator: ShortcodePolicyEvaluator) -> None:
        [sc] = evaluator.extract("[made_up]")
        check = evaluator.validate_params(sc)
        assert check.is_valid is False
        assert check.errors[0].startswith("Unknown shortcode tag")

    def test_valid_without_registry_is_unverified(
        self, evaluator: ShortcodePolicyEvaluator
    ) -> None:
        [sc] = evaluator.extract('[degree_table category="1" concentration="2"]')
        check = evaluator.validate_params(sc)
        assert check.is_valid is True
        assert check.verified is False

    def test_link_needs_no_registry(self, evaluator: ShortcodePolicyEvaluator) -> None:
        [sc] = evaluator.extract('[ge_internal_link url="/x"]x[/ge_internal_link]')
        check = evaluator.validate_params(sc)
        assert check.is_valid is True
        assert check.verified is True


# --- Registry Tests ---


class TestRegistry:
    def test_known_identifiers_verified(self, registry: MockRegistry) -> None:
        evaluator = ShortcodePolicyEvaluator(registry=registry)
        [sc] = evaluator.extract('[ge_monetization category_id="5" concentration_id="12" level="3"]')
        check = evaluator.validate_params(sc)
        assert check.is_valid is True
        assert check.verified is True

    def test_missing_category_raises_invalid_reference(self, registry: MockRegistry) -> None:
        evaluator = ShortcodePolicyEvaluator(registry=registry)
        [sc] = evaluator.extract('[degree_table category="9" concentration="9"]')
        with pytest.raises(InvalidReferenceError) as exc_info:
            evaluator.verify_references(sc)
        assert exc_info.value.value == (9, 9)

    def test_missing_level_becomes_error(self, registry: MockRegistry) -> None:
        evaluator = ShortcodePolicyEvaluator(registry=registry)
        [sc] = evaluator.extract('[ge_monetization category_id="5" concentration_id="12" level="7"]')
        check = evaluator.validate_params(sc)
        assert check.is_valid is False
        assert check.errors == ("Invalid level code: 7",)

    def test_unreachable_registry_degrades_to_unverified(self) -> None:
        evaluator = ShortcodePolicyEvaluator(registry=UnreachableRegistry())
        [sc] = evaluator.extract('[degree_table category="1" concentration="2"]')
        check = evaluator.validate_params(sc)
        assert check.is_valid is True
        assert check.verified is False

    def test_registry_skipped_when_disabled(self, registry: MockRegistry) -> None:
        evaluator = ShortcodePolicyEvaluator(registry=registry)
        [sc] = evaluator.extract('[degree_table category="9" concentration="9"]')
        check = evaluator.validate_params(sc, use_registry=False)
        assert check.is_valid is True
        assert registry.calls == 0


# --- Unknown Shortcode Tests ---


class TestUnknown:
    def test_clean_body(self, evaluator: ShortcodePolicyEvaluator) -> None:
        check = evaluator.check_unknown('[degree_offer program_id="p"]')
        assert check.is_valid is True
        assert check.message == "All shortcodes are valid"

    def test_unknown_blocks(self, evaluator: ShortcodePolicyEvaluator) -> None:
        check = evaluator.check_unknown("[gallery][/gallery][embed]")
        assert check.is_valid is False
        assert len(check.unknown) == 3
        assert check.unique_tags == ("gallery", "embed")
        assert check.message == "Found 3 unknown shortcode(s): gallery, embed"

    def test_unknown_without_blocking_still_lists(
        self, evaluator: ShortcodePolicyEvaluator
    ) -> None:
        check = evaluator.check_unknown("[gallery]", block_unknown=False)
        assert check.is_valid is True
        assert check.unique_tags == ("gallery",)

    def test_extra_allowlist(self, evaluator: ShortcodePolicyEvaluator) -> None:
        assert evaluator.find_unknown("[gallery]", extra_allowlist=("gallery",)) == []


# --- Monetization Presence Tests ---


class TestMonetizationPresence:
    def test_none_present(self, evaluator: ShortcodePolicyEvaluator) -> None:
        presence = evaluator.check_monetization_presence("<p>No codes</p>")
        assert presence.has_monetization is False
        assert presence.count == 0
        assert presence.recommendation is not None
        assert presence.recommendation.startswith("Add at least one monetization shortcode")

    def test_legacy_only_recommends_upgrade(self, evaluator: ShortcodePolicyEvaluator) -> None:
        presence = evaluator.check_monetization_presence(
            '[ge_monetization category_id="1" concentration_id="2"]'
        )
        assert presence.has_monetization is True
        assert presence.breakdown["monetization"] == 1
        assert presence.recommendation is not None
        assert "legacy" in presence.recommendation

    def test_modern_codes_no_recommendation(self, evaluator: ShortcodePolicyEvaluator) -> None:
        presence = evaluator.check_monetization_presence(
            '[degree_table category="1" concentration="2"][degree_offer program_id="p"]'
        )
        assert presence.count == 2
        assert presence.breakdown == {"degree_table": 1, "degree_offer": 1, "monetization": 0}
        assert presence.recommendation is None


# --- Generator Tests ---


class TestGenerators:
    def test_monetization(self) -> None:
        assert (
            build_monetization_shortcode(5, 12, 3)
            == '[ge_monetization category_id="5" concentration_id="12" level="3"]'
        )

    def test_monetization_requires_ids(self) -> None:
        with pytest.raises(ValueError):
            build_monetization_shortcode(None, 12)

    def test_degree_table(self) -> None:
        assert (
            build_degree_table_shortcode(5, 12, sponsored_first=False)
            == '[degree_table category="5" concentration="12" max="5" sponsored_first="false"]'
        )

    def test_degree_offer(self) -> None:
        assert (
            build_degree_offer_shortcode("p1", "s1")
            == '[degree_offer program_id="p1" school_id="s1" highlight="true"]'
        )
        with pytest.raises(ValueError):
            build_degree_offer_shortcode("")

    def test_internal_link_strips_local_domain(self) -> None:
        assert (
            build_internal_link_shortcode("https://www.geteducated.com/online-degrees/", "degrees")
            == '[ge_internal_link url="/online-degrees/"]degrees[/ge_internal_link]'
        )

    def test_external_citation(self) -> None:
        assert (
            build_external_citation_shortcode("https://www.bls.gov/ooh/", "BLS")
            == '[ge_external_cited url="https://www.bls.gov/ooh/"]BLS[/ge_external_cited]'
        )

    def test_generated_codes_parse_back_valid(self, evaluator: ShortcodePolicyEvaluator) -> None:
        html = build_degree_table_shortcode(1, 2, 3) + build_degree_offer_shortcode("p")
        for sc in evaluator.extract(html):
            assert evaluator.validate_params(sc).is_valid


# --- Shell Function Tests ---


class TestShell:
    def test_run_extract(self, evaluator: ShortcodePolicyEvaluator) -> None:
        output = run_extract(ExtractShortcodesInput(html='[degree_offer program_id="p"]'), evaluator)
        assert output.total == 1

    def test_run_validate_reports_invalid_and_unknown(
        self, evaluator: ShortcodePolicyEvaluator
    ) -> None:
        html = '[degree_offer][gallery][degree_table category="1" concentration="2"]'
        output = run_validate(ValidateShortcodesInput(html=html), evaluator)
        assert output.is_valid is False
        assert [i.tag for i in output.invalid] == ["degree_offer"]
        assert output.unknown is not None
        assert output.unknown.unique_tags == ("gallery",)
        assert [i.tag for i in output.unverified] == ["degree_table"]

    def test_run_check_monetization(self, evaluator: ShortcodePolicyEvaluator) -> None:
        presence = run_check_monetization(CheckMonetizationInput(html=""), evaluator)
        assert presence.has_monetization is False
