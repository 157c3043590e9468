"""Tests for brand matching."""

import pytest

from brandlens.adapters.parsing.brand_matcher import (
    BrandCatalogEntry,
    BrandMatcher,
    BrandMention,
    enhanced_normalize,
    find_matches,
    is_org_mention,
    is_relevant_brand_mention,
    match_user_brand,
    normalize,
)
from brandlens.models import MatchType


class TestNormalize:
    def test_strips_punctuation_and_case(self) -> None:
        assert normalize("ACME, Inc.") == "acme inc"

    def test_idempotent(self) -> None:
        for value in ["ACME, Inc.", "  Tech   Corp!! ", "foo-bar.io", ""]:
            assert normalize(normalize(value)) == normalize(value)

    def test_enhanced_keeps_dots_and_dashes(self) -> None:
        assert enhanced_normalize("Acme.io") == "acme"
        assert enhanced_normalize("Foo-Bar.ai") == "foo-bar.ai"
        assert enhanced_normalize("  Big   Co! ") == "big co"


class TestCatalogEntry:
    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValueError):
            BrandCatalogEntry("  ")

    def test_terms_include_variants(self) -> None:
        entry = BrandCatalogEntry("Acme", variants=["Acme Inc", ""])
        assert entry.terms == ["Acme", "Acme Inc"]


class TestFindMatches:
    def test_exact_match(self) -> None:
        catalog = [BrandCatalogEntry("TechCorp", is_org_brand=True)]
        mentions = find_matches("I recommend TechCorp for this.", catalog)

        assert len(mentions) == 1
        mention = mentions[0]
        assert mention.brand == "TechCorp"
        assert mention.confidence == 1.0
        assert mention.match_type == MatchType.EXACT
        assert mention.position == 12
        assert mention.is_org_brand is True
        assert "TechCorp" in mention.context_window

    def test_fuzzy_match(self) -> None:
        catalog = [BrandCatalogEntry("Salesforce")]
        mentions = find_matches("Many teams use Salesforse daily", catalog)

        assert len(mentions) == 1
        assert mentions[0].match_type == MatchType.FUZZY
        assert mentions[0].confidence == pytest.approx(0.9)
        assert mentions[0].position == 15

    def test_short_terms_not_fuzzy_matched(self) -> None:
        catalog = [BrandCatalogEntry("Zap")]
        assert find_matches("zip zop zup", catalog) == []

    def test_one_mention_per_brand_position(self) -> None:
        catalog = [BrandCatalogEntry("Acme", variants=("ACME",))]
        mentions = find_matches("Acme is fine. Later, acme again.", catalog)

        keys = [(m.brand, m.position) for m in mentions]
        assert len(keys) == len(set(keys))
        assert {m.position for m in mentions} == {0, 21}

    def test_sorted_by_confidence_then_position(self) -> None:
        catalog = [BrandCatalogEntry("Globex"), BrandCatalogEntry("Initech")]
        mentions = find_matches("Initech and Globx and Globex", catalog)

        confidences = [m.confidence for m in mentions]
        assert confidences == sorted(confidences, reverse=True)
        exact = [m for m in mentions if m.confidence == 1.0]
        assert [m.position for m in exact] == sorted(m.position for m in exact)

    def test_empty_inputs(self) -> None:
        assert find_matches("", [BrandCatalogEntry("Acme")]) == []
        assert find_matches("Acme", []) == []

    def test_context_window_bounds(self) -> None:
        text = "x" * 300 + " Acme " + "y" * 300
        mentions = find_matches(text, [BrandCatalogEntry("Acme")])

        assert mentions[0].context_window == text[201:405]

    def test_matcher_helpers(self) -> None:
        catalog = [
            BrandCatalogEntry("Acme", is_org_brand=True),
            BrandCatalogEntry("Globex"),
        ]
        matcher = BrandMatcher(catalog)
        mentions = matcher.find_mentions("Globex first, then Acme")

        assert {(m.brand, m.is_org_brand) for m in mentions} == {("Acme", True), ("Globex", False)}
        assert matcher.is_org_mention("Globex") is True
        assert matcher.match_user_brand("acme").is_match is True
        assert matcher.match_user_brand("Globex").is_match is False


class TestIsOrgMention:
    def test_short_tokens_rejected_even_if_listed(self) -> None:
        assert is_org_mention("ABC", [BrandCatalogEntry("ABC")]) is False

    def test_equality_and_containment(self) -> None:
        catalog = [BrandCatalogEntry("TechCorp", variants=("TC Labs",))]
        assert is_org_mention("techcorp", catalog) is True
        assert is_org_mention("TechCorp Inc", catalog) is True
        assert is_org_mention("tc labs", catalog) is True
        assert is_org_mention("Globex", catalog) is False

    def test_empty_catalog(self) -> None:
        assert is_org_mention("TechCorp", []) is False


class TestMatchUserBrand:
    def test_exact_and_variant(self) -> None:
        catalog = [BrandCatalogEntry("Acme Corp", variants=("Acme",), is_org_brand=True)]

        exact = match_user_brand("acme corp", catalog)
        assert exact.is_match and exact.confidence == 1.0
        assert exact.match_type == MatchType.EXACT

        variant = match_user_brand("ACME", catalog)
        assert variant.is_match and variant.match_type == MatchType.VARIANT
        assert variant.matched_brand == "Acme Corp"

    def test_partial_match(self) -> None:
        catalog = [BrandCatalogEntry("Hubspot", is_org_brand=True)]
        result = match_user_brand("Hubspot CRM", catalog)

        assert result.is_match is True
        assert result.match_type == MatchType.PARTIAL
        assert result.confidence == pytest.approx(7 / 11)

    def test_fuzzy_match(self) -> None:
        catalog = [BrandCatalogEntry("Notion", is_org_brand=True)]
        result = match_user_brand("Notiom", catalog)

        assert result.is_match is True
        assert result.match_type == MatchType.FUZZY
        assert result.confidence == pytest.approx(5 / 6)

    def test_competitors_ignored(self) -> None:
        catalog = [BrandCatalogEntry("Globex")]
        assert match_user_brand("Globex", catalog).is_match is False

    def test_empty_token(self) -> None:
        result = match_user_brand("", [BrandCatalogEntry("Acme", is_org_brand=True)])
        assert result.is_match is False
        assert result.confidence == 0.0


class TestRelevantMention:
    def _mention(self, context: str) -> BrandMention:
        return BrandMention(
            brand="Acme",
            confidence=1.0,
            match_type=MatchType.EXACT,
            position=0,
            context_window=context,
        )

    def test_generic_example_rejected(self) -> None:
        assert is_relevant_brand_mention(self._mention("tools such as Acme")) is False

    def test_dismissive_rejected(self) -> None:
        assert is_relevant_brand_mention(self._mention("avoid Acme entirely")) is False

    def test_plain_mention_kept(self) -> None:
        assert is_relevant_brand_mention(self._mention("Acme handles billing")) is True
