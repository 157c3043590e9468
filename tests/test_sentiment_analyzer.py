"""Tests for brand sentiment and context classification."""

import pytest

from brandlens.adapters.parsing.sentiment_analyzer import (
    BrandSentiment,
    SentimentAnalyzer,
    classify,
)
from brandlens.models import MentionContext, SentimentPolarity


@pytest.fixture
def analyzer() -> SentimentAnalyzer:
    return SentimentAnalyzer()


class TestClassify:
    def test_positive(self) -> None:
        result = classify("Acme", "", "Acme is excellent and the best fit.")

        assert result.sentiment == SentimentPolarity.POSITIVE
        assert result.confidence == pytest.approx(0.8)
        assert result.brand == "Acme"

    def test_negative(self) -> None:
        result = classify("Acme", "", "Avoid Acme, it has issues.")

        assert result.sentiment == SentimentPolarity.NEGATIVE
        assert result.confidence == pytest.approx(0.8)

    def test_neutral(self) -> None:
        result = classify("Acme", "", "Acme was founded in 2010.")

        assert result.sentiment == SentimentPolarity.NEUTRAL
        assert result.confidence == 0.5
        assert result.context == MentionContext.MENTION

    def test_negation_wins(self) -> None:
        result = classify("Acme", "", "I would not recommend Acme, even though it is the best known.")

        assert result.sentiment == SentimentPolarity.NEGATIVE
        assert result.confidence == pytest.approx(0.6)
        assert "Negation" in result.reasoning

    def test_negation_in_another_clause_wins(self) -> None:
        result = classify("Acme", "", "Acme is the best, but I would not recommend it for small teams.")

        assert result.sentiment == SentimentPolarity.NEGATIVE
        assert result.confidence == pytest.approx(0.6)
        assert result.reasoning == "Negation detected in positive context"

    def test_negation_limited_to_brand_sentence(self) -> None:
        text = "I would not recommend Globex. Acme is excellent."

        assert classify("Acme", "", text).sentiment == SentimentPolarity.POSITIVE
        assert classify("Globex", "", text).sentiment == SentimentPolarity.NEGATIVE

    def test_contracted_negation(self) -> None:
        result = classify("Acme", "", "Acme isn’t good for small teams.")

        assert result.sentiment == SentimentPolarity.NEGATIVE
        assert result.confidence == pytest.approx(0.6)

    def test_confidence_capped(self) -> None:
        text = "Use Acme: Acme is excellent, Acme offers and Acme provides the best, top, leading, ideal setup"
        result = classify("Acme", "", text)

        assert result.sentiment == SentimentPolarity.POSITIVE
        assert result.confidence == pytest.approx(0.9)

    def test_falls_back_to_mention_context(self) -> None:
        result = classify("Acme", "you should try Acme", "Nothing relevant here.")

        assert result.sentiment == SentimentPolarity.POSITIVE
        assert result.context == MentionContext.RECOMMENDATION

    def test_scores_only_the_brand_clause(self) -> None:
        text = "Acme is excellent, but Globex has issues."

        acme = classify("Acme", "", text)
        globex = classify("Globex", "", text)

        assert acme.sentiment == SentimentPolarity.POSITIVE
        assert acme.confidence == pytest.approx(0.6)
        assert globex.sentiment == SentimentPolarity.NEGATIVE
        assert globex.confidence == pytest.approx(0.6)


class TestSelectRelevantText:
    def test_sentence_and_clause(self, analyzer: SentimentAnalyzer) -> None:
        sentence, clause = analyzer.select_relevant_text(
            "Globex", "", "Intro. Acme is great, but Globex lags behind. Outro."
        )

        assert sentence == "Acme is great, but Globex lags behind"
        assert clause == "Globex lags behind"

    def test_mention_context_fallback(self, analyzer: SentimentAnalyzer) -> None:
        assert analyzer.select_relevant_text("Acme", "try Acme", "Nothing here.") == ("try Acme", "try Acme")


class TestContextType:
    def test_recommendation(self, analyzer: SentimentAnalyzer) -> None:
        assert analyzer.determine_context_type("we suggest Acme") == MentionContext.RECOMMENDATION

    def test_comparison(self, analyzer: SentimentAnalyzer) -> None:
        assert analyzer.determine_context_type("Acme vs Globex for billing") == MentionContext.COMPARISON

    def test_example(self, analyzer: SentimentAnalyzer) -> None:
        assert analyzer.determine_context_type("Tools such as Acme help") == MentionContext.EXAMPLE

    def test_short_keywords_need_word_boundaries(self, analyzer: SentimentAnalyzer) -> None:
        assert analyzer.determine_context_type("Acme is likely fine") == MentionContext.MENTION
        assert analyzer.determine_context_type("Acme is like Globex") == MentionContext.COMPARISON

    def test_recommendation_takes_priority(self, analyzer: SentimentAnalyzer) -> None:
        text = "Compared to Globex, we recommend Acme"
        assert analyzer.determine_context_type(text) == MentionContext.RECOMMENDATION


class TestSentimentFilters:
    def _sentiment(self, brand, polarity, confidence, context=MentionContext.MENTION) -> BrandSentiment:
        return BrandSentiment(
            brand=brand,
            sentiment=polarity,
            confidence=confidence,
            context=context,
            reasoning=f"{brand} reasoning",
        )

    def test_filter_by_sentiment(self, analyzer: SentimentAnalyzer) -> None:
        sentiments = [
            self._sentiment("A", SentimentPolarity.POSITIVE, 0.4),
            self._sentiment("B", SentimentPolarity.NEUTRAL, 0.5),
            self._sentiment("C", SentimentPolarity.NEUTRAL, 0.3),
            self._sentiment("D", SentimentPolarity.NEGATIVE, 0.8),
            self._sentiment("E", SentimentPolarity.NEGATIVE, 0.8, MentionContext.COMPARISON),
        ]

        kept = analyzer.filter_brands_by_sentiment(sentiments)
        assert [s.brand for s in kept] == ["A", "B", "E"]

        without_neutral = analyzer.filter_brands_by_sentiment(sentiments, include_neutral=False)
        assert [s.brand for s in without_neutral] == ["A", "E"]

    def test_competitive_positioning(self, analyzer: SentimentAnalyzer) -> None:
        sentiments = [
            self._sentiment("Acme", SentimentPolarity.POSITIVE, 0.4),
            self._sentiment("Globex", SentimentPolarity.POSITIVE, 0.8),
            self._sentiment("Initech", SentimentPolarity.NEGATIVE, 0.8),
            self._sentiment("Umbrella", SentimentPolarity.POSITIVE, 0.4),
        ]

        positioning = analyzer.analyze_competitive_positioning("acme", sentiments)

        assert positioning.user_advantages == ["Acme reasoning"]
        assert positioning.user_weaknesses == []
        assert positioning.competitor_strengths == [{"brand": "Globex", "strength": "Globex reasoning"}]
        assert positioning.competitor_weaknesses == [{"brand": "Initech", "weakness": "Initech reasoning"}]
