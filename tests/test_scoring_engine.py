"""Tests for visibility scoring."""

import pytest

from brandlens.models import MentionContext, SentimentPolarity
from brandlens.services.scoring_engine import (
    BrandScore,
    MultiFactorScoringStrategy,
    ScoringWeights,
    SimpleScoringStrategy,
    VisibilityMetrics,
    batch_visibility_score,
    calculate_brand_prominence,
    generate_competitive_insights,
    get_strategy,
)


class TestSimpleScoringStrategy:
    """Tests for the presence-first score."""

    def test_present_first_no_competitors(self) -> None:
        result = SimpleScoringStrategy().compute_score(True, 0, 0)

        assert result.score == 100.0
        assert result.breakdown == {"base": 100.0, "prominence_bonus": 0.0, "competitor_penalty": 0.0}

    def test_cap_applies_before_penalty(self) -> None:
        result = SimpleScoringStrategy().compute_score(True, 0, 1)
        assert result.score == 95.0

    def test_penalty_capped(self) -> None:
        result = SimpleScoringStrategy().compute_score(True, 5, 10)

        assert result.score == 80.0
        assert result.breakdown["competitor_penalty"] == 20.0

    def test_absent_floors_at_zero(self) -> None:
        result = SimpleScoringStrategy().compute_score(False, None, 3)

        assert result.score == 0.0
        assert result.breakdown["base"] == 0.0
        assert result.breakdown["competitor_penalty"] == 15.0
        assert result.insights[0] == "Brand is not mentioned"

    def test_score_from_metrics(self) -> None:
        metrics = VisibilityMetrics(brand_present=True, brand_position=1, competitor_count=2)
        assert SimpleScoringStrategy().score(metrics).score == 90.0

    def test_bounded(self) -> None:
        strategy = SimpleScoringStrategy()
        for present in (True, False):
            for index in (None, 0, 1, 2, 3, 7):
                for competitors in (0, 1, 4, 9):
                    score = strategy.compute_score(present, index, competitors).score
                    assert 0.0 <= score <= 100.0


class TestMultiFactorScoringStrategy:
    """Tests for the weighted multi-factor score."""

    def test_full_breakdown(self) -> None:
        metrics = VisibilityMetrics(
            brand_present=True,
            brand_position=0,
            sentiment=SentimentPolarity.POSITIVE,
            sentiment_confidence=0.8,
            context=MentionContext.RECOMMENDATION,
            competitor_count=1,
            brand_prominence=0.6,
        )

        result = MultiFactorScoringStrategy().compute(metrics)

        assert result.breakdown["presence"] == pytest.approx(9.0)
        assert result.breakdown["position"] == pytest.approx(4.0)
        assert result.breakdown["sentiment"] == pytest.approx(5.0)
        assert result.breakdown["context"] == pytest.approx(1.0)
        assert result.breakdown["competition"] == pytest.approx(0.2)
        assert result.breakdown["prominence"] == pytest.approx(0.15)
        assert result.score == pytest.approx(19.35)
        assert "Brand mentioned first - excellent positioning" in result.insights

    def test_absent_short_circuits(self) -> None:
        metrics = VisibilityMetrics(brand_present=False, competitor_count=4)

        result = MultiFactorScoringStrategy().compute(metrics)

        assert result.score == 0.0
        assert set(result.breakdown) == {"presence", "competition"}
        assert result.breakdown["competition"] == pytest.approx(-1.2)

    def test_neutral_and_late(self) -> None:
        metrics = VisibilityMetrics(brand_present=True, brand_position=12, competitor_count=7)

        result = MultiFactorScoringStrategy().compute(metrics)

        assert result.breakdown["position"] == 0.0
        assert result.breakdown["sentiment"] == pytest.approx(1.25)
        assert result.breakdown["competition"] == pytest.approx(-1.0)
        assert "Heavy competition (7 competitors)" in result.insights

    def test_negative_sentiment(self) -> None:
        metrics = VisibilityMetrics(
            brand_present=True,
            brand_position=0,
            sentiment=SentimentPolarity.NEGATIVE,
            sentiment_confidence=0.8,
        )
        result = MultiFactorScoringStrategy().compute(metrics)
        assert result.breakdown["sentiment"] == pytest.approx(-5.0)

    def test_weight_overrides(self) -> None:
        weights = ScoringWeights.from_dict({"presence": 1.0, "bogus": 5})
        metrics = VisibilityMetrics(brand_present=True)

        result = MultiFactorScoringStrategy().compute(metrics, weights)

        assert weights.to_dict()["presence"] == 1.0
        assert "bogus" not in weights.to_dict()
        assert result.breakdown["presence"] == pytest.approx(30.0)

    def test_clamped_to_100(self) -> None:
        weights = ScoringWeights.from_dict({key: 10.0 for key in ScoringWeights().to_dict()})
        metrics = VisibilityMetrics(
            brand_present=True,
            brand_position=0,
            sentiment=SentimentPolarity.POSITIVE,
            sentiment_confidence=0.9,
        )
        assert MultiFactorScoringStrategy().compute(metrics, weights).score == 100.0


class TestStrategies:
    def test_default_is_simple(self) -> None:
        assert isinstance(get_strategy(), SimpleScoringStrategy)

    def test_by_name(self) -> None:
        assert isinstance(get_strategy("multi_factor"), MultiFactorScoringStrategy)

    def test_instance_passthrough(self) -> None:
        strategy = MultiFactorScoringStrategy()
        assert get_strategy(strategy) is strategy

    def test_unknown(self) -> None:
        with pytest.raises(ValueError):
            get_strategy("nope")


class TestProminence:
    def test_all_components_maxed(self) -> None:
        assert calculate_brand_prominence(2, 4, 0, 500) == pytest.approx(1.0)

    def test_late_first_mention(self) -> None:
        assert calculate_brand_prominence(1, 2, 20, 1000) == pytest.approx(0.6)

    def test_zero_brands(self) -> None:
        assert calculate_brand_prominence(0, 0, 0, 0) == pytest.approx(0.3)


class TestCompetitiveInsights:
    def _scores(self):
        return [
            BrandScore("Acme", 10.0, {"sentiment": 1.0, "position": 1.0, "context": 1.0}),
            BrandScore("Globex", 40.0, {"sentiment": 6.25, "position": 4.0}),
            BrandScore("Initech", 25.0, {"position": 4.0, "context": 1.0}),
            BrandScore("Umbrella", 5.0, {}),
            BrandScore("Hooli", 1.0, {"prominence": 0.1}),
        ]

    def test_ranking_and_advantages(self) -> None:
        insights = generate_competitive_insights("acme", self._scores())

        assert insights.user_rank == 3
        assert insights.user_score == 10.0
        assert [c.brand for c in insights.top_competitors] == ["Globex", "Initech", "Umbrella"]
        assert [c.advantage for c in insights.top_competitors] == [
            "Strong positive sentiment",
            "Early mention positioning",
            "Overall strong presence",
        ]

    def test_opportunities_and_threats(self) -> None:
        insights = generate_competitive_insights("Acme", self._scores())

        assert len(insights.opportunities) == 3
        assert insights.threats == ["Globex has significantly higher visibility (40.0 vs 10.0)"]

    def test_user_absent(self) -> None:
        insights = generate_competitive_insights("Nobody", self._scores())

        assert insights.user_rank == 0
        assert insights.user_score == 0.0
        assert insights.opportunities == []

    def test_batch_scores(self) -> None:
        results = batch_visibility_score([
            {"brand": "Acme", "metrics": VisibilityMetrics(brand_present=True, brand_position=0)},
            {"brand": "Globex", "metrics": VisibilityMetrics(brand_present=False)},
        ])

        assert [r.brand for r in results] == ["Acme", "Globex"]
        assert results[0].score > results[1].score
        assert results[1].score == 0.0
