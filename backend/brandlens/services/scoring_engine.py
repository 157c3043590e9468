"""
Visibility Scoring Engine
Calculates transparent, explainable visibility scores
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional, Sequence, Union

from brandlens.config import (
    DEFAULT_SCORING_WEIGHTS,
    SIMPLE_COMPETITOR_PENALTY,
    SIMPLE_COMPETITOR_PENALTY_CAP,
    SIMPLE_PROMINENCE_BONUS,
)
from brandlens.models import MentionContext, SentimentPolarity


@dataclass
class ScoringWeights:
    """Coefficients applied to each multi-factor sub-score"""
    presence: float = DEFAULT_SCORING_WEIGHTS["presence"]
    position: float = DEFAULT_SCORING_WEIGHTS["position"]
    sentiment: float = DEFAULT_SCORING_WEIGHTS["sentiment"]
    context: float = DEFAULT_SCORING_WEIGHTS["context"]
    competition: float = DEFAULT_SCORING_WEIGHTS["competition"]
    prominence: float = DEFAULT_SCORING_WEIGHTS["prominence"]

    @classmethod
    def from_dict(cls, overrides: Optional[Dict[str, float]] = None) -> "ScoringWeights":
        """Defaults with any known keys overridden"""
        values = dict(DEFAULT_SCORING_WEIGHTS)
        for key, value in (overrides or {}).items():
            if key in values:
                values[key] = float(value)
        return cls(**values)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass
class VisibilityMetrics:
    """Per-brand observations that feed the multi-factor score"""
    brand_present: bool
    brand_position: Optional[int] = None   # Rank among detected brands, 0 = first
    brand_mentions: int = 0
    competitor_count: int = 0
    competitor_mentions: int = 0
    sentiment: SentimentPolarity = SentimentPolarity.NEUTRAL
    sentiment_confidence: float = 0.5
    context: MentionContext = MentionContext.MENTION
    response_length: int = 0
    brand_prominence: float = 0.0          # 0-1, see calculate_brand_prominence


@dataclass
class VisibilityScoreResult:
    """Score with the breakdown and human-readable insights behind it"""
    score: float
    breakdown: Dict[str, float] = field(default_factory=dict)
    insights: List[str] = field(default_factory=list)


@dataclass
class BrandScore:
    """Multi-factor result for one brand in a batch"""
    brand: str
    score: float
    breakdown: Dict[str, float] = field(default_factory=dict)
    insights: List[str] = field(default_factory=list)


@dataclass
class CompetitorAdvantage:
    brand: str
    score: float
    advantage: str


@dataclass
class CompetitiveInsights:
    """Where the tracked brand ranks against the competitors in one response"""
    user_rank: int  # 1-based, 0 when the tracked brand was not scored
    user_score: float
    top_competitors: List[CompetitorAdvantage] = field(default_factory=list)
    opportunities: List[str] = field(default_factory=list)
    threats: List[str] = field(default_factory=list)


class ScoringStrategy(ABC):
    """A named way of turning visibility metrics into a 0-100 score"""

    name: str = ""

    @abstractmethod
    def score(
        self,
        metrics: VisibilityMetrics,
        weights: Optional[ScoringWeights] = None
    ) -> VisibilityScoreResult:
        raise NotImplementedError


class SimpleScoringStrategy(ScoringStrategy):
    """
    Presence-first score.

    Scoring Model:
    - Base: 100 when the org brand is present, 0 otherwise
    - Bonus: +30/+20/+10/+0 by prominence index (first, second, third, later),
      capped so the running total never exceeds 100
    - Penalty: -5 per competitor, at most -20
    - Floored at 0
    """

    name = "simple"

    def compute_score(
        self,
        org_present: bool,
        prominence_idx: Optional[int],
        competitor_count: int
    ) -> VisibilityScoreResult:
        base = 100.0 if org_present else 0.0
        insights = []

        bonus = 0.0
        if org_present and prominence_idx is not None:
            index = min(max(prominence_idx, 0), len(SIMPLE_PROMINENCE_BONUS) - 1)
            bonus = min(100.0, base + SIMPLE_PROMINENCE_BONUS[index]) - base
            insights.append(f"Brand ranked #{prominence_idx + 1} among mentioned brands")

        penalty = float(min(SIMPLE_COMPETITOR_PENALTY_CAP,
                            SIMPLE_COMPETITOR_PENALTY * max(0, competitor_count)))
        if competitor_count:
            insights.append(f"{competitor_count} competitor(s) mentioned")

        if not org_present:
            insights.insert(0, "Brand is not mentioned")

        return VisibilityScoreResult(
            score=max(0.0, base + bonus - penalty),
            breakdown={
                "base": base,
                "prominence_bonus": bonus,
                "competitor_penalty": penalty,
            },
            insights=insights,
        )

    def score(
        self,
        metrics: VisibilityMetrics,
        weights: Optional[ScoringWeights] = None
    ) -> VisibilityScoreResult:
        return self.compute_score(
            metrics.brand_present,
            metrics.brand_position,
            metrics.competitor_count,
        )


class MultiFactorScoringStrategy(ScoringStrategy):
    """
    Weighted sum of six bounded sub-scores:
    presence (0-30), position (0-20), sentiment (-25 to +25), context (0-10),
    competition (-10 to +5) and prominence (0-5).
    """

    name = "multi_factor"

    CONTEXT_POINTS = {
        MentionContext.RECOMMENDATION: 10,
        MentionContext.COMPARISON: 7,
        MentionContext.MENTION: 5,
        MentionContext.EXAMPLE: 2,
    }

    def compute(
        self,
        metrics: VisibilityMetrics,
        weights: Optional[ScoringWeights] = None
    ) -> VisibilityScoreResult:
        weights = weights or ScoringWeights()
        breakdown: Dict[str, float] = {}
        insights: List[str] = []

        # 1. Presence
        if not metrics.brand_present:
            breakdown["presence"] = 0.0
            insights.append("Brand is not mentioned - major visibility issue")

            penalty = min(15, metrics.competitor_count * 3)
            breakdown["competition"] = -penalty * weights.competition
            insights.append(f"{metrics.competitor_count} competitors mentioned while brand is absent")

            return VisibilityScoreResult(
                score=max(0.0, breakdown["presence"] + breakdown["competition"]),
                breakdown=breakdown,
                insights=insights,
            )

        breakdown["presence"] = 30 * weights.presence
        insights.append("Brand is mentioned in the response")

        # 2. Position
        position = metrics.brand_position
        if position is not None:
            breakdown["position"] = max(0, 20 - position * 2) * weights.position
            if position == 0:
                insights.append("Brand mentioned first - excellent positioning")
            elif position <= 2:
                insights.append(f"Brand mentioned early (position {position + 1}) - good positioning")
            elif position <= 5:
                insights.append(f"Brand mentioned mid-response (position {position + 1}) - average positioning")
            else:
                insights.append(f"Brand mentioned late (position {position + 1}) - poor positioning")
        else:
            breakdown["position"] = 0.0

        # 3. Sentiment
        if metrics.sentiment == SentimentPolarity.POSITIVE:
            sentiment_points = 25 * metrics.sentiment_confidence
            insights.append(f"Positive brand sentiment ({metrics.sentiment_confidence * 100:.0f}% confidence)")
        elif metrics.sentiment == SentimentPolarity.NEGATIVE:
            sentiment_points = -25 * metrics.sentiment_confidence
            insights.append(f"Negative brand sentiment ({metrics.sentiment_confidence * 100:.0f}% confidence)")
        else:
            sentiment_points = 5
            insights.append("Neutral brand sentiment")
        breakdown["sentiment"] = sentiment_points * weights.sentiment

        # 4. Context
        context_points = self.CONTEXT_POINTS.get(metrics.context, 5)
        breakdown["context"] = context_points * weights.context
        if metrics.context == MentionContext.RECOMMENDATION:
            insights.append("Brand mentioned as a recommendation - excellent context")
        elif metrics.context == MentionContext.COMPARISON:
            insights.append("Brand mentioned in comparison - good context")
        elif metrics.context == MentionContext.EXAMPLE:
            insights.append("Brand mentioned as example - limited value")
        else:
            insights.append("Brand mentioned in general context")

        # 5. Competition
        count = metrics.competitor_count
        if count == 0:
            competition_points = 5
            insights.append("No competitors mentioned - dominant visibility")
        elif count <= 2:
            competition_points = 2
            insights.append(f"Limited competition ({count} competitors)")
        elif count <= 5:
            competition_points = -2
            insights.append(f"Moderate competition ({count} competitors)")
        else:
            competition_points = -10
            insights.append(f"Heavy competition ({count} competitors)")
        breakdown["competition"] = competition_points * weights.competition

        # 6. Prominence
        breakdown["prominence"] = min(5, metrics.brand_prominence * 5) * weights.prominence
        if metrics.brand_prominence > 0.7:
            insights.append("Brand has high prominence in response")
        elif metrics.brand_prominence > 0.4:
            insights.append("Brand has moderate prominence in response")
        else:
            insights.append("Brand has low prominence in response")

        total = sum(breakdown.values())
        return VisibilityScoreResult(
            score=max(0.0, min(100.0, total)),
            breakdown=breakdown,
            insights=insights,
        )

    def score(
        self,
        metrics: VisibilityMetrics,
        weights: Optional[ScoringWeights] = None
    ) -> VisibilityScoreResult:
        return self.compute(metrics, weights)


STRATEGIES = {
    SimpleScoringStrategy.name: SimpleScoringStrategy,
    MultiFactorScoringStrategy.name: MultiFactorScoringStrategy,
}


def get_strategy(strategy: Union[str, ScoringStrategy, None] = None) -> ScoringStrategy:
    """Resolve a strategy instance or name; defaults to the simple strategy"""
    if isinstance(strategy, ScoringStrategy):
        return strategy
    name = strategy or SimpleScoringStrategy.name
    if name not in STRATEGIES:
        raise ValueError(f"Unknown scoring strategy: {name}")
    return STRATEGIES[name]()


def calculate_brand_prominence(
    brand_mentions: int,
    total_brands: int,
    first_position: int,
    response_length: int
) -> float:
    """
    Calculate a 0-1 prominence metric from frequency, earliness and density.

    Args:
        brand_mentions: Mentions of the brand in the response
        total_brands: Distinct brands detected in the response
        first_position: Character offset of the first mention
        response_length: Response length in characters
    """
    # Frequency component (0-0.5)
    frequency = min(0.5, brand_mentions / max(1, total_brands))

    # Position component (0-0.3), earlier is better
    max_position = max(10, response_length / 100)
    position = max(0.0, 0.3 * (1 - first_position / max_position))

    # Density component (0-0.2)
    density = min(0.2, (brand_mentions / max(100, response_length)) * 100)

    return frequency + position + density


def batch_visibility_score(
    analyses: Sequence[Dict[str, object]],
    weights: Optional[ScoringWeights] = None
) -> List[BrandScore]:
    """Multi-factor score for each {"brand", "metrics"} analysis"""
    strategy = MultiFactorScoringStrategy()
    results = []
    for analysis in analyses:
        result = strategy.compute(analysis["metrics"], weights)
        results.append(BrandScore(
            brand=analysis["brand"],
            score=result.score,
            breakdown=result.breakdown,
            insights=result.insights,
        ))
    return results


def _competitor_advantage(breakdown: Dict[str, float]) -> str:
    """Label for a competitor's largest scoring factor"""
    if not breakdown:
        return "Overall strong presence"

    category = max(breakdown.items(), key=lambda item: item[1])[0]
    labels = {
        "sentiment": "Strong positive sentiment",
        "position": "Early mention positioning",
        "context": "Recommended as solution",
        "prominence": "High response prominence",
    }
    return labels.get(category, "Overall strong presence")


def generate_competitive_insights(
    user_brand: str,
    scores: Sequence[BrandScore]
) -> CompetitiveInsights:
    """
    Rank brand scores and describe the tracked brand's position.

    Opportunities come from the tracked brand's weak factors; threats are
    competitors leading it by more than 20 points.
    """
    ranked = sorted(scores, key=lambda s: s.score, reverse=True)
    user_key = user_brand.lower()

    user_rank = 0
    user_result = None
    for index, result in enumerate(ranked, 1):
        if result.brand.lower() == user_key:
            user_rank = index
            user_result = result
            break

    user_score = user_result.score if user_result else 0.0

    top_competitors = [
        CompetitorAdvantage(
            brand=s.brand,
            score=s.score,
            advantage=_competitor_advantage(s.breakdown),
        )
        for s in ranked
        if s.brand.lower() != user_key
    ][:3]

    opportunities = []
    if user_result:
        breakdown = user_result.breakdown
        if breakdown.get("sentiment", 0) < 5:
            opportunities.append("Improve brand sentiment in AI responses")
        if breakdown.get("position", 0) < 3:
            opportunities.append("Work on getting mentioned earlier in responses")
        if breakdown.get("context", 0) < 2:
            opportunities.append("Position brand more strongly as a recommendation")

    threats = [
        f"{c.brand} has significantly higher visibility ({c.score:.1f} vs {user_score:.1f})"
        for c in top_competitors
        if c.score > user_score + 20
    ]

    return CompetitiveInsights(
        user_rank=user_rank,
        user_score=user_score,
        top_competitors=top_competitors,
        opportunities=opportunities,
        threats=threats,
    )
