"""
Visibility Analyzer Service
Runs matching, relevance filtering, sentiment, scoring and citation analysis
over one AI assistant response
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

from brandlens.adapters.parsing.brand_matcher import (
    BrandCatalogEntry,
    BrandMatcher,
    BrandMention,
    is_relevant_brand_mention,
)
from brandlens.adapters.parsing.citation_extractor import CitationExtractor, CitationsData
from brandlens.adapters.parsing.relevance_filter import (
    CandidateMention,
    FilterContext,
    RelevanceFilter,
)
from brandlens.adapters.parsing.sentiment_analyzer import BrandSentiment, SentimentAnalyzer
from brandlens.models import MatchType, MentionContext, SentimentPolarity
from brandlens.schemas.analysis import AnalysisBundleSchema
from brandlens.services.scoring_engine import (
    CompetitiveInsights,
    ScoringStrategy,
    ScoringWeights,
    VisibilityMetrics,
    VisibilityScoreResult,
    batch_visibility_score,
    calculate_brand_prominence,
    generate_competitive_insights,
    get_strategy,
)

logger = logging.getLogger(__name__)


@dataclass
class AnalysisBundle:
    """Everything the engine derives from one response"""
    mentions: List[BrandMention]
    sentiments: List[BrandSentiment]
    score: VisibilityScoreResult
    competitive: Optional[CompetitiveInsights]
    citations: CitationsData

    def to_schema(self) -> AnalysisBundleSchema:
        return AnalysisBundleSchema.model_validate(self, from_attributes=True)

    def to_dict(self) -> Dict[str, Any]:
        return self.to_schema().model_dump(mode="json")


class VisibilityAnalyzer:
    """
    Analyzes an AI assistant response against a brand catalog:
    - Catalog brand mentions (exact, boundary and fuzzy)
    - Relevance-filtered discovered brands
    - Sentiment and context per brand
    - Visibility score for the org brand, plus competitive insights
    - Scored, brand-correlated citations
    """

    def __init__(
        self,
        relevance_filter: Optional[RelevanceFilter] = None,
        sentiment_analyzer: Optional[SentimentAnalyzer] = None,
        citation_extractor: Optional[CitationExtractor] = None
    ):
        self.relevance_filter = relevance_filter or RelevanceFilter()
        self.sentiment_analyzer = sentiment_analyzer or SentimentAnalyzer()
        self.citation_extractor = citation_extractor or CitationExtractor()

    # ------------------------------------------------------------------
    # Mentions
    # ------------------------------------------------------------------

    def _discovered_mentions(
        self,
        matcher: BrandMatcher,
        response_text: str,
        extracted_brands: Sequence[str],
        filter_context: FilterContext,
        known: set
    ) -> List[BrandMention]:
        """Mentions for heuristically extracted names that pass the relevance filter"""
        text_lower = response_text.lower()
        candidates = []

        for brand in self.relevance_filter.apply_brand_filters(extracted_brands, filter_context):
            if brand.lower() in known or matcher.match_user_brand(brand).is_match:
                continue
            position = text_lower.find(brand.lower())
            if position < 0:
                continue
            candidates.append(CandidateMention(
                brand=brand,
                context=matcher.get_context(response_text, position, len(brand)),
                position=position,
            ))

        discovered = []
        for scored in self.relevance_filter.filter_relevant_brands(candidates, filter_context):
            mention = BrandMention(
                brand=scored.brand,
                confidence=scored.relevance_score,
                match_type=MatchType.EXACT,
                position=scored.position,
                context_window=scored.context,
                is_org_brand=False,
            )
            if is_relevant_brand_mention(mention):
                discovered.append(mention)

        return discovered

    def find_mentions(
        self,
        response_text: str,
        catalog: Sequence[BrandCatalogEntry],
        filter_context: Optional[FilterContext] = None,
        extracted_brands: Optional[Sequence[str]] = None
    ) -> List[BrandMention]:
        matcher = BrandMatcher(catalog)
        mentions = matcher.find_mentions(response_text)

        if extracted_brands:
            known = {term.lower() for entry in catalog for term in entry.terms}
            known.update(m.brand.lower() for m in mentions)
            discovered = self._discovered_mentions(
                matcher,
                response_text,
                extracted_brands,
                filter_context or FilterContext(response_text=response_text),
                known,
            )
            if discovered:
                logger.debug(f"Discovered {len(discovered)} additional brand(s) outside the catalog")
                mentions = sorted(mentions + discovered, key=lambda m: (-m.confidence, m.position))

        return mentions

    # ------------------------------------------------------------------
    # Per-brand aggregation
    # ------------------------------------------------------------------

    def _first_mentions(self, mentions: Sequence[BrandMention]) -> List[BrandMention]:
        """Earliest mention of each distinct brand, in text order"""
        first: Dict[str, BrandMention] = {}
        for mention in sorted(mentions, key=lambda m: m.position):
            first.setdefault(mention.brand, mention)
        return list(first.values())

    def classify_brands(
        self,
        response_text: str,
        first_mentions: Sequence[BrandMention]
    ) -> List[BrandSentiment]:
        return [
            self.sentiment_analyzer.classify(m.brand, m.context_window, response_text)
            for m in first_mentions
        ]

    def _build_metrics(
        self,
        brand: str,
        present: bool,
        rank: Optional[int],
        mentions: Sequence[BrandMention],
        first_mentions: Sequence[BrandMention],
        sentiment: Optional[BrandSentiment],
        response_length: int
    ) -> VisibilityMetrics:
        own = [m for m in mentions if m.brand == brand]
        others = [m for m in mentions if m.brand != brand]
        competitor_count = len([m for m in first_mentions if m.brand != brand])

        prominence = 0.0
        if present and rank is not None:
            prominence = calculate_brand_prominence(
                len(own), len(first_mentions), rank, response_length
            )

        return VisibilityMetrics(
            brand_present=present,
            brand_position=rank,
            brand_mentions=len(own),
            competitor_count=competitor_count,
            competitor_mentions=len(others),
            sentiment=sentiment.sentiment if sentiment else SentimentPolarity.NEUTRAL,
            sentiment_confidence=sentiment.confidence if sentiment else 0.5,
            context=sentiment.context if sentiment else MentionContext.MENTION,
            response_length=response_length,
            brand_prominence=prominence,
        )

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def analyze(
        self,
        response_text: str,
        provider: str,
        payload: Any,
        catalog: Sequence[BrandCatalogEntry],
        strategy: Union[str, ScoringStrategy, None] = None,
        weights: Optional[ScoringWeights] = None,
        filter_context: Optional[FilterContext] = None,
        extracted_brands: Optional[Sequence[str]] = None
    ) -> AnalysisBundle:
        """
        Perform the full analysis of one response.

        Args:
            response_text: Assistant response text
            provider: Provider name the response came from
            payload: Raw provider payload (may be None)
            catalog: Org brand and competitor entries
            strategy: Scoring strategy or its name; simple by default
            weights: Multi-factor weight overrides
            filter_context: Org industry and prompt context for relevance
            extracted_brands: Extra candidate names found by upstream heuristics

        Returns:
            AnalysisBundle
        """
        response_text = response_text or ""
        catalog = list(catalog or [])
        scoring = get_strategy(strategy)

        # 1. Mentions
        mentions = self.find_mentions(response_text, catalog, filter_context, extracted_brands)
        first_mentions = self._first_mentions(mentions)
        ranks = {m.brand: index for index, m in enumerate(first_mentions)}

        # 2. Sentiment and context, one per distinct brand
        sentiments = self.classify_brands(response_text, first_mentions)
        sentiment_by_brand = {s.brand: s for s in sentiments}

        # 3. Scores
        org_entry = next((e for e in catalog if e.is_org_brand), None)
        org_brand = org_entry.name if org_entry else None
        org_present = org_brand in ranks

        org_metrics = self._build_metrics(
            org_brand or "",
            org_present,
            ranks.get(org_brand),
            mentions,
            first_mentions,
            sentiment_by_brand.get(org_brand),
            len(response_text),
        )
        score = scoring.score(org_metrics, weights)

        competitive = None
        if org_brand:
            analyses = [{"brand": org_brand, "metrics": org_metrics}]
            for mention in first_mentions:
                if mention.brand == org_brand:
                    continue
                analyses.append({
                    "brand": mention.brand,
                    "metrics": self._build_metrics(
                        mention.brand,
                        True,
                        ranks[mention.brand],
                        mentions,
                        first_mentions,
                        sentiment_by_brand.get(mention.brand),
                        len(response_text),
                    ),
                })
            competitive = generate_competitive_insights(
                org_brand, batch_visibility_score(analyses, weights)
            )

        # 4. Citations
        citations = self.citation_extractor.extract_citations(
            provider, payload, response_text, catalog
        )

        logger.info(
            f"Analyzed {provider} response: {len(mentions)} mentions, "
            f"{len(first_mentions)} brands, score {score.score:.1f}, "
            f"{len(citations.citations)} citations"
        )

        return AnalysisBundle(
            mentions=mentions,
            sentiments=sentiments,
            score=score,
            competitive=competitive,
            citations=citations,
        )
