"""
Sentiment Analyzer
Polarity and rhetorical-role tagging for brand mentions
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from brandlens.models import MentionContext, SentimentPolarity


@dataclass
class BrandSentiment:
    """Sentiment and context of one brand within a response"""
    brand: str
    sentiment: SentimentPolarity
    confidence: float  # 0.0 to 1.0
    context: MentionContext
    reasoning: str


@dataclass
class CompetitivePositioning:
    """How the org brand and competitors are framed in a response"""
    user_advantages: List[str] = field(default_factory=list)
    user_weaknesses: List[str] = field(default_factory=list)
    competitor_strengths: List[Dict[str, str]] = field(default_factory=list)
    competitor_weaknesses: List[Dict[str, str]] = field(default_factory=list)


class SentimentAnalyzer:
    """
    Simple rule-based sentiment and context classifier for brand mentions.
    Scores the clause that mentions the brand; a negated positive anywhere
    in its sentence still wins.
    """

    POSITIVE_WORDS = [
        "recommend", "excellent", "best", "great", "outstanding", "superior",
        "top", "leading", "preferred", "ideal", "perfect", "amazing",
        "love", "fantastic", "wonderful", "impressive", "innovative",
        "should use", "highly rated", "popular choice", "go-to solution",
    ]

    # {brand} is substituted with the lowercased brand name
    POSITIVE_PATTERNS = [
        "{brand} is excellent",
        "{brand} offers",
        "{brand} provides",
        "choose {brand}",
        "use {brand}",
        "try {brand}",
        "{brand} stands out",
        "{brand} excels",
    ]

    NEGATIVE_WORDS = [
        "avoid", "terrible", "bad", "poor", "worst", "disappointing",
        "problematic", "issues", "concerns", "limitations", "drawbacks",
        "outdated", "deprecated", "discontinued", "not recommend",
        "stay away", "skip", "pass on",
    ]

    NEGATIVE_PATTERNS = [
        "avoid {brand}",
        "{brand} is bad",
        "{brand} has issues",
        "problems with {brand}",
        "{brand} lacks",
        "not {brand}",
        "instead of {brand}",
    ]

    RECOMMENDATION_PATTERNS = [
        "recommend", "suggest", "should use", "try", "choose",
        "go with", "opt for", "pick", "select", "best option",
        "top choice", "ideal solution",
    ]

    COMPARISON_PATTERNS = [
        "vs", "versus", "compared to", "compare", "against",
        "better than", "worse than", "similar to", "like",
        "alternative to", "instead of", "rather than",
    ]

    EXAMPLE_PATTERNS = [
        "for example", "such as", "e.g.", "i.e.", "including",
        "like apple", "like google", "examples include",
        "among others", "to name a few",
    ]

    # A negated positive always wins over the additive scores
    NEGATION_PATTERN = re.compile(
        r"(?:\b(?:not|never|no)|n't)\s+\w*\s*(recommend|suggest|good|great|excellent|best)",
        re.IGNORECASE,
    )
    NEGATION_CONFIDENCE = min(0.8, 2 * 0.3)

    NEUTRAL_CONFIDENCE = 0.5
    MAX_CONFIDENCE = 0.9
    CONFIDENCE_PER_POINT = 0.2

    SENTENCE_SPLIT = re.compile(r"[.!?]+")
    CLAUSE_SPLIT = re.compile(
        r"\s*;\s*|,?\s+\b(?:though|although|but|however|whereas|while|yet)\b,?\s*",
        re.IGNORECASE,
    )

    def __init__(self):
        # Compile patterns for efficiency
        self._positive_words = self._build_patterns(self.POSITIVE_WORDS, trailing_boundary=False)
        self._negative_words = self._build_patterns(self.NEGATIVE_WORDS, trailing_boundary=False)
        self._context_patterns: List[Tuple[MentionContext, List[re.Pattern]]] = [
            (MentionContext.RECOMMENDATION, self._build_patterns(self.RECOMMENDATION_PATTERNS)),
            (MentionContext.COMPARISON, self._build_patterns(self.COMPARISON_PATTERNS)),
            (MentionContext.EXAMPLE, self._build_patterns(self.EXAMPLE_PATTERNS)),
        ]

    def _build_patterns(self, phrases: Sequence[str], trailing_boundary: bool = True) -> List[re.Pattern]:
        """One pattern per phrase, anchored at word edges"""
        patterns = []
        for phrase in phrases:
            pattern = r"(?<!\w)" + re.escape(phrase)
            if trailing_boundary and phrase[-1].isalnum():
                pattern += r"(?!\w)"
            patterns.append(re.compile(pattern, re.IGNORECASE))
        return patterns

    def select_relevant_text(self, brand: str, mention_context: str, full_response: str) -> Tuple[str, str]:
        """
        Pick the first sentence that mentions the brand and, within it,
        the clause that does.

        Returns (sentence, clause). Both fall back to the mention context
        when no sentence contains the brand.
        """
        brand_lower = brand.lower()
        if not brand_lower:
            return mention_context or "", mention_context or ""

        for sentence in self.SENTENCE_SPLIT.split(full_response or ""):
            if brand_lower not in sentence.lower():
                continue
            sentence = sentence.strip()
            for clause in self.CLAUSE_SPLIT.split(sentence):
                if brand_lower in clause.lower():
                    return sentence, clause.strip()
            return sentence, sentence

        return mention_context or "", mention_context or ""

    def calculate_sentiment(
        self,
        text: str,
        brand: str,
        sentence: Optional[str] = None
    ) -> Tuple[SentimentPolarity, float, str]:
        """
        Polarity, confidence and reasoning for text about a brand.

        Lexicon scores come from `text`; negation is looked for in the whole
        `sentence` when given, otherwise in `text`.
        """
        text_lower = (text or "").lower().replace("’", "'")
        sentence_lower = (sentence if sentence is not None else text or "").lower().replace("’", "'")
        brand_lower = brand.lower()

        if self.NEGATION_PATTERN.search(sentence_lower):
            return (
                SentimentPolarity.NEGATIVE,
                self.NEGATION_CONFIDENCE,
                "Negation detected in positive context",
            )

        positive_score = sum(1 for p in self._positive_words if p.search(text_lower))
        positive_score += sum(
            2 for p in self.POSITIVE_PATTERNS if p.format(brand=brand_lower) in text_lower
        )

        negative_score = sum(1 for p in self._negative_words if p.search(text_lower))
        negative_score += sum(
            2 for p in self.NEGATIVE_PATTERNS if p.format(brand=brand_lower) in text_lower
        )

        if positive_score > negative_score and positive_score > 0:
            return (
                SentimentPolarity.POSITIVE,
                min(self.MAX_CONFIDENCE, positive_score * self.CONFIDENCE_PER_POINT),
                f"Positive indicators: {positive_score}, Negative: {negative_score}",
            )
        if negative_score > positive_score and negative_score > 0:
            return (
                SentimentPolarity.NEGATIVE,
                min(self.MAX_CONFIDENCE, negative_score * self.CONFIDENCE_PER_POINT),
                f"Negative indicators: {negative_score}, Positive: {positive_score}",
            )

        return (
            SentimentPolarity.NEUTRAL,
            self.NEUTRAL_CONFIDENCE,
            f"Balanced or no clear sentiment indicators (P:{positive_score}, N:{negative_score})",
        )

    def determine_context_type(self, text: str) -> MentionContext:
        """First matching category wins: recommendation, comparison, example"""
        for context_type, patterns in self._context_patterns:
            if any(p.search(text or "") for p in patterns):
                return context_type
        return MentionContext.MENTION

    def classify(self, brand: str, mention_context: str, full_response: str) -> BrandSentiment:
        """
        Analyze sentiment and context of a brand mention.

        Args:
            brand: Catalog brand name
            mention_context: Text window around the mention
            full_response: Full assistant response

        Returns:
            BrandSentiment for the brand
        """
        sentence, clause = self.select_relevant_text(brand, mention_context, full_response)
        polarity, confidence, reasoning = self.calculate_sentiment(clause, brand, sentence)

        return BrandSentiment(
            brand=brand,
            sentiment=polarity,
            confidence=confidence,
            context=self.determine_context_type(clause),
            reasoning=reasoning,
        )

    def filter_brands_by_sentiment(
        self,
        sentiments: Sequence[BrandSentiment],
        include_neutral: bool = True
    ) -> List[BrandSentiment]:
        """Keep positive brands, confident neutral ones, and negative comparisons"""
        kept = []
        for s in sentiments:
            if s.sentiment == SentimentPolarity.POSITIVE:
                kept.append(s)
            elif include_neutral and s.sentiment == SentimentPolarity.NEUTRAL and s.confidence >= 0.4:
                kept.append(s)
            elif s.sentiment == SentimentPolarity.NEGATIVE and s.context == MentionContext.COMPARISON:
                kept.append(s)
        return kept

    def analyze_competitive_positioning(
        self,
        user_brand: str,
        sentiments: Sequence[BrandSentiment]
    ) -> CompetitivePositioning:
        """Split sentiments into org advantages/weaknesses and competitor strengths/weaknesses"""
        positioning = CompetitivePositioning()
        user_key = user_brand.lower()

        for s in sentiments:
            if s.brand.lower() == user_key:
                if s.sentiment == SentimentPolarity.POSITIVE:
                    positioning.user_advantages.append(s.reasoning)
                elif s.sentiment == SentimentPolarity.NEGATIVE:
                    positioning.user_weaknesses.append(s.reasoning)
                continue

            if s.confidence <= 0.6:
                continue
            if s.sentiment == SentimentPolarity.POSITIVE:
                positioning.competitor_strengths.append({"brand": s.brand, "strength": s.reasoning})
            elif s.sentiment == SentimentPolarity.NEGATIVE:
                positioning.competitor_weaknesses.append({"brand": s.brand, "weakness": s.reasoning})

        return positioning


_default_analyzer = SentimentAnalyzer()


def classify(brand: str, mention_context: str, full_response: str) -> BrandSentiment:
    return _default_analyzer.classify(brand, mention_context, full_response)
