"""
Brand Relevance Filter
Suppresses generic words and weak candidates, scores the rest
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from brandlens.config import INDUSTRY_BRANDS


@dataclass
class FilterContext:
    """What we know about the org and the exchange being analyzed"""
    prompt_text: str = ""
    response_text: str = ""
    user_industry: Optional[str] = None


@dataclass
class CandidateMention:
    """A brand candidate with its surrounding text"""
    brand: str
    context: str
    position: int


@dataclass
class ScoredMention:
    """A candidate that passed the relevance threshold"""
    brand: str
    context: str
    position: int
    relevance_score: float


class RelevanceFilter:
    """
    Rule-based relevance scoring for brand candidates.

    Scores start at 0.5 and are multiplied by context adjustments; adjustments
    compound when several pattern sets match the same context.
    """

    MIN_RELEVANCE = 0.3
    BASE_SCORE = 0.5
    POSITION_WINDOW = 1000

    COMMON_WORDS = frozenset([
        # Articles, prepositions, conjunctions
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",

        # Common adjectives
        "best", "good", "better", "great", "new", "old", "first", "last", "next", "other", "another",
        "top", "main", "major", "minor", "big", "small", "large", "huge", "tiny", "short", "long",
        "high", "low", "fast", "slow", "easy", "hard", "simple", "complex",

        # Time/quantity words
        "some", "many", "most", "all", "every", "each", "few", "several", "various",
        "when", "where", "what", "how", "why", "who", "which", "here", "there", "this", "that",
        "now", "then", "today", "tomorrow", "yesterday",

        # Business generic terms
        "business", "company", "corporation", "enterprise", "organization", "firm", "agency",
        "service", "solution", "product", "platform", "system", "tool", "software",
        "application", "app", "website", "site", "portal", "dashboard",

        # Action words that appear capitalized
        "create", "build", "make", "develop", "design", "manage", "handle", "process",
        "analyze", "review", "update", "improve", "optimize", "enhance",

        # Generic tech terms
        "data", "database", "server", "cloud", "api", "interface", "framework", "library",
        "code", "programming", "development", "testing", "deployment",

        # Generic terms often capitalized
        "search", "email", "mobile", "web", "online", "digital", "smart", "pro", "plus",
        "premium", "standard", "basic", "free", "paid", "custom", "advanced",
    ])

    # Consumer, retail, media, auto and airline brands irrelevant to B2B tooling
    NON_BUSINESS_BRANDS = frozenset([
        # Food & Beverage
        "mcdonalds", "coca cola", "pepsi", "starbucks", "dominos", "kfc",
        # Retail/Fashion
        "nike", "adidas", "gucci", "prada", "zara", "h&m",
        # Entertainment
        "disney", "netflix", "hulu", "hbo", "paramount", "warner bros",
        # Automotive
        "tesla", "ford", "toyota", "bmw", "mercedes", "volkswagen",
        # Airlines
        "delta", "american airlines", "united", "southwest",
    ])

    STRONG_INDICATORS = [
        ".com", ".io", ".net", ".org",
        "company", "platform", "service", "solution",
        "founded", "based", "offers", "provides",
    ]

    EXAMPLE_PATTERNS = [
        "for example", "such as", "e.g.", "i.e.", "including",
        "like apple", "like google", "like microsoft",
        "similar to", "comparable to", "examples include",
    ]

    LIST_INDICATORS = [
        ", ", " and ", " or ", "• ", "- ", "1.", "2.", "3.",
        "options include", "alternatives are", "choices are",
    ]

    POSITIVE_INDICATORS = [
        "recommend", "suggests", "best", "top", "leading", "preferred",
        "excellent", "outstanding", "superior", "optimal", "ideal",
        "should use", "try", "consider", "choose",
    ]

    NEGATIVE_INDICATORS = [
        "avoid", "not recommend", "poor", "bad", "terrible",
        "outdated", "deprecated", "discontinued", "problematic",
        "unlike", "different from", "instead of", "rather than",
    ]

    DOMAIN_PATTERN = re.compile(r"\.(com|io|net|org|co|ai)$", re.IGNORECASE)
    URL_PATTERN = re.compile(r"https?://")
    NUMERIC_PATTERN = re.compile(r"^[0-9]+$")

    def _contains_any(self, text: str, needles: Sequence[str]) -> bool:
        return any(needle in text for needle in needles)

    def is_domain_or_url(self, brand: str) -> bool:
        """Check if the brand token looks like a domain or URL"""
        return bool(self.DOMAIN_PATTERN.search(brand) or self.URL_PATTERN.search(brand))

    def score_relevance(self, mention: CandidateMention, filter_context: FilterContext) -> float:
        """
        Calculate a 0-1 relevance score for a brand candidate.

        Args:
            mention: Candidate brand with its context window and offset
            filter_context: Org industry and prompt/response text

        Returns:
            Relevance score clamped to [0, 1]
        """
        brand_lower = mention.brand.lower()
        context_lower = (mention.context or "").lower()

        if brand_lower in self.COMMON_WORDS:
            return 0.0

        # Very short names need a strong signal around them
        if len(brand_lower) < 3 and not self._contains_any(context_lower, self.STRONG_INDICATORS):
            return 0.0

        score = self.BASE_SCORE

        if self._contains_any(context_lower, self.EXAMPLE_PATTERNS):
            score *= 0.4

        if self._contains_any(context_lower, self.LIST_INDICATORS):
            score *= 0.7

        if filter_context.user_industry:
            industry_brands = INDUSTRY_BRANDS.get(filter_context.user_industry.lower())
            if industry_brands and brand_lower in industry_brands:
                score *= 1.5

        if self._contains_any(context_lower, self.POSITIVE_INDICATORS):
            score *= 1.3

        if self._contains_any(context_lower, self.NEGATIVE_INDICATORS):
            score *= 0.3

        # Earlier mentions weigh more; past the window the decay bottoms out at 0.5x
        position = min(max(mention.position, 0), self.POSITION_WINDOW)
        position_factor = 1 - (position / self.POSITION_WINDOW)
        score *= 0.5 + position_factor * 0.5

        if self.is_domain_or_url(mention.brand):
            score *= 1.2

        return min(1.0, max(0.0, score))

    def filter_relevant_brands(
        self,
        mentions: Sequence[CandidateMention],
        filter_context: FilterContext
    ) -> List[ScoredMention]:
        """Score candidates, drop those at or below the threshold, rank the rest"""
        scored = [
            ScoredMention(
                brand=m.brand,
                context=m.context,
                position=m.position,
                relevance_score=self.score_relevance(m, filter_context),
            )
            for m in mentions
        ]
        relevant = [m for m in scored if m.relevance_score > self.MIN_RELEVANCE]
        relevant.sort(key=lambda m: m.relevance_score, reverse=True)
        return relevant

    def filter_non_business_brands(self, brands: Sequence[str]) -> List[str]:
        """Drop consumer brands that are clearly not business software/services"""
        return [b for b in brands if b.lower() not in self.NON_BUSINESS_BRANDS]

    def apply_brand_filters(
        self,
        extracted_brands: Sequence[str],
        filter_context: Optional[FilterContext] = None
    ) -> List[str]:
        """
        Remove generic words, non-business brands, numbers, single characters
        and case-insensitive duplicates, preserving first-seen order.
        """
        filtered = [b for b in extracted_brands if b and b.lower() not in self.COMMON_WORDS]
        filtered = self.filter_non_business_brands(filtered)
        filtered = [
            b for b in filtered
            if len(b.lower().strip()) >= 2 and not self.NUMERIC_PATTERN.match(b.lower().strip())
        ]

        seen = set()
        result = []
        for brand in filtered:
            key = brand.lower()
            if key in seen:
                continue
            seen.add(key)
            result.append(brand)

        return result


_default_filter = RelevanceFilter()


def score_relevance(mention: CandidateMention, filter_context: FilterContext) -> float:
    return _default_filter.score_relevance(mention, filter_context)


def filter_relevant_brands(
    mentions: Sequence[CandidateMention],
    filter_context: FilterContext
) -> List[ScoredMention]:
    return _default_filter.filter_relevant_brands(mentions, filter_context)


def apply_brand_filters(
    extracted_brands: Sequence[str],
    filter_context: Optional[FilterContext] = None
) -> List[str]:
    return _default_filter.apply_brand_filters(extracted_brands, filter_context)
