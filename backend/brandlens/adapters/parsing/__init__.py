"""
Response Parsing Adapters
"""

from .brand_matcher import (
    BrandCatalogEntry,
    BrandMatcher,
    BrandMention,
    UserBrandMatch,
    find_matches,
    is_org_mention,
    match_user_brand,
    normalize,
)
from .relevance_filter import (
    CandidateMention,
    FilterContext,
    RelevanceFilter,
    ScoredMention,
    apply_brand_filters,
    filter_relevant_brands,
    score_relevance,
)
from .sentiment_analyzer import BrandSentiment, SentimentAnalyzer, classify
from .citation_extractor import (
    Citation,
    CitationExtractor,
    CitationsData,
    detect_brand_mentions,
    extract_citations,
    guess_source_type,
)

__all__ = [
    "BrandCatalogEntry",
    "BrandMatcher",
    "BrandMention",
    "UserBrandMatch",
    "find_matches",
    "is_org_mention",
    "match_user_brand",
    "normalize",
    "CandidateMention",
    "FilterContext",
    "RelevanceFilter",
    "ScoredMention",
    "apply_brand_filters",
    "filter_relevant_brands",
    "score_relevance",
    "BrandSentiment",
    "SentimentAnalyzer",
    "classify",
    "Citation",
    "CitationExtractor",
    "CitationsData",
    "detect_brand_mentions",
    "extract_citations",
    "guess_source_type",
]
