"""
Database Models for brandlens
"""

from .database import (
    Base,
    # Enums
    LLMProvider,
    SentimentPolarity,
    MentionContext,
    MatchType,
    SourceType,
    BrandMentionVerdict,
    # Models
    ProviderResponse,
    BrandCatalogItem,
)

__all__ = [
    "Base",
    # Enums
    "LLMProvider",
    "SentimentPolarity",
    "MentionContext",
    "MatchType",
    "SourceType",
    "BrandMentionVerdict",
    # Models
    "ProviderResponse",
    "BrandCatalogItem",
]
