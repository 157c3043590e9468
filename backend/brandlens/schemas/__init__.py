"""
Pydantic Schemas for API Request/Response Validation
"""

from .analysis import (
    AnalysisBundleSchema,
    BrandMentionSchema,
    BrandSentimentSchema,
    CitationSchema,
    CitationsDataSchema,
    CompetitiveInsightsSchema,
    VisibilityScoreSchema,
    CitationMentionRequest,
    CitationMentionResponse,
)
from .providers import (
    GeminiPayload,
    PerplexityPayload,
    TextOnlyPayload,
    ProviderPayload,
    parse_provider_payload,
)

__all__ = [
    # Analysis
    "AnalysisBundleSchema",
    "BrandMentionSchema",
    "BrandSentimentSchema",
    "CitationSchema",
    "CitationsDataSchema",
    "CompetitiveInsightsSchema",
    "VisibilityScoreSchema",
    # Citation worker
    "CitationMentionRequest",
    "CitationMentionResponse",
    # Provider payloads
    "GeminiPayload",
    "PerplexityPayload",
    "TextOnlyPayload",
    "ProviderPayload",
    "parse_provider_payload",
]
