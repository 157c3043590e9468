"""
Analysis & Citation Worker Schemas
"""

from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from brandlens.models import (
    BrandMentionVerdict,
    MatchType,
    MentionContext,
    SentimentPolarity,
    SourceType,
)


class BrandMentionSchema(BaseModel):
    """Brand mention in an assistant response"""
    brand: str
    confidence: float = Field(ge=0, le=1)
    match_type: MatchType
    position: int
    context_window: str
    is_org_brand: bool = False

    class Config:
        from_attributes = True


class BrandSentimentSchema(BaseModel):
    """Sentiment and rhetorical role of one brand"""
    brand: str
    sentiment: SentimentPolarity
    confidence: float
    context: MentionContext
    reasoning: str

    class Config:
        from_attributes = True


class VisibilityScoreSchema(BaseModel):
    """Visibility score with its breakdown"""
    score: float = Field(ge=0, le=100)
    breakdown: Dict[str, float]
    insights: List[str]

    class Config:
        from_attributes = True


class CompetitorAdvantageSchema(BaseModel):
    brand: str
    score: float
    advantage: str

    class Config:
        from_attributes = True


class CompetitiveInsightsSchema(BaseModel):
    """Tracked brand rank against competitors"""
    user_rank: int
    user_score: float
    top_competitors: List[CompetitorAdvantageSchema]
    opportunities: List[str]
    threats: List[str]

    class Config:
        from_attributes = True


class QualityFactorsSchema(BaseModel):
    domain_authority: float = Field(ge=0, le=40)
    recency: float = Field(ge=0, le=30)
    relevance: float = Field(ge=0, le=30)

    class Config:
        from_attributes = True


class CitationSchema(BaseModel):
    """Individual citation"""
    url: str
    domain: str
    title: Optional[str] = None
    source_type: SourceType
    from_provider: bool
    brand_mention: BrandMentionVerdict
    brand_mention_confidence: float
    quality_score: float = Field(ge=0, le=100)
    quality_factors: QualityFactorsSchema

    class Config:
        from_attributes = True


class CitationsDataSchema(BaseModel):
    """All citations collected for one response"""
    provider: str
    citations: List[CitationSchema]
    collected_at: datetime
    ruleset_version: str

    class Config:
        from_attributes = True


class AnalysisBundleSchema(BaseModel):
    """Output artifact handed to the storage/reporting layer"""
    mentions: List[BrandMentionSchema]
    sentiments: List[BrandSentimentSchema]
    score: VisibilityScoreSchema
    competitive: Optional[CompetitiveInsightsSchema] = None
    citations: CitationsDataSchema

    class Config:
        from_attributes = True


# ============================================================================
# CITATION MENTION WORKER
# ============================================================================

class CitationMentionRequest(BaseModel):
    """Trigger brand verification for one stored response"""
    response_id: Optional[UUID] = None


class CitationMentionResponse(BaseModel):
    """Worker summary"""
    success: bool
    processed: int = 0
    updated: int = 0
    response_id: Optional[str] = None
    message: Optional[str] = None
