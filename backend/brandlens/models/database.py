"""
brandlens Database Models
Response and brand catalog store with SQLAlchemy ORM
"""

from datetime import datetime
from enum import Enum as PyEnum
from uuid import uuid4

from sqlalchemy import (
    Column, String, Text, Boolean, DateTime, JSON, Index, Uuid
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


# ============================================================================
# ENUMS
# ============================================================================

class LLMProvider(str, PyEnum):
    OPENAI = "openai"        # ChatGPT
    ANTHROPIC = "anthropic"  # Claude
    GOOGLE = "google"        # Gemini
    PERPLEXITY = "perplexity"


class SentimentPolarity(str, PyEnum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class MentionContext(str, PyEnum):
    RECOMMENDATION = "recommendation"
    COMPARISON = "comparison"
    EXAMPLE = "example"
    MENTION = "mention"


class MatchType(str, PyEnum):
    EXACT = "exact"
    VARIANT = "variant"
    FUZZY = "fuzzy"
    PARTIAL = "partial"


class SourceType(str, PyEnum):
    PAGE = "page"
    PDF = "pdf"
    VIDEO = "video"
    UNKNOWN = "unknown"


class BrandMentionVerdict(str, PyEnum):
    UNKNOWN = "unknown"  # Not verified yet
    YES = "yes"          # Tracked brand present
    NO = "no"            # Tracked brand absent


# ============================================================================
# RESPONSES & CATALOG
# ============================================================================

class ProviderResponse(Base):
    """One stored AI assistant response with its citation list"""
    __tablename__ = "provider_responses"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    org_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    provider = Column(String(50), nullable=False)

    response_text = Column(Text, default="")
    raw_payload = Column(JSON, default=dict)

    # {"provider", "citations": [...], "collected_at", "ruleset_version"}
    citations_json = Column(JSON, default=dict)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class BrandCatalogItem(Base):
    """Organization brand or competitor with its textual variants"""
    __tablename__ = "brand_catalog"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    org_id = Column(Uuid(as_uuid=True), nullable=False)

    name = Column(String(255), nullable=False)
    variants_json = Column(JSON, default=list)
    is_org_brand = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index('idx_brand_catalog_org_name', 'org_id', 'name'),
    )
