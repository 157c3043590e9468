"""
Provider Payload Schemas
Shapes of the raw payloads returned by upstream AI providers
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ValidationError

from brandlens.models import LLMProvider


class ProviderPayloadBase(BaseModel):
    """Unknown keys are ignored; providers add fields freely"""

    class Config:
        extra = "ignore"


# ============================================================================
# PERPLEXITY
# ============================================================================

class PerplexityCitation(ProviderPayloadBase):
    url: Optional[str] = None
    link: Optional[str] = None
    title: Optional[str] = None
    text: Optional[str] = None

    @property
    def target(self) -> Optional[str]:
        return self.url or self.link


class PerplexityRelatedSource(ProviderPayloadBase):
    url: Optional[str] = None
    title: Optional[str] = None


class PerplexityPayload(ProviderPayloadBase):
    """Citations come either as bare URL strings or as objects"""
    citations: List[Union[str, PerplexityCitation]] = []
    related_sources: List[PerplexityRelatedSource] = []


# ============================================================================
# GEMINI
# ============================================================================

class GeminiWebSource(ProviderPayloadBase):
    uri: Optional[str] = None
    title: Optional[str] = None


class GeminiCitationEntry(ProviderPayloadBase):
    uri: Optional[str] = None
    title: Optional[str] = None


class GeminiCitationMetadata(ProviderPayloadBase):
    citations: List[GeminiCitationEntry] = []


class GeminiGroundingChunk(ProviderPayloadBase):
    web: Optional[GeminiWebSource] = None


class GeminiGroundingAttribution(ProviderPayloadBase):
    web: Optional[GeminiWebSource] = None
    sourceId: Optional[Dict[str, Any]] = None

    @property
    def chunk_id(self) -> Optional[str]:
        if not self.sourceId:
            return None
        value = self.sourceId.get("groundingChunkId")
        return str(value) if value is not None else None


class GeminiGroundingMetadata(ProviderPayloadBase):
    groundingChunks: List[GeminiGroundingChunk] = []
    groundingAttributions: List[GeminiGroundingAttribution] = []
    webSearchQueries: List[str] = []


class GeminiCandidate(ProviderPayloadBase):
    citationMetadata: Optional[GeminiCitationMetadata] = None
    groundingMetadata: Optional[GeminiGroundingMetadata] = None


class GeminiPayload(ProviderPayloadBase):
    candidates: List[GeminiCandidate] = []

    @property
    def first_candidate(self) -> Optional[GeminiCandidate]:
        return self.candidates[0] if self.candidates else None


# ============================================================================
# TEXT ONLY (OpenAI, Anthropic, unknown providers)
# ============================================================================

class TextOnlyPayload(ProviderPayloadBase):
    """Providers that never return structured sources"""
    pass


ProviderPayload = Union[PerplexityPayload, GeminiPayload, TextOnlyPayload]

# Provider name -> payload model; anything else is text only
PAYLOAD_MODELS = {
    LLMProvider.PERPLEXITY.value: PerplexityPayload,
    LLMProvider.GOOGLE.value: GeminiPayload,
    "gemini": GeminiPayload,
}


def parse_provider_payload(provider: str, payload: Any) -> ProviderPayload:
    """
    Validate a raw provider payload into its model.

    Payloads that are missing or fail validation come back as TextOnlyPayload,
    so callers fall through to text extraction.
    """
    model = PAYLOAD_MODELS.get((provider or "").lower())
    if model is None or not isinstance(payload, dict):
        return TextOnlyPayload()

    try:
        return model.model_validate(payload)
    except ValidationError:
        return TextOnlyPayload()
