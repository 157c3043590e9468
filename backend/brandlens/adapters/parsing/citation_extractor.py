"""
Citation Extractor
Extracts, deduplicates, quality-scores and brand-correlates the sources
behind an AI assistant response
"""

import math
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple
from urllib.parse import urlparse

from brandlens.adapters.parsing.brand_matcher import (
    BrandCatalogEntry,
    boundary_pattern,
    enhanced_normalize,
)
from brandlens.config import CITATION_LIMIT_GROUNDED, CITATION_LIMIT_SIMPLE
from brandlens.models import BrandMentionVerdict, SourceType
from brandlens.schemas.providers import (
    GeminiPayload,
    PerplexityCitation,
    PerplexityPayload,
    ProviderPayload,
    parse_provider_payload,
)


RULESET_SIMPLE = "cite-v1"
RULESET_GROUNDED = "cite-v2"


@dataclass
class QualityFactors:
    domain_authority: float = 0.0  # 0-40
    recency: float = 0.0           # 0-30
    relevance: float = 0.0         # 0-30


@dataclass
class Citation:
    """A source URL attached to a response"""
    url: str
    domain: str
    title: Optional[str] = None
    source_type: SourceType = SourceType.UNKNOWN
    from_provider: bool = False
    brand_mention: BrandMentionVerdict = BrandMentionVerdict.UNKNOWN
    brand_mention_confidence: float = 0.0
    quality_score: float = 0.0
    quality_factors: QualityFactors = field(default_factory=QualityFactors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "domain": self.domain,
            "title": self.title,
            "source_type": self.source_type.value,
            "from_provider": self.from_provider,
            "brand_mention": self.brand_mention.value,
            "brand_mention_confidence": self.brand_mention_confidence,
            "quality_score": self.quality_score,
            "quality_factors": {
                "domain_authority": self.quality_factors.domain_authority,
                "recency": self.quality_factors.recency,
                "relevance": self.quality_factors.relevance,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Citation":
        url = data.get("url") or ""
        factors = data.get("quality_factors") or {}
        try:
            verdict = BrandMentionVerdict(data.get("brand_mention") or "unknown")
        except ValueError:
            verdict = BrandMentionVerdict.UNKNOWN
        try:
            source_type = SourceType(data.get("source_type") or "unknown")
        except ValueError:
            source_type = SourceType.UNKNOWN

        return cls(
            url=url,
            domain=data.get("domain") or extract_domain(url),
            title=data.get("title"),
            source_type=source_type,
            from_provider=bool(data.get("from_provider", False)),
            brand_mention=verdict,
            brand_mention_confidence=float(data.get("brand_mention_confidence") or 0.0),
            quality_score=float(data.get("quality_score") or 0.0),
            quality_factors=QualityFactors(
                domain_authority=float(factors.get("domain_authority", 0.0)),
                recency=float(factors.get("recency", 0.0)),
                relevance=float(factors.get("relevance", 0.0)),
            ),
        )


@dataclass
class CitationsData:
    """All citations for one response"""
    provider: str
    citations: List[Citation]
    collected_at: datetime
    ruleset_version: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "provider": self.provider,
            "citations": [c.to_dict() for c in self.citations],
            "collected_at": self.collected_at.isoformat(),
            "ruleset_version": self.ruleset_version,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "CitationsData":
        data = data or {}
        collected_at = data.get("collected_at")
        if isinstance(collected_at, str):
            try:
                collected_at = datetime.fromisoformat(collected_at)
            except ValueError:
                collected_at = None
        return cls(
            provider=data.get("provider") or "unknown",
            citations=[Citation.from_dict(c) for c in data.get("citations") or [] if isinstance(c, dict)],
            collected_at=collected_at or datetime.now(timezone.utc),
            ruleset_version=data.get("ruleset_version") or RULESET_SIMPLE,
        )


def extract_domain(url: str) -> str:
    """Extract and normalize domain from URL"""
    try:
        parsed = urlparse(url)
        domain = parsed.netloc.lower()
    except ValueError:
        return ""

    # Remove credentials and port
    domain = domain.rsplit("@", 1)[-1]
    if ":" in domain:
        domain = domain.split(":")[0]

    if domain.startswith("www."):
        domain = domain[4:]

    return domain


def guess_source_type(url: str) -> SourceType:
    """Guess source type from URL"""
    try:
        parsed = urlparse(url)
    except ValueError:
        return SourceType.UNKNOWN

    if not parsed.scheme or not parsed.netloc:
        return SourceType.UNKNOWN

    host = (parsed.hostname or "").lower()
    path = (parsed.path or "/").lower()

    if path.endswith(".pdf"):
        return SourceType.PDF
    if "youtube.com" in host or "youtu.be" in host:
        return SourceType.VIDEO
    if "vimeo.com" in host or "/video/" in path:
        return SourceType.VIDEO
    if path.endswith(".html") or path.endswith(".htm") or path == "/" or "." not in path:
        return SourceType.PAGE

    return SourceType.UNKNOWN


def deduplicate_citations(citations: Sequence[Citation]) -> List[Citation]:
    """Remove duplicate citations by exact URL, first occurrence wins"""
    seen = set()
    unique = []
    for citation in citations:
        if citation.url in seen:
            continue
        seen.add(citation.url)
        unique.append(citation)
    return unique


def detect_brand_mentions(
    content: str,
    org_brands: Sequence[BrandCatalogEntry]
) -> Tuple[bool, float]:
    """
    Count word-boundary matches of every org name and variant in content.

    Returns:
        (has_mention, confidence); confidence grows logarithmically with the
        match count, and an absent brand is reported with 0.9 confidence
    """
    if not content or not org_brands:
        return False, 0.9

    total_matches = 0
    for brand in org_brands:
        for name in brand.terms:
            total_matches += len(boundary_pattern(name.lower()).findall(content))

    if total_matches > 0:
        return True, min(1.0, math.log(1 + total_matches) / 2)

    return False, 0.9


class CitationExtractor:
    """
    Builds the citation list for a response.

    Structured provider sources take priority; URLs found in the response text
    are used only when the provider supplied nothing.
    """

    MARKDOWN_PATTERN = re.compile(r'\[([^\]]+)\]\((https?://[^)\s]+)\)')
    PLAIN_URL_PATTERN = re.compile(r'https?://[^\s<>"\')\]]+|(?<![/@\w])www\.[^\s<>"\')\]]+')

    # Attributions are only consulted while the list is shorter than this
    ATTRIBUTION_THRESHOLD = 10

    # Domain authority (0-40)
    TIER_1_DOMAINS = {
        "wikipedia.org": 40,
        "nature.com": 40,
        "science.org": 40,
        "nih.gov": 40,
        "arxiv.org": 38,
        "github.com": 38,
        "stackoverflow.com": 36,
        "ieee.org": 36,
        "acm.org": 35,
        "who.int": 38,
    }
    INSTITUTIONAL_SUFFIXES = (".gov", ".edu")
    INSTITUTIONAL_AUTHORITY = 35

    TIER_2_DOMAINS = frozenset([
        "forbes.com", "techcrunch.com", "wired.com", "reuters.com", "bloomberg.com",
        "wsj.com", "nytimes.com", "theverge.com", "medium.com", "hbr.org",
        "bbc.com", "bbc.co.uk", "cnbc.com", "zdnet.com", "gartner.com",
        "theguardian.com", "arstechnica.com", "venturebeat.com",
    ])
    TIER_2_AUTHORITY = 30

    TIER_3_DOMAINS = frozenset([
        "g2.com", "capterra.com", "trustradius.com", "getapp.com", "producthunt.com",
        "reddit.com", "quora.com", "substack.com", "wordpress.com", "blogspot.com",
        "linkedin.com", "youtube.com", "dev.to", "hashnode.com",
    ])
    TIER_3_AUTHORITY = 20

    ORG_AUTHORITY = 18
    DEFAULT_AUTHORITY = 10

    # Recency is not observable from a URL alone
    RECENCY_SCORE = 15

    PROVIDER_RELEVANCE = 10
    SOURCE_TYPE_RELEVANCE = {
        SourceType.PAGE: 8,
        SourceType.PDF: 6,
        SourceType.VIDEO: 4,
        SourceType.UNKNOWN: 2,
    }
    ORG_BRAND_RELEVANCE = 12
    COMPETITOR_RELEVANCE = 6
    MAX_RELEVANCE = 30

    def _clean_url(self, url: str) -> str:
        """Clean and normalize URL"""
        # Remove trailing punctuation that got caught
        url = re.sub(r'[.,;:!?\'")\]]+$', '', url.strip())

        # Add protocol if missing
        if url.startswith("www."):
            url = "https://" + url

        return url

    def _make_citation(self, url: str, title: Optional[str], from_provider: bool) -> Citation:
        return Citation(
            url=url,
            domain=extract_domain(url),
            title=title,
            source_type=guess_source_type(url),
            from_provider=from_provider,
        )

    # ------------------------------------------------------------------
    # Sources
    # ------------------------------------------------------------------

    def extract_from_text(self, text: str) -> List[Citation]:
        """Markdown links first, then bare http(s):// and www. URLs"""
        citations = []
        found_urls = set()

        for match in self.MARKDOWN_PATTERN.finditer(text or ""):
            url = self._clean_url(match.group(2))
            if not url or url in found_urls:
                continue
            found_urls.add(url)
            citations.append(self._make_citation(url, match.group(1).strip() or None, False))

        for match in self.PLAIN_URL_PATTERN.finditer(text or ""):
            url = self._clean_url(match.group())
            if not url or url in found_urls:
                continue
            found_urls.add(url)
            citations.append(self._make_citation(url, None, False))

        return citations

    def _extract_perplexity(self, payload: PerplexityPayload) -> List[Citation]:
        citations = []

        for index, item in enumerate(payload.citations, 1):
            if isinstance(item, PerplexityCitation):
                url = item.target
                if not url:
                    continue
                title = item.title or item.text or f"Source {index}"
            else:
                url = item
                title = f"Source {index}"
            citations.append(self._make_citation(url, title, True))

        seen = {c.url for c in citations}
        for source in payload.related_sources:
            if source.url and source.url not in seen:
                seen.add(source.url)
                citations.append(self._make_citation(source.url, source.title, True))

        return citations

    def _extract_gemini(self, payload: GeminiPayload) -> List[Citation]:
        citations: List[Citation] = []
        seen = set()

        candidate = payload.first_candidate
        if candidate is None:
            return citations

        if candidate.citationMetadata:
            for index, entry in enumerate(candidate.citationMetadata.citations, 1):
                if entry.uri:
                    seen.add(entry.uri)
                    citations.append(self._make_citation(entry.uri, entry.title or f"Source {index}", True))

        grounding = candidate.groundingMetadata
        if grounding is None:
            return citations

        for index, chunk in enumerate(grounding.groundingChunks, 1):
            if chunk.web and chunk.web.uri and chunk.web.uri not in seen:
                seen.add(chunk.web.uri)
                citations.append(self._make_citation(chunk.web.uri, chunk.web.title or f"Source {index}", True))

        for attribution in grounding.groundingAttributions:
            if len(citations) >= self.ATTRIBUTION_THRESHOLD:
                break
            if attribution.web and attribution.web.uri and attribution.web.uri not in seen:
                seen.add(attribution.web.uri)
                citations.append(self._make_citation(
                    attribution.web.uri,
                    attribution.web.title or attribution.chunk_id,
                    True,
                ))

        return citations

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def _matches_domain(self, domain: str, candidates) -> Optional[str]:
        for candidate in candidates:
            if domain == candidate or domain.endswith("." + candidate):
                return candidate
        return None

    def domain_authority(self, domain: str) -> float:
        """Authority tier of a domain (0-40), subdomains inherit their parent"""
        domain = (domain or "").lower()
        if not domain:
            return self.DEFAULT_AUTHORITY

        tier_1 = self._matches_domain(domain, self.TIER_1_DOMAINS)
        if tier_1:
            return self.TIER_1_DOMAINS[tier_1]
        if domain.endswith(self.INSTITUTIONAL_SUFFIXES):
            return self.INSTITUTIONAL_AUTHORITY
        if self._matches_domain(domain, self.TIER_2_DOMAINS):
            return self.TIER_2_AUTHORITY
        if self._matches_domain(domain, self.TIER_3_DOMAINS):
            return self.TIER_3_AUTHORITY
        if domain.endswith(".org"):
            return self.ORG_AUTHORITY

        return self.DEFAULT_AUTHORITY

    def correlate_brands(
        self,
        citation: Citation,
        catalog: Optional[Sequence[BrandCatalogEntry]]
    ) -> Tuple[BrandMentionVerdict, float, bool]:
        """
        Check which catalog brands appear in a citation's url, domain and title.

        Returns:
            (verdict, confidence, competitor_only)
        """
        if not catalog:
            return BrandMentionVerdict.UNKNOWN, 0.0, False

        haystack = f"{citation.url} {citation.domain} {citation.title or ''}".lower()
        matches = 0
        org_matched = False
        competitor_matched = False

        for entry in catalog:
            for term in entry.terms:
                normalized = enhanced_normalize(term)
                if not normalized:
                    continue
                if boundary_pattern(normalized).search(haystack):
                    matches += 1
                    if entry.is_org_brand:
                        org_matched = True
                    else:
                        competitor_matched = True
                    break

        confidence = min(0.95, 0.6 + 0.15 * matches) if matches > 0 else 0.85
        verdict = BrandMentionVerdict.YES if org_matched else BrandMentionVerdict.NO
        return verdict, confidence, competitor_matched and not org_matched

    def score_quality(self, citation: Citation, competitor_only: bool = False) -> Citation:
        """Fill quality_factors and quality_score (0-100) on a citation"""
        authority = self.domain_authority(citation.domain)

        relevance = self.PROVIDER_RELEVANCE if citation.from_provider else 0
        relevance += self.SOURCE_TYPE_RELEVANCE.get(citation.source_type, 2)
        if citation.brand_mention == BrandMentionVerdict.YES:
            relevance += self.ORG_BRAND_RELEVANCE * citation.brand_mention_confidence
        elif competitor_only:
            relevance += self.COMPETITOR_RELEVANCE * citation.brand_mention_confidence
        relevance = min(self.MAX_RELEVANCE, relevance)

        citation.quality_factors = QualityFactors(
            domain_authority=float(authority),
            recency=float(self.RECENCY_SCORE),
            relevance=round(float(relevance), 2),
        )
        total = authority + self.RECENCY_SCORE + relevance
        citation.quality_score = round(min(100.0, max(0.0, total)), 2)
        return citation

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def extract_citations(
        self,
        provider: str,
        payload: Any,
        response_text: str,
        catalog: Optional[Sequence[BrandCatalogEntry]] = None
    ) -> CitationsData:
        """
        Extract citations for a response.

        Args:
            provider: Provider name (perplexity, google/gemini, openai, ...)
            payload: Raw provider payload, may be None or malformed
            response_text: Assistant response text
            catalog: Optional brand catalog for correlation

        Returns:
            CitationsData with deduplicated, scored citations
        """
        provider_name = (provider or "unknown").lower()
        parsed: ProviderPayload = parse_provider_payload(provider_name, payload)

        if isinstance(parsed, GeminiPayload):
            citations = self._extract_gemini(parsed)
            limit, ruleset = CITATION_LIMIT_GROUNDED, RULESET_GROUNDED
        elif isinstance(parsed, PerplexityPayload):
            citations = self._extract_perplexity(parsed)
            limit, ruleset = CITATION_LIMIT_SIMPLE, RULESET_SIMPLE
        else:
            citations = []
            limit, ruleset = CITATION_LIMIT_SIMPLE, RULESET_SIMPLE
            if provider_name in ("google", "gemini"):
                limit, ruleset = CITATION_LIMIT_GROUNDED, RULESET_GROUNDED

        if not citations:
            citations = self.extract_from_text(response_text)

        citations = deduplicate_citations(citations)[:limit]

        for citation in citations:
            verdict, confidence, competitor_only = self.correlate_brands(citation, catalog)
            citation.brand_mention = verdict
            citation.brand_mention_confidence = confidence
            self.score_quality(citation, competitor_only)

        return CitationsData(
            provider=provider_name,
            citations=citations,
            collected_at=datetime.now(timezone.utc),
            ruleset_version=ruleset,
        )


_default_extractor = CitationExtractor()


def extract_citations(
    provider: str,
    payload: Any,
    response_text: str,
    catalog: Optional[Sequence[BrandCatalogEntry]] = None
) -> CitationsData:
    return _default_extractor.extract_citations(provider, payload, response_text, catalog)
