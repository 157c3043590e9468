"""
Brand Matching Engine
Detects brand mentions with exact, word-boundary and fuzzy matching
"""

import math
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from rapidfuzz.distance import Levenshtein

from brandlens.models import MatchType


@dataclass(frozen=True)
class BrandCatalogEntry:
    """A brand to match: the org's own brand or a competitor"""
    name: str
    variants: Tuple[str, ...] = ()
    is_org_brand: bool = False

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Brand catalog entry name cannot be empty")
        # Accept any iterable of variants, store as an immutable tuple
        object.__setattr__(self, "variants", tuple(v for v in self.variants if v))

    @property
    def terms(self) -> List[str]:
        """Primary name followed by its variants"""
        return [self.name, *self.variants]


@dataclass
class BrandMention:
    """A detected brand mention"""
    brand: str                   # Catalog name of the matched brand
    confidence: float            # 0.0 - 1.0
    match_type: MatchType
    position: int                # Character offset in the response
    context_window: str          # Surrounding text
    is_org_brand: bool = False


@dataclass
class UserBrandMatch:
    """Result of matching a single token against the org's own brands"""
    is_match: bool
    confidence: float
    matched_brand: str
    match_type: Optional[MatchType] = None


_TLD_SUFFIX = re.compile(r"(\.com|\.io|\.net|\.org)$")
_STRIP_KEEP_DOMAIN = re.compile(r"[^\w\s.-]")
_STRIP_ALL_PUNCT = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")
_TOKEN = re.compile(r"\S+")
_TOKEN_CLEAN = re.compile(r"[^\w.-]")

# Generic and dismissive phrases that make a mention a poor signal
_GENERIC_PHRASES = [
    "for example", "such as", "like apple or google", "similar to",
    "including but not limited to", "e.g.", "i.e.",
]
_DISMISSIVE_PHRASES = [
    "not like", "unlike", "different from", "avoid", "worse than", "outdated like",
]


def normalize(value: str) -> str:
    """
    Lowercase, drop all punctuation and collapse whitespace.

    >>> normalize("ACME, Inc.")
    'acme inc'
    """
    if not value:
        return ""
    value = _STRIP_ALL_PUNCT.sub("", value.lower())
    return _WHITESPACE.sub(" ", value).strip()


def enhanced_normalize(value: str) -> str:
    """
    Normalization that keeps domain-style names matchable.

    Strips a trailing .com/.io/.net/.org, drops punctuation except dots and
    hyphens, and collapses whitespace.
    """
    if not value:
        return ""
    value = _TLD_SUFFIX.sub("", value.lower().strip())
    value = _STRIP_KEEP_DOMAIN.sub("", value)
    return _WHITESPACE.sub(" ", value).strip()


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance (insert, delete, substitute all cost 1)"""
    return Levenshtein.distance(a, b)


def boundary_pattern(term: str) -> re.Pattern:
    """Word-boundary, case-insensitive pattern for a literal term"""
    return re.compile(r"\b" + re.escape(term) + r"\b", re.IGNORECASE)


class BrandMatcher:
    """
    Matches catalog brands in text using multiple strategies:
    1. Exact substring (case-insensitive)
    2. Normalized word-boundary match
    3. Fuzzy match (for typos, variations)
    """

    # Context window size (characters before/after match)
    CONTEXT_WINDOW = 100

    # Normalized terms shorter than this are never matched
    MIN_TERM_LENGTH = 2

    # Fuzzy matching over text tokens
    FUZZY_MIN_TERM_LENGTH = 4
    FUZZY_MIN_TOKEN_LENGTH = 3
    FUZZY_MAX_ERROR_RATIO = 0.2
    FUZZY_MIN_CONFIDENCE = 0.7

    # Confidence by strategy
    EXACT_CONFIDENCE = 1.0
    BOUNDARY_CONFIDENCE = 0.9

    def __init__(self, catalog: Optional[Sequence[BrandCatalogEntry]] = None):
        self.catalog = list(catalog or [])

    def get_context(self, text: str, start: int, length: int) -> str:
        """Extract context around a match"""
        context_start = max(0, start - self.CONTEXT_WINDOW)
        context_end = min(len(text), start + length + self.CONTEXT_WINDOW)
        return text[context_start:context_end]

    def _find_exact_matches(self, processed: str, term: str) -> Iterable[Tuple[int, int]]:
        pattern = re.compile(re.escape(term), re.IGNORECASE)
        for match in pattern.finditer(processed):
            yield match.start(), len(term)

    def _find_boundary_matches(self, processed: str, normalized: str) -> Iterable[Tuple[int, int]]:
        for match in boundary_pattern(normalized).finditer(processed):
            yield match.start(), len(normalized)

    def _find_fuzzy_matches(self, processed: str, normalized: str) -> Iterable[Tuple[int, int, float]]:
        term_length = len(normalized)
        max_distance = math.floor(term_length * self.FUZZY_MAX_ERROR_RATIO)

        for token in _TOKEN.finditer(processed):
            clean = _TOKEN_CLEAN.sub("", token.group())
            if len(clean) < self.FUZZY_MIN_TOKEN_LENGTH:
                continue

            distance = levenshtein_distance(clean, normalized)
            if 0 < distance <= max_distance:
                confidence = 1 - distance / term_length
                if confidence >= self.FUZZY_MIN_CONFIDENCE:
                    yield token.start(), len(token.group()), confidence

    def find_mentions(self, text: str) -> List[BrandMention]:
        """
        Find all catalog brand mentions in text.

        Args:
            text: The AI assistant response to analyze

        Returns:
            One mention per (brand, position), highest confidence first
        """
        if not text or not self.catalog:
            return []

        processed = text.lower()
        candidates: List[BrandMention] = []

        for entry in self.catalog:
            for term in entry.terms:
                normalized = enhanced_normalize(term)
                if len(normalized) < self.MIN_TERM_LENGTH:
                    continue

                for pos, length in self._find_exact_matches(processed, term):
                    candidates.append(BrandMention(
                        brand=entry.name,
                        confidence=self.EXACT_CONFIDENCE,
                        match_type=MatchType.EXACT,
                        position=pos,
                        context_window=self.get_context(text, pos, length),
                        is_org_brand=entry.is_org_brand,
                    ))

                for pos, length in self._find_boundary_matches(processed, normalized):
                    candidates.append(BrandMention(
                        brand=entry.name,
                        confidence=self.BOUNDARY_CONFIDENCE,
                        match_type=MatchType.EXACT,
                        position=pos,
                        context_window=self.get_context(text, pos, length),
                        is_org_brand=entry.is_org_brand,
                    ))

                if len(normalized) >= self.FUZZY_MIN_TERM_LENGTH:
                    for pos, length, confidence in self._find_fuzzy_matches(processed, normalized):
                        candidates.append(BrandMention(
                            brand=entry.name,
                            confidence=confidence,
                            match_type=MatchType.FUZZY,
                            position=pos,
                            context_window=self.get_context(text, pos, length),
                            is_org_brand=entry.is_org_brand,
                        ))

        return deduplicate_mentions(candidates)

    def is_org_mention(self, token: str) -> bool:
        """Check a token against this matcher's catalog (see is_org_mention)"""
        return is_org_mention(token, self.catalog)

    def match_user_brand(self, token: str) -> UserBrandMatch:
        """Match a token against the org's own brands (see match_user_brand)"""
        return match_user_brand(token, self.catalog)


def deduplicate_mentions(mentions: List[BrandMention]) -> List[BrandMention]:
    """Keep the highest-confidence mention per (brand, position)"""
    seen = {}
    for mention in mentions:
        key = (mention.brand, mention.position)
        existing = seen.get(key)
        if existing is None or mention.confidence > existing.confidence:
            seen[key] = mention

    return sorted(seen.values(), key=lambda m: (-m.confidence, m.position))


def find_matches(text: str, catalog: Sequence[BrandCatalogEntry]) -> List[BrandMention]:
    """Find brand mentions in text against a catalog"""
    return BrandMatcher(catalog).find_mentions(text)


def is_org_mention(token: str, catalog: Sequence[BrandCatalogEntry]) -> bool:
    """
    Check whether a token refers to one of the given (org) brands.

    Tokens shorter than four normalized characters are always rejected, even
    when listed in the catalog. Longer tokens match on equality with a name
    or variant, or when they contain a name/variant of four or more chars.

    >>> is_org_mention("TechCorp Inc", [BrandCatalogEntry("TechCorp")])
    True
    >>> is_org_mention("ABC", [BrandCatalogEntry("ABC")])
    False
    """
    normalized_token = normalize(token)
    if len(normalized_token) < 4:
        return False

    for entry in catalog:
        for term in entry.terms:
            normalized_term = normalize(term)
            if not normalized_term:
                continue
            if normalized_token == normalized_term:
                return True
            if len(normalized_term) >= 4 and normalized_term in normalized_token:
                return True

    return False


def match_user_brand(token: str, catalog: Sequence[BrandCatalogEntry]) -> UserBrandMatch:
    """
    Match a token against the org's own brands with confidence scoring.

    Tries exact equality, then partial containment (terms of 4+ chars), then
    fuzzy edit distance (terms of 3+ chars), per term in catalog order.
    """
    normalized_token = enhanced_normalize(token)
    if not normalized_token:
        return UserBrandMatch(is_match=False, confidence=0.0, matched_brand="")

    for entry in catalog:
        if not entry.is_org_brand:
            continue

        for index, term in enumerate(entry.terms):
            normalized_term = enhanced_normalize(term)
            if not normalized_term:
                continue

            # Exact match
            if normalized_token == normalized_term:
                return UserBrandMatch(
                    is_match=True,
                    confidence=1.0,
                    matched_brand=entry.name,
                    match_type=MatchType.EXACT if index == 0 else MatchType.VARIANT,
                )

            # Partial match for longer brands
            if len(normalized_term) >= 4:
                if normalized_term in normalized_token or normalized_token in normalized_term:
                    ratio = (max(len(normalized_token), len(normalized_term)) /
                             min(len(normalized_token), len(normalized_term)))
                    confidence = min(0.8, 1 / ratio)
                    if confidence >= 0.6:
                        return UserBrandMatch(
                            is_match=True,
                            confidence=confidence,
                            matched_brand=entry.name,
                            match_type=MatchType.PARTIAL,
                        )

            # Fuzzy match
            if len(normalized_term) >= 3:
                distance = levenshtein_distance(normalized_token, normalized_term)
                max_distance = math.floor(len(normalized_term) * 0.25)
                if 0 < distance <= max_distance:
                    confidence = max(0.5, 1 - distance / len(normalized_term))
                    return UserBrandMatch(
                        is_match=True,
                        confidence=confidence,
                        matched_brand=entry.name,
                        match_type=MatchType.FUZZY,
                    )

    return UserBrandMatch(is_match=False, confidence=0.0, matched_brand="")


def is_relevant_brand_mention(mention: BrandMention) -> bool:
    """Reject mentions used as generic examples or dismissed outright"""
    context = mention.context_window.lower()

    if any(phrase in context for phrase in _GENERIC_PHRASES):
        return False
    if any(phrase in context for phrase in _DISMISSIVE_PHRASES):
        return False

    return True
