"""
Citation Mention Worker
Fetches cited pages and checks whether the org brand appears in them
"""

import asyncio
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple
from urllib.parse import urlparse
from uuid import UUID

import httpx

from brandlens.adapters.parsing.brand_matcher import BrandCatalogEntry
from brandlens.adapters.parsing.citation_extractor import Citation, detect_brand_mentions
from brandlens.config import Settings, get_settings
from brandlens.models import BrandMentionVerdict
from brandlens.services.response_repository import ResponseRepository
from brandlens.utils.cache import CitationCache, build_citation_cache
from brandlens.utils.security import hash_url

logger = logging.getLogger(__name__)


class ResponseNotFoundError(LookupError):
    """No stored response with the requested id"""
    pass


@dataclass
class WorkerResult:
    processed: int = 0
    updated: int = 0
    citations: List[Citation] = field(default_factory=list)


_SCRIPT = re.compile(r"<script[^>]*>.*?</script>", re.IGNORECASE | re.DOTALL)
_STYLE = re.compile(r"<style[^>]*>.*?</style>", re.IGNORECASE | re.DOTALL)
_TAG = re.compile(r"<[^>]+>")
_WHITESPACE = re.compile(r"\s+")


def strip_html(html: str) -> str:
    """Drop scripts, styles and tags, collapse whitespace"""
    text = _SCRIPT.sub("", html)
    text = _STYLE.sub("", text)
    text = _TAG.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


class CitationMentionWorker:
    """
    Resolves `unknown` citation verdicts by fetching the cited page.

    Citations are handled in small concurrent batches with a pause between
    batches. Verdicts are cached per URL hash; any failure leaves the
    citation `unknown` so a later run can retry it.
    """

    SUPPORTED_CONTENT_TYPES = ("text/html", "text/plain")

    def __init__(
        self,
        cache: Optional[CitationCache] = None,
        client: Optional[httpx.AsyncClient] = None,
        settings: Optional[Settings] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
    ):
        self.settings = settings or get_settings()
        self.cache = cache or build_citation_cache(self.settings)
        self.client = client
        self._sleep = sleep

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    async def check_robots_allowed(self, client: httpx.AsyncClient, url: str) -> bool:
        """HEAD robots.txt; allowed on 2xx or 404, and when the check itself fails"""
        try:
            parsed = urlparse(url)
            robots_url = f"{parsed.scheme}://{parsed.netloc}/robots.txt"
            timeout = self.settings.CITATION_ROBOTS_TIMEOUT
            response = await asyncio.wait_for(client.head(robots_url, timeout=timeout), timeout)
        except (httpx.HTTPError, asyncio.TimeoutError, ValueError):
            return True

        return response.status_code == 404 or response.is_success

    async def fetch_page_content(self, client: httpx.AsyncClient, url: str) -> Optional[str]:
        """
        GET a page as text.

        Only text/html and text/plain are read, at most CITATION_MAX_BYTES of
        body; HTML is reduced to its visible text. The whole request, body
        included, must finish within CITATION_FETCH_TIMEOUT. Returns None on
        any failure.
        """
        timeout = self.settings.CITATION_FETCH_TIMEOUT

        try:
            page = await asyncio.wait_for(self._read_page(client, url, timeout), timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Fetch {url} exceeded {timeout}s")
            return None
        except httpx.HTTPError as e:
            logger.warning(f"Failed to fetch {url}: {e}")
            return None

        if page is None:
            return None

        content, content_type = page
        if "text/html" in content_type:
            content = strip_html(content)

        return content[:self.settings.CITATION_MAX_CHARS]

    async def _read_page(
        self,
        client: httpx.AsyncClient,
        url: str,
        timeout: float
    ) -> Optional[Tuple[str, str]]:
        """Stream a capped body; returns (text, content type) or None"""
        max_bytes = self.settings.CITATION_MAX_BYTES

        async with client.stream(
            "GET",
            url,
            timeout=timeout,
            headers={"User-Agent": self.settings.CITATION_USER_AGENT},
        ) as response:
            if not response.is_success:
                logger.warning(f"Fetch {url} returned HTTP {response.status_code}")
                return None

            content_type = response.headers.get("content-type", "").lower()
            if not any(t in content_type for t in self.SUPPORTED_CONTENT_TYPES):
                logger.info(f"Skipping {url}: unsupported content type '{content_type}'")
                return None

            body = bytearray()
            async for chunk in response.aiter_bytes():
                remaining = max_bytes - len(body)
                if len(chunk) >= remaining:
                    body.extend(chunk[:remaining])
                    break
                body.extend(chunk)

        return bytes(body).decode(response.encoding or "utf-8", errors="replace"), content_type

    # ------------------------------------------------------------------
    # Processing
    # ------------------------------------------------------------------

    async def _process_one(
        self,
        client: httpx.AsyncClient,
        citation: Citation,
        org_brands: Sequence[BrandCatalogEntry]
    ) -> bool:
        """Resolve one citation in place; True when its verdict changed"""
        try:
            url_hash = hash_url(citation.url)

            cached = await self.cache.get_verdict(url_hash)
            if cached:
                logger.info(f"Cache hit for {citation.domain}")
                citation.brand_mention = BrandMentionVerdict(cached["brand_mention"])
                citation.brand_mention_confidence = float(cached["brand_mention_confidence"])
                return True

            if not await self.check_robots_allowed(client, citation.url):
                logger.info(f"Robots check disallowed {citation.domain}, leaving unknown")
                return False

            content = await self.fetch_page_content(client, citation.url)
            if not content:
                return False

            has_mention, confidence = detect_brand_mentions(content, org_brands)
            citation.brand_mention = BrandMentionVerdict.YES if has_mention else BrandMentionVerdict.NO
            citation.brand_mention_confidence = confidence

            await self.cache.set_verdict(url_hash, citation.brand_mention.value, confidence)

            logger.info(
                f"Updated {citation.domain}: {citation.brand_mention.value} "
                f"(confidence: {confidence:.2f})"
            )
            return True

        except Exception as e:
            logger.warning(f"Error processing {citation.url}: {e}")
            return False

    async def _process_with_client(
        self,
        client: httpx.AsyncClient,
        citations: Sequence[Citation],
        org_brands: Sequence[BrandCatalogEntry]
    ) -> WorkerResult:
        pending = [c for c in citations if c.brand_mention == BrandMentionVerdict.UNKNOWN]
        batch_size = max(1, self.settings.CITATION_CONCURRENCY)
        batches = [pending[i:i + batch_size] for i in range(0, len(pending), batch_size)]

        updated = 0
        for index, batch in enumerate(batches):
            results = await asyncio.gather(
                *(self._process_one(client, c, org_brands) for c in batch)
            )
            updated += sum(1 for changed in results if changed)

            if index < len(batches) - 1:
                await self._sleep(self.settings.CITATION_BATCH_DELAY)

        return WorkerResult(processed=len(pending), updated=updated, citations=list(citations))

    async def process(
        self,
        citations: Sequence[Citation],
        org_brands: Sequence[BrandCatalogEntry]
    ) -> WorkerResult:
        """
        Verify brand presence for every `unknown` citation.

        Args:
            citations: Citations to check; updated in place
            org_brands: The org's own catalog entries

        Returns:
            WorkerResult with processed/updated counts and the citations
        """
        if self.client is not None:
            return await self._process_with_client(self.client, citations, org_brands)

        async with httpx.AsyncClient(follow_redirects=True) as client:
            return await self._process_with_client(client, citations, org_brands)

    async def run_for_response(
        self,
        response_id: UUID,
        repository: ResponseRepository
    ) -> Dict[str, Any]:
        """
        Load a stored response, verify its citations and write back changes.

        Raises:
            ResponseNotFoundError: If the response does not exist
        """
        response = await repository.get_response(response_id)
        if response is None:
            raise ResponseNotFoundError(f"Response {response_id} not found")

        logger.info(f"Processing citations for response {response_id}")

        summary = {"success": True, "processed": 0, "updated": 0, "response_id": str(response_id)}

        stored_citations = list((response.citations_json or {}).get("citations") or [])
        raw_citations = [c for c in stored_citations if isinstance(c, dict) and c.get("url")]
        if not raw_citations:
            logger.info("No citations to process")
            return {**summary, "message": "No citations to process"}

        org_brands = await repository.get_org_brands(response.org_id)
        if not org_brands:
            logger.info("No org brands found, skipping brand detection")
            return {**summary, "message": "No org brands found"}

        citations = [Citation.from_dict(c) for c in raw_citations]
        result = await self.process(citations, org_brands)

        if result.updated > 0:
            # Only the verdict fields change; everything else is kept as stored
            for raw, citation in zip(raw_citations, result.citations):
                raw["brand_mention"] = citation.brand_mention.value
                raw["brand_mention_confidence"] = citation.brand_mention_confidence
            await repository.save_citations(
                response_id,
                {**response.citations_json, "citations": stored_citations},
            )

        logger.info(f"Processed {result.processed} citations, updated {result.updated}")
        return {**summary, "processed": result.processed, "updated": result.updated}
