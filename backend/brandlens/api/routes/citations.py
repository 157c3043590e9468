"""
Citation Verification Routes
"""

import logging
from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from brandlens.api.middleware.auth import require_worker_secret
from brandlens.schemas.analysis import CitationMentionRequest, CitationMentionResponse
from brandlens.services.citation_mention import CitationMentionWorker, ResponseNotFoundError
from brandlens.services.response_repository import SqlAlchemyResponseRepository
from brandlens.utils import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


@lru_cache()
def get_citation_worker() -> CitationMentionWorker:
    """One worker per process so the in-memory verdict cache is shared"""
    return CitationMentionWorker()


@router.post(
    "/mentions",
    response_model=CitationMentionResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(require_worker_secret)],
)
async def verify_citation_mentions(
    request: CitationMentionRequest,
    db: AsyncSession = Depends(get_db),
    worker: CitationMentionWorker = Depends(get_citation_worker),
):
    """Fetch the cited pages of a response and record whether the org brand appears"""
    if request.response_id is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing response_id")

    repository = SqlAlchemyResponseRepository(db)
    try:
        summary = await worker.run_for_response(request.response_id, repository)
    except ResponseNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Response not found")

    return CitationMentionResponse(**summary)
