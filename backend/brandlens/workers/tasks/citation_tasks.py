"""
Citation Verification Tasks
Resolve unknown citation brand verdicts from the queue
"""

import asyncio
from typing import Dict
from uuid import UUID

from celery.utils.log import get_task_logger

from brandlens.workers.celery_app import celery_app
from brandlens.services.citation_mention import CitationMentionWorker, ResponseNotFoundError
from brandlens.services.response_repository import SqlAlchemyResponseRepository
from brandlens.utils.cache import close_redis
from brandlens.utils.database import close_db, get_db_context

logger = get_task_logger(__name__)


def run_async(coro):
    """Run async function in sync context"""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


_worker = None


def get_worker() -> CitationMentionWorker:
    """Process-wide worker so the in-memory verdict cache survives between tasks"""
    global _worker
    if _worker is None:
        _worker = CitationMentionWorker()
    return _worker


async def _verify(response_id: UUID) -> Dict:
    worker = get_worker()
    try:
        async with get_db_context() as db:
            return await worker.run_for_response(response_id, SqlAlchemyResponseRepository(db))
    finally:
        # Pooled connections belong to this task's event loop
        await close_db()
        await close_redis()


@celery_app.task(
    bind=True,
    name="brandlens.workers.tasks.citation_tasks.verify_citation_mentions",
    max_retries=0,
)
def verify_citation_mentions(self, response_id: str) -> Dict:
    """
    Verify brand presence in the cited pages of a stored response.

    Args:
        response_id: UUID of the stored provider response

    Returns:
        Worker summary, or {"error": ...} when the response is missing
    """
    try:
        parsed_id = UUID(str(response_id))
    except ValueError:
        logger.warning(f"Invalid response id: {response_id}")
        return {"success": False, "error": "Invalid response_id"}

    try:
        summary = run_async(_verify(parsed_id))
    except ResponseNotFoundError:
        logger.warning(f"Response {response_id} not found")
        return {"success": False, "error": "Response not found"}

    logger.info(
        f"Citation verification for {response_id}: "
        f"processed={summary.get('processed', 0)} updated={summary.get('updated', 0)}"
    )
    return summary
