"""Tests for the queued citation verification task."""

import uuid

from brandlens.services.citation_mention import ResponseNotFoundError
from brandlens.workers.tasks import citation_tasks


def test_invalid_response_id():
    result = citation_tasks.verify_citation_mentions("not-a-uuid")
    assert result == {"success": False, "error": "Invalid response_id"}


def test_response_not_found(monkeypatch):
    async def fake_verify(response_id):
        raise ResponseNotFoundError(str(response_id))

    monkeypatch.setattr(citation_tasks, "_verify", fake_verify)

    result = citation_tasks.verify_citation_mentions(str(uuid.uuid4()))

    assert result == {"success": False, "error": "Response not found"}


def test_returns_worker_summary(monkeypatch):
    seen = []

    async def fake_verify(response_id):
        seen.append(response_id)
        return {"success": True, "processed": 3, "updated": 2, "response_id": str(response_id)}

    monkeypatch.setattr(citation_tasks, "_verify", fake_verify)
    response_id = uuid.uuid4()

    result = citation_tasks.verify_citation_mentions(str(response_id))

    assert result["updated"] == 2
    assert seen == [response_id]


def test_task_routed_to_citations_queue():
    routes = citation_tasks.celery_app.conf.task_routes
    assert routes["brandlens.workers.tasks.citation_tasks.*"] == {"queue": "citations"}
    assert citation_tasks.verify_citation_mentions.name == \
        "brandlens.workers.tasks.citation_tasks.verify_citation_mentions"
