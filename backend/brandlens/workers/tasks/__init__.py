"""
Celery Tasks
"""

from .citation_tasks import verify_citation_mentions

__all__ = [
    "verify_citation_mentions",
]
