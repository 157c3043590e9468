"""
API Middleware
"""

from .auth import require_worker_secret

__all__ = ["require_worker_secret"]
