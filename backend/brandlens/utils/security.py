"""
Security utilities - Shared-secret checks, Hashing
"""

import hashlib
import secrets
from typing import Optional


def verify_bearer_secret(provided: Optional[str], expected: Optional[str]) -> bool:
    """Constant-time comparison of a bearer secret; unset secrets never match"""
    if not provided or not expected:
        return False
    return secrets.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def hash_url(url: str) -> str:
    """Short stable key for a URL: first 16 hex chars of its SHA-256"""
    return hashlib.sha256(url.encode("utf-8")).hexdigest()[:16]
