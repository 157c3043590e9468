"""
Authentication Middleware
"""

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from brandlens.config import get_settings
from brandlens.utils import verify_bearer_secret

security = HTTPBearer(auto_error=False)


async def require_worker_secret(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> None:
    """
    Dependency guarding worker trigger endpoints with the shared secret.

    Raises:
        HTTPException: If the bearer token is missing or does not match
    """
    settings = get_settings()
    token = credentials.credentials if credentials else None

    if not verify_bearer_secret(token, settings.CITATION_WORKER_SECRET):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
