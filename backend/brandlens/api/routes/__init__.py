"""
API Routes
"""

from fastapi import APIRouter

from .citations import router as citations_router

api_router = APIRouter()

api_router.include_router(citations_router, prefix="/citations", tags=["Citations"])
