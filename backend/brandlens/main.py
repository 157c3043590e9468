"""
brandlens - Brand Visibility Analysis Engine
Main FastAPI Application
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from brandlens.config import get_settings

logger = logging.getLogger(__name__)


def _is_serverless() -> bool:
    """Check if running in serverless environment"""
    return bool(os.environ.get("VERCEL") or os.environ.get("AWS_LAMBDA_FUNCTION_NAME"))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    # Skip heavy initialization in serverless
    if not _is_serverless():
        from brandlens.utils import init_db, close_db, close_redis
        await init_db()
        yield
        await close_db()
        await close_redis()
    else:
        yield


def create_app() -> FastAPI:
    """Factory function to create FastAPI app"""
    settings = get_settings()

    application = FastAPI(
        title="brandlens API",
        description="""
        Brand Visibility Analysis Engine

        Measures how often and how favorably an organization's brand appears
        in AI assistant answers, and which sources those answers cite.

        ## Features
        - Brand mention detection with exact, boundary and fuzzy matching
        - Sentiment and recommendation context per brand
        - Visibility scoring with full explainability
        - Citation extraction, quality scoring and brand verification
        """,
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc" if settings.is_development else None,
    )

    # CORS middleware
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Global exception handler
    @application.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle unexpected errors"""
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        settings = get_settings()
        if settings.DEBUG:
            return JSONResponse(
                status_code=500,
                content={
                    "detail": str(exc),
                    "type": type(exc).__name__,
                },
            )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    # Import and include API routes
    from brandlens.api.routes import api_router
    application.include_router(api_router, prefix=f"/api/{settings.API_VERSION}")

    # Health check
    @application.get("/health")
    async def health_check():
        """Health check endpoint"""
        settings = get_settings()
        return {
            "status": "healthy",
            "version": "1.0.0",
            "environment": settings.APP_ENV,
        }

    return application


# Create the app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()

    uvicorn.run(
        "brandlens.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development,
        workers=1 if settings.is_development else settings.WORKERS,
    )
