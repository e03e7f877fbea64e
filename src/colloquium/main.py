"""Main entry point for the Colloquium application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from colloquium.api.v1 import (
    comments_router,
    communities_router,
    notifications_router,
    posts_router,
    reports_router,
)
from colloquium.core.settings import settings
from colloquium.services.media import get_media_store

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Colloquium API",
    description="Professional communities with moderated membership and content",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(communities_router, prefix="/api/v1")
app.include_router(posts_router, prefix="/api/v1")
app.include_router(comments_router, prefix="/api/v1")
app.include_router(notifications_router, prefix="/api/v1")
app.include_router(reports_router, prefix="/api/v1")


@app.on_event("startup")
async def on_startup() -> None:
    if not settings.media_enabled:
        logger.warning("Media store credentials missing; image deletions will be skipped")


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await get_media_store().close()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}

@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Professional communities with moderated membership and content",
        "docs": "/docs",
        "redoc": "/redoc"
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("colloquium.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
