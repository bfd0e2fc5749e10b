# src/plikeme/main.py
"""Main entry point for the P-LikeMe application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from plikeme.api.v1 import (
    auth_router,
    communities_router,
    gurus_router,
    replies_router,
    threads_router,
    users_router,
)
from plikeme.core.settings import settings
from plikeme.db.session import create_tables

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="P-LikeMe API",
    description="Health community forum with sub-communities, reply cards and guru Q&A",
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
app.include_router(auth_router, prefix="/api/v1")
app.include_router(communities_router, prefix="/api/v1")
app.include_router(threads_router, prefix="/api/v1")
app.include_router(replies_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")
app.include_router(gurus_router, prefix="/api/v1")


@app.on_event("startup")
async def on_startup() -> None:
    if settings.auto_create_tables:
        create_tables()
        logger.info("database tables ensured at %s", settings.effective_database_url)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "P-LikeMe API",
        "version": settings.app_version,
        "description": "Health community forum",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("plikeme.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
