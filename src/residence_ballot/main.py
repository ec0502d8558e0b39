# src/residence_ballot/main.py
"""Main entry point for the Residence Ballot application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from residence_ballot.api.v1 import (
    projects_router,
    reports_router,
    results_router,
    supervisor_router,
    system_router,
    votes_router,
)
from residence_ballot.core.errors import BallotError
from residence_ballot.core.logging import configure_logging
from residence_ballot.core.settings import settings
from residence_ballot.db.session import create_tables

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Residence Ballot API",
    description="Apartment-community voting with weighted result tallies",
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
app.include_router(projects_router, prefix="/api/v1")
app.include_router(results_router, prefix="/api/v1")
app.include_router(reports_router, prefix="/api/v1")
app.include_router(votes_router, prefix="/api/v1")
app.include_router(supervisor_router, prefix="/api/v1")
app.include_router(system_router, prefix="/api/v1")


@app.exception_handler(BallotError)
async def ballot_error_handler(request: Request, exc: BallotError) -> JSONResponse:
    """Translate domain errors into JSON error responses."""
    if exc.status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging()
    if settings.auto_create_tables:
        create_tables()
    logger.info("%s %s started", settings.app_name, settings.app_version)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "Residence Ballot API",
        "version": settings.app_version,
        "description": "Apartment-community voting with weighted result tallies",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("residence_ballot.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
