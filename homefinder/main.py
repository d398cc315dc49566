"""
HomeFinder Backend - Main FastAPI Application.

This is the entry point for the HomeFinder backend API.
It resolves natural-language property searches into Repliers listing
queries and keeps conversation context across refinements.

Run with:
    uvicorn homefinder.main:app --reload
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from homefinder.api.v1.search import router as search_router
from homefinder.config import get_settings
from homefinder.constants import API_TITLE, API_VERSION
from homefinder.logging_config import setup_logging
from homefinder.middleware import RequestContextMiddleware
from homefinder.services.sessions import SessionRegistry

# Get settings before logging setup so we know the debug flag
settings = get_settings()

# Configure logging
setup_logging(settings.debug)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan event handler for startup and shutdown."""
    logger.info("api_startup", cors_origins=settings.cors_origins)

    if not settings.repliers_api_key:
        logger.warning(
            "repliers_key_missing", detail="Requests must send X-Repliers-Api-Key"
        )
    else:
        logger.info("repliers_configured", base_url=settings.repliers.base_url)

    sessions = SessionRegistry(settings.repliers, settings.sessions)
    _app.state.sessions = sessions

    logger.info("services_initialized")

    yield

    await sessions.close()
    logger.info("api_shutdown")


# Create FastAPI app
app = FastAPI(
    title=API_TITLE,
    description=(
        "Conversational property search. Translates natural-language prompts "
        "into listing queries and refines them across turns."
    ),
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Request context middleware must come before CORS so every response gets
# the X-Request-ID header (including preflight OPTIONS responses).
app.add_middleware(RequestContextMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Include routers
app.include_router(search_router, prefix="/api/v1")


@app.get("/")
async def root() -> dict:
    """Root endpoint with API info."""
    return {
        "name": API_TITLE,
        "version": API_VERSION,
        "description": "Conversational natural-language property search",
        "docs": "/docs",
    }


@app.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "healthy"}
