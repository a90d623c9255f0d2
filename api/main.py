"""
Deal Board API - Main Application.

FastAPI application with CORS enabled for frontend communication.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import __version__
from api.dependencies import close_context
from repositories.client import log_level

logging.basicConfig(
    level=log_level(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    close_context()


# Create FastAPI application
app = FastAPI(
    title="Deal Board API",
    description="Stage-ordered deal pipeline backed by Supabase",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Configure CORS - Allow all origins for development
# TODO: Restrict origins to the board's frontend host in production
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["Health"])
def health_check():
    """
    Health check endpoint.

    Returns the API status and version.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "service": "deal-board-api"
    }


@app.get("/", tags=["Root"])
def root():
    """
    Root endpoint with API information.
    """
    return {
        "message": "Deal Board API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }


# Import and include routers
from api.routers import deals, session, stages

app.include_router(session.router, prefix="/api/v1", tags=["Session"])
app.include_router(stages.router, prefix="/api/v1", tags=["Stages"])
app.include_router(deals.router, prefix="/api/v1", tags=["Deals"])
