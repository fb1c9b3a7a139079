"""Main FastAPI application with hexagonal architecture."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from pydantic import BaseModel

from lycans.config import data_config_from_env

from . import __version__
from .api.rest.routes import router as stats_router

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    config = data_config_from_env()
    if not (config.data_file or config.data_url):
        logger.warning("No game log configured; stats endpoints will answer 503")
    yield


app = FastAPI(
    title="Lycans Stats API",
    description="Statistics and achievements computed from Lycans game logs",
    version=__version__,
    lifespan=lifespan,
)

# CORS configuration for frontend integration
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",  # Alternative dev port
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    data_configured: bool


@app.get("/", tags=["meta"])
async def root():
    """API root with information and available endpoints."""
    return {
        "name": "Lycans Stats API",
        "version": __version__,
        "docs": "/docs",
        "endpoints": {
            "health": "GET /health",
            "report": "GET /api/stats/report",
            "players": "GET /api/stats/players",
            "series": "GET /api/stats/series",
            "talking": "GET /api/stats/talking",
            "deaths": "GET /api/stats/deaths",
            "achievements": "GET /api/players/{player_id}/achievements",
            "validation": "GET /api/validation",
        },
    }


@app.get("/health", response_model=HealthResponse, tags=["meta"])
async def health_check():
    """Check API health and configuration status."""
    config = data_config_from_env()
    return HealthResponse(
        status="healthy",
        version=__version__,
        data_configured=bool(config.data_file or config.data_url),
    )


@app.exception_handler(StarletteHTTPException)
async def error_body_handler(request: Request, exc: StarletteHTTPException):
    """Return structured errors as the response body instead of under ``detail``."""
    if isinstance(exc.detail, dict) and "error" in exc.detail:
        return JSONResponse(status_code=exc.status_code, content=exc.detail)
    return await http_exception_handler(request, exc)


# Include REST routes
app.include_router(stats_router)
