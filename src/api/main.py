"""
Reelview FastAPI Application
============================

REST API for per-feature YouTube review analysis.

Endpoints:
    GET  /api/health              - Health check
    POST /api/analyze             - Analyze a product
    POST /api/features            - Aggregate caller-supplied reviews
    GET  /api/products/{name}     - Stored analysis

Usage:
    uvicorn src.api.main:app --reload --port 8000

    Or with CLI:
    python -m src.api.main
"""

from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
import os

from .models import HealthResponse
from .analysis_routes import router as analysis_router
from . import db
from ..data.config import get_settings
from ..orchestrator.logging_config import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging(get_settings().logging)
    logger.info("Starting Reelview API...")

    db.get_pool()

    yield

    db.close_pool()
    logger.info("Shutting down Reelview API...")


app = FastAPI(
    title="Reelview API",
    description="Per-feature sentiment from YouTube product reviews",
    version="0.1.0",
    lifespan=lifespan,
)

# In production, set CORS_ORIGINS env var (comma-separated)
_default_origins = [
    "http://localhost:5173",
    "http://localhost:8080",
    "http://127.0.0.1:5173",
    "http://127.0.0.1:8080",
]
_extra_origins = os.getenv("CORS_ORIGINS", "")
if _extra_origins:
    _default_origins.extend([o.strip() for o in _extra_origins.split(",") if o.strip()])

app.add_middleware(
    CORSMiddleware,
    allow_origins=_default_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(analysis_router)


@app.get("/api/health", response_model=HealthResponse)
def health_check():
    """
    Health check endpoint.

    Returns real status of:
    - Database connectivity and version
    - YouTube API key presence
    """
    db_health = db.check_health()
    youtube_status = "configured" if get_settings().youtube.is_configured else "not_configured"

    overall = "healthy" if db_health["status"] == "connected" else "degraded"

    return HealthResponse(
        status=overall,
        version=get_settings().app_version,
        database=db_health["status"],
        database_version=db_health.get("version"),
        youtube=youtube_status,
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.api.main:app",
        host=os.getenv("API_HOST", "0.0.0.0"),
        port=int(os.getenv("API_PORT", "8000")),
        reload=not get_settings().is_production(),
    )
