"""
CVIntel API - Main Application Entry Point

This module initializes the FastAPI application with:
- Database schema initialization and engine disposal
- CORS middleware for frontend communication
- Prometheus metrics
- Flat error model: every failure is a 500 carrying its message
- API router registration

Architecture:
    FastAPI App
    ├── Lifespan Management (startup/shutdown)
    ├── CORS Middleware
    ├── Prometheus Middleware (/metrics)
    └── API Router
        ├── /auth - Profile lookup and upsert by email
        ├── /analysis - Persist analysis results
        ├── /history - Past scores and reports per user
        └── /ai - Analysis pipeline and content optimization
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from cvintel.api import api_router
from cvintel.config import get_settings
from cvintel.database import dispose_db, get_db, init_db
from cvintel.exceptions import CVIntelError
from cvintel.middleware import setup_metrics
from cvintel.services.store import CVStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle events.

    Startup:
        1. Create database tables when a store is configured

    Shutdown:
        1. Dispose of the database engine
    """
    if get_settings().store_configured:
        await init_db()
    else:
        logger.warning("DATABASE_URL not set; store endpoints will fail until configured")
    yield
    await dispose_db()


app = FastAPI(
    title="CVIntel API",
    description="AI-powered CV scoring and optimization API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_metrics(app)

app.include_router(api_router)


@app.exception_handler(CVIntelError)
async def cvintel_error_handler(request: Request, exc: CVIntelError):
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal Server Error", "details": str(exc)},
    )


@app.get("/health")
async def health_check():
    settings = get_settings()
    return {
        "status": "healthy",
        "provider_configured": settings.provider_configured,
        "store_configured": settings.store_configured,
    }


@app.get("/keep-alive")
async def keep_alive(db: AsyncSession = Depends(get_db)):
    await CVStore(db).ping()
    return {"status": "alive", "timestamp": datetime.utcnow().isoformat()}
