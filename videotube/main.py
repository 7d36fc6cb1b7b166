"""
Main FastAPI application
"""

from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.staticfiles import StaticFiles

from videotube.api.routes import api_router
from videotube.core.config import settings
from videotube.core.error_handlers import register_error_handlers
from videotube.core.logging_config import setup_logging
from videotube.services.pending_user_jobs import pending_user_jobs

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    setup_logging(settings.LOG_LEVEL, settings.LOG_DIR)
    logger.info("Starting VideoTube API...", environment=settings.ENVIRONMENT)

    try:
        await pending_user_jobs.start()
        logger.info("Background jobs started")
    except Exception as e:
        logger.warning("Background jobs failed to start (non-critical)", error=str(e))

    yield

    logger.info("Shutting down VideoTube API...")
    try:
        await pending_user_jobs.stop()
        logger.info("Background jobs stopped successfully")
    except Exception as e:
        logger.error("Error stopping background jobs", error=str(e))


# Create FastAPI application
app = FastAPI(
    title="VideoTube API",
    description="Video sharing platform API",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan
)

# Parse CORS_ORIGINS environment variable
cors_origins = [origin.strip() for origin in settings.CORS_ORIGINS.split(",") if origin.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["*"],
)

# Register error handlers
register_error_handlers(app)

# Locally stored media (when R2 is disabled)
UPLOADS_DIR = Path(settings.UPLOAD_DIR)
app.mount("/uploads", StaticFiles(directory=str(UPLOADS_DIR), check_dir=False), name="uploads")

app.include_router(api_router, prefix="/api/v1")


@app.get("/")
async def root():
    return {"name": "VideoTube API", "version": "1.0.0", "docs": "/api/docs"}
