"""
Main Application - Main Layer

This module serves as the entry point for the FastAPI application.
It initializes the container, creates the FastAPI app, and includes
the API routers.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ecopilot.main.config import AppSettings, get_settings
from ecopilot.main.container import app_lifespan, init_container
from ecopilot.presentation.controllers import (
    optimizations_router,
    preferences_router,
    sensors_router,
    usage_router,
)
from ecopilot.shared import configure_logging, get_logger, update_logging_from_settings

# Basic logging first so configuration loading is itself logged
configure_logging()

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan management.

    Uses the container's app_lifespan to manage MongoDB on startup and
    shutdown.
    """
    app.state.started_at = datetime.now(timezone.utc)
    logger.info("Application starting up")

    async with app_lifespan() as container:
        app.state.container = container
        yield

    logger.info("Application shutting down")


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: The configured FastAPI application
    """
    settings = settings or get_settings()
    update_logging_from_settings(settings)

    init_container(settings)

    app = FastAPI(
        title=settings.api.title,
        description=settings.api.description,
        version=settings.api.version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(sensors_router)
    app.include_router(preferences_router)
    app.include_router(optimizations_router)
    app.include_router(usage_router)

    return app


def run() -> None:
    """Serve the API with uvicorn, building the app through the factory."""
    settings = get_settings()
    uvicorn.run(
        "ecopilot.main.app:create_app",
        factory=True,
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.reload,
    )
