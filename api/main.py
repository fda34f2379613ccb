"""
Main FastAPI application for Form Architect.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .routes import forms, submissions, scoring, templates
from .services import get_services, initialize_services
from config.settings import get_settings
from database.session import init_db, close_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())
    logger.info("Form Architect starting up...")

    await init_db(settings.database_url)
    initialize_services()
    logger.info("Form Architect ready")
    yield
    logger.info("Form Architect shutting down...")
    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.api_title,
        description="Form submissions with lead scoring, spam detection and auto-responses.",
        version=settings.api_version,
        docs_url="/docs",
        redoc_url="/redoc",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.include_router(forms.router, prefix="/api/v1", tags=["Forms"])
    app.include_router(submissions.router, prefix="/api/v1", tags=["Submissions"])
    app.include_router(scoring.router, prefix="/api/v1", tags=["Scoring"])
    app.include_router(templates.router, prefix="/api/v1", tags=["Templates"])

    # Root endpoint
    @app.get("/")
    async def root():
        return {
            "service": settings.api_title,
            "version": settings.api_version,
            "status": "operational",
            "docs": "/docs",
        }

    # Health check
    @app.get("/health")
    async def health():
        services = get_services()
        status = services.health()
        status["email_channel"] = (
            await services.email_channel.health_check() if services.email_channel else False
        )
        return {
            "status": "healthy" if services.is_ready and status["email_channel"] else "degraded",
            "services": status,
        }

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
