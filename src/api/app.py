"""
FastAPI application for the provider validation pipeline.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.observability.logger import get_logger
from src.services.application import Application, build_application

from .routes import health_router, router

logger = get_logger(__name__)


def create_app(application: Application | None = None) -> FastAPI:
    """
    Create the API.

    Args:
        application: Pre-built pipeline wiring; built from the environment if omitted
    """
    application = application or build_application()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Provider validation API starting")
        yield
        logger.info("Provider validation API shutting down")
        application.close()

    app = FastAPI(
        title="Provider Validation API",
        description="Upload provider CSV/Excel files, track validation jobs and read their reports.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.application = application
    app.include_router(router)
    app.include_router(health_router)
    return app
