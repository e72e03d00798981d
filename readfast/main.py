"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from readfast import __version__
from readfast.api.routes import documents, extract, health
from readfast.config import Settings, get_settings

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    logger.info("%s API starting", app.title)
    yield
    logger.info("%s API stopped", app.title)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings)

    application = FastAPI(
        title=settings.app_name,
        description="RSVP Speed-Reading Application",
        version=__version__,
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(health.router, prefix="/api", tags=["health"])
    application.include_router(documents.router, prefix="/api", tags=["documents"])
    application.include_router(extract.router, prefix="/api", tags=["extract"])

    @application.get("/")
    def root():
        """Root endpoint."""
        return {
            "service": "ReadFast API",
            "version": __version__,
            "docs": "/docs" if settings.debug else None,
        }

    return application


app = create_app()
