"""
Helpdesk Automation Console - Main FastAPI Application

This is the entry point for the FastAPI application.
It configures middleware, routes, and lifecycle handlers.
"""

from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config.settings import settings
from .api.routes import api_router
from .api.middleware import CorrelationIdMiddleware, register_error_handlers
from .clients import HelpdeskClient
from .services import AutomationService
from .utils.logger import setup_logging, get_logger

# Setup logging first
setup_logging()
logger = get_logger(__name__)

VERSION = "1.0.0"


# =============================================================================
# Application Lifecycle
# =============================================================================

def _lifespan_for(service: Optional[AutomationService]):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan handler.

        Startup:
            - Creates the helpdesk API client and automation service

        Shutdown:
            - Closes the helpdesk API client
        """
        logger.info("Starting Helpdesk Automation Console...")
        app.state.automation_service = service or AutomationService(HelpdeskClient())
        logger.info(f"Helpdesk API: {settings.helpdesk_api_url}")

        yield

        logger.info("Shutting down...")
        await app.state.automation_service.client.aclose()
        logger.info("Application shutdown complete")

    return lifespan


# =============================================================================
# Application Factory
# =============================================================================

def create_app(service: Optional[AutomationService] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        service: Pre-built automation service (tests inject one backed by
            a mock helpdesk transport)

    Returns:
        Configured FastAPI application instance
    """
    application = FastAPI(
        title="Helpdesk Automation Console",
        description="Automation rule builder for the helpdesk admin console",
        version=VERSION,
        lifespan=_lifespan_for(service),
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
        openapi_url="/api/openapi.json" if settings.debug else None,
    )

    _configure_middleware(application)
    register_error_handlers(application)
    _configure_routes(application)

    return application


def _configure_middleware(app: FastAPI) -> None:
    """Configure application middleware."""
    # allow_credentials must be False when allowing all origins
    allow_all = settings.cors_origins.strip() == "*"

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_origins_list,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Correlation-Id"],
    )

    app.add_middleware(CorrelationIdMiddleware)


def _configure_routes(app: FastAPI) -> None:
    """Configure application routes."""
    app.include_router(api_router, prefix="/api/v1")

    @app.get("/health", tags=["Health"])
    async def health():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": VERSION,
            "environment": settings.environment,
            "helpdesk_api_url": settings.helpdesk_api_url,
        }

    @app.get("/", tags=["Health"])
    async def root():
        """Root endpoint with API information."""
        return {
            "name": "Helpdesk Automation Console",
            "version": VERSION,
            "docs": "/api/docs" if settings.debug else None
        }


# =============================================================================
# Application Instance
# =============================================================================

app = create_app()
