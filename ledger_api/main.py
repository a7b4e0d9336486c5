"""
FastAPI Application
===================

Main FastAPI app setup with all routes and middleware.
"""
import logging

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from ledger_api.api.v1 import (
    application_router,
    book_router,
    contact_router,
    member_router,
    project_router,
    review_router,
    user_router,
)
from ledger_api.api.v1.error_handlers import register_error_handlers
from ledger_api.core.config import get_settings
from ledger_api.core.logging_config import configure_logging
from ledger_api.di.container import get_container

logger = logging.getLogger(__name__)

SERVICE_NAME = "Catalog Ledger API"
VERSION = "1.0.0"


def create_application() -> FastAPI:
    """
    Create and configure FastAPI application.

    This function sets up the FastAPI application with:
    - Logging configuration
    - CORS middleware configuration
    - Domain error to HTTP status mapping
    - API route registration
    - Startup/shutdown event handlers for the storage backend

    Returns:
        Configured FastAPI application instance
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    application = FastAPI(
        title=SERVICE_NAME,
        description="Library lending ledger, project collaboration marketplace and address book",
        version=VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(application)

    # Register API routers
    application.include_router(book_router, prefix="/api/v1/books")
    application.include_router(member_router, prefix="/api/v1/members")
    application.include_router(user_router, prefix="/api/v1/users")
    application.include_router(project_router, prefix="/api/v1/projects")
    application.include_router(application_router, prefix="/api/v1/applications")
    application.include_router(review_router, prefix="/api/v1/reviews")
    application.include_router(contact_router, prefix="/api/v1/contacts")

    @application.on_event("startup")
    async def startup_event():
        """Build the container; Mongo repositories create their indexes on construction."""
        container = get_container()
        logger.info("%s started (storage backend: %s)", SERVICE_NAME, container.get("settings").storage_backend)

    @application.on_event("shutdown")
    async def shutdown_event():
        container = get_container()
        if container.has("mongo_client"):
            container.get("mongo_client").close()
        logger.info("%s stopped", SERVICE_NAME)

    @application.get("/")
    async def root():
        """Root endpoint - service information."""
        return {
            "status": "running",
            "service": SERVICE_NAME,
            "version": VERSION,
            "docs": "/docs",
        }

    @application.get("/health")
    async def health():
        """Health check endpoint. Pings MongoDB when it is the storage backend."""
        container = get_container()
        if container.has("mongo_client"):
            try:
                container.get("mongo_client").ping()
            except PyMongoError as exc:
                logger.warning("Health check failed: %s", exc)
                return JSONResponse(
                    status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                    content={"status": "unhealthy", "database": "unreachable"},
                )
        return {"status": "healthy"}

    return application


# Create application instance
app = create_application()
