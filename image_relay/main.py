"""
FastAPI application entry point.

This module creates and configures the FastAPI application.
Using an application factory pattern (create_app function) because:
- Easier to test with different configurations
- Explicit about initialization order
- Can create multiple app instances if needed (e.g., for testing)

For local development:
    uvicorn image_relay.main:app --reload

For production:
    gunicorn image_relay.main:app -w 4 -k uvicorn.workers.UvicornWorker
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from . import __version__
from .api.routes import health, upload
from .config.settings import get_settings
from .core.relay.errors import MissingInputError, RelayError

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=get_settings().log_level.upper(),
)

logger = logging.getLogger(__name__)


INTERNAL_ERROR_MESSAGE = "Internal Server Error"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Logs the effective configuration on startup. Missing configuration is
    logged, not fatal: the relay reports it per request and via /health/ready.
    """
    settings = get_settings()

    logger.info(
        "Image Relay API starting",
        extra={
            "version": settings.api_version,
            "bucket": settings.gcs_bucket_name,
            "mock_mode": settings.gcs_mock_mode,
        }
    )

    missing_fields = settings.validate_required_fields()
    if missing_fields:
        logger.error(
            "Missing required configuration",
            extra={"missing_fields": missing_fields}
        )

    yield

    logger.info("Image Relay API shutting down")


def create_app() -> FastAPI:
    """
    Application factory.

    Creates and configures the FastAPI application.
    This function is called once at startup (in production) or
    multiple times (in tests with different configurations).
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="""
        Relays uploaded images to a Google Cloud Storage bucket.

        ## Workflow

        1. **Upload**: `POST /upload` with a multipart form field `image`
        2. The relay signs a service-account assertion, exchanges it for an
           access token and uploads the file as a public object
        3. The response body contains the object's public URL
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(
        health.router,
        prefix="/health",
        tags=["Health"],
    )

    app.include_router(
        upload.router,
        tags=["Upload"],
    )

    # Root endpoint
    @app.get("/", include_in_schema=False)
    async def root():
        """Root endpoint - service info."""
        return {
            "message": "Image Relay API",
            "version": __version__,
            "docs": "/docs",
            "health": "/health",
        }

    @app.exception_handler(MissingInputError)
    async def missing_input_handler(request: Request, exc: MissingInputError):
        """The only client error the relay reports with its own message."""
        return PlainTextResponse(
            str(exc) or upload.MISSING_IMAGE_MESSAGE,
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    @app.exception_handler(RelayError)
    async def relay_error_handler(request: Request, exc: RelayError):
        """
        Auth, credential and upload failures.

        Already logged with full detail by the relay; the client only ever
        sees a generic message.
        """
        logger.error(
            "Relay request failed",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error_type": type(exc).__name__,
            }
        )
        return PlainTextResponse(
            INTERNAL_ERROR_MESSAGE,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all exception handler.

        Prevents stack traces from leaking to clients. We log the full
        error server-side but return a generic message.
        """
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )

        return PlainTextResponse(
            INTERNAL_ERROR_MESSAGE,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    logger.info(
        "FastAPI application created",
        extra={
            "title": settings.api_title,
            "version": settings.api_version,
        }
    )

    return app


# Create the application instance
# This is what uvicorn/gunicorn will import
app = create_app()


# For debugging/development
if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "image_relay.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower(),
    )
