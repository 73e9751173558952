"""
Zoovie Social API - Main Application
"""
import logging
import sys
import traceback
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from sqlalchemy.engine import Engine
import uvicorn

from zoovie_social import __version__
from zoovie_social.core.config import Settings, settings
from zoovie_social.core.security import decode_access_token
from zoovie_social.database import engine as default_engine, init_db
from zoovie_social.api.v1 import api_router
from zoovie_social.utils.time_utils import to_utc_isoformat, utc_now

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
    ]
)

logger = logging.getLogger(__name__)


def rate_limit_key(request: Request) -> str:
    """Rate limit per authenticated user, falling back to the client address"""
    authorization = request.headers.get("Authorization", "")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() == "bearer" and token:
        user_id = decode_access_token(token)
        if user_id:
            return f"user:{user_id}"
    return get_remote_address(request)


def build_limiter(app_settings: Settings) -> Limiter:
    """Rate limiter owned by a single application instance"""
    return Limiter(
        key_func=rate_limit_key,
        default_limits=[app_settings.RATE_LIMIT_DEFAULT],
        enabled=app_settings.RATE_LIMIT_ENABLED,
    )


def create_app(
    app_settings: Settings = settings,
    engine: Optional[Engine] = None,
    limiter: Optional[Limiter] = None,
) -> FastAPI:
    """Build the API with its own database engine and rate limiter"""
    bind = engine or default_engine

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        logger.info(f"Starting {app_settings.PROJECT_NAME} ({app_settings.ENVIRONMENT})")
        try:
            init_db(bind)
            logger.info("Database initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize backend: {e}")
            raise

        yield  # Application runs here

        logger.info(f"Shutting down {app_settings.PROJECT_NAME}")

    app = FastAPI(
        title=app_settings.PROJECT_NAME,
        description="Friend requests, friendships and viewer-relative friend status",
        version=__version__,
        docs_url="/docs" if app_settings.DEBUG else None,
        redoc_url="/redoc" if app_settings.DEBUG else None,
        openapi_url=f"{app_settings.API_V1_PREFIX}/openapi.json",
        lifespan=lifespan,
        redirect_slashes=False
    )

    # Rate limiter lives on this app only
    app.state.limiter = limiter or build_limiter(app_settings)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler for unexpected errors."""
        # Generate a unique error ID for tracking
        error_id = str(uuid.uuid4())[:8]

        # Always log the full error on the server
        logger.error(
            f"[ERROR_ID: {error_id}] Unhandled exception on {request.method} {request.url.path}",
            exc_info=True
        )

        if app_settings.DEBUG:
            # Development: return detailed error for debugging
            return JSONResponse(
                status_code=500,
                content={
                    "success": False,
                    "detail": str(exc),
                    "error_id": error_id,
                    "type": type(exc).__name__,
                    "path": str(request.url.path),
                    "traceback": traceback.format_exc()
                }
            )

        # Production: return generic error, hide internal details
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "detail": "An internal server error occurred. Please try again later.",
                "error_id": error_id
            }
        )

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "service": app_settings.PROJECT_NAME,
            "version": __version__,
            "status": "running",
            "environment": app_settings.ENVIRONMENT,
            "docs_url": "/docs" if app_settings.DEBUG else "disabled",
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint for monitoring."""
        return {
            "status": "healthy",
            "timestamp": to_utc_isoformat(utc_now()),
            "service": "zoovie-social-api",
            "version": __version__,
            "rate_limiting": app_settings.RATE_LIMIT_ENABLED,
        }

    app.include_router(api_router, prefix=app_settings.API_V1_PREFIX)

    return app


app = create_app()


if __name__ == "__main__":
    # Run the application
    uvicorn.run(
        "zoovie_social.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
