"""
Main FastAPI application entry point for the Cendre one-time secret service.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from slowapi.errors import RateLimitExceeded
import uvicorn

from cendre.core.config import Settings, settings
from cendre.core.exceptions import (
    cendre_exception_handler,
    validation_exception_handler,
    rate_limit_exceeded_handler,
    generic_exception_handler,
)
from cendre.core.middleware import LoggingMiddleware, SecurityHeadersMiddleware
from cendre.core.rate_limit import configure_limiter, limiter
from cendre.core.store import open_store, close_store, get_secret_store
from cendre.api.routes import api_router
from cendre.services.secret_store import SecretStore, build_secret_store
from cendre.utils.exceptions import CendreException, StorageError

VERSION = "0.1.0"


def create_app(config: Optional[Settings] = None, store: Optional[SecretStore] = None) -> FastAPI:
    """
    Build the application.

    Args:
        config: Settings to use (defaults to the global settings)
        store: Pre-built secret store; built from ``config`` at startup when omitted
    """
    config = config or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        logger.info("Starting Cendre secret service")
        await open_store(app, store or build_secret_store(config))
        logger.info("Application startup complete")

        yield

        logger.info("Shutting down application")
        await close_store(app)

    app = FastAPI(
        title="Cendre API",
        description="One-time retrieval of client-side encrypted secrets",
        version=VERSION,
        docs_url="/docs" if config.DEBUG else None,
        redoc_url=None,
        lifespan=lifespan
    )

    app.state.settings = config

    # Add rate limiter to app
    configure_limiter(config)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # Add custom middleware (order matters - last added is outermost)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type"],
    )

    # Add exception handlers
    app.add_exception_handler(CendreException, cendre_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint."""
        try:
            secret_store = get_secret_store(request)
            await secret_store.ping()
        except StorageError as e:
            logger.warning(f"Health check failed: {e.message}")
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "unhealthy", "version": VERSION},
            )
        return {"status": "healthy", "store": secret_store.name, "version": VERSION}

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        workers=1 if settings.DEBUG else settings.WORKERS
    )
