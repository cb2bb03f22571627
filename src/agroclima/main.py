"""Main FastAPI application for the AgroClima prediction service."""

import logging
import traceback
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from agroclima.api.endpoints import router as api_router
from agroclima.catalog.database import create_engine
from agroclima.config import (
    HOST, PORT, DEBUG, SERVICE_NAME, SERVICE_VERSION,
    RATE_LIMIT_ENABLED
)
from agroclima.logging_config import configure_logging
from agroclima.middleware.rate_limit import RateLimitMiddleware
from agroclima.rate_limiter import RateLimiter

configure_logging()
logger = logging.getLogger(__name__)

INVALID_REQUEST_MESSAGE = "Parâmetros da requisição inválidos."


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Owns the store engine (and its connection pool) and, when rate limiting is
    enabled, the Redis-backed limiter for the life of the app.
    """
    engine = None
    rate_limiter = None
    try:
        engine = create_engine()
        app.state.engine = engine
        if RATE_LIMIT_ENABLED:
            rate_limiter = RateLimiter()
            app.state.rate_limiter = rate_limiter
        logger.info(f"Starting {SERVICE_NAME} (rate limit enabled: {RATE_LIMIT_ENABLED})")
        yield
    except Exception as e:
        logger.error(f"Startup error: {e}")
        logger.error(traceback.format_exc())
        raise
    finally:
        logger.info(f"Shutting down {SERVICE_NAME}")
        if rate_limiter is not None:
            app.state.rate_limiter = None
            await rate_limiter.close()
        if engine is not None:
            await engine.dispose()


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors as ``{"error": message}``."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render malformed input as a 400 ``{"error": message}``."""
    logger.info(f"Invalid request to {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": INVALID_REQUEST_MESSAGE})


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title=SERVICE_NAME,
        description="15-day weather forecasts with AI agronomic risk analysis for Brazilian municipalities",
        version=SERVICE_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add rate limiting middleware
    app.add_middleware(RateLimitMiddleware)

    app.include_router(api_router)

    return app


# Create app instance for uvicorn
app = create_app()


def main() -> None:
    """Main entry point for the application."""
    logger.info(f"Starting server on {HOST}:{PORT}")
    uvicorn.run(
        "agroclima.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
        log_level="info" if not DEBUG else "debug"
    )


if __name__ == "__main__":
    main()
