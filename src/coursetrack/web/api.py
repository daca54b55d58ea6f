"""FastAPI application factory.

Main entry point for the coursetrack Web API.
"""

import sqlite3
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from coursetrack import __version__
from coursetrack.auth.identity import IdentityProviderError, UnauthorizedError
from coursetrack.core.results import FailureReason
from coursetrack.db.database import init_db
from coursetrack.web.routes import (
    badges_router,
    certificates_router,
    course_router,
    health_router,
    profile_router,
    progress_router,
    quiz_router,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan context manager for startup/shutdown events."""
    db_path = init_db()
    logger.info("api_startup", db_path=str(db_path.absolute()), version=__version__)
    yield


async def _unauthorized_handler(request: Request, exc: UnauthorizedError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={
            "detail": {"reason": FailureReason.UNAUTHORIZED.value, "message": exc.message}
        },
        headers={"WWW-Authenticate": "Bearer"},
    )


async def _identity_provider_handler(
    request: Request, exc: IdentityProviderError
) -> JSONResponse:
    logger.error("identity_provider_unavailable", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": {"reason": "identity_unavailable", "message": str(exc)}},
    )


async def _store_error_handler(request: Request, exc: sqlite3.Error) -> JSONResponse:
    logger.error("store_failure", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": {"reason": FailureReason.STORE_FAILURE.value, "message": str(exc)}
        },
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI app instance
    """
    app = FastAPI(
        title="coursetrack API",
        description="Progress, badges and certificates for the five-day AI course",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS middleware for web clients
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(UnauthorizedError, _unauthorized_handler)
    app.add_exception_handler(IdentityProviderError, _identity_provider_handler)
    app.add_exception_handler(sqlite3.Error, _store_error_handler)

    # Include routers
    app.include_router(health_router)
    app.include_router(course_router)
    app.include_router(progress_router)
    app.include_router(quiz_router)
    app.include_router(badges_router)
    app.include_router(certificates_router)
    app.include_router(profile_router)

    return app


# Default app instance for uvicorn
app = create_app()
