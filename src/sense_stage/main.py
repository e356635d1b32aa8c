# src/sense_stage/main.py
"""Main entry point for the Sense application."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from sense_stage.api.v1 import (
    comments_router,
    feed_router,
    media_router,
    profiles_router,
    publications_router,
    search_router,
)
from sense_stage.core.errors import (
    ForbiddenError,
    NotFoundError,
    SenseError,
    ValidationError,
)
from sense_stage.core.logging import configure_logging
from sense_stage.core.settings import settings
from sense_stage.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)

# Starlette renamed the 422 constant across releases; the code itself is stable.
HTTP_422_UNPROCESSABLE = 422

_STATUS_BY_ERROR: list[tuple[type[SenseError], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (ValidationError, HTTP_422_UNPROCESSABLE),
]

_HTTP_ERROR_CODES = {
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
}

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    code: {"model": ErrorResponse}
    for code in (
        status.HTTP_401_UNAUTHORIZED,
        status.HTTP_403_FORBIDDEN,
        status.HTTP_404_NOT_FOUND,
        HTTP_422_UNPROCESSABLE,
    )
}


def _status_for(exc: SenseError) -> int:
    for error_cls, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_cls):
            return status_code
    return status.HTTP_400_BAD_REQUEST


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    configure_logging(settings)
    logger.info("%s %s starting", settings.app_name, settings.app_version)
    yield


# Initialize FastAPI app
app = FastAPI(
    title="Sense API",
    description="Publications, engagement and visibility-aware feeds",
    version=settings.app_version,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)


@app.exception_handler(SenseError)
async def sense_error_handler(request: Request, exc: SenseError) -> JSONResponse:
    """Map domain errors onto HTTP status codes."""
    return JSONResponse(
        status_code=_status_for(exc),
        content={"error_code": exc.code, "message": exc.message},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework HTTP errors (401, 405, ...) in the common error shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": _HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"),
            "message": str(exc.detail),
        },
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request body and query validation failures."""
    return JSONResponse(
        status_code=HTTP_422_UNPROCESSABLE,
        content={
            "error_code": ValidationError.code,
            "message": "Request validation failed",
            "details": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(SQLAlchemyError)
async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handle SQLAlchemy database errors."""
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error_code": "DATABASE_ERROR",
            "message": str(exc) if settings.debug else "Database operation failed",
        },
    )


# Include API routers
for router in (
    publications_router,
    comments_router,
    feed_router,
    search_router,
    profiles_router,
    media_router,
):
    app.include_router(router, prefix="/api/v1", responses=_ERROR_RESPONSES)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("sense_stage.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
