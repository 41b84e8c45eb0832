"""FastAPI application setup."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from coursereg import __version__
from coursereg.api.dependencies import close_services, init_services
from coursereg.api.models import APIResponse
from coursereg.api.routes import courses, enrollment, reports
from coursereg.config import AppConfig
from coursereg.enrollment import (
    CourseLimitExceededError,
    CourseNotFoundError,
    DuplicateCourseEntryError,
    RegistrationError,
    StudentNotFoundError,
    UserNotApprovedError,
)
from coursereg.store import StorageFailureError, StoreError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)

# Each error kind maps to its own status and message
ERROR_RESPONSES: dict[type[Exception], tuple[int, str]] = {
    StudentNotFoundError: (status.HTTP_404_NOT_FOUND, "Student not found"),
    CourseNotFoundError: (status.HTTP_412_PRECONDITION_FAILED, "Course not found"),
    CourseLimitExceededError: (status.HTTP_409_CONFLICT, "Course limit exceeded"),
    DuplicateCourseEntryError: (status.HTTP_400_BAD_REQUEST, "Course already added"),
    UserNotApprovedError: (status.HTTP_403_FORBIDDEN, "Student not approved"),
    StorageFailureError: (status.HTTP_503_SERVICE_UNAVAILABLE, "Storage unavailable"),
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    config: AppConfig = app.state.config
    init_services(config.db_path, config.limits)
    logger.info("Course registration API started (db=%s)", config.db_path)
    yield
    close_services()


def add_exception_handlers(app: FastAPI) -> None:
    """Register the error-kind to HTTP status mapping on an app."""

    async def registration_error_handler(_request: Request, exc: Exception) -> JSONResponse:
        status_code, message = next(
            response for exc_class, response in ERROR_RESPONSES.items() if isinstance(exc, exc_class)
        )
        logger.info("Request rejected with %d: %s", status_code, exc)
        return JSONResponse(
            status_code=status_code,
            content=APIResponse[None](data=None, error=message).model_dump(),
        )

    for exc_class in ERROR_RESPONSES:
        app.add_exception_handler(exc_class, registration_error_handler)

    @app.exception_handler(RegistrationError)
    @app.exception_handler(StoreError)
    async def internal_error_handler(_request: Request, exc: Exception) -> JSONResponse:
        logger.error("Unhandled registry error: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=APIResponse[None](data=None, error="Internal server error").model_dump(),
        )


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Course Registration API",
        description="REST API for course preferences, registration and grade reports",
        version=__version__,
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    app.state.config = config if config is not None else AppConfig()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    add_exception_handlers(app)

    app.include_router(courses.router, prefix="/api/v1")
    app.include_router(enrollment.router, prefix="/api/v1")
    app.include_router(reports.router, prefix="/api/v1")

    return app
