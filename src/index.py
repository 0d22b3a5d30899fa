from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, load_settings
from .middleware.error_handler import error_handler, validation_error_handler
from .middleware.request_logging import LoggingMiddleware
from .routes.system import router as system_router
from .students import StudentStore
from .students import router as students_router

logger = logging.getLogger(__name__)


def _route_summary(app: FastAPI) -> list[str]:
    lines = []
    for route in app.routes:
        methods = getattr(route, "methods", None)
        if not methods or not getattr(route, "include_in_schema", True):
            continue
        for method in sorted(methods - {"HEAD"}):
            lines.append(f"{method:<7} {route.path}")
    return lines


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings
    logger.info(
        f"Student records service starting on {settings.host}:{settings.port} "
        f"(minimum student age {app.state.student_store.minimum_age})"
    )
    for line in _route_summary(app):
        logger.info(f"  {line}")
    yield
    logger.info("Student records service shutting down")


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[StudentStore] = None,
) -> FastAPI:
    """Build the application with its own store instance."""
    settings = settings or load_settings()

    app = FastAPI(
        title="Student Records API",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.student_store = (
        store if store is not None else StudentStore(minimum_age=settings.min_student_age)
    )

    app.add_middleware(LoggingMiddleware)
    app.add_exception_handler(StarletteHTTPException, error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, error_handler)

    app.include_router(system_router, prefix=settings.api_prefix)
    app.include_router(students_router, prefix=settings.api_prefix)
    return app
