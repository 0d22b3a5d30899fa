from __future__ import annotations

import logging
from typing import List

from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)


def _status_for(exc: Exception) -> int:
    for attr in ("status_code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int):
            return value
    return 500


def error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render any exception as a JSON error body."""
    status_code = _status_for(exc)

    if isinstance(exc, StarletteHTTPException):
        # an unsupported method on a known path is an unknown route too
        if status_code == 405:
            return JSONResponse(
                {"error": "Route not found", "path": request.url.path},
                status_code=404,
            )
        detail = exc.detail
        if status_code == 404 and detail == "Not Found":
            detail = "Route not found"
        return JSONResponse(
            {"error": detail, "path": request.url.path},
            status_code=status_code,
            headers=getattr(exc, "headers", None),
        )

    if status_code >= 500:
        logger.error(f"Unhandled {exc.__class__.__name__}: {exc}", exc_info=exc)
    return JSONResponse(
        {
            "error": "Internal server error" if status_code >= 500 else exc.__class__.__name__,
            "message": str(exc) or "Something went wrong",
            "type": exc.__class__.__name__,
        },
        status_code=status_code,
    )


def _describe(error: dict) -> str:
    loc = [str(part) for part in error.get("loc", ())]
    field = ".".join(loc[1:]) or ".".join(loc)
    return f"{field}: {error.get('msg', 'invalid value')}"


def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Input-shape errors are reported as 400, never 422."""
    errors = exc.errors()
    # on create, a null or empty value counts as an absent field
    blank_is_missing = request.method == "POST"
    missing: List[str] = []
    for error in errors:
        loc = error.get("loc", ())
        if len(loc) < 2:
            continue
        if error.get("type") == "missing" or (
            blank_is_missing and error.get("input") in (None, "")
        ):
            missing.append(str(loc[-1]))

    if missing:
        message = f"Missing required fields: {', '.join(missing)}"
    elif any(tuple(error.get("loc", ())) == ("body",) for error in errors):
        message = "Request body is required"
    else:
        message = "Invalid request body"

    logger.debug(f"Rejected {request.method} {request.url.path}: {message}")
    return JSONResponse(
        {"error": message, "details": [_describe(error) for error in errors]},
        status_code=400,
    )
