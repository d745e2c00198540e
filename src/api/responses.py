"""
HTTP response helpers - status codes and exception handlers.

Status selection lives here, not in the domain response shapes: the
same Outcome can be rendered for the API or the web surface, and both
use the status chosen by status_code_for().
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.domain.outcome import ErrorCode, Messages, Outcome

logger = logging.getLogger(__name__)

_LOCATION_PREFIXES = {"body", "query", "path"}


def status_code_for(outcome: Outcome, not_found_status: int = status.HTTP_404_NOT_FOUND) -> int:
    """Map an outcome to an HTTP status code."""
    if outcome.success:
        return status.HTTP_200_OK
    if outcome.error_code is ErrorCode.USER_NOT_FOUND:
        return not_found_status
    if outcome.error_code is ErrorCode.VALIDATION_FAILED:
        return 422
    if outcome.error_code is ErrorCode.SYSTEM_ERROR:
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return status.HTTP_400_BAD_REQUEST


def error_response(
    status_code: int,
    error_code: ErrorCode,
    message: str,
    errors: dict[str, list[str]] | None = None,
) -> JSONResponse:
    """Build an API error envelope."""
    content: dict[str, Any] = {
        "status": "error",
        "message": message,
        "error_code": error_code.value,
    }
    if errors is not None:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content)


def _field_errors(exc: RequestValidationError) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        parts = [str(part) for part in error["loc"] if part not in _LOCATION_PREFIXES]
        field = ".".join(parts) or "body"
        errors.setdefault(field, []).append(error["msg"])
    return errors


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures as VALIDATION_FAILED (422)."""
    return error_response(
        422,
        ErrorCode.VALIDATION_FAILED,
        Messages.VALIDATION_FAILED,
        errors=_field_errors(exc),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render unexpected errors as SYSTEM_ERROR (500) without internals."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorCode.SYSTEM_ERROR,
        Messages.SYSTEM_ERROR,
    )


def install_exception_handlers(app: FastAPI) -> None:
    """Register the validation and catch-all handlers on an app."""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
