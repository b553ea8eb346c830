"""FastAPI exception handlers.

Every failure leaves the API in the ``AppError.to_dict()`` shape, whether it
started as an Err from an engine check, a pydantic validation failure, a
starlette HTTP error or an unexpected exception.
"""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.logging import get_logger

from .types import AppError, ErrorCode, ErrorContext, Result

log = get_logger("practice.errors")


class AppErrorException(Exception):
    """Carries an AppError out of a route so the handler can render it."""

    def __init__(self, error: AppError):
        super().__init__(str(error))
        self.error = error


def _trace_ids(request: Request) -> dict:
    return {
        "correlation_id": request.headers.get("X-Correlation-ID"),
        "request_id": request.headers.get("X-Request-ID"),
    }


def error_response(error: AppError, status_code: int | None = None) -> JSONResponse:
    """Log an AppError and render it."""
    status_code = status_code or error.code.http_status
    (log.error if status_code >= 500 else log.warning)(
        "error_response",
        status=status_code,
        error_code=error.code.name,
        message=error.message,
        origin=error.context.origin,
        metadata=error.metadata,
    )
    return JSONResponse(status_code=status_code, content=error.to_dict())


async def app_error_handler(request: Request, exc: AppErrorException) -> JSONResponse:
    return error_response(exc.error.with_context(**_trace_ids(request)))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code >= 500:
        code = ErrorCode.E9001_UNEXPECTED_ERROR
    elif exc.status_code == 409:
        code = ErrorCode.E5003_PRECONDITION_FAILED
    elif exc.status_code in (400, 422):
        code = ErrorCode.E2000_VALIDATION_GENERIC
    else:
        code = ErrorCode.E9000_INTERNAL_GENERIC

    error = AppError(
        code=code,
        message=str(exc.detail) if exc.detail else f"HTTP {exc.status_code}",
        context=ErrorContext(origin="http"),
    ).with_context(**_trace_ids(request))
    return error_response(error, status_code=exc.status_code)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Request body failed the pydantic models: 422 with one entry per field."""
    fields = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())),
            "message": err.get("msg", ""),
            "type": err.get("type", ""),
        }
        for err in exc.errors()
    ]
    error = AppError(
        code=ErrorCode.E2000_VALIDATION_GENERIC,
        message="request validation failed",
        context=ErrorContext(origin="request"),
        metadata={"errors": fields},
    ).with_context(**_trace_ids(request))
    return error_response(error, status_code=422)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("unhandled_exception", error_type=type(exc).__name__)
    error = AppError(
        code=ErrorCode.E9001_UNEXPECTED_ERROR,
        message="an unexpected error occurred",
        context=ErrorContext(origin="unhandled"),
        cause=exc,
    ).with_context(**_trace_ids(request))
    return error_response(error)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppErrorException, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


def raise_result(result: Result) -> None:
    """Raise the wrapped AppError if ``result`` is an Err.

    Usage:
        raise_result(check_vocabulary_snapshot(entries, session_index))
    """
    if result.is_err():
        raise AppErrorException(result.unwrap_err())
