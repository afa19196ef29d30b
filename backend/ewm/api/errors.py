"""
Exception handlers that render every failure as an ApiError body:

    {"status": "CONFLICT", "reason": "...", "message": "...", "timestamp": "..."}
"""

from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ewm.core.dates import now
from ewm.core.exceptions import EwmError
from ewm.core.logging import get_logger
from ewm.schemas.common import ApiError

logger = get_logger(__name__)


def error_response(status_code: int, reason: str, message: str) -> JSONResponse:
    body = ApiError(
        status=HTTPStatus(status_code).name,
        reason=reason,
        message=message,
        timestamp=now(),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", by_alias=True))


def _describe_validation(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts)


async def ewm_error_handler(request: Request, exc: EwmError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "request_rejected",
        error=type(exc).__name__,
        status_code=exc.status_code,
        message=exc.message,
    )
    return error_response(exc.status_code, exc.reason, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = _describe_validation(exc)
    logger.warning("request_validation_failed", message=message)
    return error_response(400, "Incorrectly made request.", message)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, HTTPStatus(exc.status_code).phrase, str(exc.detail))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_exception", error=str(exc))
    return error_response(500, "Internal server error.", str(exc))


def register_error_handlers(app: FastAPI) -> None:
    app.exception_handler(EwmError)(ewm_error_handler)
    app.exception_handler(RequestValidationError)(validation_error_handler)
    app.exception_handler(StarletteHTTPException)(http_error_handler)
    app.exception_handler(Exception)(unhandled_error_handler)
