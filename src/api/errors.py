"""Translate domain errors into HTTP responses."""

import logging
from datetime import datetime, timezone
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.api.models import ErrorResponse
from src.core.exceptions import ErrorKind, GameError, InternalConsistencyError

logger = logging.getLogger(__name__)

STATUS_BY_KIND: dict[ErrorKind, HTTPStatus] = {
    ErrorKind.VALIDATION_ERROR: HTTPStatus.BAD_REQUEST,
    ErrorKind.OUT_OF_BOUNDS: HTTPStatus.BAD_REQUEST,
    ErrorKind.FORBIDDEN: HTTPStatus.FORBIDDEN,
    ErrorKind.NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorKind.CELL_OCCUPIED: HTTPStatus.CONFLICT,
    ErrorKind.INVALID_STATE: HTTPStatus.CONFLICT,
    ErrorKind.CONFLICT: HTTPStatus.CONFLICT,
}


def _error_response(request: Request, status: HTTPStatus, message: str) -> JSONResponse:
    body = ErrorResponse(
        error=status.phrase,
        message=message,
        status_code=status.value,
        timestamp=datetime.now(timezone.utc),
        path=request.url.path,
    )
    return JSONResponse(status_code=status.value, content=body.model_dump(mode="json"))


async def handle_game_error(request: Request, exc: GameError) -> JSONResponse:
    status = STATUS_BY_KIND.get(exc.kind, HTTPStatus.BAD_REQUEST)
    logger.warning(
        "Client error on %s %s: %s (%s)", request.method, request.url.path, exc, exc.kind
    )
    return _error_response(request, status, str(exc))


async def handle_request_validation(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed body / query (ex. a row that is not an integer): same 400 as every other validation error."""
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    logger.warning(
        "Invalid request on %s %s: %s", request.method, request.url.path, details
    )
    return _error_response(request, HTTPStatus.BAD_REQUEST, details)


async def handle_internal_error(
    request: Request, exc: InternalConsistencyError
) -> JSONResponse:
    logger.error(
        "Internal consistency error on %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return _error_response(
        request, HTTPStatus.INTERNAL_SERVER_ERROR, "Internal server error"
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GameError, handle_game_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(InternalConsistencyError, handle_internal_error)
