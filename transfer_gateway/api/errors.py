"""Mapping of domain errors to the fixed {success, error} response shape"""

import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from transfer_gateway.api.dependencies import get_request_id
from transfer_gateway.domain.exceptions import (
    AccountNotFoundOrUnauthorized,
    InsufficientFunds,
    InvalidInput,
    PersistenceFailure,
    RateLimited,
    ResourceNotFound,
    TransferError,
    TransferExecutionFailure,
    Unauthorized,
)

STATUS_CODES = {
    Unauthorized: 401,
    InvalidInput: 400,
    RateLimited: 400,
    AccountNotFoundOrUnauthorized: 400,
    InsufficientFunds: 400,
    TransferExecutionFailure: 400,
    ResourceNotFound: 404,
    PersistenceFailure: 500,
}

HTTP_ERROR_MESSAGES = {
    404: "Not found",
    405: "Method not allowed",
}


def status_code_for(exc: TransferError) -> int:
    for exc_type in type(exc).__mro__:
        if exc_type in STATUS_CODES:
            return STATUS_CODES[exc_type]
    return 500


def failure_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Keep framework-level and dependency errors in the same body shape as endpoint errors"""

    @app.exception_handler(TransferError)
    async def handle_transfer_error(request: Request, exc: TransferError):
        status_code = status_code_for(exc)
        logging.warning(
            f"Request rejected: {exc.message}",
            extra={"request_id": get_request_id(request), "status": status_code},
        )
        return failure_response(status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        message = HTTP_ERROR_MESSAGES.get(exc.status_code, str(exc.detail))
        return failure_response(exc.status_code, message, getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return failure_response(400, "Invalid input")
