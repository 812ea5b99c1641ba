"""
Error responses for the consent API.

Every error leaves the service in the same envelope:

{
    "error": {
        "status_code": 404,
        "error_code": "LEGAL_NO_CURRENT_DOCUMENT",
        "message": "No current legal document found for the requested types",
        "type": "Not Found",
        "details": {"document_types": ["dpa"], "language": "en"},
        "path": "/api/v1/consents",
        "request_id": "6f1c..."
    }
}

Ledger errors are logged with the caller and the document types they
concern, so a refused or failed consent can be traced to a user.
"""

import logging
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.exceptions import ConsentLedgerError, ErrorCode
from app.middleware.logging import request_id_var

logger = logging.getLogger(__name__)

# Raised by the router itself, before any consent code runs
ROUTING_ERROR_CODES = {
    status.HTTP_404_NOT_FOUND: ErrorCode.RESOURCE_NOT_FOUND,
    status.HTTP_405_METHOD_NOT_ALLOWED: ErrorCode.METHOD_NOT_ALLOWED,
}


def error_response(
    request: Request,
    status_code: int,
    error_code: ErrorCode,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    body: dict[str, Any] = {
        "status_code": status_code,
        "error_code": error_code.value,
        "message": message,
        "type": HTTPStatus(status_code).phrase,
        "path": request.url.path,
    }
    if details:
        body["details"] = details
    request_id = request_id_var.get()
    if request_id:
        body["request_id"] = request_id
    return JSONResponse(status_code=status_code, content={"error": body})


def _caller_id(request: Request) -> str | None:
    identity = getattr(request.state, "user", None)
    return identity.user_id if identity else None


async def ledger_error_handler(request: Request, exc: ConsentLedgerError) -> JSONResponse:
    """Failed writes are logged at ERROR; refusals and missing documents at WARNING."""
    logger.log(
        logging.ERROR if exc.status_code >= 500 else logging.WARNING,
        "%s on %s: %s",
        exc.error_code.value,
        request.url.path,
        exc.message,
        extra={
            "error_code": exc.error_code.value,
            "user_id": _caller_id(request),
            "document_types": exc.details.get("document_types"),
            "path": request.url.path,
        },
    )
    return error_response(request, exc.status_code, exc.error_code, exc.message, exc.details)


async def routing_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    error_code = ROUTING_ERROR_CODES.get(exc.status_code, ErrorCode.UNKNOWN_ERROR)
    return error_response(request, exc.status_code, error_code, str(exc.detail))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    logger.warning(
        "Rejected request to %s: %d invalid field(s)",
        request.url.path,
        len(errors),
        extra={"user_id": _caller_id(request), "path": request.url.path},
    )
    return error_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        ErrorCode.VALIDATION_FAILED,
        "Validation error",
        {"validation_errors": errors},
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Internal details never reach the response body."""
    logger.error(
        "Unhandled error on %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
        extra={"user_id": _caller_id(request), "path": request.url.path},
    )
    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorCode.INTERNAL_ERROR,
        "An unexpected error occurred. Please try again later.",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ConsentLedgerError, ledger_error_handler)
    app.add_exception_handler(StarletteHTTPException, routing_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
