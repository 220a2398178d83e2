"""
Error handling middleware.

Standardizes all API error responses to include:
- error_code: machine-readable identifier
- message: human-readable description
- hint: suggested recovery action
- detail: the numbers and names the caller needs to correct the request
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from inventory_ledger.application.dto.responses import ErrorResponse
from inventory_ledger.config import get_logger
from inventory_ledger.core.exceptions import (
    DuplicateNameError,
    InsufficientStockError,
    InternalError,
    LedgerError,
    NotFoundError,
    ReferentialIntegrityError,
    ValidationError,
)

logger = get_logger(__name__)


# Map exceptions to HTTP status codes
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    InsufficientStockError: status.HTTP_409_CONFLICT,
    DuplicateNameError: status.HTTP_409_CONFLICT,
    ReferentialIntegrityError: status.HTTP_409_CONFLICT,
    InternalError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Hint messages per error code
HINT_MAP: dict[str, str] = {
    "MATERIAL_NOT_FOUND": "Check the material ID and try GET /api/references/materials.",
    "UNIT_NOT_FOUND": "Check the unit ID and try GET /api/references/units.",
    "PROJECT_NOT_FOUND": "Check the project ID and try GET /api/references/projects.",
    "CATEGORY_NOT_FOUND": "Check the category ID and try GET /api/references/categories.",
    "INFLOW_NOT_FOUND": "Check the inflow ID and try GET /api/inflows.",
    "OUTFLOW_NOT_FOUND": "Check the outflow ID and try GET /api/outflows.",
    "INSUFFICIENT_STOCK": "Reduce the quantity to at most the available stock, or record an inflow first.",
    "DUPLICATE_NAME": "Names are compared case-insensitively. Choose a different name.",
    "REFERENTIAL_INTEGRITY": "Remove or reassign the dependent records first.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "INTERNAL_ERROR": "An internal error occurred. Check server logs.",
}

# Default hints by HTTP status code
STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    401: "Send the caller's id in the X-Actor-Id header.",
    404: "The requested resource was not found. Verify the ID.",
    409: "The request conflicts with the current state of the ledger.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
}


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def _status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    detail: dict | str | None = None,
) -> JSONResponse:
    """Every error leaves the API through this JSON shape."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error_code=error_code,
            message=message,
            hint=_get_hint(error_code, status_code),
            detail=detail,
            path=request.url.path,
        ).model_dump(mode="json"),
    )


def ledger_error_response(request: Request, exc: LedgerError) -> JSONResponse:
    status_code = _status_for(exc)
    if status_code >= 500:
        # Internal details stay in the log; the caller gets an opaque message
        logger.error(
            "ledger_error",
            path=request.url.path,
            error_code=exc.code,
            error=getattr(exc, "error", str(exc)),
        )
        return error_response(request, status_code, exc.code, exc.message)

    logger.info(
        "request_rejected",
        path=request.url.path,
        status=status_code,
        error_code=exc.code,
    )
    return error_response(request, status_code, exc.code, exc.message, exc.details or None)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Last-resort handler for exceptions that escape the routes."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except LedgerError as e:
            return ledger_error_response(request, e)
        except Exception as e:
            logger.error(
                "unhandled_exception",
                path=request.url.path,
                error_type=type(e).__name__,
                error=str(e),
                traceback=traceback.format_exc(),
            )
            return error_response(request, 500, "INTERNAL_ERROR", "Internal error")


def _infer_error_code(status_code: int) -> str:
    return {
        400: "BAD_REQUEST",
        401: "UNAUTHORIZED",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        422: "UNPROCESSABLE_ENTITY",
    }.get(status_code, "HTTP_ERROR")


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the JSON error handlers on the app."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(LedgerError)
    async def handle_ledger_error(request: Request, exc: LedgerError) -> JSONResponse:
        return ledger_error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        problems = "; ".join(
            f"{' -> '.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        return error_response(
            request, 422, "VALIDATION_ERROR", "Request validation failed", problems
        )

    @app.exception_handler(HTTPException)
    async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
        return error_response(
            request,
            exc.status_code,
            _infer_error_code(exc.status_code),
            exc.detail or "An error occurred",
        )
