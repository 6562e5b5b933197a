"""
Error handling middleware.

Standardizes all API error responses to include:
- error_code: machine-readable identifier
- message: human-readable description
- hint: suggested recovery action
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from invoiceflow.application.dto.responses import ErrorResponse
from invoiceflow.config import get_logger
from invoiceflow.core.exceptions import (
    ConfigurationError,
    DocumentNotFoundError,
    InvoiceFlowError,
    PartyNotFoundError,
    ProductNotFoundError,
    ReplicationError,
    StorageError,
    TransactionConflictError,
    ValidationError,
)

logger = get_logger(__name__)


# Map exceptions to HTTP status codes. First match wins, so subclasses
# come before their bases.
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    DocumentNotFoundError: status.HTTP_404_NOT_FOUND,
    ProductNotFoundError: status.HTTP_404_NOT_FOUND,
    PartyNotFoundError: status.HTTP_404_NOT_FOUND,
    TransactionConflictError: status.HTTP_409_CONFLICT,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ReplicationError: status.HTTP_502_BAD_GATEWAY,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ValueError: status.HTTP_400_BAD_REQUEST,
}

# Hint messages per error code / exception type
HINT_MAP: dict[str, str] = {
    "INVOICE_NOT_FOUND": "The invoice may have been deleted. Refresh with GET /api/invoices.",
    "PURCHASE_NOT_FOUND": "The purchase may have been deleted. Refresh with GET /api/purchases.",
    "PRODUCT_NOT_FOUND": "Check the product ID and try GET /api/products to list products.",
    "CUSTOMER_NOT_FOUND": "Check the customer key and try GET /api/customers.",
    "SUPPLIER_NOT_FOUND": "Check the supplier key and try GET /api/suppliers.",
    "TRANSACTION_CONFLICT": "Another write held the ledger. Nothing was saved; retry the request.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
    "REPLICATION_FAILED": "The backup webhook is unreachable. Check BACKUP_SCRIPT_URL.",
    "ValueError": "A parameter value is invalid. Check the request.",
}

# Default hints by HTTP status code
STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    404: "The requested resource was not found. Verify the ID.",
    409: "The request conflicted with a concurrent change. Retry it.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
    502: "An upstream service failed. Retry later.",
}


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def _status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(request: Request, exc: Exception) -> JSONResponse:
    """Convert exception to standardized JSON response."""
    status_code = _status_for(exc)

    # Prefer InvoiceFlowError.code, fall back to class name
    if isinstance(exc, InvoiceFlowError):
        error_code = exc.code
        message = exc.message
    else:
        error_code = exc.__class__.__name__
        message = str(exc)

    request_id = getattr(request.state, "request_id", None)

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "request_error",
        request_id=request_id,
        path=request.url.path,
        error_type=error_code,
        error=message,
        traceback=traceback.format_exc() if status_code >= 500 else None,
    )

    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error_code=error_code,
            message=message,
            hint=_get_hint(error_code, status_code),
            path=request.url.path,
        ).model_dump(mode="json"),
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Converts exceptions that escaped the route handlers to standardized
    JSON error responses.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Handle request with error catching."""
        try:
            return await call_next(request)

        except Exception as e:
            return error_response(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(InvoiceFlowError)
    async def domain_exception_handler(
        request: Request,
        exc: InvoiceFlowError,
    ) -> JSONResponse:
        """Handle domain errors raised by the ledger services."""
        return error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        errors = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
                hint="Check the request body fields and types.",
                detail="; ".join(errors),
                path=request.url.path,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions with standardized format."""
        error_code = "NOT_FOUND" if exc.status_code == 404 else "HTTP_ERROR"
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error_code=error_code,
                message=str(exc.detail or "An error occurred"),
                hint=_get_hint(error_code, exc.status_code),
                path=request.url.path,
            ).model_dump(mode="json"),
        )
