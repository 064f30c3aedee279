"""Exception taxonomy and FastAPI handlers."""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str
    message: str
    details: Any = None


class CreditEngineError(Exception):
    """Base exception for the credit decision service."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal_error"

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(error=self.code, message=self.message, details=self.details)


class ValidationError(CreditEngineError):
    """Malformed or out-of-bounds input."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "Invalid input data"

    def __init__(self, message: str, errors: Optional[list[dict[str, Any]]] = None):
        self.errors = errors or []
        super().__init__(message, details=self.errors)


class NotFoundError(CreditEngineError):
    """Referenced configuration record does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class ReferentialConstraintError(CreditEngineError):
    """Deletion refused because audit history still references the record."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "referential_constraint"


class EvaluationError(CreditEngineError):
    """A single rule or factor failed to evaluate.

    Caught per item by the engine and recorded in that item's result.
    """

    code = "evaluation_error"


class StoreUnavailable(CreditEngineError):
    """The configuration store could not be read."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "store_unavailable"


async def credit_engine_error_handler(
    request: Request, exc: CreditEngineError
) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {
            "loc": list(error.get("loc", ())),
            "msg": error.get("msg"),
            "type": error.get("type"),
        }
        for error in exc.errors()
    ]
    logger.warning(f"Rejected {request.method} {request.url.path}: {len(errors)} validation errors")
    return await credit_engine_error_handler(
        request, ValidationError("Request failed validation", errors=errors)
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error taxonomy to a FastAPI application."""
    app.add_exception_handler(CreditEngineError, credit_engine_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
