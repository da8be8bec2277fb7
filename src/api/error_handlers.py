"""Centralized error handling for the quote viewer API."""

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.services.analysis_engine import EmptyInputError
from src.services.period_filter import InvalidPeriodError
from src.services.watchlist_service import InvalidWatchlistSymbolError
from src.utils.logger import StructuredLogger

logger = StructuredLogger("ErrorHandlers")


class QuoteError:
    """Standard error codes returned by the API."""

    EMPTY_SERIES = "EMPTY_SERIES"
    INVALID_PERIOD = "INVALID_PERIOD"
    INVALID_SYMBOL = "INVALID_SYMBOL"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorResponse:
    """Standardized error response format."""

    def __init__(
        self,
        error_code: str,
        message: str,
        details: dict[str, Any] | None = None,
        status_code: int = status.HTTP_400_BAD_REQUEST,
    ):
        """
        Initialize error response.

        Args:
            error_code: Code from QuoteError
            message: Human-readable error message
            details: Field-specific errors, if any
            status_code: HTTP status code
        """
        self.error_code = error_code
        self.message = message
        self.details = details
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        response = {"error": self.error_code, "message": self.message}
        if self.details:
            response["details"] = self.details
        return response

    def to_response(self) -> JSONResponse:
        return JSONResponse(status_code=self.status_code, content=self.to_dict())


def create_validation_error_response(errors: list[dict[str, Any]]) -> ErrorResponse:
    """
    Build a validation error response from Pydantic errors.

    Returns:
        ErrorResponse with one message per dotted field path
    """
    field_errors = {".".join(str(loc) for loc in error["loc"]): error["msg"] for error in errors}
    return ErrorResponse(
        error_code=QuoteError.VALIDATION_ERROR,
        message="Validation failed for one or more fields",
        details=field_errors,
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
    )


async def empty_input_handler(request: Request, exc: EmptyInputError) -> JSONResponse:
    return ErrorResponse(QuoteError.EMPTY_SERIES, str(exc)).to_response()


async def invalid_period_handler(request: Request, exc: InvalidPeriodError) -> JSONResponse:
    return ErrorResponse(QuoteError.INVALID_PERIOD, str(exc)).to_response()


async def invalid_symbol_handler(request: Request, exc: InvalidWatchlistSymbolError) -> JSONResponse:
    return ErrorResponse(QuoteError.INVALID_SYMBOL, str(exc)).to_response()


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return create_validation_error_response(list(exc.errors())).to_response()


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error while serving request",
        context={"path": request.url.path, "method": request.method},
        exception=exc,
    )
    return ErrorResponse(
        QuoteError.INTERNAL_ERROR,
        "An unexpected error occurred",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    ).to_response()


def register_error_handlers(app: FastAPI) -> None:
    """Attach the API's exception handlers to an application."""
    app.add_exception_handler(EmptyInputError, empty_input_handler)
    app.add_exception_handler(InvalidPeriodError, invalid_period_handler)
    app.add_exception_handler(InvalidWatchlistSymbolError, invalid_symbol_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
