"""Custom exceptions and centralized exception handlers."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class AppException(Exception):
    """Base application exception with structured error response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "INTERNAL_ERROR"
    message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.status_code = status_code or self.status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Short client-facing body: a readable error plus a stable code."""
        return {
            "error": self.message,
            "code": self.error_code,
            **({"details": self.details} if self.details else {}),
        }


class ValidationError(AppException):
    """Malformed or missing input."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "VALIDATION_ERROR"
    message = "Validation failed"


class AuthChallengeError(AppException):
    """A login code could not be verified."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "CHALLENGE_FAILED"
    message = "Unable to verify login code"


class ChallengeNotFoundError(AuthChallengeError):
    """No pending challenge for the email."""

    error_code = "CHALLENGE_NOT_FOUND"
    message = "No pending login found for that email"


class ChallengeExpiredError(AuthChallengeError):
    """The pending challenge is past its expiry."""

    error_code = "CHALLENGE_EXPIRED"
    message = "The login code has expired. Please request a new one."


class ChallengeMismatchError(AuthChallengeError):
    """The supplied code does not match the pending challenge."""

    error_code = "CHALLENGE_MISMATCH"
    message = "Invalid code. Please try again."


class AuthRequiredError(AppException):
    """No valid session on a protected call."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "AUTHENTICATION_REQUIRED"
    message = "Authentication required"


class UnknownTickerError(AppException):
    """Ticker is not in the reference table."""

    status_code = status.HTTP_404_NOT_FOUND
    error_code = "UNKNOWN_TICKER"
    message = "Ticker not found"


class CacheError(AppException):
    """Key-value store operation failed."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "CACHE_ERROR"
    message = "Cache operation failed"


class ApiError(AppException):
    """Non-success response received by the API client."""

    error_code = "API_ERROR"
    message = "Request failed"


def register_exception_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers."""

    @app.exception_handler(AppException)
    async def app_exception_handler(
        request: Request, exc: AppException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict(),
            headers={"X-Request-ID": getattr(request.state, "request_id", "unknown")},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(part) for part in first.get("loc", ())[1:])
        message = f"Invalid {field}" if field else "Invalid request"
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ValidationError(message=message).to_dict(),
            headers={"X-Request-ID": getattr(request.state, "request_id", "unknown")},
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        import logging

        logger = logging.getLogger("stockresearch.error")
        logger.exception(
            "Unhandled exception",
            extra={
                "request_id": getattr(request.state, "request_id", "unknown"),
                "path": request.url.path,
                "method": request.method,
            },
        )

        from .config import settings

        if settings.debug:
            message = str(exc)
        else:
            message = "An unexpected error occurred"

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": message, "code": "INTERNAL_ERROR"},
            headers={"X-Request-ID": getattr(request.state, "request_id", "unknown")},
        )
