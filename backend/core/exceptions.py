"""
Custom exceptions and handlers for consistent API error responses.

Every domain failure is raised as an ``APIError`` subclass and rendered
as ``{"error": ..., "error_code": ..., "details": ...}`` with the HTTP
status that encodes its kind.
"""

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base API error with consistent structure"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.message = message
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code
        self.headers = headers
        super().__init__(self.message)


class ValidationError(APIError):
    """Malformed request or payload"""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "VALIDATION_ERROR"

    def __init__(self, message: str = "Validation failed", details=None):
        super().__init__(message, details)


class AuthenticationError(APIError):
    """Missing or unusable credentials"""

    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "AUTH_REQUIRED"

    def __init__(self, message: str = "Access token required"):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class InvalidOrExpiredTokenError(AuthenticationError):
    error_code = "INVALID_OR_EXPIRED_TOKEN"

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


class ForbiddenError(APIError):
    """Role or scope violation"""

    status_code = status.HTTP_403_FORBIDDEN
    error_code = "FORBIDDEN"

    def __init__(self, message: str = "Insufficient permissions", details=None):
        super().__init__(message, details)


class AccountDisabledError(ForbiddenError):
    error_code = "ACCOUNT_DISABLED"

    def __init__(self, message: str = "Account is disabled"):
        super().__init__(message)


class NotFoundError(APIError):
    """Resource not found error"""

    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"

    def __init__(self, resource: str, identifier: Any = None, message: Optional[str] = None):
        details = {"resource": resource}
        if identifier is not None:
            details["identifier"] = str(identifier)
        super().__init__(message or f"{resource} not found", details)


class DuplicateEmailError(APIError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "DUPLICATE_EMAIL"

    def __init__(self, email: str):
        super().__init__("Email address is already in use", {"email": email})


class TooManyRequestsError(APIError):
    """Caller must back off; the wait is sent as Retry-After"""

    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    error_code = "TOO_MANY_REQUESTS"

    def __init__(self, message: str, retry_after: int, details=None):
        self.retry_after = retry_after
        super().__init__(message, details, headers={"Retry-After": str(retry_after)})


def _error_body(exc: APIError) -> Dict[str, Any]:
    body: Dict[str, Any] = {"error": exc.message, "error_code": exc.error_code}
    if exc.details:
        body["details"] = exc.details
    return body


async def handle_api_error(request: Request, exc: APIError) -> JSONResponse:
    """Handle custom API errors"""
    logger.warning(
        f"{exc.__class__.__name__} at {request.url.path}: {exc.message}",
        extra={"status_code": exc.status_code, "details": exc.details},
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(_error_body(exc)),
        headers=exc.headers,
    )


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Request body or query failed schema validation"""
    logger.warning(f"Request validation failed at {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder(
            {
                "error": "Invalid request",
                "error_code": ValidationError.error_code,
                "details": exc.errors(),
            }
        ),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Never leak internals to the caller"""
    logger.error(f"Unhandled error at {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error", "error_code": APIError.error_code},
    )


def register_exception_handlers(app):
    """Register all exception handlers with the FastAPI app"""
    app.add_exception_handler(APIError, handle_api_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
