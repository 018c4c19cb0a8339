# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized error taxonomy for the API.
#
# Services raise these typed errors; the handlers below map each one to a
# single HTTP status and a stable JSON body:
#   {"error": "<message>", "code": "<CODE>", "suggestion": "<optional>"}
#
# Internal details (tracebacks, query text) never reach the client.
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class MarketplaceException(Exception):
    """
    Base exception for the marketplace API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    code = "MARKETPLACE_ERROR"
    status_code = 500

    def __init__(
        self,
        message: str,
        code: str | None = None,
        status_code: int | None = None,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "error": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        return result


# =============================================================================
# Taxonomy
# =============================================================================

class ValidationFailedError(MarketplaceException):
    """Bad input shape or range."""
    code = "VALIDATION_ERROR"
    status_code = 400


class UnauthenticatedError(MarketplaceException):
    """Missing, invalid or expired credentials."""
    code = "UNAUTHENTICATED"
    status_code = 401


class ForbiddenError(MarketplaceException):
    """Authenticated but not allowed to touch this resource."""
    code = "FORBIDDEN"
    status_code = 403


class NotFoundError(MarketplaceException):
    """Raised when a resource ID doesn't exist."""
    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, resource: str, resource_id: Any = None, **kwargs):
        message = f"{resource} not found"
        if resource_id is not None:
            message = f"{resource} not found: {resource_id}"
        kwargs.setdefault("suggestion", f"Check that the {resource.lower()} id is correct")
        super().__init__(message, **kwargs)
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(MarketplaceException):
    """Uniqueness or state-transition violation."""
    code = "CONFLICT"
    status_code = 409


class RateLimitedError(MarketplaceException):
    """Too many requests from one client."""
    code = "RATE_LIMITED"
    status_code = 429

    def __init__(self, retry_after: int):
        super().__init__(
            message="Too many requests",
            suggestion=f"Retry after {retry_after} seconds",
            details={"retry_after": retry_after},
        )
        self.retry_after = retry_after


class InternalError(MarketplaceException):
    """Unexpected fault."""
    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str = "An unexpected error occurred"):
        super().__init__(message=message)


class RequestTimeoutError(MarketplaceException):
    """The handler didn't produce a response in time."""
    code = "REQUEST_TIMEOUT"
    status_code = 504

    def __init__(self, timeout_seconds: float):
        super().__init__(
            message="The request took too long to process",
            details={"timeout_seconds": timeout_seconds},
        )


class UpstreamUnavailableError(MarketplaceException):
    """Raised when the store, cache or embedding provider can't be reached."""
    code = "UPSTREAM_UNAVAILABLE"
    status_code = 503

    def __init__(self, service: str, error: str | None = None):
        super().__init__(
            message=f"{service} is temporarily unavailable",
            suggestion="Try again later or contact support if the issue persists",
            details={"service": service, "error": error} if error else {"service": service},
        )
        self.service = service


# =============================================================================
# Auth Exceptions
# =============================================================================

class DuplicateEmailError(ConflictError):
    """Raised when registering with an email that is already taken."""

    def __init__(self, email: str):
        super().__init__(
            message="An account with this email already exists",
            code="DUPLICATE_EMAIL",
            suggestion="Log in instead, or register with a different email",
            details={"email": email},
        )


class DuplicateUsernameError(ConflictError):
    """Raised when registering with a username that is already taken."""

    def __init__(self, username: str):
        super().__init__(
            message="This username is already taken",
            code="DUPLICATE_USERNAME",
            suggestion="Pick a different username",
            details={"username": username},
        )


class WeakPasswordError(ValidationFailedError):
    """Raised when a password does not meet the strength rules."""

    def __init__(self, reason: str):
        super().__init__(
            message=f"Password is too weak: {reason}",
            code="WEAK_PASSWORD",
            suggestion="Use at least 8 characters with letters and digits",
        )


class InvalidCredentialsError(UnauthenticatedError):
    """Raised on unknown identifier or wrong password (same message for both)."""

    def __init__(self):
        super().__init__(
            message="Invalid credentials",
            code="INVALID_CREDENTIALS",
        )


class AccountInactiveError(ForbiddenError):
    """Raised when a deactivated account tries to log in."""

    def __init__(self):
        super().__init__(
            message="This account is inactive",
            code="ACCOUNT_INACTIVE",
            suggestion="Contact support to reactivate your account",
        )


class InvalidTokenError(UnauthenticatedError):
    """Raised when a token is malformed, expired, of the wrong type or revoked."""

    def __init__(self, reason: str = "Invalid or expired token"):
        super().__init__(
            message=reason,
            code="INVALID_TOKEN",
            suggestion="Log in again to obtain a new token",
        )


# =============================================================================
# Catalog / Order Exceptions
# =============================================================================

class InvalidRatingError(ValidationFailedError):
    """Raised when a review rating is outside 1..5."""

    def __init__(self, rating: Any):
        super().__init__(
            message=f"Rating must be between 1 and 5, got {rating}",
            code="INVALID_RATING",
            details={"rating": rating},
        )


class AlreadyExistsError(ConflictError):
    """Raised when a (user, product) pair already exists."""

    def __init__(self, resource: str):
        super().__init__(
            message=f"{resource} already exists",
            code="ALREADY_EXISTS",
        )


class InsufficientStockError(ConflictError):
    """Raised when an order line asks for more than the product has in stock."""

    def __init__(self, product_id: str, requested: int | None = None, available: int | None = None):
        message = f"Insufficient stock for product {product_id}"
        if requested is not None and available is not None:
            message += f" (requested {requested}, available {available})"
        super().__init__(
            message=message,
            code="INSUFFICIENT_STOCK",
            suggestion="Reduce the quantity or remove the item from the order",
            details={"product_id": product_id, "requested": requested, "available": available},
        )


class InvalidTransitionError(ConflictError):
    """Raised when a status change isn't allowed from the current status."""

    def __init__(self, field: str, current: str, requested: str, suggestion: str | None = None):
        super().__init__(
            message=f"Cannot change {field} from '{current}' to '{requested}'",
            code="INVALID_TRANSITION",
            suggestion=suggestion,
            details={"field": field, "current": current, "requested": requested},
        )


# =============================================================================
# Exception Handlers
# =============================================================================

def error_response(exc: MarketplaceException) -> JSONResponse:
    """Render an exception in the standard error shape, with its protocol headers."""
    headers = None
    if isinstance(exc, UnauthenticatedError):
        headers = {"WWW-Authenticate": "Bearer"}
    elif isinstance(exc, RateLimitedError):
        headers = {"Retry-After": str(exc.retry_after)}
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=headers,
    )


async def marketplace_exception_handler(
    request: Request,
    exc: MarketplaceException
) -> JSONResponse:
    """
    Convert MarketplaceException to JSON response.

    Returns structured error with:
    - error: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    """
    if exc.status_code >= 500:
        logger.error(f"{exc.code}: {exc.message} {exc.details}")
    return error_response(exc)


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle Pydantic request validation errors.

    Reports the first failing field in a user-friendly message.
    """
    errors = exc.errors()
    message = "Validation error"
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    return JSONResponse(
        status_code=400,
        content={"error": message, "code": "VALIDATION_ERROR"},
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> JSONResponse:
    """Render framework HTTP errors (404 route, 405 method) in the same shape."""
    codes = {404: "NOT_FOUND", 405: "METHOD_NOT_ALLOWED"}
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail), "code": codes.get(exc.status_code, "HTTP_ERROR")},
        headers=getattr(exc, "headers", None),
    )


def install_exception_handlers(app) -> None:
    """Register every handler on the FastAPI app."""
    app.add_exception_handler(MarketplaceException, marketplace_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
