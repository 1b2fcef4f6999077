"""Domain exceptions.

Every error carries an HTTP status code and a stable machine-readable code.
The handlers registered in ``moviematic.main`` turn them into JSON responses
of the form ``{"detail": <message>, "code": <code>}``.
"""

from typing import Any


class CatalogError(Exception):
    """Base exception for all domain errors."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, *, code: str | None = None) -> None:
        super().__init__(message or self.default_message)
        if code is not None:
            self.code = code

    @property
    def message(self) -> str:
        return str(self)

    def extra(self) -> dict[str, Any]:
        """Additional fields to include in the error response body."""
        return {}


# Validation


class ValidationError(CatalogError):
    """Raised when a field is missing or out of range."""

    status_code = 400
    code = "VALIDATION_ERROR"
    default_message = "Invalid request"


class InvalidUploadError(ValidationError):
    """Raised when an uploaded file is not an accepted image."""

    code = "INVALID_UPLOAD"
    default_message = "Only image files are allowed"


class FileTooLargeError(InvalidUploadError):
    """Raised when an uploaded file exceeds its size limit."""

    code = "FILE_TOO_LARGE"

    def __init__(self, max_bytes: int) -> None:
        max_mb = max_bytes / (1024 * 1024)
        super().__init__(f"File too large. Maximum size is {max_mb:g}MB.")
        self.max_bytes = max_bytes


# Uniqueness


class DuplicateError(CatalogError):
    """Raised when a write would violate a uniqueness rule."""

    status_code = 409
    code = "DUPLICATE"
    default_message = "Resource already exists"


class DuplicateReviewError(DuplicateError):
    code = "ALREADY_REVIEWED"
    default_message = "You have already reviewed this movie"


class AlreadyInWatchlistError(DuplicateError):
    code = "ALREADY_IN_WATCHLIST"
    default_message = "Movie already in watchlist"


class DuplicateServiceNameError(DuplicateError):
    code = "DUPLICATE_SERVICE_NAME"
    default_message = "Streaming service with this name already exists"


class EmailAlreadyRegisteredError(DuplicateError):
    code = "EMAIL_TAKEN"
    default_message = "Email already registered"


class MovieOfTheWeekConflictError(DuplicateError):
    """Raised when a concurrent write featured another movie first.

    The transaction is rolled back, so the previous featured movie is kept.
    Callers may retry.
    """

    code = "FEATURED_CONFLICT"
    default_message = "Another movie was set as movie of the week concurrently, please retry"
    retryable = True

    def extra(self) -> dict[str, Any]:
        return {"retryable": self.retryable}


# Lookup


class NotFoundError(CatalogError):
    """Raised when a referenced entity does not exist."""

    status_code = 404
    code = "NOT_FOUND"
    default_message = "Resource not found"


class NotInWatchlistError(NotFoundError):
    code = "NOT_IN_WATCHLIST"
    default_message = "Movie not found in watchlist"


# Authentication and authorization


class AuthError(CatalogError):
    """Raised when a request cannot be authenticated."""

    status_code = 401
    code = "AUTH_ERROR"
    default_message = "Could not validate credentials"


class MissingTokenError(AuthError):
    code = "NO_TOKEN"
    default_message = "Access denied. No token provided."


class MalformedTokenError(AuthError):
    code = "INVALID_TOKEN"
    default_message = "Invalid token."


class ExpiredTokenError(AuthError):
    code = "TOKEN_EXPIRED"
    default_message = "Token expired."


class UserNotFoundError(AuthError):
    code = "USER_NOT_FOUND"
    default_message = "Invalid token. User not found."


class AccountDeactivatedError(AuthError):
    code = "ACCOUNT_DEACTIVATED"
    default_message = "Account is deactivated."


class InvalidCredentialsError(AuthError):
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid email or password"


class PermissionDeniedError(AuthError):
    """Raised when an authenticated user acts on something they do not own."""

    status_code = 403
    code = "FORBIDDEN"
    default_message = "Access denied"


class InsufficientPrivilegesError(PermissionDeniedError):
    code = "INSUFFICIENT_PRIVILEGES"
    default_message = "Access denied. Admin privileges required."


# Referential integrity


class ReferentialIntegrityError(CatalogError):
    """Raised when a write references an entity that does not exist."""

    status_code = 400
    code = "INVALID_REFERENCE"
    default_message = "Invalid reference"


class InvalidMovieReferenceError(ReferentialIntegrityError):
    """Raised when a homepage section lists movie ids that do not resolve."""

    code = "INVALID_MOVIE_REFERENCE"

    def __init__(self, invalid_ids: list[int], requested: int, resolved: int) -> None:
        super().__init__(
            f"One or more movie IDs are invalid: requested {requested}, found {resolved}"
        )
        self.invalid_ids = sorted(invalid_ids)
        self.requested = requested
        self.resolved = resolved

    def extra(self) -> dict[str, Any]:
        return {
            "invalid_ids": self.invalid_ids,
            "requested": self.requested,
            "resolved": self.resolved,
        }


class InvalidServiceReferenceError(ReferentialIntegrityError):
    """Raised when a streaming platform points at an unknown service."""

    code = "INVALID_SERVICE_REFERENCE"

    def __init__(self, invalid_ids: list[int]) -> None:
        super().__init__("One or more streaming service IDs are invalid")
        self.invalid_ids = sorted(invalid_ids)

    def extra(self) -> dict[str, Any]:
        return {"invalid_ids": self.invalid_ids}


# Upstream


class UpstreamError(CatalogError):
    """Raised when the store or the filesystem fails unexpectedly."""

    status_code = 500
    code = "UPSTREAM_ERROR"
    default_message = "Upstream failure"


class StorageError(UpstreamError):
    code = "STORAGE_ERROR"
    default_message = "Could not store uploaded file"
