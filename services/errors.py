"""Exceptions raised by the account, favorites, and quote services."""


class ServiceError(Exception):
    """Base exception for expected service failures."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """Raised when input has the wrong shape or format."""
    status_code = 400


class ConflictError(ServiceError):
    """Raised when a write would violate a uniqueness rule."""
    status_code = 409


class NotFoundError(ServiceError):
    """Raised when the requested entity does not exist."""
    status_code = 404


class UnauthenticatedError(ServiceError):
    """Raised when a protected operation is called without a credential."""
    status_code = 401


class InvalidTokenError(ServiceError):
    """Raised when a bearer token is malformed, forged, expired, or stale."""
    status_code = 403


class InvalidCredentialsError(ServiceError):
    """Raised when an email/password pair does not authenticate."""
    status_code = 401
