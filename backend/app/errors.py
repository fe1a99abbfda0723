"""
Application errors. Services raise these; app.main renders them as {"message": ...}
with the class status code. Routes never build error responses themselves.
"""
from fastapi import status


class AppError(Exception):
    """Base for all errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    headers: dict[str, str] | None = None

    def __init__(self, message: str, headers: dict[str, str] | None = None):
        super().__init__(message)
        self.message = message
        if headers is not None:
            self.headers = headers

    def to_dict(self) -> dict:
        return {"message": self.message}


class ValidationError(AppError):
    """Malformed or out-of-range input."""

    status_code = status.HTTP_400_BAD_REQUEST


class Unauthenticated(AppError):
    """Login failed. Message never says which field was wrong."""

    status_code = status.HTTP_401_UNAUTHORIZED


class Unauthorized(AppError):
    """No token, or the token's subject no longer exists."""

    status_code = status.HTTP_401_UNAUTHORIZED
    headers = {"WWW-Authenticate": "Bearer"}


class Forbidden(AppError):
    """Bad token, wrong role, or not the resource owner."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class Conflict(AppError):
    """Uniqueness violation (email already in use)."""

    status_code = status.HTTP_409_CONFLICT


class Internal(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class InvalidToken(Exception):
    """Token failed signature, shape or expiry checks. Never shown to clients as-is."""
