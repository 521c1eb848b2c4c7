"""
Typed failures returned by the identity and catalog services.

Every failure is an expected outcome of a request, not a crash: services raise
one of these and the transport layer maps ``kind`` to a status code. Storage
outages are not wrapped here; SQLAlchemy errors other than unique-constraint
violations propagate unchanged.
"""

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "VALIDATION"
    CONFLICT = "CONFLICT"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    ACCESS_DENIED = "ACCESS_DENIED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"


class CatalogError(Exception):
    """Base class for service failures: kind, machine-readable code, message."""

    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.kind.value
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class InvalidInputError(CatalogError):
    """A field is malformed or out of range (e.g. bad key format)."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, code: str = "INVALID_FIELD", field: str | None = None) -> None:
        self.field = field
        super().__init__(message, code)


class ConflictError(CatalogError):
    """A unique value (username, email, key) is already in use."""

    kind = ErrorKind.CONFLICT


class NotFoundError(CatalogError):
    kind = ErrorKind.NOT_FOUND


class UnauthenticatedError(CatalogError):
    """No token, or a token that is malformed, badly signed or expired."""

    kind = ErrorKind.UNAUTHENTICATED

    def __init__(self, message: str = "Not authenticated", code: str = "MISSING_TOKEN") -> None:
        super().__init__(message, code)


class AccessDeniedError(CatalogError):
    """Valid identity whose role is not allowed to perform the operation."""

    kind = ErrorKind.ACCESS_DENIED

    def __init__(self, message: str = "You don't have permission to access this resource") -> None:
        super().__init__(message)


class InvalidCredentialsError(CatalogError):
    """Login failure. Deliberately says nothing about which check failed."""

    kind = ErrorKind.INVALID_CREDENTIALS

    def __init__(self) -> None:
        super().__init__("Invalid username or password.")


# Reason codes
INVALID_KEY = "INVALID_KEY"
INVALID_FIELD = "INVALID_FIELD"
USERNAME_TAKEN = "USERNAME_TAKEN"
EMAIL_TAKEN = "EMAIL_TAKEN"
KEY_TAKEN = "KEY_TAKEN"
