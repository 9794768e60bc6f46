"""
Domain error taxonomy for the Catalog Platform.

Every error raised by the service, auth and storage layers derives from
`CatalogError` and carries the HTTP status it maps to. The API layer renders
all of them the same way: `{"message": <message>}` with `status_code`.

    ValidationError  -> 400   malformed input, constraint violation
    OutOfRange       -> 400   requested page past the last page
    InvalidId        -> 400   malformed document identifier
    Unauthorized     -> 401   missing credential / failed login
    Forbidden        -> 403   invalid or expired credential
    NotFound         -> 404   no matching record
    StoreError       -> 500   unexpected backend failure
"""

from typing import Optional


class CatalogError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CatalogError):
    status_code = 400
    default_message = "Validation failed"


class OutOfRange(ValidationError):
    default_message = "Page is out of bounds"


class DuplicateUsername(ValidationError):
    default_message = "Username already exists"


class InvalidId(CatalogError):
    status_code = 400
    default_message = "Invalid ID format"


class Unauthorized(CatalogError):
    status_code = 401
    default_message = "Access denied. No token provided."


class Forbidden(CatalogError):
    status_code = 403
    default_message = "Invalid or expired token"


class NotFound(CatalogError):
    status_code = 404
    default_message = "Not found"


class StoreError(CatalogError):
    status_code = 500
    default_message = "Storage backend failure"
