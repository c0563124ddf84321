from typing import Optional


class DomainError(Exception):
    """Base class for errors the HTTP layer maps onto JSON responses."""

    status = 500
    slug = "server_error"

    def __init__(self, message: str = "", code: Optional[str] = None):
        super().__init__(message or self.slug)
        self.message = message or self.slug
        self.code = code


class BadInput(DomainError):
    """Missing or invalid input; the client must correct it."""

    status = 400
    slug = "bad_request"


class Unauthorized(DomainError):
    status = 401
    slug = "unauthorized"


class NotFound(DomainError):
    """Missing or hidden resource."""

    status = 404
    slug = "not_found"


class AlreadyReported(DomainError):
    status = 409
    slug = "already_reported"


class StoreError(DomainError):
    """Upstream store failure; `code` mirrors the database error code when known."""

    status = 500
    slug = "store_error"


UNIQUE_VIOLATION = "23505"
UNDEFINED_COLUMN = "42703"
UNDEFINED_TABLE = "42P01"
