"""Marketplace error taxonomy.

Every error carries the HTTP status it is rendered with; the API layer turns
them into ``{"error": message}`` bodies.
"""

from typing import Optional


class MarketplaceError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_body(self) -> dict:
        return {"error": self.message}


class Unauthenticated(MarketplaceError):
    """No valid session."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class NotFound(MarketplaceError):
    """A referenced profile or product does not exist."""

    status_code = 404


class Conflict(MarketplaceError):
    """The write would duplicate an existing record."""

    status_code = 409


class ValidationFailure(MarketplaceError):
    """Request values are malformed or out of range."""

    status_code = 400

    def __init__(self, message: str, errors: Optional[list[str]] = None):
        super().__init__(message)
        self.errors = errors or []

    def to_body(self) -> dict:
        body = super().to_body()
        if self.errors:
            body["details"] = self.errors
        return body


class BackendFailure(MarketplaceError):
    """The database failed; details are logged, not returned."""

    status_code = 500
