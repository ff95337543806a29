"""Error taxonomy.

Validation errors are raised before any network call. Everything the
gateway raises derives from GatewayError and is caught at the store
boundary.
"""

from __future__ import annotations


class MemoAppError(Exception):
    """Base class for all application errors."""


class ValidationError(MemoAppError):
    """One or more form fields failed client-side validation."""

    def __init__(self, field_errors: dict[str, str]) -> None:
        self.field_errors = dict(field_errors)
        super().__init__(
            "; ".join(f"{field}: {msg}" for field, msg in self.field_errors.items())
        )


class GatewayError(MemoAppError):
    """Base class for failures reaching or answered by the backing service."""


class AuthError(GatewayError):
    """Credentials or registration data were rejected."""


class NotFoundError(GatewayError):
    """The referenced record does not exist."""


class NetworkError(GatewayError):
    """Transport failure, including timeouts."""


class ServiceError(GatewayError):
    """Unexpected status code or malformed response body."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class AuthorizationExpired(GatewayError):
    """The service answered 401; the client-wide session has been torn down."""
