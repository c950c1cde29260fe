"""Authentication and session exceptions."""

from __future__ import annotations


class AuthSessionError(Exception):
    """Base exception for all authentication/session errors."""


class ConfigurationError(AuthSessionError):
    """Raised when required identity-provider or store settings are absent."""

    def __init__(self, missing_fields: list[str] | tuple[str, ...], context: str = "configuration"):
        self.missing_fields = list(missing_fields)
        super().__init__(f"{context} is incomplete. Missing: {', '.join(self.missing_fields)}")


class InvalidStateError(AuthSessionError, ValueError):
    """Raised when a state parameter fails the format check."""


class StoreConnectionError(AuthSessionError):
    """Raised when the key-value store cannot be reached or is not connected."""


class TransactionStoreError(AuthSessionError):
    """Raised when OAuth transaction storage fails (Redis unavailable, etc.)."""


class TokenExchangeError(AuthSessionError):
    """Raised when the token endpoint rejects the authorization code exchange.

    The response body is kept on the exception for logging but never included
    in the message, so callers can surface ``str(exc)`` without leaking
    provider detail.
    """

    def __init__(self, status_code: int, body: str | None = None):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Token exchange failed with status: {status_code}")


class SessionStoreError(AuthSessionError):
    """Raised when a session store operation fails."""


class SessionDataInvalidError(SessionStoreError):
    """Raised when a session payload is missing required fields."""


class SessionPayloadTooLargeError(SessionStoreError):
    """Raised when a serialized session payload exceeds the size limit."""


class SessionCorruptedError(SessionStoreError):
    """Raised when a stored session record cannot be parsed."""


class SessionNotFoundError(SessionStoreError):
    """Raised when updating a session that does not exist."""


__all__ = [
    "AuthSessionError",
    "ConfigurationError",
    "InvalidStateError",
    "StoreConnectionError",
    "TransactionStoreError",
    "TokenExchangeError",
    "SessionStoreError",
    "SessionDataInvalidError",
    "SessionPayloadTooLargeError",
    "SessionCorruptedError",
    "SessionNotFoundError",
]
