"""PKCE (Proof Key for Code Exchange) and CSRF state utilities.

Implements RFC 7636 for the OAuth2 authorization code flow.

Security guarantees:
- code_verifier: 32 bytes (256 bits) of cryptographic randomness
- code_challenge_method: S256 (SHA256, NOT plain text)
- Base64-URL encoding per RFC 4648 Section 5
- State / session id: 32 bytes (256 bits)
"""

from __future__ import annotations

import base64
import hashlib
import re
import secrets
from typing import NamedTuple

from libs.auth_session.exceptions import InvalidStateError

CODE_CHALLENGE_METHOD = "S256"
MAX_STATE_LENGTH = 512

_VALID_STATE_PATTERN = re.compile(r"[A-Za-z0-9_-]+")


class PKCEChallenge(NamedTuple):
    """PKCE challenge pair for OAuth2 authorization."""

    code_verifier: str  # 43 char random string
    code_challenge: str  # Base64-URL(SHA256(code_verifier))


def _urlsafe(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def compute_code_challenge(code_verifier: str) -> str:
    """Return Base64-URL(SHA256(code_verifier)) without padding."""
    return _urlsafe(hashlib.sha256(code_verifier.encode("ascii")).digest())


def generate_pkce_challenge() -> PKCEChallenge:
    """Generate PKCE code_verifier and code_challenge (S256 method).

    Returns:
        PKCEChallenge with code_verifier and code_challenge
    """
    code_verifier = _urlsafe(secrets.token_bytes(32))
    return PKCEChallenge(
        code_verifier=code_verifier,
        code_challenge=compute_code_challenge(code_verifier),
    )


def generate_state() -> str:
    """Generate cryptographically random state for CSRF protection.

    Returns:
        32-byte random string (Base64-URL encoded)
    """
    return _urlsafe(secrets.token_bytes(32))


def generate_session_id() -> str:
    """Generate cryptographically random session ID.

    Returns:
        32-byte random string (Base64-URL encoded, 256 bits)
    """
    return _urlsafe(secrets.token_bytes(32))


def validate_state_format(state: object) -> str:
    """Check a state parameter before it is used to build a storage key.

    Args:
        state: Raw state value from the callback query string

    Returns:
        The state, unchanged, when it is well formed

    Raises:
        InvalidStateError: If state is empty, not a string, longer than
            MAX_STATE_LENGTH, or contains characters outside [A-Za-z0-9_-]
    """
    if state is None or state == "":
        raise InvalidStateError("State parameter is required")
    if not isinstance(state, str):
        raise InvalidStateError("State parameter must be a string")
    if len(state) > MAX_STATE_LENGTH:
        raise InvalidStateError("State parameter exceeds maximum length")
    if not _VALID_STATE_PATTERN.fullmatch(state):
        raise InvalidStateError("Invalid state parameter format")
    return state


def is_valid_state(state: object) -> bool:
    try:
        validate_state_format(state)
    except InvalidStateError:
        return False
    return True


__all__ = [
    "CODE_CHALLENGE_METHOD",
    "MAX_STATE_LENGTH",
    "PKCEChallenge",
    "compute_code_challenge",
    "generate_pkce_challenge",
    "generate_session_id",
    "generate_state",
    "is_valid_state",
    "validate_state_format",
]
