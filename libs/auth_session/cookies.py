"""Session cookie handling.

The cookie carries only the session id, encrypted and authenticated with
Fernet (AES-128-CBC + HMAC-SHA256). Decryption enforces the session TTL, so a
replayed envelope older than the session window is rejected even before the
store lookup.

SameSite is ``lax``: the identity provider returns the browser through a
cross-site top-level redirect, which a ``strict`` cookie would not survive.
"""

from __future__ import annotations

import base64
import hashlib
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from cryptography.fernet import Fernet, InvalidToken, MultiFernet
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "session"
SESSION_COOKIE_SAMESITE = "lax"
MIN_COOKIE_PASSWORD_LENGTH = 32


@dataclass(frozen=True)
class CookieConfig:
    """Cookie attributes derived from settings."""

    max_age: int
    secure: bool
    name: str = SESSION_COOKIE_NAME
    path: str = "/"
    domain: str | None = None

    def get_cookie_flags(self) -> dict[str, Any]:
        flags: dict[str, Any] = {
            "httponly": True,
            "secure": self.secure,
            "samesite": SESSION_COOKIE_SAMESITE,
            "path": self.path,
        }
        if self.domain:
            flags["domain"] = self.domain
        return flags


class CookieManager:
    """Sets, reads and clears the encrypted session cookie."""

    def __init__(self, config: CookieConfig, passwords: Sequence[str]) -> None:
        """Initialize cookie manager.

        Args:
            config: Cookie attributes
            passwords: Cookie passwords, newest first. The first encrypts;
                all are tried on decrypt to allow rotation.

        Raises:
            ValueError: If no password is given or one is shorter than 32 chars
        """
        if not passwords:
            raise ValueError("At least one cookie password is required")
        for password in passwords:
            if len(password) < MIN_COOKIE_PASSWORD_LENGTH:
                raise ValueError(
                    f"Cookie password must be at least {MIN_COOKIE_PASSWORD_LENGTH} characters"
                )

        self.config = config
        self.fernet = MultiFernet([Fernet(_derive_fernet_key(p)) for p in passwords])

    def encode(self, session_id: str) -> str:
        return self.fernet.encrypt(session_id.encode("utf-8")).decode("ascii")

    def decode(self, cookie_value: str) -> str | None:
        """Return the session id carried by a cookie value, or None."""
        try:
            session_id = self.fernet.decrypt(
                cookie_value.encode("ascii"), ttl=self.config.max_age
            ).decode("utf-8")
        except (InvalidToken, UnicodeError) as exc:
            logger.info("Session cookie rejected", extra={"error_type": type(exc).__name__})
            return None
        return session_id or None

    def set(self, response: Response, session_id: str) -> None:
        response.set_cookie(
            key=self.config.name,
            value=self.encode(session_id),
            max_age=self.config.max_age,
            **self.config.get_cookie_flags(),
        )

    def read(self, source: Request | Mapping[str, str]) -> str | None:
        """Read the session id from a request (or its cookie mapping)."""
        cookies = source.cookies if isinstance(source, Request) else source
        cookie_value = cookies.get(self.config.name)
        if not cookie_value:
            return None
        return self.decode(cookie_value)

    def clear(self, response: Response) -> None:
        response.delete_cookie(key=self.config.name, **self.config.get_cookie_flags())


def _derive_fernet_key(password: str) -> bytes:
    return base64.urlsafe_b64encode(hashlib.sha256(password.encode("utf-8")).digest())


__all__ = ["CookieConfig", "CookieManager", "SESSION_COOKIE_NAME", "SESSION_COOKIE_SAMESITE"]
