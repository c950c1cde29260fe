"""OAuth2 + PKCE authentication and Redis-backed session lifecycle.

Components:
    TransactionStore: one-time CSRF state and PKCE verifier storage
    TokenExchangeClient: authorization code to token exchange
    SessionStore: session CRUD with TTL
    CookieManager: encrypted session cookie
    AuthenticationOrchestrator: login / callback / validation state machine
"""

from libs.auth_session.config import IdentityProviderConfig
from libs.auth_session.cookies import CookieConfig, CookieManager
from libs.auth_session.exceptions import (
    AuthSessionError,
    ConfigurationError,
    InvalidStateError,
    SessionCorruptedError,
    SessionDataInvalidError,
    SessionNotFoundError,
    SessionPayloadTooLargeError,
    SessionStoreError,
    StoreConnectionError,
    TokenExchangeError,
    TransactionStoreError,
)
from libs.auth_session.orchestrator import AuthenticationOrchestrator, AuthOutcome, AuthState
from libs.auth_session.redis_client import RedisConfig, RedisConnection
from libs.auth_session.session_issuer import SessionIssuer
from libs.auth_session.session_store import SessionRecord, SessionStore
from libs.auth_session.session_token import SessionTokenCodec
from libs.auth_session.strategies import AuthStrategy, OAuthStrategy, PasswordStrategy
from libs.auth_session.token_client import TokenExchangeClient
from libs.auth_session.transaction_store import TransactionStore

__all__ = [
    "AuthOutcome",
    "AuthSessionError",
    "AuthState",
    "AuthStrategy",
    "AuthenticationOrchestrator",
    "ConfigurationError",
    "CookieConfig",
    "CookieManager",
    "IdentityProviderConfig",
    "InvalidStateError",
    "OAuthStrategy",
    "PasswordStrategy",
    "RedisConfig",
    "RedisConnection",
    "SessionCorruptedError",
    "SessionDataInvalidError",
    "SessionIssuer",
    "SessionNotFoundError",
    "SessionPayloadTooLargeError",
    "SessionRecord",
    "SessionStore",
    "SessionStoreError",
    "SessionTokenCodec",
    "StoreConnectionError",
    "TokenExchangeClient",
    "TokenExchangeError",
    "TransactionStore",
    "TransactionStoreError",
]
