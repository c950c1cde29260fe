"""Shared dependencies for the FastAPI auth service.

Components are built once per process in the application lifespan (after
Redis is connected) and stored on ``app.state.auth``; the functions below
expose them to routes through ``Depends``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import Depends, Request

from config.settings import Settings
from libs.auth_session.cookies import CookieConfig, CookieManager
from libs.auth_session.exceptions import ConfigurationError, StoreConnectionError
from libs.auth_session.orchestrator import AuthenticationOrchestrator, AuthOutcome
from libs.auth_session.redis_client import RedisConnection
from libs.auth_session.session_issuer import SessionIssuer
from libs.auth_session.session_store import SessionRecord, SessionStore
from libs.auth_session.session_token import SessionTokenCodec
from libs.auth_session.strategies import OAuthStrategy, PasswordStrategy
from libs.auth_session.token_client import TokenExchangeClient
from libs.auth_session.transaction_store import TransactionStore

logger = logging.getLogger(__name__)


class LoginRequired(Exception):
    """Raised by protected routes when the request has no valid session."""


@dataclass
class AuthComponents:
    settings: Settings
    redis: RedisConnection
    orchestrator: AuthenticationOrchestrator
    cookies: CookieManager
    oauth: OAuthStrategy
    password: PasswordStrategy


def validate_settings(settings: Settings) -> None:
    """Fail startup in production when required settings are absent.

    Raises:
        ConfigurationError: In production, naming every missing setting
    """
    missing = settings.missing_required()
    if not missing:
        return
    if settings.is_production:
        raise ConfigurationError(missing, context="Auth service configuration")
    logger.warning(
        "Auth service settings incomplete, development defaults in use",
        extra={"missing_settings": missing, "environment": settings.environment},
    )


def build_components(settings: Settings, connection: RedisConnection) -> AuthComponents:
    """Wire stores, clients and strategies around a connected Redis client."""
    client = connection.client
    idp_config = settings.identity_provider()

    session_store = SessionStore(client, session_ttl_seconds=settings.session_ttl_seconds)
    token_codec = SessionTokenCodec(settings.session_signing_secret.get_secret_value())
    issuer = SessionIssuer(session_store, token_codec)

    orchestrator = AuthenticationOrchestrator(
        idp_config=idp_config,
        transaction_store=TransactionStore(client),
        token_client=TokenExchangeClient(
            idp_config, timeout_seconds=settings.token_exchange_timeout_seconds
        ),
        session_store=session_store,
        session_issuer=issuer,
        token_codec=token_codec,
        post_login_redirect=settings.post_login_redirect,
    )

    cookies = CookieManager(
        CookieConfig(
            max_age=settings.session_ttl_seconds,
            secure=settings.cookie_secure,
            domain=settings.session_cookie_domain,
        ),
        settings.cookie_passwords(),
    )

    return AuthComponents(
        settings=settings,
        redis=connection,
        orchestrator=orchestrator,
        cookies=cookies,
        oauth=OAuthStrategy(orchestrator),
        password=PasswordStrategy(
            settings.shared_password.get_secret_value(),
            issuer,
            post_login_redirect=settings.post_login_redirect,
        ),
    )


def get_components(request: Request) -> AuthComponents:
    components: AuthComponents | None = getattr(request.app.state, "auth", None)
    if components is None:
        raise StoreConnectionError("Auth service components are not initialized")
    return components


def get_orchestrator(components: AuthComponents = Depends(get_components)) -> AuthenticationOrchestrator:
    return components.orchestrator


def get_cookie_manager(components: AuthComponents = Depends(get_components)) -> CookieManager:
    return components.cookies


async def get_current_session(
    request: Request,
    orchestrator: AuthenticationOrchestrator = Depends(get_orchestrator),
    cookies: CookieManager = Depends(get_cookie_manager),
) -> AuthOutcome:
    """Validate the session cookie; never raises for anonymous requests."""
    return await orchestrator.validate(cookies.read(request))


async def require_session(
    request: Request,
    outcome: AuthOutcome = Depends(get_current_session),
) -> SessionRecord:
    """Protect a route: anonymous requests are redirected to /login.

    Raises:
        LoginRequired: If the request has no valid session
    """
    if not outcome.authenticated or outcome.session is None:
        raise LoginRequired()
    request.state.session = outcome.session
    return outcome.session
