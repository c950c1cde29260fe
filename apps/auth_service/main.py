"""FastAPI auth service for browser sign in.

This service handles the OAuth2 Authorization Code flow with PKCE (or a
shared-password form) and maintains Redis-backed sessions:
- /login: Starts sign in (redirect to the identity provider, or the form)
- /auth/callback: Completes the OAuth2 flow and sets the session cookie
- /logout: Deletes the session and clears the cookie
- /: Protected landing page
- /error: Generic error page
- /health: Liveness plus Redis ping
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse
from starlette.responses import Response

from apps.auth_service.dependencies import LoginRequired, build_components, validate_settings
from apps.auth_service.routes import callback, error, health, home, login, logout
from apps.auth_service.views import render_error
from config.settings import Settings, get_settings
from libs.auth_session import messages
from libs.auth_session.exceptions import (
    ConfigurationError,
    SessionStoreError,
    StoreConnectionError,
    TransactionStoreError,
)
from libs.auth_session.redis_client import RedisConnection
from libs.common.logging import add_trace_id_middleware, configure_logging

logger = logging.getLogger(__name__)

SERVICE_NAME = "auth_service"


async def configuration_error_handler(request: Request, exc: Exception) -> Response:
    logger.error(
        "Authentication unavailable, configuration incomplete",
        extra={"path": request.url.path, "error": str(exc)},
    )
    return render_error(request, messages.IDP_UNAVAILABLE, status_code=503)


async def store_unavailable_handler(request: Request, exc: Exception) -> Response:
    logger.error(
        "Authentication unavailable, store error",
        extra={"path": request.url.path, "error_type": type(exc).__name__, "error": str(exc)},
    )
    return render_error(request, messages.SERVICE_UNAVAILABLE, status_code=503)


async def login_required_handler(request: Request, exc: Exception) -> Response:
    return RedirectResponse(url="/login", status_code=302)


def create_app(
    settings: Settings | None = None,
    redis_connection: RedisConnection | None = None,
) -> FastAPI:
    """Build the auth service application.

    Args:
        settings: Service settings; defaults to ``get_settings()``
        redis_connection: Pre-built connection (tests pass one wrapping an
            in-memory client); defaults to one built from settings

    Returns:
        FastAPI app whose lifespan connects Redis and wires components
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(service_name=SERVICE_NAME, log_level=settings.log_level)
        validate_settings(settings)

        connection = redis_connection or RedisConnection(settings.redis_config())
        await connection.connect()
        app.state.auth = build_components(settings, connection)

        logger.info(
            "Auth service started",
            extra={"auth_mode": settings.auth_mode, "environment": settings.environment},
        )
        try:
            yield
        finally:
            app.state.auth = None
            await connection.disconnect()
            logger.info("Auth service shutting down")

    app = FastAPI(
        title="Auth Service",
        description="OAuth2 + PKCE browser sign in with Redis-backed sessions",
        version="1.0.0",
        lifespan=lifespan,
    )

    add_trace_id_middleware(app)

    app.add_exception_handler(ConfigurationError, configuration_error_handler)
    app.add_exception_handler(StoreConnectionError, store_unavailable_handler)
    app.add_exception_handler(TransactionStoreError, store_unavailable_handler)
    app.add_exception_handler(SessionStoreError, store_unavailable_handler)
    app.add_exception_handler(LoginRequired, login_required_handler)

    app.include_router(login.router, tags=["auth"])
    app.include_router(callback.router, tags=["auth"])
    app.include_router(logout.router, tags=["auth"])
    app.include_router(home.router, tags=["pages"])
    app.include_router(error.router, tags=["pages"])
    app.include_router(health.router, tags=["health"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "apps.auth_service.main:app",
        host="0.0.0.0",
        port=get_settings().port,
        log_level=get_settings().log_level.lower(),
    )
