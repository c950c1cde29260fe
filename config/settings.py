"""
Application settings loaded from environment variables.

Uses Pydantic Settings for type-safe configuration with validation.
All settings can be overridden via environment variables or .env file.

Development defaults are provided for the identity provider client and the
cookie password so the service starts locally without a .env file. In
production those placeholders count as missing (see ``missing_required``).
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from libs.auth_session.config import DEFAULT_SCOPE, IdentityProviderConfig
from libs.auth_session.redis_client import RedisConfig

DEV_CLIENT_ID = "dev-client-id"
DEV_CLIENT_SECRET = "dev-client-secret"
DEV_TENANT_ID = "common"
DEV_REDIRECT_URI = "http://localhost:8000/auth/callback"
DEV_COOKIE_PASSWORD = "the-password-must-be-at-least-32-characters-long"
DEV_SIGNING_SECRET = "dev-session-signing-secret-change-me-in-production"


class Settings(BaseSettings):
    """
    Authentication service configuration.

    All settings are loaded from environment variables or .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Configuration
    environment: Literal["development", "test", "production"] = Field(
        default="development",
        description="Deployment environment; production enforces required settings",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    auth_mode: Literal["oauth", "password"] = Field(
        default="oauth",
        description="Sign-in mode: identity provider redirect or shared password form",
    )
    post_login_redirect: str = Field(
        default="/",
        description="Path the browser is sent to after successful sign in",
    )
    port: int = Field(default=8000, ge=1, le=65535, description="HTTP port for the uvicorn entry point")

    # Identity Provider Configuration
    idp_base_url: str = Field(
        default="https://login.microsoftonline.com",
        description="Identity provider base URL; endpoints are {base}/{tenant}/{path}",
    )
    idp_tenant_id: str = Field(default=DEV_TENANT_ID, description="Identity provider tenant")
    idp_client_id: str = Field(default=DEV_CLIENT_ID, description="OAuth2 client ID")
    idp_client_secret: SecretStr = Field(
        default=SecretStr(DEV_CLIENT_SECRET),
        description="OAuth2 client secret",
    )
    idp_redirect_uri: str = Field(
        default=DEV_REDIRECT_URI,
        description="Registered callback URL (must match the identity provider exactly)",
    )
    idp_authorize_path: str = Field(default="oauth2/v2.0/authorize")
    idp_token_path: str = Field(default="oauth2/v2.0/token")
    idp_scope: str = Field(default=DEFAULT_SCOPE)
    token_exchange_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        le=60,
        description="Timeout for the authorization code exchange request",
    )

    # Redis Configuration
    redis_host: str = Field(default="localhost")
    redis_port: int = Field(default=6379, ge=1, le=65535)
    redis_db: int = Field(default=0, ge=0)
    redis_username: str | None = Field(default=None)
    redis_password: SecretStr | None = Field(default=None)
    redis_tls: bool = Field(default=False, description="Connect to Redis over TLS")

    # Session Configuration
    session_ttl_seconds: int = Field(
        default=4 * 60 * 60,
        ge=60,
        le=7 * 24 * 60 * 60,
        description="Session lifetime; also the cookie Max-Age",
    )
    session_signing_secret: SecretStr = Field(
        default=SecretStr(DEV_SIGNING_SECRET),
        description="HS256 secret for the signed session token (min 32 chars)",
    )
    session_cookie_password: SecretStr = Field(
        default=SecretStr(DEV_COOKIE_PASSWORD),
        description="Cookie encryption password (min 32 chars)",
    )
    session_cookie_password_previous: SecretStr | None = Field(
        default=None,
        description="Previous cookie password, still accepted on read during rotation",
    )
    session_cookie_secure: bool | None = Field(
        default=None,
        description="Secure cookie flag; defaults to True in production",
    )
    session_cookie_domain: str | None = Field(default=None)

    # Password Mode
    shared_password: SecretStr = Field(
        default=SecretStr(""),
        description="Shared password for password sign-in mode",
    )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def cookie_secure(self) -> bool:
        if self.session_cookie_secure is None:
            return self.is_production
        return self.session_cookie_secure

    def cookie_passwords(self) -> list[str]:
        passwords = [self.session_cookie_password.get_secret_value()]
        if self.session_cookie_password_previous is not None:
            previous = self.session_cookie_password_previous.get_secret_value()
            if previous:
                passwords.append(previous)
        return passwords

    def missing_required(self) -> list[str]:
        """List settings that must be provided before a production start.

        Empty values are always missing. In production, development
        placeholders are treated as missing too.
        """
        placeholders: dict[str, str] = {
            "session_signing_secret": DEV_SIGNING_SECRET,
            "session_cookie_password": DEV_COOKIE_PASSWORD,
        }
        values: dict[str, str] = {
            "session_signing_secret": self.session_signing_secret.get_secret_value(),
            "session_cookie_password": self.session_cookie_password.get_secret_value(),
        }
        if self.auth_mode == "oauth":
            placeholders.update(
                {
                    "idp_client_id": DEV_CLIENT_ID,
                    "idp_client_secret": DEV_CLIENT_SECRET,
                    "idp_redirect_uri": DEV_REDIRECT_URI,
                }
            )
            values.update(
                {
                    "idp_base_url": self.idp_base_url,
                    "idp_tenant_id": self.idp_tenant_id,
                    "idp_client_id": self.idp_client_id,
                    "idp_client_secret": self.idp_client_secret.get_secret_value(),
                    "idp_redirect_uri": self.idp_redirect_uri,
                }
            )
        else:
            values["shared_password"] = self.shared_password.get_secret_value()

        missing = []
        for name, value in values.items():
            if not value:
                missing.append(name)
            elif self.is_production and placeholders.get(name) == value:
                missing.append(name)
        return missing

    def identity_provider(self) -> IdentityProviderConfig:
        return IdentityProviderConfig(
            base_url=self.idp_base_url,
            tenant_id=self.idp_tenant_id,
            client_id=self.idp_client_id,
            client_secret=self.idp_client_secret.get_secret_value(),
            redirect_uri=self.idp_redirect_uri,
            authorize_path=self.idp_authorize_path,
            token_path=self.idp_token_path,
            scope=self.idp_scope,
        )

    def redis_config(self) -> RedisConfig:
        return RedisConfig(
            host=self.redis_host,
            port=self.redis_port,
            db=self.redis_db,
            username=self.redis_username,
            password=self.redis_password.get_secret_value() if self.redis_password else None,
            use_tls=self.redis_tls,
        )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once.

    Returns:
        Settings instance with all configuration loaded.

    Example:
        >>> settings = get_settings()
        >>> print(settings.auth_mode)
        'oauth'
    """
    return Settings()
