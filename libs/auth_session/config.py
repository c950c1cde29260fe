"""Identity provider configuration consumed by the URL builder and token client."""

from __future__ import annotations

from dataclasses import dataclass

from libs.auth_session.exceptions import ConfigurationError

DEFAULT_SCOPE = "openid profile email"

AUTHORIZE_FIELDS = ("base_url", "tenant_id", "client_id", "redirect_uri", "authorize_path")
TOKEN_FIELDS = (
    "base_url",
    "tenant_id",
    "client_id",
    "client_secret",
    "redirect_uri",
    "token_path",
)


@dataclass(frozen=True)
class IdentityProviderConfig:
    """OAuth2 identity provider settings.

    Endpoints are assembled as ``{base_url}/{tenant_id}/{path}``.
    """

    base_url: str = ""
    tenant_id: str = ""
    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = ""
    authorize_path: str = "oauth2/v2.0/authorize"
    token_path: str = "oauth2/v2.0/token"
    scope: str = DEFAULT_SCOPE

    def missing(self, fields: tuple[str, ...]) -> list[str]:
        return [name for name in fields if not getattr(self, name)]

    def require(self, fields: tuple[str, ...]) -> None:
        """Raise ConfigurationError naming every empty field in ``fields``."""
        missing = self.missing(fields)
        if missing:
            raise ConfigurationError(missing, context="Identity provider configuration")

    def endpoint(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{self.tenant_id}/{path.lstrip('/')}"

    @property
    def authorize_endpoint(self) -> str:
        return self.endpoint(self.authorize_path)

    @property
    def token_endpoint(self) -> str:
        return self.endpoint(self.token_path)


__all__ = ["AUTHORIZE_FIELDS", "DEFAULT_SCOPE", "IdentityProviderConfig", "TOKEN_FIELDS"]
