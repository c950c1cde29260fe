"""
Centralized Redis key formats for authentication state.

Usage:
    from libs.auth_session.keys import AuthKeys

    AuthKeys.session("abc")       # "session:abc"
    AuthKeys.oauth_state("xyz")   # "auth:state:xyz"
    AuthKeys.pkce_verifier("xyz") # "auth:pkce:xyz"
"""

SESSION_KEY_PREFIX = "session:"
STATE_KEY_PREFIX = "auth:state:"
PKCE_KEY_PREFIX = "auth:pkce:"


class AuthKeys:
    """
    Redis key format definitions for sessions and OAuth transactions.

    Callers are responsible for checking identifiers (see
    ``libs.auth_session.pkce.validate_state_format``) before building keys.
    """

    @staticmethod
    def session(session_id: str) -> str:
        """
        Key for a session record.

        Format: "session:{session_id}"

        Examples:
            >>> AuthKeys.session("sid1")
            'session:sid1'
        """
        return f"{SESSION_KEY_PREFIX}{session_id}"

    @staticmethod
    def oauth_state(state: str) -> str:
        """
        Key for the single-use CSRF state marker.

        Format: "auth:state:{state}"
        """
        return f"{STATE_KEY_PREFIX}{state}"

    @staticmethod
    def pkce_verifier(state: str) -> str:
        """
        Key for the PKCE code verifier bound to a state.

        Format: "auth:pkce:{state}"
        """
        return f"{PKCE_KEY_PREFIX}{state}"


def redact(identifier: str | None) -> str:
    """Shorten an identifier for log output."""
    if not identifier:
        return "<none>"
    return identifier[:8] + "..."


__all__ = ["AuthKeys", "PKCE_KEY_PREFIX", "SESSION_KEY_PREFIX", "STATE_KEY_PREFIX", "redact"]
