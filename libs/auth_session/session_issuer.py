"""Session issuance shared by every authentication strategy."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta

from libs.auth_session.keys import redact
from libs.auth_session.pkce import generate_session_id
from libs.auth_session.session_store import SessionRecord, SessionStore
from libs.auth_session.session_token import SessionTokenCodec

logger = logging.getLogger(__name__)


class SessionIssuer:
    """Mints a session id + signed token and persists the SessionRecord."""

    def __init__(self, session_store: SessionStore, token_codec: SessionTokenCodec) -> None:
        self.session_store = session_store
        self.token_codec = token_codec

    @property
    def session_ttl_seconds(self) -> int:
        return self.session_store.session_ttl_seconds

    async def issue(self) -> SessionRecord:
        """Create and store a new session.

        Raises:
            SessionStoreError: If the record cannot be written
        """
        session_id = generate_session_id()
        # Whole seconds so the token exp and expires_at agree exactly
        created_at = datetime.now(UTC).replace(microsecond=0)
        expires_at = created_at + timedelta(seconds=self.session_ttl_seconds)

        record = SessionRecord(
            session_id=session_id,
            session_token=self.token_codec.mint(session_id, created_at, expires_at),
            created_at=created_at,
            expires_at=expires_at,
        )
        await self.session_store.create(session_id, record.model_dump(mode="json"))

        logger.info(
            "Session issued",
            extra={"session_id": redact(session_id), "expires_at": expires_at.isoformat()},
        )
        return record


__all__ = ["SessionIssuer"]
