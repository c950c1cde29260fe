"""OAuth2 callback handler with encrypted session cookie."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from apps.auth_service.dependencies import AuthComponents, get_components
from apps.auth_service.views import FAILURE_STATUS_CODES, render_error
from libs.auth_session import messages
from libs.auth_session.keys import redact

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/auth/callback")
async def callback(
    request: Request,
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    error_description: str | None = None,
    components: AuthComponents = Depends(get_components),
) -> Any:
    """Handle the identity provider redirect.

    All parameters are optional so that a malformed callback renders the
    error view instead of a validation error.

    Returns:
        RedirectResponse with Set-Cookie on success, otherwise the error view
        (400 for provider, malformed and expired callbacks, 401 when
        authentication failed)

    Raises:
        ConfigurationError: If token endpoint settings are incomplete
    """
    outcome = await components.oauth.authenticate(
        code=code,
        state=state,
        error=error,
        error_description=error_description,
    )

    if not outcome.authenticated or outcome.session_id is None:
        return render_error(
            request,
            outcome.error_message or messages.AUTHENTICATION_FAILED,
            status_code=FAILURE_STATUS_CODES.get(outcome.state, 401),
        )

    response = RedirectResponse(url=outcome.redirect_url or "/", status_code=302)
    components.cookies.set(response, outcome.session_id)

    logger.info(
        "OAuth callback successful, cookie set",
        extra={"session_id": redact(outcome.session_id)},
    )
    return response
