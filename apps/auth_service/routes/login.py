"""Sign-in entry point for both authentication modes."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Form, HTTPException, Request
from fastapi.responses import RedirectResponse

from apps.auth_service.dependencies import AuthComponents, get_components
from apps.auth_service.views import render_login
from libs.auth_session import messages
from libs.auth_session.keys import redact

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/login")
async def login(request: Request, components: AuthComponents = Depends(get_components)) -> Any:
    """Start sign in.

    In oauth mode, redirects to the identity provider (or straight to the
    post-login page when the cookie already carries a valid session). In
    password mode, renders the sign-in form.

    Raises:
        ConfigurationError: If identity provider settings are incomplete
        TransactionStoreError: If OAuth state cannot be stored
    """
    session_id = components.cookies.read(request)

    if components.settings.auth_mode == "password":
        current = await components.orchestrator.validate(session_id)
        if current.authenticated:
            return RedirectResponse(url=components.settings.post_login_redirect, status_code=302)
        return render_login(request)

    outcome = await components.orchestrator.initiate(session_id)
    return RedirectResponse(url=outcome.redirect_url or "/", status_code=302)


@router.post("/login")
async def login_with_password(
    request: Request,
    password: str = Form(""),
    components: AuthComponents = Depends(get_components),
) -> Any:
    """Handle the password sign-in form."""
    if components.settings.auth_mode != "password":
        raise HTTPException(status_code=404, detail="Not found")

    outcome = await components.password.authenticate(password=password)
    if not outcome.authenticated or outcome.session_id is None:
        status_code = 503 if outcome.error_message == messages.SERVICE_UNAVAILABLE else 401
        return render_login(request, outcome.error_message, status_code=status_code)

    response = RedirectResponse(url=outcome.redirect_url or "/", status_code=302)
    components.cookies.set(response, outcome.session_id)

    logger.info("Password sign in complete, cookie set", extra={"session_id": redact(outcome.session_id)})
    return response
