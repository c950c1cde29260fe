"""Logout endpoint with cookie clearing."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from apps.auth_service.dependencies import AuthComponents, get_components
from libs.auth_session.keys import redact

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/logout")
async def logout(request: Request, components: AuthComponents = Depends(get_components)) -> Any:
    """Delete the session (if any), clear the cookie and return to /login."""
    session_id = components.cookies.read(request)
    deleted = await components.orchestrator.logout(session_id)

    response = RedirectResponse(url="/login", status_code=302)
    components.cookies.clear(response)

    logger.info(
        "User logged out, cookie cleared",
        extra={"session_id": redact(session_id), "deleted": deleted},
    )
    return response
