"""Standalone error page.

``message`` is only shown when it is one of the service's own messages, so
the page cannot be used to display arbitrary text under this origin.
"""

from typing import Any

from fastapi import APIRouter, Request

from apps.auth_service.views import render_error
from libs.auth_session import messages

router = APIRouter()


@router.get("/error")
async def error_page(request: Request, message: str | None = None) -> Any:
    if message not in messages.DISPLAYABLE_ERRORS:
        message = messages.DEFAULT_ERROR
    return render_error(request, message, status_code=200)
