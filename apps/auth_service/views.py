"""HTML views for sign-in, error and landing pages.

Every template receives ``page_title``, ``error_message`` and ``has_error``.
"""

from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates
from starlette.responses import Response

from libs.auth_session import messages
from libs.auth_session.orchestrator import AuthState
from libs.auth_session.session_store import SessionRecord

TEMPLATES_DIR = Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

FAILURE_STATUS_CODES: dict[AuthState, int] = {
    AuthState.IDP_ERROR: 400,
    AuthState.MALFORMED_CALLBACK: 400,
    AuthState.EXPIRED_REQUEST: 400,
    AuthState.AUTH_FAILED: 401,
}


def page_context(page_title: str, error_message: str | None = None) -> dict[str, object]:
    return {
        "page_title": page_title,
        "error_message": error_message,
        "has_error": bool(error_message),
    }


def render_error(request: Request, error_message: str, status_code: int) -> Response:
    return templates.TemplateResponse(
        request,
        "error.html",
        page_context(messages.ERROR_PAGE_TITLE, error_message),
        status_code=status_code,
    )


def render_login(request: Request, error_message: str | None = None, status_code: int = 200) -> Response:
    return templates.TemplateResponse(
        request,
        "login.html",
        page_context(messages.SIGN_IN_PAGE_TITLE, error_message),
        status_code=status_code,
    )


def render_home(request: Request, session: SessionRecord) -> Response:
    context = page_context("Home")
    context["expires_at"] = session.expires_at.isoformat()
    return templates.TemplateResponse(request, "home.html", context)
