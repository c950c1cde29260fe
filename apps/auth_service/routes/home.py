"""Protected landing page."""

from typing import Any

from fastapi import APIRouter, Depends, Request

from apps.auth_service.dependencies import require_session
from apps.auth_service.views import render_home
from libs.auth_session.session_store import SessionRecord

router = APIRouter()


@router.get("/")
async def home(request: Request, session: SessionRecord = Depends(require_session)) -> Any:
    return render_home(request, session)
