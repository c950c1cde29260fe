"""ASGI middleware for trace ID extraction and injection.

Example:
    >>> from fastapi import FastAPI
    >>> from libs.common.logging.middleware import add_trace_id_middleware
    >>>
    >>> app = FastAPI()
    >>> add_trace_id_middleware(app)
"""

from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any

from fastapi import FastAPI
from starlette.types import ASGIApp

from libs.common.logging.context import (
    TRACE_ID_HEADER,
    clear_trace_id,
    generate_trace_id,
    is_valid_trace_id,
    set_trace_id,
)

Message = MutableMapping[str, Any]


def add_trace_id_middleware(app: FastAPI) -> None:
    """Install ASGITraceIDMiddleware on a FastAPI application.

    The ASGI form (rather than BaseHTTPMiddleware) also decorates responses
    produced by exception handlers and redirects.
    """
    app.add_middleware(ASGITraceIDMiddleware)


class ASGITraceIDMiddleware:
    """Adopts or generates a trace ID per HTTP request.

    The inbound ``X-Trace-ID`` header is reused when well formed, otherwise a
    new ID is generated. The ID is echoed on the response and cleared from the
    context once the response is sent.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(
        self,
        scope: MutableMapping[str, Any],
        receive: Callable[[], Awaitable[Message]],
        send: Callable[[Message], Awaitable[None]],
    ) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        raw = headers.get(TRACE_ID_HEADER.lower().encode())
        inbound = raw.decode("latin-1") if raw else None
        trace_id = inbound if is_valid_trace_id(inbound) else generate_trace_id()

        set_trace_id(trace_id)

        async def send_with_trace_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                response_headers = list(message.get("headers", []))
                response_headers.append((TRACE_ID_HEADER.lower().encode(), trace_id.encode()))
                message["headers"] = response_headers
            await send(message)

        try:
            await self.app(scope, receive, send_with_trace_id)
        finally:
            clear_trace_id()
