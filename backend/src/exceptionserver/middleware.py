"""ASGI middleware for request tracing, access logging and write failures."""

import time
import uuid

import structlog
from starlette.datastructures import Headers, MutableHeaders
from starlette.requests import ClientDisconnect
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from exceptionserver.logging import get_logger

REQUEST_ID_HEADER = "X-Request-ID"

logger = get_logger(__name__)


class RequestIDMiddleware:
    """Add request ID to every request and log its completion.

    - Reads X-Request-ID from request headers, or generates a UUID if missing
    - Binds request_id to structlog context (auto-included in all logs)
    - Adds X-Request-ID to response headers
    - Logs one ``request_completed`` event with status and duration

    This wraps the connection's own ``send``. A failed write (client gone)
    is logged as ``response_write_failed`` and later messages for that
    response are dropped; the status already sent stands. Exceptions from
    the app itself are not caught here and reach the recovery handler.

    Usage:
        app.add_middleware(RequestIDMiddleware)
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = Headers(scope=scope).get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        status_code: int | None = None
        disconnected = False
        started = time.perf_counter()

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code, disconnected
            if disconnected:
                return
            if message["type"] == "http.response.start":
                status_code = message["status"]
                MutableHeaders(scope=message).append(REQUEST_ID_HEADER, request_id)
            try:
                await send(message)
            except (OSError, ClientDisconnect) as exc:
                disconnected = True
                logger.warning(
                    "response_write_failed",
                    path=scope["path"],
                    status_code=status_code,
                    error=str(exc),
                )

        await self.app(scope, receive, send_wrapper)

        logger.info(
            "request_completed",
            method=scope["method"],
            path=scope["path"],
            status_code=status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 3),
        )
