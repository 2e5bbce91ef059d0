"""Request ID middleware.

Forwards a client X-Request-ID (when it is safe to log) or generates one,
exposes it to log records through a context variable, and echoes it on the
response. Raw ASGI (no BaseHTTPMiddleware).
"""

import re
import uuid
from typing import Callable

from taskboard.shared.telemetry.logging import request_id_var

REQUEST_ID_MAX_LENGTH = 64
_REQUEST_ID_RE = re.compile(r"^[a-zA-Z0-9_-]{1," + str(REQUEST_ID_MAX_LENGTH) + r"}$")


def _header(scope: dict, name: bytes) -> str | None:
    for key, value in scope.get("headers", []):
        if key.lower() == name:
            return value.decode("utf-8", errors="replace")
    return None


def resolve_request_id(raw: str | None) -> str:
    """Return raw when it is a short token of safe characters, else a new UUID."""
    candidate = (raw or "").strip()
    if _REQUEST_ID_RE.match(candidate):
        return candidate
    return str(uuid.uuid4())


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    """Attach a request id to scope state, log records, and the response."""
    header_key = header_name.lower().encode()

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = resolve_request_id(_header(scope, header_key))
        scope.setdefault("state", {})["request_id"] = request_id
        token = request_id_var.set(request_id)

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    *message.get("headers", []),
                    (header_name.encode(), request_id.encode()),
                ]
            await send(message)

        try:
            await app(scope, receive, send_wrapper)
        finally:
            request_id_var.reset(token)

    return asgi_app
