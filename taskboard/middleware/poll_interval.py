"""Poll interval middleware.

Clients refresh task state by polling; successful GET responses under the
API prefix advertise the configured interval in X-Poll-Interval (seconds).
Raw ASGI (no BaseHTTPMiddleware).
"""

from typing import Callable

POLL_INTERVAL_HEADER = b"x-poll-interval"


def PollIntervalMiddleware(
    app: Callable, interval_seconds: int, path_prefix: str = "/api/v1"
) -> Callable:
    """Add X-Poll-Interval to 2xx GET responses whose path starts with path_prefix."""
    value = str(interval_seconds).encode()

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if (
            scope["type"] != "http"
            or scope.get("method") != "GET"
            or not scope.get("path", "").startswith(path_prefix)
        ):
            await app(scope, receive, send)
            return

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start" and 200 <= message["status"] < 300:
                message["headers"] = [
                    *message.get("headers", []),
                    (POLL_INTERVAL_HEADER, value),
                ]
            await send(message)

        await app(scope, receive, send_wrapper)

    return asgi_app
