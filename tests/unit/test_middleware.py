"""Raw ASGI middleware tests: request id and poll interval headers."""

import logging

from taskboard.middleware import PollIntervalMiddleware, RequestIDMiddleware
from taskboard.middleware.request_id import resolve_request_id
from taskboard.shared.telemetry.logging import RequestIDLogFilter, request_id_var


def _app(status: int = 200, seen: list | None = None):
    async def app(scope, receive, send):
        if seen is not None:
            seen.append(request_id_var.get())
        await send({"type": "http.response.start", "status": status, "headers": []})
        await send({"type": "http.response.body", "body": b"{}"})

    return app


async def _call(asgi, method: str = "GET", path: str = "/api/v1/tasks", headers=None):
    messages: list[dict] = []

    async def receive():
        return {"type": "http.request", "body": b""}

    async def send(message):
        messages.append(message)

    scope = {
        "type": "http",
        "method": method,
        "path": path,
        "headers": headers or [],
    }
    await asgi(scope, receive, send)
    return dict(messages[0]["headers"]), scope


class TestRequestId:
    def test_resolve_keeps_safe_ids(self) -> None:
        assert resolve_request_id("req_1-a") == "req_1-a"

    def test_resolve_replaces_unsafe_ids(self) -> None:
        generated = resolve_request_id("bad id\nwith newline")
        assert generated != "bad id\nwith newline"
        assert len(generated) == 36
        assert resolve_request_id(None) != resolve_request_id(None)
        assert resolve_request_id("x" * 65) != "x" * 65

    async def test_sets_context_and_echoes_header(self) -> None:
        seen: list[str] = []
        asgi = RequestIDMiddleware(_app(seen=seen), header_name="X-Request-ID")
        headers, scope = await _call(asgi, headers=[(b"x-request-id", b"abc")])
        assert headers[b"X-Request-ID"] == b"abc"
        assert seen == ["abc"]
        assert scope["state"]["request_id"] == "abc"
        assert request_id_var.get() == "-"

    def test_log_filter_adds_request_id(self) -> None:
        record = logging.LogRecord("t", logging.INFO, __file__, 1, "msg", None, None)
        token = request_id_var.set("req-9")
        try:
            assert RequestIDLogFilter().filter(record)
        finally:
            request_id_var.reset(token)
        assert record.request_id == "req-9"


class TestPollInterval:
    async def test_added_on_successful_api_get(self) -> None:
        headers, _ = await _call(PollIntervalMiddleware(_app(), interval_seconds=5))
        assert headers[b"x-poll-interval"] == b"5"

    async def test_not_added_on_writes(self) -> None:
        headers, _ = await _call(
            PollIntervalMiddleware(_app(), interval_seconds=5), method="POST"
        )
        assert b"x-poll-interval" not in headers

    async def test_not_added_on_errors(self) -> None:
        headers, _ = await _call(PollIntervalMiddleware(_app(404), interval_seconds=5))
        assert b"x-poll-interval" not in headers

    async def test_not_added_outside_api(self) -> None:
        headers, _ = await _call(
            PollIntervalMiddleware(_app(), interval_seconds=5), path="/docs"
        )
        assert b"x-poll-interval" not in headers
