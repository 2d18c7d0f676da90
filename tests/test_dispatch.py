"""Tests for switchboard.server.handler — dispatch and failure containment."""

import asyncio
import logging
from typing import Any

import pytest

from switchboard.http.request import RequestDescriptor
from switchboard.http.response import ContentType, HandlerResult
from switchboard.routing.route import ContainsMatcher, Route
from switchboard.routing.table import RouteTable
from switchboard.server.handler import dispatch, handle_request


def _request(path: str = "thing", method: str = "get") -> RequestDescriptor:
    return RequestDescriptor(path=path, method=method)


class TestDispatch:
    @pytest.mark.asyncio
    async def test_sync_handler(self) -> None:
        def handler(request, respond) -> None:
            respond(201, {"path": request.path})

        result = await dispatch(handler, _request())
        assert result == HandlerResult(201, {"path": "thing"}, ContentType.JSON)

    @pytest.mark.asyncio
    async def test_async_handler(self) -> None:
        async def handler(request, respond) -> None:
            await asyncio.sleep(0)
            respond(200, "<p>hi</p>", "html")

        result = await dispatch(handler, _request())
        assert result.content_type is ContentType.HTML
        assert result.payload == "<p>hi</p>"

    @pytest.mark.asyncio
    async def test_respond_scheduled_after_return(self) -> None:
        def handler(request, respond) -> None:
            asyncio.get_running_loop().call_soon(respond, 202)

        result = await dispatch(handler, _request())
        assert result.status == 202

    @pytest.mark.asyncio
    async def test_synchronous_failure_contained(self, caplog: pytest.LogCaptureFixture) -> None:
        def handler(request, respond) -> None:
            raise RuntimeError("boom")

        with caplog.at_level(logging.ERROR, logger="switchboard.server"):
            result = await dispatch(handler, _request("error"))

        assert result.status == 500
        assert result.payload == {"error": "An unknown error has occurred"}
        assert result.content_type is ContentType.JSON
        assert "500 get /error" in caplog.text
        assert "boom" in caplog.text

    @pytest.mark.asyncio
    async def test_failure_after_suspension_contained(self) -> None:
        async def handler(request, respond) -> None:
            await asyncio.sleep(0)
            raise ValueError("late")

        result = await dispatch(handler, _request())
        assert result.status == 500
        assert result.payload == {"error": "An unknown error has occurred"}

    @pytest.mark.asyncio
    async def test_escaped_cancellation_contained(self) -> None:
        async def handler(request, respond) -> None:
            pending = asyncio.get_running_loop().create_future()
            pending.cancel()
            await pending

        result = await dispatch(handler, _request(), timeout=5.0)
        assert result.status == 500
        assert result.payload == {"error": "An unknown error has occurred"}

    @pytest.mark.asyncio
    async def test_handler_timeout_error_is_a_failure_not_a_timeout(self) -> None:
        async def handler(request, respond) -> None:
            raise TimeoutError("upstream")

        result = await dispatch(handler, _request(), timeout=5.0)
        assert result.status == 500

    @pytest.mark.asyncio
    async def test_never_responding_handler_times_out(self) -> None:
        cancelled = asyncio.Event()

        async def handler(request, respond) -> None:
            try:
                await asyncio.sleep(60)
            except asyncio.CancelledError:
                cancelled.set()
                raise

        result = await dispatch(handler, _request(), timeout=0.05)
        assert result.status == 504
        assert result.payload == {"error": "The handler did not respond in time"}
        await asyncio.sleep(0)
        assert cancelled.is_set()

    @pytest.mark.asyncio
    async def test_returning_without_respond_times_out(self) -> None:
        def handler(request, respond) -> None:
            return None

        result = await dispatch(handler, _request(), timeout=0.05)
        assert result.status == 504

    @pytest.mark.asyncio
    async def test_first_response_wins(self, caplog: pytest.LogCaptureFixture) -> None:
        def handler(request, respond) -> None:
            respond(200, {"n": 1})
            respond(500, {"n": 2})

        with caplog.at_level(logging.WARNING, logger="switchboard.server"):
            result = await dispatch(handler, _request())

        assert result.payload == {"n": 1}
        assert "responded more than once" in caplog.text

    @pytest.mark.asyncio
    async def test_failure_after_responding_is_logged_not_sent(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        def handler(request, respond) -> None:
            respond(200)
            raise RuntimeError("after")

        with caplog.at_level(logging.ERROR, logger="switchboard.server"):
            result = await dispatch(handler, _request())
            await asyncio.sleep(0)

        assert result.status == 200
        assert "failed after responding" in caplog.text


def _table(**handlers: Any) -> RouteTable:
    def missing(request, respond) -> None:
        respond(404)

    def assets(request, respond) -> None:
        respond(200, "body{}", "css")

    return RouteTable(
        [Route(path, handler) for path, handler in handlers.items()],
        not_found=missing,
        matchers=[ContainsMatcher("public/", assets)],
    )


async def _run(
    table: RouteTable,
    method: str,
    path: str,
    *chunks: bytes,
    query_string: bytes = b"",
    **kwargs: Any,
) -> list[dict[str, Any]]:
    scope = {
        "type": "http",
        "method": method,
        "path": path,
        "query_string": query_string,
        "headers": [(b"content-type", b"application/json")],
    }
    messages = [
        {"type": "http.request", "body": chunk, "more_body": i < len(chunks) - 1}
        for i, chunk in enumerate(chunks or (b"",))
    ]
    pending = iter(messages)
    sent: list[dict[str, Any]] = []

    async def receive() -> dict[str, Any]:
        return next(pending, {"type": "http.disconnect"})

    async def send(message: dict[str, Any]) -> None:
        sent.append(message)

    await handle_request(scope, receive, send, table=table, **kwargs)
    return sent


class TestHandleRequest:
    @pytest.mark.asyncio
    async def test_descriptor_assembled(self) -> None:
        seen: list[RequestDescriptor] = []

        def users(request, respond) -> None:
            seen.append(request)
            respond(200)

        table = _table(**{"api/users": users})
        await _run(table, "POST", "/api/users/", b'{"a":', b"1}", query_string=b"x=1")

        request = seen[0]
        assert request.path == "api/users"
        assert request.method == "post"
        assert request.query == {"x": "1"}
        assert request.headers == {"content-type": "application/json"}
        assert request.payload == {"a": 1}

    @pytest.mark.asyncio
    async def test_not_found(self) -> None:
        sent = await _run(_table(), "GET", "/nowhere")
        assert sent[0]["status"] == 404
        assert sent[1]["body"] == b"{}"

    @pytest.mark.asyncio
    async def test_static_prefix(self) -> None:
        sent = await _run(_table(), "GET", "/public/css/app.css")
        assert dict(sent[0]["headers"])[b"content-type"] == b"text/css"
        assert sent[1]["body"] == b"body{}"

    @pytest.mark.asyncio
    async def test_oversized_body(self) -> None:
        called: list[bool] = []

        def users(request, respond) -> None:
            called.append(True)
            respond(200)

        sent = await _run(
            _table(**{"api/users": users}), "POST", "/api/users", b"x" * 10, max_body_size=4
        )

        assert called == []
        assert sent[0]["status"] == 413
        assert sent[1]["body"] == b'{"error":"Payload too large"}'

    @pytest.mark.asyncio
    async def test_non_http_scope_ignored(self) -> None:
        sent: list[dict[str, Any]] = []

        async def receive() -> dict[str, Any]:
            return {"type": "websocket.connect"}

        async def send(message: dict[str, Any]) -> None:
            sent.append(message)

        result = await handle_request({"type": "websocket"}, receive, send, table=_table())
        assert result is None
        assert sent == []

    @pytest.mark.asyncio
    async def test_unserializable_payload_still_answers(self) -> None:
        def broken(request, respond) -> None:
            respond(200, {(1, 2): "v"})

        sent = await _run(_table(broken=broken), "GET", "/broken")

        assert sent[0]["status"] == 500
        assert sent[1]["body"] == b'{"error":"An unknown error has occurred"}'

    @pytest.mark.asyncio
    async def test_cancelled_handler_still_answers(self) -> None:
        async def cancelled(request, respond) -> None:
            pending = asyncio.get_running_loop().create_future()
            pending.cancel()
            await pending

        sent = await _run(_table(cancelled=cancelled), "GET", "/cancelled")

        assert sent[0]["status"] == 500

    @pytest.mark.asyncio
    async def test_head_omits_body(self) -> None:
        sent = await _run(_table(), "HEAD", "/public/css/app.css")

        assert dict(sent[0]["headers"])[b"content-length"] == b"6"
        assert sent[1]["body"] == b""
