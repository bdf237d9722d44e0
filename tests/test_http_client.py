from __future__ import annotations

import asyncio
import logging

import httpx
import pytest

from conftest import TOKEN
from storefront_sdk.exceptions import NetworkError, ServerError, UnauthorizedError
from storefront_sdk.session import SessionManager


def test_bearer_header_attached_when_signed_in(make_api, session) -> None:
    seen: list[str | None] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.headers.get("Authorization"))
        return httpx.Response(200, json={"ok": True})

    async def scenario() -> None:
        async with make_api(handler, session) as api:
            result = await api.get("/products/search", params={"q": "mug", "category": None})
            assert result.ok
            assert result.data == {"ok": True}

    asyncio.run(scenario())

    assert seen == [f"Bearer {TOKEN}"]


def test_bearer_header_omitted_without_session(make_api) -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(204)

    async def scenario() -> None:
        async with make_api(handler, SessionManager()) as api:
            result = await api.delete("/carts/u1")
            assert result.ok
            assert result.data is None

    asyncio.run(scenario())

    assert "Authorization" not in captured[0].headers


def test_empty_query_params_are_dropped(make_api, session) -> None:
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json=[])

    async def scenario() -> None:
        async with make_api(handler, session) as api:
            await api.get("/users", params={"page": 2, "search": "", "role": None})

    asyncio.run(scenario())

    assert dict(captured[0].url.params) == {"page": "2"}


@pytest.mark.parametrize("status", [401, 403])
def test_unauthorized_clears_session_and_notifies(make_api, session, status: int) -> None:
    events: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json={"error": "Invalid authentication token."})

    async def scenario():
        async with make_api(handler, session) as api:
            api.register_unauthorized_handler(lambda error: events.append(error.status_code))
            return await api.get("/carts/u1")

    result = asyncio.run(scenario())

    assert isinstance(result.error, UnauthorizedError)
    assert result.status_code == status
    assert session.identity is None
    assert events == [status]


def test_transport_failure_becomes_network_error(make_api, session) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async def scenario():
        async with make_api(handler, session) as api:
            return await api.post("/carts/u1/items", {"productId": "p1", "quantity": 1})

    result = asyncio.run(scenario())

    assert isinstance(result.error, NetworkError)
    assert result.error.status_code == 0
    assert result.error.details["type"] == "ConnectError"
    assert session.identity is not None


def test_error_payload_message_and_unwrap(make_api, session) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": "Failed to add item to cart"})

    async def scenario():
        async with make_api(handler, session) as api:
            return await api.post("/carts/u1/items", {"productId": "p1"})

    result = asyncio.run(scenario())

    assert isinstance(result.error, ServerError)
    assert result.error.message == "Failed to add item to cart"
    with pytest.raises(ServerError):
        result.unwrap()


def test_plain_text_error_body(make_api, session) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="Bad Gateway")

    async def scenario():
        async with make_api(handler, session) as api:
            return await api.get("/products/search")

    result = asyncio.run(scenario())

    assert result.error.message == "Bad Gateway"
    assert result.error.code == "HTTP_502"


def test_token_is_never_logged(make_api, session, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="storefront_sdk.http_client")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={})

    async def scenario() -> None:
        async with make_api(handler, session) as api:
            await api.get("/wishlist/u1")

    asyncio.run(scenario())

    assert '"event": "http.request"' in caplog.text
    assert '"authenticated": true' in caplog.text
    assert TOKEN not in caplog.text
