from __future__ import annotations

import asyncio

import httpx

from conftest import product_payload, wishlist_payload
from storefront_sdk.clients import WishlistClient
from storefront_sdk.models import Product
from storefront_sdk.stores import WishlistStore


def _store(make_api, session, handler) -> WishlistStore:
    return WishlistStore(session, WishlistClient(http=make_api(handler, session)))


def test_load_and_membership(make_api, session) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/wishlist/u1"
        return httpx.Response(200, json=wishlist_payload("p1", "p2"))

    store = _store(make_api, session, handler)
    asyncio.run(store.load())

    assert store.total_items == 2
    assert store.is_in_wishlist("p1")
    assert not store.is_in_wishlist("p3")
    assert not store.is_in_wishlist("")


def test_add_conflict_counts_as_member(make_api, session) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(409, json={"error": "Product already in wishlist"})

    store = _store(make_api, session, handler)
    outcome = asyncio.run(store.add(Product.model_validate(product_payload("p1"))))

    assert outcome.ok
    assert store.is_in_wishlist("p1")
    assert store.error is None


def test_toggle_adds_then_removes(make_api, session) -> None:
    members: set[str] = set()
    calls: list[tuple[str, str]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append((request.method, request.url.path))
        if request.method == "POST":
            members.add("p1")
        elif request.method == "DELETE":
            members.discard(request.url.path.rsplit("/", 1)[-1])
        return httpx.Response(200, json=wishlist_payload(*sorted(members)))

    store = _store(make_api, session, handler)
    product = Product.model_validate(product_payload("p1"))

    async def scenario() -> list[bool]:
        states = []
        await store.toggle(product)
        states.append(store.is_in_wishlist("p1"))
        await store.toggle(product)
        states.append(store.is_in_wishlist("p1"))
        return states

    assert asyncio.run(scenario()) == [True, False]
    assert calls == [("POST", "/wishlist/u1"), ("DELETE", "/wishlist/u1/p1")]


def test_remove_failure_reloads_membership(make_api, session) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "DELETE":
            return httpx.Response(500, json={"error": "Failed to remove from wishlist"})
        return httpx.Response(200, json=wishlist_payload("p1"))

    store = _store(make_api, session, handler)

    async def scenario():
        await store.load()
        return await store.remove("p1")

    outcome = asyncio.run(scenario())

    assert outcome.reconciled is True
    assert store.is_in_wishlist("p1")
    assert store.error == "Failed to remove from wishlist"


def test_remove_absent_product_sends_nothing(make_api, session) -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=wishlist_payload())

    store = _store(make_api, session, handler)

    assert asyncio.run(store.remove("p9")).ok
    assert calls == []
