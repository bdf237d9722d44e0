from __future__ import annotations

from dataclasses import dataclass

import httpx

from .clients import AuthClient, CartsClient, ListingClient, ProductsClient, WishlistClient
from .config import ClientConfig
from .http_client import ApiClient, ApiResult
from .models import LoginResponse
from .search import SearchController
from .session import SessionFileStore, SessionManager
from .stores import CartStore, WishlistStore


@dataclass
class StorefrontContext:
    """Everything a storefront UI needs, wired together and passed explicitly."""

    config: ClientConfig
    session: SessionManager
    http: ApiClient
    auth: AuthClient
    products: ProductsClient
    listings: ListingClient
    cart: CartStore
    wishlist: WishlistStore

    def new_search(self) -> SearchController:
        """A search controller for one search surface; close it on unmount."""
        return SearchController(self.products.search, debounce_seconds=self.config.search_debounce_seconds)

    async def login(self, email: str, password: str, remember: bool = True) -> ApiResult[LoginResponse]:
        result = await self.auth.login(email, password, remember=remember)
        if result.ok:
            await self.refresh()
        return result

    def logout(self) -> None:
        self.auth.logout()

    async def refresh(self) -> None:
        await self.cart.load()
        await self.wishlist.load()

    async def aclose(self) -> None:
        await self.http.aclose()

    async def __aenter__(self) -> "StorefrontContext":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def build_context(
    config: ClientConfig,
    session_store: SessionFileStore | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> StorefrontContext:
    if session_store is None:
        session_store = SessionFileStore(app_name=config.app_name, directory=config.session_dir)
    session = SessionManager(store=session_store, env_name=config.env_name)
    http = ApiClient(config, session, client=http_client)
    return StorefrontContext(
        config=config,
        session=session,
        http=http,
        auth=AuthClient(http=http, session=session),
        products=ProductsClient(http=http),
        listings=ListingClient(http=http),
        cart=CartStore(session, CartsClient(http=http)),
        wishlist=WishlistStore(session, WishlistClient(http=http)),
    )
