from __future__ import annotations

from datetime import datetime, timezone

from ..clients.wishlist import WishlistClient
from ..http_client import ApiResult
from ..models import Product, WishlistItem
from ..session import SessionManager
from .base import MutationOutcome, OptimisticStore


def _members(result: ApiResult) -> ApiResult:
    return result.map(lambda wishlist: wishlist.items if wishlist is not None else None)


class WishlistStore(OptimisticStore[str, WishlistItem]):
    """Membership set of products keyed by product id."""

    name = "wishlist"

    def __init__(self, session: SessionManager, wishlist: WishlistClient) -> None:
        super().__init__(session)
        self.wishlist = wishlist

    def _key(self, item: WishlistItem) -> str:
        return item.key

    async def _fetch(self, user_id: str) -> ApiResult:
        return _members(await self.wishlist.fetch(user_id))

    @property
    def total_items(self) -> int:
        return len(self._items)

    def is_in_wishlist(self, product_id: str) -> bool:
        return bool(product_id) and product_id in self._items

    async def add(self, product: Product) -> MutationOutcome:
        key = product.id

        def apply_local() -> None:
            existing = self._items.get(key)
            added_at = existing.added_at if existing else datetime.now(timezone.utc).isoformat()
            self._items[key] = WishlistItem(product=product, added_at=added_at)

        async def send(user_id: str) -> ApiResult:
            return _members(await self.wishlist.add(user_id, product.id))

        return await self._mutate("add", key, apply_local, send)

    async def remove(self, product_id: str) -> MutationOutcome:
        async def send(user_id: str) -> ApiResult:
            return _members(await self.wishlist.remove(user_id, product_id))

        return await self._remove_key("remove", product_id, send)

    async def toggle(self, product: Product) -> MutationOutcome:
        if self.is_in_wishlist(product.id):
            return await self.remove(product.id)
        return await self.add(product)
