from __future__ import annotations

from ..clients.carts import CartsClient
from ..exceptions import ValidationError
from ..http_client import ApiResult
from ..models import CartKey, CartLine, Product
from ..session import SessionManager
from .base import MutationOutcome, OptimisticStore, require_quantity

# key for store-wide operations such as clearing the cart
CLEAR_KEY: CartKey = ("*", None)


def _lines(result: ApiResult) -> ApiResult:
    return result.map(lambda cart: cart.items if cart is not None else None)


class CartStore(OptimisticStore[CartKey, CartLine]):
    """Cart lines keyed by ``(product id, selected color)``.

    Adding a key that is already present increments its quantity.
    """

    name = "cart"

    def __init__(self, session: SessionManager, carts: CartsClient) -> None:
        super().__init__(session)
        self.carts = carts

    def _key(self, item: CartLine) -> CartKey:
        return item.key

    async def _fetch(self, user_id: str) -> ApiResult:
        return _lines(await self.carts.fetch(user_id))

    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self._items.values())

    @property
    def total_price(self) -> float:
        return round(sum(line.line_total for line in self._items.values()), 2)

    async def add(self, product: Product, quantity: int = 1, selected_color: str | None = None) -> MutationOutcome:
        quantity = require_quantity(quantity)
        key: CartKey = (product.id, selected_color)

        def apply_local() -> None:
            existing = self._items.get(key)
            if existing is not None:
                self._items[key] = existing.model_copy(update={"quantity": existing.quantity + quantity})
            else:
                self._items[key] = CartLine(product=product, quantity=quantity, selected_color=selected_color)

        async def send(user_id: str) -> ApiResult:
            return _lines(await self.carts.add_item(user_id, product.id, quantity, selected_color))

        return await self._mutate("add", key, apply_local, send)

    async def remove(self, product_id: str, selected_color: str | None = None) -> MutationOutcome:
        key: CartKey = (product_id, selected_color)

        async def send(user_id: str) -> ApiResult:
            return _lines(await self.carts.remove_item(user_id, product_id, selected_color))

        return await self._remove_key("remove", key, send)

    async def update_quantity(
        self,
        product_id: str,
        quantity: int,
        selected_color: str | None = None,
    ) -> MutationOutcome:
        quantity = require_quantity(quantity, allow_non_positive=True)
        if quantity <= 0:
            return await self.remove(product_id, selected_color)
        key: CartKey = (product_id, selected_color)
        if key not in self._items:
            raise ValidationError("Item is not in the cart", field="product_id", value=product_id)

        def apply_local() -> None:
            line = self._items.get(key)
            if line is not None:
                self._items[key] = line.model_copy(update={"quantity": quantity})

        async def send(user_id: str) -> ApiResult:
            return _lines(await self.carts.update_item(user_id, product_id, quantity, selected_color))

        return await self._mutate("update_quantity", key, apply_local, send)

    async def clear(self) -> MutationOutcome:
        def apply_local() -> None:
            self._items.clear()

        async def send(user_id: str) -> ApiResult:
            return await self.carts.clear(user_id)

        return await self._mutate("clear", CLEAR_KEY, apply_local, send, store_wide=True)
