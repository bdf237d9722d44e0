from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..http_client import ApiResult
from ..models import Cart
from .base import BaseClient, parse_result


def parse_cart(payload: Any) -> Cart | None:
    """Extract the cart from a response; ``None`` for bare confirmations."""
    if isinstance(payload, dict):
        if isinstance(payload.get("cart"), dict):
            return Cart.model_validate(payload["cart"])
        if isinstance(payload.get("items"), list):
            return Cart.model_validate(payload)
    return None


def _line_body(quantity: int | None = None, selected_color: str | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {}
    if quantity is not None:
        body["quantity"] = quantity
    if selected_color is not None:
        body["selectedColor"] = selected_color
    return body


@dataclass
class CartsClient(BaseClient):
    async def fetch(self, user_id: str) -> ApiResult[Cart]:
        result = await self._request("GET", f"/carts/{user_id}")
        if result.status_code == 404:
            # carts are created lazily server-side
            return ApiResult(data=Cart(user_id=user_id), status_code=404)
        return parse_result(result, lambda payload: parse_cart(payload) or Cart(user_id=user_id))

    async def add_item(
        self,
        user_id: str,
        product_id: str,
        quantity: int,
        selected_color: str | None = None,
    ) -> ApiResult[Cart | None]:
        body = {"productId": product_id, **_line_body(quantity, selected_color)}
        result = await self._request("POST", f"/carts/{user_id}/items", json_body=body)
        return parse_result(result, parse_cart)

    async def update_item(
        self,
        user_id: str,
        product_id: str,
        quantity: int,
        selected_color: str | None = None,
    ) -> ApiResult[Cart | None]:
        result = await self._request(
            "PUT",
            f"/carts/{user_id}/items/{product_id}",
            json_body=_line_body(quantity, selected_color),
        )
        return parse_result(result, parse_cart)

    async def remove_item(
        self,
        user_id: str,
        product_id: str,
        selected_color: str | None = None,
    ) -> ApiResult[Cart | None]:
        result = await self._request(
            "DELETE",
            f"/carts/{user_id}/items/{product_id}",
            json_body=_line_body(selected_color=selected_color) or None,
        )
        return parse_result(result, parse_cart)

    async def clear(self, user_id: str) -> ApiResult[None]:
        result = await self._request("DELETE", f"/carts/{user_id}")
        return parse_result(result, lambda _payload: None)
