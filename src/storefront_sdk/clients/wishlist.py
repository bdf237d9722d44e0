from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..http_client import ApiResult
from ..models import WishlistResponse
from .base import BaseClient, parse_result


def parse_wishlist(payload: Any) -> WishlistResponse | None:
    if isinstance(payload, dict) and isinstance(payload.get("items"), list):
        return WishlistResponse.model_validate(payload)
    return None


@dataclass
class WishlistClient(BaseClient):
    async def fetch(self, user_id: str) -> ApiResult[WishlistResponse]:
        result = await self._request("GET", f"/wishlist/{user_id}")
        return parse_result(result, lambda payload: parse_wishlist(payload) or WishlistResponse())

    async def add(self, user_id: str, product_id: str) -> ApiResult[WishlistResponse | None]:
        result = await self._request("POST", f"/wishlist/{user_id}", json_body={"productId": product_id})
        if result.status_code == 409:
            # already a member; membership is the desired end state
            return ApiResult(data=None, status_code=409)
        return parse_result(result, parse_wishlist)

    async def remove(self, user_id: str, product_id: str) -> ApiResult[WishlistResponse | None]:
        result = await self._request("DELETE", f"/wishlist/{user_id}/{product_id}")
        return parse_result(result, parse_wishlist)
