from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..http_client import ApiResult
from ..models import Product
from .base import BaseClient, parse_result


def parse_products(payload: Any) -> list[Product]:
    if isinstance(payload, dict):
        payload = payload.get("products", payload.get("items", []))
    if not isinstance(payload, list):
        raise ValueError("Expected a list of products")
    return [Product.model_validate(item) for item in payload]


@dataclass
class ProductsClient(BaseClient):
    async def search(self, query: str) -> ApiResult[list[Product]]:
        result = await self._request("GET", "/products/search", params={"q": query})
        return parse_result(result, parse_products)

    async def get(self, product_id: str) -> ApiResult[Product]:
        result = await self._request("GET", f"/products/{product_id}")
        return parse_result(result, Product.model_validate)
