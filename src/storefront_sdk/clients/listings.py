from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..http_client import ApiResult
from ..models import Page, UserRecord
from .base import BaseClient, parse_result


def parse_page(payload: Any, resource: str, page: int, page_size: int) -> dict[str, Any]:
    """Normalize the listing shapes the API returns into ``Page`` fields.

    Accepts a bare array, ``{<resource>: [...], total}`` or
    ``{items: [...], total}``.
    """
    if isinstance(payload, list):
        return {"items": payload, "page": page, "page_size": page_size, "total": len(payload)}
    if not isinstance(payload, dict):
        raise ValueError("Expected a listing object or array")
    rows = payload.get(resource)
    if rows is None:
        rows = payload.get("items", payload.get("data", []))
    return {
        "items": rows,
        "page": int(payload.get("page") or page),
        "page_size": int(payload.get("pageSize") or payload.get("page_size") or page_size),
        "total": int(payload.get("total") if payload.get("total") is not None else len(rows)),
    }


@dataclass
class ListingClient(BaseClient):
    async def fetch_page(
        self,
        resource: str,
        page: int = 1,
        page_size: int = 10,
        filters: dict[str, Any] | None = None,
    ) -> ApiResult[Page[dict[str, Any]]]:
        params = {**(filters or {}), "page": page, "pageSize": page_size}
        result = await self._request("GET", f"/{resource.strip('/')}", params=params)
        return parse_result(
            result,
            lambda payload: Page[dict[str, Any]].model_validate(parse_page(payload, resource, page, page_size)),
        )

    async def fetch_users(self, page: int = 1, page_size: int = 10) -> ApiResult[Page[UserRecord]]:
        result = await self._request("GET", "/users", params={"page": page, "pageSize": page_size})
        return parse_result(
            result,
            lambda payload: Page[UserRecord].model_validate(parse_page(payload, "users", page, page_size)),
        )
