from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, TypeVar

from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ServerError
from ..http_client import ApiClient, ApiResult

T = TypeVar("T")


@dataclass
class BaseClient:
    http: ApiClient

    async def _request(self, method: str, path: str, **kwargs: Any) -> ApiResult[Any]:
        return await self.http.request(method, path, **kwargs)


def parse_result(result: ApiResult[Any], convert: Callable[[Any], T]) -> ApiResult[T]:
    """Convert a successful payload, turning a malformed one into a ServerError."""
    if not result.ok:
        return result
    try:
        return result.map(convert)
    except (PydanticValidationError, TypeError, ValueError) as exc:
        return ApiResult(
            error=ServerError(
                code="INVALID_RESPONSE",
                message="Unexpected response from the storefront API",
                details=str(exc),
                status_code=result.status_code,
            ),
            status_code=result.status_code,
        )
