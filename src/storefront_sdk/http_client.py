from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

import httpx

from .config import ClientConfig
from .error_mapper import map_error
from .exceptions import ApiError, NetworkError, UnauthorizedError
from .logger import get_logger, log_event
from .session import SessionManager

T = TypeVar("T")
JsonPayload = dict[str, Any] | list[Any] | None
UnauthorizedHandler = Callable[[UnauthorizedError], None]

logger = get_logger(__name__)


@dataclass(frozen=True)
class ApiResult(Generic[T]):
    """Outcome of a request: either ``data`` or ``error`` is meaningful."""

    data: T | None = None
    error: ApiError | None = None
    status_code: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T | None:
        if self.error is not None:
            raise self.error
        return self.data

    def map(self, convert: Callable[[Any], Any]) -> "ApiResult[Any]":
        if self.error is not None:
            return self
        return ApiResult(data=convert(self.data), status_code=self.status_code)


class ApiClient:
    """Async client for the storefront API.

    Expected HTTP failures never raise: they come back as an ``ApiResult``
    carrying one of the ``exceptions`` types. A 401/403 also clears the
    session and notifies the registered unauthorized handlers.
    """

    def __init__(
        self,
        config: ClientConfig,
        session: SessionManager,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config
        self.session = session
        self._client = client or httpx.AsyncClient(
            base_url=config.api_base_url,
            timeout=config.timeout_seconds,
            verify=config.verify_ssl,
        )
        self._unauthorized_handlers: list[UnauthorizedHandler] = []

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def register_unauthorized_handler(self, handler: UnauthorizedHandler) -> None:
        self._unauthorized_handlers.append(handler)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json_body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> ApiResult[JsonPayload]:
        normalized_method = method.upper()
        normalized_path = path if path.startswith("/") else f"/{path}"
        headers = {"Accept": "application/json"}
        token = self.session.token
        if token:
            headers["Authorization"] = f"Bearer {token}"

        log_event(
            logger,
            "http.request",
            logging.DEBUG,
            method=normalized_method,
            path=normalized_path,
            authenticated=bool(token),
        )
        started = time.monotonic()
        try:
            response = await self._client.request(
                normalized_method,
                normalized_path,
                json=json_body,
                params=_clean_params(params),
                headers=headers,
            )
        except httpx.HTTPError as exc:
            error = NetworkError(
                code="NETWORK_ERROR",
                message="Could not reach the storefront API",
                details={"type": type(exc).__name__, "reason": str(exc)},
                status_code=0,
            )
            self._log_response(normalized_method, normalized_path, 0, started, error.code)
            return ApiResult(error=error)

        if response.is_success:
            self._log_response(normalized_method, normalized_path, response.status_code, started, None)
            return ApiResult(data=_safe_json(response), status_code=response.status_code)

        payload = _error_payload(response)
        error = map_error(response.status_code, payload)
        self._log_response(normalized_method, normalized_path, response.status_code, started, error.code)
        if isinstance(error, UnauthorizedError):
            self._handle_unauthorized(error)
        return ApiResult(error=error, status_code=response.status_code)

    async def get(self, path: str, *, params: dict[str, Any] | None = None) -> ApiResult[JsonPayload]:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json_body: dict[str, Any] | None = None) -> ApiResult[JsonPayload]:
        return await self.request("POST", path, json_body=json_body)

    async def put(self, path: str, json_body: dict[str, Any] | None = None) -> ApiResult[JsonPayload]:
        return await self.request("PUT", path, json_body=json_body)

    async def delete(self, path: str, json_body: dict[str, Any] | None = None) -> ApiResult[JsonPayload]:
        return await self.request("DELETE", path, json_body=json_body)

    def _handle_unauthorized(self, error: UnauthorizedError) -> None:
        self.session.clear(reason=f"http_{error.status_code}")
        for handler in list(self._unauthorized_handlers):
            handler(error)

    @staticmethod
    def _log_response(method: str, path: str, status_code: int, started: float, error_code: str | None) -> None:
        log_event(
            logger,
            "http.response",
            logging.INFO if error_code is None else logging.WARNING,
            method=method,
            path=path,
            status=status_code,
            duration_ms=int((time.monotonic() - started) * 1000),
            error_code=error_code,
        )


def _clean_params(params: dict[str, Any] | None) -> dict[str, Any] | None:
    if not params:
        return None
    return {key: value for key, value in params.items() if value not in (None, "")}


def _safe_json(response: httpx.Response) -> JsonPayload:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def _error_payload(response: httpx.Response) -> dict[str, Any] | None:
    try:
        payload = response.json()
    except ValueError:
        return {"message": response.text} if response.text else None
    if isinstance(payload, dict):
        return payload
    return {"details": payload}
