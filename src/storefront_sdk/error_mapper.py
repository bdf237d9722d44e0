from __future__ import annotations

from typing import Mapping

from .exceptions import ApiError, NotFoundError, ServerError, UnauthorizedError

UNAUTHORIZED_STATUSES = frozenset({401, 403})


def map_error(status_code: int, payload: Mapping[str, object] | None) -> ApiError:
    payload = payload or {}
    code = str(payload.get("code") or f"HTTP_{status_code}")
    message = str(
        payload.get("error")
        or payload.get("message")
        or f"Request failed with status {status_code}"
    )
    details = payload.get("details")
    mapped: type[ApiError]
    if status_code in UNAUTHORIZED_STATUSES:
        mapped = UnauthorizedError
    elif status_code == 404:
        mapped = NotFoundError
    else:
        mapped = ServerError
    return mapped(
        code=code,
        message=message,
        details=details,
        status_code=status_code,
        raw_payload=dict(payload),
    )
