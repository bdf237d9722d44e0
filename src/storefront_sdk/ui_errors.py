from __future__ import annotations

from dataclasses import dataclass

from .exceptions import ApiError, NetworkError, UnauthorizedError, ValidationError


@dataclass(frozen=True)
class UserFacingError:
    message: str
    details: str | None = None
    requires_login: bool = False


def to_user_facing_error(exc: ApiError) -> UserFacingError:
    if isinstance(exc, NetworkError):
        primary = "Could not reach the store. Check your connection and try again."
    elif isinstance(exc, UnauthorizedError):
        primary = "Your session has expired. Please sign in again."
    elif isinstance(exc, ValidationError):
        primary = exc.message
    else:
        primary = exc.message.strip() or "Request failed"
    details = f"{exc.code} (HTTP {exc.status_code})" if exc.status_code else exc.code
    if exc.details:
        details = f"{details}: {exc.details}"
    return UserFacingError(
        message=primary,
        details=details,
        requires_login=isinstance(exc, UnauthorizedError),
    )
