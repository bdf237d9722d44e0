from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ApiError(Exception):
    code: str
    message: str
    details: object | None = None
    status_code: int = 0
    raw_payload: object | None = None

    def __str__(self) -> str:
        return f"[{self.status_code}] {self.code}: {self.message}"


class NetworkError(ApiError):
    """Transport failure before an HTTP response was returned."""


class UnauthorizedError(ApiError):
    """Credential missing or rejected; the session has been cleared."""


class ServerError(ApiError):
    """Non-2xx response other than an authorization failure."""


class NotFoundError(ServerError):
    pass


class ValidationError(ApiError):
    """A mutation was malformed and rejected before any request was sent."""

    def __init__(self, message: str, *, field: str | None = None, value: object | None = None) -> None:
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            details={"field": field, "value": value} if field else None,
            status_code=0,
        )
        self.field = field


class StaleResult(Exception):
    """A response belongs to a superseded request and must not be applied."""

    def __init__(self, sequence: int, latest: int) -> None:
        super().__init__(f"result #{sequence} superseded by #{latest}")
        self.sequence = sequence
        self.latest = latest
