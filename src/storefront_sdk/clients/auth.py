from __future__ import annotations

from dataclasses import dataclass

from ..http_client import ApiResult
from ..models import LoginResponse
from ..session import SessionManager
from .base import BaseClient, parse_result


@dataclass
class AuthClient(BaseClient):
    session: SessionManager | None = None

    async def login(self, email: str, password: str, remember: bool = True) -> ApiResult[LoginResponse]:
        payload = {"email": email, "password": password}
        result = parse_result(
            await self._request("POST", "/auth/login", json_body=payload),
            LoginResponse.model_validate,
        )
        if result.ok and self.session is not None and result.data is not None:
            self.session.establish(result.data, remember=remember)
        return result

    def logout(self) -> None:
        if self.session is not None:
            self.session.clear(reason="logout")
