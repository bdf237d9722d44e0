from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

BASE_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(BASE_DIR / "src"))

from storefront_sdk.config import ClientConfig  # noqa: E402
from storefront_sdk.http_client import ApiClient  # noqa: E402
from storefront_sdk.models import LoginResponse  # noqa: E402
from storefront_sdk.session import SessionFileStore, SessionManager  # noqa: E402

BASE_URL = "https://shop.example.test"
TOKEN = "tok-3f9a1c"


def product_payload(product_id: str, price: float = 10.0, **extra: Any) -> dict[str, Any]:
    return {"_id": product_id, "name": f"Product {product_id}", "price": price, **extra}


def cart_payload(*lines: tuple[str, int, str | None], user_id: str = "u1") -> dict[str, Any]:
    return {
        "cart": {
            "_id": "cart-1",
            "userId": user_id,
            "items": [
                {
                    "_id": f"line-{product_id}-{color}",
                    "product": product_payload(product_id),
                    "quantity": quantity,
                    "selectedColor": color,
                }
                for product_id, quantity, color in lines
            ],
        }
    }


def wishlist_payload(*product_ids: str) -> dict[str, Any]:
    return {
        "items": [{"product": product_payload(pid), "added_at": "2024-05-01T10:00:00Z"} for pid in product_ids],
        "totalItems": len(product_ids),
    }


def body_of(request: httpx.Request) -> Any:
    return json.loads(request.content) if request.content else None


@pytest.fixture
def config(tmp_path: Path) -> ClientConfig:
    return ClientConfig(
        env_name="test",
        api_base_url=BASE_URL,
        search_debounce_ms=0,
        session_dir=str(tmp_path / "session"),
    )


@pytest.fixture
def session_store(tmp_path: Path) -> SessionFileStore:
    return SessionFileStore(directory=str(tmp_path / "session"))


@pytest.fixture
def session(session_store: SessionFileStore) -> SessionManager:
    manager = SessionManager(store=session_store, env_name="test")
    manager.establish(
        LoginResponse.model_validate({"_id": "u1", "firstName": "Ada", "email": "ada@example.test", "token": TOKEN}),
        remember=False,
    )
    return manager


@pytest.fixture
def make_api(config: ClientConfig) -> Callable[..., ApiClient]:
    def factory(handler: Callable[[httpx.Request], Any], session: SessionManager) -> ApiClient:
        client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
        return ApiClient(config, session, client=client)

    return factory
