from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, TypeVar

from dotenv import load_dotenv


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    env_name: str
    api_base_url: str
    timeout_seconds: float = 10.0
    verify_ssl: bool = True
    search_debounce_ms: int = 300
    pagination_window: int = 5
    session_dir: str | None = None
    app_name: str = "storefront"

    @property
    def normalized_env(self) -> str:
        return self.env_name.lower().strip()

    @property
    def search_debounce_seconds(self) -> float:
        return self.search_debounce_ms / 1000


TRUTHY = frozenset({"1", "true", "yes", "on"})

Number = TypeVar("Number", int, float)


def _env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    return value.strip() or None


def _env_flag(name: str, default: bool) -> bool:
    raw = _env(name)
    return default if raw is None else raw.lower() in TRUTHY


def _env_number(
    name: str,
    default: Number,
    cast: Callable[[str], Number],
    accept: Callable[[Number], bool],
    expectation: str,
) -> Number:
    """Read ``name`` with ``cast`` and reject values for which ``accept`` is false."""
    raw = _env(name)
    if raw is None:
        return default
    try:
        value = cast(raw)
    except ValueError as exc:
        raise ConfigError(f"Invalid {name}: expected {expectation}, got {raw!r}") from exc
    if not accept(value):
        raise ConfigError(f"Invalid {name}: expected {expectation}, got {value}")
    return value


def load_config(env_file: str | None = None) -> ClientConfig:
    """Load config from environment with optional .env override."""
    load_dotenv(env_file)

    env_name = _env("STOREFRONT_ENV") or "dev"
    api_base_url = _env(f"STOREFRONT_API_BASE_URL_{env_name.upper()}") or _env("STOREFRONT_API_BASE_URL")
    if not api_base_url:
        raise ConfigError(
            f"Missing required config value: STOREFRONT_API_BASE_URL (or STOREFRONT_API_BASE_URL_{env_name.upper()})"
        )

    return ClientConfig(
        env_name=env_name,
        api_base_url=api_base_url.rstrip("/"),
        timeout_seconds=_env_number("STOREFRONT_TIMEOUT_SECONDS", 10.0, float, lambda v: v > 0, "a number > 0"),
        verify_ssl=_env_flag("STOREFRONT_VERIFY_SSL", True),
        search_debounce_ms=_env_number(
            "STOREFRONT_SEARCH_DEBOUNCE_MS", 300, int, lambda v: v >= 0, "an integer >= 0"
        ),
        pagination_window=_env_number(
            "STOREFRONT_PAGINATION_WINDOW", 5, int, lambda v: v >= 1 and v % 2 == 1, "an odd integer >= 1"
        ),
        session_dir=_env("STOREFRONT_SESSION_DIR"),
    )
