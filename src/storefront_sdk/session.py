from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from platformdirs import user_data_dir
from pydantic import ValidationError as PydanticValidationError

from .logger import get_logger, log_event
from .models import LoginResponse, SessionIdentity, UserRecord

SessionListener = Callable[["SessionIdentity | None"], None]

logger = get_logger(__name__)


@dataclass
class SessionFileStore:
    app_name: str = "storefront"
    filename: str = "session.json"
    directory: str | None = None

    def _path(self) -> Path:
        base = Path(self.directory) if self.directory else Path(user_data_dir(self.app_name, "Storefront"))
        base.mkdir(parents=True, exist_ok=True)
        return base / self.filename

    def save(self, identity: SessionIdentity) -> None:
        path = self._path()
        path.write_text(json.dumps(identity.model_dump(mode="json"), indent=2))
        try:
            path.chmod(0o600)
        except OSError:
            pass

    def load(self) -> SessionIdentity | None:
        path = self._path()
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError:
            self.clear()
            return None
        try:
            return SessionIdentity.model_validate(data)
        except PydanticValidationError:
            self.clear()
            return None

    def clear(self) -> None:
        path = self._path()
        if path.exists():
            path.unlink()


@dataclass
class SessionManager:
    """Owns the session identity for the lifetime of the client.

    A "remembered" identity is written to the durable store and survives a
    restart; otherwise it lives in memory only, like a browser session.
    """

    store: SessionFileStore | None = None
    env_name: str | None = None
    identity: SessionIdentity | None = None
    _listeners: list[SessionListener] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.identity is None and self.store is not None:
            self.identity = self.store.load()

    @property
    def token(self) -> str | None:
        return self.identity.access_token if self.identity else None

    @property
    def user(self) -> UserRecord | None:
        return self.identity.user if self.identity else None

    @property
    def user_id(self) -> str | None:
        return self.identity.user_id if self.identity else None

    def is_authenticated(self) -> bool:
        return bool(self.token)

    def subscribe(self, listener: SessionListener) -> None:
        self._listeners.append(listener)

    def establish(self, login: LoginResponse, remember: bool = True) -> SessionIdentity:
        self.identity = SessionIdentity(access_token=login.token, user=login.user, env_name=self.env_name)
        if self.store is not None:
            if remember:
                self.store.save(self.identity)
            else:
                self.store.clear()
        log_event(logger, "session.established", user_id=login.user.id, remember=remember)
        self._notify()
        return self.identity

    def clear(self, reason: str = "logout") -> None:
        had_identity = self.identity is not None
        self.identity = None
        if self.store is not None:
            self.store.clear()
        if had_identity:
            log_event(logger, "session.cleared", reason=reason)
            self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.identity)
