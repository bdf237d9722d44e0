from __future__ import annotations

from pathlib import Path

from storefront_sdk.models import LoginResponse
from storefront_sdk.session import SessionFileStore, SessionManager


def _login(user_id: str = "u1") -> LoginResponse:
    return LoginResponse.model_validate({"_id": user_id, "email": "ada@example.test", "token": "tok"})


def test_remembered_session_survives_restart(tmp_path: Path) -> None:
    store = SessionFileStore(directory=str(tmp_path))
    SessionManager(store=store, env_name="dev").establish(_login(), remember=True)

    restored = SessionManager(store=store)

    assert restored.is_authenticated()
    assert restored.user_id == "u1"
    assert restored.identity.env_name == "dev"


def test_session_not_remembered_is_memory_only(tmp_path: Path) -> None:
    store = SessionFileStore(directory=str(tmp_path))
    manager = SessionManager(store=store)
    manager.establish(_login(), remember=False)

    assert manager.token == "tok"
    assert not (tmp_path / "session.json").exists()
    assert SessionManager(store=store).identity is None


def test_corrupt_session_file_is_discarded(tmp_path: Path) -> None:
    (tmp_path / "session.json").write_text("{not json")
    store = SessionFileStore(directory=str(tmp_path))

    assert store.load() is None
    assert not (tmp_path / "session.json").exists()


def test_session_file_missing_fields_is_discarded(tmp_path: Path) -> None:
    (tmp_path / "session.json").write_text('{"access_token": "tok"}')
    store = SessionFileStore(directory=str(tmp_path))

    assert store.load() is None


def test_clear_notifies_listeners_once(tmp_path: Path) -> None:
    manager = SessionManager(store=SessionFileStore(directory=str(tmp_path)))
    seen: list[object] = []
    manager.subscribe(seen.append)

    manager.establish(_login(), remember=True)
    manager.clear(reason="http_401")
    manager.clear(reason="logout")

    assert len(seen) == 2
    assert seen[1] is None
    assert not (tmp_path / "session.json").exists()
