from __future__ import annotations

import pytest

from services.model_console import ModelConsole
from tests.console_fakes import FakeApi, ImmediateWorker
from utils.session_store import SessionStore

_ENV_VARS = (
    "ADMIN_CONSOLE_URL",
    "ADMIN_CONSOLE_TIMEOUT",
    "ADMIN_CONSOLE_PAGE_SIZE",
    "ADMIN_CONSOLE_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolated_console_home(tmp_path, monkeypatch):
    """Keep session files and settings away from the developer's machine."""
    monkeypatch.setenv("ADMIN_CONSOLE_HOME", str(tmp_path / "home"))
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def session(tmp_path) -> SessionStore:
    return SessionStore(tmp_path / "session.ini")


@pytest.fixture
def make_console(fake_api, session):
    """Factory for a console wired to ``fake_api`` and an inline worker."""

    def factory(worker=None, page_size: int = 50) -> ModelConsole:
        return ModelConsole(
            fake_api,
            session,
            run_async=worker or ImmediateWorker(),
            page_size=page_size,
        )

    return factory
