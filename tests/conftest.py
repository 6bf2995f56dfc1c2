from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_configure() -> None:
    root = Path(__file__).resolve().parents[1]
    src = root / "src"
    if src.exists():
        sys.path.insert(0, str(src))


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Unset the variables the test records bind to.

    setenv before delenv so anything a test writes (e.g. via a .env file) is
    removed again on teardown.
    """

    for key in ("NAME", "PORT", "DEBUG", "MODE", "APP_NAME", "APP_PORT", "APP_DEBUG", "APP_MODE", "HTTP_PORT"):
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    return monkeypatch
