from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def _test_settings(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("OPENAI_BASE_URL", "https://llm.test/v1")
    # No browser client in tests; keep the static mount out of the way.
    monkeypatch.setenv("STATIC_DIR", str(tmp_path / "no-public-dir"))
    # Settings are cached via @lru_cache; clear so each test sees its own environment.
    from recipe_relay.core.settings import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    from recipe_relay.main import create_app

    app = create_app()
    with TestClient(app) as c:
        yield c
