from __future__ import annotations

from datetime import datetime


def test_health_ok(client) -> None:
    res = client.get("/health")
    assert res.status_code == 200
    payload = res.json()
    assert payload["status"] == "ok"
    assert datetime.fromisoformat(payload["timestamp"]).tzinfo is not None


def test_health_timestamp_is_non_decreasing(client) -> None:
    stamps = [datetime.fromisoformat(client.get("/health").json()["timestamp"]) for _ in range(5)]
    assert stamps == sorted(stamps)


def test_health_is_not_rate_limited(client) -> None:
    for _ in range(30):
        assert client.get("/health").status_code == 200


def test_openapi_title_uses_app_name(monkeypatch) -> None:
    monkeypatch.setenv("APP_NAME", "Kitchen Relay")
    from fastapi.testclient import TestClient

    from recipe_relay.core.settings import get_settings
    from recipe_relay.main import create_app

    get_settings.cache_clear()

    with TestClient(create_app()) as client:
        assert client.get("/openapi.json").json()["info"]["title"] == "Kitchen Relay"


def test_openapi_title_defaults_to_service_name(client) -> None:
    assert client.get("/openapi.json").json()["info"]["title"] == "Recipe Relay API"
