from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from recipe_relay.core.llm.deps import get_openai_client
from recipe_relay.main import create_app
from recipe_relay.recipes.prompt import RECIPE_GENERATION_PARAMS, RECIPE_SYSTEM_PROMPT
from tests.recipes._helpers import FakeLLMClient


@pytest.fixture
def fake_llm() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture
def recipe_client(fake_llm: FakeLLMClient) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_openai_client] = lambda: fake_llm
    with TestClient(app) as c:
        yield c


def test_create_recipe_returns_generated_text(
    recipe_client: TestClient, fake_llm: FakeLLMClient
) -> None:
    res = recipe_client.post("/recipe", json={"prompt": "eggs, spinach"})

    assert res.status_code == 200, res.text
    assert res.json() == {"recipe": "Spinach Omelette..."}
    assert "X-Request-ID" in res.headers


def test_create_recipe_sends_system_instruction_and_exact_user_prompt(
    recipe_client: TestClient, fake_llm: FakeLLMClient
) -> None:
    prompt = "  Create a recipe using: eggs, spinach. Include ingredients with amounts.  "

    res = recipe_client.post("/recipe", json={"prompt": prompt})

    assert res.status_code == 200, res.text
    assert len(fake_llm.calls) == 1
    call = fake_llm.calls[0]
    assert call["system_prompt"] == RECIPE_SYSTEM_PROMPT
    assert call["user_prompt"] == prompt
    assert call["params"] == RECIPE_GENERATION_PARAMS


def test_create_recipe_uses_fixed_generation_params() -> None:
    assert RECIPE_GENERATION_PARAMS.temperature == 0.7
    assert RECIPE_GENERATION_PARAMS.max_tokens == 800
    assert RECIPE_GENERATION_PARAMS.presence_penalty == 0.1
    assert RECIPE_GENERATION_PARAMS.frequency_penalty == 0.1


@pytest.mark.parametrize("body", [{}, {"prompt": None}, {"prompt": ""}, {"prompt": "  \n\t "}])
def test_create_recipe_missing_prompt_returns_400_without_upstream_call(
    recipe_client: TestClient, fake_llm: FakeLLMClient, body: dict
) -> None:
    res = recipe_client.post("/recipe", json=body)

    assert res.status_code == 400
    assert res.json() == {"error": "Prompt is required"}
    assert fake_llm.calls == []


def test_create_recipe_non_string_prompt_returns_400(
    recipe_client: TestClient, fake_llm: FakeLLMClient
) -> None:
    res = recipe_client.post("/recipe", json={"prompt": ["eggs", "spinach"]})

    assert res.status_code == 400
    payload = res.json()
    assert payload["error"] == "Invalid request body"
    assert "prompt" in payload["details"]
    assert fake_llm.calls == []


def test_create_recipe_without_api_key_returns_401(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("OPENAI_API_KEY")
    from recipe_relay.core.settings import get_settings

    get_settings.cache_clear()

    app = create_app()
    with TestClient(app) as client:
        res = client.post("/recipe", json={"prompt": "eggs, spinach"})

    assert res.status_code == 401
    assert "OPENAI_API_KEY" in res.json()["error"]
