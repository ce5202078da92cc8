from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any

import httpx


class OpenAIError(Exception):
    """Base error for OpenAI client failures."""


class OpenAITimeoutError(OpenAIError):
    """Raised when the request does not complete within the configured deadline."""


class OpenAIConnectionError(OpenAIError):
    """Raised when the request could not be sent or the connection failed."""


class OpenAIStatusError(OpenAIError):
    """Raised when OpenAI answers with a non-success status."""

    def __init__(self, status_code: int, detail: str | None = None):
        super().__init__(f"OpenAI returned HTTP {status_code}")
        self.status_code = status_code
        self.detail = detail


class OpenAIRateLimitError(OpenAIStatusError):
    pass


class OpenAIAuthenticationError(OpenAIStatusError):
    pass


class OpenAIResponseError(OpenAIError):
    """Raised when a success response does not have the expected shape."""


@dataclass(frozen=True)
class OpenAIConfig:
    api_key: str
    base_url: str
    model: str
    timeout_seconds: float


@dataclass(frozen=True)
class GenerationParams:
    temperature: float
    max_tokens: int
    presence_penalty: float = 0.0
    frequency_penalty: float = 0.0


def _error_detail(resp: httpx.Response) -> str | None:
    """Best-effort extraction of `error.message` from an OpenAI error body."""

    try:
        data = resp.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    error = data.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message:
            return message
    return None


class OpenAIClient:
    """
    Minimal OpenAI chat-completions client.

    - No prompt/output logging in this module.
    - One request per call, no retries.
    - The whole exchange (connect, send, receive) is bounded by
      `timeout_seconds`; on expiry the request task is cancelled, which
      closes the underlying connection.
    """

    def __init__(
        self,
        *,
        config: OpenAIConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._config = config
        self._transport = transport

    def build_payload(
        self, *, system_prompt: str, user_prompt: str, params: GenerationParams
    ) -> dict[str, Any]:
        return {
            "model": self._config.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": params.temperature,
            "max_tokens": params.max_tokens,
            "presence_penalty": params.presence_penalty,
            "frequency_penalty": params.frequency_penalty,
        }

    async def _post(
        self, *, url: str, headers: dict[str, str], payload: dict[str, Any]
    ) -> httpx.Response:
        async with httpx.AsyncClient(
            timeout=self._config.timeout_seconds, transport=self._transport
        ) as client:
            return await client.post(url, headers=headers, json=payload)

    async def generate_text(
        self, *, system_prompt: str, user_prompt: str, params: GenerationParams
    ) -> str:
        url = f"{self._config.base_url.rstrip('/')}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self._config.api_key}",
            "Content-Type": "application/json",
        }
        payload = self.build_payload(
            system_prompt=system_prompt, user_prompt=user_prompt, params=params
        )

        try:
            resp = await asyncio.wait_for(
                self._post(url=url, headers=headers, payload=payload),
                timeout=self._config.timeout_seconds,
            )
        except (TimeoutError, httpx.TimeoutException) as exc:
            raise OpenAITimeoutError("LLM request timed out") from exc
        except httpx.HTTPError as exc:
            raise OpenAIConnectionError(str(exc) or type(exc).__name__) from exc

        if resp.status_code == 429:
            raise OpenAIRateLimitError(resp.status_code, _error_detail(resp))
        if resp.status_code == 401:
            raise OpenAIAuthenticationError(resp.status_code, _error_detail(resp))
        if not resp.is_success:
            raise OpenAIStatusError(resp.status_code, _error_detail(resp))

        try:
            data = resp.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise OpenAIResponseError("LLM response did not contain a message") from exc

        if not isinstance(content, str):
            raise OpenAIResponseError("LLM message content must be a string")

        return content
