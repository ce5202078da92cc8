from __future__ import annotations

import logging
from typing import Protocol

from recipe_relay.core.llm.openai_client import (
    GenerationParams,
    OpenAIAuthenticationError,
    OpenAIConnectionError,
    OpenAIRateLimitError,
    OpenAIResponseError,
    OpenAIStatusError,
    OpenAITimeoutError,
)
from recipe_relay.core.metrics import record_generation
from recipe_relay.domain.exceptions import (
    InternalError,
    InvalidInputError,
    RateLimitedError,
    UnauthorizedError,
    UpstreamError,
    UpstreamTimeoutError,
)
from recipe_relay.recipes.prompt import RECIPE_GENERATION_PARAMS, build_recipe_prompts

logger = logging.getLogger("recipe_relay.recipes")


class LLMClient(Protocol):
    async def generate_text(
        self, *, system_prompt: str, user_prompt: str, params: GenerationParams
    ) -> str: ...


def _client_status_for(upstream_status: int) -> int:
    # Forward upstream error statuses; anything else (e.g. an unexpected 3xx) is a 500.
    if 400 <= upstream_status <= 599:
        return upstream_status
    return 500


class RecipeService:
    def __init__(self, *, llm_client: LLMClient | None, request_id: str | None = None):
        self._llm = llm_client
        self._request_id = request_id

    def _log(self, level: int, message: str, *, outcome: str) -> None:
        logger.log(level, message, extra={"request_id": self._request_id, "outcome": outcome})

    async def generate_recipe(self, *, prompt: str | None) -> str:
        if prompt is None or not prompt.strip():
            raise InvalidInputError("Prompt is required")

        if self._llm is None:
            record_generation("unauthorized")
            self._log(logging.ERROR, "OpenAI API key is not configured", outcome="unauthorized")
            raise UnauthorizedError()

        system_prompt, user_prompt = build_recipe_prompts(prompt=prompt)
        self._log(logging.INFO, "Generating recipe", outcome="started")

        try:
            recipe = await self._llm.generate_text(
                system_prompt=system_prompt,
                user_prompt=user_prompt,
                params=RECIPE_GENERATION_PARAMS,
            )
        except OpenAITimeoutError as exc:
            record_generation("timeout")
            self._log(logging.WARNING, "Recipe generation timed out", outcome="timeout")
            raise UpstreamTimeoutError() from exc
        except OpenAIRateLimitError as exc:
            record_generation("rate_limited")
            self._log(logging.WARNING, "OpenAI rate limit exceeded", outcome="rate_limited")
            raise RateLimitedError() from exc
        except OpenAIAuthenticationError as exc:
            record_generation("unauthorized")
            self._log(logging.ERROR, "OpenAI rejected the API key", outcome="unauthorized")
            raise UnauthorizedError() from exc
        except OpenAIStatusError as exc:
            record_generation("upstream_error")
            logger.error(
                "OpenAI API error",
                extra={
                    "request_id": self._request_id,
                    "outcome": "upstream_error",
                    "status_code": exc.status_code,
                },
            )
            raise UpstreamError(
                details=exc.detail, status_code=_client_status_for(exc.status_code)
            ) from exc
        except (OpenAIConnectionError, OpenAIResponseError) as exc:
            record_generation("error")
            logger.exception(
                "Recipe generation failed",
                extra={"request_id": self._request_id, "outcome": "error"},
            )
            raise InternalError(details=str(exc)) from exc

        record_generation("success")
        self._log(logging.INFO, "Recipe generated successfully", outcome="success")
        return recipe
