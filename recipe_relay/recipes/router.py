from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from recipe_relay.api.schemas import ErrorOut
from recipe_relay.core.llm.deps import get_openai_client
from recipe_relay.core.llm.openai_client import OpenAIClient
from recipe_relay.core.rate_limit import enforce_rate_limit
from recipe_relay.recipes.schemas import RecipeIn, RecipeOut
from recipe_relay.recipes.service import RecipeService

router = APIRouter(prefix="/recipe", tags=["recipes"])


@router.post(
    "",
    response_model=RecipeOut,
    summary="Generate a recipe",
    description=(
        "Forwards the prompt to the language model with a fixed chef system instruction "
        "and returns the generated text.\n\n"
        "Rate limited per client address. The upstream call is bounded by a deadline "
        "(default 30s) and is never retried."
    ),
    dependencies=[Depends(enforce_rate_limit)],
    responses={
        400: {"model": ErrorOut, "description": "Missing or empty prompt."},
        401: {"model": ErrorOut, "description": "Upstream rejected (or is missing) the API key."},
        429: {"model": ErrorOut, "description": "Local or upstream rate limit exceeded."},
        500: {"model": ErrorOut, "description": "Unexpected failure."},
        504: {"model": ErrorOut, "description": "Upstream did not answer in time."},
    },
)
async def create_recipe(
    payload: RecipeIn,
    request: Request,
    llm_client: OpenAIClient | None = Depends(get_openai_client),
) -> RecipeOut:
    service = RecipeService(
        llm_client=llm_client,
        request_id=getattr(request.state, "request_id", None),
    )
    recipe = await service.generate_recipe(prompt=payload.prompt)
    return RecipeOut(recipe=recipe)
