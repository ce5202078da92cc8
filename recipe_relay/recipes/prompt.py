from __future__ import annotations

from recipe_relay.core.llm.openai_client import GenerationParams

RECIPE_SYSTEM_PROMPT = (
    "You are a professional chef. Create concise but complete recipes with: "
    "dish name, ingredients (with amounts), numbered steps, and one quick tip. "
    "Keep it under 500 words."
)

# Moderate randomness, a bounded answer, and slight penalties against repetition.
RECIPE_GENERATION_PARAMS = GenerationParams(
    temperature=0.7,
    max_tokens=800,
    presence_penalty=0.1,
    frequency_penalty=0.1,
)


def build_recipe_prompts(*, prompt: str) -> tuple[str, str]:
    """Return (system_prompt, user_prompt). The user's text is used unchanged."""

    return RECIPE_SYSTEM_PROMPT, prompt
