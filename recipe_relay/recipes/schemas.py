from __future__ import annotations

from pydantic import BaseModel, Field


class RecipeIn(BaseModel):
    # Optional at the schema level so a missing prompt is reported as
    # "Prompt is required" rather than a generic validation error.
    prompt: str | None = Field(
        default=None,
        description="Free-text cooking request, forwarded verbatim as the user turn.",
        examples=[
            "Create a recipe using: eggs, spinach. "
            "Include ingredients with amounts and clear cooking steps."
        ],
    )


class RecipeOut(BaseModel):
    recipe: str = Field(description="Generated recipe text.")
