"""Moderation check for user hints."""

import logging
from typing import Any

from openai import AsyncOpenAI
from pydantic import BaseModel, Field

from bibletalk.config import settings
from bibletalk.llm import get_async_client

logger = logging.getLogger(__name__)


class ModerationResult(BaseModel):
    """Moderation verdict for a single hint."""

    flagged: bool = Field(description="Whether the hint violates the content policy")
    categories: dict[str, bool] | None = Field(
        default=None, description="Category name to flag, in API order"
    )


def _categories_to_dict(categories: Any) -> dict[str, bool]:
    """Convert the SDK's categories object to a plain name -> flag mapping.

    The SDK model stores names such as ``harassment/threatening`` as aliases,
    so dump by alias to keep the wire names.
    """
    if isinstance(categories, BaseModel):
        raw = categories.model_dump(by_alias=True)
    else:
        raw = dict(categories)
    return {name: bool(value) for name, value in raw.items()}


class ModerationChecker:
    """Screens hints with the moderation endpoint."""

    def __init__(self, client: AsyncOpenAI | None = None, model: str | None = None):
        """Initialize the moderation checker.

        Args:
            client: Optional AsyncOpenAI instance. Uses the shared client if not provided.
            model: Moderation model name. Defaults to settings.moderation_model.
        """
        self.client = client or get_async_client()
        self.model = model or settings.moderation_model

    async def acheck(self, hint: str) -> ModerationResult:
        """Run moderation on a hint.

        Args:
            hint: Free-text user hint.

        Returns:
            ModerationResult with the flag and the category map.

        Raises:
            ValueError: If the API returns no moderation result.
            openai.OpenAIError: On upstream failure.
        """
        moderation = await self.client.moderations.create(model=self.model, input=hint)
        if not moderation or not moderation.results:
            raise ValueError("Moderation returned no results")

        result = moderation.results[0]
        categories = _categories_to_dict(result.categories)
        logger.debug(f"Moderation flagged={result.flagged} categories={categories}")
        return ModerationResult(flagged=bool(result.flagged), categories=categories)
