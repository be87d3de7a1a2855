"""API request and response models."""

from typing import Literal

from pydantic import BaseModel, Field

from bibletalk.generators.discussion import DiscussionOutline


class ModerationRequest(BaseModel):
    """Request model for hint moderation."""

    hint: str = Field(default="", description="User hint to screen")


class ModerationResponse(BaseModel):
    """Response model for hint moderation.

    ``categories`` is left out entirely when moderation could not be run.
    """

    flagged: bool = Field(description="Whether the hint was flagged")
    categories: dict[str, bool] | None = Field(default=None, description="Category flags")


class FlyerRequest(BaseModel):
    """Request model for flyer generation."""

    topic: str = Field(default="", description="Discussion topic printed on the flyer")
    extra_prompt: str = Field(default="", description="Extra instructions for the image")


class FlyerResponse(BaseModel):
    """Response model for flyer generation."""

    image: str = Field(description="Base64-encoded PNG")


class DiscussionRequest(BaseModel):
    """Request model for discussion generation."""

    hint: str = Field(default="", description="User hint seeding the discussion")
    model: str | None = Field(
        default=None, description="Chat model override (e.g. a newly fine-tuned model)"
    )


class DiscussionResponse(BaseModel):
    """Response model for discussion generation.

    ``discussion`` is an empty string when generation failed.
    """

    discussion: DiscussionOutline | Literal[""] = Field(description="Generated outline")
