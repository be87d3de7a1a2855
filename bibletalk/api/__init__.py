"""API module for the FastAPI gateway."""

from bibletalk.api.models import (
    DiscussionRequest,
    DiscussionResponse,
    FlyerRequest,
    FlyerResponse,
    ModerationRequest,
    ModerationResponse,
)

__all__ = [
    "DiscussionRequest",
    "DiscussionResponse",
    "FlyerRequest",
    "FlyerResponse",
    "ModerationRequest",
    "ModerationResponse",
]
