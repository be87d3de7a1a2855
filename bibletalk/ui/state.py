"""State management models for the Streamlit UI."""

from pydantic import BaseModel, Field

from bibletalk.config import settings
from bibletalk.generators.discussion import DiscussionOutline
from bibletalk.tuning.workflow import TuningState


class AppState(BaseModel):
    """Everything the page shows, held in one place."""

    hint: str = Field(default="", description="Current hint text")
    discussion: DiscussionOutline | None = Field(default=None, description="Current outline")
    flyer_image: str = Field(default="", description="Current flyer as base64")
    extra_flyer_prompt: str = Field(default="", description="Extra flyer instructions")
    is_generating: bool = Field(default=False)
    is_flyer_loading: bool = Field(default=False)
    active_model: str | None = Field(
        default_factory=lambda: settings.discussion_model,
        description="Chat model used for discussion generation",
    )
    error_message: str | None = Field(default=None, description="Message for the user")
    tuning: TuningState = Field(default_factory=TuningState)

    @property
    def can_generate(self) -> bool:
        """Whether the generate button should be enabled."""
        return bool(self.hint) and not self.is_generating
