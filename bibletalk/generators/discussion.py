"""Discussion outline generation via chat completion."""

import logging

from openai import AsyncOpenAI
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from bibletalk.config import settings
from bibletalk.llm import get_async_client

logger = logging.getLogger(__name__)


class DiscussionOutline(BaseModel):
    """A complete bible talk script.

    Serialized with camelCase keys, which is the shape the model is asked to
    return and the shape clients read.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    bible_talk_topic: str = Field(description="Catchy topic of the discussion")
    introductory_statement: str = Field(description="Opening statement including the speaker's name")
    icebreaker_question: str
    first_scripture: str = Field(description="Reference and full text")
    first_question: str
    second_scripture: str = Field(description="Reference and full text")
    second_question: str
    last_scripture: str = Field(description="Reference and full text")
    last_question: str
    concluding_statement: str


SYSTEM_PROMPT = """
You are an preacher with the gift of the gab, you prepare weekly bible discussions.

RESPONSE FORMAT:
Generate a JSON object in exactly this shape, it must be a valid JSON:
{
   bibleTalkTopic:  "string",
   introductoryStatement: "string",
   icebreakerQuestion: "string",
   firstScripture: "string",
   firstQuestion: "string",
   secondScripture: "string",
   secondQuestion: "string",
   lastScripture: "string",
   lastQuestion: "string",
   concludingStatement: "string"
}

important rules:
  1. The introductory statement should include your name.
  2. The bible talk topic should be very catchy.
  3. The questions should be short and be in relation to the scripture just read and also the topic in discussion.
  4. The questions must all be in-line with the discussion and NOT out of scope, also will be good if the questions are simple.
  5. The concludingStatement field should be a witty statement that brings to focus the main points of the discussion, should be at least 300 words.

ALSO IMPORTANT: When providing scripture references, please always include both the reference (e.g., John 3:16) and the full scripture text that corresponds to it!
"""


class DiscussionGenerator:
    """Generates discussion outlines from a hint with a fine-tuned chat model."""

    def __init__(self, client: AsyncOpenAI | None = None):
        """Initialize the discussion generator.

        Args:
            client: Optional AsyncOpenAI instance. Uses the shared client if not provided.
        """
        self.client = client or get_async_client()

    def build_messages(self, hint: str) -> list[dict[str, str]]:
        """Build the chat messages for a hint."""
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": hint},
        ]

    async def agenerate(self, hint: str, model: str | None = None) -> DiscussionOutline:
        """Generate a discussion outline.

        Args:
            hint: Free-text user hint.
            model: Chat model to use. Defaults to settings.discussion_model.

        Returns:
            DiscussionOutline parsed from the model's JSON reply.

        Raises:
            ValueError: If the reply has no choices or is not a valid outline.
            openai.OpenAIError: On upstream failure.
        """
        model_name = model or settings.discussion_model
        response = await self.client.chat.completions.create(
            model=model_name,
            messages=self.build_messages(hint),
            temperature=settings.discussion_temperature,
            presence_penalty=settings.discussion_presence_penalty,
            frequency_penalty=settings.discussion_frequency_penalty,
            response_format={"type": "json_object"},
        )
        if not response or not response.choices:
            raise ValueError("Chat completion returned no choices")

        content = response.choices[0].message.content or ""
        logger.info(f"Discussion generated with {model_name} ({len(content)} chars)")
        return DiscussionOutline.model_validate_json(content)
