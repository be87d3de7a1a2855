"""Flyer image generation for a discussion topic."""

import logging

from openai import AsyncOpenAI

from bibletalk.config import settings
from bibletalk.llm import get_async_client

logger = logging.getLogger(__name__)

FLYER_PROMPT = """
Design a Minimalistic simple full-frame 2D invitation poster that I can post on my social media status with no background or borders, shadows, orientation, tilts or backdrop where the poster design covers the entire image from edge to edge. The flyer should have no empty or colored space around it, no frame and no additional objects or context---Just the poster design filling the entire canvas. In addition, The following rules must be adhered to:
1. The design should boldly state the topic {topic}.
2. At the bottom of the design, it should display the venue of the discussion is "{venue}"
3. Below the venue should be the time it starts which is "{time}".
4. The poster image should fill the whole canvas from edge to edge with no visible space.
5. crop out any background and just leave the image itself

{extra_prompt}
"""


def build_flyer_prompt(
    topic: str,
    extra_prompt: str = "",
    venue: str | None = None,
    time: str | None = None,
) -> str:
    """Build the image prompt for a discussion topic.

    Args:
        topic: Discussion topic to print on the flyer.
        extra_prompt: Optional free-text instructions appended to the prompt.
        venue: Venue line. Defaults to settings.flyer_venue.
        time: Start time line. Defaults to settings.flyer_time.

    Returns:
        The complete prompt string.
    """
    return FLYER_PROMPT.format(
        topic=topic,
        venue=venue or settings.flyer_venue,
        time=time or settings.flyer_time,
        extra_prompt=extra_prompt,
    )


class FlyerGenerator:
    """Generates a square base64 flyer image for a topic."""

    def __init__(self, client: AsyncOpenAI | None = None):
        """Initialize the flyer generator.

        Args:
            client: Optional AsyncOpenAI instance. Uses the shared client if not provided.
        """
        self.client = client or get_async_client()

    async def agenerate(self, topic: str, extra_prompt: str = "") -> str:
        """Generate a flyer image.

        Args:
            topic: Discussion topic.
            extra_prompt: Optional extra instructions.

        Returns:
            Base64-encoded image, or an empty string if the API omitted it.

        Raises:
            ValueError: If the API returns no image.
            openai.OpenAIError: On upstream failure.
        """
        response = await self.client.images.generate(
            model=settings.image_model,
            prompt=build_flyer_prompt(topic, extra_prompt),
            n=1,
            size=settings.image_size,
            response_format="b64_json",
        )
        if not response or not response.data:
            raise ValueError("Couldn't generate flyer")

        logger.info(f"Flyer generated for topic {topic!r}")
        return response.data[0].b64_json or ""
