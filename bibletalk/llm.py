"""OpenAI client factory.

Every model API call (moderation, chat completion, image generation, file
upload and fine tuning) goes through an AsyncOpenAI client built here.
"""

from functools import lru_cache

from openai import AsyncOpenAI

from bibletalk.config import settings


def new_async_client() -> AsyncOpenAI:
    """Build an OpenAI client from settings.

    One-shot calls are never retried, so the SDK's own retry loop is disabled.

    Returns:
        AsyncOpenAI instance configured from settings.

    Raises:
        openai.OpenAIError: If no API key is configured.
    """
    return AsyncOpenAI(
        api_key=settings.openai_api_key or None,
        timeout=settings.request_timeout,
        max_retries=0,
    )


@lru_cache
def get_async_client() -> AsyncOpenAI:
    """Get the process-wide client shared by the gateway's generators."""
    return new_async_client()
