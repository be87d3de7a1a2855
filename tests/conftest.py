"""Pytest configuration and fixtures."""

import os
from unittest.mock import AsyncMock, MagicMock

import pytest


def pytest_configure(config):
    """Set up test environment variables before tests run."""
    os.environ.setdefault("OPENAI_API_KEY", "sk-test")
    os.environ.setdefault("ENVIRONMENT", "test")
    os.environ.pop("GOOGLE_PROJECT_ID", None)


@pytest.fixture
def mock_settings():
    """Provide settings for testing."""
    from bibletalk.config import Settings

    return Settings(openai_api_key="sk-test", environment="test")


@pytest.fixture
def openai_client():
    """OpenAI client double with awaitable endpoints."""
    client = MagicMock()
    client.moderations.create = AsyncMock()
    client.chat.completions.create = AsyncMock()
    client.images.generate = AsyncMock()
    client.files.create = AsyncMock()
    client.fine_tuning.jobs.create = AsyncMock()
    client.fine_tuning.jobs.retrieve = AsyncMock()
    return client


@pytest.fixture
def discussion_payload() -> dict[str, str]:
    """A well-formed discussion outline as the model returns it."""
    return {
        "bibleTalkTopic": "Faith Over Fear",
        "introductoryStatement": "Hi everyone, my name is Karo.",
        "icebreakerQuestion": "What scares you the most?",
        "firstScripture": "Hebrews 11:1 - Now faith is confidence in what we hope for.",
        "firstQuestion": "What is faith?",
        "secondScripture": "Mark 4:40 - Why are you so afraid?",
        "secondQuestion": "Why did the disciples fear?",
        "lastScripture": "James 2:17 - Faith by itself, if it is not accompanied by action, is dead.",
        "lastQuestion": "How will you act on your faith?",
        "concludingStatement": "Fear knocked, faith answered, and nobody was there.",
    }

