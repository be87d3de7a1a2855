"""Tests for the model API generators."""

import asyncio
import json
from types import SimpleNamespace

import pytest
from pydantic import BaseModel, ConfigDict, Field

from bibletalk.generators import (
    DiscussionGenerator,
    DiscussionOutline,
    FlyerGenerator,
    ModerationChecker,
    build_flyer_prompt,
)
from bibletalk.generators.discussion import SYSTEM_PROMPT
from factories import chat_response, image_response, moderation_response


class _Categories(BaseModel):
    """Mirrors the SDK's aliased category model."""

    model_config = ConfigDict(populate_by_name=True)

    harassment: bool
    harassment_threatening: bool = Field(alias="harassment/threatening")
    illicit: bool | None = None


class TestModerationChecker:
    """Test ModerationChecker."""

    def test_categories_use_wire_names(self, openai_client):
        categories = _Categories(harassment=True, harassment_threatening=False, illicit=None)
        openai_client.moderations.create.return_value = moderation_response(True, categories)

        result = asyncio.run(ModerationChecker(client=openai_client).acheck("hint"))

        assert result.flagged is True
        assert result.categories == {
            "harassment": True,
            "harassment/threatening": False,
            "illicit": False,
        }

    def test_category_order_is_preserved(self, openai_client):
        categories = {"violence": True, "hate": False, "sexual": True}
        openai_client.moderations.create.return_value = moderation_response(True, categories)

        result = asyncio.run(ModerationChecker(client=openai_client).acheck("hint"))

        assert list(result.categories) == ["violence", "hate", "sexual"]

    def test_no_results_raises(self, openai_client):
        openai_client.moderations.create.return_value = SimpleNamespace(results=[])

        with pytest.raises(ValueError):
            asyncio.run(ModerationChecker(client=openai_client).acheck("hint"))

    def test_custom_model(self, openai_client):
        openai_client.moderations.create.return_value = moderation_response(False, {})

        asyncio.run(ModerationChecker(client=openai_client, model="text-moderation-stable").acheck("hi"))

        assert openai_client.moderations.create.await_args.kwargs["model"] == "text-moderation-stable"


class TestDiscussionOutline:
    """Test DiscussionOutline model."""

    def test_parses_camel_case_keys(self, discussion_payload):
        outline = DiscussionOutline.model_validate(discussion_payload)

        assert outline.bible_talk_topic == "Faith Over Fear"
        assert outline.concluding_statement.startswith("Fear knocked")

    def test_dumps_camel_case_keys(self, discussion_payload):
        outline = DiscussionOutline.model_validate(discussion_payload)

        assert outline.model_dump(by_alias=True) == discussion_payload

    def test_ignores_unknown_keys(self, discussion_payload):
        discussion_payload["speakerName"] = "Karo"

        outline = DiscussionOutline.model_validate(discussion_payload)

        assert "speakerName" not in outline.model_dump(by_alias=True)
        assert len(outline.model_dump()) == 10


class TestDiscussionGenerator:
    """Test DiscussionGenerator."""

    def test_system_prompt_describes_every_field(self):
        for alias in (field.alias for field in DiscussionOutline.model_fields.values()):
            assert alias in SYSTEM_PROMPT

    def test_build_messages(self, openai_client):
        messages = DiscussionGenerator(client=openai_client).build_messages("patience")

        assert messages[0] == {"role": "system", "content": SYSTEM_PROMPT}
        assert messages[1] == {"role": "user", "content": "patience"}

    def test_generate_returns_outline(self, openai_client, discussion_payload):
        openai_client.chat.completions.create.return_value = chat_response(
            json.dumps(discussion_payload)
        )

        outline = asyncio.run(DiscussionGenerator(client=openai_client).agenerate("faith"))

        assert outline.first_scripture.startswith("Hebrews 11:1")

    def test_no_choices_raises(self, openai_client):
        openai_client.chat.completions.create.return_value = SimpleNamespace(choices=[])

        with pytest.raises(ValueError):
            asyncio.run(DiscussionGenerator(client=openai_client).agenerate("faith"))

    def test_empty_content_raises(self, openai_client):
        openai_client.chat.completions.create.return_value = chat_response(None)

        with pytest.raises(ValueError):
            asyncio.run(DiscussionGenerator(client=openai_client).agenerate("faith"))


class TestFlyerPrompt:
    """Test flyer prompt construction."""

    def test_default_venue_and_time(self):
        prompt = build_flyer_prompt("Faith")

        assert "boldly state the topic Faith." in prompt
        assert '"KFC, Ikeja ICM"' in prompt
        assert '"7pm on Friday"' in prompt

    def test_custom_venue_and_time(self):
        prompt = build_flyer_prompt("Hope", venue="Lagos Hall", time="6pm on Sunday")

        assert '"Lagos Hall"' in prompt
        assert '"6pm on Sunday"' in prompt
        assert "KFC" not in prompt

    def test_extra_prompt(self):
        assert "Add a dove" in build_flyer_prompt("Hope", extra_prompt="Add a dove")


class TestFlyerGenerator:
    """Test FlyerGenerator."""

    def test_missing_b64_returns_empty_string(self, openai_client):
        openai_client.images.generate.return_value = image_response(None)

        image = asyncio.run(FlyerGenerator(client=openai_client).agenerate("Faith"))

        assert image == ""

    def test_no_data_raises(self, openai_client):
        openai_client.images.generate.return_value = SimpleNamespace(data=[])

        with pytest.raises(ValueError):
            asyncio.run(FlyerGenerator(client=openai_client).agenerate("Faith"))
