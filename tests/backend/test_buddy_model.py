"""
Unit tests for the model adapter.

The OpenAI client is replaced with AsyncMock; no network calls are made.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import pytest
from openai import OpenAIError

from models.turn_models import Message
from services.openai.buddy_model import (
    MAX_OUTPUT_TOKENS,
    MODEL_UNAVAILABLE_REPLY,
    TEMPERATURE,
    BuddyModelAdapter,
)
from services.openai.prompts import CONTINUE_INSTRUCTION, START_INSTRUCTION, SYSTEM_PROMPT

IMAGE = "data:image/png;base64,AAA"


def _response(text):
    return SimpleNamespace(
        output=[SimpleNamespace(type="message", content=[SimpleNamespace(type="output_text", text=text)])],
        usage=SimpleNamespace(input_tokens=10, output_tokens=5),
    )


def _adapter(text='{"say": "Wow! A dog!", "tool": null, "endConversation": false}'):
    client = Mock()
    client.responses.create = AsyncMock(return_value=_response(text))
    resolver = Mock()
    resolver.resolve = AsyncMock(return_value=IMAGE)
    return BuddyModelAdapter(client, resolver, model="gpt-test")


def _content_types(inputs):
    return [part["type"] for part in inputs[1]["content"]]


class TestBuildInputs:
    """Test when the picture is attached."""

    @pytest.mark.asyncio
    async def test_opening_turn_attaches_image(self):
        adapter = _adapter()

        inputs = await adapter.build_inputs([], IMAGE)

        assert inputs[0]["content"][0]["text"] == SYSTEM_PROMPT
        assert _content_types(inputs) == ["input_image", "input_text"]
        assert inputs[1]["content"][1]["text"] == START_INSTRUCTION

    @pytest.mark.asyncio
    async def test_single_message_still_attaches_image(self):
        adapter = _adapter()

        inputs = await adapter.build_inputs([Message.assistant("Wow!")], IMAGE)

        assert _content_types(inputs) == ["input_image", "input_text"]
        assert inputs[1]["content"][1]["text"] == "Wow!"

    @pytest.mark.asyncio
    async def test_longer_transcript_is_text_only(self):
        adapter = _adapter()
        transcript = [Message.assistant("Wow! What do you see?"), Message.user("A dog")]

        inputs = await adapter.build_inputs(transcript, IMAGE)

        assert _content_types(inputs) == ["input_text", "input_text"]
        assert inputs[1]["content"][0]["text"] == "Buddy: Wow! What do you see?\nChild: A dog\n"
        assert inputs[1]["content"][1]["text"] == CONTINUE_INSTRUCTION
        adapter.image_resolver.resolve.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_image_reference(self):
        adapter = _adapter()

        inputs = await adapter.build_inputs([], None)

        assert "input_image" not in _content_types(inputs)
        adapter.image_resolver.resolve.assert_not_called()


class TestRespond:
    """Test one model exchange."""

    @pytest.mark.asyncio
    async def test_sampling_parameters(self):
        adapter = _adapter()

        reply = await adapter.respond([], IMAGE)

        assert reply.say == "Wow! A dog!"
        kwargs = adapter.client.responses.create.call_args.kwargs
        assert kwargs["model"] == "gpt-test"
        assert kwargs["temperature"] == TEMPERATURE
        assert kwargs["max_output_tokens"] == MAX_OUTPUT_TOKENS

    @pytest.mark.asyncio
    async def test_api_error_returns_apology(self):
        adapter = _adapter()
        adapter.client.responses.create = AsyncMock(side_effect=OpenAIError("unavailable"))

        reply = await adapter.respond([], IMAGE)

        assert reply == MODEL_UNAVAILABLE_REPLY

    @pytest.mark.asyncio
    async def test_empty_reply_returns_apology(self):
        adapter = _adapter(text="   ")

        reply = await adapter.respond([], IMAGE)

        assert reply == MODEL_UNAVAILABLE_REPLY

    @pytest.mark.asyncio
    async def test_malformed_reply_degrades(self):
        adapter = _adapter(text="What a sunny day!")

        reply = await adapter.respond([Message.assistant("Hi"), Message.user("sun")], IMAGE)

        assert reply.say == "What a sunny day!"
        assert reply.tool is None

    def test_client_required(self):
        with pytest.raises(ValueError):
            BuddyModelAdapter(None, Mock())
