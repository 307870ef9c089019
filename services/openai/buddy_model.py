"""Buddy's model-backed turn generator using the OpenAI Responses API."""

import logging
import time
from typing import Any, Dict, List, Optional, Sequence

from openai import AsyncOpenAI, OpenAIError

from models.turn_models import Message, TurnResponse
from services.openai.media_inputs import (
    ImageResolver,
    build_history_inputs,
    build_opening_inputs,
    should_attach_image,
)
from services.openai.prompts import system_prompt
from services.openai.response_parser import extract_text, extract_usage, parse_turn_response

LOGGER = logging.getLogger(__name__)

TEMPERATURE = 0.8
MAX_OUTPUT_TOKENS = 300

MODEL_UNAVAILABLE_REPLY = TurnResponse(say="Oops, I got a little dizzy! Can you say that again?")


class BuddyModelAdapter:
    """Build a Buddy request from the transcript and picture, and normalize the reply."""

    def __init__(self, client: AsyncOpenAI, image_resolver: ImageResolver, model: str = "gpt-4o-mini") -> None:
        if client is None:
            raise ValueError("AsyncOpenAI client is required.")
        self.client = client
        self.image_resolver = image_resolver
        self.model = model
        self.system_prompt = system_prompt()

    async def build_inputs(self, messages: Sequence[Message], image_url: Optional[str]) -> List[Dict[str, Any]]:
        """Return the Responses API input array for this turn."""
        if should_attach_image(image_url, messages):
            image_data_url = await self.image_resolver.resolve(image_url)
            return build_opening_inputs(self.system_prompt, image_data_url, messages)
        return build_history_inputs(self.system_prompt, messages)

    async def respond(self, messages: Sequence[Message], image_url: Optional[str]) -> TurnResponse:
        """Return one validated TurnResponse for the conversation so far.

        Transport failures and empty replies become a fixed apology; malformed
        replies are degraded by `parse_turn_response`.
        """
        start = time.time()
        inputs = await self.build_inputs(messages, image_url)
        try:
            response = await self.client.responses.create(
                model=self.model,
                input=inputs,
                temperature=TEMPERATURE,
                max_output_tokens=MAX_OUTPUT_TOKENS,
            )
        except OpenAIError as exc:
            logging.error("OpenAI Responses API error: %s", exc)
            return MODEL_UNAVAILABLE_REPLY

        raw = extract_text(response).strip()
        usage = extract_usage(response)
        LOGGER.info(
            "Model reply in %.3fs (input_tokens=%s, output_tokens=%s): %.200s",
            time.time() - start,
            usage["input_tokens"],
            usage["output_tokens"],
            raw,
        )
        if not raw:
            logging.error("Model returned an empty reply.")
            return MODEL_UNAVAILABLE_REPLY
        return parse_turn_response(raw)
