"""Controller for the Buddy chat exchange."""

from __future__ import annotations

import logging
from typing import Any, List, Tuple

from fastapi import Request

from models.turn_models import Message, TurnResponse
from services.chat_service import ChatService
from services.openai.media_inputs import should_attach_image

LOGGER = logging.getLogger(__name__)

BAD_REQUEST_REPLY = TurnResponse(say="Oops! Something went wrong. Let's try again!")
INTERNAL_ERROR_REPLY = TurnResponse(say="Oops, I got a little dizzy! Let's try again!")


def parse_messages(raw_messages: List[Any]) -> List[Message]:
    """Convert wire messages, skipping entries that are not usable."""
    messages: List[Message] = []
    for entry in raw_messages:
        message = Message.from_payload(entry)
        if message is None:
            LOGGER.warning("Skipping malformed message entry: %r", entry)
            continue
        messages.append(message)
    return messages


async def handle_chat(request: Request) -> Tuple[int, TurnResponse]:
    """Run one exchange and return `(status_code, TurnResponse)`.

    Every outcome carries a TurnResponse so the client has a single
    rendering path: 400 for an unusable request body, 500 for unexpected
    failures, 200 otherwise (including degraded model replies).
    """
    try:
        body = await request.json()
    except ValueError:
        LOGGER.error("Chat request body is not valid JSON")
        return 400, BAD_REQUEST_REPLY

    raw_messages = body.get("messages") if isinstance(body, dict) else None
    if not isinstance(raw_messages, list):
        LOGGER.error("Invalid messages: %r", raw_messages)
        return 400, BAD_REQUEST_REPLY

    image_url = body.get("imageUrl")
    if not isinstance(image_url, str) or not image_url:
        image_url = None
    # The picture threshold counts every posted entry, including ones skipped below.
    if not should_attach_image(image_url, raw_messages):
        image_url = None

    service: ChatService = request.app.state.chat_service
    try:
        reply = await service.respond(parse_messages(raw_messages), image_url)
    except Exception:  # pylint: disable=broad-exception-caught
        LOGGER.exception("Chat error")
        return 500, INTERNAL_ERROR_REPLY
    return 200, reply
