"""Transports that carry one exchange from the orchestrator to Buddy's chat endpoint."""

from __future__ import annotations

import logging
from typing import Optional, Protocol, Sequence

import httpx

from models.turn_models import Message, TurnResponse
from services.chat_service import ChatService

LOGGER = logging.getLogger(__name__)

CHAT_PATH = "/api/chat"


class ChatTransportError(RuntimeError):
    """Raised when no usable TurnResponse came back from the chat endpoint."""


class ChatTransport(Protocol):
    async def exchange(self, messages: Sequence[Message], image_url: Optional[str]) -> TurnResponse:
        ...


class HttpChatTransport:
    """POST the transcript to `/api/chat` with httpx.

    Non-2xx replies are still used when their body is TurnResponse-shaped,
    since the server answers 400 and 500 with an in-persona apology.
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8000",
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ) -> None:
        self.client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def exchange(self, messages: Sequence[Message], image_url: Optional[str]) -> TurnResponse:
        payload = {"messages": [msg.to_dict() for msg in messages], "imageUrl": image_url}
        try:
            response = await self.client.post(CHAT_PATH, json=payload)
        except httpx.HTTPError as exc:
            raise ChatTransportError(f"Chat request failed: {exc}") from exc

        try:
            reply = TurnResponse.from_payload(response.json())
        except ValueError as exc:
            raise ChatTransportError(f"Server error: {response.status_code}") from exc
        if response.is_error:
            LOGGER.warning("Chat endpoint answered %s: %s", response.status_code, reply.say)
        return reply

    async def aclose(self) -> None:
        await self.client.aclose()


class LocalChatTransport:
    """Call a ChatService in-process, skipping HTTP entirely."""

    def __init__(self, service: ChatService) -> None:
        self.service = service

    async def exchange(self, messages: Sequence[Message], image_url: Optional[str]) -> TurnResponse:
        return await self.service.respond(list(messages), image_url)
