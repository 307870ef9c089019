"""Route one Buddy exchange to the model or to the offline script."""

from __future__ import annotations

from typing import Optional, Sequence

from models.turn_models import Message, TurnResponse
from services.offline_script import offline_reply
from services.openai.buddy_model import BuddyModelAdapter


class ChatService:
    """Stateless per call: every exchange carries the full transcript."""

    def __init__(self, model_adapter: Optional[BuddyModelAdapter] = None) -> None:
        self.model_adapter = model_adapter

    @property
    def mode(self) -> str:
        return "model" if self.model_adapter is not None else "offline"

    async def respond(self, messages: Sequence[Message], image_url: Optional[str]) -> TurnResponse:
        if self.model_adapter is None:
            return offline_reply(messages)
        return await self.model_adapter.respond(messages, image_url)
