"""Client-side conversation state (the turn record store)."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from models.turn_models import Message, Role


class ConversationPhase(str, Enum):
    NOT_STARTED = "not_started"
    ACTIVE = "active"
    ENDED = "ended"


@dataclass
class ConversationState:
    """Transcript, attached image and turn bookkeeping for one conversation."""

    transcript: List[Message] = field(default_factory=list)
    image: Optional[str] = None
    turn_count: int = 0
    ended: bool = False
    begun: bool = False

    @property
    def phase(self) -> ConversationPhase:
        if self.ended:
            return ConversationPhase.ENDED
        if self.begun:
            return ConversationPhase.ACTIVE
        return ConversationPhase.NOT_STARTED

    def append(self, message: Message) -> None:
        self.transcript.append(message)

    def user_message_count(self) -> int:
        return sum(1 for msg in self.transcript if msg.role is Role.USER)
