"""Client-side driver of the begin / send / end conversation lifecycle."""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from client.chat_transport import ChatTransport, ChatTransportError
from client.conversation_clock import ConversationClock
from models.conversation_state import ConversationPhase, ConversationState
from models.turn_models import Message, TurnResponse

LOGGER = logging.getLogger(__name__)

TANGLED_REPLY = TurnResponse(say="Oops! My brain got a little tangled. Can you say that again?")


class ConversationOrchestrator:
    """Own the conversation state and perform one exchange per call.

    Only `begin`, `send_message` and `reset` mutate the state. Every reset
    (and every `begin`) bumps an epoch; an exchange that finishes under an
    older epoch is discarded and its caller gets None.
    """

    def __init__(self, transport: ChatTransport, clock: Optional[ConversationClock] = None) -> None:
        self.transport = transport
        self.clock = clock or ConversationClock()
        self._state = ConversationState()
        self._epoch = 0

    @property
    def phase(self) -> ConversationPhase:
        return self._state.phase

    @property
    def is_ended(self) -> bool:
        return self._state.ended

    @property
    def turn_count(self) -> int:
        return self._state.turn_count

    @property
    def image(self) -> Optional[str]:
        return self._state.image

    @property
    def transcript(self) -> Tuple[Message, ...]:
        return tuple(self._state.transcript)

    def elapsed_seconds(self) -> int:
        return self.clock.elapsed_seconds()

    async def begin(self, image: str) -> Optional[TurnResponse]:
        """Start a fresh conversation about `image`; Buddy speaks first."""
        self.reset()
        self._state.image = image
        self._state.begun = True
        self.clock.start()
        return await self._exchange()

    async def send_message(self, text: str) -> Optional[TurnResponse]:
        """Send the child's words and return Buddy's reply.

        Returns None without touching state when the conversation has not
        begun, has ended, or `text` is blank.
        """
        if self._state.phase is not ConversationPhase.ACTIVE:
            LOGGER.info("Ignoring message while conversation is %s", self._state.phase.value)
            return None
        text = (text or "").strip()
        if not text:
            return None
        self._state.append(Message.user(text))
        self._state.turn_count += 1
        return await self._exchange()

    def reset(self) -> None:
        """Drop the conversation; any in-flight reply will be discarded."""
        self._epoch += 1
        self._state = ConversationState()
        self.clock.reset()

    async def _exchange(self) -> Optional[TurnResponse]:
        epoch = self._epoch
        snapshot = list(self._state.transcript)
        try:
            reply = await self.transport.exchange(snapshot, self._state.image)
        except ChatTransportError as exc:
            LOGGER.error("Conversation error: %s", exc)
            reply = None

        if epoch != self._epoch:
            LOGGER.info("Discarding reply from a conversation that was reset")
            return None
        if reply is None:
            return TANGLED_REPLY

        self._state.append(Message.assistant(reply.say))
        if reply.end_conversation:
            self._state.ended = True
            self.clock.stop()
        return reply
