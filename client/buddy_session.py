"""Wire recognition, the orchestrator, tools and speech output together."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Protocol

from client.conversation_orchestrator import ConversationOrchestrator
from client.recognition_channel import RecognitionChannel, RecognitionEventType
from client.tool_dispatcher import ToolDispatcher
from models.turn_models import TurnResponse

LOGGER = logging.getLogger(__name__)

CELEBRATION_DELAY_SECONDS = 0.6


class Speaker(Protocol):
    """Text-to-speech output; `speak` resolves when the utterance finishes."""

    async def speak(self, text: str) -> None:
        ...

    def stop(self) -> None:
        ...


class SilentSpeaker:
    """Speaker that records what it would have said."""

    def __init__(self) -> None:
        self.spoken: list[str] = []

    async def speak(self, text: str) -> None:
        self.spoken.append(text)

    def stop(self) -> None:
        pass


class BuddySession:
    """One child-facing session: start with a picture, then trade turns."""

    def __init__(
        self,
        orchestrator: ConversationOrchestrator,
        dispatcher: Optional[ToolDispatcher] = None,
        speaker: Optional[Speaker] = None,
    ) -> None:
        self.orchestrator = orchestrator
        self.dispatcher = dispatcher or ToolDispatcher()
        self.speaker = speaker or SilentSpeaker()
        self.busy = False
        self._celebration: Optional[asyncio.Task] = None

    async def start_with_image(self, image: str) -> Optional[TurnResponse]:
        self._cancel_celebration()
        self.dispatcher.reset()
        reply = await self.orchestrator.begin(image)
        if reply is not None:
            await self.handle_response(reply)
        return reply

    async def process_child_speech(self, text: str) -> Optional[TurnResponse]:
        if self.busy or self.orchestrator.is_ended or not (text or "").strip():
            return None
        self.busy = True
        try:
            reply = await self.orchestrator.send_message(text.strip())
        finally:
            self.busy = False
        if reply is not None:
            await self.handle_response(reply)
        return reply

    async def handle_response(self, reply: TurnResponse) -> None:
        """Run the tool, speak the line, and celebrate when the conversation ends."""
        self.dispatcher.execute(reply.tool)
        self.busy = True
        try:
            await self.speaker.speak(reply.say)
        finally:
            self.busy = False
        if reply.end_conversation:
            self._celebrate()

    async def listen(self, channel: RecognitionChannel) -> Optional[TurnResponse]:
        """Consume one listening session through `end`; a final result is sent as the child's turn."""
        final: Optional[str] = None
        async for event in channel.events():
            if event.type is RecognitionEventType.FINAL:
                final = event.transcript
                channel.stop()
        if final is None:
            return None
        return await self.process_child_speech(final)

    def back(self) -> None:
        """Leave the conversation: stop speaking and clear all state."""
        self.speaker.stop()
        self._cancel_celebration()
        self.orchestrator.reset()
        self.dispatcher.reset()
        self.busy = False

    def _celebrate(self) -> None:
        board = self.dispatcher.board
        board.show_emoji_reaction("🎉")
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._celebration = loop.create_task(self._second_burst())

    async def _second_burst(self) -> None:
        await asyncio.sleep(CELEBRATION_DELAY_SECONDS)
        self.dispatcher.board.show_emoji_reaction("⭐")

    def _cancel_celebration(self) -> None:
        if self._celebration is not None:
            self._celebration.cancel()
            self._celebration = None
