"""Event channel between a speech recognizer and the conversation.

A recognizer pushes events into the channel; the session consumes them in
order. Each listening session yields `start`, any number of `interim`
results, at most one `final` result, and `end`. After `stop()` returns no
further result events are delivered for that session.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import AsyncIterator, Optional


class RecognitionEventType(str, Enum):
    START = "start"
    INTERIM = "interim"
    FINAL = "final"
    END = "end"


RESULT_EVENTS = {RecognitionEventType.INTERIM, RecognitionEventType.FINAL}


@dataclass(frozen=True)
class RecognitionEvent:
    type: RecognitionEventType
    transcript: str = ""

    @property
    def is_final(self) -> bool:
        return self.type is RecognitionEventType.FINAL


class RecognitionChannel:
    """Ordered, cancellable queue of recognition events."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue[RecognitionEvent] = asyncio.Queue()
        self._listening = False

    @property
    def listening(self) -> bool:
        return self._listening

    def start(self) -> bool:
        """Open a listening session. Returns False if one is already open."""
        if self._listening:
            return False
        # Drop events left over from an earlier, unconsumed session.
        while not self._queue.empty():
            self._queue.get_nowait()
        self._listening = True
        self._queue.put_nowait(RecognitionEvent(RecognitionEventType.START))
        return True

    def push_interim(self, transcript: str) -> None:
        if self._listening:
            self._queue.put_nowait(RecognitionEvent(RecognitionEventType.INTERIM, transcript))

    def push_final(self, transcript: str) -> None:
        """Deliver the final result and close the session."""
        if not self._listening:
            return
        self._queue.put_nowait(RecognitionEvent(RecognitionEventType.FINAL, transcript))
        self._close()

    def stop(self) -> None:
        """Close the session, dropping any results not yet consumed."""
        if not self._listening:
            return
        pending = []
        while not self._queue.empty():
            event = self._queue.get_nowait()
            if event.type not in RESULT_EVENTS:
                pending.append(event)
        for event in pending:
            self._queue.put_nowait(event)
        self._close()

    def _close(self) -> None:
        self._listening = False
        self._queue.put_nowait(RecognitionEvent(RecognitionEventType.END))

    async def next_event(self, timeout: Optional[float] = None) -> RecognitionEvent:
        if timeout is None:
            return await self._queue.get()
        return await asyncio.wait_for(self._queue.get(), timeout)

    async def events(self) -> AsyncIterator[RecognitionEvent]:
        """Yield events until the current session ends."""
        while True:
            event = await self._queue.get()
            yield event
            if event.type is RecognitionEventType.END:
                return
