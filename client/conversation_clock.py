"""Elapsed-time counter for a conversation."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Optional

LOGGER = logging.getLogger(__name__)


def format_elapsed(seconds: int) -> str:
    """Render seconds as `m:ss`, e.g. 75 -> '1:15'."""
    return f"{seconds // 60}:{seconds % 60:02d}"


class ConversationClock:
    """Track elapsed conversation time and optionally tick a listener once a second.

    The ticker is best-effort: without a running event loop the clock still
    measures time, it just does not notify.
    """

    def __init__(
        self,
        on_tick: Optional[Callable[[int], None]] = None,
        time_source: Callable[[], float] = time.monotonic,
    ) -> None:
        self.on_tick = on_tick
        self._now = time_source
        self._started_at: Optional[float] = None
        self._stopped_at: Optional[float] = None
        self._ticker: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._started_at is not None and self._stopped_at is None

    def start(self) -> None:
        self.stop()
        self._started_at = self._now()
        self._stopped_at = None
        if self.on_tick is None:
            return
        try:
            self._ticker = asyncio.get_running_loop().create_task(self._tick())
        except RuntimeError:
            LOGGER.debug("No running event loop; clock ticks disabled")

    def stop(self) -> None:
        if self.running:
            self._stopped_at = self._now()
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

    def reset(self) -> None:
        self.stop()
        self._started_at = None
        self._stopped_at = None

    def elapsed_seconds(self) -> int:
        if self._started_at is None:
            return 0
        end = self._stopped_at if self._stopped_at is not None else self._now()
        return int(end - self._started_at)

    async def _tick(self) -> None:
        while True:
            await asyncio.sleep(1)
            try:
                self.on_tick(self.elapsed_seconds())
            except Exception:  # pylint: disable=broad-exception-caught
                LOGGER.exception("Clock tick listener failed")
