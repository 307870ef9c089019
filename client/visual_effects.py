"""Self-expiring visual effects triggered by Buddy's tools.

The board is a model of what is on screen: the current highlight, the
reward banner, floating emojis and the star counter. A renderer reads it;
every effect removes itself after a fixed lifetime through an asyncio
task owned by the board, and `reset()` cancels whatever is still pending.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import random
from dataclasses import dataclass
from typing import Dict, List, Optional

LOGGER = logging.getLogger(__name__)

HIGHLIGHT_SECONDS = 3.0
HIGHLIGHT_FADE_SECONDS = 0.5
REWARD_BANNER_SECONDS = 2.2
FLOAT_SECONDS = 3.0
STAR_PARTICLES = ("⭐", "🌟", "✨", "💫")
STAR_PARTICLE_COUNT = 8


@dataclass
class Highlight:
    label: str
    top_pct: float
    left_pct: float


@dataclass
class FloatingEmoji:
    id: int
    emoji: str
    left_pct: float


class EffectBoard:
    """Hold the active effects and expire them on a timer."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()
        self.star_count = 0
        self.highlight: Optional[Highlight] = None
        self.reward_banner: Optional[str] = None
        self.floating: Dict[int, FloatingEmoji] = {}
        self._ids = itertools.count(1)
        self._timers: set[asyncio.Task] = set()

    @property
    def floating_emojis(self) -> List[str]:
        return [item.emoji for item in self.floating.values()]

    def highlight_object(self, label: str) -> None:
        """Point at an object; a new highlight replaces the previous one."""
        current = Highlight(
            label=f"👉 {label}",
            top_pct=20 + self.rng.random() * 40,
            left_pct=15 + self.rng.random() * 50,
        )
        self.highlight = current
        self._after(HIGHLIGHT_SECONDS + HIGHLIGHT_FADE_SECONDS, self._clear_highlight, current)

    def add_reward_star(self, reason: str) -> None:
        self.star_count += 1
        self.reward_banner = reason
        self._after(REWARD_BANNER_SECONDS, self._clear_banner, reason)
        for _ in range(STAR_PARTICLE_COUNT):
            self._spawn(self.rng.choice(STAR_PARTICLES), self.rng.random() * 90)

    def show_emoji_reaction(self, emoji: str) -> None:
        for _ in range(5 + self.rng.randrange(4)):
            self._spawn(emoji, 10 + self.rng.random() * 80)

    def reset(self) -> None:
        """Cancel pending expiries and clear the board, stars included."""
        for task in list(self._timers):
            task.cancel()
        self._timers.clear()
        self.star_count = 0
        self.highlight = None
        self.reward_banner = None
        self.floating.clear()

    def _spawn(self, emoji: str, left_pct: float) -> None:
        item = FloatingEmoji(id=next(self._ids), emoji=emoji, left_pct=left_pct)
        self.floating[item.id] = item
        self._after(FLOAT_SECONDS, self.floating.pop, item.id, None)

    def _clear_highlight(self, expected: Highlight) -> None:
        if self.highlight is expected:
            self.highlight = None

    def _clear_banner(self, expected: str) -> None:
        if self.reward_banner == expected:
            self.reward_banner = None

    def _after(self, delay: float, callback, *args) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            LOGGER.debug("No running event loop; effect stays until reset")
            return
        task = loop.create_task(self._expire(delay, callback, *args))
        self._timers.add(task)
        task.add_done_callback(self._timers.discard)

    @staticmethod
    async def _expire(delay: float, callback, *args) -> None:
        await asyncio.sleep(delay)
        callback(*args)
