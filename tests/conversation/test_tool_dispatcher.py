"""
Unit tests for tool dispatch and the effect board.
"""

import asyncio
import random

import pytest

from client import visual_effects
from client.tool_dispatcher import ToolDispatcher
from client.visual_effects import EffectBoard
from models.turn_models import ToolDirective


@pytest.fixture
def dispatcher():
    return ToolDispatcher(EffectBoard(rng=random.Random(7)))


class TestToolDispatcher:
    """Test each tool reaches its effect."""

    def test_highlight(self, dispatcher):
        dispatcher.execute(ToolDirective("highlightObject", {"label": "dog"}))

        assert dispatcher.board.highlight.label == "👉 dog"

    def test_reward_star(self, dispatcher):
        dispatcher.execute(ToolDirective("addRewardStar", {"reason": "Great eyes!"}))
        dispatcher.execute(ToolDirective("addRewardStar", {"reason": "Again!"}))

        assert dispatcher.board.star_count == 2
        assert dispatcher.board.reward_banner == "Again!"
        assert len(dispatcher.board.floating) == 2 * visual_effects.STAR_PARTICLE_COUNT

    def test_emoji_reaction(self, dispatcher):
        dispatcher.execute(ToolDirective("showEmojiReaction", {"emoji": "🎨"}))

        emojis = dispatcher.board.floating_emojis
        assert 5 <= len(emojis) <= 8
        assert set(emojis) == {"🎨"}

    def test_missing_arguments_use_defaults(self, dispatcher):
        dispatcher.execute(ToolDirective("highlightObject"))
        dispatcher.execute(ToolDirective("addRewardStar"))

        assert dispatcher.board.highlight.label == "👉 that"
        assert dispatcher.board.reward_banner == "Great job!"

    def test_default_emoji(self, dispatcher):
        dispatcher.execute(ToolDirective("showEmojiReaction", {"emoji": ""}))

        assert set(dispatcher.board.floating_emojis) == {"⭐"}

    def test_unknown_tool_ignored(self, dispatcher):
        dispatcher.execute(ToolDirective("launchRocket", {"speed": 9}))

        assert dispatcher.board.star_count == 0
        assert dispatcher.board.highlight is None
        assert dispatcher.board.floating == {}

    def test_no_tool(self, dispatcher):
        dispatcher.execute(None)

        assert dispatcher.board.floating == {}


class TestEffectBoardTimers:
    """Test effects expire on their own and reset cancels them."""

    @pytest.mark.asyncio
    async def test_effects_expire(self, monkeypatch):
        monkeypatch.setattr(visual_effects, "HIGHLIGHT_SECONDS", 0.01)
        monkeypatch.setattr(visual_effects, "HIGHLIGHT_FADE_SECONDS", 0.0)
        monkeypatch.setattr(visual_effects, "REWARD_BANNER_SECONDS", 0.01)
        monkeypatch.setattr(visual_effects, "FLOAT_SECONDS", 0.01)
        board = EffectBoard()

        board.highlight_object("cat")
        board.add_reward_star("Nice!")
        await asyncio.sleep(0.05)

        assert board.highlight is None
        assert board.reward_banner is None
        assert board.floating == {}
        assert board.star_count == 1

    @pytest.mark.asyncio
    async def test_newer_highlight_survives_older_timer(self, monkeypatch):
        monkeypatch.setattr(visual_effects, "HIGHLIGHT_FADE_SECONDS", 0.0)
        monkeypatch.setattr(visual_effects, "HIGHLIGHT_SECONDS", 0.01)
        board = EffectBoard()
        board.highlight_object("cat")
        monkeypatch.setattr(visual_effects, "HIGHLIGHT_SECONDS", 10)
        board.highlight_object("dog")

        await asyncio.sleep(0.05)

        assert board.highlight.label == "👉 dog"
        board.reset()

    @pytest.mark.asyncio
    async def test_reset_cancels_pending(self):
        board = EffectBoard()
        board.add_reward_star("Nice!")
        board.show_emoji_reaction("😍")

        board.reset()
        await asyncio.sleep(0)

        assert board.star_count == 0
        assert board.reward_banner is None
        assert board.floating == {}
        assert board._timers == set()

    def test_without_event_loop(self):
        board = EffectBoard()

        board.highlight_object("tree")

        assert board.highlight.label == "👉 tree"
