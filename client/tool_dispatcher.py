"""Dispatch Buddy's tool directives to visual effects."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional

from client.visual_effects import EffectBoard
from models.turn_models import ToolDirective, ToolName

LOGGER = logging.getLogger(__name__)

DEFAULT_LABEL = "that"
DEFAULT_REASON = "Great job!"
DEFAULT_EMOJI = "⭐"


def _text_arg(arguments: Mapping[str, Any], key: str, default: str) -> str:
    value = arguments.get(key)
    if isinstance(value, str) and value.strip():
        return value
    if value is not None and not isinstance(value, (dict, list)):
        return str(value)
    return default


class ToolDispatcher:
    """Run the effect for a tool directive; unknown or absent tools do nothing."""

    def __init__(self, board: Optional[EffectBoard] = None) -> None:
        self.board = board or EffectBoard()
        self._handlers: Dict[ToolName, Callable[[Mapping[str, Any]], None]] = {
            ToolName.HIGHLIGHT_OBJECT: self._highlight_object,
            ToolName.ADD_REWARD_STAR: self._add_reward_star,
            ToolName.SHOW_EMOJI_REACTION: self._show_emoji_reaction,
        }
        missing = set(ToolName) - set(self._handlers)
        if missing:
            raise TypeError(f"No handler for tools: {sorted(t.value for t in missing)}")

    def execute(self, directive: Optional[ToolDirective]) -> None:
        if directive is None:
            return
        kind = directive.kind
        if kind is None:
            LOGGER.info("Ignoring unknown tool %r", directive.name)
            return
        self._handlers[kind](directive.arguments or {})

    def reset(self) -> None:
        self.board.reset()

    def _highlight_object(self, arguments: Mapping[str, Any]) -> None:
        self.board.highlight_object(_text_arg(arguments, "label", DEFAULT_LABEL))

    def _add_reward_star(self, arguments: Mapping[str, Any]) -> None:
        self.board.add_reward_star(_text_arg(arguments, "reason", DEFAULT_REASON))

    def _show_emoji_reaction(self, arguments: Mapping[str, Any]) -> None:
        self.board.show_emoji_reaction(_text_arg(arguments, "emoji", DEFAULT_EMOJI))
