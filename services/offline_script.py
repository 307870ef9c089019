"""Scripted conversation used when no model credential is configured.

The script follows the same arc as the model persona: an excited opening,
two observation questions with rewards, a storytelling prompt and a
closing line that ends the conversation. Once the script runs out the
closing entry repeats, so every offline conversation ends by the sixth
child turn.
"""

from __future__ import annotations

from typing import Iterable, Tuple

from models.turn_models import Message, Role, ToolDirective, ToolName, TurnResponse


def _tool(name: ToolName, **arguments: str) -> ToolDirective:
    return ToolDirective(name=name.value, arguments=arguments)


OFFLINE_SCRIPT: Tuple[TurnResponse, ...] = (
    TurnResponse(
        say="Wow! Look at this picture! It's so colorful and fun! What is the first thing you see?",
        tool=_tool(ToolName.SHOW_EMOJI_REACTION, emoji="😍"),
    ),
    TurnResponse(
        say="Oh cool! Great eyes! I love that you noticed that! What color is it?",
        tool=_tool(ToolName.ADD_REWARD_STAR, reason="Great observation!"),
    ),
    TurnResponse(
        say="Nice! That's a beautiful color! Can you find something round in the picture?",
        tool=_tool(ToolName.SHOW_EMOJI_REACTION, emoji="🎨"),
    ),
    TurnResponse(
        say="You're amazing at this! What do you think is happening in the picture?",
        tool=_tool(ToolName.ADD_REWARD_STAR, reason="Super color spotter!"),
    ),
    TurnResponse(
        say="What a fun story! If you could jump into this picture, what would you do?",
        tool=_tool(ToolName.SHOW_EMOJI_REACTION, emoji="✨"),
    ),
    TurnResponse(
        say=(
            "Ha ha, that sounds like an adventure! You did an awesome job today! "
            "You're a real picture detective! Bye bye, superstar!"
        ),
        tool=_tool(ToolName.ADD_REWARD_STAR, reason="Amazing picture detective!"),
        end_conversation=True,
    ),
)


def offline_turn(user_message_count: int) -> TurnResponse:
    """Return the scripted reply for the given number of child messages."""
    index = min(max(int(user_message_count), 0), len(OFFLINE_SCRIPT) - 1)
    return OFFLINE_SCRIPT[index]


def offline_reply(messages: Iterable[Message]) -> TurnResponse:
    """Return the scripted reply for a transcript."""
    return offline_turn(sum(1 for msg in messages if msg.role is Role.USER))
