"""Turn-level data shared by the chat endpoint and the client orchestrator."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ToolName(str, Enum):
    """Closed vocabulary of visual tools the assistant may request."""

    HIGHLIGHT_OBJECT = "highlightObject"
    ADD_REWARD_STAR = "addRewardStar"
    SHOW_EMOJI_REACTION = "showEmojiReaction"

    @classmethod
    def lookup(cls, name: Any) -> Optional["ToolName"]:
        """Return the matching tool or None for unknown names."""
        try:
            return cls(name)
        except ValueError:
            return None


@dataclass(frozen=True)
class Message:
    """One transcript entry. Frozen so appended messages cannot change."""

    role: Role
    content: str

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        return cls(role=Role.ASSISTANT, content=content)

    @classmethod
    def from_payload(cls, payload: Any) -> Optional["Message"]:
        """Build a message from wire JSON, or None when the entry is unusable.

        Unknown roles are treated as assistant lines, matching how the
        transcript is labelled for the model.
        """
        if not isinstance(payload, dict):
            return None
        content = payload.get("content")
        if not isinstance(content, str):
            return None
        role = Role.USER if payload.get("role") == Role.USER.value else Role.ASSISTANT
        return cls(role=role, content=content)

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.content}


@dataclass(frozen=True)
class ToolDirective:
    """A requested side effect: tool name plus loosely-typed arguments."""

    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)

    @property
    def kind(self) -> Optional[ToolName]:
        return ToolName.lookup(self.name)

    @classmethod
    def from_payload(cls, payload: Any) -> Optional["ToolDirective"]:
        if not isinstance(payload, dict):
            return None
        name = payload.get("name")
        if not isinstance(name, str) or not name:
            return None
        arguments = payload.get("arguments")
        return cls(name=name, arguments=dict(arguments) if isinstance(arguments, dict) else {})

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "arguments": dict(self.arguments)}


@dataclass(frozen=True)
class TurnResponse:
    """The single per-turn contract produced by the model and the offline script.

    Attributes:
        say: Text Buddy speaks aloud. Always non-empty.
        tool: Optional tool directive for the client to execute.
        end_conversation: True when this turn closes the conversation.
    """

    say: str
    tool: Optional[ToolDirective] = None
    end_conversation: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.say, str) or not self.say:
            raise ValueError("TurnResponse.say must be non-empty text.")

    @classmethod
    def from_payload(cls, payload: Any) -> "TurnResponse":
        """Parse the wire shape; raises ValueError when `say` is unusable."""
        if not isinstance(payload, dict):
            raise ValueError("TurnResponse payload must be an object.")
        return cls(
            say=payload.get("say"),
            tool=ToolDirective.from_payload(payload.get("tool")),
            end_conversation=bool(payload.get("endConversation", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "say": self.say,
            "tool": self.tool.to_dict() if self.tool else None,
            "endConversation": self.end_conversation,
        }
