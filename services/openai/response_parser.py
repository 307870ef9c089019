"""Helpers to turn Responses API output into a TurnResponse."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from models.turn_models import ToolDirective, TurnResponse

LOGGER = logging.getLogger(__name__)

_LEADING_JSON_FENCE = re.compile(r"^```json\s*", re.IGNORECASE)
_LEADING_FENCE = re.compile(r"^```\s*")
_TRAILING_FENCE = re.compile(r"```\s*$")


class ReplyPayload(BaseModel):
    """Schema for the JSON object Buddy is instructed to return."""

    say: str = Field(min_length=1, strict=True)
    tool: Optional[Dict[str, Any]] = None
    endConversation: bool = False

    @field_validator("tool", mode="before")
    @classmethod
    def _drop_unusable_tool(cls, value: Any) -> Optional[Dict[str, Any]]:
        # A tool without a string name cannot be dispatched; treat it as absent.
        if isinstance(value, dict) and isinstance(value.get("name"), str):
            return value
        return None

    @field_validator("say")
    @classmethod
    def _say_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("say must contain text")
        return value

    @field_validator("endConversation", mode="before")
    @classmethod
    def _only_true_ends(cls, value: Any) -> bool:
        # Anything other than an explicit true keeps the conversation going.
        if isinstance(value, str):
            return value.strip().lower() == "true"
        return value is True


def strip_code_fences(raw: str) -> str:
    """Remove a surrounding ```json ... ``` wrapper if the model added one."""
    text = raw.strip()
    text = _LEADING_JSON_FENCE.sub("", text)
    text = _LEADING_FENCE.sub("", text)
    text = _TRAILING_FENCE.sub("", text)
    return text.strip()


def parse_turn_response(raw: str) -> TurnResponse:
    """Parse the model's text reply, degrading to plain speech when it is not valid JSON.

    Args:
        raw: Text output from the model. Must be non-empty.

    Returns:
        The parsed TurnResponse, or `{say: raw, tool: None, endConversation: False}`
        when the text is not a JSON object with a non-empty string `say`.
    """
    text = strip_code_fences(raw)
    try:
        payload = ReplyPayload.model_validate(json.loads(text))
    except (json.JSONDecodeError, ValidationError) as exc:
        LOGGER.error("Could not parse model reply as a turn: %s", exc)
        LOGGER.error("Raw response: %s", text)
        return TurnResponse(say=text or raw)
    return TurnResponse(
        say=payload.say,
        tool=ToolDirective.from_payload(payload.tool),
        end_conversation=payload.endConversation,
    )


def extract_text(response: Any) -> str:
    """Extract the first output_text entry from the response."""
    for item in getattr(response, "output", None) or []:
        if getattr(item, "type", None) != "message":
            continue
        for content in getattr(item, "content", None) or []:
            if getattr(content, "type", None) == "output_text":
                return getattr(content, "text", "") or ""
    return getattr(response, "output_text", "") or ""


def extract_usage(response: Any) -> Dict[str, Optional[int]]:
    """Return token usage if present."""
    usage = getattr(response, "usage", None)
    return {
        "input_tokens": getattr(usage, "input_tokens", None) if usage else None,
        "output_tokens": getattr(usage, "output_tokens", None) if usage else None,
    }
