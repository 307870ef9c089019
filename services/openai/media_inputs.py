"""Utilities to build the Responses API input array for a Buddy turn."""

from __future__ import annotations

import base64
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import aiofiles
import httpx

from models.turn_models import Message
from services.openai.prompts import CONTINUE_INSTRUCTION, START_INSTRUCTION, transcript_block

LOGGER = logging.getLogger(__name__)

DATA_URL_PATTERN = re.compile(r"^data:([a-zA-Z0-9]+/[a-zA-Z0-9\-.+]+);base64,(.+)$", re.DOTALL)
UPLOAD_PREFIX = "/uploads/"
EXTENSION_MEDIA_TYPES = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
}


def should_attach_image(image_url: Optional[str], messages: Sequence[Message]) -> bool:
    """The picture rides along only while the transcript has at most one message."""
    return bool(image_url) and len(messages) <= 1


def to_data_url(media_type: str, payload: bytes) -> str:
    return f"data:{media_type};base64,{base64.b64encode(payload).decode('ascii')}"


class ImageResolver:
    """Turn an image reference into a data URL the model can read."""

    def __init__(self, upload_dir: Path, fetch_timeout: float = 10.0) -> None:
        self.upload_dir = Path(upload_dir)
        self.fetch_timeout = fetch_timeout

    async def resolve(self, image_url: str) -> Optional[str]:
        """Return a data URL for the reference, or None if it cannot be loaded."""
        if image_url.startswith("data:"):
            match = DATA_URL_PATTERN.match(image_url)
            if not match:
                LOGGER.warning("Ignoring malformed data URL image reference")
                return None
            return image_url
        if image_url.startswith("http"):
            return await self._fetch_remote(image_url)
        if image_url.startswith(UPLOAD_PREFIX):
            return await self._read_upload(image_url)
        LOGGER.warning("Unsupported image reference: %.80s", image_url)
        return None

    async def _fetch_remote(self, image_url: str) -> Optional[str]:
        try:
            async with httpx.AsyncClient(timeout=self.fetch_timeout, follow_redirects=True) as client:
                response = await client.get(image_url)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            LOGGER.warning("Could not fetch image URL: %s", exc)
            return None
        content_type = response.headers.get("content-type") or "image/jpeg"
        return to_data_url(content_type.split(";", 1)[0].strip(), response.content)

    async def _read_upload(self, image_url: str) -> Optional[str]:
        filename = Path(image_url[len(UPLOAD_PREFIX):]).name
        path = self.upload_dir / filename
        if not filename or not path.is_file():
            LOGGER.warning("Uploaded image not found: %s", image_url)
            return None
        async with aiofiles.open(path, "rb") as fh:
            payload = await fh.read()
        ext = path.suffix.lower().lstrip(".")
        return to_data_url(EXTENSION_MEDIA_TYPES.get(ext, "image/jpeg"), payload)


def _text_message(role: str, text: str) -> Dict[str, Any]:
    return {"type": "message", "role": role, "content": [{"type": "input_text", "text": text}]}


def build_opening_inputs(system_prompt: str, image_data_url: Optional[str], messages: Sequence[Message]) -> List[Dict[str, Any]]:
    """Inputs for the first model turn: persona, the picture once, then the latest text."""
    latest = messages[-1].content if messages else START_INSTRUCTION
    content: List[Dict[str, Any]] = []
    if image_data_url:
        content.append({"type": "input_image", "image_url": image_data_url})
    content.append({"type": "input_text", "text": latest})
    return [
        _text_message("system", system_prompt),
        {"type": "message", "role": "user", "content": content},
    ]


def build_history_inputs(system_prompt: str, messages: Sequence[Message]) -> List[Dict[str, Any]]:
    """Inputs for later turns: persona, the labelled transcript, then the reply instruction."""
    history = transcript_block((msg.role.value, msg.content) for msg in messages)
    return [
        _text_message("system", system_prompt),
        {
            "type": "message",
            "role": "user",
            "content": [
                {"type": "input_text", "text": history},
                {"type": "input_text", "text": CONTINUE_INSTRUCTION},
            ],
        },
    ]
