"""Environment-driven settings for the Buddy backend."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

BASE_DIR = Path(__file__).resolve().parent.parent

PLACEHOLDER_API_KEYS = {"your-openai-key-here", "REPLACE_ME"}


def _resolve_dir(value: Optional[str], default: Path) -> Path:
    if not value or not value.strip():
        return default
    path = Path(value).expanduser()
    return path if path.is_absolute() else (BASE_DIR / path).resolve()


@dataclass
class AppConfig:
    """Settings resolved once at application start.

    Attributes:
        openai_api_key: Model credential; None selects offline mode.
        openai_model: Responses API model used for Buddy's replies.
        public_dir: Directory holding the client entry document.
        upload_dir: Directory where uploaded pictures are stored.
        allowed_origins: CORS origins.
        image_fetch_timeout: Seconds allowed to download a remote picture.
    """

    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    public_dir: Path = BASE_DIR / "public"
    upload_dir: Path = BASE_DIR / "public" / "uploads"
    allowed_origins: List[str] = field(default_factory=lambda: ["*"])
    image_fetch_timeout: float = 10.0

    @property
    def model_enabled(self) -> bool:
        return self.openai_api_key is not None

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Read settings from the process environment (after load_dotenv)."""
        key = (os.getenv("OPENAI_API_KEY") or "").strip()
        if not key or key in PLACEHOLDER_API_KEYS:
            key = None
        public_dir = _resolve_dir(os.getenv("PUBLIC_DIR"), BASE_DIR / "public")
        return cls(
            openai_api_key=key,
            openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
            public_dir=public_dir,
            upload_dir=_resolve_dir(os.getenv("UPLOAD_DIR"), public_dir / "uploads"),
            allowed_origins=[o.strip() for o in os.getenv("ALLOWED_ORIGINS", "*").split(",") if o.strip()],
            image_fetch_timeout=float(os.getenv("IMAGE_FETCH_TIMEOUT", "10")),
        )
