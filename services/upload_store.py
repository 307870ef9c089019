"""Save uploaded pictures so a conversation can reference them by URL.

Files are written under the configured upload directory as
`image_<epoch-ms><ext>` and served back at `/uploads/<filename>`.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Dict

import aiofiles

from utils.media_validation import ensure_image_bytes, image_extension


class UploadStore:
    """Persist validated image uploads to disk."""

    def __init__(self, upload_dir: Path) -> None:
        self.upload_dir = Path(upload_dir)

    def ensure_dir(self) -> None:
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    async def save(self, original_filename: str | None, data: bytes) -> Dict[str, str]:
        """Validate and store an upload.

        Returns:
            `{"url": "/uploads/<filename>", "filename": <filename>}`.

        Raises:
            UploadRejected: If the file is not an accepted image.
        """
        ext = image_extension(original_filename)
        ensure_image_bytes(data)

        self.ensure_dir()
        filename = f"image_{int(time.time() * 1000)}{ext}"
        path = self.upload_dir / filename
        async with aiofiles.open(path, "wb") as fh:
            await fh.write(data)
        return {"url": f"/uploads/{filename}", "filename": filename}
