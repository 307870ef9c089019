"""Validation helpers for uploaded pictures."""

import io
from pathlib import Path

from PIL import Image, UnidentifiedImageError

MAX_UPLOAD_BYTES = 10 * 1024 * 1024

ALLOWED_IMAGE_EXTENSIONS = {".jpeg", ".jpg", ".png", ".gif", ".webp"}
ALLOWED_IMAGE_FORMATS = {"JPEG", "PNG", "GIF", "WEBP"}


class UploadRejected(ValueError):
    """Raised when an upload is missing, the wrong type, or too large."""


def image_extension(filename: str | None) -> str:
    """Return the lowercase extension if it names an allowed image type."""
    ext = Path(filename or "").suffix.lower()
    if ext not in ALLOWED_IMAGE_EXTENSIONS:
        raise UploadRejected("Only image files allowed")
    return ext


def ensure_image_bytes(data: bytes) -> str:
    """Validate upload bytes and return the detected Pillow format name.

    Raises:
        UploadRejected: If the payload is empty, too large, or not one of
            the accepted image formats.
    """
    if not data:
        raise UploadRejected("Uploaded image is empty")
    if len(data) > MAX_UPLOAD_BYTES:
        raise UploadRejected("Image is too large (max 10MB)")
    try:
        with Image.open(io.BytesIO(data)) as img:
            detected = img.format
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise UploadRejected("Only image files allowed") from exc
    if detected not in ALLOWED_IMAGE_FORMATS:
        raise UploadRejected("Only image files allowed")
    return detected
