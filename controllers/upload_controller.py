"""Controller for picture uploads."""

from typing import Any, Dict, Optional

from fastapi import Request, UploadFile

from services.upload_store import UploadStore
from utils.media_validation import MAX_UPLOAD_BYTES, UploadRejected


async def upload_image(request: Request, image: Optional[UploadFile]) -> Dict[str, Any]:
    """Validate and store an uploaded picture.

    Args:
        request: FastAPI Request (used to access app.state.upload_store).
        image: The multipart `image` field, if present.

    Returns:
        `{"url", "filename"}` for the stored picture.

    Raises:
        UploadRejected: If no file was sent or the file is not an accepted image.
    """
    if image is None or not image.filename:
        raise UploadRejected("No image uploaded")

    # Read one byte past the limit so oversize files are detected without reading them whole.
    data = await image.read(MAX_UPLOAD_BYTES + 1)
    store: UploadStore = request.app.state.upload_store
    return await store.save(image.filename, data)
