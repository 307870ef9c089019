"""FastAPI route for picture uploads."""

import logging
from typing import Optional

from fastapi import APIRouter, File, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse

from controllers.upload_controller import upload_image
from utils.media_validation import UploadRejected

LOGGER = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.post("/upload")
async def post_upload(request: Request, image: Optional[UploadFile] = File(None)):
    """Store an uploaded picture and return its server-relative URL.

    Errors use a plain `{error}` body rather than FastAPI's `{detail}`.
    """
    try:
        return await upload_image(request, image)
    except UploadRejected as exc:
        return JSONResponse({"error": str(exc)}, status_code=400)
    except HTTPException:
        raise
    except Exception as exc:  # pylint: disable=broad-exception-caught
        LOGGER.exception("Upload failed")
        raise HTTPException(status_code=500, detail="Failed to store image.") from exc
