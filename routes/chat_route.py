from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from controllers.chat_controller import handle_chat

router = APIRouter(prefix="/api")


@router.post("/chat")
async def post_chat(request: Request):
    """Return Buddy's next turn for the posted transcript and picture.

    Body: `{messages: [{role, content}], imageUrl: str | null}`.
    Response: `{say, tool, endConversation}`.
    """
    status_code, reply = await handle_chat(request)
    return JSONResponse(reply.to_dict(), status_code=status_code)
