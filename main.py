import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, HTMLResponse
from fastapi.staticfiles import StaticFiles
from openai import AsyncOpenAI

from routes.chat_route import router as chat_router
from routes.upload_route import router as upload_router
from services.chat_service import ChatService
from services.openai.buddy_model import BuddyModelAdapter
from services.openai.media_inputs import ImageResolver
from services.upload_store import UploadStore
from utils.app_config import AppConfig

load_dotenv()  # Load environment variables from .env file if present

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
LOGGER = logging.getLogger(__name__)

NO_STORE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, private",
    "Expires": "0",
    "Pragma": "no-cache",
}


def build_chat_service(config: AppConfig) -> ChatService:
    """Pick model-backed or offline mode from the configured credential."""
    if not config.model_enabled:
        LOGGER.warning("No OPENAI_API_KEY found - using offline conversation mode.")
        return ChatService()
    try:
        client = AsyncOpenAI(api_key=config.openai_api_key)
    except Exception as exc:
        raise RuntimeError("Failed to initialize OpenAI Async client") from exc
    resolver = ImageResolver(config.upload_dir, fetch_timeout=config.image_fetch_timeout)
    LOGGER.info("OpenAI connected - %s vision mode active.", config.openai_model)
    return ChatService(BuddyModelAdapter(client, resolver, model=config.openai_model))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Close the OpenAI async client, if one was created, on shutdown."""
    yield
    adapter = getattr(app.state.chat_service, "model_adapter", None)
    if isinstance(adapter, BuddyModelAdapter):
        await adapter.client.close()


def create_app(config: Optional[AppConfig] = None, chat_service: Optional[ChatService] = None) -> FastAPI:
    """
    Create and configure the FastAPI application instance.

    The chat mode is decided here, once, so the app is usable with or
    without running the lifespan (e.g. under an in-process ASGI transport).
    """
    config = config or AppConfig.from_env()
    app = FastAPI(title="Picture Buddy", lifespan=lifespan)

    app.state.config = config
    app.state.chat_service = chat_service or build_chat_service(config)
    app.state.upload_store = UploadStore(config.upload_dir)
    app.state.upload_store.ensure_dir()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def no_store(request: Request, call_next):
        response = await call_next(request)
        response.headers.update(NO_STORE_HEADERS)
        return response

    app.mount("/uploads", StaticFiles(directory=config.upload_dir), name="uploads")
    if config.public_dir.exists():
        app.mount("/public", StaticFiles(directory=config.public_dir), name="public")

    @app.get("/health")
    async def health(request: Request):
        """Report liveness and whether replies come from the model or the script."""
        return {"ok": True, "mode": request.app.state.chat_service.mode}

    app.include_router(chat_router)
    app.include_router(upload_router)

    @app.get("/{full_path:path}", include_in_schema=False)
    async def serve_index(full_path: str):
        """Serve the client entry document for every non-API route."""
        index_path = config.public_dir / "index.html"
        if not index_path.exists():
            return HTMLResponse("<!doctype html><h1>Picture Buddy is running.</h1>")
        return FileResponse(index_path)

    return app


app = create_app()
