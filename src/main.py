import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from src.config.settings import settings
from src.modules.chat.credentials import Credentials
from src.modules.chat.router import router as chat_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=settings.log_level)
    if not Credentials.from_settings(settings).ready:
        logger.warning(
            "AZURE_OPENAI_ENDPOINT and AZURE_OPENAI_API_KEY are not set; "
            "chat requests will fail until they are"
        )
    logger.info("Chat provider: %s, model: %s", settings.chat_provider, settings.chat_model)
    yield


app = FastAPI(title="Chat Completions", lifespan=lifespan)

# API routes
app.include_router(chat_router, prefix="/api/chat", tags=["chat"])

# Static files
static_dir = Path(__file__).parent / "static"
app.mount("/static", StaticFiles(directory=static_dir), name="static")


@app.get("/")
async def root():
    return FileResponse(static_dir / "index.html")


@app.get("/health")
async def health():
    return {"status": "ok"}
