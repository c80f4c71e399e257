import json
import logging

from fastapi import APIRouter, Depends, Form, Response
from fastapi.responses import PlainTextResponse, StreamingResponse

from src.config.settings import settings
from src.modules.chat.schemas import ERROR_PREFIX, ChatResult, ErrorKind
from src.modules.chat.service import (
    ChatBackendError,
    ChatSession,
    build_session,
)
from src.modules.chat.transcript import StreamTranscript

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_STATUS = {
    ErrorKind.CONFIGURATION: 503,
    ErrorKind.BACKEND: 502,
}


def get_chat_session() -> ChatSession:
    return build_session(settings)


def _status_for(kind: ErrorKind | None) -> int:
    if kind is None or settings.legacy_error_status:
        return 200
    return ERROR_STATUS[kind]


def _event(payload: dict) -> str:
    return f"data: {json.dumps(payload)}\n\n"


@router.post("", response_class=PlainTextResponse)
async def chat(
    prompt: str = Form(...),
    system_prompt: str | None = Form(None, alias="systemPrompt"),
    session: ChatSession = Depends(get_chat_session),
) -> PlainTextResponse:
    result = await session.ask(prompt, system_prompt)
    kind = result.error.kind if result.error else None
    return PlainTextResponse(result.render(), status_code=_status_for(kind))


@router.post("/stream")
async def chat_stream(
    prompt: str = Form(...),
    system_prompt: str | None = Form(None, alias="systemPrompt"),
    session: ChatSession = Depends(get_chat_session),
) -> Response:
    error = session.configuration_error
    if error is not None:
        logger.warning("Streaming skipped: %s", error)
        return PlainTextResponse(
            ERROR_PREFIX + error, status_code=_status_for(ErrorKind.CONFIGURATION)
        )

    request = session.build_request(prompt, system_prompt)

    async def event_stream():
        transcript = StreamTranscript()
        try:
            async for fragment in session.stream(request):
                for event in transcript.feed(fragment):
                    key = "role" if event.kind == "role" else "token"
                    yield _event({key: event.value})
        except ChatBackendError as exc:
            logger.exception("Streaming failed for model %s", request.model)
            yield _event({"error": str(exc)})
        else:
            logger.info("Streamed %d characters from %s", len(transcript.text), request.model)
        yield "data: [DONE]\n\n"

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
            "Content-Encoding": "none",
        },
    )
