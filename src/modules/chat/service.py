import logging
from collections.abc import AsyncIterator

from src.config.settings import Settings
from src.modules.chat.credentials import Credentials
from src.modules.chat.schemas import (
    CREDENTIALS_NOT_SET,
    MODEL_NOT_SET,
    ChatRequest,
    ChatResult,
    ErrorKind,
    Message,
    StreamFragment,
)
from src.modules.inference.contracts import ChatBackend
from src.modules.inference.models import DEFAULT_MODEL
from src.modules.inference.service import build_backend

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = "You are a helpful AI assistant."


class CredentialsNotSetError(RuntimeError):
    def __init__(self) -> None:
        super().__init__(CREDENTIALS_NOT_SET)


class ChatBackendError(RuntimeError):
    pass


def describe_error(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


def build_messages(system_prompt: str | None, user_prompt: str) -> list[Message]:
    return [
        Message(role="system", content=system_prompt or DEFAULT_SYSTEM_PROMPT),
        Message(role="user", content=user_prompt),
    ]


class ChatSession:
    def __init__(
        self,
        backend: ChatBackend,
        credentials: Credentials,
        model: str = DEFAULT_MODEL,
    ) -> None:
        self._backend = backend
        self._credentials = credentials
        self._model = model

    @property
    def configuration_error(self) -> str | None:
        if not self._credentials.ready:
            return CREDENTIALS_NOT_SET
        if not self._model:
            return MODEL_NOT_SET
        return None

    @property
    def ready(self) -> bool:
        return self.configuration_error is None

    def _configuration_failure(self) -> ChatResult | None:
        error = self.configuration_error
        if error is None:
            return None
        logger.warning("Completion skipped: %s", error)
        return ChatResult.failure(ErrorKind.CONFIGURATION, error)

    def build_request(self, user_prompt: str, system_prompt: str | None = None) -> ChatRequest:
        return ChatRequest(
            model=self._model,
            messages=build_messages(system_prompt, user_prompt),
        )

    async def complete(self, request: ChatRequest) -> ChatResult:
        """Send ``request`` once and wait for the full reply.

        Never raises for backend or configuration problems; those come back
        as a failed ``ChatResult``.
        """
        failure = self._configuration_failure()
        if failure is not None:
            return failure

        try:
            completion = await self._backend.complete(request, self._credentials)
        except Exception as exc:
            logger.exception("Completion failed for model %s", request.model)
            return ChatResult.failure(ErrorKind.BACKEND, describe_error(exc))

        if not completion.choices:
            logger.info("Model %s returned no choices", request.model)
            return ChatResult()
        return ChatResult(text=completion.choices[0].content)

    async def stream(self, request: ChatRequest) -> AsyncIterator[StreamFragment]:
        """Yield incremental fragments in arrival order.

        Raises ``CredentialsNotSetError`` before reaching the backend, and
        ``ChatBackendError`` for anything the backend raises.
        """
        if not self._credentials.ready:
            raise CredentialsNotSetError()

        try:
            async for fragment in self._backend.stream(request, self._credentials):
                if fragment.is_blank:
                    continue
                yield fragment
        except Exception as exc:
            raise ChatBackendError(describe_error(exc)) from exc

    async def ask(self, prompt: str, system_prompt: str | None = None) -> ChatResult:
        # No request can be built without a model
        failure = self._configuration_failure()
        if failure is not None:
            return failure
        return await self.complete(self.build_request(prompt, system_prompt))


def build_session(settings: Settings) -> ChatSession:
    return ChatSession(
        backend=build_backend(settings.chat_provider),
        credentials=Credentials.from_settings(settings),
        model=settings.chat_model,
    )
