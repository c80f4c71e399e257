"""Pytest fixtures for chat tests."""

from typing import AsyncGenerator, AsyncIterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.main import app
from src.modules.chat.credentials import Credentials
from src.modules.chat.router import get_chat_session
from src.modules.chat.schemas import ChatCompletion, ChatRequest, Message, StreamFragment
from src.modules.chat.service import ChatSession
from src.modules.inference.contracts import ChatBackend


class StubBackend(ChatBackend):
    """In-memory backend recording every request it receives."""

    def __init__(
        self,
        choices: list[str] | None = None,
        fragments: list[StreamFragment] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.choices = choices if choices is not None else ["Hello!"]
        self.fragments = fragments or []
        self.error = error
        self.requests: list[ChatRequest] = []

    async def complete(
        self, request: ChatRequest, credentials: Credentials
    ) -> ChatCompletion:
        self.requests.append(request)
        if self.error:
            raise self.error
        return ChatCompletion(
            model=request.model,
            choices=[Message(role="assistant", content=c) for c in self.choices],
        )

    async def stream(
        self, request: ChatRequest, credentials: Credentials
    ) -> AsyncIterator[StreamFragment]:
        self.requests.append(request)
        for fragment in self.fragments:
            yield fragment
        if self.error:
            raise self.error


@pytest.fixture
def ready_credentials() -> Credentials:
    return Credentials(endpoint="https://example.inference.ai.azure.com", api_key="secret")


@pytest.fixture
def missing_credentials() -> Credentials:
    return Credentials(endpoint="", api_key=None)


@pytest.fixture
def make_backend():
    """Factory for stub backends: ``make_backend(choices=..., fragments=..., error=...)``."""
    return StubBackend


@pytest.fixture
def make_session(ready_credentials: Credentials):
    """Factory for sessions; credentials default to a ready pair."""

    def _make(
        backend: ChatBackend,
        credentials: Credentials | None = None,
        model: str = "test-model",
    ) -> ChatSession:
        return ChatSession(backend, credentials or ready_credentials, model=model)

    return _make


@pytest.fixture
def backend(make_backend) -> StubBackend:
    return make_backend()


@pytest.fixture
def session(make_session, backend: StubBackend) -> ChatSession:
    return make_session(backend)


@pytest.fixture
def use_session():
    """Route the chat endpoints to the given session for the rest of the test."""

    def _use(session: ChatSession) -> None:
        app.dependency_overrides[get_chat_session] = lambda: session

    return _use


@pytest_asyncio.fixture
async def client(session: ChatSession, use_session) -> AsyncGenerator[AsyncClient, None]:
    """Test client whose chat endpoints use the stub-backed session."""
    use_session(session)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
