from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from src.modules.chat.credentials import Credentials
from src.modules.chat.schemas import ChatCompletion, ChatRequest, StreamFragment


class ChatBackend(ABC):
    @abstractmethod
    async def complete(
        self, request: ChatRequest, credentials: Credentials
    ) -> ChatCompletion: ...

    @abstractmethod
    def stream(
        self, request: ChatRequest, credentials: Credentials
    ) -> AsyncIterator[StreamFragment]: ...
