import logging
from collections.abc import AsyncIterator

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from src.modules.chat.credentials import Credentials
from src.modules.chat.schemas import ChatCompletion, ChatRequest, Message, StreamFragment
from src.modules.inference.contracts import ChatBackend
from src.modules.inference.models import ChatModelFactory, get_provider

logger = logging.getLogger(__name__)

ROLE_TO_MESSAGE = {
    "user": HumanMessage,
    "assistant": AIMessage,
    "system": SystemMessage,
}


def to_langchain_messages(messages: list[Message]) -> list[BaseMessage]:
    return [ROLE_TO_MESSAGE[msg.role](content=msg.content) for msg in messages]


class LangChainBackend(ChatBackend):
    """Runs chat requests through a LangChain chat model.

    A new chat model is built for every call, so concurrent calls never share
    a client or its message buffers.
    """

    def __init__(self, factory: ChatModelFactory) -> None:
        self._factory = factory

    def _build_chat_model(self, model: str, credentials: Credentials) -> BaseChatModel:
        return self._factory(model, credentials)

    async def complete(
        self, request: ChatRequest, credentials: Credentials
    ) -> ChatCompletion:
        chat_model = self._build_chat_model(request.model, credentials)
        result = await chat_model.agenerate([to_langchain_messages(request.messages)])
        generations = result.generations[0] if result.generations else []
        logger.info("Model %s returned %d choice(s)", request.model, len(generations))
        return ChatCompletion(
            model=request.model,
            choices=[
                Message(role="assistant", content=generation.text)
                for generation in generations
            ],
        )

    async def stream(
        self, request: ChatRequest, credentials: Credentials
    ) -> AsyncIterator[StreamFragment]:
        chat_model = self._build_chat_model(request.model, credentials)
        announced = False
        async for chunk in chat_model.astream(to_langchain_messages(request.messages)):
            content = chunk.content if isinstance(chunk.content, str) else None
            # The first delta carries the role, like the vendor wire format
            role = None if announced else "assistant"
            announced = True
            yield StreamFragment(role=role, content=content or None)


def build_backend(provider_id: str) -> LangChainBackend:
    provider = get_provider(provider_id)
    logger.info("Using inference provider: %s", provider.name)
    return LangChainBackend(provider.factory)
