from collections.abc import Callable
from dataclasses import dataclass

from langchain_azure_ai.chat_models import AzureAIChatCompletionsModel
from langchain_core.language_models import BaseChatModel
from langchain_huggingface import ChatHuggingFace, HuggingFaceEndpoint

from src.modules.chat.credentials import Credentials

ChatModelFactory = Callable[[str, Credentials], BaseChatModel]


def _azure_chat_model(model: str, credentials: Credentials) -> BaseChatModel:
    return AzureAIChatCompletionsModel(
        endpoint=credentials.endpoint,
        credential=credentials.api_key,
        model=model,
    )


def _huggingface_chat_model(model: str, credentials: Credentials) -> BaseChatModel:
    # The endpoint serves a single model, so `model` is unused here
    llm = HuggingFaceEndpoint(
        endpoint_url=credentials.endpoint,
        huggingfacehub_api_token=credentials.api_key,
        task="text-generation",
    )
    return ChatHuggingFace(llm=llm)


@dataclass(frozen=True)
class ProviderInfo:
    id: str
    name: str
    factory: ChatModelFactory


PROVIDERS: dict[str, ProviderInfo] = {p.id: p for p in [
    ProviderInfo("azure", "Azure AI Inference", _azure_chat_model),
    ProviderInfo("huggingface", "Hugging Face Inference Endpoint", _huggingface_chat_model),
]}

DEFAULT_PROVIDER = "azure"
DEFAULT_MODEL = "DeepSeek-R1"


def is_provider_allowed(provider_id: str) -> bool:
    return provider_id in PROVIDERS


def get_provider(provider_id: str) -> ProviderInfo:
    if not is_provider_allowed(provider_id):
        raise ValueError(
            f"Provider '{provider_id}' is not supported. "
            f"Choose one of: {', '.join(PROVIDERS)}"
        )
    return PROVIDERS[provider_id]
