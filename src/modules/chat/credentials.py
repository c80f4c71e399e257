from dataclasses import dataclass

from src.config.settings import Settings


def is_ready(endpoint: str | None, api_key: str | None) -> bool:
    return bool(endpoint) and bool(api_key)


@dataclass(frozen=True)
class Credentials:
    endpoint: str | None
    api_key: str | None

    @property
    def ready(self) -> bool:
        return is_ready(self.endpoint, self.api_key)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Credentials":
        return cls(
            endpoint=settings.azure_openai_endpoint,
            api_key=settings.azure_openai_api_key,
        )

    def __repr__(self) -> str:
        # Never render the API key
        return f"Credentials(endpoint={self.endpoint!r}, api_key={'***' if self.api_key else None})"
