from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    azure_openai_endpoint: str = ""
    azure_openai_api_key: str = ""
    chat_provider: str = "azure"
    chat_model: str = Field("DeepSeek-R1", min_length=1)
    # Return HTTP 200 for failed completions, with the error text as the body
    legacy_error_status: bool = False
    log_level: str = "INFO"
    app_host: str = "0.0.0.0"
    app_port: int = 8000


settings = Settings()
