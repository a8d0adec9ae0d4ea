from functools import lru_cache
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration shared by the vendor clients."""

    #----------------------------------------------------------
    # Credentials
    #----------------------------------------------------------
    openai_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Bearer token for the OpenAI API.",
    )
    stability_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Bearer token for the Stability AI API.",
    )
    picogen_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Value of the API-Token header sent to Picogen.",
    )

    #----------------------------------------------------------
    # Endpoints
    #----------------------------------------------------------
    openai_base_url: str = Field(default="https://api.openai.com")
    stability_base_url: str = Field(default="https://api.stability.ai")
    picogen_base_url: str = Field(default="https://api.picogen.io")

    #----------------------------------------------------------
    # Behaviour
    #----------------------------------------------------------
    output_dir: str = Field(
        default="images",
        description="Directory generated and downloaded images are written to.",
    )
    poll_interval: float = Field(
        default=5.0,
        ge=0.0,
        description="Seconds between Picogen job status checks.",
    )
    request_timeout: float = Field(
        default=300.0,
        gt=0.0,
        description="Timeout in seconds for a single HTTP request.",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
