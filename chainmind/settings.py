"""Client settings using pydantic-settings.

Loads configuration from environment variables with .env file support.
Every variable is prefixed with ``CHAINMIND_``; the OpenRouter key also
accepts the conventional ``OPENROUTER_API_KEY``.
"""

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "https://api.chainmind.network"
DEFAULT_OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_OPENROUTER_MODEL = "openai/gpt-4"


class Settings(BaseSettings):
    """Client configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CHAINMIND_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,  # Allow both field name and alias
    )

    agent: Literal["Stella", "Matrix", "Lumina", "Nebula"] = Field(
        default="Stella",
        description="Agent persona to talk to",
    )
    api_url: str = Field(
        default=DEFAULT_API_URL,
        description="Base URL of the ChainMind API (http/https; sockets derive ws/wss)",
    )
    llm_provider: Literal["default", "openrouter"] = Field(
        default="default",
        description="Where ask_agent questions are sent",
    )

    # OpenRouter (only read when llm_provider == "openrouter")
    openrouter_api_key: SecretStr | None = Field(
        default=None,
        description="OpenRouter API key",
        validation_alias=AliasChoices(
            "openrouter_api_key",
            "chainmind_openrouter_api_key",
        ),
    )
    openrouter_model: str = Field(
        default=DEFAULT_OPENROUTER_MODEL,
        description="Model routed through OpenRouter",
    )
    openrouter_base_url: str = Field(
        default=DEFAULT_OPENROUTER_BASE_URL,
        description="OpenRouter API base URL",
    )

    request_timeout: float = Field(
        default=60.0,
        gt=0,
        description="HTTP request timeout in seconds",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Log level used by the CLI",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are loaded once and reused.
    """
    return Settings()
