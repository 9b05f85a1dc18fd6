"""Construction-time configuration for ChainMindClient."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal
from urllib.parse import urlsplit

from pydantic import BaseModel, Field, field_validator

from chainmind.exceptions import ConfigurationError
from chainmind.settings import (
    DEFAULT_API_URL,
    DEFAULT_OPENROUTER_BASE_URL,
    DEFAULT_OPENROUTER_MODEL,
)

if TYPE_CHECKING:
    from chainmind.settings import Settings

AgentName = Literal["Stella", "Matrix", "Lumina", "Nebula"]
ProviderName = Literal["default", "openrouter"]


class OpenRouterConfig(BaseModel):
    """Credentials and routing for the OpenRouter aggregator."""

    api_key: str = Field(..., min_length=1, description="OpenRouter API key")
    model: str = Field(default=DEFAULT_OPENROUTER_MODEL, description="Model identifier")
    base_url: str = Field(default=DEFAULT_OPENROUTER_BASE_URL, description="API base URL")


class ChainMindConfig(BaseModel):
    """Configuration for the ChainMind client."""

    agent: AgentName = Field(..., description="Agent persona")
    api_url: str = Field(default=DEFAULT_API_URL, description="ChainMind API base URL")
    llm_provider: ProviderName = Field(default="default", description="Question routing")
    openrouter: OpenRouterConfig | None = Field(
        default=None,
        description="Required when llm_provider is 'openrouter'",
    )

    @field_validator("api_url")
    @classmethod
    def _http_scheme(cls, value: str) -> str:
        if urlsplit(value).scheme not in {"http", "https"}:
            raise ValueError("api_url must be an http(s) URL")
        return value

    def require_openrouter(self) -> OpenRouterConfig:
        """Return the OpenRouter settings or fail with ConfigurationError."""
        if self.openrouter is None:
            raise ConfigurationError(
                "OpenRouter configuration is required when using OpenRouter as LLM provider"
            )
        return self.openrouter

    @classmethod
    def from_settings(cls, settings: Settings) -> ChainMindConfig:
        """Build a config from environment-backed settings."""
        openrouter = None
        if settings.openrouter_api_key and settings.openrouter_api_key.get_secret_value():
            openrouter = OpenRouterConfig(
                api_key=settings.openrouter_api_key.get_secret_value(),
                model=settings.openrouter_model,
                base_url=settings.openrouter_base_url,
            )
        return cls(
            agent=settings.agent,
            api_url=settings.api_url,
            llm_provider=settings.llm_provider,
            openrouter=openrouter,
        )
