"""
Type definitions for the LLM provider layer.
"""

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field, model_validator

from llmlink.types.errors import (
    LLMError,
    LLMTimeoutError,
    LLMRateLimitError,
    LLMConnectionError,
    LLMAuthenticationError,
    LLMInvalidResponseError,
)

DEFAULT_MAX_TOKENS = 4096


class ProviderType(str, Enum):
    """Supported LLM vendors."""

    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    GOOGLE = "google"
    MISTRAL = "mistral"
    OPENROUTER = "openrouter"
    LOCAL = "local"
    CUSTOM = "custom"

    @property
    def display_name(self) -> str:
        return PROVIDER_DEFAULTS[self]["display_name"]

    @property
    def default_model(self) -> str:
        return PROVIDER_DEFAULTS[self]["default_model"]

    @property
    def default_base_url(self) -> str:
        return PROVIDER_DEFAULTS[self]["default_base_url"]

    @property
    def available_models(self) -> List[str]:
        return list(PROVIDER_DEFAULTS[self]["available_models"])

    @property
    def requires_api_key(self) -> bool:
        return self not in (ProviderType.LOCAL, ProviderType.CUSTOM)


PROVIDER_DEFAULTS = {
    ProviderType.ANTHROPIC: {
        "display_name": "Anthropic",
        "default_model": "claude-sonnet-4-20250514",
        "default_base_url": "https://api.anthropic.com",
        "available_models": [
            "claude-sonnet-4-20250514",
            "claude-opus-4-20250514",
            "claude-3-5-haiku-20241022",
        ],
    },
    ProviderType.OPENAI: {
        "display_name": "OpenAI",
        "default_model": "gpt-4o",
        "default_base_url": "https://api.openai.com",
        "available_models": ["gpt-4o", "gpt-4o-mini", "gpt-4-turbo", "o1", "o3-mini"],
    },
    ProviderType.GOOGLE: {
        "display_name": "Google",
        "default_model": "gemini-2.5-flash",
        "default_base_url": "https://generativelanguage.googleapis.com",
        "available_models": ["gemini-2.5-flash", "gemini-2.5-pro", "gemini-2.0-flash"],
    },
    ProviderType.MISTRAL: {
        "display_name": "Mistral",
        "default_model": "mistral-large-latest",
        "default_base_url": "https://api.mistral.ai",
        "available_models": ["mistral-large-latest", "mistral-medium-latest", "mistral-small-latest"],
    },
    ProviderType.OPENROUTER: {
        "display_name": "OpenRouter",
        "default_model": "anthropic/claude-3.5-sonnet",
        "default_base_url": "https://openrouter.ai/api",
        "available_models": ["anthropic/claude-3.5-sonnet", "openai/gpt-4o", "google/gemini-2.5-flash"],
    },
    ProviderType.LOCAL: {
        "display_name": "Local (OpenAI-compatible)",
        "default_model": "llama3.1",
        "default_base_url": "http://localhost:11434",
        "available_models": [],
    },
    ProviderType.CUSTOM: {
        "display_name": "Custom (OpenAI-compatible)",
        "default_model": "gpt-4o",
        "default_base_url": "https://api.openai.com",
        "available_models": [],
    },
}


class ProviderConfig(BaseModel):
    """
    Connection settings for one provider instance.

    Missing model/base_url are filled from the provider type's defaults.
    The API key is kept out of repr() so configs can be logged.
    """

    provider: ProviderType = Field(..., description="LLM vendor")
    api_key: Optional[str] = Field(default=None, repr=False, description="API key / secret")
    model: str = Field(default="", description="Model identifier")
    base_url: str = Field(default="", description="Endpoint base URL")
    max_tokens: int = Field(default=DEFAULT_MAX_TOKENS, ge=1, description="Maximum tokens to generate")

    class Config:
        frozen = True  # Immutable

    @model_validator(mode="before")
    @classmethod
    def _fill_provider_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "provider" not in data:
            return data
        provider = ProviderType(data["provider"])
        data = dict(data)
        data["model"] = data.get("model") or provider.default_model
        data["base_url"] = (data.get("base_url") or provider.default_base_url).rstrip("/")
        return data


class LLMMessage(BaseModel):
    """A message in the conversation history."""

    role: str = Field(..., description="Message role: 'user' or 'assistant'")
    content: str = Field(..., description="Message content")

    class Config:
        frozen = True  # Immutable


class LLMRequest(BaseModel):
    """Request to generate an LLM response."""

    messages: List[LLMMessage] = Field(..., description="Conversation history")
    system_prompt: Optional[str] = Field(default=None, description="System-level instruction")
    model: Optional[str] = Field(default=None, description="Model override (defaults to config)")
    max_tokens: Optional[int] = Field(default=None, ge=1, description="Max tokens override (defaults to config)")
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0, description="Sampling temperature")

    class Config:
        frozen = True  # Immutable


class LLMUsage(BaseModel):
    """Token usage reported by the backend."""

    input_tokens: int = 0
    output_tokens: int = 0
    cache_creation_tokens: int = 0
    cache_read_tokens: int = 0

    class Config:
        frozen = True  # Immutable

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    def __str__(self) -> str:
        return f"{self.input_tokens} in / {self.output_tokens} out"


class LLMResponse(BaseModel):
    """Parsed assistant reply."""

    text: Optional[str] = Field(default=None, description="Assistant text (None if empty)")
    model: Optional[str] = Field(default=None, description="Model that answered")
    stop_reason: Optional[str] = Field(default=None, description="Vendor stop/finish reason")
    usage: Optional[LLMUsage] = Field(default=None, description="Token usage")

    class Config:
        frozen = True  # Immutable


__all__ = [
    "DEFAULT_MAX_TOKENS",
    "ProviderType",
    "PROVIDER_DEFAULTS",
    "ProviderConfig",
    "LLMMessage",
    "LLMRequest",
    "LLMUsage",
    "LLMResponse",
    "LLMError",
    "LLMTimeoutError",
    "LLMRateLimitError",
    "LLMConnectionError",
    "LLMAuthenticationError",
    "LLMInvalidResponseError",
]
