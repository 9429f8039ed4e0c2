"""
LLM Provider Layer for llmlink

This package provides a unified interface for talking to LLM vendors
(Anthropic, OpenAI, Google Gemini, Mistral, OpenRouter, OpenAI-compatible
local/custom endpoints) over the shared network layer.
"""

from llmlink.llm.base import LLMProvider
from llmlink.llm.factory import LLMProviderFactory
from llmlink.llm.anthropic import AnthropicProvider
from llmlink.llm.gemini import GeminiProvider
from llmlink.llm.mistral import MistralProvider
from llmlink.llm.openai_compat import OpenAIProvider
from llmlink.llm.openrouter import OpenRouterProvider
from llmlink.llm.types import (
    ProviderType,
    ProviderConfig,
    LLMMessage,
    LLMRequest,
    LLMResponse,
    LLMUsage,
)
from llmlink.types.errors import (
    ErrorCategory,
    LLMError,
    LLMConnectionError,
    LLMTransportSecurityError,
    LLMTransportError,
    LLMTimeoutError,
    LLMCancelledError,
    LLMAPIError,
    LLMRateLimitError,
    LLMAuthenticationError,
    LLMInvalidResponseError,
)

__all__ = [
    "LLMProvider",
    "LLMProviderFactory",
    "AnthropicProvider",
    "GeminiProvider",
    "MistralProvider",
    "OpenAIProvider",
    "OpenRouterProvider",
    "ProviderType",
    "ProviderConfig",
    "LLMMessage",
    "LLMRequest",
    "LLMResponse",
    "LLMUsage",
    "ErrorCategory",
    "LLMError",
    "LLMConnectionError",
    "LLMTransportSecurityError",
    "LLMTransportError",
    "LLMTimeoutError",
    "LLMCancelledError",
    "LLMAPIError",
    "LLMRateLimitError",
    "LLMAuthenticationError",
    "LLMInvalidResponseError",
]
