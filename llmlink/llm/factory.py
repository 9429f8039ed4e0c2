"""
Factory for creating LLM provider instances.

Supports provider selection from a ProviderConfig or from environment variables,
and wires the network layer (configuration snapshot, optional host proxy).
"""

import os
from typing import Dict, Optional, Type

import httpx

from llmlink.config.logging_config import get_logger
from llmlink.config.network import NetworkConfig, load_network_config
from llmlink.llm.anthropic import AnthropicProvider
from llmlink.llm.base import LLMProvider
from llmlink.llm.gemini import GeminiProvider
from llmlink.llm.mistral import MistralProvider
from llmlink.llm.openai_compat import OpenAIProvider
from llmlink.llm.openrouter import OpenRouterProvider
from llmlink.llm.types import DEFAULT_MAX_TOKENS, ProviderConfig, ProviderType
from llmlink.network.host_proxy import (
    HostProxyAdapter,
    ServiceHostProxyAdapter,
    SystemProxyService,
)

logger = get_logger(__name__)


PROVIDER_CLASSES: Dict[ProviderType, Type[LLMProvider]] = {
    ProviderType.ANTHROPIC: AnthropicProvider,
    ProviderType.OPENAI: OpenAIProvider,
    ProviderType.GOOGLE: GeminiProvider,
    ProviderType.MISTRAL: MistralProvider,
    ProviderType.OPENROUTER: OpenRouterProvider,
    ProviderType.LOCAL: OpenAIProvider,
    ProviderType.CUSTOM: OpenAIProvider,
}


class LLMProviderFactory:
    """
    Factory for creating LLM provider instances.

    Supports:
    - 'anthropic': Anthropic Messages API (requires ANTHROPIC_API_KEY)
    - 'openai': OpenAI Chat Completions (requires OPENAI_API_KEY)
    - 'google': Google Gemini (requires GOOGLE_API_KEY)
    - 'mistral': Mistral (requires MISTRAL_API_KEY)
    - 'openrouter': OpenRouter.ai (requires OPENROUTER_API_KEY)
    - 'local' / 'custom': Any OpenAI-compatible endpoint (key optional)
    """

    @staticmethod
    def parse_provider_type(provider_name: str) -> ProviderType:
        """
        Map a provider name to ProviderType (case-insensitive).

        Raises:
            ValueError: Unknown provider name
        """
        try:
            return ProviderType(provider_name.lower().strip())
        except ValueError:
            supported = ", ".join(f"'{p.value}'" for p in ProviderType)
            raise ValueError(
                f"Unknown LLM provider: '{provider_name}'. "
                f"Supported providers: {supported}"
            ) from None

    @staticmethod
    def default_host_proxy(network_config: NetworkConfig) -> Optional[HostProxyAdapter]:
        """Host proxy capability to inject: OS proxy settings when opted in, else absent."""
        if network_config.use_system_proxy:
            return ServiceHostProxyAdapter(SystemProxyService())
        return None

    @staticmethod
    def create_provider(
        config: ProviderConfig,
        network_config: Optional[NetworkConfig] = None,
        host_proxy: Optional[HostProxyAdapter] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> LLMProvider:
        """
        Create LLM provider instance.

        Args:
            config: Provider configuration
            network_config: Network snapshot (None = load from environment)
            host_proxy: Host proxy capability (None = derived from network_config)
            transport: Custom httpx transport (for testing)

        Returns:
            LLMProvider: Initialized provider instance

        Raises:
            ValueError: Missing API key for a provider that requires one
        """
        if config.provider.requires_api_key and not config.api_key:
            raise ValueError(f"{config.provider.display_name} API key is required")

        network_config = network_config or load_network_config()
        if host_proxy is None:
            host_proxy = LLMProviderFactory.default_host_proxy(network_config)

        provider_class = PROVIDER_CLASSES[config.provider]
        logger.info(f"🤖 LLM Factory: Creating {provider_class.__name__} for {config!r}")

        return provider_class(
            config,
            network_config=network_config,
            host_proxy=host_proxy,
            transport=transport,
        )

    @staticmethod
    def create_from_env(
        provider_name: str,
        api_key: Optional[str] = None,
        network_config: Optional[NetworkConfig] = None,
        host_proxy: Optional[HostProxyAdapter] = None,
    ) -> LLMProvider:
        """
        Create provider from environment variables.

        Environment Variables:
            <PROVIDER>_API_KEY: API key (e.g. ANTHROPIC_API_KEY)
            LLM_MODEL: Model override (default: provider default)
            LLM_BASE_URL: Endpoint override (default: provider default)
            LLM_MAX_TOKENS: Max tokens (default: 4096)

        Args:
            provider_name: Provider name ('anthropic', 'openai', ...)
            api_key: API key (or None to read from environment)
            network_config: Network snapshot (None = load from environment)
            host_proxy: Host proxy capability override

        Returns:
            LLMProvider: Initialized provider instance

        Raises:
            ValueError: Invalid provider name or missing configuration
        """
        provider_type = LLMProviderFactory.parse_provider_type(provider_name)

        env_var = f"{provider_type.value.upper()}_API_KEY"
        api_key = api_key or os.getenv(env_var)
        if provider_type.requires_api_key and not api_key:
            raise ValueError(
                f"{provider_type.display_name} API key not found. "
                f"Set {env_var} environment variable or pass api_key parameter."
            )

        max_tokens_raw = os.getenv("LLM_MAX_TOKENS", str(DEFAULT_MAX_TOKENS))
        try:
            max_tokens = int(max_tokens_raw)
        except ValueError:
            raise ValueError(f"LLM_MAX_TOKENS must be an integer, got '{max_tokens_raw}'") from None

        config = ProviderConfig(
            provider=provider_type,
            api_key=api_key,
            model=os.getenv("LLM_MODEL"),
            base_url=os.getenv("LLM_BASE_URL"),
            max_tokens=max_tokens,
        )

        return LLMProviderFactory.create_provider(
            config,
            network_config=network_config,
            host_proxy=host_proxy,
        )
