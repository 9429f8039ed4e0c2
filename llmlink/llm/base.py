"""
Abstract base class for LLM providers.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx

from llmlink.config.logging_config import get_logger
from llmlink.config.network import NetworkConfig
from llmlink.llm.types import LLMRequest, LLMResponse, ProviderConfig
from llmlink.network.classifier import extract_error_message
from llmlink.network.executor import RequestExecutor
from llmlink.network.host_proxy import HostProxyAdapter
from llmlink.network.resolver import ProxyResolver, TransportPolicy
from llmlink.types.errors import LLMInvalidResponseError

logger = get_logger(__name__)


class LLMProvider(ABC):
    """
    Abstract base class for LLM providers.

    Resolves the transport policy once at construction and owns one
    RequestExecutor built from it. Subclasses supply identity, auth headers
    and the vendor wire format; they never touch proxy or transport logic.
    """

    def __init__(
        self,
        config: ProviderConfig,
        network_config: Optional[NetworkConfig] = None,
        host_proxy: Optional[HostProxyAdapter] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize LLM provider.

        Args:
            config: Provider configuration (endpoint, credentials, tuning)
            network_config: Network configuration snapshot (proxy, timeouts)
            host_proxy: Optional host proxy capability (None = absent)
            transport: Custom httpx transport (for testing)
        """
        self.config = config
        self.network_config = network_config or NetworkConfig()

        resolver = ProxyResolver(self.network_config, host_proxy)
        self._policy = resolver.resolve(self.target_origin)

        self.executor = RequestExecutor(
            self,
            base_url=config.base_url,
            policy=self._policy,
            config=self.network_config,
            transport=transport,
        )

        logger.info(f"🤖 LLM [{self.provider_id}]: Initialized with base URL {config.base_url} (model {config.model})")

    # -- Contract ------------------------------------------------------------

    @property
    @abstractmethod
    def provider_id(self) -> str:
        """Stable identifier used in error messages and logs."""

    def auth_header_name(self) -> Optional[str]:
        """Authentication header name, or None if the provider sends none."""
        return None

    def auth_header_value(self) -> Optional[str]:
        """Authentication header value paired with auth_header_name()."""
        return None

    def apply_auth_headers(self, headers: Dict[str, str]) -> None:
        """Add the provider's authentication header(s) to a request."""
        name = self.auth_header_name()
        if name is not None:
            headers[name] = self.auth_header_value() or ""

    def extract_error_message(self, body: Optional[str]) -> str:
        """Read the vendor's error envelope (generic JSON shapes by default)."""
        return extract_error_message(body)

    @abstractmethod
    async def generate(self, request: LLMRequest) -> LLMResponse:
        """
        Send a conversation and return the assistant's reply.

        Args:
            request: LLMRequest with messages and optional overrides

        Returns:
            LLMResponse with text and usage

        Raises:
            LLMError: Any network, API or parsing failure (see llmlink.types.errors)
        """

    @abstractmethod
    async def list_models(self) -> List[str]:
        """
        List the model ids this endpoint serves for chat.

        Returns:
            Model identifiers usable as ProviderConfig.model

        Raises:
            ValueError: No API key for a provider that requires one
            LLMError: Any network, API or parsing failure
        """

    # -- Helpers -------------------------------------------------------------

    @property
    def policy(self) -> TransportPolicy:
        """Transport policy resolved at construction (read-only)."""
        return self._policy

    @property
    def target_origin(self) -> str:
        """Scheme + host of the configured endpoint, used for proxy lookup."""
        url = httpx.URL(self.config.base_url)
        origin = f"{url.scheme}://{url.host}"
        return f"{origin}:{url.port}" if url.port else origin

    def model_for(self, request: LLMRequest) -> str:
        return request.model or self.config.model

    def max_tokens_for(self, request: LLMRequest) -> int:
        return request.max_tokens or self.config.max_tokens

    async def post_json(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Serialize a payload, send it, and decode the 2xx JSON object.

        Raises:
            LLMInvalidResponseError: Success body is not a JSON object
            LLMError: Anything raised by the executor
        """
        response = await self.executor.send(path, json.dumps(payload))
        return self.decode_json_object(response)

    async def get_json(self, path: str, params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        """GET a resource and decode the 2xx JSON object."""
        response = await self.executor.get(path, params=params)
        return self.decode_json_object(response)

    def decode_json_object(self, response: httpx.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise self.invalid_response(e) from e
        if not isinstance(data, dict):
            raise self.invalid_response(f"expected a JSON object, got {type(data).__name__}")
        return data

    def require_api_key(self) -> None:
        """Raise ValueError when the provider needs a key and none is configured."""
        if self.config.provider.requires_api_key and not self.config.api_key:
            raise ValueError("API key is required to fetch models")

    def invalid_response(self, cause) -> LLMInvalidResponseError:
        return LLMInvalidResponseError(
            f"Failed to parse {self.provider_id} response: {cause}",
            provider=self.provider_id,
        )

    async def close(self):
        """Close HTTP client."""
        await self.executor.close()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
