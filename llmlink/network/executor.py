"""
Request Executor

Sends one authenticated request per call over an httpx.AsyncClient that
was built once from the resolved TransportPolicy, and converts every
failure into a classified LLMError.

Two deadlines apply to every call: httpx's per-phase timeouts (connect,
read, write, pool) and an overall deadline covering the whole exchange,
so a backend trickling bytes cannot hold a call open past
request_timeout_s.

No retries and no per-call state: concurrent calls on one executor are
independent, and connection pooling is left to httpx.
"""

import asyncio
import time
from typing import Dict, Optional, Union

import httpx

from llmlink.config.logging_config import get_logger
from llmlink.config.network import NetworkConfig
from llmlink.network.classifier import (
    cancelled_error,
    classify_api_error,
    classify_transport_error,
    deadline_error,
)
from llmlink.network.contract import ProviderContract
from llmlink.network.resolver import TransportPolicy

logger = get_logger(__name__)

JSON_CONTENT_TYPE = "application/json"


class RequestExecutor:
    """
    Request executor bound to one provider and one transport policy.

    The policy is applied once when the client is built and never changes
    for the lifetime of the executor.
    """

    def __init__(
        self,
        provider: ProviderContract,
        base_url: str,
        policy: TransportPolicy,
        config: Optional[NetworkConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize executor.

        Args:
            provider: Provider contract (identity, auth hook, error reader)
            base_url: Endpoint base URL; request paths are appended to it
            policy: Resolved transport policy
            config: Network configuration (timeouts)
            transport: Custom httpx transport (for testing)
        """
        self.provider = provider
        self.base_url = base_url.rstrip("/")
        self.policy = policy

        config = config or NetworkConfig()
        self.timeout = httpx.Timeout(config.request_timeout_s, connect=config.connect_timeout_s)
        self.request_timeout_s = config.request_timeout_s

        self.client = httpx.AsyncClient(**self.client_options(), transport=transport)

    def client_options(self) -> dict:
        """httpx.AsyncClient keyword arguments (timeouts, redirects, policy)."""
        return {
            "timeout": self.timeout,
            "follow_redirects": True,
            **self.policy.client_options(),
        }

    def url_for(self, path: str) -> str:
        """Join a request path onto the base URL."""
        if not path:
            return self.base_url
        return f"{self.base_url}/{path.lstrip('/')}"

    async def send(self, path: str, body: Union[str, bytes]) -> httpx.Response:
        """
        POST a JSON body and return the 2xx response.

        Args:
            path: Path under the base URL (e.g. "/v1/messages"), may carry a query
            body: JSON document; str is encoded once as UTF-8, bytes are sent as-is

        Returns:
            httpx.Response with a 2xx status (body not yet interpreted)

        Raises:
            LLMConnectionError: Backend or proxy unreachable
            LLMTransportSecurityError: TLS failure
            LLMTimeoutError: Connect, per-phase or overall request timeout
            LLMTransportError: Other network errors
            LLMCancelledError: Awaiting task was cancelled
            LLMAPIError: Non-2xx status (LLMRateLimitError, LLMAuthenticationError)
        """
        content = body.encode("utf-8") if isinstance(body, str) else body
        headers = {"Content-Type": JSON_CONTENT_TYPE}
        return await self._execute("POST", path, headers, content=content)

    async def get(self, path: str, params: Optional[Dict[str, str]] = None) -> httpx.Response:
        """
        GET a resource and return the 2xx response.

        Same failure classification as send().
        """
        return await self._execute("GET", path, {}, params=params)

    async def _execute(
        self,
        method: str,
        path: str,
        headers: Dict[str, str],
        content: Optional[bytes] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        provider_id = self.provider.provider_id
        url = self.url_for(path)

        self.provider.apply_auth_headers(headers)

        logger.debug(f"🌐 Network [{provider_id}]: {method} {url} ({len(content or b'')} bytes)")
        logger.trace(f"🔍 Network [{provider_id}]: Header names: {sorted(headers)}")

        t_start = time.monotonic()
        try:
            response = await asyncio.wait_for(
                self.client.request(method, url, content=content, params=params, headers=headers),
                timeout=self.request_timeout_s,
            )

        except asyncio.CancelledError as e:
            # The task's cancel request stays recorded; only the exception type changes
            logger.warning(f"⚠️ Network [{provider_id}]: Request to {url} cancelled")
            raise cancelled_error(provider_id, url) from e

        except asyncio.TimeoutError as e:
            error = deadline_error(provider_id, url, self.request_timeout_s)
            logger.error(f"❌ Network [{provider_id}]: {error.message}")
            raise error from e

        except (httpx.RequestError, OSError) as e:
            error = classify_transport_error(provider_id, url, e)
            logger.error(f"❌ Network [{provider_id}]: {error.category.value} failure - {e!r}")
            raise error from e

        latency_ms = (time.monotonic() - t_start) * 1000
        status = response.status_code

        if not 200 <= status < 300:
            error = classify_api_error(
                provider_id,
                status,
                response.text,
                url=url,
                extract=self.provider.extract_error_message,
            )
            logger.error(f"❌ Network [{provider_id}]: HTTP {status} after {latency_ms:.0f}ms - {error.message}")
            raise error

        logger.debug(f"🌐 Network [{provider_id}]: HTTP {status} in {latency_ms:.0f}ms")
        return response

    async def close(self):
        """Close HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
