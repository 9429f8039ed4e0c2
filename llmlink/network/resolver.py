"""
Network Configuration Resolver

Decides, once per client, whether outbound LLM calls go direct or through
a proxy, and which proxy.

Resolution order (first match wins):
1. Explicit override from NetworkConfig (HTTPS pair, then HTTP pair)
2. Host-managed proxy via an injected HostProxyAdapter, if any
3. Direct, chosen explicitly

The fallback is an explicit "no proxy" rather than httpx's ambient
environment lookup: ambient settings in managed hosts can point at a stale
or non-existent proxy and produce spurious connection failures.
"""

from dataclasses import dataclass
from typing import Optional

from llmlink.config.logging_config import get_logger
from llmlink.config.network import NetworkConfig
from llmlink.network.host_proxy import HostProxyAdapter

logger = get_logger(__name__)

DIRECT = "direct"
PROXY = "proxy"

# Which resolution step produced a policy
SOURCE_EXPLICIT = "explicit"
SOURCE_HOST = "host"
SOURCE_FALLBACK = "fallback"


@dataclass(frozen=True)
class TransportPolicy:
    """
    Resolved routing decision: Direct or ProxyAt(host, port).

    Immutable; a client applies the whole policy or nothing.
    """

    kind: str
    host: Optional[str] = None
    port: Optional[int] = None
    source: str = SOURCE_FALLBACK

    @classmethod
    def direct(cls, source: str = SOURCE_FALLBACK) -> "TransportPolicy":
        return cls(kind=DIRECT, source=source)

    @classmethod
    def proxy_at(cls, host: str, port: int, source: str) -> "TransportPolicy":
        return cls(kind=PROXY, host=host, port=port, source=source)

    @property
    def is_direct(self) -> bool:
        return self.kind == DIRECT

    @property
    def proxy_url(self) -> Optional[str]:
        """Proxy URL for httpx, None for direct connections."""
        if self.is_direct:
            return None
        return f"http://{self.host}:{self.port}"

    def client_options(self) -> dict:
        """
        httpx client keyword arguments implementing this policy.

        trust_env is always off so HTTP(S)_PROXY / ALL_PROXY never override
        the decision made here.
        """
        return {"proxy": self.proxy_url, "trust_env": False}

    def __str__(self) -> str:
        if self.is_direct:
            return "direct connection (no proxy)"
        return f"proxy {self.host}:{self.port} ({self.source})"


def parse_port(raw: Optional[str]) -> Optional[int]:
    """Parse a proxy port; None if missing, non-numeric or out of range."""
    if raw is None:
        return None
    try:
        port = int(str(raw).strip())
    except ValueError:
        return None
    if not 0 < port <= 65535:
        return None
    return port


class ProxyResolver:
    """
    Computes the TransportPolicy for one client.

    Never raises for configuration or host-service problems: every failing
    step degrades to the next one, ending at Direct.
    """

    def __init__(
        self,
        config: Optional[NetworkConfig] = None,
        host_proxy: Optional[HostProxyAdapter] = None,
    ):
        """
        Initialize resolver.

        Args:
            config: Configuration snapshot (defaults to an empty NetworkConfig)
            host_proxy: Optional host proxy capability (None = absent)
        """
        self.config = config or NetworkConfig()
        self.host_proxy = host_proxy

    def resolve(self, target_origin: str) -> TransportPolicy:
        """
        Resolve the transport policy for a target origin.

        Args:
            target_origin: Scheme + host of the LLM endpoint

        Returns:
            TransportPolicy (always resolved, never partial)
        """
        policy = (
            self._from_explicit_config()
            or self._from_host_proxy(target_origin)
            or TransportPolicy.direct()
        )

        logger.info(f"🌐 Network: Using {policy} for {target_origin}")
        return policy

    def _from_explicit_config(self) -> Optional[TransportPolicy]:
        host, raw_port = self.config.explicit_proxy()
        if not host:
            return None

        port = parse_port(raw_port)
        if port is None:
            logger.warning(
                f"⚠️ Network: Ignoring explicit proxy {host} with malformed port {raw_port!r}"
            )
            return None

        return TransportPolicy.proxy_at(host, port, SOURCE_EXPLICIT)

    def _from_host_proxy(self, target_origin: str) -> Optional[TransportPolicy]:
        if self.host_proxy is None:
            return None

        try:
            candidate = self.host_proxy.try_resolve(target_origin)
        except Exception as e:
            # Host capability failures never abort client construction
            logger.debug(f"🌐 Network: Host proxy check skipped: {e}")
            return None

        if candidate is None:
            return None

        return TransportPolicy.proxy_at(candidate.host, candidate.port, SOURCE_HOST)
