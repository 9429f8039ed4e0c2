"""
Optional host-managed proxy capability.

A surrounding host environment (an IDE, the operating system) may know
about a proxy the process was never told about explicitly. That knowledge
is an optional capability: it is injected at startup when available and
simply absent otherwise.

From the resolver's point of view "no adapter", "adapter present but
proxying disabled" and "no usable candidate" all look the same: None.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence
from urllib.request import getproxies, proxy_bypass

import httpx

from llmlink.config.logging_config import get_logger

logger = get_logger(__name__)

# Only these proxy types can carry an HTTPS CONNECT tunnel for us
ACCEPTED_PROXY_TYPES = ("HTTP", "HTTPS")


@dataclass(frozen=True)
class ProxyData:
    """One proxy entry as reported by a host proxy service."""

    type: str
    host: Optional[str]
    port: int


@dataclass(frozen=True)
class ProxyCandidate:
    """A usable HTTP(S) proxy picked for a target origin."""

    host: str
    port: int


class HostProxyService(Protocol):
    """What a host environment exposes about its proxy configuration."""

    def is_proxies_enabled(self) -> bool:
        ...

    def select(self, origin: str) -> Sequence[ProxyData]:
        ...


class HostProxyAdapter(ABC):
    """Resolver-facing view of the host proxy capability."""

    @abstractmethod
    def try_resolve(self, origin: str) -> Optional[ProxyCandidate]:
        """
        Find the host-configured proxy for a target origin.

        Args:
            origin: Scheme + host of the target (e.g. "https://api.anthropic.com")

        Returns:
            ProxyCandidate, or None when the host has nothing usable to offer
        """


class ServiceHostProxyAdapter(HostProxyAdapter):
    """
    Adapter over a HostProxyService.

    Takes the first HTTP/HTTPS entry with a host and a positive port.
    Other proxy types (SOCKS, DIRECT, ...) are skipped.
    """

    def __init__(self, service: Optional[HostProxyService]):
        self.service = service

    def try_resolve(self, origin: str) -> Optional[ProxyCandidate]:
        if self.service is None:
            return None

        if not self.service.is_proxies_enabled():
            logger.debug("🌐 Host proxy: proxies disabled by host")
            return None

        for entry in self.service.select(origin) or ():
            if (entry.type or "").upper() not in ACCEPTED_PROXY_TYPES:
                logger.debug(f"🌐 Host proxy: skipping {entry.type} entry for {origin}")
                continue
            if entry.host and entry.port > 0:
                return ProxyCandidate(host=entry.host, port=entry.port)

        return None


class SystemProxyService:
    """
    HostProxyService backed by the operating system's proxy settings.

    Reads the same sources httpx uses for environment proxies
    (urllib.request.getproxies: *_proxy env vars, macOS System Configuration,
    Windows registry) and honors the host's bypass list.
    """

    def is_proxies_enabled(self) -> bool:
        return bool(getproxies())

    def select(self, origin: str) -> Sequence[ProxyData]:
        target = httpx.URL(origin)
        if target.host and proxy_bypass(target.host):
            return []

        proxies = getproxies()
        proxy_url = proxies.get(target.scheme) or proxies.get("all")
        if not proxy_url:
            return []

        if "://" not in proxy_url:
            proxy_url = f"http://{proxy_url}"
        proxy = httpx.URL(proxy_url)

        port = proxy.port or (443 if proxy.scheme == "https" else 80)
        return [ProxyData(type=proxy.scheme.upper(), host=proxy.host, port=port)]
