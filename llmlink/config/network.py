"""
Network Configuration Module

Snapshot of every process-level value the network layer reads: explicit
proxy host/port pairs, the opt-in for probing the host's proxy settings,
and transport timeouts.

The snapshot is taken once (load_network_config) and handed to the
resolver and executor explicitly, so tests inject synthetic configurations
instead of mutating os.environ.

Proxy ports are kept as raw strings on purpose: a malformed port is not a
configuration error, the resolver treats it as "no explicit override".
"""

import os
from dataclasses import dataclass
from typing import Optional


DEFAULT_PROXY_PORT = "8080"
DEFAULT_CONNECT_TIMEOUT_S = 30.0
DEFAULT_REQUEST_TIMEOUT_S = 120.0


@dataclass(frozen=True)
class NetworkConfig:
    """
    Configuration for outbound LLM connections.

    Attributes:
        https_proxy_host: Explicit proxy host for HTTPS targets (preferred)
        https_proxy_port: Port paired with https_proxy_host (raw string)
        http_proxy_host: Explicit proxy host used when no HTTPS host is set
        http_proxy_port: Port paired with http_proxy_host (raw string)
        use_system_proxy: Query the operating system's proxy settings when
            no explicit proxy is configured
        connect_timeout_s: TCP/TLS connect timeout
        request_timeout_s: Total request timeout (large completions are slow)
    """

    https_proxy_host: Optional[str] = None
    https_proxy_port: Optional[str] = None
    http_proxy_host: Optional[str] = None
    http_proxy_port: Optional[str] = None
    use_system_proxy: bool = False
    connect_timeout_s: float = DEFAULT_CONNECT_TIMEOUT_S
    request_timeout_s: float = DEFAULT_REQUEST_TIMEOUT_S

    def validate(self) -> None:
        """Validate configuration values."""
        if not 0 < self.connect_timeout_s <= 600:
            raise ValueError("connect_timeout_s must be between 0 and 600 seconds")
        if not 0 < self.request_timeout_s <= 3600:
            raise ValueError("request_timeout_s must be between 0 and 3600 seconds")
        if self.connect_timeout_s > self.request_timeout_s:
            raise ValueError("connect_timeout_s must not exceed request_timeout_s")

    def explicit_proxy(self) -> tuple[Optional[str], Optional[str]]:
        """
        Pick the explicit (host, raw_port) pair.

        The HTTPS pair wins when its host is set; otherwise the HTTP pair is
        used. A missing port on the chosen pair defaults to 8080.

        Returns:
            (host, raw_port), or (None, None) when no explicit host is set
        """
        if self.https_proxy_host:
            return self.https_proxy_host, self.https_proxy_port or DEFAULT_PROXY_PORT
        if self.http_proxy_host:
            return self.http_proxy_host, self.http_proxy_port or DEFAULT_PROXY_PORT
        return None, None


def _getenv_stripped(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def load_network_config() -> NetworkConfig:
    """
    Load network configuration from environment variables.

    Environment Variables:
        HTTPS_PROXY_HOST / HTTPS_PROXY_PORT: Explicit proxy for HTTPS targets
        HTTP_PROXY_HOST / HTTP_PROXY_PORT: Fallback explicit proxy
        LLM_USE_SYSTEM_PROXY: Query OS proxy settings (default: false)
        LLM_CONNECT_TIMEOUT_S: Connect timeout in seconds (default: 30)
        LLM_REQUEST_TIMEOUT_S: Request timeout in seconds (default: 120)

    Returns:
        NetworkConfig with values loaded from environment or defaults

    Raises:
        ValueError: Timeouts are not numbers or fail validation
    """
    config = NetworkConfig(
        https_proxy_host=_getenv_stripped('HTTPS_PROXY_HOST'),
        https_proxy_port=_getenv_stripped('HTTPS_PROXY_PORT'),
        http_proxy_host=_getenv_stripped('HTTP_PROXY_HOST'),
        http_proxy_port=_getenv_stripped('HTTP_PROXY_PORT'),
        use_system_proxy=os.getenv('LLM_USE_SYSTEM_PROXY', 'false').lower() in ['true', '1', 'yes'],
        connect_timeout_s=float(os.getenv('LLM_CONNECT_TIMEOUT_S', str(DEFAULT_CONNECT_TIMEOUT_S))),
        request_timeout_s=float(os.getenv('LLM_REQUEST_TIMEOUT_S', str(DEFAULT_REQUEST_TIMEOUT_S))),
    )

    config.validate()
    return config
