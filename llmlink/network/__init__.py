"""
Outbound network layer for llmlink.

Resolves how to reach LLM backends (direct, explicit proxy, host-managed
proxy), executes authenticated JSON requests, and classifies failures.
"""

from llmlink.network.classifier import (
    classify_api_error,
    classify_transport_error,
    extract_error_message,
)
from llmlink.network.contract import ProviderContract
from llmlink.network.executor import RequestExecutor
from llmlink.network.host_proxy import (
    HostProxyAdapter,
    HostProxyService,
    ProxyCandidate,
    ProxyData,
    ServiceHostProxyAdapter,
    SystemProxyService,
)
from llmlink.network.resolver import ProxyResolver, TransportPolicy

__all__ = [
    "classify_api_error",
    "classify_transport_error",
    "extract_error_message",
    "ProviderContract",
    "RequestExecutor",
    "HostProxyAdapter",
    "HostProxyService",
    "ProxyCandidate",
    "ProxyData",
    "ServiceHostProxyAdapter",
    "SystemProxyService",
    "ProxyResolver",
    "TransportPolicy",
]
