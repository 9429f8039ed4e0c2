"""
Pytest configuration and shared fixtures for llmlink tests
"""
import json
import os
import sys
from typing import Callable, Dict, List, Optional

import httpx
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from llmlink.config.network import NetworkConfig
from llmlink.network.classifier import extract_error_message


# ============================================================
# Test Markers
# ============================================================

def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers", "unit: fast tests with no network access"
    )


# ============================================================
# Network Configuration
# ============================================================

@pytest.fixture
def direct_config() -> NetworkConfig:
    """Network config with no explicit proxy (resolves to Direct)."""
    return NetworkConfig()


@pytest.fixture(autouse=True)
def clean_proxy_env(monkeypatch):
    """Keep the developer's proxy variables out of every test."""
    for name in (
        "HTTPS_PROXY_HOST", "HTTPS_PROXY_PORT", "HTTP_PROXY_HOST", "HTTP_PROXY_PORT",
        "LLM_USE_SYSTEM_PROXY", "LLM_CONNECT_TIMEOUT_S", "LLM_REQUEST_TIMEOUT_S",
        "LLM_MODEL", "LLM_BASE_URL", "LLM_MAX_TOKENS",
    ):
        monkeypatch.delenv(name, raising=False)


# ============================================================
# Fake Provider Contract
# ============================================================

class FakeProvider:
    """Minimal ProviderContract for executor tests."""

    def __init__(self, provider_id: str = "fake", auth: Optional[tuple] = ("Authorization", "Bearer k")):
        self._provider_id = provider_id
        self.auth = auth

    @property
    def provider_id(self) -> str:
        return self._provider_id

    def apply_auth_headers(self, headers: Dict[str, str]) -> None:
        if self.auth is not None:
            headers[self.auth[0]] = self.auth[1]

    def extract_error_message(self, body: Optional[str]) -> str:
        return extract_error_message(body)


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


# ============================================================
# Mock Transport
# ============================================================

class RecordingTransport(httpx.MockTransport):
    """
    httpx.MockTransport that remembers every request it served.

    Usage:
        transport = RecordingTransport(lambda request: httpx.Response(200, json={}))
        ...
        assert transport.requests[0].headers["x-api-key"] == "key"
    """

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []

        def recording_handler(request: httpx.Request):
            self.requests.append(request)
            return handler(request)

        super().__init__(recording_handler)

    def json_body(self, index: int = -1) -> dict:
        return json.loads(self.requests[index].content)


@pytest.fixture
def json_transport() -> Callable[..., RecordingTransport]:
    """Factory for a transport answering every request with one status + JSON body."""

    def _make(payload, status_code: int = 200) -> RecordingTransport:
        return RecordingTransport(lambda request: httpx.Response(status_code, json=payload))

    return _make
