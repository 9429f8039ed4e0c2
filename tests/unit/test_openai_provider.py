"""
Unit tests for OpenAI-compatible providers.

Tests OpenAI, Mistral, OpenRouter and local (keyless) endpoints: payloads,
headers, response parsing and error handling over a mock transport.
"""

import httpx
import pytest

from llmlink.config.network import NetworkConfig
from llmlink.llm.mistral import MistralProvider
from llmlink.llm.openai_compat import OpenAIProvider
from llmlink.llm.openrouter import OpenRouterProvider
from llmlink.llm.types import (
    LLMMessage,
    LLMRequest,
    ProviderConfig,
    ProviderType,
    LLMInvalidResponseError,
    LLMRateLimitError,
)
from llmlink.types.errors import LLMAPIError, LLMTimeoutError
from tests.conftest import RecordingTransport

CHAT_RESPONSE = {
    "id": "chatcmpl-1",
    "object": "chat.completion",
    "model": "gpt-4o-2024-08-06",
    "choices": [
        {
            "index": 0,
            "message": {"role": "assistant", "content": "Hello there"},
            "finish_reason": "stop",
        }
    ],
    "usage": {"prompt_tokens": 9, "completion_tokens": 3, "total_tokens": 12},
}


def make_provider(provider_class, provider_type, transport, **config_overrides):
    config = ProviderConfig(provider=provider_type, **config_overrides)
    return provider_class(config, network_config=NetworkConfig(), transport=transport)


def conversation() -> LLMRequest:
    return LLMRequest(
        messages=[
            LLMMessage(role="user", content="Hi"),
            LLMMessage(role="assistant", content="Hello"),
            LLMMessage(role="user", content="How are you?"),
        ],
        system_prompt="You are terse.",
    )


# ============================================================
# OpenAI Tests
# ============================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_openai_request_headers_and_payload(json_transport):
    """Test bearer auth and system prompt placed first"""
    # ARRANGE
    transport = json_transport(CHAT_RESPONSE)
    provider = make_provider(OpenAIProvider, ProviderType.OPENAI, transport, api_key="sk-test")

    # ACT
    await provider.generate(conversation())

    # ASSERT
    request = transport.requests[0]
    assert str(request.url) == "https://api.openai.com/v1/chat/completions"
    assert request.headers["authorization"] == "Bearer sk-test"
    assert request.headers["content-type"] == "application/json"

    payload = transport.json_body()
    assert payload["model"] == "gpt-4o"
    assert payload["max_tokens"] == 4096
    assert payload["messages"] == [
        {"role": "system", "content": "You are terse."},
        {"role": "user", "content": "Hi"},
        {"role": "assistant", "content": "Hello"},
        {"role": "user", "content": "How are you?"},
    ]
    assert "temperature" not in payload
    await provider.close()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_openai_temperature_included_when_set(json_transport):
    transport = json_transport(CHAT_RESPONSE)
    provider = make_provider(OpenAIProvider, ProviderType.OPENAI, transport, api_key="sk-test")

    await provider.generate(LLMRequest(messages=[LLMMessage(role="user", content="Hi")], temperature=0.0))

    assert transport.json_body()["temperature"] == 0.0
    await provider.close()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_openai_response_parsing(json_transport):
    """Test choice text, finish reason and usage are parsed"""
    provider = make_provider(OpenAIProvider, ProviderType.OPENAI, json_transport(CHAT_RESPONSE), api_key="sk-test")

    response = await provider.generate(conversation())

    assert response.text == "Hello there"
    assert response.model == "gpt-4o-2024-08-06"
    assert response.stop_reason == "stop"
    assert response.usage.input_tokens == 9
    assert response.usage.output_tokens == 3
    await provider.close()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_openai_null_content(json_transport):
    body = {"choices": [{"message": {"role": "assistant", "content": None}, "finish_reason": "tool_calls"}]}
    provider = make_provider(OpenAIProvider, ProviderType.OPENAI, json_transport(body), api_key="sk-test")

    response = await provider.generate(conversation())

    assert response.text is None
    assert response.stop_reason == "tool_calls"
    assert response.usage is None
    await provider.close()


@pytest.mark.unit
@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{}, {"choices": []}])
async def test_openai_no_choices(json_transport, body):
    """Test missing choices is an invalid response"""
    provider = make_provider(OpenAIProvider, ProviderType.OPENAI, json_transport(body), api_key="sk-test")

    with pytest.raises(LLMInvalidResponseError) as exc_info:
        await provider.generate(conversation())

    assert exc_info.value.message == "Failed to parse openai response: no choices returned"
    await provider.close()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_openai_json_array_body(json_transport):
    provider = make_provider(OpenAIProvider, ProviderType.OPENAI, json_transport([1, 2]), api_key="sk-test")

    with pytest.raises(LLMInvalidResponseError, match="expected a JSON object"):
        await provider.generate(conversation())
    await provider.close()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_openai_api_error(json_transport):
    """Test OpenAI error envelope is extracted"""
    # ARRANGE
    body = {"error": {"message": "The model `gpt-9` does not exist", "type": "invalid_request_error"}}
    provider = make_provider(OpenAIProvider, ProviderType.OPENAI, json_transport(body, status_code=404), api_key="sk-test")

    # ACT & ASSERT
    with pytest.raises(LLMAPIError) as exc_info:
        await provider.generate(conversation())

    assert exc_info.value.message == "openai API error (404): The model `gpt-9` does not exist"
    await provider.close()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_openai_timeout():
    def slow(request):
        raise httpx.ReadTimeout("Read timed out", request=request)

    provider = make_provider(OpenAIProvider, ProviderType.OPENAI, RecordingTransport(slow), api_key="sk-test")

    with pytest.raises(LLMTimeoutError) as exc_info:
        await provider.generate(conversation())

    assert "https://api.openai.com/v1/chat/completions" in exc_info.value.message
    await provider.close()


# ============================================================
# Local / Custom Endpoint Tests
# ============================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_local_endpoint_without_api_key(json_transport):
    """Test keyless local endpoints send no Authorization header"""
    # ARRANGE
    transport = json_transport(CHAT_RESPONSE)
    provider = make_provider(OpenAIProvider, ProviderType.LOCAL, transport)

    # ACT
    await provider.generate(conversation())

    # ASSERT
    request = transport.requests[0]
    assert str(request.url) == "http://localhost:11434/v1/chat/completions"
    assert "authorization" not in request.headers
    assert transport.json_body()["model"] == "llama3.1"
    assert provider.target_origin == "http://localhost:11434"
    await provider.close()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_custom_endpoint_base_url(json_transport):
    transport = json_transport(CHAT_RESPONSE)
    provider = make_provider(
        OpenAIProvider, ProviderType.CUSTOM, transport,
        base_url="https://llm.internal.corp/openai/", model="qwen2.5",
    )

    await provider.generate(conversation())

    assert str(transport.requests[0].url) == "https://llm.internal.corp/openai/v1/chat/completions"
    assert transport.json_body()["model"] == "qwen2.5"
    await provider.close()


# ============================================================
# Mistral Tests
# ============================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_mistral_uses_own_endpoint_and_identity(json_transport):
    """Test Mistral shares the wire format but has its own identity"""
    # ARRANGE
    transport = json_transport({"error": {"message": "Unauthorized"}}, status_code=401)
    provider = make_provider(MistralProvider, ProviderType.MISTRAL, transport, api_key="m-key")

    # ACT & ASSERT
    with pytest.raises(LLMAPIError) as exc_info:
        await provider.generate(conversation())

    assert str(transport.requests[0].url) == "https://api.mistral.ai/v1/chat/completions"
    assert transport.requests[0].headers["authorization"] == "Bearer m-key"
    assert exc_info.value.message == "mistral API error (401): Unauthorized"
    await provider.close()


# ============================================================
# OpenRouter Tests
# ============================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_openrouter_attribution_headers(json_transport):
    """Test OpenRouter adds attribution headers next to bearer auth"""
    # ARRANGE
    transport = json_transport(CHAT_RESPONSE)
    provider = make_provider(OpenRouterProvider, ProviderType.OPENROUTER, transport, api_key="or-key")

    # ACT
    response = await provider.generate(conversation())

    # ASSERT
    request = transport.requests[0]
    assert str(request.url) == "https://openrouter.ai/api/v1/chat/completions"
    assert request.headers["authorization"] == "Bearer or-key"
    assert request.headers["http-referer"] == "https://llmlink.local"
    assert request.headers["x-title"] == "llmlink"
    assert transport.json_body()["model"] == "anthropic/claude-3.5-sonnet"
    assert response.text == "Hello there"
    await provider.close()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_openrouter_rate_limit(json_transport):
    body = {"error": {"message": "Rate limit exceeded", "code": 429}}
    provider = make_provider(
        OpenRouterProvider, ProviderType.OPENROUTER, json_transport(body, status_code=429), api_key="or-key"
    )

    with pytest.raises(LLMRateLimitError) as exc_info:
        await provider.generate(conversation())

    assert exc_info.value.provider == "openrouter"
    assert exc_info.value.status_code == 429
    await provider.close()


@pytest.mark.unit
@pytest.mark.asyncio
@pytest.mark.parametrize("provider_type", [ProviderType.LOCAL, ProviderType.CUSTOM])
async def test_compatible_endpoint_reports_own_provider_id(json_transport, provider_type):
    """Test local/custom endpoints name themselves in errors rather than OpenAI"""
    # ARRANGE
    transport = json_transport({"error": {"message": "model not loaded"}}, status_code=500)
    provider = make_provider(OpenAIProvider, provider_type, transport, base_url="http://gpu-box:8000")

    # ACT & ASSERT
    with pytest.raises(LLMAPIError) as exc_info:
        await provider.generate(conversation())

    assert provider.provider_id == provider_type.value
    assert exc_info.value.provider == provider_type.value
    assert exc_info.value.message == f"{provider_type.value} API error (500): model not loaded"
    await provider.close()


# ============================================================
# Model Listing Tests
# ============================================================

OPENAI_MODELS = {
    "object": "list",
    "data": [
        {"id": "gpt-4o", "object": "model"},
        {"id": "text-embedding-3-small", "object": "model"},
        {"id": "dall-e-3", "object": "model"},
        {"id": "whisper-1", "object": "model"},
        {"id": "tts-1-hd", "object": "model"},
        {"id": "omni-moderation-latest", "object": "model"},
        {"id": "babbage-002", "object": "model"},
        {"id": "davinci-002", "object": "model"},
        {"id": "ft:gpt-4o-mini:acme::abc123", "object": "model"},
        {"id": "gpt-4.1-mini", "object": "model"},
        {"id": "gpt-3.5-turbo", "object": "model"},
        {"id": "o3-mini", "object": "model"},
    ],
}


@pytest.mark.unit
@pytest.mark.asyncio
async def test_openai_list_models_filters_and_sorts(json_transport):
    """Test non-chat and fine-tuned models are dropped and ids sorted"""
    # ARRANGE
    transport = json_transport(OPENAI_MODELS)
    provider = make_provider(OpenAIProvider, ProviderType.OPENAI, transport, api_key="sk-test")

    # ACT
    models = await provider.list_models()

    # ASSERT
    assert models == ["gpt-3.5-turbo", "gpt-4.1-mini", "gpt-4o", "o3-mini"]
    request = transport.requests[0]
    assert request.method == "GET"
    assert str(request.url) == "https://api.openai.com/v1/models"
    assert request.headers["authorization"] == "Bearer sk-test"
    assert request.content == b""
    await provider.close()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_openai_list_models_requires_api_key(json_transport):
    transport = json_transport(OPENAI_MODELS)
    provider = make_provider(OpenAIProvider, ProviderType.OPENAI, transport)

    with pytest.raises(ValueError, match="API key is required"):
        await provider.list_models()

    assert transport.requests == []
    await provider.close()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_openai_list_models_malformed_entry(json_transport):
    provider = make_provider(
        OpenAIProvider, ProviderType.OPENAI, json_transport({"data": [{"object": "model"}]}), api_key="sk-test"
    )

    with pytest.raises(LLMInvalidResponseError):
        await provider.list_models()

    await provider.close()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_local_list_models_without_api_key(json_transport):
    """Test keyless endpoints list models without sending credentials"""
    transport = json_transport({"object": "list", "data": [{"id": "qwen2.5"}, {"id": "llama3.1"}]})
    provider = make_provider(OpenAIProvider, ProviderType.LOCAL, transport)

    models = await provider.list_models()

    assert models == ["llama3.1", "qwen2.5"]
    assert str(transport.requests[0].url) == "http://localhost:11434/v1/models"
    assert "authorization" not in transport.requests[0].headers
    await provider.close()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_mistral_list_models_filter(json_transport):
    """Test Mistral drops archived, fine-tuned and non-chat models"""
    # ARRANGE
    body = {
        "object": "list",
        "data": [
            {"id": "mistral-large-latest", "capabilities": {"completion_chat": True}},
            {"id": "mistral-embed", "capabilities": {"completion_chat": False}},
            {"id": "open-mistral-7b", "archived": True, "capabilities": {"completion_chat": True}},
            {"id": "ft:open-mistral-7b:acme", "capabilities": {"completion_chat": True}},
            {"id": "codestral-latest", "capabilities": {"completion_chat": True}},
            {"id": "ministral-8b-latest"},
        ],
    }
    transport = json_transport(body)
    provider = make_provider(MistralProvider, ProviderType.MISTRAL, transport, api_key="m-key")

    # ACT
    models = await provider.list_models()

    # ASSERT
    assert models == ["codestral-latest", "ministral-8b-latest", "mistral-large-latest"]
    assert str(transport.requests[0].url) == "https://api.mistral.ai/v1/models"
    await provider.close()
