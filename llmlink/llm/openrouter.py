"""
OpenRouter.ai LLM provider.

OpenRouter provides access to multiple LLM providers (Anthropic, OpenAI, Google, etc.)
through a unified, OpenAI-compatible API with pay-per-use pricing.
"""

from typing import Dict

from llmlink.llm.openai_compat import OpenAIProvider


class OpenRouterProvider(OpenAIProvider):
    """
    OpenRouter.ai LLM provider.

    Endpoint: POST {base_url}/v1/chat/completions (base_url https://openrouter.ai/api)
    Authentication: Authorization: Bearer {api_key}, plus attribution headers
    """

    APP_REFERER = "https://llmlink.local"
    APP_TITLE = "llmlink"

    @property
    def provider_id(self) -> str:
        return "openrouter"

    def apply_auth_headers(self, headers: Dict[str, str]) -> None:
        super().apply_auth_headers(headers)
        headers["HTTP-Referer"] = self.APP_REFERER
        headers["X-Title"] = self.APP_TITLE
