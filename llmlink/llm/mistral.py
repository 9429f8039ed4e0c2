"""
Mistral provider.

Mistral's API is wire-compatible with OpenAI Chat Completions, so only the
identity and the model-list filter differ; the default base URL routes
requests to Mistral.
"""

from typing import Any, Dict

from llmlink.llm.openai_compat import OpenAIProvider


class MistralProvider(OpenAIProvider):
    """
    Mistral Chat Completions provider.

    Endpoint: POST {base_url}/v1/chat/completions
    Authentication: Authorization: Bearer {api_key}
    """

    @property
    def provider_id(self) -> str:
        return "mistral"

    def is_chat_model(self, model: Dict[str, Any]) -> bool:
        """Skip fine-tuned, archived and non-chat models."""
        if model["id"].startswith("ft:") or model.get("archived"):
            return False
        capabilities = model.get("capabilities")
        if isinstance(capabilities, dict) and capabilities.get("completion_chat") is False:
            return False
        return True
