"""
OpenAI Chat Completions provider.

Also serves any OpenAI-compatible endpoint:
- OpenAI (https://api.openai.com)
- Ollama (http://localhost:11434)
- vLLM (http://localhost:8000)
- LM Studio (http://localhost:1234)
"""

from typing import Any, Dict, List, Optional

from llmlink.config.logging_config import get_logger
from llmlink.llm.base import LLMProvider
from llmlink.llm.types import LLMRequest, LLMResponse, LLMUsage

logger = get_logger(__name__)


class OpenAIProvider(LLMProvider):
    """
    OpenAI Chat Completions provider.

    Endpoint: POST {base_url}/v1/chat/completions
    Authentication: Authorization: Bearer {api_key} (omitted when no key is set)
    """

    CHAT_PATH = "/v1/chat/completions"
    MODELS_PATH = "/v1/models"

    # Substrings of model ids that are not chat models (embeddings, audio, images, ...)
    NON_CHAT_MARKERS = ("embedding", "dall-e", "whisper", "tts", "moderation", "babbage")

    @property
    def provider_id(self) -> str:
        # "openai", or "local" / "custom" for other OpenAI-compatible endpoints
        return self.config.provider.value

    def auth_header_name(self) -> Optional[str]:
        return "Authorization" if self.config.api_key else None

    def auth_header_value(self) -> Optional[str]:
        return f"Bearer {self.config.api_key}" if self.config.api_key else None

    async def generate(self, request: LLMRequest) -> LLMResponse:
        payload = self.build_payload(request)

        logger.info(f"🤖 LLM [{self.provider_id}]: Request to model '{payload['model']}' ({len(request.messages)} messages)")
        data = await self.post_json(self.CHAT_PATH, payload)
        return self.parse_response(data)

    def build_payload(self, request: LLMRequest) -> Dict[str, Any]:
        """Chat Completions body; the system prompt goes first as a 'system' message."""
        messages: List[Dict[str, str]] = []
        if request.system_prompt:
            messages.append({"role": "system", "content": request.system_prompt})
        messages.extend({"role": m.role, "content": m.content} for m in request.messages)

        payload: Dict[str, Any] = {
            "model": self.model_for(request),
            "max_tokens": self.max_tokens_for(request),
            "messages": messages,
        }
        if request.temperature is not None:
            payload["temperature"] = request.temperature
        return payload

    def parse_response(self, data: Dict[str, Any]) -> LLMResponse:
        """
        Parse a Chat Completions response.

        {"choices":[{"message":{"content":"..."},"finish_reason":"stop"}],
         "usage":{"prompt_tokens":N,"completion_tokens":N}}
        """
        choices = data.get("choices")
        if not choices:
            raise self.invalid_response("no choices returned")

        try:
            choice = choices[0]
            content = choice["message"].get("content")
            usage = data.get("usage")
            return LLMResponse(
                text=content or None,
                model=data.get("model"),
                stop_reason=choice.get("finish_reason"),
                usage=LLMUsage(
                    input_tokens=usage.get("prompt_tokens") or 0,
                    output_tokens=usage.get("completion_tokens") or 0,
                ) if isinstance(usage, dict) else None,
            )
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise self.invalid_response(e) from e

    async def list_models(self) -> List[str]:
        """GET /v1/models, keeping chat-capable ids, sorted."""
        self.require_api_key()
        data = await self.get_json(self.MODELS_PATH)

        try:
            models = sorted(
                model["id"]
                for model in data.get("data") or []
                if self.is_chat_model(model)
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise self.invalid_response(e) from e

        logger.info(f"🤖 LLM [{self.provider_id}]: Listed {len(models)} models")
        return models

    def is_chat_model(self, model: Dict[str, Any]) -> bool:
        model_id = model["id"]
        if model_id.startswith("ft:"):
            return False
        if any(marker in model_id for marker in self.NON_CHAT_MARKERS):
            return False
        if "davinci" in model_id and "gpt" not in model_id:
            return False
        return True
