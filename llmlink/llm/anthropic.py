"""
Anthropic Claude Messages API provider.
"""

import json
from typing import Any, Dict, List, Optional

from llmlink.config.logging_config import get_logger
from llmlink.llm.base import LLMProvider
from llmlink.llm.types import LLMRequest, LLMResponse, LLMUsage

logger = get_logger(__name__)


class AnthropicProvider(LLMProvider):
    """
    Anthropic Messages API provider.

    Endpoint: POST {base_url}/v1/messages
    Authentication: x-api-key header, plus anthropic-version header
    """

    MESSAGES_PATH = "/v1/messages"
    MODELS_PATH = "/v1/models"
    MODELS_PAGE_SIZE = 100
    ANTHROPIC_VERSION = "2023-06-01"

    @property
    def provider_id(self) -> str:
        return "anthropic"

    def auth_header_name(self) -> Optional[str]:
        return "x-api-key"

    def auth_header_value(self) -> Optional[str]:
        return self.config.api_key

    def apply_auth_headers(self, headers: Dict[str, str]) -> None:
        super().apply_auth_headers(headers)
        headers["anthropic-version"] = self.ANTHROPIC_VERSION

    def extract_error_message(self, body: Optional[str]) -> str:
        """
        Prefix the generic message with Anthropic's error type.

        {"type":"error","error":{"type":"overloaded_error","message":"Overloaded"}}
        → "overloaded_error: Overloaded"
        """
        message = super().extract_error_message(body)
        try:
            error = json.loads(body or "").get("error")
        except (ValueError, AttributeError):
            return message
        if isinstance(error, dict) and isinstance(error.get("type"), str) and "message" in error:
            return f"{error['type']}: {message}"
        return message

    async def generate(self, request: LLMRequest) -> LLMResponse:
        payload: Dict[str, Any] = {
            "model": self.model_for(request),
            "max_tokens": self.max_tokens_for(request),
            "messages": [
                {"role": m.role, "content": [{"type": "text", "text": m.content}]}
                for m in request.messages
            ],
        }
        if request.system_prompt:
            payload["system"] = request.system_prompt
        if request.temperature is not None:
            payload["temperature"] = request.temperature

        logger.info(f"🤖 LLM [anthropic]: Request to model '{payload['model']}' ({len(request.messages)} messages)")
        data = await self.post_json(self.MESSAGES_PATH, payload)
        return self.parse_response(data)

    def parse_response(self, data: Dict[str, Any]) -> LLMResponse:
        """
        Parse a Messages API response.

        Text blocks are joined with newlines; other block types are ignored.
        """
        try:
            texts = [
                block["text"]
                for block in data.get("content") or []
                if block.get("type") == "text"
            ]
            usage = data.get("usage")
            return LLMResponse(
                text="\n".join(texts) or None,
                model=data.get("model"),
                stop_reason=data.get("stop_reason"),
                usage=LLMUsage(
                    input_tokens=usage.get("input_tokens") or 0,
                    output_tokens=usage.get("output_tokens") or 0,
                    cache_creation_tokens=usage.get("cache_creation_input_tokens") or 0,
                    cache_read_tokens=usage.get("cache_read_input_tokens") or 0,
                ) if isinstance(usage, dict) else None,
            )
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise self.invalid_response(e) from e

    async def list_models(self) -> List[str]:
        """
        GET /v1/models, following after_id pagination.

        Ids are returned in the order the API lists them (newest first).
        """
        self.require_api_key()

        models: List[str] = []
        after_id: Optional[str] = None
        while True:
            params = {"limit": str(self.MODELS_PAGE_SIZE)}
            if after_id:
                params["after_id"] = after_id

            data = await self.get_json(self.MODELS_PATH, params)
            try:
                models.extend(model["id"] for model in data.get("data") or [] if "id" in model)
            except (TypeError, AttributeError) as e:
                raise self.invalid_response(e) from e

            last_id = data.get("last_id")
            if not data.get("has_more") or not last_id or last_id == after_id:
                break
            after_id = last_id

        logger.info(f"🤖 LLM [anthropic]: Listed {len(models)} models")
        return models
