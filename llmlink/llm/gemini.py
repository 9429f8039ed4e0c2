"""
Google Gemini generateContent provider.

The API key travels in the x-goog-api-key header rather than the ?key=
query parameter, so it never shows up in URLs that end up in error
messages and logs.
"""

from typing import Any, Dict, List, Optional

from llmlink.config.logging_config import get_logger
from llmlink.llm.base import LLMProvider
from llmlink.llm.types import LLMRequest, LLMResponse, LLMUsage

logger = get_logger(__name__)

# Gemini names the assistant role "model"
ROLE_MAP = {"user": "user", "assistant": "model"}


class GeminiProvider(LLMProvider):
    """
    Gemini provider.

    Endpoint: POST {base_url}/v1beta/models/{model}:generateContent
    Authentication: x-goog-api-key header
    """

    MODELS_PATH = "/v1beta/models"
    MODELS_PAGE_SIZE = 100

    @property
    def provider_id(self) -> str:
        return "gemini"

    def auth_header_name(self) -> Optional[str]:
        return "x-goog-api-key"

    def auth_header_value(self) -> Optional[str]:
        return self.config.api_key

    async def generate(self, request: LLMRequest) -> LLMResponse:
        model = self.model_for(request)

        generation_config: Dict[str, Any] = {"maxOutputTokens": self.max_tokens_for(request)}
        if request.temperature is not None:
            generation_config["temperature"] = request.temperature

        payload: Dict[str, Any] = {
            "contents": [
                {"role": ROLE_MAP.get(m.role, "user"), "parts": [{"text": m.content}]}
                for m in request.messages
            ],
            "generationConfig": generation_config,
        }
        if request.system_prompt:
            payload["systemInstruction"] = {"parts": [{"text": request.system_prompt}]}

        logger.info(f"🤖 LLM [gemini]: Request to model '{model}' ({len(request.messages)} messages)")
        data = await self.post_json(f"/v1beta/models/{model}:generateContent", payload)
        return self.parse_response(data, model)

    def parse_response(self, data: Dict[str, Any], model: Optional[str] = None) -> LLMResponse:
        """
        Parse a generateContent response.

        A 2xx body may still carry {"error": {...}}; that is an invalid response.
        """
        if "error" in data:
            raise self.invalid_response(self.extract_error_message_from(data))

        candidates = data.get("candidates")
        if not candidates:
            raise self.invalid_response("no candidates returned")

        try:
            candidate = candidates[0]
            parts = (candidate.get("content") or {}).get("parts") or []
            texts = [part["text"] for part in parts if "text" in part]
            usage = data.get("usageMetadata")
            return LLMResponse(
                text="\n".join(texts) or None,
                model=data.get("modelVersion") or model,
                stop_reason=candidate.get("finishReason"),
                usage=LLMUsage(
                    input_tokens=usage.get("promptTokenCount") or 0,
                    output_tokens=usage.get("candidatesTokenCount") or 0,
                    cache_read_tokens=usage.get("cachedContentTokenCount") or 0,
                ) if isinstance(usage, dict) else None,
            )
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise self.invalid_response(e) from e

    @staticmethod
    def extract_error_message_from(data: Dict[str, Any]) -> str:
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return f"Gemini API error: {error['message']}"
        return "Gemini API error: Unknown error"

    async def list_models(self) -> List[str]:
        """
        GET /v1beta/models, following pageToken pagination.

        Keeps models that support generateContent, with the "models/" prefix
        stripped, sorted.
        """
        self.require_api_key()

        models: List[str] = []
        page_token: Optional[str] = None
        while True:
            params = {"pageSize": str(self.MODELS_PAGE_SIZE)}
            if page_token:
                params["pageToken"] = page_token

            data = await self.get_json(self.MODELS_PATH, params)
            try:
                for model in data.get("models") or []:
                    if "generateContent" not in (model.get("supportedGenerationMethods") or []):
                        continue
                    models.append(model["name"].removeprefix("models/"))
            except (KeyError, TypeError, AttributeError) as e:
                raise self.invalid_response(e) from e

            next_token = data.get("nextPageToken")
            if not next_token or next_token == page_token:
                break
            page_token = next_token

        logger.info(f"🤖 LLM [gemini]: Listed {len(models)} models")
        return sorted(models)
