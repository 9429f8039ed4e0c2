"""
llmlink Error Taxonomy

Purpose: One exception shape for every way an LLM request can fail.
The network layer raises these; callers catch LLMError and branch on
`category` (or on the subclass) to decide on messaging or retry.

Categories:
- CONNECTIVITY: Backend or proxy unreachable, connection refused
- TRANSPORT_SECURITY: TLS handshake/validation failure (often corporate TLS interception)
- TRANSPORT: Any other network failure, including timeouts
- CANCELLED: The awaiting task was cancelled mid-request
- API: Backend answered with a non-2xx status
- INVALID_RESPONSE: Backend answered 2xx but the body could not be parsed

Nothing in this package retries on these errors. That decision belongs to the caller.
"""

import asyncio
from enum import Enum
from typing import Optional


# Raw response bodies are kept for diagnostics, but never unbounded
MAX_BODY_EXCERPT = 1000


class ErrorCategory(str, Enum):
    """Failure buckets shared by every provider."""

    CONNECTIVITY = "connectivity"
    TRANSPORT_SECURITY = "transport_security"
    TRANSPORT = "transport"
    CANCELLED = "cancelled"
    API = "api"
    INVALID_RESPONSE = "invalid_response"


def excerpt(body: Optional[str], limit: int = MAX_BODY_EXCERPT) -> Optional[str]:
    """Bound a raw body to `limit` characters (None passes through)."""
    if body is None:
        return None
    return body if len(body) <= limit else body[:limit] + "..."


class LLMError(Exception):
    """
    Base exception for LLM provider errors.

    Attributes:
        message: Human-readable, actionable description
        category: ErrorCategory bucket
        status_code: HTTP status for API errors, None otherwise
        response_body: Bounded excerpt of the raw response body (API errors only)
        provider: Provider identifier ("anthropic", "openai", ...)
        url: Target URL of the failed request
    """

    category: ErrorCategory = ErrorCategory.TRANSPORT

    def __init__(
        self,
        message: str,
        *,
        category: Optional[ErrorCategory] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
        provider: Optional[str] = None,
        url: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        if category is not None:
            self.category = category
        self.status_code = status_code
        self.response_body = excerpt(response_body)
        self.provider = provider
        self.url = url

    def __repr__(self) -> str:
        parts = [f"message={self.message!r}", f"category={self.category.value}"]
        if self.status_code is not None:
            parts.append(f"status_code={self.status_code}")
        if self.response_body is not None:
            parts.append(f"response_body={excerpt(self.response_body, 200)!r}")
        return f"{self.__class__.__name__}({', '.join(parts)})"


class LLMConnectionError(LLMError):
    """LLM connection error (refused, unreachable, proxy unreachable)."""

    category = ErrorCategory.CONNECTIVITY


class LLMTransportSecurityError(LLMError):
    """TLS handshake or certificate validation failure."""

    category = ErrorCategory.TRANSPORT_SECURITY


class LLMTransportError(LLMError):
    """Generic network/I/O failure."""

    category = ErrorCategory.TRANSPORT


class LLMTimeoutError(LLMTransportError):
    """LLM request timeout error (connect or total request timeout)."""
    pass


class LLMCancelledError(LLMError, asyncio.CancelledError):
    """
    The awaiting task was cancelled while the request was in flight.

    Also an asyncio.CancelledError, so raising it keeps the task cancelled
    while callers catching LLMError still see the typed error.
    """

    category = ErrorCategory.CANCELLED


class LLMAPIError(LLMError):
    """Non-2xx response from the LLM backend."""

    category = ErrorCategory.API


class LLMRateLimitError(LLMAPIError):
    """LLM rate limit exceeded error (429)."""
    pass


class LLMAuthenticationError(LLMAPIError):
    """LLM authentication error (401/403, invalid API key)."""
    pass


class LLMInvalidResponseError(LLMError):
    """2xx response whose body could not be interpreted."""

    category = ErrorCategory.INVALID_RESPONSE
