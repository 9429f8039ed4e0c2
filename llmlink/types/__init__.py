"""
llmlink Types Module

Error taxonomy shared by the network layer and the providers.
"""

from .errors import (
    MAX_BODY_EXCERPT,
    ErrorCategory,
    LLMError,
    LLMConnectionError,
    LLMTransportSecurityError,
    LLMTransportError,
    LLMTimeoutError,
    LLMCancelledError,
    LLMAPIError,
    LLMRateLimitError,
    LLMAuthenticationError,
    LLMInvalidResponseError,
)

__all__ = [
    "MAX_BODY_EXCERPT",
    "ErrorCategory",
    "LLMError",
    "LLMConnectionError",
    "LLMTransportSecurityError",
    "LLMTransportError",
    "LLMTimeoutError",
    "LLMCancelledError",
    "LLMAPIError",
    "LLMRateLimitError",
    "LLMAuthenticationError",
    "LLMInvalidResponseError",
]
