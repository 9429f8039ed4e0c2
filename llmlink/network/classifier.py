"""
Error Classifier

Turns transport exceptions and non-2xx responses into the LLMError
taxonomy, with messages that name the target and a remediation hint.
"""

import json
import ssl
from typing import Callable, Optional

import httpx

from llmlink.types.errors import (
    LLMError,
    LLMAPIError,
    LLMAuthenticationError,
    LLMCancelledError,
    LLMConnectionError,
    LLMRateLimitError,
    LLMTimeoutError,
    LLMTransportError,
    LLMTransportSecurityError,
)

ERROR_MESSAGE_LIMIT = 500
NO_RESPONSE_BODY = "No response body"

# OpenSSL / stdlib ssl phrases for TLS failures (lowercased)
_TLS_PHRASES = (
    "[ssl",
    "certificate verify failed",
    "certificate_verify_failed",
    "self signed certificate",
    "self-signed certificate",
    "unable to get local issuer certificate",
    "certificate has expired",
    "hostname mismatch",
    "wrong version number",
    "sslv3 alert",
    "tlsv1 alert",
    "ssl handshake",
    "handshake failure",
)


def _primitive_text(value) -> Optional[str]:
    """JSON primitive as text; None for objects, arrays and null."""
    if value is None or isinstance(value, (dict, list)):
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value)


def extract_error_message(body: Optional[str]) -> str:
    """
    Pull a human-readable message out of an error response body.

    Tries, in order: {"error": {"message": ...}}, {"error": "..."},
    {"message": ...}. Anything else is returned as text, truncated to
    500 characters with a trailing "...".

    Args:
        body: Raw response body

    Returns:
        Extracted or truncated message
    """
    if not body:
        return NO_RESPONSE_BODY

    try:
        data = json.loads(body)
    except ValueError:
        data = None

    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict):
            message = _primitive_text(error.get("message"))
            if message is not None:
                return message
        else:
            message = _primitive_text(error)
            if message is not None:
                return message

        message = _primitive_text(data.get("message"))
        if message is not None:
            return message

    if len(body) > ERROR_MESSAGE_LIMIT:
        return body[:ERROR_MESSAGE_LIMIT] + "..."
    return body


def classify_api_error(
    provider: str,
    status_code: int,
    body: Optional[str],
    url: Optional[str] = None,
    extract: Callable[[Optional[str]], str] = extract_error_message,
) -> LLMAPIError:
    """
    Build the typed error for a non-2xx response.

    Args:
        provider: Provider identifier used in the message
        status_code: HTTP status
        body: Raw response body
        url: Request URL
        extract: Provider-specific envelope reader (defaults to the generic one)

    Returns:
        LLMRateLimitError (429), LLMAuthenticationError (401/403) or LLMAPIError
    """
    message = f"{provider} API error ({status_code}): {extract(body)}"

    if status_code == 429:
        error_class = LLMRateLimitError
    elif status_code in (401, 403):
        error_class = LLMAuthenticationError
    else:
        error_class = LLMAPIError

    return error_class(
        message,
        status_code=status_code,
        response_body=body,
        provider=provider,
        url=url,
    )


def is_tls_failure(exc: BaseException) -> bool:
    """
    True if an ssl.SSLError is in the cause chain.

    Without one, only known OpenSSL phrases in the text count, so a host
    name such as "tls-gw.corp" never turns a connect error into a TLS error.
    """
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, ssl.SSLError):
            return True
        seen.add(id(current))
        current = current.__cause__ or current.__context__

    text = str(exc).lower()
    return any(phrase in text for phrase in _TLS_PHRASES)


def classify_transport_error(provider: str, url: str, exc: BaseException) -> LLMError:
    """
    Build the typed error for a failure before any response arrived.

    Args:
        provider: Provider identifier used in the message
        url: Target URL (included in every message)
        exc: The raised exception

    Returns:
        LLMError subclass matching the failure category
    """
    if isinstance(exc, LLMError):
        return exc

    if isinstance(exc, (httpx.ConnectError, httpx.ProxyError, ssl.SSLError)) and is_tls_failure(exc):
        return LLMTransportSecurityError(
            f"SSL error connecting to {provider} API at {url}. "
            "If behind a corporate proxy that intercepts TLS, configure the proxy settings "
            "(HTTPS_PROXY_HOST / HTTPS_PROXY_PORT) or trust its certificate. "
            f"Error: {exc}",
            provider=provider,
            url=url,
        )

    if isinstance(exc, (httpx.ConnectError, httpx.ProxyError, ConnectionRefusedError)):
        return LLMConnectionError(
            f"Cannot connect to {provider} API at {url}. "
            "Check your network connection and proxy settings "
            "(HTTPS_PROXY_HOST / HTTPS_PROXY_PORT).",
            provider=provider,
            url=url,
        )

    error_class = LLMTimeoutError if isinstance(exc, httpx.TimeoutException) else LLMTransportError
    return error_class(
        f"Network error calling {provider} API at {url}: {str(exc) or exc.__class__.__name__}",
        provider=provider,
        url=url,
    )


def cancelled_error(provider: str, url: str) -> LLMCancelledError:
    """Typed error for a request whose awaiting task was cancelled."""
    return LLMCancelledError(
        f"Request to {provider} API was interrupted",
        provider=provider,
        url=url,
    )


def deadline_error(provider: str, url: str, timeout_s: float) -> LLMTimeoutError:
    """Typed error for a request that outlived the overall request deadline."""
    return LLMTimeoutError(
        f"Network error calling {provider} API at {url}: "
        f"request did not complete within {timeout_s:g}s",
        provider=provider,
        url=url,
    )
