"""
Provider contract as seen by the network layer.

The executor only ever talks to this protocol; concrete vendors live in
llmlink.llm and can be added without touching the resolver or executor.
"""

from typing import Dict, Optional, Protocol


class ProviderContract(Protocol):
    """Identity, authentication hook and error-envelope reader of a provider."""

    @property
    def provider_id(self) -> str:
        """Stable identifier used in error messages and logs."""
        ...

    def apply_auth_headers(self, headers: Dict[str, str]) -> None:
        """Add authentication header(s) in place; add nothing if none are needed."""
        ...

    def extract_error_message(self, body: Optional[str]) -> str:
        """Interpret the vendor's error envelope."""
        ...
