"""
llmlink - outbound client layer for LLM backends.

Resolves how to reach the backend (direct, explicit proxy, host-managed
proxy), sends authenticated JSON requests, and classifies failures into
one provider-agnostic error taxonomy.
"""

__version__ = "0.1.0"
