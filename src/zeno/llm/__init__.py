"""Model transport infrastructure for Zeno.

Provides the Gemini streaming client, the pluggable transport protocol,
and the transport error hierarchy.
"""

from zeno.llm.client import GeminiClient
from zeno.llm.errors import (
    LLMAuthError,
    LLMClientError,
    LLMConfigError,
    LLMRateLimitError,
    LLMResponseError,
)
from zeno.llm.protocols import ModelTransport

__all__ = [
    "GeminiClient",
    "ModelTransport",
    "LLMClientError",
    "LLMConfigError",
    "LLMRateLimitError",
    "LLMAuthError",
    "LLMResponseError",
]
