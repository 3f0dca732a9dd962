"""Errors raised while talking to Gemini.

The orchestrator treats every LLMClientError as a protocol error: the
current message ends and the reason is shown to the operator.
"""

from __future__ import annotations

from zeno.exceptions import ZenoError


class LLMClientError(ZenoError):
    """Base for Gemini transport errors."""


class LLMConfigError(LLMClientError):
    """No API key from the argument, ``ZENO_API_KEY``, or config.json."""


class LLMRateLimitError(LLMClientError):
    """Gemini answered 429 on every attempt.

    Attributes:
        retry_after: Value of the last ``Retry-After`` header in seconds,
            or None when Gemini did not send one.
    """

    def __init__(self, message: str = "Rate limited", retry_after: float | None = None) -> None:
        self.retry_after = retry_after
        if retry_after is not None:
            message = f"{message} (retry after {retry_after}s)"
        super().__init__(message)


class LLMAuthError(LLMClientError):
    """The key was refused.

    Gemini reports a bad key as HTTP 400 with "API key not valid" in the
    body, so that case is mapped here along with 401 and 403. Never retried.
    """


class LLMResponseError(LLMClientError):
    """An SSE ``data:`` payload that is not a JSON object."""
