"""Built-in Gemini streaming client on httpx with tenacity retry.

Talks to the Gemini REST ``streamGenerateContent`` endpoint and turns its
server-sent events into Zeno stream events. Reads configuration from
constructor arguments or environment variables.
"""

from __future__ import annotations

import json
import logging
import os
from typing import TYPE_CHECKING, Any

import httpx
import tenacity

from zeno.llm.errors import (
    LLMAuthError,
    LLMConfigError,
    LLMRateLimitError,
    LLMResponseError,
)
from zeno.models.config import DEFAULT_MODEL
from zeno.models.events import ActionRequest, StreamEnd, TextFragment
from zeno.models.transcript import ModelActionRequest, ModelText, ToolOutcome, UserText

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from zeno.models.events import StreamEvent
    from zeno.models.transcript import Turn
    from zeno.toolkit.models import ToolDefinition

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

_RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}
_AUTH_ERROR_STATUS_CODES = {401, 403}

SAFETY_SETTINGS = [
    {"category": category, "threshold": "BLOCK_NONE"}
    for category in (
        "HARM_CATEGORY_HARASSMENT",
        "HARM_CATEGORY_HATE_SPEECH",
        "HARM_CATEGORY_SEXUALLY_EXPLICIT",
        "HARM_CATEGORY_DANGEROUS_CONTENT",
    )
]


def _is_retryable(exc: BaseException) -> bool:
    """Check if an exception is retryable.

    Retryable: 429, 500, 502, 503, 504, connection errors.
    Not retryable: 401, 403, 400, other client errors.
    """
    if isinstance(exc, LLMAuthError):
        return False
    if isinstance(exc, LLMRateLimitError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in _RETRYABLE_STATUS_CODES
    return isinstance(exc, (httpx.ConnectError, httpx.ConnectTimeout))


# ---------------------------------------------------------------------------
# Transcript -> Gemini contents
# ---------------------------------------------------------------------------


def _content_for(turn: Turn, answered: bool) -> dict:
    if isinstance(turn, UserText):
        return {"role": "user", "parts": [{"text": turn.text}]}
    if isinstance(turn, ModelText):
        return {"role": "model", "parts": [{"text": turn.text}]}
    if isinstance(turn, ModelActionRequest):
        if not answered:
            # Gemini rejects a function call that is not followed by its response.
            note = (
                f"(Proposed action {turn.name} with arguments "
                f"{json.dumps(turn.arguments)})"
            )
            return {"role": "model", "parts": [{"text": note}]}
        return {
            "role": "model",
            "parts": [{"functionCall": {"name": turn.name, "args": turn.arguments}}],
        }
    if isinstance(turn, ToolOutcome):
        return {
            "role": "function",
            "parts": [
                {
                    "functionResponse": {
                        "name": turn.name,
                        "response": {"content": turn.result},
                    }
                }
            ],
        }
    raise TypeError(f"Unsupported turn type: {type(turn).__name__}")


def to_contents(turns: Sequence[Turn]) -> list[dict]:
    """Map transcript turns to Gemini ``contents``.

    Consecutive turns with the same role are merged into one content entry
    with several parts.
    """
    contents: list[dict] = []
    for index, turn in enumerate(turns):
        following = turns[index + 1] if index + 1 < len(turns) else None
        answered = isinstance(following, ToolOutcome) and following.name == getattr(
            turn, "name", None
        )
        content = _content_for(turn, answered)
        if contents and contents[-1]["role"] == content["role"]:
            contents[-1]["parts"].extend(content["parts"])
        else:
            contents.append(content)
    return contents


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class GeminiClient:
    """Sync httpx streaming client for the Gemini API.

    Implements the ModelTransport protocol. Opening a stream is retried
    with exponential backoff for transient errors (429, 5xx, connection
    failures). Fails immediately on authentication errors. Once events
    are flowing nothing is retried.

    Usage::

        with GeminiClient(api_key="...") as client:
            for event in client.stream(transcript.turns, tools):
                ...
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        base_url: str | None = None,
        timeout: float = 120.0,
        max_retries: int = 3,
        safety_settings: list[dict] | None = None,
    ) -> None:
        """Initialize the Gemini client.

        Args:
            api_key: API key. Falls back to ZENO_API_KEY env var.
            model: Gemini model name.
            base_url: API base URL. Falls back to ZENO_GEMINI_BASE_URL env
                var, then to the public v1beta endpoint.
            timeout: Request timeout in seconds.
            max_retries: Maximum number of attempts when opening a stream.
            safety_settings: Overrides the default (all BLOCK_NONE) settings.

        Raises:
            LLMConfigError: If no API key is provided or found in environment.
        """
        self._api_key = api_key or os.environ.get("ZENO_API_KEY", "")
        if not self._api_key:
            raise LLMConfigError(
                "No API key provided. Pass api_key= or set ZENO_API_KEY "
                "environment variable."
            )
        self._base_url = (
            base_url or os.environ.get("ZENO_GEMINI_BASE_URL", DEFAULT_BASE_URL)
        ).rstrip("/")
        self.model = model
        self._max_retries = max_retries
        self._safety_settings = (
            safety_settings if safety_settings is not None else SAFETY_SETTINGS
        )
        self._client = httpx.Client(
            timeout=timeout,
            headers={
                "Content-Type": "application/json",
                "x-goog-api-key": self._api_key,
            },
        )

    @property
    def endpoint(self) -> str:
        return f"{self._base_url}/models/{self.model}:streamGenerateContent"

    def build_payload(
        self,
        turns: Sequence[Turn],
        tools: Sequence[ToolDefinition] = (),
    ) -> dict[str, Any]:
        """Build the request body for ``turns`` with ``tools`` advertised."""
        payload: dict[str, Any] = {
            "contents": to_contents(list(turns)),
            "safetySettings": self._safety_settings,
        }
        if tools:
            payload["tools"] = [
                {"functionDeclarations": [tool.to_gemini() for tool in tools]}
            ]
        return payload

    def stream(
        self,
        turns: Sequence[Turn],
        tools: Sequence[ToolDefinition] = (),
    ) -> Iterator[StreamEvent]:
        """Send the conversation and yield events as the response streams.

        Raises:
            LLMAuthError: On 401/403 or a rejected key (no retry).
            LLMRateLimitError: On 429 after all retries exhausted.
            LLMResponseError: On malformed stream data.
            httpx.HTTPError: On other HTTP or network failures.
        """
        payload = self.build_payload(turns, tools)
        logger.debug(
            "Streaming %d contents to %s with %d tools",
            len(payload["contents"]),
            self.model,
            len(tools),
        )
        retryer = tenacity.Retrying(
            retry=tenacity.retry_if_exception(_is_retryable),
            wait=(
                tenacity.wait_exponential(multiplier=1, min=1, max=30)
                + tenacity.wait_random(0, 2)
            ),
            stop=tenacity.stop_after_attempt(self._max_retries),
            before_sleep=tenacity.before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        response = retryer(self._open_stream, payload)
        try:
            yield from self._read_events(response)
        finally:
            response.close()

    def _open_stream(self, payload: dict[str, Any]) -> httpx.Response:
        """Open a single streaming request (no retry) and check its status."""
        request = self._client.build_request(
            "POST", self.endpoint, params={"alt": "sse"}, json=payload
        )
        response = self._client.send(request, stream=True)
        if response.is_success:
            return response

        try:
            response.read()
        finally:
            response.close()

        if response.status_code in _AUTH_ERROR_STATUS_CODES or (
            response.status_code == 400 and "API key not valid" in response.text
        ):
            raise LLMAuthError(
                f"Authentication failed: HTTP {response.status_code} - "
                f"{response.text}"
            )

        if response.status_code == 429:
            retry_after_raw = response.headers.get("Retry-After")
            retry_after: float | None = None
            if retry_after_raw is not None:
                try:
                    retry_after = float(retry_after_raw)
                except (ValueError, TypeError):
                    pass
            raise LLMRateLimitError(
                f"Rate limited: HTTP 429 - {response.text}",
                retry_after=retry_after,
            )

        response.raise_for_status()
        return response

    def _read_events(self, response: httpx.Response) -> Iterator[StreamEvent]:
        finish_reason: str | None = None
        block_reason: str | None = None
        safety_ratings: list[dict] = []

        for chunk in _iter_sse_data(response.iter_lines()):
            try:
                data = json.loads(chunk)
            except json.JSONDecodeError as exc:
                raise LLMResponseError(f"Malformed stream chunk: {chunk!r}") from exc
            if not isinstance(data, dict):
                raise LLMResponseError(f"Unexpected stream chunk: {data!r}")

            feedback = data.get("promptFeedback") or {}
            if feedback.get("blockReason"):
                block_reason = feedback["blockReason"]

            for candidate in data.get("candidates") or []:
                parts = (candidate.get("content") or {}).get("parts") or []
                for part in parts:
                    if part.get("text"):
                        yield TextFragment(part["text"])
                    elif "functionCall" in part:
                        call = part["functionCall"]
                        args = call.get("args")
                        if not isinstance(args, dict):
                            if args is not None:
                                logger.warning(
                                    "Ignoring non-object args for %s: %r", call.get("name"), args
                                )
                            args = {}
                        yield ActionRequest(call.get("name", ""), args)
                if candidate.get("finishReason"):
                    finish_reason = candidate["finishReason"]
                    safety_ratings = candidate.get("safetyRatings") or []

        logger.debug("Stream finished: finish=%s block=%s", finish_reason, block_reason)
        yield StreamEnd(finish_reason, block_reason, safety_ratings)

    def close(self) -> None:
        """Close the underlying httpx client."""
        self._client.close()

    def __enter__(self) -> GeminiClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


def _iter_sse_data(lines: Iterator[str]) -> Iterator[str]:
    """Yield the joined ``data:`` payload of each server-sent event."""
    buffer: list[str] = []
    for line in lines:
        if not line.strip():
            if buffer:
                yield "\n".join(buffer)
                buffer = []
            continue
        if line.startswith("data:"):
            buffer.append(line[5:].lstrip())
    if buffer:
        yield "\n".join(buffer)
