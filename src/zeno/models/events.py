"""Events yielded by a model transport while a response streams.

A response is a sequence of ``TextFragment`` and ``ActionRequest`` events
terminated by exactly one ``StreamEnd``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class TextFragment:
    """An incremental piece of model text."""

    text: str


@dataclass(frozen=True)
class ActionRequest:
    """A structured request from the model to run a named action.

    This is the CANONICAL location for ActionRequest. The toolkit and
    orchestrator packages import it from here.
    """

    name: str
    arguments: dict = field(default_factory=dict)


@dataclass(frozen=True)
class StreamEnd:
    """Terminal event of a response stream.

    Attributes:
        finish_reason: Provider finish reason (e.g. "STOP", "SAFETY"), if any.
        block_reason: Prompt-level block reason, if the request was blocked.
        safety_ratings: Raw safety ratings reported with a non-STOP finish.
    """

    finish_reason: str | None = None
    block_reason: str | None = None
    safety_ratings: list[dict] = field(default_factory=list)

    @property
    def reason(self) -> str | None:
        """Human-readable reason for an abnormal end, or None for a clean stop."""
        if self.block_reason:
            return f"Request blocked: {self.block_reason}"
        if self.finish_reason and self.finish_reason != "STOP":
            return f"Responded without text. Finish reason: {self.finish_reason}"
        return None


StreamEvent = Union[TextFragment, ActionRequest, StreamEnd]
