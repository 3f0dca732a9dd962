"""Model transport protocol.

Defines the pluggable interface the orchestrator streams responses through.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from zeno.models.events import StreamEvent
    from zeno.models.transcript import Turn
    from zeno.toolkit.models import ToolDefinition


@runtime_checkable
class ModelTransport(Protocol):
    """Protocol for pluggable model transports.

    Any object with stream() and close() methods matching this signature
    works. The built-in GeminiClient implements this protocol.

    ``stream`` yields ``TextFragment`` and ``ActionRequest`` events as they
    arrive and finishes with exactly one ``StreamEnd``.
    """

    def stream(
        self,
        turns: Sequence[Turn],
        tools: Sequence[ToolDefinition],
    ) -> Iterator[StreamEvent]:
        """Send the conversation and stream the model's response."""
        ...

    def close(self) -> None:
        """Release underlying resources."""
        ...
