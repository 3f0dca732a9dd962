"""Orchestrator configuration types.

Provides OrchestratorState and OrchestratorConfig for the conversation
orchestrator.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class OrchestratorState(str, enum.Enum):
    """States the orchestrator can be in while handling a user message."""

    IDLE = "idle"
    STREAMING = "streaming"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    EXECUTING = "executing"


@dataclass
class OrchestratorConfig:
    """Configuration for the conversation orchestrator.

    Mutable dataclass -- callers may adjust settings between messages.

    Attributes:
        max_rounds: Maximum model round trips per user message. None means
            the model may keep requesting actions until it answers in text.
    """

    max_rounds: int | None = None
