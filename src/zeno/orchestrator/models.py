"""Orchestrator decision and result models.

Provides ConfirmationDecision, GateState, StepResult, and TurnResult for
the orchestrator's propose-confirm-execute loop.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from zeno.models.events import ActionRequest
    from zeno.toolkit.models import ToolResult


class GateState(str, enum.Enum):
    """States of a single confirmation."""

    PROPOSED = "proposed"
    EXPLAINING = "explaining"
    APPROVED = "approved"
    DENIED = "denied"


@dataclass(frozen=True)
class ConfirmationDecision:
    """The operator's answer to one proposed action.

    Frozen: once the gate decides, the decision is immutable.

    Attributes:
        approved: Whether the action may run.
        explanation_requested: Whether an explanation round happened.
        explanation: The model's explanation, if one was requested.
    """

    approved: bool
    explanation_requested: bool = False
    explanation: str | None = None


@dataclass(frozen=True)
class StepResult:
    """Result of a single orchestrator step (one action request).

    Attributes:
        step: 1-based step number within the user message.
        request: The action the model asked for.
        decision: The gate's decision.
        result: The executor's result, or None when the action was denied.
        outcome: The text recorded in the transcript for this step.
    """

    step: int
    request: ActionRequest
    decision: ConfirmationDecision
    result: ToolResult | None = None
    outcome: str = ""

    @property
    def executed(self) -> bool:
        return self.result is not None


@dataclass(frozen=True)
class TurnResult:
    """Final result of handling one user message.

    Attributes:
        final_text: The model's closing text, if it produced any.
        steps: Action steps taken along the way.
        notice: Finish or block reason when the model returned no text.
        error: Protocol error that ended the turn early.
    """

    final_text: str | None = None
    steps: list[StepResult] = field(default_factory=list)
    notice: str | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None
