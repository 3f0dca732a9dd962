"""Conversation orchestration: the confirmation gate and the agent loop."""

from zeno.orchestrator.callbacks import (
    auto_approve_all,
    console_prompt,
    deny_all,
    scripted,
)
from zeno.orchestrator.config import OrchestratorConfig, OrchestratorState
from zeno.orchestrator.gate import ConfirmationGate
from zeno.orchestrator.loop import DENIED_OUTCOME, Orchestrator, TurnObserver
from zeno.orchestrator.models import (
    ConfirmationDecision,
    GateState,
    StepResult,
    TurnResult,
)

__all__ = [
    "ConfirmationDecision",
    "ConfirmationGate",
    "DENIED_OUTCOME",
    "GateState",
    "Orchestrator",
    "OrchestratorConfig",
    "OrchestratorState",
    "StepResult",
    "TurnObserver",
    "TurnResult",
    "auto_approve_all",
    "console_prompt",
    "deny_all",
    "scripted",
]
