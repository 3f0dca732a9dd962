"""Zeno: a command-line agent that chats with a remote model and lets it act
on your machine only with your say-so.

The model may create or rename files and run shell commands inside a
working directory you choose, and search the web. Every local action is
shown to you first and runs only once you approve it.
"""

from zeno._version import __version__

# Errors
from zeno.exceptions import (
    ConfigError,
    OrchestratorError,
    StorageError,
    TranscriptError,
    ZenoError,
)

# Transcript, events, config
from zeno.models import (
    ActionRequest,
    ModelActionRequest,
    ModelText,
    StreamEnd,
    TextFragment,
    ToolOutcome,
    Transcript,
    UserText,
    ZenoConfig,
)

# Session mode
from zeno.session import ModeChange, ModeController, SessionContext

# Orchestration
from zeno.orchestrator import (
    ConfirmationDecision,
    ConfirmationGate,
    Orchestrator,
    OrchestratorConfig,
    TurnObserver,
    TurnResult,
)

# Actions
from zeno.toolkit import ToolDispatcher, ToolResult

# Transport
from zeno.llm import GeminiClient, ModelTransport

__all__ = [
    "__version__",
    "ActionRequest",
    "ConfigError",
    "ConfirmationDecision",
    "ConfirmationGate",
    "GeminiClient",
    "ModeChange",
    "ModeController",
    "ModelActionRequest",
    "ModelText",
    "ModelTransport",
    "Orchestrator",
    "OrchestratorConfig",
    "OrchestratorError",
    "SessionContext",
    "StorageError",
    "StreamEnd",
    "TextFragment",
    "ToolDispatcher",
    "ToolOutcome",
    "ToolResult",
    "Transcript",
    "TranscriptError",
    "TurnObserver",
    "TurnResult",
    "UserText",
    "ZenoConfig",
    "ZenoError",
]
