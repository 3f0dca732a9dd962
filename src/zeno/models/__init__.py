"""Zeno data models: transcript turns, stream events, and configuration."""

from zeno.models.config import DEFAULT_MODEL, ZenoConfig, default_config_dir
from zeno.models.events import ActionRequest, StreamEnd, StreamEvent, TextFragment
from zeno.models.transcript import (
    ModelActionRequest,
    ModelText,
    ToolOutcome,
    Transcript,
    Turn,
    UserText,
)

__all__ = [
    "ActionRequest",
    "DEFAULT_MODEL",
    "ModelActionRequest",
    "ModelText",
    "StreamEnd",
    "StreamEvent",
    "TextFragment",
    "ToolOutcome",
    "Transcript",
    "Turn",
    "UserText",
    "ZenoConfig",
    "default_config_dir",
]
