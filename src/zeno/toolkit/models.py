"""Toolkit data models for Zeno's model-callable actions.

Frozen dataclasses for action definitions and structured results.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass(frozen=True)
class ToolDefinition:
    """A single action definition for LLM consumption.

    Attributes:
        name: Action name (e.g. "new_file", "web_search").
        description: Human-readable description of when/why to use this action.
        parameters: JSON Schema dict describing the action's parameters.
        handler: Callable that executes the action and returns a ToolResult.
        requires_directory: Whether the action operates on the working
            directory (and so is only advertised in file mode).
    """

    name: str
    description: str
    parameters: dict
    handler: Callable[..., ToolResult]
    requires_directory: bool = True

    def to_gemini(self) -> dict:
        """Convert to a Gemini ``functionDeclarations`` entry."""
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
        }


class OutcomeKind(str, enum.Enum):
    """Classification of an action outcome."""

    SUCCESS = "success"
    VALIDATION_ERROR = "validation_error"
    EXECUTION_ERROR = "execution_error"


@dataclass(frozen=True)
class ToolResult:
    """Structured result from executing an action.

    Rendered to plain text (``text``) only at the boundary to the model,
    which reads successes and failures alike.

    Attributes:
        tool_name: Name of the action that was executed.
        kind: Success, validation error, or execution error.
        message: The outcome text.
    """

    tool_name: str
    kind: OutcomeKind
    message: str

    @property
    def success(self) -> bool:
        return self.kind == OutcomeKind.SUCCESS

    @property
    def text(self) -> str:
        return self.message

    @classmethod
    def ok(cls, tool_name: str, message: str) -> ToolResult:
        return cls(tool_name, OutcomeKind.SUCCESS, message)

    @classmethod
    def invalid(cls, tool_name: str, message: str) -> ToolResult:
        return cls(tool_name, OutcomeKind.VALIDATION_ERROR, message)

    @classmethod
    def failed(cls, tool_name: str, message: str) -> ToolResult:
        return cls(tool_name, OutcomeKind.EXECUTION_ERROR, message)
