"""Model-callable actions: definitions, executors, and the dispatcher."""

from zeno.toolkit.definitions import advertised_tools, get_all_tools
from zeno.toolkit.dispatcher import ToolDispatcher
from zeno.toolkit.models import OutcomeKind, ToolDefinition, ToolResult

__all__ = [
    "OutcomeKind",
    "ToolDefinition",
    "ToolDispatcher",
    "ToolResult",
    "advertised_tools",
    "get_all_tools",
]
