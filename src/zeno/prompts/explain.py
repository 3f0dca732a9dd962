"""Explanation request prompts.

Text sent on the operator's behalf when they ask the model to justify a
proposed action before deciding on it.
"""

from __future__ import annotations

import json


def build_explanation_note(tool_name: str) -> str:
    """Build the synthetic note recording that an explanation was requested."""
    return f"(System: User requested explanation for your proposed action: {tool_name})"


def build_explanation_request(tool_name: str, arguments: dict) -> str:
    """Build the question asking the model to explain a proposed action.

    Args:
        tool_name: Name of the proposed action.
        arguments: Arguments the model proposed for it.

    Returns:
        The formatted user prompt string.
    """
    return (
        "User is asking for an explanation. Please explain why you (Zeno) want "
        f"to execute the tool '{tool_name}' with arguments {json.dumps(arguments)} "
        "in the context of our current conversation, and what the expected "
        "outcome or purpose is. Be concise."
    )


def build_explanation_turn(tool_name: str, arguments: dict) -> str:
    """Combine the note and the question into the single user turn sent."""
    return (
        f"{build_explanation_note(tool_name)}\n\n"
        f"{build_explanation_request(tool_name, arguments)}"
    )
