"""Prompt text that Zeno sends to the model on the operator's behalf."""

from zeno.prompts.explain import (
    build_explanation_note,
    build_explanation_request,
    build_explanation_turn,
)

__all__ = [
    "build_explanation_note",
    "build_explanation_request",
    "build_explanation_turn",
]
