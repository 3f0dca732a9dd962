"""Built-in confirmation prompts for the gate.

Provides ready-made prompt callables for common approval workflows:
console_prompt, auto_approve_all, deny_all, and scripted.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from rich.console import Console

logger = logging.getLogger(__name__)


def console_prompt(console: Console) -> Callable[[str], str]:
    """Interactive prompt reading answers from a rich console.

    EOFError and KeyboardInterrupt propagate so the gate treats closed
    input as a denial.
    """

    def prompt(message: str) -> str:
        return console.input(f"[bold yellow]{message}[/bold yellow]")

    return prompt


def auto_approve_all(message: str) -> str:
    """Approve every action without asking.

    For unattended runs where no human review is needed.
    """
    logger.info("Auto-approving: %s", message.strip())
    return "1"


def deny_all(message: str) -> str:
    """Deny every action.

    For testing and safety -- blocks all side effects.
    """
    return "2"


def scripted(answers: Iterable[str]) -> Callable[[str], str]:
    """Answer prompts from a fixed sequence.

    Raises EOFError once the answers run out, which the gate reads as a
    denial.
    """
    remaining = iter(answers)

    def prompt(message: str) -> str:
        try:
            return next(remaining)
        except StopIteration:
            raise EOFError("No scripted answers left") from None

    return prompt
