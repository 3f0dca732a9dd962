"""Slash commands available at the ``You:`` prompt.

Commands are matched case-insensitively on their first word; anything
after it is passed through unchanged as the argument.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from rich.markup import escape

from zeno.cli.formatting import format_error, print_help, print_history, print_session_banner
from zeno.exceptions import StorageError

if TYPE_CHECKING:
    from collections.abc import Callable

    from rich.console import Console

    from zeno.models.transcript import Transcript
    from zeno.session import ModeController, SessionContext
    from zeno.storage.files import TranscriptStore

logger = logging.getLogger(__name__)


@dataclass
class ReplContext:
    """Everything the slash commands may read or change."""

    console: Console
    model: str
    session: SessionContext
    controller: ModeController
    transcript: Transcript
    transcript_store: TranscriptStore


def _files(ctx: ReplContext, arg: str | None) -> bool:
    try:
        change = ctx.controller.toggle(arg)
    except StorageError as exc:
        format_error(str(exc), ctx.console)
        return True
    style = "green" if change.changed else "yellow"
    ctx.console.print(f"[{style}]{escape(change.message)}[/{style}]")
    if change.changed:
        print_session_banner(ctx.console, ctx.model, ctx.session)
    return True


def _history(ctx: ReplContext, arg: str | None) -> bool:
    print_history(ctx.transcript, ctx.console)
    return True


def _clear(ctx: ReplContext, arg: str | None) -> bool:
    ctx.transcript.clear()
    try:
        ctx.transcript_store.save(ctx.transcript)
    except StorageError as exc:
        format_error(str(exc), ctx.console)
    ctx.console.print("[yellow]Chat history cleared.[/yellow]")
    return True


def _help(ctx: ReplContext, arg: str | None) -> bool:
    print_help(ctx.console, ctx.model, ctx.session)
    return True


def _exit(ctx: ReplContext, arg: str | None) -> bool:
    ctx.console.print("[magenta]Zeno signing off. Goodbye![/magenta]")
    return False


COMMANDS: dict[str, Callable[[ReplContext, str | None], bool]] = {
    "/files": _files,
    "/history": _history,
    "/clear": _clear,
    "/help": _help,
    "/exit": _exit,
}


def is_command(line: str) -> bool:
    return line.strip().startswith("/")


def run_command(line: str, ctx: ReplContext) -> bool:
    """Run the slash command in ``line``.

    Returns:
        False when the REPL should exit, True otherwise.
    """
    name, _, rest = line.strip().partition(" ")
    handler = COMMANDS.get(name.lower())
    if handler is None:
        ctx.console.print(f"[red]Unknown command: {escape(line.strip())}[/red]")
        return True
    logger.debug("Running command %s", name.lower())
    return handler(ctx, rest.strip() or None)
