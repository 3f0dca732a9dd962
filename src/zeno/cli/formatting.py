"""Rich formatting helpers for the Zeno CLI.

Provides functions that render Zeno data for terminal display, and the
console observer that prints streaming model output.
Rich auto-detects TTY and degrades gracefully when piped (no ANSI codes).
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from zeno.models.transcript import ModelActionRequest, ModelText, ToolOutcome, UserText
from zeno.orchestrator.loop import TurnObserver

if TYPE_CHECKING:
    from collections.abc import Callable

    from zeno.models.events import ActionRequest
    from zeno.models.transcript import Transcript
    from zeno.orchestrator.models import StepResult
    from zeno.session import SessionContext


def get_console() -> Console:
    """Create a Rich Console that auto-detects TTY for graceful pipe degradation."""
    return Console(stderr=False)


def format_error(message: str, console: Console) -> None:
    """Display an error message in red."""
    console.print(f"[red]Error:[/red] {escape(message)}")


def format_mode(session: SessionContext) -> str:
    if not session.file_mode_enabled or session.active_directory is None:
        return "[red]DISABLED[/red]"
    label = " (TEMPORARY)" if session.is_working_directory_temporary else ""
    return f"[green]ENABLED for [bold]{escape(session.active_directory)}[/bold]{label}[/green]"


def print_session_banner(console: Console, model: str, session: SessionContext) -> None:
    """Show which model is in use and which actions are available."""
    console.print(f"[magenta]Chat session started with {escape(model)}.[/magenta]")
    console.print("[cyan]Web search tool is available.[/cyan]")
    if session.file_tools_available:
        console.print(
            "[cyan]File manipulation tools are ENABLED for directory: "
            f"[bold]{escape(session.active_directory or '')}[/bold][/cyan]"
        )
    else:
        console.print("[yellow]File manipulation tools are DISABLED.[/yellow]")


def print_help(console: Console, model: str, session: SessionContext) -> None:
    """Display the slash-command help."""
    console.print("\n[cyan]Zeno Chat Commands:[/cyan]")
    console.print(f"[cyan]  Model: {escape(model)}[/cyan]")
    console.print(
        "[cyan]  /files      - Toggle file manipulation mode & set working directory[/cyan]"
    )
    console.print(
        "[cyan]  /files DIR  - Enable file mode for DIR (or 'this_folder' for this session only)[/cyan]"
    )
    console.print("[cyan]  /history    - Show current chat history[/cyan]")
    console.print("[cyan]  /clear      - Clear chat history and start fresh[/cyan]")
    console.print("[cyan]  /help       - Show this help message[/cyan]")
    console.print("[cyan]  /exit       - Exit Zeno[/cyan]")
    console.print(f"[cyan]  Current file mode: [/cyan]{format_mode(session)}")
    console.print()


def print_history(transcript: Transcript, console: Console) -> None:
    """Display every turn of the transcript, oldest first."""
    console.print("[dim]--- Chat History ---[/dim]")
    if not len(transcript):
        console.print("[dim](empty)[/dim]")
    for turn in transcript:
        if isinstance(turn, UserText):
            role, content = "[green]user[/green]", turn.text
        elif isinstance(turn, ModelText):
            role, content = "[bright_blue]model[/bright_blue]", turn.text
        elif isinstance(turn, ModelActionRequest):
            role = "[bright_blue]model[/bright_blue]"
            content = f"[Function Call: {turn.name} Args: {json.dumps(turn.arguments)}]"
        elif isinstance(turn, ToolOutcome):
            role = "[bright_blue]function[/bright_blue]"
            content = f"[Function Response for: {turn.name} Content: {turn.result}]"
        else:
            continue
        console.print(f"{role}: [dim]{escape(content)}[/dim]")
    console.print("[dim]--------------------[/dim]")


def action_presenter(console: Console) -> Callable[[ActionRequest, str | None], None]:
    """Build the gate's ``present`` callable for ``console``."""

    def present(request: ActionRequest, working_directory: str | None) -> None:
        lines = [
            "Zeno wants to perform the following action:",
            f"[bold]Tool:[/bold] {escape(request.name)}",
            f"[bold]Arguments:[/bold] {escape(json.dumps(request.arguments, indent=2))}",
        ]
        if working_directory is not None:
            lines.append(f"[bold]In directory:[/bold] {escape(working_directory)}")
        if request.name == "run_command":
            lines.append("[bold red]WARNING: Executing shell commands can be dangerous![/bold red]")
        console.print(Panel("\n".join(lines), title="ACTION CONFIRMATION", border_style="yellow"))

    return present


class ConsoleObserver(TurnObserver):
    """Prints streamed model output and turn progress to a rich console."""

    _PREFIXES = {
        "reply": ("Zeno: ", "bright_blue"),
        "explanation": ("Zeno (Explanation): ", "bright_cyan"),
    }

    def __init__(self, console: Console) -> None:
        self._console = console
        self._purpose = "reply"
        self._started = False

    def on_stream_start(self, purpose: str) -> None:
        self._purpose = purpose
        self._started = False

    def on_text(self, text: str) -> None:
        prefix, style = self._PREFIXES.get(self._purpose, self._PREFIXES["reply"])
        if not self._started:
            self._console.print(prefix, style=style, end="", markup=False, highlight=False)
            self._started = True
        self._console.print(text, style=style, end="", markup=False, highlight=False)

    def on_stream_end(self, purpose: str) -> None:
        if self._started:
            self._console.print()
        self._started = False

    def on_step(self, step: StepResult) -> None:
        if not step.decision.approved:
            self._console.print("[yellow]Action denied by user.[/yellow]")
            return
        if step.request.name == "web_search":
            term = step.request.arguments.get("term_to_search", "")
            self._console.print(f"[yellow]Zeno performed a web search for: {escape(str(term))}[/yellow]")
        if step.result is not None and not step.result.success:
            self._console.print(f"[red]{escape(step.outcome)}[/red]")
        else:
            self._console.print(f"[dim]{escape(step.request.name)} completed.[/dim]")

    def on_notice(self, message: str) -> None:
        self._console.print(f"[yellow]Zeno: ({escape(message)})[/yellow]")

    def on_error(self, message: str) -> None:
        format_error(message, self._console)
