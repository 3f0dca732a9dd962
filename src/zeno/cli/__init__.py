"""Zeno CLI -- interactive chat with confirmation-gated local actions.

This module is NEVER imported from zeno/__init__.py.
It is only loaded via the ``zeno`` entry point defined in pyproject.toml.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
import httpx

from zeno._version import __version__
from zeno.cli.commands import ReplContext, is_command, run_command
from zeno.cli.formatting import (
    ConsoleObserver,
    action_presenter,
    format_error,
    get_console,
    print_help,
    print_session_banner,
)
from zeno.exceptions import ConfigError, StorageError, TranscriptError
from zeno.llm.client import GeminiClient
from zeno.llm.errors import LLMConfigError
from zeno.models.config import DEFAULT_MODEL, default_config_dir
from zeno.orchestrator.callbacks import console_prompt
from zeno.orchestrator.gate import ConfirmationGate
from zeno.orchestrator.loop import Orchestrator
from zeno.session import ModeController, SessionContext
from zeno.storage.files import ConfigStore, TranscriptStore
from zeno.toolkit.dispatcher import ToolDispatcher
from zeno.toolkit.executors import WEB_SEARCH_TIMEOUT

if TYPE_CHECKING:
    from collections.abc import Callable

    from rich.console import Console

    from zeno.llm.protocols import ModelTransport
    from zeno.models.config import ZenoConfig
    from zeno.models.transcript import Transcript

logger = logging.getLogger(__name__)


def _build_transport(api_key: str, model: str) -> ModelTransport:
    """Create the model transport for this session."""
    return GeminiClient(api_key=api_key, model=model)


def _ask_api_key(console: Console, config: ZenoConfig, store: ConfigStore) -> str:
    """Ask for an API key and optionally save it.

    Raises:
        ConfigError: If the operator enters no key.
    """
    console.print("[yellow]Gemini API Key not found in Zeno's configuration.[/yellow]")
    key = click.prompt(
        "Please enter your Gemini API Key",
        default="",
        show_default=False,
        hide_input=True,
    ).strip()
    if not key:
        raise ConfigError("API Key is not set. Cannot initialize Gemini client.")
    if click.confirm("Do you want to save this API Key for future use?", default=False):
        config.api_key = key
        try:
            store.save(config)
        except StorageError as exc:
            format_error(str(exc), console)
        else:
            console.print("[green]API Key saved.[/green]")
    return key


def _directory_prompt(console: Console) -> Callable[[], str]:
    def ask() -> str:
        console.print("[blue]Enable file manipulation mode:[/blue]")
        try:
            return console.input(
                "[blue]Enter full path to the folder Zeno can manage, "
                "or type 'this_folder': [/blue]"
            )
        except (EOFError, KeyboardInterrupt):
            return ""

    return ask


def _save_transcript(
    console: Console, transcript_store: TranscriptStore, transcript: Transcript
) -> None:
    """Persist the transcript, reporting (not raising) write failures."""
    try:
        transcript_store.save(transcript)
    except StorageError as exc:
        format_error(str(exc), console)


@click.command()
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    envvar="ZENO_CONFIG_DIR",
    help="Directory holding config.json and the chat history.",
)
@click.option(
    "--model",
    default=DEFAULT_MODEL,
    envvar="ZENO_MODEL",
    show_default=True,
    help="Gemini model to chat with.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
@click.version_option(__version__, prog_name="zeno")
def main(config_dir: Path | None, model: str, verbose: bool) -> None:
    """Zeno: chat with Gemini, with every local action confirmed by you."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    console = get_console()
    config_dir = config_dir or default_config_dir()
    config_store = ConfigStore(config_dir)
    transcript_store = TranscriptStore(config_dir)

    console.print("[bold magenta]Welcome to Zeno Chat![/bold magenta]")
    config = config_store.load()
    try:
        api_key = config.effective_api_key() or _ask_api_key(console, config, config_store)
    except ConfigError as exc:
        format_error(str(exc), console)
        raise SystemExit(1) from None

    try:
        transcript = transcript_store.load()
    except TranscriptError as exc:
        format_error(str(exc), console)
        raise SystemExit(1) from None
    if len(transcript):
        console.print("[dim]Chat history loaded.[/dim]")

    try:
        transport = _build_transport(api_key, model)
    except LLMConfigError as exc:
        format_error(str(exc), console)
        raise SystemExit(1) from None

    session = SessionContext.from_config(config)
    controller = ModeController(
        session, config, config_store, ask_directory=_directory_prompt(console)
    )
    ctx = ReplContext(
        console=console,
        model=model,
        session=session,
        controller=controller,
        transcript=transcript,
        transcript_store=transcript_store,
    )

    with httpx.Client(timeout=WEB_SEARCH_TIMEOUT, follow_redirects=True) as http_client:
        orchestrator = Orchestrator(
            transcript,
            session,
            transport,
            ConfirmationGate(
                prompt=console_prompt(console),
                present=action_presenter(console),
                on_invalid=lambda message: console.print(f"[red]{message}[/red]"),
            ),
            ToolDispatcher(session, http_client=http_client),
            observer=ConsoleObserver(console),
        )
        print_session_banner(console, model, session)
        print_help(console, model, session)
        try:
            _repl(orchestrator, ctx, transcript_store)
        finally:
            transport.close()


def _repl(
    orchestrator: Orchestrator,
    ctx: ReplContext,
    transcript_store: TranscriptStore,
) -> None:
    console = ctx.console
    while True:
        try:
            line = console.input("[green]You: [/green]")
        except (EOFError, KeyboardInterrupt):
            console.print("\n[magenta]Zeno signing off. Goodbye![/magenta]")
            return

        if is_command(line):
            if not run_command(line, ctx):
                return
            continue
        if not line.strip():
            continue

        try:
            orchestrator.send(line)
        finally:
            _save_transcript(console, transcript_store, ctx.transcript)
