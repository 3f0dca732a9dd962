"""Declarations of the four model-callable actions.

Each definition carries a description, JSON Schema parameters, and a
handler lambda. Handler lambdas use explicit parameter whitelisting (no
``**kwargs`` passthrough). Handlers of directory-bound actions take the
working directory as their first argument; the dispatcher supplies it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from zeno.toolkit.executors import (
    create_file,
    rename_file,
    run_shell_command,
    web_search,
)
from zeno.toolkit.models import ToolDefinition

if TYPE_CHECKING:
    import httpx

    from zeno.session import SessionContext


def get_all_tools(http_client: httpx.Client | None = None) -> list[ToolDefinition]:
    """Build definitions for every action Zeno can perform.

    Args:
        http_client: Optional client used by ``web_search``. A one-off
            request is made when omitted.
    """
    return [
        ToolDefinition(
            name="web_search",
            description=(
                "Search on the web for a given term to find real-time information "
                "or information beyond the model's training data."
            ),
            parameters={
                "type": "object",
                "properties": {
                    "term_to_search": {
                        "type": "string",
                        "description": "The keyword or phrase to search on the web.",
                    },
                },
                "required": ["term_to_search"],
            },
            handler=lambda term_to_search: web_search(
                term_to_search, client=http_client
            ),
            requires_directory=False,
        ),
        ToolDefinition(
            name="new_file",
            description=(
                "Create a new file in the configured working directory."
            ),
            parameters={
                "type": "object",
                "properties": {
                    "file_path": {
                        "type": "string",
                        "description": "Path of the file relative to the working directory.",
                    },
                    "file_content": {
                        "type": "string",
                        "description": "Content for the new file.",
                    },
                },
                "required": ["file_path"],
            },
            handler=lambda working_directory, file_path, file_content=None: create_file(
                working_directory, file_path, file_content
            ),
        ),
        ToolDefinition(
            name="run_command",
            description=(
                "Run a shell command in the configured working directory. "
                "Use with extreme caution."
            ),
            parameters={
                "type": "object",
                "properties": {
                    "command_to_run": {
                        "type": "string",
                        "description": "The shell command to execute.",
                    },
                },
                "required": ["command_to_run"],
            },
            handler=lambda working_directory, command_to_run: run_shell_command(
                working_directory, command_to_run
            ),
        ),
        ToolDefinition(
            name="modify_file",
            description=(
                "Rename or move a file within the configured working directory."
            ),
            parameters={
                "type": "object",
                "properties": {
                    "file_path": {
                        "type": "string",
                        "description": "Current path of the file relative to the working directory.",
                    },
                    "new_file_name": {
                        "type": "string",
                        "description": "New path of the file relative to the working directory.",
                    },
                },
                "required": ["file_path", "new_file_name"],
            },
            handler=lambda working_directory, file_path, new_file_name: rename_file(
                working_directory, file_path, new_file_name
            ),
        ),
    ]


def advertised_tools(
    tools: list[ToolDefinition], session: SessionContext
) -> list[ToolDefinition]:
    """Filter ``tools`` down to what the model may be offered right now.

    ``web_search`` is always offered. Directory-bound actions are offered
    only while file mode is enabled with an active directory.
    """
    if session.file_tools_available:
        return list(tools)
    return [tool for tool in tools if not tool.requires_directory]
