"""Capability executors: one concrete local or network effect each.

Every executor returns a ToolResult and never raises. Validation happens
before any effect, so a rejected call leaves the filesystem untouched.
Executors see only a working directory and their own arguments.
"""

from __future__ import annotations

import logging
import re
import subprocess
from pathlib import Path
from urllib.parse import quote

import httpx

from zeno.toolkit.models import ToolResult

logger = logging.getLogger(__name__)

WEB_SEARCH_URL = "https://text.pollinations.ai/prompt"
WEB_SEARCH_MODEL = "searchgpt"
WEB_SEARCH_TIMEOUT = 60.0

_SEPARATORS = re.compile(r"[\\/]")


def has_parent_segment(path: str) -> bool:
    """Whether ``path`` contains a ``..`` segment under either separator."""
    return ".." in _SEPARATORS.split(path)


def _resolve_inside(working_directory: str, relative_path: str) -> Path | None:
    """Resolve ``relative_path`` and return it only if it stays inside the directory."""
    try:
        base = Path(working_directory).resolve()
        target = (base / relative_path).resolve()
    except (OSError, ValueError) as exc:
        logger.debug("Cannot resolve %r in %s: %s", relative_path, working_directory, exc)
        return None
    if target == base or not target.is_relative_to(base):
        return None
    return target


def _is_valid_path(value: object) -> bool:
    return (
        isinstance(value, str)
        and bool(value)
        and "\x00" not in value
        and not has_parent_segment(value)
    )


# ---------------------------------------------------------------------------
# File actions
# ---------------------------------------------------------------------------


def create_file(
    working_directory: str,
    relative_path: object,
    content: object = None,
) -> ToolResult:
    """Create (or overwrite) a file inside the working directory."""
    name = "new_file"
    if not _is_valid_path(relative_path):
        return ToolResult.invalid(
            name, "Error: Invalid or potentially unsafe file path for new_file."
        )
    if content is not None and not isinstance(content, str):
        return ToolResult.invalid(name, "Error: File content for new_file must be text.")

    target = _resolve_inside(working_directory, relative_path)
    if target is None:
        return ToolResult.invalid(
            name,
            "Error: File path is outside the allowed working directory for new_file.",
        )

    try:
        target.write_text(content or "", encoding="utf-8")
    except (OSError, ValueError) as exc:
        return ToolResult.failed(
            name, f'Error creating file "{relative_path}": {exc.strerror or exc}'
        )
    logger.info("Created %s", target)
    return ToolResult.ok(
        name, f'File "{relative_path}" created successfully in {working_directory}.'
    )


def rename_file(
    working_directory: str,
    relative_old_path: object,
    relative_new_path: object,
) -> ToolResult:
    """Rename or move a file within the working directory.

    Both paths are validated before anything is touched.
    """
    name = "modify_file"
    if not (_is_valid_path(relative_old_path) and _is_valid_path(relative_new_path)):
        return ToolResult.invalid(
            name,
            "Error: Invalid or potentially unsafe file paths for modify_file (rename).",
        )

    source = _resolve_inside(working_directory, relative_old_path)
    destination = _resolve_inside(working_directory, relative_new_path)
    if source is None or destination is None:
        return ToolResult.invalid(
            name,
            "Error: File paths are outside the allowed working directory "
            "for modify_file (rename).",
        )

    try:
        source.rename(destination)
    except (OSError, ValueError) as exc:
        return ToolResult.failed(
            name,
            f'Error renaming file "{relative_old_path}" to "{relative_new_path}": '
            f"{exc.strerror or exc}",
        )
    logger.info("Renamed %s to %s", source, destination)
    return ToolResult.ok(
        name,
        f'File "{relative_old_path}" renamed/moved to "{relative_new_path}" '
        f"successfully in {working_directory}.",
    )


# ---------------------------------------------------------------------------
# Shell
# ---------------------------------------------------------------------------


def run_shell_command(working_directory: str, command: object) -> ToolResult:
    """Run ``command`` through the platform shell with ``cwd`` set.

    A non-zero exit is reported as text alongside whatever output the
    command produced; it is never raised.
    """
    name = "run_command"
    if not isinstance(command, str) or not command.strip() or "\x00" in command:
        return ToolResult.invalid(name, "Error: Invalid command for run_command.")

    logger.info("Executing command in %s: %s", working_directory, command)
    try:
        process = subprocess.run(
            command,
            shell=True,
            cwd=working_directory,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except (OSError, ValueError) as exc:
        return ToolResult.failed(
            name, f'Error executing command "{command}": {exc.strerror or exc}'
        )

    sections: list[str] = []
    if process.stdout:
        sections.append(f"Stdout:\n{process.stdout}")
    if process.stderr:
        sections.append(f"Stderr:\n{process.stderr}")
    if process.returncode < 0:
        sections.append(f"Execution Error: Command terminated by signal {-process.returncode}")
    elif process.returncode > 0:
        sections.append(f"Execution Error: Command exited with status {process.returncode}")

    if not sections:
        return ToolResult.ok(name, "Command executed, no output produced.")

    text = "\n".join(section.rstrip("\n") for section in sections).strip()
    if process.returncode != 0:
        return ToolResult.failed(name, text)
    return ToolResult.ok(name, text)


# ---------------------------------------------------------------------------
# Web search
# ---------------------------------------------------------------------------


def web_search(
    term: object,
    *,
    client: httpx.Client | None = None,
    base_url: str = WEB_SEARCH_URL,
) -> ToolResult:
    """Issue one read-only search request and return the raw response body."""
    name = "web_search"
    if not isinstance(term, str) or not term.strip():
        return ToolResult.invalid(name, "Error: Invalid search term for web_search.")

    url = f"{base_url.rstrip('/')}/{quote(term, safe='')}"
    params = {"model": WEB_SEARCH_MODEL}
    logger.debug("Web search for %r", term)
    try:
        if client is None:
            response = httpx.get(
                url, params=params, timeout=WEB_SEARCH_TIMEOUT, follow_redirects=True
            )
        else:
            response = client.get(url, params=params)
    except httpx.HTTPError as exc:
        logger.warning("Web search request error: %s", exc)
        return ToolResult.failed(
            name, f"Error: Could not connect to the web search service. {exc}"
        )

    if not response.is_success:
        logger.warning("Web search API error: status %s", response.status_code)
        return ToolResult.failed(
            name,
            f"Error: Failed to fetch search results. Status: {response.status_code}",
        )
    return ToolResult.ok(name, response.text)
