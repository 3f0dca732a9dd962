"""ToolDispatcher: routes an approved action request to its executor.

The dispatcher applies no policy and asks no questions; confirmation is
the gate's job. It only binds arguments and supplies the directory.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from zeno.toolkit.definitions import advertised_tools, get_all_tools
from zeno.toolkit.models import ToolResult

if TYPE_CHECKING:
    import httpx

    from zeno.models.events import ActionRequest
    from zeno.session import SessionContext
    from zeno.toolkit.models import ToolDefinition

logger = logging.getLogger(__name__)


class ToolDispatcher:
    """Looks up executors by action name and invokes them.

    Usage::

        dispatcher = ToolDispatcher(session)
        result = dispatcher.execute(ActionRequest("run_command", {"command_to_run": "ls"}))
        print(result.text)
    """

    def __init__(
        self,
        session: SessionContext,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._session = session
        self._tools: dict[str, ToolDefinition] = {
            tool.name: tool for tool in get_all_tools(http_client)
        }

    def execute(self, request: ActionRequest) -> ToolResult:
        """Execute ``request`` and return its outcome.

        Arguments not declared by the action are dropped. Never raises.
        """
        tool = self._tools.get(request.name)
        if tool is None:
            logger.warning("Model requested unknown tool %r", request.name)
            return ToolResult.invalid(
                request.name, f"Error: Unknown tool '{request.name}' requested."
            )

        if not isinstance(request.arguments, dict):
            return ToolResult.invalid(
                tool.name,
                f"Error: Invalid arguments for {tool.name}: expected an object.",
            )

        declared = tool.parameters.get("properties", {})
        arguments = {k: v for k, v in request.arguments.items() if k in declared}
        dropped = set(request.arguments) - set(arguments)
        if dropped:
            logger.debug("Dropping undeclared arguments for %s: %s", tool.name, sorted(dropped))

        positional: tuple = ()
        if tool.requires_directory:
            directory = self._session.active_directory
            if directory is None:
                return ToolResult.invalid(
                    tool.name,
                    f"Error: No working directory is set for {tool.name}. "
                    "File manipulation mode is not enabled.",
                )
            positional = (directory,)

        try:
            result = tool.handler(*positional, **arguments)
        except TypeError as exc:
            logger.debug("Argument binding failed for %s: %s", tool.name, exc)
            return ToolResult.invalid(
                tool.name, f"Error: Invalid arguments for {tool.name}: {exc}"
            )
        logger.debug("Tool %s finished with %s", tool.name, result.kind.value)
        return result

    def available_tools(self) -> list[str]:
        """Return the names of every action this dispatcher can run."""
        return list(self._tools)

    def definitions(self) -> list[ToolDefinition]:
        """Return the definitions to advertise for the current session mode."""
        return advertised_tools(list(self._tools.values()), self._session)
