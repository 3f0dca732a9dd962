"""Session mode: file-capability state and the controller that toggles it.

SessionContext is the explicit context object shared by the orchestrator
(to decide which actions to advertise) and the dispatcher (to resolve the
working directory). ModeController is the only code that mutates it.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from zeno.models.config import ZenoConfig
    from zeno.storage.files import ConfigStore

logger = logging.getLogger(__name__)

TEMPORARY_SENTINEL = "this_folder"


@dataclass
class SessionContext:
    """Cross-turn file-capability state.

    Attributes:
        file_mode_enabled: Whether file/command actions may be advertised.
        working_directory: The persisted directory choice. Kept in memory
            after file mode is disabled so it can be restored.
        temporary_directory: Directory chosen with ``this_folder``. Never
            persisted; wins over ``working_directory`` while set.
    """

    file_mode_enabled: bool = False
    working_directory: str | None = None
    temporary_directory: str | None = None

    @property
    def active_directory(self) -> str | None:
        return self.temporary_directory or self.working_directory

    @property
    def is_working_directory_temporary(self) -> bool:
        return self.temporary_directory is not None

    @property
    def file_tools_available(self) -> bool:
        return self.file_mode_enabled and self.active_directory is not None

    @classmethod
    def from_config(cls, config: ZenoConfig) -> SessionContext:
        """Restore session mode from persisted config.

        File mode starts enabled when a saved directory still exists.
        """
        directory = config.files_working_directory
        if directory is None:
            return cls()
        if not Path(directory).is_dir():
            logger.warning("Saved working directory %s is not a directory", directory)
            return cls()
        return cls(file_mode_enabled=True, working_directory=directory)


@dataclass(frozen=True)
class ModeChange:
    """Outcome of a toggle: whether state changed, and a message for the user."""

    changed: bool
    message: str


class ModeController:
    """Toggles file mode and persists the non-temporary choice.

    Args:
        session: The shared session context to mutate.
        config: The persisted configuration record.
        store: Where ``config`` is saved.
        ask_directory: Prompt used when a directory must be chosen.
        cwd: Returns the directory used for ``this_folder``.
    """

    def __init__(
        self,
        session: SessionContext,
        config: ZenoConfig,
        store: ConfigStore,
        ask_directory: Callable[[], str],
        cwd: Callable[[], str] = os.getcwd,
    ) -> None:
        self._session = session
        self._config = config
        self._store = store
        self._ask_directory = ask_directory
        self._cwd = cwd

    def toggle(self, choice: str | None = None) -> ModeChange:
        """Toggle file mode.

        Args:
            choice: Directory or ``this_folder`` supplied up front (e.g.
                ``/files ~/work``). When given, file mode is (re)enabled for
                it even if already enabled.

        Raises:
            StorageError: If the config cannot be saved.
        """
        if choice is None and self._session.file_mode_enabled:
            return self._disable()

        if choice is None:
            remembered = self._session.working_directory
            if remembered is not None and Path(remembered).is_dir():
                return self._enable_persisted(remembered)
            choice = self._ask_directory()

        return self._select(choice.strip())

    def _disable(self) -> ModeChange:
        self._session.file_mode_enabled = False
        self._session.temporary_directory = None
        self._config.files_working_directory = None
        self._store.save(self._config)
        logger.info("File mode disabled")
        return ModeChange(True, "File manipulation mode DISABLED.")

    def _select(self, choice: str) -> ModeChange:
        if not choice:
            return ModeChange(
                False, "No directory provided. File manipulation mode unchanged."
            )

        if choice.lower() == TEMPORARY_SENTINEL:
            directory = self._cwd()
            self._session.temporary_directory = directory
            self._session.file_mode_enabled = True
            logger.info("File mode enabled for temporary directory %s", directory)
            return ModeChange(
                True,
                f"File manipulation enabled for current directory (TEMPORARY): {directory}",
            )

        path = Path(choice).expanduser()
        if not path.exists():
            return ModeChange(
                False, f"Path does not exist: {choice}. File mode NOT enabled."
            )
        if not path.is_dir():
            return ModeChange(
                False, "Path provided is not a directory. File mode NOT enabled."
            )
        return self._enable_persisted(str(path.resolve()))

    def _enable_persisted(self, directory: str) -> ModeChange:
        self._session.working_directory = directory
        self._session.temporary_directory = None
        self._session.file_mode_enabled = True
        self._config.files_working_directory = directory
        self._store.save(self._config)
        logger.info("File mode enabled for %s", directory)
        return ModeChange(
            True, f"File manipulation enabled for directory (SAVED): {directory}"
        )
