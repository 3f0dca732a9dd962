"""JSON file persistence for configuration and transcript.

Both stores write atomically: the payload goes to a sibling temp file
which then replaces the target, so an interrupted write never leaves a
truncated file behind.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from zeno.exceptions import StorageError, TranscriptError
from zeno.models.config import CONFIG_FILE_NAME, TRANSCRIPT_FILE_NAME, ZenoConfig
from zeno.models.transcript import Transcript

logger = logging.getLogger(__name__)


def _atomic_write(path: Path, data: str) -> None:
    """Write ``data`` to ``path`` via a temp file in the same directory.

    Raises:
        StorageError: If the directory or file cannot be written.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(data)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as exc:
        raise StorageError(str(path), exc.strerror or str(exc)) from exc


class ConfigStore:
    """Loads and saves ``ZenoConfig`` as JSON."""

    def __init__(self, config_dir: str | Path) -> None:
        self.path = Path(config_dir) / CONFIG_FILE_NAME

    def load(self) -> ZenoConfig:
        """Load the config, falling back to defaults when missing or unreadable."""
        if not self.path.exists():
            return ZenoConfig()
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return ZenoConfig.model_validate(raw)
        except (OSError, json.JSONDecodeError, ValidationError) as exc:
            logger.warning("Ignoring unreadable config %s: %s", self.path, exc)
            return ZenoConfig()

    def save(self, config: ZenoConfig) -> None:
        _atomic_write(self.path, json.dumps(config.to_file_dict(), indent=2))
        logger.debug("Saved config to %s", self.path)


class TranscriptStore:
    """Loads and saves the transcript as a JSON list of turn records."""

    def __init__(self, config_dir: str | Path) -> None:
        self.path = Path(config_dir) / TRANSCRIPT_FILE_NAME

    def load(self) -> Transcript:
        """Load the transcript, or return an empty one if none was saved.

        Raises:
            TranscriptError: If the file exists but is not a valid transcript.
        """
        if not self.path.exists():
            return Transcript()
        try:
            data = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise TranscriptError(str(self.path), exc.strerror or str(exc)) from exc
        try:
            transcript = Transcript.from_json(data)
        except TranscriptError as exc:
            raise TranscriptError(str(self.path), exc.reason) from exc
        logger.debug("Loaded %d turns from %s", len(transcript), self.path)
        return transcript

    def save(self, transcript: Transcript) -> None:
        _atomic_write(self.path, transcript.to_json())
        logger.debug("Saved %d turns to %s", len(transcript), self.path)
