"""Configuration models for Zeno.

ZenoConfig is the persisted configuration record. Field aliases match the
keys written to ``config.json`` so existing files keep working.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_MODEL = "gemini-2.5-flash"
CONFIG_FILE_NAME = "config.json"
TRANSCRIPT_FILE_NAME = "zeno_chat_history.json"


def default_config_dir() -> Path:
    """Return the config directory, honouring ``ZENO_CONFIG_DIR``."""
    override = os.environ.get("ZENO_CONFIG_DIR")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "zeno"


class ZenoConfig(BaseModel):
    """Persisted configuration: API credential and working directory."""

    model_config = {"populate_by_name": True}

    api_key: Optional[str] = Field(default=None, alias="apiKey")
    files_working_directory: Optional[str] = Field(
        default=None, alias="filesWorkingDirectory"
    )

    @field_validator("api_key", "files_working_directory", mode="before")
    @classmethod
    def _blank_to_none(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def effective_api_key(self) -> str | None:
        """API key for this process: ``ZENO_API_KEY`` wins over the stored key."""
        return os.environ.get("ZENO_API_KEY") or self.api_key

    def to_file_dict(self) -> dict:
        """Serialize with file aliases, omitting unset values."""
        return self.model_dump(by_alias=True, exclude_none=True)
