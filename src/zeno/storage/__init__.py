"""Persistence for Zeno's config and transcript files."""

from zeno.storage.files import ConfigStore, TranscriptStore

__all__ = ["ConfigStore", "TranscriptStore"]
