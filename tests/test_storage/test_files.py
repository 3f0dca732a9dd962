"""Tests for ConfigStore and TranscriptStore JSON persistence."""

import json

import pytest

from zeno.exceptions import StorageError, TranscriptError
from zeno.models.config import ZenoConfig
from zeno.models.transcript import ModelText, Transcript, UserText
from zeno.storage.files import ConfigStore, TranscriptStore


class TestConfigStore:
    def test_missing_file_gives_defaults(self, config_dir):
        config = ConfigStore(config_dir).load()
        assert config == ZenoConfig()

    def test_save_creates_directory_and_file(self, config_dir):
        store = ConfigStore(config_dir)
        store.save(ZenoConfig(api_key="k", files_working_directory="/w"))

        assert json.loads(store.path.read_text()) == {
            "apiKey": "k",
            "filesWorkingDirectory": "/w",
        }
        assert store.load().api_key == "k"

    def test_reads_original_format_with_null(self, config_dir):
        config_dir.mkdir()
        (config_dir / "config.json").write_text('{"apiKey": "k", "filesWorkingDirectory": null}')

        config = ConfigStore(config_dir).load()

        assert config.api_key == "k"
        assert config.files_working_directory is None

    def test_corrupt_file_gives_defaults(self, config_dir):
        config_dir.mkdir()
        (config_dir / "config.json").write_text("{broken")

        assert ConfigStore(config_dir).load() == ZenoConfig()

    def test_no_temp_files_left_behind(self, config_dir):
        ConfigStore(config_dir).save(ZenoConfig(api_key="k"))
        assert [p.name for p in config_dir.iterdir()] == ["config.json"]

    def test_unwritable_location_raises_storage_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")

        with pytest.raises(StorageError) as exc_info:
            ConfigStore(blocker / "sub").save(ZenoConfig())

        assert "config.json" in exc_info.value.path


class TestTranscriptStore:
    def test_missing_file_gives_empty_transcript(self, config_dir):
        assert len(TranscriptStore(config_dir).load()) == 0

    def test_save_and_load(self, config_dir):
        store = TranscriptStore(config_dir)
        store.save(Transcript([UserText(text="hi"), ModelText(text="hello")]))

        loaded = store.load()

        assert list(loaded) == [UserText(text="hi"), ModelText(text="hello")]
        assert store.path.name == "zeno_chat_history.json"

    def test_corrupt_file_raises_and_is_kept(self, config_dir):
        config_dir.mkdir()
        path = config_dir / "zeno_chat_history.json"
        path.write_text('[{"role": "user", "parts": []}]')

        with pytest.raises(TranscriptError) as exc_info:
            TranscriptStore(config_dir).load()

        assert exc_info.value.path == str(path)
        assert path.read_text() == '[{"role": "user", "parts": []}]'

    def test_overwrite_replaces_content(self, config_dir):
        store = TranscriptStore(config_dir)
        store.save(Transcript([UserText(text="one")]))
        store.save(Transcript())

        assert store.path.read_text().strip() == "[]"
