"""Tests for the transcript, stream event, and config models.

Covers:
- Turn discriminated union and append-only Transcript behaviour
- JSON persistence format and rejection of invalid records
- StreamEnd reasons
- ZenoConfig file aliases and environment override
"""

import json

import pytest

from zeno.exceptions import TranscriptError
from zeno.models.config import ZenoConfig, default_config_dir
from zeno.models.events import StreamEnd
from zeno.models.transcript import (
    ModelActionRequest,
    ModelText,
    ToolOutcome,
    Transcript,
    UserText,
)


def _sample() -> Transcript:
    return Transcript([
        UserText(text="make a file"),
        ModelActionRequest(name="new_file", arguments={"file_path": "a.txt"}),
        ToolOutcome(name="new_file", result="File created"),
        ModelText(text="Done."),
    ])


# ---------------------------------------------------------------------------
# Transcript
# ---------------------------------------------------------------------------


class TestTranscript:
    def test_append_preserves_order(self):
        t = Transcript()
        t.append(UserText(text="a"))
        t.append(ModelText(text="b"))

        assert [turn.kind for turn in t] == ["user_text", "model_text"]
        assert len(t) == 2
        assert t[1].text == "b"

    def test_turns_is_a_snapshot(self):
        t = _sample()
        snapshot = t.turns
        t.append(UserText(text="more"))

        assert len(snapshot) == 4
        assert len(t) == 5

    def test_clear(self):
        t = _sample()
        t.clear()
        assert len(t) == 0

    def test_json_round_trip(self):
        t = _sample()
        restored = Transcript.from_json(t.to_json())
        assert list(restored) == list(t)

    def test_persisted_records_use_kind(self):
        records = json.loads(_sample().to_json())

        assert records[0] == {"kind": "user_text", "text": "make a file"}
        assert records[1] == {
            "kind": "action_request",
            "name": "new_file",
            "arguments": {"file_path": "a.txt"},
        }
        assert records[2]["kind"] == "tool_outcome"

    def test_unknown_kind_rejected(self):
        with pytest.raises(TranscriptError):
            Transcript.from_python([{"kind": "system", "text": "x"}])

    def test_not_a_list_rejected(self):
        with pytest.raises(TranscriptError):
            Transcript.from_json('{"kind": "user_text", "text": "x"}')

    def test_invalid_json_rejected(self):
        with pytest.raises(TranscriptError):
            Transcript.from_json("not json")


# ---------------------------------------------------------------------------
# StreamEnd
# ---------------------------------------------------------------------------


class TestStreamEnd:
    def test_clean_stop_has_no_reason(self):
        assert StreamEnd("STOP").reason is None
        assert StreamEnd().reason is None

    def test_block_reason_wins(self):
        assert StreamEnd("SAFETY", block_reason="OTHER").reason == "Request blocked: OTHER"

    def test_non_stop_finish(self):
        assert StreamEnd("SAFETY").reason == "Responded without text. Finish reason: SAFETY"


# ---------------------------------------------------------------------------
# ZenoConfig
# ---------------------------------------------------------------------------


class TestZenoConfig:
    def test_reads_file_aliases(self):
        config = ZenoConfig.model_validate({"apiKey": "k", "filesWorkingDirectory": "/w"})
        assert config.api_key == "k"
        assert config.files_working_directory == "/w"

    def test_blank_values_are_none(self):
        config = ZenoConfig.model_validate({"apiKey": "  ", "filesWorkingDirectory": ""})
        assert config.api_key is None
        assert config.files_working_directory is None

    def test_file_dict_omits_unset(self):
        assert ZenoConfig(api_key="k").to_file_dict() == {"apiKey": "k"}

    def test_env_key_overrides_stored(self, monkeypatch):
        monkeypatch.setenv("ZENO_API_KEY", "env-key")
        assert ZenoConfig(api_key="stored").effective_api_key() == "env-key"

    def test_stored_key_used_without_env(self):
        assert ZenoConfig(api_key="stored").effective_api_key() == "stored"

    def test_default_config_dir_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("ZENO_CONFIG_DIR", str(tmp_path))
        assert default_config_dir() == tmp_path

    def test_default_config_dir_home(self, monkeypatch):
        monkeypatch.delenv("ZENO_CONFIG_DIR")
        assert default_config_dir().parts[-2:] == (".config", "zeno")
