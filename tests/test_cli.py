"""CLI tests for Zeno via Click's CliRunner.

The model transport is replaced with a scripted fake through
``zeno.cli._build_transport``; everything else (stores, gate, dispatcher)
is real and works inside a temp config directory.
"""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

import zeno.cli
from tests.fakes import FakeTransport, action, reply
from zeno.cli import main


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def runner():
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def fake(monkeypatch):
    """Install a FakeTransport; returns a setter for its scripted responses."""
    holder = {}

    def install(*responses) -> FakeTransport:
        transport = FakeTransport(*responses)
        holder["transport"] = transport
        holder["api_key"] = None

        def build(api_key, model):
            holder["api_key"] = api_key
            holder["model"] = model
            return transport

        monkeypatch.setattr(zeno.cli, "_build_transport", build)
        return transport

    install.holder = holder
    return install


def _write_config(config_dir, **values):
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "config.json").write_text(json.dumps(values))


def _run(runner, config_dir, stdin):
    return runner.invoke(main, ["--config-dir", str(config_dir)], input=stdin)


# ---------------------------------------------------------------------------
# Startup
# ---------------------------------------------------------------------------


class TestStartup:
    def test_help_option(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "--config-dir" in result.output
        assert "--model" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_missing_key_and_empty_answer_exits(self, runner, config_dir, fake):
        fake()
        result = _run(runner, config_dir, "\n")

        assert result.exit_code == 1
        assert "API Key is not set" in result.output

    def test_prompted_key_can_be_saved(self, runner, config_dir, fake):
        fake()
        result = _run(runner, config_dir, "secret-key\ny\n/exit\n")

        assert result.exit_code == 0, result.output
        assert fake.holder["api_key"] == "secret-key"
        saved = json.loads((config_dir / "config.json").read_text())
        assert saved["apiKey"] == "secret-key"

    def test_prompted_key_not_saved_when_declined(self, runner, config_dir, fake):
        fake()
        result = _run(runner, config_dir, "secret-key\nn\n/exit\n")

        assert result.exit_code == 0, result.output
        assert not (config_dir / "config.json").exists()

    def test_env_key_skips_prompt(self, runner, config_dir, fake, monkeypatch):
        fake()
        monkeypatch.setenv("ZENO_API_KEY", "env-key")

        result = _run(runner, config_dir, "/exit\n")

        assert result.exit_code == 0
        assert fake.holder["api_key"] == "env-key"
        assert "Please enter" not in result.output

    def test_model_option(self, runner, config_dir, fake):
        fake()
        _write_config(config_dir, apiKey="k")

        runner.invoke(main, ["--config-dir", str(config_dir), "--model", "gemini-x"], input="/exit\n")

        assert fake.holder["model"] == "gemini-x"

    def test_corrupt_history_refuses_to_start(self, runner, config_dir, fake):
        fake()
        _write_config(config_dir, apiKey="k")
        (config_dir / "zeno_chat_history.json").write_text("{oops")

        result = _run(runner, config_dir, "/exit\n")

        assert result.exit_code == 1
        assert "Invalid transcript file" in result.output
        assert (config_dir / "zeno_chat_history.json").read_text() == "{oops"

    def test_end_of_input_exits_cleanly(self, runner, config_dir, fake):
        fake()
        _write_config(config_dir, apiKey="k")

        result = _run(runner, config_dir, "")

        assert result.exit_code == 0
        assert "Goodbye" in result.output


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------


class TestChat:
    def test_reply_is_printed_and_saved(self, runner, config_dir, fake):
        fake(reply("Hello there!"))
        _write_config(config_dir, apiKey="k")

        result = _run(runner, config_dir, "hi\n/exit\n")

        assert result.exit_code == 0, result.output
        assert "Zeno: Hello there!" in result.output
        history = json.loads((config_dir / "zeno_chat_history.json").read_text())
        assert history == [
            {"kind": "user_text", "text": "hi"},
            {"kind": "model_text", "text": "Hello there!"},
        ]

    def test_chat_turn_leaves_config_untouched(self, runner, config_dir, fake):
        fake(reply("Hi."))
        _write_config(config_dir, apiKey="k")
        before = (config_dir / "config.json").read_text()

        result = _run(runner, config_dir, "hello\n/exit\n")

        assert result.exit_code == 0, result.output
        assert (config_dir / "config.json").read_text() == before

    def test_history_is_resumed(self, runner, config_dir, fake):
        transport = fake(reply("again"))
        _write_config(config_dir, apiKey="k")
        (config_dir / "zeno_chat_history.json").write_text(
            json.dumps([{"kind": "user_text", "text": "earlier"}])
        )

        result = _run(runner, config_dir, "now\n/exit\n")

        assert "Chat history loaded." in result.output
        assert [t.text for t in transport.calls[0]["turns"]] == ["earlier", "now"]

    def test_blank_input_ignored(self, runner, config_dir, fake):
        transport = fake()
        _write_config(config_dir, apiKey="k")

        _run(runner, config_dir, "\n   \n/exit\n")

        assert transport.calls == []

    def test_confirmed_file_action(self, runner, config_dir, fake, workdir):
        fake(action("new_file", file_path="a.txt", file_content="hey"), reply("Created it."))
        _write_config(config_dir, apiKey="k", filesWorkingDirectory=str(workdir))

        result = _run(runner, config_dir, "make a.txt\n1\n/exit\n")

        assert result.exit_code == 0, result.output
        assert "ACTION CONFIRMATION" in result.output
        assert (workdir / "a.txt").read_text() == "hey"
        assert "Created it." in result.output

    def test_denied_action(self, runner, config_dir, fake, workdir):
        fake(action("run_command", command_to_run="touch x"), reply("Fine."))
        _write_config(config_dir, apiKey="k", filesWorkingDirectory=str(workdir))

        result = _run(runner, config_dir, "touch\n2\n/exit\n")

        assert "WARNING: Executing shell commands can be dangerous!" in result.output
        assert "Action denied by user." in result.output
        assert not (workdir / "x").exists()

    def test_invalid_choice_reprompts(self, runner, config_dir, fake, workdir):
        fake(action("new_file", file_path="a.txt"), reply("ok"))
        _write_config(config_dir, apiKey="k", filesWorkingDirectory=str(workdir))

        result = _run(runner, config_dir, "go\nmaybe\n1\n/exit\n")

        assert "Invalid choice." in result.output
        assert (workdir / "a.txt").exists()


# ---------------------------------------------------------------------------
# Slash commands
# ---------------------------------------------------------------------------


class TestCommands:
    def test_help(self, runner, config_dir, fake):
        fake()
        _write_config(config_dir, apiKey="k")

        result = _run(runner, config_dir, "/HELP\n/exit\n")

        assert result.output.count("Zeno Chat Commands:") == 2

    def test_unknown_command(self, runner, config_dir, fake):
        fake()
        _write_config(config_dir, apiKey="k")

        result = _run(runner, config_dir, "/frobnicate\n/exit\n")

        assert "Unknown command: /frobnicate" in result.output

    def test_history(self, runner, config_dir, fake):
        fake()
        _write_config(config_dir, apiKey="k")
        (config_dir / "zeno_chat_history.json").write_text(
            json.dumps([{"kind": "user_text", "text": "remember me"}])
        )

        result = _run(runner, config_dir, "/history\n/exit\n")

        assert "remember me" in result.output

    def test_clear(self, runner, config_dir, fake):
        fake()
        _write_config(config_dir, apiKey="k")
        history = config_dir / "zeno_chat_history.json"
        history.write_text(json.dumps([{"kind": "user_text", "text": "old"}]))

        result = _run(runner, config_dir, "/clear\n/exit\n")

        assert "Chat history cleared." in result.output
        assert json.loads(history.read_text()) == []

    def test_clear_drops_context_for_next_message(self, runner, config_dir, fake):
        transport = fake(reply("fresh"))
        _write_config(config_dir, apiKey="k")
        (config_dir / "zeno_chat_history.json").write_text(
            json.dumps([{"kind": "user_text", "text": "old"}])
        )

        _run(runner, config_dir, "/clear\nhello\n/exit\n")

        assert [t.text for t in transport.calls[0]["turns"]] == ["hello"]

    def test_files_with_directory_argument(self, runner, config_dir, fake, workdir):
        fake()
        _write_config(config_dir, apiKey="k")

        result = _run(runner, config_dir, f"/files {workdir}\n/exit\n")

        assert "(SAVED)" in result.output
        saved = json.loads((config_dir / "config.json").read_text())
        assert saved["filesWorkingDirectory"] == str(workdir.resolve())

    def test_files_toggle_prompts_and_disables(self, runner, config_dir, fake, workdir):
        fake()
        _write_config(config_dir, apiKey="k")

        result = _run(runner, config_dir, f"/files\n{workdir}\n/files\n/exit\n")

        assert "Enter full path" in result.output
        assert "File manipulation mode DISABLED." in result.output
        saved = json.loads((config_dir / "config.json").read_text())
        assert "filesWorkingDirectory" not in saved

    def test_files_enables_tools_for_next_message(self, runner, config_dir, fake, workdir):
        transport = fake(reply("ok"))
        _write_config(config_dir, apiKey="k")

        _run(runner, config_dir, f"/files {workdir}\nhello\n/exit\n")

        assert len(transport.calls[0]["tools"]) == 4

    def test_exit_closes_transport(self, runner, config_dir, fake):
        transport = fake()
        _write_config(config_dir, apiKey="k")

        result = _run(runner, config_dir, "/exit\n")

        assert "Zeno signing off. Goodbye!" in result.output
        assert transport.closed
