"""Shared test fixtures for Zeno.

Provides temporary working and config directories and a session with
file mode enabled.
"""

import pytest

from zeno.session import SessionContext


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep the developer's real key and config out of every test."""
    monkeypatch.delenv("ZENO_API_KEY", raising=False)
    monkeypatch.delenv("ZENO_MODEL", raising=False)
    monkeypatch.delenv("ZENO_GEMINI_BASE_URL", raising=False)
    monkeypatch.setenv("ZENO_CONFIG_DIR", str(tmp_path / "zeno-config"))


@pytest.fixture
def workdir(tmp_path):
    """An existing directory for file actions."""
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def config_dir(tmp_path):
    return tmp_path / "config"


@pytest.fixture
def file_session(workdir) -> SessionContext:
    """Session with file mode enabled on ``workdir``."""
    return SessionContext(file_mode_enabled=True, working_directory=str(workdir))
