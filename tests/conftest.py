from __future__ import annotations

import io
import logging

import pytest

from voice_tools.platform.logging import configure_logging


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Point the config file lookup at an empty home and clear credentials."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    monkeypatch.delenv("ELEVENLABS_API_KEY", raising=False)
    monkeypatch.delenv("WHISPER_CPP_MODEL", raising=False)
    return tmp_path


@pytest.fixture(autouse=True)
def log_stream():
    stream = io.StringIO()
    configure_logging(logging.DEBUG, stream=stream)
    yield stream
    configure_logging(logging.INFO, stream=io.StringIO())


@pytest.fixture
def config_file(isolated_environment):
    """Write ``KEY=value`` lines into the per-test config file."""

    def _write(**values) -> str:
        path = isolated_environment / ".voice_tools_env_vars"
        path.write_text("".join(f"{key}={value}\n" for key, value in values.items()), encoding="utf-8")
        return str(path)

    return _write
