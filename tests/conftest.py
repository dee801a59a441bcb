"""
Pytest configuration and fixtures for testing
"""
import os
import tempfile
from pathlib import Path

import pytest

# Keep app.log out of the working tree while tests import main
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="audio-merger-logs-"))

from tests.audio_fixtures import FakeEngine, fake_mix  # noqa: E402


@pytest.fixture
def engine_factory():
    """Returns a builder for FakeEngine factories; created engines are kept in FakeEngine.instances."""
    FakeEngine.instances = []

    def make(**kwargs):
        return lambda: FakeEngine(**kwargs)

    return make


@pytest.fixture
def fake_ffmpeg(monkeypatch):
    """
    Replace the ffmpeg runner used by the server path. Records every call and
    writes a fake MP3 to the output path (the last argument).
    """
    calls = []
    state = {"error": None}

    async def run(args, binary=None, cwd=None):
        calls.append(list(args))
        if state["error"] is not None:
            raise state["error"]
        inputs = [Path(args[i + 1]).read_bytes() for i, arg in enumerate(args) if arg == "-i"]
        Path(args[-1]).write_bytes(fake_mix(*inputs))

    monkeypatch.setattr("services.mix_service.run_ffmpeg", run)

    class Handle:
        def fail_with(self, error):
            state["error"] = error

    handle = Handle()
    handle.calls = calls
    return handle


@pytest.fixture
def scratch_dir(tmp_path, monkeypatch):
    """Point the router's MixService at an isolated scratch directory."""
    path = tmp_path / "scratch"
    from routers import merge_router
    monkeypatch.setattr(merge_router.mix_service, "scratch_dir", path)
    return path
