"""
ffmpeg runner behaviour with the subprocess replaced
"""
import asyncio

import pytest

from utils import ffmpeg
from utils.errors import MixExecutionError


class HangingProcess:
    """Stands in for an ffmpeg child that never finishes on its own."""

    pid = 4242

    def __init__(self):
        self.returncode = None
        self.killed = False
        self.waited = False
        self.started = asyncio.Event()
        self._exited = asyncio.Event()

    async def communicate(self):
        self.started.set()
        await self._exited.wait()
        return b"", b""

    def kill(self):
        self.killed = True
        self.returncode = -9
        self._exited.set()

    async def wait(self):
        await self._exited.wait()
        self.waited = True
        return self.returncode


class FinishedProcess:
    pid = 4243

    def __init__(self, returncode, stderr=b""):
        self.returncode = returncode
        self._stderr = stderr

    async def communicate(self):
        return b"", self._stderr


@pytest.fixture
def spawn(monkeypatch):
    """Replace process creation; ``spawn.proc`` is what the runner gets."""
    monkeypatch.setattr(ffmpeg, "resolve_binary", lambda binary=None: "/usr/bin/ffmpeg")

    class Spawner:
        proc = None
        cmd = None

    async def fake_exec(*cmd, **kwargs):
        Spawner.cmd = list(cmd)
        return Spawner.proc

    monkeypatch.setattr(ffmpeg.asyncio, "create_subprocess_exec", fake_exec)
    return Spawner


@pytest.mark.asyncio
async def test_cancelled_run_kills_the_child(spawn):
    proc = spawn.proc = HangingProcess()

    task = asyncio.create_task(ffmpeg.run_ffmpeg(["-i", "speech.mp3", "output.mp3"]))
    await proc.started.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task

    assert proc.killed
    assert proc.waited


@pytest.mark.asyncio
async def test_runner_is_non_interactive(spawn):
    spawn.proc = FinishedProcess(0)

    await ffmpeg.run_ffmpeg(["-i", "a.wav", "out.mp3"])

    assert spawn.cmd[:4] == ["/usr/bin/ffmpeg", "-hide_banner", "-nostdin", "-y"]
    assert spawn.cmd[4:] == ["-i", "a.wav", "out.mp3"]


@pytest.mark.asyncio
async def test_failure_carries_returncode_and_stderr_tail(spawn):
    stderr = "\n".join(f"line {i}" for i in range(30)).encode()
    spawn.proc = FinishedProcess(1, stderr)

    with pytest.raises(MixExecutionError) as exc_info:
        await ffmpeg.run_ffmpeg(["-i", "bad.mp3", "out.mp3"])

    assert exc_info.value.returncode == 1
    assert exc_info.value.stderr.splitlines() == [f"line {i}" for i in range(18, 30)]


def test_error_without_exit_status_has_no_returncode():
    assert MixExecutionError("boom").returncode is None
