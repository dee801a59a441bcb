"""
Thin wrappers around the ffmpeg binary
"""
import asyncio
import logging
import shutil
from pathlib import Path
from typing import List, Optional, Union

from config.settings import settings
from utils.errors import EngineLoadError, MixExecutionError

logger = logging.getLogger(__name__)

# Lines of stderr kept in error messages
STDERR_TAIL_LINES = 12


def resolve_binary(binary: Optional[str] = None) -> Optional[str]:
    """Resolve an ffmpeg binary name or path to an executable path."""
    return shutil.which(binary or settings.ffmpeg_binary)


def ffmpeg_available(binary: Optional[str] = None) -> bool:
    return resolve_binary(binary) is not None


def _stderr_tail(stderr: bytes) -> str:
    lines = stderr.decode("utf-8", errors="replace").strip().splitlines()
    return "\n".join(lines[-STDERR_TAIL_LINES:])


async def check_ffmpeg(binary: Optional[str] = None) -> str:
    """
    Verify that ``binary`` is a runnable ffmpeg and return its resolved path.

    Raises:
        EngineLoadError: binary missing or ``-version`` failed
    """
    resolved = resolve_binary(binary)
    if not resolved:
        raise EngineLoadError(f"ffmpeg binary not found: {binary or settings.ffmpeg_binary}")

    try:
        proc = await asyncio.create_subprocess_exec(
            resolved, "-version",
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await proc.communicate()
    except OSError as e:
        raise EngineLoadError(f"Could not start ffmpeg at {resolved}: {e}") from e

    if proc.returncode != 0:
        raise EngineLoadError(f"ffmpeg -version failed ({proc.returncode}): {_stderr_tail(stderr)}")

    version_line = stdout.decode("utf-8", errors="replace").splitlines()[:1]
    logger.info(f"Using {resolved}: {version_line[0] if version_line else 'unknown version'}")
    return resolved


async def run_ffmpeg(args: List[str], binary: Optional[str] = None, cwd: Optional[Union[str, Path]] = None) -> None:
    """
    Run ffmpeg non-interactively with ``args``.

    Raises:
        MixExecutionError: the process could not start or exited non-zero
    """
    resolved = resolve_binary(binary)
    if not resolved:
        raise MixExecutionError(f"ffmpeg binary not found: {binary or settings.ffmpeg_binary}")

    cmd = [resolved, "-hide_banner", "-nostdin", "-y", *args]
    logger.debug(f"Running: {' '.join(cmd)}")

    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.PIPE,
            cwd=str(cwd) if cwd else None,
        )
    except OSError as e:
        raise MixExecutionError(f"Could not start ffmpeg: {e}") from e

    try:
        _, stderr = await proc.communicate()
    except asyncio.CancelledError:
        # The child must be gone before scratch cleanup runs, or it can recreate the output
        logger.warning(f"ffmpeg cancelled, killing pid {proc.pid}")
        try:
            proc.kill()
        except ProcessLookupError:
            pass
        await proc.wait()
        raise

    if proc.returncode != 0:
        tail = _stderr_tail(stderr)
        raise MixExecutionError(
            f"ffmpeg exited with code {proc.returncode}: {tail}",
            returncode=proc.returncode,
            stderr=tail,
        )
