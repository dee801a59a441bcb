"""
MediaEngine backed by the ffmpeg binary.

A private temporary directory plays the role of the engine's virtual file
system; commands run with it as the working directory so relative names in
the argument list resolve inside it.
"""
import logging
import shutil
import tempfile
from pathlib import Path
from typing import List, Optional

import aiofiles

from services.media_engine import MediaEngine
from utils.errors import EngineLoadError, MixExecutionError
from utils.ffmpeg import check_ffmpeg, run_ffmpeg

logger = logging.getLogger(__name__)


class FFmpegEngine(MediaEngine):

    def __init__(self):
        self.binary: Optional[str] = None
        self.workdir: Optional[Path] = None

    @property
    def loaded(self) -> bool:
        return self.workdir is not None

    async def load(self, binary: Optional[str] = None, **locators) -> None:
        self.binary = await check_ffmpeg(binary)
        try:
            self.workdir = Path(tempfile.mkdtemp(prefix="audio-merger-"))
        except OSError as e:
            raise EngineLoadError(f"Could not create engine workspace: {e}") from e
        logger.info(f"FFmpeg engine loaded (workspace {self.workdir})")

    def _path(self, name: str) -> Path:
        if not self.loaded:
            raise MixExecutionError("Engine is not loaded")
        if Path(name).name != name:
            raise ValueError(f"Engine file names must be bare names, got {name!r}")
        return self.workdir / name

    async def write_file(self, name: str, data: bytes) -> None:
        async with aiofiles.open(self._path(name), "wb") as f:
            await f.write(data)

    async def exec(self, args: List[str]) -> None:
        if not self.loaded:
            raise MixExecutionError("Engine is not loaded")
        await run_ffmpeg(args, binary=self.binary, cwd=self.workdir)

    async def read_file(self, name: str) -> bytes:
        try:
            async with aiofiles.open(self._path(name), "rb") as f:
                return await f.read()
        except FileNotFoundError as e:
            raise MixExecutionError(f"Engine output not found: {name}") from e

    def terminate(self) -> None:
        if self.workdir is not None:
            shutil.rmtree(self.workdir, ignore_errors=True)
            logger.info(f"FFmpeg engine released (workspace {self.workdir})")
        self.workdir = None
