"""
Scratch directory staging for the server merge path.

Every file handed out by a ScratchWorkspace is removed when the workspace
closes, whatever way the request ends.
"""
import logging
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import List

import aiofiles
import aiofiles.os

from utils.security_utils import sanitize_filename

logger = logging.getLogger(__name__)


class ScratchWorkspace:

    def __init__(self, root: Path):
        self.root = Path(root)
        self.paths: List[Path] = []

    def reserve(self, filename: str) -> Path:
        """Allocate a collision-free path under the scratch root."""
        path = self.root / f"{uuid.uuid4()}-{sanitize_filename(filename)}"
        self.paths.append(path)
        return path

    async def write(self, filename: str, data: bytes) -> Path:
        path = self.reserve(filename)
        async with aiofiles.open(path, "wb") as f:
            await f.write(data)
        return path

    async def read(self, path: Path) -> bytes:
        async with aiofiles.open(path, "rb") as f:
            return await f.read()

    async def cleanup(self) -> None:
        """Delete every allocated file. Failures are logged, never raised."""
        for path in self.paths:
            try:
                await aiofiles.os.remove(path)
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.error(f"Error deleting file {path}: {e}")
        self.paths.clear()


@asynccontextmanager
async def scratch_workspace(root: Path):
    root = Path(root)
    await aiofiles.os.makedirs(root, exist_ok=True)
    workspace = ScratchWorkspace(root)
    try:
        yield workspace
    finally:
        await workspace.cleanup()
