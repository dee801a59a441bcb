"""
HTTP client for the merge endpoint
"""
import logging
import re
from pathlib import Path
from typing import Optional

import httpx

from config.settings import settings
from models.audio import MUSIC, SPEECH, AudioInput, MixResult
from utils.errors import MergeRequestError
from utils.security_utils import guess_media_type, require_inputs

logger = logging.getLogger(__name__)

MERGE_ENDPOINT = "/api/merge-audio"

_FILENAME_RE = re.compile(r'filename="?([^";]+)"?')


def filename_from_disposition(header: Optional[str], default: str = "merged.mp3") -> str:
    if header:
        match = _FILENAME_RE.search(header)
        if match:
            return match.group(1)
    return default


def load_input(role: str, path) -> AudioInput:
    path = Path(path)
    return AudioInput(role=role, filename=path.name, media_type=guess_media_type(path.name), data=path.read_bytes())


class MergeClient:
    """Posts a speech/music pair to a running merge server"""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = (base_url or settings.server_url).rstrip("/")
        # Merges have no server-side deadline, so neither does the client by default
        self.timeout = timeout
        self.transport = transport

    async def merge(self, speech: AudioInput, music: AudioInput) -> MixResult:
        require_inputs([speech, music])

        files = {
            SPEECH: (speech.filename, speech.data, speech.media_type or "application/octet-stream"),
            MUSIC: (music.filename, music.data, music.media_type or "application/octet-stream"),
        }

        async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(MERGE_ENDPOINT, files=files)

        if response.status_code != 200:
            try:
                message = response.json().get("error") or response.text
            except ValueError:
                message = response.text or f"HTTP {response.status_code}"
            logger.error(f"Merge request failed: status={response.status_code}, error={message}")
            raise MergeRequestError(message, response.status_code)

        filename = filename_from_disposition(response.headers.get("content-disposition"))
        return MixResult(
            data=response.content,
            filename=filename,
            media_type=response.headers.get("content-type", "audio/mpeg"),
        )

    async def merge_paths(self, speech_path, music_path) -> MixResult:
        return await self.merge(load_input(SPEECH, speech_path), load_input(MUSIC, music_path))
