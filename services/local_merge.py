"""
Local merge session: picks two files, mixes them on this machine with an
owned engine and hands back the result. Nothing is uploaded.
"""
import logging
import traceback
from pathlib import Path
from typing import Callable, Optional

from models.audio import MUSIC, ROLES, SPEECH, AudioInput, MixResult
from services.engine_session import EngineSession
from services.mix_service import MixService
from utils.errors import EngineBusyError, EngineLoadError
from utils.security_utils import guess_media_type, require_inputs, validate_media_types

logger = logging.getLogger(__name__)

SELECT_BOTH_MESSAGE = "Please select both a speech audio file and a music audio file."


class LocalMergeSession:

    def __init__(
        self,
        engine_session: Optional[EngineSession] = None,
        mix_service: Optional[MixService] = None,
        on_status: Optional[Callable[[str], None]] = None,
    ):
        self.engine_session = engine_session or EngineSession()
        self.mix_service = mix_service or MixService()
        self.on_status = on_status
        self.selections = {SPEECH: None, MUSIC: None}
        self.is_loading = False
        self.status = ""
        self.error: Optional[str] = None
        self.result: Optional[MixResult] = None

    def _set_status(self, message: str):
        self.status = message
        if self.on_status and message:
            self.on_status(message)

    @property
    def speech(self) -> Optional[AudioInput]:
        return self.selections[SPEECH]

    @property
    def music(self) -> Optional[AudioInput]:
        return self.selections[MUSIC]

    @property
    def can_submit(self) -> bool:
        return (
            self.engine_session.is_ready
            and not self.is_loading
            and self.speech is not None
            and self.music is not None
        )

    def select_bytes(self, role: str, filename: str, data: bytes, media_type: Optional[str] = None) -> AudioInput:
        if role not in ROLES:
            raise ValueError(f"Unknown role {role!r}, expected one of {ROLES}")
        audio = AudioInput(
            role=role,
            filename=filename,
            media_type=media_type or guess_media_type(filename),
            data=data,
        )
        self.selections[role] = audio
        return audio

    def select(self, role: str, path) -> AudioInput:
        path = Path(path)
        return self.select_bytes(role, path.name, path.read_bytes())

    def clear(self):
        self.selections = {SPEECH: None, MUSIC: None}

    async def start(self) -> None:
        """Load the engine ahead of the first merge."""
        self._set_status("Loading audio processing capabilities...")
        try:
            await self.engine_session.ensure_loaded()
        except EngineLoadError as e:
            self.error = (
                f"Failed to load audio processing capabilities: {e}\n{traceback.format_exc()}"
                ". Please refresh and try again."
            )
            raise
        finally:
            self._set_status("")

    async def submit(self) -> MixResult:
        """
        Validate the current selection and run one merge.

        Raises:
            MissingInputError, UnsupportedMediaTypeError: selection rejected,
                the engine is never touched
            EngineBusyError: a merge is already outstanding
            EngineLoadError, MixExecutionError: the merge failed
        """
        self.error = None
        self.result = None

        if self.is_loading:
            raise EngineBusyError("A merge is already in progress")

        try:
            require_inputs([self.speech, self.music], SELECT_BOTH_MESSAGE)
            validate_media_types([self.speech, self.music])
        except Exception as e:
            self.error = str(e)
            raise

        self.is_loading = True
        self._set_status("Processing audio files...")
        try:
            async with self.engine_session.acquire() as engine:
                result = await self.mix_service.merge_with_engine(
                    engine, self.speech, self.music, on_status=self._set_status
                )
        except Exception as e:
            logger.error(f"Error merging audio: {e}")
            self.error = f"Error merging audio: {e}\n{traceback.format_exc()}"
            raise
        finally:
            self.is_loading = False
            self._set_status("")

        self.result = result
        self.clear()
        return result

    async def close(self) -> None:
        await self.engine_session.release()
