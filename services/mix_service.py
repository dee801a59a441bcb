"""
Mix service for merging a speech track with a music track
"""
import asyncio
import logging
from contextlib import nullcontext
from pathlib import Path
from typing import Callable, Optional

from config.settings import settings
from models.audio import AudioInput, MixResult
from models.mix_recipe import MERGE_RECIPE, MixRecipe
from services.media_engine import MediaEngine
from utils.ffmpeg import run_ffmpeg
from utils.scratch import scratch_workspace
from utils.security_utils import require_inputs
from utils.shared_utils import merged_filename

logger = logging.getLogger(__name__)

StatusCallback = Callable[[str], None]

# Names used inside an engine's own file system
ENGINE_SPEECH_NAME = "speech.mp3"
ENGINE_MUSIC_NAME = "music.mp3"
ENGINE_OUTPUT_NAME = "output.mp3"

# Suggested download name on the local path
LOCAL_RESULT_NAME = "merged-audio.mp3"


def _report(on_status: Optional[StatusCallback], message: str):
    logger.info(message)
    if on_status:
        on_status(message)


class MixService:
    """Service for handling the speech + music merge"""

    def __init__(
        self,
        recipe: MixRecipe = MERGE_RECIPE,
        ffmpeg_binary: Optional[str] = None,
        scratch_dir: Optional[Path] = None,
        max_concurrent: Optional[int] = None,
    ):
        self.recipe = recipe
        self.ffmpeg_binary = ffmpeg_binary or settings.ffmpeg_binary
        self.scratch_dir = Path(scratch_dir or settings.scratch_dir)
        if max_concurrent is None:
            max_concurrent = settings.merge_max_concurrent
        self._semaphore = asyncio.Semaphore(max_concurrent) if max_concurrent > 0 else None

    def _admission(self):
        return self._semaphore if self._semaphore is not None else nullcontext()

    async def merge_files(self, speech_path: Path, music_path: Path, output_path: Path) -> None:
        """Run the merge recipe over files already on disk."""
        args = self.recipe.build_args(str(speech_path), str(music_path), str(output_path))
        try:
            await run_ffmpeg(args, binary=self.ffmpeg_binary)
        except Exception as e:
            logger.error(f"Error in merge_files: {e}")
            raise

    async def merge_uploads(self, speech: Optional[AudioInput], music: Optional[AudioInput]) -> MixResult:
        """
        Server path: stage both uploads in the scratch directory, merge them
        and return the encoded MP3.

        Both inputs are checked before anything touches the disk. All three
        scratch files are deleted before this returns, on success or failure.

        Raises:
            MissingInputError: an input is absent or empty
            MixExecutionError: ffmpeg failed
        """
        require_inputs([speech, music])

        async with self._admission():
            async with scratch_workspace(self.scratch_dir) as workspace:
                speech_path = await workspace.write(speech.filename, speech.data)
                music_path = await workspace.write(music.filename, music.data)

                output_name = merged_filename()
                output_path = workspace.reserve(output_name)

                await self.merge_files(speech_path, music_path, output_path)
                data = await workspace.read(output_path)

        logger.info(f"Merged {speech.filename} + {music.filename} -> {output_name} ({len(data)} bytes)")
        return MixResult(data=data, filename=output_name)

    async def merge_with_engine(
        self,
        engine: MediaEngine,
        speech: Optional[AudioInput],
        music: Optional[AudioInput],
        on_status: Optional[StatusCallback] = None,
    ) -> MixResult:
        """
        Local path: push both buffers into a loaded engine, run the recipe and
        read the result back. The engine is not released here.
        """
        require_inputs([speech, music])

        _report(on_status, "Loading speech audio...")
        await engine.write_file(ENGINE_SPEECH_NAME, speech.data)

        _report(on_status, "Loading music audio...")
        await engine.write_file(ENGINE_MUSIC_NAME, music.data)

        _report(on_status, "Merging audio files...")
        await engine.exec(self.recipe.build_args(ENGINE_SPEECH_NAME, ENGINE_MUSIC_NAME, ENGINE_OUTPUT_NAME))

        _report(on_status, "Preparing download...")
        data = await engine.read_file(ENGINE_OUTPUT_NAME)

        return MixResult(data=data, filename=LOCAL_RESULT_NAME)
