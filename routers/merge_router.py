"""
Merge Router - upload a speech track and a music track, get back one MP3
"""
import logging
from typing import Optional

from fastapi import APIRouter, File, UploadFile

from backend.utils.responses import audio_response, error_response
from config.settings import settings
from models.audio import MUSIC, SPEECH, AudioInput
from services.mix_service import MixService
from utils.errors import MissingInputError, UnsupportedMediaTypeError
from utils.ffmpeg import ffmpeg_available
from utils.security_utils import MISSING_INPUT_MESSAGE, validate_media_types
from utils.shared_utils import log_endpoint_event, new_request_id

logger = logging.getLogger(__name__)

PROCESSING_ERROR_MESSAGE = "Error processing audio files"

# Multipart fields carrying the two tracks
UPLOAD_FIELDS = (SPEECH, MUSIC)

merge_router = APIRouter(prefix="/api", tags=["Merge"])
health_router = APIRouter(tags=["Health"])

# Service instance
mix_service = MixService()


async def _read_upload(role: str, upload: Optional[UploadFile]) -> Optional[AudioInput]:
    # Browsers send an empty, unnamed part for an untouched file input
    if upload is None or not upload.filename:
        return None
    data = await upload.read()
    return AudioInput(role=role, filename=upload.filename, media_type=upload.content_type, data=data)


@merge_router.post("/merge-audio")
async def merge_audio(
    speech: Optional[UploadFile] = File(None),
    music: Optional[UploadFile] = File(None),
):
    """
    Mix speech (100%) with music (40%) and return the MP3 as an attachment.
    """
    request_id = new_request_id()
    endpoint = "/api/merge-audio"

    speech_input = await _read_upload(SPEECH, speech)
    music_input = await _read_upload(MUSIC, music)

    try:
        if speech_input is None or music_input is None:
            raise MissingInputError(MISSING_INPUT_MESSAGE)
        if settings.enforce_media_types:
            validate_media_types([speech_input, music_input])

        result = await mix_service.merge_uploads(speech_input, music_input)
    except (MissingInputError, UnsupportedMediaTypeError) as e:
        log_endpoint_event(endpoint, request_id, "rejected", {"error": str(e)})
        return error_response(str(e), status=400)
    except Exception as e:
        logger.error(f"Error processing audio: {e}")
        log_endpoint_event(endpoint, request_id, "error", {"error": str(e)})
        return error_response(PROCESSING_ERROR_MESSAGE, status=500)

    log_endpoint_event(endpoint, request_id, "success", {"filename": result.filename, "bytes": result.size})
    return audio_response(result.data, result.filename, media_type=result.media_type)


@health_router.get("/health")
async def health():
    return {"status": "ok", "ffmpeg": ffmpeg_available()}
