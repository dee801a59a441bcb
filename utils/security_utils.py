"""
Input validation helpers for uploaded and locally picked audio files
"""
import mimetypes
import re
from pathlib import Path
from typing import Iterable, Optional

from utils.errors import MissingInputError, UnsupportedMediaTypeError


# Declared types accepted before a merge is submitted.
# audio/x-wav and audio/wave are what mimetypes reports for .wav on most platforms.
ALLOWED_MIME_TYPES = [
    "audio/mp3",
    "audio/mpeg",
    "audio/wav",
    "audio/x-wav",
    "audio/wave",
    "audio/ogg",
]

MISSING_INPUT_MESSAGE = "Both speech and music files are required"
UNSUPPORTED_TYPE_MESSAGE = "Please select valid audio files (MP3, WAV, or OGG)."


def sanitize_filename(filename: str) -> str:
    """
    Reduce a client-supplied filename to a safe single path component.

    Directory separators, ``..`` sequences and null bytes are removed, and
    anything outside ``[A-Za-z0-9._- ]`` is dropped. Falls back to ``audio``
    when nothing survives.
    """
    filename = (filename or "").replace("\x00", "")
    filename = filename.replace("/", "").replace("\\", "")
    while ".." in filename:
        filename = filename.replace("..", "")
    filename = re.sub(r'[^a-zA-Z0-9._\-\s]', '', filename)
    filename = filename.strip('. ')

    if not filename:
        return "audio"

    if len(filename) > 200:
        ext = Path(filename).suffix
        filename = Path(filename).stem[:200 - len(ext)] + ext

    return filename


def guess_media_type(filename: str) -> Optional[str]:
    media_type, _ = mimetypes.guess_type(filename)
    return media_type


def is_allowed_media_type(media_type: Optional[str]) -> bool:
    if not media_type:
        return False
    return media_type.split(";")[0].strip().lower() in ALLOWED_MIME_TYPES


def require_inputs(inputs: Iterable, message: str = MISSING_INPUT_MESSAGE) -> None:
    """Raise MissingInputError unless every input is present and non-empty."""
    for audio in inputs:
        if audio is None or audio.is_empty():
            raise MissingInputError(message)


def validate_media_types(inputs: Iterable) -> None:
    for audio in inputs:
        if not is_allowed_media_type(audio.media_type):
            raise UnsupportedMediaTypeError(UNSUPPORTED_TYPE_MESSAGE)
