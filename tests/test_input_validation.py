"""
Input acquisition checks shared by both merge paths
"""
import pytest

from models.audio import MUSIC, SPEECH, AudioInput
from utils.errors import MissingInputError, UnsupportedMediaTypeError
from utils.security_utils import (
    is_allowed_media_type,
    require_inputs,
    sanitize_filename,
    validate_media_types,
)
from utils.shared_utils import merged_filename


def make(role=SPEECH, data=b"x", media_type="audio/mpeg", filename="a.mp3"):
    return AudioInput(role=role, filename=filename, media_type=media_type, data=data)


@pytest.mark.parametrize("media_type", ["audio/mp3", "audio/mpeg", "audio/wav", "audio/ogg", "audio/x-wav", "AUDIO/MPEG"])
def test_allowed_media_types(media_type):
    assert is_allowed_media_type(media_type)


@pytest.mark.parametrize("media_type", [None, "", "audio/flac", "video/mp4", "application/octet-stream"])
def test_rejected_media_types(media_type):
    assert not is_allowed_media_type(media_type)


def test_require_inputs():
    require_inputs([make(), make(role=MUSIC)])

    with pytest.raises(MissingInputError, match="Both speech and music files are required"):
        require_inputs([make(), None])
    with pytest.raises(MissingInputError):
        require_inputs([make(data=b""), make(role=MUSIC)])


def test_validate_media_types():
    validate_media_types([make(), make(role=MUSIC, media_type="audio/ogg")])

    with pytest.raises(UnsupportedMediaTypeError):
        validate_media_types([make(), make(role=MUSIC, media_type="text/plain")])


@pytest.mark.parametrize("raw, expected", [
    ("speech.mp3", "speech.mp3"),
    ("../../../etc/passwd.wav", "etcpasswd.wav"),
    ("..\\..\\sam.wav", "sam.wav"),
    ("voix été.mp3", "voix t.mp3"),
    ("", "audio"),
    ("///", "audio"),
])
def test_sanitize_filename(raw, expected):
    assert sanitize_filename(raw) == expected


def test_merged_filename_uses_unix_millis():
    assert merged_filename(1700000000.5) == "merged-1700000000500.mp3"
