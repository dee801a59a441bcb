"""
Error taxonomy for the merge paths.

Every failure is terminal for the current operation; nothing here is retried.
"""
from typing import Optional


class AudioMergerError(Exception):
    """Base class for all merge failures"""


class MissingInputError(AudioMergerError):
    """A required input (speech or music) is absent or empty"""


class UnsupportedMediaTypeError(AudioMergerError):
    """Declared media type is not in the audio allow-list"""


class EngineLoadError(AudioMergerError):
    """The media engine could not be initialized"""


class EngineBusyError(AudioMergerError):
    """The engine is already running a mix and is not reentrant"""


class MixExecutionError(AudioMergerError):
    """The engine failed while decoding, mixing or encoding"""

    def __init__(self, message: str, returncode: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class MergeRequestError(AudioMergerError):
    """The merge server answered with a non-success status"""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code
