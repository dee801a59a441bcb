"""
Fixed signal-processing recipe for the speech + music merge.

The values are load-bearing: speech is left at unity gain, music is scaled to
40% amplitude, the output lasts as long as the longer input and is always
MP3 at 192 kbps.
"""
from typing import List

from pydantic import BaseModel, ConfigDict


class MixRecipe(BaseModel):
    model_config = ConfigDict(frozen=True)

    speech_gain: float = 1.0
    music_gain: float = 0.4
    duration: str = "longest"
    codec: str = "libmp3lame"
    bitrate: str = "192k"

    @property
    def filter_complex(self) -> str:
        return (
            f"[0:a]volume={self.speech_gain}[a1];"
            f"[1:a]volume={self.music_gain}[a2];"
            f"[a1][a2]amix=inputs=2:duration={self.duration}"
        )

    def build_args(self, speech: str, music: str, output: str) -> List[str]:
        """Engine argument list, without the program name."""
        return [
            "-i", speech,
            "-i", music,
            "-filter_complex", self.filter_complex,
            "-c:a", self.codec,
            "-b:a", self.bitrate,
            output,
        ]


MERGE_RECIPE = MixRecipe()
