from dataclasses import dataclass
from pathlib import Path
from typing import Optional

SPEECH = "speech"
MUSIC = "music"
ROLES = (SPEECH, MUSIC)


@dataclass(frozen=True)
class AudioInput:
    role: str
    filename: str
    media_type: Optional[str]
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    def is_empty(self) -> bool:
        return not self.data


@dataclass(frozen=True)
class MixResult:
    data: bytes
    filename: str
    media_type: str = "audio/mpeg"

    @property
    def size(self) -> int:
        return len(self.data)

    def save(self, path=None) -> Path:
        """Write the mix to ``path`` (defaults to the suggested filename)."""
        target = Path(path) if path else Path(self.filename)
        if target.is_dir():
            target = target / self.filename
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(self.data)
        return target
