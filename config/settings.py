"""
Configuration settings for the application
"""
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # External engine binary
    ffmpeg_binary: str = Field(default="ffmpeg", alias="FFMPEG_BINARY")

    # Per-request staging area for the server path
    scratch_dir: Path = Field(default=Path("./tmp"), alias="SCRATCH_DIR")

    # Upload hardening (off by default, the reference server does not re-validate)
    enforce_media_types: bool = Field(default=False, alias="ENFORCE_MEDIA_TYPES")

    # Admission control: 0 means unlimited
    merge_max_concurrent: int = Field(default=0, alias="MERGE_MAX_CONCURRENT")

    # Frontend configuration
    frontend_url: Optional[str] = Field(default="http://localhost:3000", alias="FRONTEND_URL")
    static_dir: Optional[Path] = Field(default=None, alias="STATIC_DIR")

    # Logging
    log_dir: Path = Field(default=Path("./logs"), alias="LOG_DIR")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Upload client default target
    server_url: str = Field(default="http://localhost:8000", alias="MERGE_SERVER_URL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )


# Instantiate settings object
settings = Settings()
