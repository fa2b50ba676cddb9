"""
Runtime configuration loaded from the environment (and an optional .env file).
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from .io_ffmpeg import HDR_PROFILE, EncodeProfile

logger = logging.getLogger("reelcut")


@dataclass
class Settings:
    """Directory layout, service models and retry policy."""

    base_dir: Path
    openai_api_key: str = ""
    text_model: str = "gpt-4o-mini"
    whisper_model: str = "whisper-1"
    language: str = "pl"  # speech-to-text language hint
    content_language: str = "Polish"  # language of summaries and platform copy
    key_phrase: str = ""  # optional phrase woven into platform copy
    stt_backend: str = "openai"  # openai | local
    local_model: str = "base"
    max_retries: int = 3
    audio_bitrate: str = "192k"
    profile: EncodeProfile = field(default=HDR_PROFILE)

    @property
    def upload_dir(self) -> Path:
        return self.base_dir / "upload"

    @property
    def separated_dir(self) -> Path:
        return self.base_dir / "separated-audio"

    @property
    def ready_dir(self) -> Path:
        return self.base_dir / "ready-video"

    @property
    def intro_dir(self) -> Path:
        return self.base_dir / "additional" / "intro"


def load_settings(base_dir: str | Path | None = None) -> Settings:
    """Build settings from ``.env`` in ``base_dir`` (or the cwd) and the environment."""
    base = Path(base_dir) if base_dir else Path.cwd()
    env_path = base / ".env"
    if env_path.exists():
        load_dotenv(env_path)
    else:
        load_dotenv()

    stt_backend = os.getenv("REELCUT_STT", "openai").lower()
    if stt_backend not in ("openai", "local"):
        logger.warning("Unknown REELCUT_STT=%r, using 'openai'", stt_backend)
        stt_backend = "openai"

    try:
        max_retries = max(1, int(os.getenv("REELCUT_MAX_RETRIES", "3")))
    except ValueError:
        logger.warning("REELCUT_MAX_RETRIES is not an integer, using 3")
        max_retries = 3

    return Settings(
        base_dir=base,
        openai_api_key=os.getenv("OPENAI_API_KEY", ""),
        text_model=os.getenv("REELCUT_TEXT_MODEL", "gpt-4o-mini"),
        whisper_model=os.getenv("REELCUT_WHISPER_MODEL", "whisper-1"),
        language=os.getenv("REELCUT_LANGUAGE", "pl"),
        content_language=os.getenv("REELCUT_CONTENT_LANGUAGE", "Polish"),
        key_phrase=os.getenv("REELCUT_KEY_PHRASE", ""),
        stt_backend=stt_backend,
        local_model=os.getenv("REELCUT_LOCAL_MODEL", "base"),
        max_retries=max_retries,
    )
