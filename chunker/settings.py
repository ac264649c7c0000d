"""Environment-driven settings for the external media engine."""

import os
import shutil
from typing import Optional


def _optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        return None
    return value if value > 0 else None


class Settings:
    # --- External Tools ---
    # Auto-detect binaries or use env vars
    FFMPEG_BINARY: str = os.getenv("FFMPEG_BINARY_PATH", shutil.which("ffmpeg") or "ffmpeg")
    FFPROBE_BINARY: str = os.getenv("FFPROBE_BINARY_PATH", shutil.which("ffprobe") or "ffprobe")

    # --- Timeouts (seconds) ---
    PROBE_TIMEOUT: int = _optional_int("CHUNKER_PROBE_TIMEOUT") or 30
    # None means an invocation may run as long as the encode takes
    TRANSCODE_TIMEOUT: Optional[int] = _optional_int("CHUNKER_TRANSCODE_TIMEOUT")


settings = Settings()
