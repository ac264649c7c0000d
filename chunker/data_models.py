"""Data models and dataclasses for the video chunker."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


MODE_COPY = "copy"
MODE_ENCODE = "encode"
MODE_HLS = "hls"

PROCESSING_MODES = (MODE_COPY, MODE_ENCODE, MODE_HLS)


@dataclass(frozen=True)
class ProbeResult:
    """Media information for the source file, produced once per run."""
    duration: float
    has_video: bool
    has_audio: bool
    video_codec: Optional[str] = None
    audio_codec: Optional[str] = None
    resolution: str = "Unknown"  # "WxH" or "Unknown"
    bitrate: Optional[int] = None


@dataclass(frozen=True)
class ChunkJob:
    """One planned extraction: `planned_duration` seconds from `start_offset`."""
    index: int
    start_offset: float
    planned_duration: float
    output_path: Path

    @property
    def filename(self) -> str:
        return self.output_path.name


@dataclass(frozen=True)
class OutputConfig:
    """Processing mode and output options selected before planning."""
    mode: str
    extension: str
    quality_preset: str = "fast"  # encode mode only
    segment_length: int = 4  # hls mode only
    playlist_type: str = "vod"  # hls mode only

    @property
    def is_hls(self) -> bool:
        return self.mode == MODE_HLS


@dataclass
class ChunkingStats:
    """Summary of a standard (non-HLS) chunking run."""
    total_time_seconds: float
    chunk_count: int

    @property
    def average_time_per_chunk(self) -> float:
        if self.chunk_count == 0:
            return 0.0
        return self.total_time_seconds / self.chunk_count


@dataclass
class InvocationResult:
    """Completion signal of a single engine invocation."""
    success: bool
    returncode: Optional[int] = None
    error_message: Optional[str] = None


@dataclass
class HLSOutputValidation:
    """Result of checking an HLS bundle on disk."""
    valid: bool
    playlist_valid: bool
    segments_valid: bool
    segment_count: int = 0
    error_message: Optional[str] = None
