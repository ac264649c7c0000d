"""Media inspection for the source video."""

import logging
import math
from pathlib import Path
from typing import Any, Dict, Optional

from chunker.data_models import ProbeResult
from chunker.engine import MediaEngine
from chunker.exceptions import EngineError, ProbeError


class ProbeAdapter:
    """Obtains duration, codecs and resolution for the input file."""

    def __init__(self, engine: MediaEngine):
        """
        Initialize ProbeAdapter.

        Args:
            engine: MediaEngine used to read container metadata
        """
        self.engine = engine

    def probe(self, path: Path) -> ProbeResult:
        """
        Probe a media file.

        Args:
            path: Path to the media file

        Returns:
            ProbeResult with a positive, finite duration

        Raises:
            ProbeError: If the file cannot be opened or has no usable metadata
        """
        logging.debug(f"Probing {path}")
        try:
            raw_info = self.engine.probe(path)
        except EngineError as e:
            raise ProbeError(f"Could not read media information from {path}: {e}") from e

        if not isinstance(raw_info, dict) or not isinstance(raw_info.get("format"), dict):
            raise ProbeError(f"No container metadata found in {path}")

        return self._parse_media_info(raw_info, path)

    def _parse_media_info(self, raw_info: Dict[str, Any], path: Path) -> ProbeResult:
        format_info = raw_info["format"]
        duration = self._parse_duration(format_info.get("duration"))
        if duration is None:
            raise ProbeError(
                f"Could not determine video duration for {path}. "
                "Please check if the file is a valid video."
            )

        streams = raw_info.get("streams") or []
        video_stream = self._first_stream(streams, "video")
        audio_stream = self._first_stream(streams, "audio")

        result = ProbeResult(
            duration=duration,
            has_video=video_stream is not None,
            has_audio=audio_stream is not None,
            video_codec=video_stream.get("codec_name") if video_stream else None,
            audio_codec=audio_stream.get("codec_name") if audio_stream else None,
            resolution=self._resolution(video_stream),
            bitrate=self._parse_int(format_info.get("bit_rate"))
        )
        logging.debug(f"Probe result: {result}")
        return result

    @staticmethod
    def _first_stream(streams: list, codec_type: str) -> Optional[Dict[str, Any]]:
        for stream in streams:
            if stream.get("codec_type") == codec_type:
                return stream
        return None

    @staticmethod
    def _parse_duration(raw: Any) -> Optional[float]:
        try:
            duration = float(raw)
        except (TypeError, ValueError):
            return None
        if not math.isfinite(duration) or duration <= 0:
            return None
        return duration

    @staticmethod
    def _parse_int(raw: Any) -> Optional[int]:
        if isinstance(raw, int):
            return raw
        if isinstance(raw, str) and raw.isdigit():
            return int(raw)
        return None

    def _resolution(self, video_stream: Optional[Dict[str, Any]]) -> str:
        if video_stream is None:
            return "Unknown"
        width = self._parse_int(video_stream.get("width"))
        height = self._parse_int(video_stream.get("height"))
        if not width or not height:
            return "Unknown"
        return f"{width}x{height}"
