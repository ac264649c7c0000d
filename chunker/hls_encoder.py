"""HLS encoding with a single built-in fallback attempt."""

import logging
from pathlib import Path
from typing import List, Optional

from chunker.artifact_writer import ArtifactWriter
from chunker.data_models import ProbeResult
from chunker.engine import MediaEngine
from chunker.exceptions import HLSError
from chunker.progress_bar import ProgressBar


FALLBACK_SEGMENT_LENGTH = 4

STATE_IDLE = "idle"
STATE_PRIMARY = "primary"
STATE_FALLBACK = "fallback"
STATE_SUCCESS = "success"
STATE_FAILED = "failed"


def build_primary_args(
    input_path: Path,
    segment_length: int,
    playlist_type: Optional[str],
    variant_playlist_path: Path,
    segment_pattern: str
) -> List[str]:
    """
    Build engine arguments for the primary HLS attempt.

    Args:
        input_path: Source video
        segment_length: Target segment length in seconds
        playlist_type: "vod" or "live"; empty or "none" omits the tag
        variant_playlist_path: Where the engine writes the variant playlist
        segment_pattern: Segment filename pattern with a %03d placeholder

    Returns:
        Argument list without the ffmpeg executable
    """
    args = [
        "-i", str(input_path),
        "-c:v", "libx264",
        "-preset", "ultrafast",
        "-tune", "fastdecode",
        "-c:a", "aac",
        "-b:a", "96k",
        "-ac", "2",
        "-ar", "44100",
        "-hls_time", str(segment_length),
        "-hls_segment_filename", str(segment_pattern),
        "-threads", "0",  # all available cores
        "-f", "hls",
    ]
    if playlist_type and playlist_type != "none":
        args += ["-hls_playlist_type", playlist_type]
    args.append(str(variant_playlist_path))
    return args


def build_fallback_args(input_path: Path, variant_playlist_path: Path, segment_pattern: str) -> List[str]:
    """Build the reduced, maximally compatible argument set used after a failure."""
    return [
        "-i", str(input_path),
        "-c:v", "libx264",
        "-preset", "ultrafast",
        "-c:a", "aac",
        "-hls_time", str(FALLBACK_SEGMENT_LENGTH),
        "-hls_segment_filename", str(segment_pattern),
        "-f", "hls",
        str(variant_playlist_path),
    ]


class HLSInvoker:
    """Produces a single-rendition HLS bundle from the source video."""

    def __init__(self, engine: MediaEngine, artifact_writer: ArtifactWriter, show_progress: bool = True):
        """
        Initialize HLSInvoker.

        Args:
            engine: MediaEngine performing the segmentation
            artifact_writer: Writer invoked after a successful attempt
            show_progress: Print an encode percentage bar
        """
        self.engine = engine
        self.artifact_writer = artifact_writer
        self.progress = ProgressBar(enabled=show_progress)
        self.state = STATE_IDLE
        self.attempts = 0

    def run_hls(
        self,
        input_path: Path,
        segment_length: int,
        playlist_type: Optional[str],
        variant_playlist_path: Path,
        segment_pattern: str,
        probe_result: Optional[ProbeResult] = None
    ) -> Path:
        """
        Run the primary attempt and, if it fails, exactly one fallback attempt.

        On success the master playlist, player page and PLAYBACK.md are written.

        Args:
            input_path: Source video
            segment_length: Target segment length in seconds
            playlist_type: "vod" or "live"
            variant_playlist_path: Variant playlist output path
            segment_pattern: Segment filename pattern
            probe_result: Source information for progress and artifacts

        Returns:
            Path to the master playlist

        Raises:
            HLSError: If both attempts fail
        """
        variant_playlist_path.parent.mkdir(parents=True, exist_ok=True)
        total_duration = probe_result.duration if probe_result else 0.0

        logging.info("Setting up HLS conversion with optimized parameters...")
        self.state = STATE_PRIMARY
        primary_args = build_primary_args(
            input_path, segment_length, playlist_type, variant_playlist_path, segment_pattern
        )
        primary_error = self._attempt(primary_args, total_duration)

        if primary_error is None:
            logging.info("HLS stream created successfully")
        else:
            logging.error(f"HLS conversion failed: {primary_error}")
            logging.warning("Trying again with basic parameters...")

            self.state = STATE_FALLBACK
            fallback_args = build_fallback_args(input_path, variant_playlist_path, segment_pattern)
            fallback_error = self._attempt(fallback_args, total_duration)

            if fallback_error is not None:
                self.state = STATE_FAILED
                logging.error(f"Fallback HLS conversion failed: {fallback_error}")
                logging.warning("Please ensure FFmpeg is properly installed with libx264 and HLS support")
                raise HLSError(f"HLS conversion failed: {fallback_error}", primary_error=primary_error)

            logging.info("HLS stream created successfully with basic parameters")
            # the master playlist still advertises the probed resolution after a
            # fallback success; 1280x720 is only used when the probe had none

        self.state = STATE_SUCCESS
        return self.artifact_writer.write_hls_artifacts(probe_result)

    def _attempt(self, args: List[str], total_duration: float) -> Optional[str]:
        """Run one invocation; return None on success or the error message."""
        self.attempts += 1
        on_progress = None
        if self.progress.enabled and total_duration > 0:
            def on_progress(seconds: float):
                self.progress.update(seconds, total_duration)

        result = self.engine.invoke(args, on_progress=on_progress)
        self.progress.finish()

        if result.success:
            return None
        return result.error_message or "Unknown engine error"
