"""Sequential per-chunk transcoding."""

import logging
from pathlib import Path
from typing import List, Sequence

from chunker.data_models import MODE_COPY, MODE_ENCODE, ChunkJob, ChunkingStats
from chunker.engine import MediaEngine
from chunker.exceptions import TranscodeError
from chunker.progress_bar import ProgressBar
from chunker.stats_tracker import StatsTracker


def build_chunk_args(input_path: Path, job: ChunkJob, mode: str, quality_preset: str = "fast") -> List[str]:
    """
    Build engine arguments extracting one chunk.

    Args:
        input_path: Source video
        job: Chunk to extract
        mode: "copy" (stream copy) or "encode" (libx264 + aac)
        quality_preset: x264 preset, encode mode only

    Returns:
        Argument list without the ffmpeg executable
    """
    args = [
        # Seek on the input, then take a full chunk; ffmpeg clips at end of stream
        "-ss", str(job.start_offset),
        "-i", str(input_path),
        "-t", str(job.planned_duration),
    ]

    if mode == MODE_COPY:
        args += [
            "-c", "copy",
            "-avoid_negative_ts", "make_zero",
        ]
    elif mode == MODE_ENCODE:
        args += [
            "-c:v", "libx264",
            "-preset", quality_preset,
            "-c:a", "aac",
            "-movflags", "+faststart",
            "-avoid_negative_ts", "make_zero",
        ]
    else:
        raise ValueError(f"Unsupported chunking mode: {mode}")

    args.append(str(job.output_path))
    return args


class TranscodeInvoker:
    """Runs one engine invocation per chunk, strictly one at a time."""

    def __init__(self, engine: MediaEngine, show_progress: bool = True):
        """
        Initialize TranscodeInvoker.

        Args:
            engine: MediaEngine that performs the extractions
            show_progress: Print per-chunk progress lines
        """
        self.engine = engine
        self.progress = ProgressBar(enabled=show_progress)
        self.stats = StatsTracker()

    def run_all(
        self,
        input_path: Path,
        jobs: Sequence[ChunkJob],
        mode: str,
        quality_preset: str = "fast"
    ) -> ChunkingStats:
        """
        Process every job in order.

        The first failing job aborts the run: later jobs are never started and
        files already written (including a partial one) are left on disk.

        Args:
            input_path: Source video
            jobs: Planned chunk jobs
            mode: "copy" or "encode"
            quality_preset: x264 preset for encode mode

        Returns:
            ChunkingStats with total time and chunk count

        Raises:
            TranscodeError: If a chunk's invocation fails
        """
        total = len(jobs)
        logging.info(f"Starting chunking: {total} chunks, mode={mode}")
        self.stats.start_timer()

        for job in jobs:
            self.progress.step(job.index + 1, total, f"Processing {job.filename}...")
            self.stats.start_chunk_timer()

            args = build_chunk_args(input_path, job, mode, quality_preset)
            result = self.engine.invoke(args)

            if not result.success:
                self.stats.stop_timer()
                error_msg = result.error_message or "Unknown engine error"
                logging.error(f"Failed to process chunk {job.index + 1}: {error_msg}")
                raise TranscodeError(job.index, error_msg)

            elapsed = self.stats.end_chunk_timer()
            logging.debug(f"Chunk {job.filename} written in {elapsed:.2f}s")
            self.progress.done(f"Completed: {job.filename}")

        self.stats.stop_timer()
        stats = self.stats.get_stats()
        logging.info(f"Processing complete: {stats.chunk_count} chunks in {stats.total_time_seconds:.2f}s")
        return stats
