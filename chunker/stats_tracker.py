"""Statistics tracking for chunking runs."""

import logging
import time
from pathlib import Path
from typing import Optional

from chunker.data_models import ChunkingStats


class StatsTracker:
    """Tracks chunk timings and generates the summary report."""

    def __init__(self):
        """Initialize StatsTracker with zero counters."""
        self._start_time: Optional[float] = None
        self._end_time: Optional[float] = None
        self._completed_chunks = 0
        self._current_chunk_start: Optional[float] = None
        self._slowest_chunk_time = 0.0

    def start_timer(self):
        """Start the overall timer."""
        self._start_time = time.time()
        self._end_time = None

    def stop_timer(self):
        """Stop the overall timer."""
        self._end_time = time.time()

    def start_chunk_timer(self):
        """Start timer for the current chunk."""
        self._current_chunk_start = time.time()

    def end_chunk_timer(self) -> float:
        """End timer for the current chunk and record it as completed."""
        elapsed = 0.0
        if self._current_chunk_start is not None:
            elapsed = time.time() - self._current_chunk_start
            self._current_chunk_start = None
        self._completed_chunks += 1
        self._slowest_chunk_time = max(self._slowest_chunk_time, elapsed)
        logging.debug(f"Chunk {self._completed_chunks} took {elapsed:.2f}s")
        return elapsed

    @property
    def total_time(self) -> float:
        if self._start_time is None:
            return 0.0
        end = self._end_time if self._end_time is not None else time.time()
        return end - self._start_time

    def get_stats(self) -> ChunkingStats:
        """Return ChunkingStats for the chunks completed so far."""
        return ChunkingStats(
            total_time_seconds=self.total_time,
            chunk_count=self._completed_chunks
        )

    def print_summary(self, mode: str, output_dir: Path) -> None:
        """Display formatted statistics report."""
        stats = self.get_stats()

        print("\n" + "=" * 60)
        print("CHUNKING SUMMARY")
        print("=" * 60)
        print(f"Chunks Created:           {stats.chunk_count}")
        print(f"Total Processing Time:    {self._format_time(stats.total_time_seconds)}")
        print(f"Average Time per Chunk:   {stats.average_time_per_chunk:.2f}s")
        print(f"Slowest Chunk:            {self._slowest_chunk_time:.2f}s")
        print(f"Processing Mode:          {'Fast (Stream Copy)' if mode == 'copy' else 'Re-encode'}")
        print(f"Output Location:          {output_dir.resolve()}")
        print("=" * 60 + "\n")

        logging.info(
            f"Statistics: {stats.chunk_count} chunks, "
            f"runtime: {self._format_time(stats.total_time_seconds)}"
        )

    def _format_time(self, seconds: float) -> str:
        """
        Format seconds into human-readable time string.

        Args:
            seconds: Time in seconds

        Returns:
            Formatted time string (e.g., "1h 23m 45s" or "5m 30s" or "45s")
        """
        if seconds < 60:
            return f"{seconds:.0f}s"
        elif seconds < 3600:
            minutes = int(seconds // 60)
            secs = int(seconds % 60)
            return f"{minutes}m {secs}s"
        else:
            hours = int(seconds // 3600)
            minutes = int((seconds % 3600) // 60)
            secs = int(seconds % 60)
            return f"{hours}h {minutes}m {secs}s"
