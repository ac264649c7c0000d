"""Chunk boundary planning."""

import math
from pathlib import Path
from typing import List, Union

from chunker.data_models import ChunkJob
from chunker.exceptions import InvalidConfigError


def chunk_filename(prefix: str, index: int, extension: str) -> str:
    """
    Build the output filename for a chunk.

    Args:
        prefix: Filename prefix
        index: Zero-based chunk index
        extension: File extension without the dot

    Returns:
        Filename such as "lesson_001.mp4" (numbering starts at 001)
    """
    return f"{prefix}_{index + 1:03d}.{extension}"


def get_chunk_count(duration: float, chunk_length: float) -> int:
    """Return ceil(duration / chunk_length)."""
    return math.ceil(duration / chunk_length)


def plan_chunks(
    duration: float,
    chunk_length: float,
    prefix: str,
    extension: str,
    output_dir: Union[str, Path] = "."
) -> List[ChunkJob]:
    """
    Compute the ordered chunk jobs for a source of the given duration.

    Every job asks for a full `chunk_length`; the engine clips the last one
    at end of stream (see effective_chunk_duration).

    Args:
        duration: Total source duration in seconds
        chunk_length: Target chunk length in seconds
        prefix: Output filename prefix
        extension: Output file extension without the dot
        output_dir: Directory the chunk files are written to

    Returns:
        List of ChunkJob ordered by index

    Raises:
        InvalidConfigError: If chunk_length or duration is not positive and finite
    """
    if not _is_positive_finite(chunk_length):
        raise InvalidConfigError(f"Chunk length must be greater than 0 seconds, got {chunk_length}")
    if not _is_positive_finite(duration):
        raise InvalidConfigError(f"Duration must be a positive number of seconds, got {duration}")

    output_dir = Path(output_dir)
    return [
        ChunkJob(
            index=index,
            start_offset=index * chunk_length,
            planned_duration=chunk_length,
            output_path=output_dir / chunk_filename(prefix, index, extension)
        )
        for index in range(get_chunk_count(duration, chunk_length))
    ]


def effective_chunk_duration(job: ChunkJob, source_duration: float) -> float:
    """
    Duration the engine actually emits for a job, given end-of-stream clipping.

    Args:
        job: Planned chunk job
        source_duration: Total source duration in seconds

    Returns:
        min(planned duration, time left in the source), never negative
    """
    remaining = source_duration - job.start_offset
    return max(0.0, min(job.planned_duration, remaining))


def _is_positive_finite(value: float) -> bool:
    try:
        return math.isfinite(value) and value > 0
    except TypeError:
        return False
