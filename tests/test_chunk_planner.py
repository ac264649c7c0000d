import math

import pytest
from pathlib import Path

from chunker.chunk_planner import chunk_filename, effective_chunk_duration, get_chunk_count, plan_chunks
from chunker.exceptions import InvalidConfigError, ValidationError


def test_plan_125_seconds_in_60_second_chunks():
    jobs = plan_chunks(125, 60, "lesson", "mp4", "out")

    assert [(job.start_offset, job.planned_duration) for job in jobs] == [(0, 60), (60, 60), (120, 60)]
    assert [effective_chunk_duration(job, 125) for job in jobs] == [60, 60, 5]
    assert [job.filename for job in jobs] == ["lesson_001.mp4", "lesson_002.mp4", "lesson_003.mp4"]
    assert jobs[0].output_path == Path("out") / "lesson_001.mp4"


def test_exact_multiple_produces_no_empty_trailing_chunk():
    jobs = plan_chunks(60, 60, "lesson", "mp4")

    assert len(jobs) == 1
    assert jobs[0].start_offset == 0
    assert effective_chunk_duration(jobs[0], 60) == 60


def test_short_source_gives_single_clipped_chunk():
    jobs = plan_chunks(12.5, 60, "clip", "mkv")

    assert len(jobs) == 1
    assert effective_chunk_duration(jobs[0], 12.5) == 12.5


@pytest.mark.parametrize("duration", [1, 59.9, 60, 60.1, 125, 3600, 3601.5])
@pytest.mark.parametrize("chunk_length", [1, 7, 60, 120])
def test_plan_covers_source_without_overlap(duration, chunk_length):
    jobs = plan_chunks(duration, chunk_length, "p", "mp4")

    assert len(jobs) == math.ceil(duration / chunk_length)
    for i, job in enumerate(jobs):
        assert job.index == i
        assert job.start_offset == i * chunk_length
        assert job.start_offset < duration
        assert 0 < effective_chunk_duration(job, duration) <= chunk_length

    covered = sum(effective_chunk_duration(job, duration) for job in jobs)
    assert covered == pytest.approx(duration)


def test_planning_is_deterministic():
    assert plan_chunks(125, 60, "lesson", "mp4") == plan_chunks(125, 60, "lesson", "mp4")


@pytest.mark.parametrize("chunk_length", [0, -5, float("inf"), float("nan")])
def test_invalid_chunk_length_rejected(chunk_length):
    with pytest.raises(InvalidConfigError):
        plan_chunks(125, chunk_length, "lesson", "mp4")


def test_invalid_config_is_a_validation_error():
    with pytest.raises(ValidationError):
        plan_chunks(0, 60, "lesson", "mp4")


def test_chunk_filename_numbering():
    assert chunk_filename("ielts2go_chunk", 0, "mp4") == "ielts2go_chunk_001.mp4"
    assert chunk_filename("x", 999, "ts") == "x_1000.ts"


def test_get_chunk_count():
    assert get_chunk_count(125, 60) == 3
    assert get_chunk_count(120, 60) == 2


def test_effective_duration_never_negative():
    job = plan_chunks(200, 60, "p", "mp4")[-1]
    assert effective_chunk_duration(job, 100) == 0.0
