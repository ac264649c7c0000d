import logging

import pytest

from chunker.exceptions import ValidationError
from chunker.validator import QUALITY_PRESETS, Validator


@pytest.fixture
def validator():
    return Validator()


def test_invalid_quality_preset_falls_back_to_fast(validator, caplog):
    with caplog.at_level(logging.WARNING):
        assert validator.normalize_quality_preset("turbo") == "fast"
    assert 'Invalid quality preset: "turbo"' in caplog.text


@pytest.mark.parametrize("preset", QUALITY_PRESETS)
def test_valid_presets_kept(validator, preset):
    assert validator.normalize_quality_preset(preset) == preset


def test_nine_presets():
    assert len(QUALITY_PRESETS) == 9


@pytest.mark.parametrize("chunk_length", [0, -1])
def test_chunk_length_must_be_positive(validator, chunk_length):
    with pytest.raises(ValidationError):
        validator.validate_chunk_length(chunk_length)


def test_missing_input_file(validator, tmp_path):
    with pytest.raises(ValidationError, match="Input file not found"):
        validator.validate_input_file(tmp_path / "missing.mp4")


def test_directory_is_not_an_input_file(validator, tmp_path):
    with pytest.raises(ValidationError, match="not a file"):
        validator.validate_input_file(tmp_path)


def test_empty_input_argument(validator):
    with pytest.raises(ValidationError, match="No input file specified"):
        validator.validate_input_file("")


def test_segment_length_defaults(validator):
    assert validator.normalize_segment_length(None) == 4
    assert validator.normalize_segment_length(0) == 4
    assert validator.normalize_segment_length(6) == 6


def _write_bundle(hls_dir, segments, create=True):
    hls_dir.mkdir()
    lines = ["#EXTM3U", "#EXT-X-VERSION:3"]
    for name in segments:
        lines += ["#EXTINF:4.0,", name]
        if create:
            (hls_dir / name).write_bytes(b"ts")
    playlist = hls_dir / "lesson.m3u8"
    playlist.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return playlist


def test_valid_hls_bundle(validator, tmp_path):
    playlist = _write_bundle(tmp_path / "hls", ["lesson_000.ts", "lesson_001.ts"])

    result = validator.validate_hls_output(playlist)
    assert result.valid
    assert result.segment_count == 2


def test_missing_segments_reported(validator, tmp_path):
    playlist = _write_bundle(tmp_path / "hls", ["lesson_000.ts"], create=False)

    result = validator.validate_hls_output(playlist)
    assert not result.valid
    assert result.playlist_valid
    assert not result.segments_valid


def test_missing_playlist_reported(validator, tmp_path):
    result = validator.validate_hls_output(tmp_path / "nope.m3u8")
    assert not result.valid
    assert not result.playlist_valid
