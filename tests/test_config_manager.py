import json
import logging

import pytest
from pathlib import Path

from chunker.config_manager import DEFAULTS, ConfigManager
from chunker.exceptions import ConfigurationError


def _write(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_defaults_without_file(in_tmp_dir):
    config = ConfigManager()

    assert config.config_path is None
    assert config.output_directory == Path("ielts2go_chunks")
    assert config.chunk_length == 60
    assert config.prefix == "ielts2go_chunk"
    assert config.quality_preset == "fast"
    assert config.hls_segment_length == 4
    assert config.hls_playlist_type == "vod"
    assert config.show_progress is True


def test_explicit_file_overrides_defaults(tmp_path):
    path = _write(tmp_path / "custom.json", {"chunk_length": 90, "prefix": "lesson", "show_progress": False})
    config = ConfigManager(path)

    assert config.chunk_length == 90
    assert config.prefix == "lesson"
    assert config.show_progress is False
    assert config.quality_preset == DEFAULTS["quality_preset"]


def test_file_in_working_directory_is_picked_up(in_tmp_dir):
    _write(in_tmp_dir / "chunker.json", {"output_directory": "out"})
    config = ConfigManager()

    assert config.config_path == Path("chunker.json")
    assert config.output_directory == Path("out")


def test_missing_explicit_file(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        ConfigManager(tmp_path / "missing.json")


def test_invalid_json(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="Invalid JSON"):
        ConfigManager(path)


def test_top_level_must_be_object(tmp_path):
    with pytest.raises(ConfigurationError):
        ConfigManager(_write(tmp_path / "list.json", [1, 2]))


@pytest.mark.parametrize("data", [
    {"chunk_length": "60"},
    {"chunk_length": True},
    {"prefix": 5},
    {"hls_segment_length": 4.5},
    {"hls_playlist_type": "event"},
    {"show_progress": "yes"},
])
def test_wrong_types_rejected(tmp_path, data):
    with pytest.raises(ConfigurationError):
        ConfigManager(_write(tmp_path / "c.json", data))


def test_unknown_keys_only_warn(tmp_path, caplog):
    with caplog.at_level(logging.WARNING):
        config = ConfigManager(_write(tmp_path / "c.json", {"colour": "blue"}))

    assert config.chunk_length == 60
    assert "colour" in caplog.text
