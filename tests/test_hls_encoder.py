import pytest
from pathlib import Path

from chunker.artifact_writer import ArtifactWriter
from chunker.data_models import ProbeResult
from chunker.exceptions import HLSError
from chunker.hls_encoder import (
    STATE_FAILED,
    STATE_SUCCESS,
    HLSInvoker,
    build_fallback_args,
    build_primary_args,
)
from conftest import FakeEngine


PROBE = ProbeResult(duration=125.0, has_video=True, has_audio=True, resolution="1920x1080")


def _run(tmp_path, engine, segment_length=6, playlist_type="vod", show_progress=False):
    writer = ArtifactWriter(tmp_path, "lesson", tmp_path / "lesson.mp4")
    invoker = HLSInvoker(engine, writer, show_progress=show_progress)
    variant = tmp_path / "hls" / "lesson.m3u8"
    pattern = str(tmp_path / "hls" / "lesson_%03d.ts")
    return invoker, writer, lambda: invoker.run_hls(
        tmp_path / "lesson.mp4", segment_length, playlist_type, variant, pattern, PROBE
    )


def test_primary_arguments():
    args = build_primary_args(Path("in.mp4"), 6, "vod", Path("hls/lesson.m3u8"), "hls/lesson_%03d.ts")

    assert args[:2] == ["-i", "in.mp4"]
    assert args[args.index("-preset") + 1] == "ultrafast"
    assert args[args.index("-tune") + 1] == "fastdecode"
    assert args[args.index("-b:a") + 1] == "96k"
    assert args[args.index("-ac") + 1] == "2"
    assert args[args.index("-ar") + 1] == "44100"
    assert args[args.index("-hls_time") + 1] == "6"
    assert args[args.index("-hls_segment_filename") + 1] == "hls/lesson_%03d.ts"
    assert args[args.index("-hls_playlist_type") + 1] == "vod"
    assert args[-1] == str(Path("hls/lesson.m3u8"))


@pytest.mark.parametrize("playlist_type", [None, "", "none"])
def test_playlist_type_omitted_when_unset(playlist_type):
    args = build_primary_args(Path("in.mp4"), 4, playlist_type, Path("v.m3u8"), "s_%03d.ts")
    assert "-hls_playlist_type" not in args


def test_fallback_arguments_are_fixed():
    args = build_fallback_args(Path("in.mp4"), Path("v.m3u8"), "s_%03d.ts")

    assert args == [
        "-i", "in.mp4",
        "-c:v", "libx264", "-preset", "ultrafast",
        "-c:a", "aac",
        "-hls_time", "4",
        "-hls_segment_filename", "s_%03d.ts",
        "-f", "hls",
        "v.m3u8",
    ]


def test_primary_success_writes_artifacts(tmp_path):
    engine = FakeEngine()
    invoker, writer, run = _run(tmp_path, engine, playlist_type="live")

    master = run()

    assert invoker.attempts == 1
    assert invoker.state == STATE_SUCCESS
    assert "-hls_playlist_type" in engine.calls[0]
    assert master == writer.master_playlist_path
    assert master.exists()
    assert writer.player_path.exists()
    assert writer.playback_readme_path.exists()
    assert (tmp_path / "hls" / "lesson_000.ts").exists()


def test_fallback_success_makes_two_attempts(tmp_path):
    engine = FakeEngine(fail_calls={1})
    invoker, writer, run = _run(tmp_path, engine, segment_length=10)

    master = run()

    assert invoker.attempts == 2
    assert len(engine.calls) == 2
    fallback = engine.calls[1]
    assert fallback[fallback.index("-hls_time") + 1] == "4"
    assert "-tune" not in fallback
    assert master.exists()
    assert writer.player_path.exists()
    assert "RESOLUTION=1920x1080" in master.read_text(encoding="utf-8")


def test_double_failure_raises_and_writes_nothing(tmp_path):
    engine = FakeEngine(fail_calls={1, 2})
    invoker, writer, run = _run(tmp_path, engine)

    with pytest.raises(HLSError) as exc_info:
        run()

    assert invoker.attempts == 2
    assert len(engine.calls) == 2
    assert invoker.state == STATE_FAILED
    assert "simulated failure on call 2" in str(exc_info.value)
    assert "simulated failure on call 1" in exc_info.value.primary_error
    assert not writer.master_playlist_path.exists()
    assert not writer.player_path.exists()


def test_progress_bar_receives_engine_progress(tmp_path, capsys):
    _, _, run = _run(tmp_path, FakeEngine(), show_progress=True)
    run()

    assert "[HLS] 100%" in capsys.readouterr().out
