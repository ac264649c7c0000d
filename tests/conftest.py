# File: tests/conftest.py

import pytest
from pathlib import Path
from typing import Iterable, List, Optional

from chunker.data_models import InvocationResult
from chunker.engine import MediaEngine
from chunker.exceptions import EngineError


def make_probe_info(duration=125.0, width=1920, height=1080, with_audio=True) -> dict:
    """Builds a dict shaped like `ffprobe -print_format json` output."""
    streams = []
    if width is not None:
        streams.append({"codec_type": "video", "codec_name": "h264", "width": width, "height": height})
    if with_audio:
        streams.append({"codec_type": "audio", "codec_name": "aac"})
    return {
        "format": {"duration": str(duration), "bit_rate": "2500000"},
        "streams": streams,
    }


def _arg_value(args: List[str], flag: str) -> Optional[str]:
    if flag in args:
        return args[args.index(flag) + 1]
    return None


class FakeEngine(MediaEngine):
    """
    In-memory MediaEngine.
    Records every invocation, fails the 1-based call numbers in `fail_calls`
    and writes placeholder output files like ffmpeg would.
    """

    def __init__(self, duration=125.0, probe_info=None, fail_calls: Iterable[int] = (),
                 probe_error: Optional[str] = None, segments_per_playlist=2):
        self.duration = duration
        self.probe_info = probe_info if probe_info is not None else make_probe_info(duration)
        self.fail_calls = set(fail_calls)
        self.probe_error = probe_error
        self.segments_per_playlist = segments_per_playlist
        self.calls: List[List[str]] = []
        self.emitted_durations: List[float] = []
        self.probed: List[Path] = []

    def probe(self, path: Path) -> dict:
        self.probed.append(Path(path))
        if self.probe_error:
            raise EngineError(self.probe_error)
        return self.probe_info

    def invoke(self, args, on_progress=None) -> InvocationResult:
        args = [str(arg) for arg in args]
        self.calls.append(args)
        call_number = len(self.calls)

        if call_number in self.fail_calls:
            return InvocationResult(
                success=False,
                returncode=1,
                error_message=f"simulated failure on call {call_number}"
            )

        if _arg_value(args, "-f") == "hls":
            self._write_hls(args)
        else:
            self._write_chunk(args)

        if on_progress is not None:
            on_progress(self.duration)
        return InvocationResult(success=True, returncode=0)

    def _write_chunk(self, args: List[str]):
        start = float(_arg_value(args, "-ss") or 0)
        length = float(_arg_value(args, "-t") or self.duration)
        # ffmpeg stops at end of stream
        self.emitted_durations.append(max(0.0, min(length, self.duration - start)))
        output = Path(args[-1])
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(b"chunk")

    def _write_hls(self, args: List[str]):
        playlist = Path(args[-1])
        pattern = _arg_value(args, "-hls_segment_filename")
        playlist.parent.mkdir(parents=True, exist_ok=True)

        lines = ["#EXTM3U", "#EXT-X-VERSION:3", f"#EXT-X-TARGETDURATION:{_arg_value(args, '-hls_time')}"]
        for number in range(self.segments_per_playlist):
            segment = Path(pattern % number)
            segment.write_bytes(b"ts")
            lines += ["#EXTINF:4.000000,", segment.name]
        lines.append("#EXT-X-ENDLIST")
        playlist.write_text("\n".join(lines) + "\n", encoding="utf-8")


@pytest.fixture
def fake_engine():
    return FakeEngine()


@pytest.fixture
def source_video(tmp_path):
    """An input file on disk; its content never reaches a real engine."""
    video = tmp_path / "lesson.mp4"
    video.write_bytes(b"\x00" * 16)
    return video


@pytest.fixture
def in_tmp_dir(tmp_path, monkeypatch):
    """Run from an empty directory so no chunker.json is picked up."""
    monkeypatch.chdir(tmp_path)
    return tmp_path
