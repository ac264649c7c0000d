"""Narrow interface over the external media engine (FFmpeg / FFprobe)."""

import json
import logging
import subprocess
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, List, Optional

from chunker.data_models import InvocationResult
from chunker.exceptions import EngineError
from chunker.settings import settings


ProgressCallback = Callable[[float], None]


class MediaEngine(ABC):
    """
    Contract for the media engine.
    Abstracts away the underlying tool (FFmpeg) from the chunking logic.
    """

    @abstractmethod
    def probe(self, path: Path) -> dict:
        """
        Read container and stream metadata for a media file.

        Args:
            path: Path to the media file

        Returns:
            Raw metadata with "format" and "streams" keys (ffprobe JSON layout)

        Raises:
            EngineError: If the engine cannot be run or its output cannot be read
        """
        pass

    @abstractmethod
    def invoke(self, args: List[str], on_progress: Optional[ProgressCallback] = None) -> InvocationResult:
        """
        Run one transcoding invocation and block until it completes.

        Args:
            args: Engine arguments, without the executable itself
            on_progress: Optional callback receiving processed seconds

        Returns:
            InvocationResult describing success or failure
        """
        pass


class FFmpegEngine(MediaEngine):
    """Runs the real ffmpeg / ffprobe executables through subprocess."""

    def __init__(
        self,
        ffmpeg_binary: Optional[str] = None,
        ffprobe_binary: Optional[str] = None,
        probe_timeout: Optional[int] = None,
        transcode_timeout: Optional[int] = None
    ):
        """
        Initialize FFmpegEngine.

        Args:
            ffmpeg_binary: ffmpeg executable (default from settings)
            ffprobe_binary: ffprobe executable (default from settings)
            probe_timeout: Timeout for ffprobe in seconds
            transcode_timeout: Timeout for each ffmpeg run, None for no limit
        """
        self.ffmpeg_binary = ffmpeg_binary or settings.FFMPEG_BINARY
        self.ffprobe_binary = ffprobe_binary or settings.FFPROBE_BINARY
        self.probe_timeout = probe_timeout or settings.PROBE_TIMEOUT
        self.transcode_timeout = transcode_timeout or settings.TRANSCODE_TIMEOUT
        logging.debug(f"FFmpegEngine initialized: ffmpeg={self.ffmpeg_binary}, ffprobe={self.ffprobe_binary}")

    def probe(self, path: Path) -> dict:
        command = [
            self.ffprobe_binary,
            "-v", "error",
            "-print_format", "json",
            "-show_format",
            "-show_streams",
            str(path)
        ]
        logging.debug(f"FFprobe command: {' '.join(command)}")

        try:
            result = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                timeout=self.probe_timeout
            )
        except FileNotFoundError as e:
            raise EngineError(f"ffprobe executable not found: {self.ffprobe_binary}") from e
        except subprocess.TimeoutExpired as e:
            raise EngineError(f"ffprobe timeout after {self.probe_timeout}s") from e

        if result.returncode != 0:
            error_msg = result.stderr.strip() or "Unknown ffprobe error"
            raise EngineError(f"ffprobe failed (code {result.returncode}): {error_msg}")

        try:
            return json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise EngineError(f"Failed to parse ffprobe output: {e}") from e

    def invoke(self, args: List[str], on_progress: Optional[ProgressCallback] = None) -> InvocationResult:
        command = [self.ffmpeg_binary, "-y", "-hide_banner", "-loglevel", "error"]
        if on_progress is not None:
            command += ["-progress", "pipe:1", "-nostats"]
        command += [str(arg) for arg in args]

        logging.debug(f"FFmpeg command: {' '.join(command)}")

        try:
            if on_progress is None:
                return self._run(command)
            return self._run_with_progress(command, on_progress)
        except FileNotFoundError:
            error_msg = f"ffmpeg executable not found: {self.ffmpeg_binary}"
            logging.error(error_msg)
            return InvocationResult(success=False, error_message=error_msg)
        except subprocess.TimeoutExpired:
            error_msg = f"ffmpeg timeout after {self.transcode_timeout}s"
            logging.error(error_msg)
            return InvocationResult(success=False, error_message=error_msg)

    def _run(self, command: List[str]) -> InvocationResult:
        result = subprocess.run(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            timeout=self.transcode_timeout
        )
        return self._to_result(result.returncode, result.stderr)

    def _run_with_progress(self, command: List[str], on_progress: ProgressCallback) -> InvocationResult:
        # stderr goes to a temp file so a chatty ffmpeg cannot fill the pipe
        # while stdout is being read line by line.
        with tempfile.TemporaryFile() as stderr_file:
            process = subprocess.Popen(
                command,
                stdout=subprocess.PIPE,
                stderr=stderr_file,
                text=True
            )
            # the read loop blocks until ffmpeg closes stdout, so the deadline
            # is enforced by killing the child from a timer thread
            timed_out = threading.Event()
            timer = None
            if self.transcode_timeout:
                def kill_on_timeout():
                    timed_out.set()
                    process.kill()

                timer = threading.Timer(self.transcode_timeout, kill_on_timeout)
                timer.daemon = True
                timer.start()

            try:
                for line in process.stdout:
                    key, _, value = line.strip().partition("=")
                    if key in ("out_time_us", "out_time_ms"):
                        # both keys carry microseconds
                        try:
                            on_progress(int(value) / 1_000_000)
                        except ValueError:
                            continue
                returncode = process.wait()
            except BaseException:
                process.kill()
                process.wait()
                raise
            finally:
                if timer is not None:
                    timer.cancel()
                process.stdout.close()

            if timed_out.is_set():
                raise subprocess.TimeoutExpired(command, self.transcode_timeout)

            stderr_file.seek(0)
            stderr = stderr_file.read().decode("utf-8", errors="replace")

        return self._to_result(returncode, stderr)

    def _to_result(self, returncode: int, stderr: str) -> InvocationResult:
        if returncode == 0:
            return InvocationResult(success=True, returncode=0)

        stderr_tail = (stderr or "").strip()[-1000:]
        error_msg = f"ffmpeg exited with code {returncode}"
        if stderr_tail:
            error_msg = f"{error_msg}: {stderr_tail}"
        logging.debug(f"FFmpeg stderr (last 1000 chars): {stderr_tail}")
        return InvocationResult(success=False, returncode=returncode, error_message=error_msg)
