"""Command-line interface and run orchestration."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from chunker.artifact_writer import TOOL_NAME, TOOL_VERSION, ArtifactWriter
from chunker.chunk_planner import plan_chunks
from chunker.config_manager import ConfigManager, HLS_PLAYLIST_TYPES
from chunker.data_models import MODE_COPY, MODE_ENCODE, OutputConfig, ProbeResult
from chunker.engine import FFmpegEngine, MediaEngine
from chunker.exceptions import ChunkerError
from chunker.hls_encoder import HLSInvoker
from chunker.probe import ProbeAdapter
from chunker.prompts import SetupPrompter, output_config_from_flags
from chunker.shutdown import ShutdownHandler
from chunker.transcoder import TranscodeInvoker
from chunker.validator import QUALITY_PRESETS, Validator


EPILOG = """\
Examples:
  video-chunker video.mp4
  video-chunker video.mp4 -d output -l 120 -p lesson
  video-chunker video.mp4 --mode encode --quality medium --prefix speaking_practice
  video-chunker video.mp4 --hls --hls-segment 6

Output Modes:
  Standard Mode: creates individual video chunks ({prefix}_001.mp4, ...)
  HLS Mode: creates an .m3u8 playlist with .ts segments, a master playlist
            and an HTML player for web streaming

Exit Codes:
  0    success
  1    invalid input, probe, transcode or HLS failure
  130  interrupted (Ctrl+C or SIGTERM); partial output is left on disk
"""


class ChunkerArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on invalid arguments."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser; unset flags stay None so config values apply."""
    parser = ChunkerArgumentParser(
        prog="video-chunker",
        description=f"{TOOL_NAME} - split a video into chunks or an HLS stream",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("input_file", help="Path to the source video file")
    parser.add_argument("-d", "--directory", help="Output directory for chunks (default: ielts2go_chunks)")
    parser.add_argument("-l", "--length", type=int, help="Duration of each chunk in seconds (default: 60)")
    parser.add_argument("-p", "--prefix", help="Prefix for output files (default: ielts2go_chunk)")
    parser.add_argument(
        "-q", "--quality",
        help=f"Video quality preset ({', '.join(QUALITY_PRESETS)}) (default: fast)"
    )
    parser.add_argument(
        "-m", "--mode", choices=[MODE_COPY, MODE_ENCODE],
        help="Processing mode; skips the interactive prompt"
    )
    parser.add_argument("-f", "--format", dest="extension", help="Output file extension; implies --mode encode when --mode is not given")
    parser.add_argument("--hls", action="store_true", help="Generate HTTP Live Streaming (HLS) output")
    parser.add_argument("--hls-segment", type=int, help="HLS segment length in seconds (default: 4)")
    parser.add_argument("--hls-type", choices=list(HLS_PLAYLIST_TYPES), help="HLS playlist type (default: vod)")
    parser.add_argument("--no-progress", action="store_true", help="Disable progress indicators")
    parser.add_argument("-c", "--config", help="JSON configuration file with default options")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {TOOL_VERSION}")
    return parser


def setup_logging(verbose: bool = False):
    """Initialize logging configuration."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='[%(asctime)s] [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def _log_engine_hint(message: str):
    lowered = message.lower()
    if "ffmpeg" in lowered or "ffprobe" in lowered:
        logging.warning("Please ensure FFmpeg is installed and accessible in your system PATH.")
        logging.info("Installation guide: https://ffmpeg.org/download.html")


def _first_set(*values):
    for value in values:
        if value is not None:
            return value
    return None


def run_chunk_mode(
    engine: MediaEngine,
    input_path: Path,
    output_dir: Path,
    prefix: str,
    chunk_length: int,
    output_config: OutputConfig,
    probe_result: ProbeResult,
    show_progress: bool
):
    """Plan the chunks and extract them one after another."""
    jobs = plan_chunks(probe_result.duration, chunk_length, prefix, output_config.extension, output_dir)

    logging.info("-" * 60)
    logging.info("Starting chunking process:")
    logging.info(f"  - Total chunks: {len(jobs)}")
    logging.info(f"  - Chunk duration: ~{chunk_length} seconds")
    logging.info(f"  - Output format: {output_config.extension.upper()}")
    logging.info(
        f"  - Processing mode: {'Fast (Stream Copy)' if output_config.mode == MODE_COPY else 'Re-encode'}"
    )
    if output_config.mode == MODE_ENCODE:
        logging.info(f"  - Quality preset: {output_config.quality_preset}")
    logging.info(f"  - Video resolution: {probe_result.resolution}")
    logging.info("-" * 60)

    invoker = TranscodeInvoker(engine, show_progress=show_progress)
    invoker.run_all(input_path, jobs, output_config.mode, output_config.quality_preset)
    invoker.stats.print_summary(output_config.mode, output_dir)


def run_hls_mode(
    engine: MediaEngine,
    input_path: Path,
    output_dir: Path,
    prefix: str,
    output_config: OutputConfig,
    probe_result: ProbeResult,
    writer: ArtifactWriter,
    validator: Validator,
    show_progress: bool
):
    """Produce the HLS bundle and check it on disk."""
    hls_dir = output_dir / "hls"
    variant_playlist = hls_dir / f"{prefix}.m3u8"
    segment_pattern = hls_dir / f"{prefix}_%03d.ts"

    logging.info("-" * 60)
    logging.info("Starting HLS streaming process:")
    logging.info(
        f"  - Total duration: {int(probe_result.duration)} seconds "
        f"({probe_result.duration / 60:.1f} minutes)"
    )
    logging.info(f"  - Segment length: {output_config.segment_length} seconds")
    logging.info(f"  - Playlist type: {output_config.playlist_type.upper()}")
    logging.info(f"  - Video resolution: {probe_result.resolution}")
    logging.info(f"  - Output: {variant_playlist}")
    logging.info("-" * 60)

    invoker = HLSInvoker(engine, writer, show_progress=show_progress)
    master_playlist = invoker.run_hls(
        input_path,
        output_config.segment_length,
        output_config.playlist_type,
        variant_playlist,
        str(segment_pattern),
        probe_result
    )

    validation = validator.validate_hls_output(variant_playlist)
    if not validation.valid:
        logging.warning(f"HLS output check failed: {validation.error_message}")

    logging.info(f"HLS output ready: {master_playlist.resolve()}")
    logging.info(f"Open {writer.player_path} in a web browser (see {writer.playback_readme_path.name})")


def run(args: argparse.Namespace, engine: Optional[MediaEngine] = None,
        prompter: Optional[SetupPrompter] = None) -> int:
    """Validate input, choose the output mode, probe and process."""
    config = ConfigManager(args.config)
    validator = Validator()

    input_path = validator.validate_input_file(args.input_file)
    chunk_length = validator.validate_chunk_length(_first_set(args.length, config.chunk_length))
    quality_preset = validator.normalize_quality_preset(_first_set(args.quality, config.quality_preset))
    segment_length = validator.normalize_segment_length(_first_set(args.hls_segment, config.hls_segment_length))
    playlist_type = _first_set(args.hls_type, config.hls_playlist_type)
    output_dir = Path(_first_set(args.directory, config.output_directory))
    prefix = _first_set(args.prefix, config.prefix)
    show_progress = config.show_progress and not args.no_progress

    output_config = output_config_from_flags(
        input_path, args.mode, args.extension, quality_preset, args.hls, segment_length, playlist_type
    )
    if output_config is None:
        output_config = (prompter or SetupPrompter()).setup_output(input_path, quality_preset)

    engine = engine or FFmpegEngine()

    logging.info("Analyzing video file...")
    probe_result = ProbeAdapter(engine).probe(input_path)
    logging.info("Video analysis complete:")
    logging.info(
        f"  - Duration: {int(probe_result.duration)} seconds ({probe_result.duration / 60:.1f} minutes)"
    )
    logging.info(f"  - Resolution: {probe_result.resolution}")
    logging.info(f"  - Video codec: {probe_result.video_codec or 'Unknown'}")
    logging.info(f"  - Audio codec: {probe_result.audio_codec or 'Unknown'}")

    if not output_dir.exists():
        logging.info(f"Creating output directory: {output_dir}")
    writer = ArtifactWriter(output_dir, prefix, input_path)
    writer.write_metadata(chunk_length, quality_preset)

    if output_config.is_hls:
        run_hls_mode(
            engine, input_path, output_dir, prefix, output_config,
            probe_result, writer, validator, show_progress
        )
    else:
        run_chunk_mode(
            engine, input_path, output_dir, prefix, chunk_length,
            output_config, probe_result, show_progress
        )

    logging.info(f"Thank you for using the {TOOL_NAME}!")
    return 0


def main(argv: Optional[List[str]] = None, engine: Optional[MediaEngine] = None,
         prompter: Optional[SetupPrompter] = None) -> int:
    """Main entry point; returns the process exit code."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    shutdown = ShutdownHandler.get_instance()
    shutdown.register_signal_handlers()

    logging.info("=" * 60)
    logging.info(f"{TOOL_NAME} {TOOL_VERSION} - Starting")
    logging.info("=" * 60)

    try:
        return run(args, engine=engine, prompter=prompter)
    except KeyboardInterrupt:
        return shutdown.farewell()
    except ChunkerError as e:
        logging.error(str(e))
        _log_engine_hint(str(e))
        return 1
    except Exception as e:
        logging.error(f"An unexpected error occurred: {e}", exc_info=True)
        _log_engine_hint(str(e))
        return 1
