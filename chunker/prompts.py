"""Interactive selection of the processing mode and its options."""

import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from chunker.data_models import MODE_COPY, MODE_ENCODE, MODE_HLS, OutputConfig
from chunker.exceptions import ValidationError


InputFunc = Callable[[str], str]
Choice = Tuple[str, object]

MODE_CHOICES: List[Choice] = [
    ("Fast Mode (Stream Copy - Recommended)", MODE_COPY),
    ("Re-encode Mode (Slower but consistent quality)", MODE_ENCODE),
    ("HLS Streaming (HTTP Live Streaming)", MODE_HLS),
]

FORMAT_CHOICES: List[Choice] = [
    ("MP4 (Recommended - Universal compatibility)", "mp4"),
    ("MKV (High quality, larger file size)", "mkv"),
    ("AVI (Legacy compatibility)", "avi"),
    ("MOV (Apple/QuickTime)", "mov"),
    ("Custom format", "custom"),
]

SEGMENT_CHOICES: List[Choice] = [
    ("2 seconds (Low latency)", 2),
    ("4 seconds (Recommended)", 4),
    ("6 seconds (Better quality)", 6),
    ("10 seconds (Better quality, higher latency)", 10),
]

PLAYLIST_TYPE_CHOICES: List[Choice] = [
    ("VOD - Complete file (Recommended)", "vod"),
    ("Live - Continuous stream", "live"),
]


def source_extension(input_file: Path) -> str:
    """Extension of the source file without the dot, "mp4" if it has none."""
    return input_file.suffix[1:].lower() or "mp4"


def normalize_extension(raw: str) -> str:
    """Strip the first dot, surrounding whitespace and lowercase."""
    return raw.replace(".", "", 1).lower().strip()


class SetupPrompter:
    """Asks the user for the output configuration on the terminal."""

    def __init__(self, input_func: InputFunc = input, output_func: Callable[[str], None] = print):
        """
        Initialize SetupPrompter.

        Args:
            input_func: Reads one answer (defaults to builtin input)
            output_func: Prints one line (defaults to builtin print)
        """
        self._input = input_func
        self._output = output_func

    def _ask(self, message: str) -> str:
        try:
            return self._input(message)
        except EOFError as e:
            raise ValidationError(
                "Interactive input is not available. Pass --mode or --hls to choose a processing mode."
            ) from e

    def choose(self, message: str, choices: Sequence[Choice], default: object) -> object:
        """
        Show a numbered menu and return the chosen value.

        An empty answer selects the default; invalid answers are asked again.
        """
        default_number = next(
            (number for number, (_, value) in enumerate(choices, 1) if value == default), 1
        )
        self._output(message)
        for number, (label, _) in enumerate(choices, 1):
            self._output(f"  {number}) {label}")

        while True:
            answer = self._ask(f"Select [1-{len(choices)}] (default {default_number}): ").strip()
            if not answer:
                return choices[default_number - 1][1]
            if answer.isdigit() and 1 <= int(answer) <= len(choices):
                return choices[int(answer) - 1][1]
            self._output(f"Please enter a number between 1 and {len(choices)}.")

    def ask_custom_extension(self) -> str:
        """Ask for a free-text extension until a non-empty one is given."""
        while True:
            extension = normalize_extension(self._ask("Enter custom file extension (without dot): "))
            if extension:
                return extension
            self._output("Please enter a valid extension.")

    def setup_output(self, input_file: Path, quality_preset: str = "fast") -> OutputConfig:
        """
        Collect the processing mode and its mode-specific options.

        Args:
            input_file: Source video, used for the copy-mode extension
            quality_preset: Validated quality preset carried into the config

        Returns:
            OutputConfig for this run
        """
        logging.info("Setting up output configuration...")
        mode = self.choose("Choose processing mode:", MODE_CHOICES, MODE_COPY)

        if mode == MODE_ENCODE:
            extension = self.choose("Choose output video format:", FORMAT_CHOICES, "mp4")
            if extension == "custom":
                extension = self.ask_custom_extension()
            return OutputConfig(mode=MODE_ENCODE, extension=extension, quality_preset=quality_preset)

        if mode == MODE_HLS:
            segment_length = self.choose("Choose HLS segment length:", SEGMENT_CHOICES, 4)
            playlist_type = self.choose("Choose playlist type:", PLAYLIST_TYPE_CHOICES, "vod")
            logging.info("HLS Streaming mode selected - Output will be .m3u8 playlist with .ts segments")
            return OutputConfig(
                mode=MODE_HLS,
                extension="ts",
                quality_preset=quality_preset,
                segment_length=segment_length,
                playlist_type=playlist_type
            )

        extension = source_extension(input_file)
        logging.info(f"Fast mode selected - keeping original format: {extension.upper()}")
        return OutputConfig(mode=MODE_COPY, extension=extension, quality_preset=quality_preset)


def output_config_from_flags(
    input_file: Path,
    mode: Optional[str],
    extension: Optional[str],
    quality_preset: str,
    hls: bool,
    segment_length: int,
    playlist_type: str
) -> Optional[OutputConfig]:
    """
    Build the OutputConfig from command-line flags.

    Returns:
        OutputConfig, or None when no flag selects a mode and prompting is needed
    """
    if hls:
        logging.info("HLS mode selected via command line options")
        return OutputConfig(
            mode=MODE_HLS,
            extension="ts",
            quality_preset=quality_preset,
            segment_length=segment_length,
            playlist_type=playlist_type
        )
    if mode is None:
        if not extension:
            return None
        # copy keeps the source container, so a format flag means re-encoding
        logging.info(f"Output format {normalize_extension(extension).upper()} given - using re-encode mode")
        mode = MODE_ENCODE

    if extension:
        extension = normalize_extension(extension)
    if not extension:
        extension = source_extension(input_file) if mode == MODE_COPY else "mp4"
    return OutputConfig(mode=mode, extension=extension, quality_preset=quality_preset)
