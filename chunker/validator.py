"""Validates user input and the produced HLS bundle."""

import logging
from pathlib import Path
from typing import List, Optional, Union

from chunker.data_models import HLSOutputValidation
from chunker.exceptions import ValidationError


QUALITY_PRESETS = (
    "ultrafast",
    "superfast",
    "veryfast",
    "faster",
    "fast",
    "medium",
    "slow",
    "slower",
    "veryslow",
)
DEFAULT_QUALITY_PRESET = "fast"
DEFAULT_HLS_SEGMENT_LENGTH = 4


class Validator:
    """Checks CLI input before processing and HLS output afterwards."""

    def validate_input_file(self, input_file: Optional[Union[str, Path]]) -> Path:
        """
        Verify that the input file was given and exists.

        Args:
            input_file: Path given on the command line

        Returns:
            The input as a Path

        Raises:
            ValidationError: If the path is missing, does not exist or is not a file
        """
        if input_file is None or str(input_file).strip() == "":
            raise ValidationError("No input file specified. Use --help for usage information.")

        path = Path(input_file)
        if not path.exists():
            raise ValidationError(f'Input file not found: "{input_file}"')
        if not path.is_file():
            raise ValidationError(f'Input path is not a file: "{input_file}"')

        logging.debug(f"Input file validated: {path}")
        return path

    def validate_chunk_length(self, chunk_length: Union[int, float]) -> Union[int, float]:
        """
        Verify that the chunk length is positive.

        Raises:
            ValidationError: If chunk_length <= 0
        """
        if chunk_length is None or chunk_length <= 0:
            raise ValidationError("Chunk length must be greater than 0 seconds.")
        return chunk_length

    def normalize_quality_preset(self, preset: Optional[str]) -> str:
        """
        Return the preset if valid, otherwise warn and return "fast".

        An invalid preset never aborts the run.
        """
        if preset in QUALITY_PRESETS:
            return preset
        logging.warning(f'Invalid quality preset: "{preset}". Using "{DEFAULT_QUALITY_PRESET}" instead.')
        return DEFAULT_QUALITY_PRESET

    def normalize_segment_length(self, segment_length: Optional[int]) -> int:
        """Return the HLS segment length, or 4 when it is missing or not positive."""
        if segment_length is None or segment_length <= 0:
            if segment_length is not None:
                logging.warning(
                    f"Invalid HLS segment length: {segment_length}. "
                    f"Using {DEFAULT_HLS_SEGMENT_LENGTH} seconds instead."
                )
            return DEFAULT_HLS_SEGMENT_LENGTH
        return segment_length

    def _check_playlist_exists(self, playlist_path: Path) -> bool:
        """
        Verify that playlist file exists and is readable.

        Args:
            playlist_path: Path to the playlist file

        Returns:
            True if playlist file exists and is readable, False otherwise
        """
        if not playlist_path.is_file():
            logging.error(f"Playlist file does not exist: {playlist_path}")
            return False

        try:
            with open(playlist_path, 'r', encoding='utf-8') as f:
                header = f.readline().strip()
        except OSError as e:
            logging.error(f"Error reading playlist file: {e}")
            return False

        if header != "#EXTM3U":
            logging.error(f"Playlist does not start with #EXTM3U: {playlist_path}")
            return False
        return True

    def _parse_playlist(self, playlist_path: Path) -> List[str]:
        """
        Extract segment references from an m3u8 playlist file.

        Args:
            playlist_path: Path to the playlist file

        Returns:
            List of segment URIs referenced in the playlist
        """
        segment_files = []
        with open(playlist_path, 'r', encoding='utf-8') as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith('#'):
                    segment_files.append(line)

        logging.debug(f"Parsed {len(segment_files)} segment references from playlist")
        return segment_files

    def _check_segments_exist(self, segment_files: List[Path]) -> bool:
        """
        Verify that all segment files are present on disk.

        Args:
            segment_files: List of Path objects for segment files

        Returns:
            True if all segment files exist, False otherwise
        """
        if not segment_files:
            logging.error("No segment files to validate")
            return False

        missing_files = [segment.name for segment in segment_files if not segment.exists()]
        if missing_files:
            logging.error(f"Missing segment files: {', '.join(missing_files)}")
            return False

        logging.debug(f"All {len(segment_files)} segment files exist")
        return True

    def validate_hls_output(self, variant_playlist_path: Path) -> HLSOutputValidation:
        """
        Check that the variant playlist exists and every segment it lists is on disk.

        Args:
            variant_playlist_path: Engine-generated variant playlist

        Returns:
            HLSOutputValidation with detailed status
        """
        logging.info(f"Starting HLS validation for {variant_playlist_path.name}")

        if not self._check_playlist_exists(variant_playlist_path):
            return HLSOutputValidation(
                valid=False,
                playlist_valid=False,
                segments_valid=False,
                error_message=f"Playlist file validation failed: {variant_playlist_path}"
            )

        segment_names = self._parse_playlist(variant_playlist_path)
        segments = [variant_playlist_path.parent / name for name in segment_names]

        if not self._check_segments_exist(segments):
            return HLSOutputValidation(
                valid=False,
                playlist_valid=True,
                segments_valid=False,
                segment_count=len(segments),
                error_message="One or more segment files are missing"
            )

        logging.info(f"HLS validation successful: {len(segments)} segments")
        return HLSOutputValidation(
            valid=True,
            playlist_valid=True,
            segments_valid=True,
            segment_count=len(segments)
        )
