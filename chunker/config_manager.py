"""Configuration management for the video chunker."""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Union

from chunker.exceptions import ConfigurationError


DEFAULT_CONFIG_FILENAME = "chunker.json"

DEFAULTS = {
    "output_directory": "ielts2go_chunks",
    "chunk_length": 60,
    "prefix": "ielts2go_chunk",
    "quality_preset": "fast",
    "hls_segment_length": 4,
    "hls_playlist_type": "vod",
    "show_progress": True,
}

HLS_PLAYLIST_TYPES = ("vod", "live")


class ConfigManager:
    """Loads optional defaults from a JSON file; CLI flags take precedence."""

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Initialize ConfigManager.

        Args:
            config_path: Path to a JSON configuration file. When omitted,
                chunker.json in the working directory is used if present.
        """
        self._config: dict = {}
        self.config_path: Optional[Path] = None

        if config_path is not None:
            self.config_path = Path(config_path)
        elif Path(DEFAULT_CONFIG_FILENAME).is_file():
            self.config_path = Path(DEFAULT_CONFIG_FILENAME)

        if self.config_path is not None:
            self._config = self.load_config()
            self.validate_config(self._config)
            logging.info(f"Configuration loaded from {self.config_path}")

    def load_config(self) -> dict:
        """
        Read and parse JSON configuration from file.

        Returns:
            Dictionary containing configuration data

        Raises:
            ConfigurationError: If file is missing or contains invalid JSON
        """
        if not self.config_path.is_file():
            raise ConfigurationError(f"Configuration file not found: {self.config_path}")

        logging.debug(f"Reading configuration file: {self.config_path}")
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in configuration file: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Error reading configuration file: {e}") from e

        if not isinstance(config, dict):
            raise ConfigurationError("Configuration file must contain a JSON object")

        logging.debug(f"Configuration contents: {config}")
        return config

    def validate_config(self, config: dict) -> bool:
        """
        Verify that every known field has the right type.

        Args:
            config: Configuration dictionary to validate

        Returns:
            True if configuration is valid

        Raises:
            ConfigurationError: If validation fails
        """
        unknown = [key for key in config if key not in DEFAULTS]
        if unknown:
            logging.warning(f"Ignoring unknown configuration fields: {', '.join(unknown)}")

        for key in ("output_directory", "prefix", "quality_preset"):
            if key in config and not isinstance(config[key], str):
                raise ConfigurationError(f"'{key}' must be a string, got {type(config[key]).__name__}")

        if "chunk_length" in config:
            value = config["chunk_length"]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationError(f"'chunk_length' must be a number, got {type(value).__name__}")

        if "hls_segment_length" in config:
            value = config["hls_segment_length"]
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"'hls_segment_length' must be an integer, got {type(value).__name__}")

        if "hls_playlist_type" in config and config["hls_playlist_type"] not in HLS_PLAYLIST_TYPES:
            raise ConfigurationError(
                f"'hls_playlist_type' must be one of {', '.join(HLS_PLAYLIST_TYPES)}, "
                f"got {config['hls_playlist_type']!r}"
            )

        if "show_progress" in config and not isinstance(config["show_progress"], bool):
            raise ConfigurationError(
                f"'show_progress' must be a boolean, got {type(config['show_progress']).__name__}"
            )

        return True

    def get(self, key: str) -> Any:
        """Return the configured value for key, or its built-in default."""
        return self._config.get(key, DEFAULTS[key])

    @property
    def output_directory(self) -> Path:
        return Path(self.get("output_directory"))

    @property
    def chunk_length(self) -> Union[int, float]:
        return self.get("chunk_length")

    @property
    def prefix(self) -> str:
        return self.get("prefix")

    @property
    def quality_preset(self) -> str:
        return self.get("quality_preset")

    @property
    def hls_segment_length(self) -> int:
        return self.get("hls_segment_length")

    @property
    def hls_playlist_type(self) -> str:
        return self.get("hls_playlist_type")

    @property
    def show_progress(self) -> bool:
        return self.get("show_progress")
