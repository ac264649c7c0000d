"""Exception types raised by the video chunker."""

from typing import Optional


class ChunkerError(Exception):
    """Base class for all chunker errors."""
    pass


class ValidationError(ChunkerError):
    """Raised for invalid user input (missing file, bad chunk length, ...)."""
    pass


class InvalidConfigError(ValidationError):
    """Raised when chunk planning parameters are out of range."""
    pass


class ConfigurationError(ValidationError):
    """Exception raised for configuration-related errors."""
    pass


class EngineError(ChunkerError):
    """Raised when the external media engine cannot be run or read."""
    pass


class ProbeError(ChunkerError):
    """Raised when duration or stream metadata cannot be determined."""
    pass


class TranscodeError(ChunkerError):
    """Raised when a single chunk's transcoding invocation fails."""

    def __init__(self, chunk_index: int, message: str):
        """
        Initialize TranscodeError.

        Args:
            chunk_index: Zero-based index of the failed chunk
            message: Error details reported by the engine
        """
        self.chunk_index = chunk_index
        self.message = message
        super().__init__(f"Failed to process chunk {chunk_index + 1}: {message}")


class HLSError(ChunkerError):
    """Raised when both the primary and the fallback HLS attempts fail."""

    def __init__(self, message: str, primary_error: Optional[str] = None):
        self.message = message
        self.primary_error = primary_error
        super().__init__(message)
