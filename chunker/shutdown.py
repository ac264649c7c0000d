"""Interrupt handling: Ctrl+C or SIGTERM ends the run immediately."""

import logging
import signal
from typing import Optional


INTERRUPTED_EXIT_CODE = 130


class ShutdownHandler:
    """Turns termination signals into KeyboardInterrupt for the main loop."""

    _instance: Optional['ShutdownHandler'] = None

    def __init__(self):
        """Initialize the handler."""
        self._signal_handlers_registered = False
        self.interrupted = False

    @classmethod
    def get_instance(cls) -> 'ShutdownHandler':
        """Get singleton instance of ShutdownHandler."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def register_signal_handlers(self):
        """Register handlers for Ctrl+C and termination signals."""
        if self._signal_handlers_registered:
            return

        def signal_handler(signum, frame):
            """Abort whatever is running; in-flight output is left as is."""
            self.interrupted = True
            raise KeyboardInterrupt()

        signal.signal(signal.SIGINT, signal_handler)
        if hasattr(signal, "SIGTERM"):
            signal.signal(signal.SIGTERM, signal_handler)
        self._signal_handlers_registered = True

    def farewell(self) -> int:
        """Print the goodbye message and return the exit code for an interrupted run."""
        self.interrupted = True
        print("\n\nThanks for using the IELTS2GO Video Chunker")
        logging.warning("Interrupted - partially written output files were left on disk")
        return INTERRUPTED_EXIT_CODE
