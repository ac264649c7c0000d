#!/usr/bin/env python3
"""
IELTS2GO Video Chunker
Main entry point for splitting a video into chunks or an HLS stream.
"""

import sys

from chunker.cli import main


if __name__ == "__main__":
    sys.exit(main())
