"""Progress display for chunking and HLS runs."""

from typing import Optional


class ProgressBar:
    """Simple progress bar for per-chunk steps and encode percentages."""

    BAR_WIDTH = 20

    def __init__(self, enabled: bool = True, label: str = "HLS"):
        """
        Initialize progress bar.

        Args:
            enabled: When False nothing is printed
            label: Prefix used by the percentage bar
        """
        self.enabled = enabled
        self.label = label
        self._last_percentage: Optional[int] = None

    def step(self, current: int, total: int, message: str):
        """
        Print one step line, e.g. "[2/5]  40% [########------------] Processing x...".

        Args:
            current: Current step number (1-indexed)
            total: Total number of steps
            message: Text printed after the bar
        """
        if not self.enabled:
            return
        percentage = round(current / total * 100) if total else 100
        print(f"[{current}/{total}] {percentage:3d}% [{self._bar(percentage)}] {message}", flush=True)

    def done(self, message: str):
        """Print a completion line for the current step."""
        if not self.enabled:
            return
        print(f"[OK] {message}", flush=True)

    def update(self, processed_seconds: float, total_seconds: float):
        """
        Redraw the percentage bar in place.

        Args:
            processed_seconds: Media time processed so far
            total_seconds: Total media duration
        """
        if not self.enabled or total_seconds <= 0:
            return
        percentage = int(min(max(processed_seconds / total_seconds, 0.0), 1.0) * 100)
        if percentage == self._last_percentage:
            return
        self._last_percentage = percentage
        print(f"\r[{self.label}] {percentage:3d}% [{self._bar(percentage)}] Processing...", end='', flush=True)

    def finish(self):
        """Move to the next line after an in-place percentage bar."""
        if self.enabled and self._last_percentage is not None:
            print()
        self._last_percentage = None

    def _bar(self, percentage: int) -> str:
        filled = int(self.BAR_WIDTH * percentage / 100)
        return '#' * filled + '-' * (self.BAR_WIDTH - filled)
