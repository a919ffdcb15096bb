"""
Progress output for synctivity commands.

Progress lines go to stderr so stdout only carries sync notices and the
summary. They are shown when stderr is a terminal, and can be forced on
with --verbose or SYNCTIVITY_PROGRESS=1 (or off with SYNCTIVITY_PROGRESS=0).
"""

import os
import sys
from typing import Optional

RED = '\033[31m'
GREEN = '\033[32m'
RESET = '\033[0m'


def progress_from_env() -> Optional[bool]:
    """SYNCTIVITY_PROGRESS as a tri-state: forced on, forced off or unset."""
    value = os.environ.get('SYNCTIVITY_PROGRESS')
    if value == '1':
        return True
    if value == '0':
        return False
    return None


class ProgressReporter:
    """Reports what a sync run is doing without touching stdout."""

    def __init__(self, enabled: Optional[bool] = None):
        if enabled is None:
            enabled = progress_from_env()
        self.enabled = sys.stderr.isatty() if enabled is None else enabled
        self.use_colors = sys.stderr.isatty() and 'NO_COLOR' not in os.environ

    def _write(self, text: str, color: Optional[str] = None):
        if color and self.use_colors:
            text = f"{color}{text}{RESET}"
        print(text, file=sys.stderr, flush=True)

    def __call__(self, message: str):
        if self.enabled:
            self._write(message)

    def success(self, message: str):
        if self.enabled:
            self._write(f"✓ {message}", GREEN)

    def error(self, message: str):
        """Errors are written even when progress is off."""
        self._write(f"ERROR: {message}", RED)


def get_progress(enabled: Optional[bool] = None) -> ProgressReporter:
    """Reporter for one command; enabled=None defers to the env and the terminal."""
    return ProgressReporter(enabled)
