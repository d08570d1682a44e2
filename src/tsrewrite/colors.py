"""ANSI colors for tsrewrite's command-line diagnostics.

Respects NO_COLOR (https://no-color.org/) and FORCE_COLOR, and otherwise
enables colors only when the target stream is a terminal.

Example:
    >>> c = get_colors()
    >>> print(c.error("error:"), c.path("src/app.ts"))
"""

import os
import sys
from typing import TextIO


class Colors:
    """ANSI color helper bound to one output stream.

    Attributes:
        enabled: Whether escape codes are emitted.
    """

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"

    def __init__(self, enabled: bool = None, stream: TextIO = None):
        if enabled is None:
            enabled = self._should_enable_colors(stream or sys.stderr)
        self.enabled = enabled

    @staticmethod
    def _should_enable_colors(stream: TextIO) -> bool:
        if os.environ.get("NO_COLOR"):
            return False
        if os.environ.get("FORCE_COLOR"):
            return True
        if not hasattr(stream, "isatty") or not stream.isatty():
            return False
        return os.environ.get("TERM", "") != "dumb"

    def _colorize(self, text: str, *codes: str) -> str:
        if not self.enabled:
            return text
        return f"{''.join(codes)}{text}{self.RESET}"

    def error(self, text: str) -> str:
        """Bold red (conversion failures)."""
        return self._colorize(text, self.BOLD, self.RED)

    def warning(self, text: str) -> str:
        """Yellow (resolution misses)."""
        return self._colorize(text, self.YELLOW)

    def success(self, text: str) -> str:
        return self._colorize(text, self.BOLD, self.GREEN)

    def path(self, text: str) -> str:
        return self._colorize(text, self.CYAN)

    def dim(self, text: str) -> str:
        return self._colorize(text, self.DIM)


def get_colors(no_color: bool = False, stream: TextIO = None) -> Colors:
    """Colors for a stream (stderr by default); disabled when no_color is set."""
    if no_color:
        return Colors(enabled=False)
    return Colors(stream=stream)
