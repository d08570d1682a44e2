"""Error types raised by the specifier rewriter.

Everything fatal derives from RewriteError so a pipeline can report a failed
file and keep going. ResolutionMiss is not an exception: it is a diagnostic
recorded when no file could be confirmed on disk for a specifier.
"""

from dataclasses import dataclass
from typing import Tuple


class RewriteError(Exception):
    """Base class for all errors raised by tsrewrite."""


class ConfigError(RewriteError):
    """Malformed alias configuration or compiler-options file."""


class UnsupportedSyntaxError(RewriteError):
    """A dynamic import call that does not take exactly one argument.

    Attributes:
        file_path: File being converted.
        line: 1-indexed line of the call.
        column: 1-indexed column of the call.
        snippet: Source text of the call.
    """

    def __init__(self, file_path: str, line: int, column: int, snippet: str):
        self.file_path = file_path
        self.line = line
        self.column = column
        self.snippet = snippet
        super().__init__(
            f"Dynamic import must have exactly one argument at "
            f"{file_path}:{line}:{column}: {snippet}"
        )


class UndecodableSourceError(RewriteError):
    """Source contents that are not valid UTF-8."""

    def __init__(self, file_path: str, reason: str):
        self.file_path = file_path
        self.reason = reason
        super().__init__(f"Source is not valid UTF-8: {file_path} ({reason})")


class UnsupportedInputError(RewriteError):
    """A streamed (non-buffered) item handed to the pipeline step."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Streams are not supported. Received file: {path}")


@dataclass(frozen=True)
class ResolutionMiss:
    """A specifier whose target could not be confirmed on disk.

    Attributes:
        file_path: File containing the specifier.
        specifier: The specifier text as written (without quotes).
        candidate: Absolute path that was probed.
        probed: Every path tried by the resolver.
    """

    file_path: str
    specifier: str
    candidate: str
    probed: Tuple[str, ...] = ()

    def __str__(self) -> str:
        return f"{self.file_path}: could not resolve '{self.specifier}' (tried {self.candidate})"
