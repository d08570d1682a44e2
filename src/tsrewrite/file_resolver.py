"""Resolve an extensionless candidate path to the file that will be emitted.

The resolver probes the filesystem through a small Storage object and tries
several strategies in order. Probe failures are never raised: when nothing
matches, the candidate is returned unchanged and the result is marked
NOT_FOUND so the caller can record a diagnostic.

Resolution Order:
    1. Candidate is a directory      -> candidate/index<ext>
    2. candidate.ts is a file        -> candidate<ext>
    3. candidate.tsx is a file       -> candidate<ext>
    4. Candidate is a .ts/.tsx file  -> suffix swapped for <ext>
    5. Candidate is any other file   -> unchanged
    6. candidate<ext> is a file      -> candidate<ext>
       (or candidate already ends in <ext> and its .ts/.tsx source exists)
    7. Nothing matched               -> unchanged (NOT_FOUND)

Example:
    >>> resolver = FileResolver()
    >>> result = resolver.resolve('/project/src/lib/util', TargetExtension.JS)
    >>> result.path, result.strategy
    ('/project/src/lib/util.js', <ResolveStrategy.SOURCE_FILE: 'source_file'>)
"""

import logging
import os
import stat
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .config import TargetExtension

logger = logging.getLogger(__name__)

# Suffixes of project source files that are emitted under the target extension.
SOURCE_SUFFIXES = (".ts", ".tsx", ".mts", ".cts")


@dataclass(frozen=True)
class PathStat:
    """What a probe learned about a path."""

    is_directory: bool
    is_file: bool


class Storage:
    """Filesystem access used by the converter.

    Subclasses override read_text and stat; stat returns None for a path
    that does not exist or cannot be examined.
    """

    def read_text(self, path: str) -> str:
        raise NotImplementedError

    def stat(self, path: str) -> Optional[PathStat]:
        raise NotImplementedError


class LocalStorage(Storage):
    """Storage backed by the local filesystem."""

    def read_text(self, path: str) -> str:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def stat(self, path: str) -> Optional[PathStat]:
        try:
            mode = os.stat(path).st_mode
        except (OSError, ValueError):
            return None
        return PathStat(is_directory=stat.S_ISDIR(mode), is_file=stat.S_ISREG(mode))


class ResolveStrategy(Enum):
    """Enumeration of resolution strategies used."""

    DIRECTORY_INDEX = "directory_index"  # ./dir -> ./dir/index.js
    SOURCE_FILE = "source_file"  # ./thing + thing.ts -> ./thing.js
    SOURCE_SUFFIX = "source_suffix"  # ./thing.ts -> ./thing.js
    EXISTING_FILE = "existing_file"  # ./data.json left as is
    EMITTED_FILE = "emitted_file"  # ./legacy + legacy.js -> ./legacy.js, ./thing.js + thing.ts
    NOT_FOUND = "not_found"  # Resolution failed


@dataclass
class ResolveResult:
    """Result of a resolution attempt.

    Attributes:
        path: Resolved absolute path (the candidate itself when not found).
        strategy: Which strategy produced the path.
        candidates: Every path that was probed.
    """

    path: str
    strategy: ResolveStrategy
    candidates: List[str] = field(default_factory=list)

    @property
    def found(self) -> bool:
        """Whether a strategy confirmed the path on disk."""
        return self.strategy != ResolveStrategy.NOT_FOUND


class FileResolver:
    """Decides which file an import of a candidate path refers to.

    Attributes:
        storage: Storage used for probes.
        path_module: Path flavour used to build probe paths.
    """

    def __init__(self, storage: Storage = None, path_module=os.path):
        self.storage = storage or LocalStorage()
        self.path_module = path_module

    def _probe(self, path: str, candidates: List[str]) -> Optional[PathStat]:
        candidates.append(path)
        try:
            return self.storage.stat(path)
        except OSError as e:
            logger.debug("probe failed for %s: %s", path, e)
            return None

    def _is_file(self, path: str, candidates: List[str]) -> bool:
        info = self._probe(path, candidates)
        return info is not None and info.is_file

    def resolve(self, candidate: str, target_ext: TargetExtension) -> ResolveResult:
        """Resolve a candidate absolute path.

        Args:
            candidate: Absolute path built from the specifier.
            target_ext: Extension the emitted specifier should carry.

        Returns:
            ResolveResult; on NOT_FOUND its path is the unchanged candidate.
        """
        ext = target_ext.value
        candidates: List[str] = []

        info = self._probe(candidate, candidates)
        if info is not None and info.is_directory:
            path = self.path_module.join(candidate, "index" + ext)
            return ResolveResult(path, ResolveStrategy.DIRECTORY_INDEX, candidates)

        for source_ext in (".ts", ".tsx"):
            if self._is_file(candidate + source_ext, candidates):
                return ResolveResult(candidate + ext, ResolveStrategy.SOURCE_FILE, candidates)

        if info is not None and info.is_file:
            root, suffix = self.path_module.splitext(candidate)
            if suffix in SOURCE_SUFFIXES and not root.endswith(".d"):
                return ResolveResult(root + ext, ResolveStrategy.SOURCE_SUFFIX, candidates)
            return ResolveResult(candidate, ResolveStrategy.EXISTING_FILE, candidates)

        if candidate.endswith(ext):
            root = candidate[: -len(ext)]
            for source_ext in (".ts", ".tsx"):
                if self._is_file(root + source_ext, candidates):
                    return ResolveResult(candidate, ResolveStrategy.EMITTED_FILE, candidates)
        elif self._is_file(candidate + ext, candidates):
            return ResolveResult(candidate + ext, ResolveStrategy.EMITTED_FILE, candidates)

        logger.warning("could not resolve %s (tried %s)", candidate, ", ".join(candidates))
        return ResolveResult(candidate, ResolveStrategy.NOT_FOUND, candidates)
