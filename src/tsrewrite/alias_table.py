"""Alias table built from the compiler "paths" option.

Each tsconfig entry such as ``"@lib/*": ["src/lib/*"]`` becomes an
AliasEntry mapping the prefix ``@lib`` to an absolute directory. The table is
built once per Converter and never mutated afterwards, so it can be shared by
concurrent conversions.

Example:
    >>> table = AliasTable.build({'@lib/*': ['src/lib/*']}, '/project')
    >>> table.lookup('@lib')
    '/project/src/lib'
    >>> table.match('@lib/util')
    (AliasEntry(prefix='@lib', target_dir='/project/src/lib'), '/util')
"""

import os
import re
from dataclasses import dataclass
from typing import Iterator, Mapping, Optional, Sequence, Tuple

from .errors import ConfigError

_TRAILING_WILDCARD_RE = re.compile(r"/\*?$")


def strip_wildcard(pattern: str) -> str:
    """Remove a trailing ``/`` or ``/*`` from an alias key or target."""
    return _TRAILING_WILDCARD_RE.sub("", pattern)


@dataclass(frozen=True)
class AliasEntry:
    """A single alias prefix and the absolute directory it stands for.

    Attributes:
        prefix: Alias text with any trailing ``/`` or ``/*`` removed.
        target_dir: Absolute path the prefix is replaced with.
    """

    prefix: str
    target_dir: str

    def matches(self, specifier: str) -> Optional[str]:
        """Return the part of the specifier after the prefix, or None.

        The prefix must cover whole leading path segments: ``@lib`` matches
        ``@lib`` and ``@lib/x`` but not ``@library``.
        """
        if specifier == self.prefix:
            return ""
        if specifier.startswith(self.prefix + "/"):
            return specifier[len(self.prefix) :]
        return None


class AliasTable:
    """Immutable longest-match lookup from alias prefix to directory.

    Attributes:
        entries: Entries ordered from longest to shortest prefix.
    """

    def __init__(self, entries: Sequence[AliasEntry] = ()):
        ordered = sorted(entries, key=lambda e: len(e.prefix), reverse=True)
        self._entries: Tuple[AliasEntry, ...] = tuple(ordered)
        self._by_prefix = {e.prefix: e.target_dir for e in ordered}

    @classmethod
    def build(
        cls,
        raw_paths: Mapping[str, Sequence[str]],
        base_dir: str,
        path_module=os.path,
    ) -> "AliasTable":
        """Parse a raw "paths" mapping.

        Args:
            raw_paths: {pattern: [replacement]} as found in compilerOptions.
            base_dir: Absolute directory replacements are relative to.
            path_module: Path flavour (os.path, or ntpath/posixpath).

        Returns:
            A new AliasTable.

        Raises:
            ConfigError: If an entry does not have exactly one replacement.
        """
        entries = []
        for key, targets in raw_paths.items():
            if isinstance(targets, str) or not isinstance(targets, Sequence):
                raise ConfigError(f"Expected path to be a list of one entry at {key}")
            if len(targets) != 1:
                raise ConfigError(
                    f"Expected path to have only one entry, found {len(targets)} at {key}"
                )
            target = strip_wildcard(targets[0])
            target_dir = path_module.normpath(path_module.join(base_dir, target))
            entries.append(AliasEntry(prefix=strip_wildcard(key), target_dir=target_dir))
        return cls(entries)

    @property
    def entries(self) -> Tuple[AliasEntry, ...]:
        return self._entries

    def lookup(self, prefix: str) -> Optional[str]:
        """Exact lookup of a stripped alias prefix."""
        return self._by_prefix.get(prefix)

    def match(self, specifier: str) -> Optional[Tuple[AliasEntry, str]]:
        """Find the longest alias covering the leading segments of a specifier.

        Args:
            specifier: Unquoted specifier text, e.g. ``@lib/util``.

        Returns:
            (entry, remainder) where remainder starts with ``/`` or is empty,
            or None when no alias applies.
        """
        for entry in self._entries:
            rest = entry.matches(specifier)
            if rest is not None:
                return entry, rest
        return None

    def __iter__(self) -> Iterator[AliasEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"AliasTable({list(self._entries)!r})"
