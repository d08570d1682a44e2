"""Rewrite a single module specifier.

A specifier arrives exactly as written in source, quotes included. Bare
specifiers (package names) come back untouched. Aliased (``@``) and relative
(``.``) specifiers are turned into an absolute path, resolved against the
filesystem, and re-expressed relative to the importing file with forward
slashes.

Example:
    >>> table = AliasTable.build({'@lib/*': ['src/lib/*']}, '/project')
    >>> rewriter = SpecifierRewriter()
    >>> ctx = rewriter.context_for('/project/src/app/x.ts', table, TargetExtension.JS)
    >>> rewriter.rewrite("'@lib/util'", ctx)
    "'../lib/util.js'"
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import List

from .alias_table import AliasTable
from .config import TargetExtension
from .errors import ResolutionMiss
from .file_resolver import FileResolver

logger = logging.getLogger(__name__)

QUOTE_CHARS = "'\"`"


class SpecifierKind(Enum):
    """How a specifier is treated by the rewriter."""

    BARE = "bare"
    RELATIVE = "relative"
    ALIASED = "aliased"


def classify_specifier(specifier: str) -> SpecifierKind:
    """Classify unquoted specifier text."""
    if specifier.startswith("."):
        return SpecifierKind.RELATIVE
    if specifier.startswith("@"):
        return SpecifierKind.ALIASED
    return SpecifierKind.BARE


def unquote(raw: str) -> str:
    """Drop the surrounding quote characters of a string literal's text."""
    if len(raw) >= 2 and raw[0] in QUOTE_CHARS and raw[-1] == raw[0]:
        return raw[1:-1]
    return raw


def quote(text: str, quote_char: str = '"') -> str:
    escaped = text.replace("\\", "\\\\").replace(quote_char, "\\" + quote_char)
    return f"{quote_char}{escaped}{quote_char}"


@dataclass
class RewriteContext:
    """Per-file state for one conversion call; never shared between files.

    Attributes:
        file_path: Absolute path of the file being converted.
        directory: Directory of file_path.
        aliases: Alias table of the owning converter.
        target_ext: Extension given to resolved specifiers.
        misses: Resolution misses recorded while converting this file.
    """

    file_path: str
    directory: str
    aliases: AliasTable
    target_ext: TargetExtension
    misses: List[ResolutionMiss] = field(default_factory=list)


class SpecifierRewriter:
    """Turns relative and aliased specifiers into resolvable relative paths.

    Attributes:
        resolver: FileResolver used to pick the concrete file.
        path_module: Path flavour (os.path by default).
    """

    def __init__(self, resolver: FileResolver = None, path_module=os.path):
        self.path_module = path_module
        self.resolver = resolver or FileResolver(path_module=path_module)

    def context_for(
        self, file_path: str, aliases: AliasTable, target_ext: TargetExtension
    ) -> RewriteContext:
        """Create the RewriteContext for one file."""
        file_path = self.path_module.abspath(file_path)
        return RewriteContext(
            file_path=file_path,
            directory=self.path_module.dirname(file_path),
            aliases=aliases,
            target_ext=target_ext,
        )

    def rewrite(self, raw: str, ctx: RewriteContext) -> str:
        """Rewrite one quoted specifier.

        Args:
            raw: Specifier text as it appears in source, including quotes.
            ctx: Context of the file being converted.

        Returns:
            The new quoted specifier, or raw itself when nothing applies.
        """
        specifier = unquote(raw)
        kind = classify_specifier(specifier)
        if kind is SpecifierKind.BARE:
            return raw

        pm = self.path_module
        if kind is SpecifierKind.ALIASED:
            found = ctx.aliases.match(specifier)
            if found is None:
                return raw
            entry, rest = found
            candidate = pm.normpath(entry.target_dir + rest)
        else:
            candidate = pm.normpath(pm.join(ctx.directory, specifier))

        result = self.resolver.resolve(candidate, ctx.target_ext)
        if not result.found:
            ctx.misses.append(
                ResolutionMiss(
                    file_path=ctx.file_path,
                    specifier=specifier,
                    candidate=candidate,
                    probed=tuple(result.candidates),
                )
            )

        relative = self.relative_specifier(result.path, ctx.directory)
        logger.debug("%s: %s -> %s", ctx.file_path, specifier, relative)
        quote_char = raw[0] if raw and raw[0] in QUOTE_CHARS else '"'
        return quote(relative, quote_char)

    def relative_specifier(self, target: str, directory: str) -> str:
        """Express target relative to directory as a ``./`` or ``../`` specifier."""
        pm = self.path_module
        try:
            relative = self._forward_slashes(pm.relpath(target, directory))
        except ValueError:
            # different drives: emit the absolute path unprefixed
            logger.warning("no relative path from %s to %s", directory, target)
            return self._forward_slashes(target)

        if relative in (".", "..") or relative.startswith(("./", "../")):
            return relative
        if relative.startswith("/"):
            return "." + relative
        # dotfile siblings still get "./" so ".hidden.js" is not read as bare
        return "./" + relative

    def _forward_slashes(self, path: str) -> str:
        path = path.replace(self.path_module.sep, "/")
        if self.path_module.altsep:
            path = path.replace(self.path_module.altsep, "/")
        return path
