"""Parsing and printing of JavaScript/TypeScript source with tree-sitter.

Parsing picks a grammar from the file suffix. Printing does not regenerate
text from the tree: edits are spliced into the original bytes, so comments,
whitespace and quote style outside the edited ranges stay exactly as written.

Example:
    >>> tree = parse_source("import x from './x';", "app.ts")
    >>> tree.root_node.children[0].type
    'import_statement'
    >>> apply_edits(b"import x from './x';", [SourceEdit(14, 19, "'./x.js'")])
    "import x from './x.js';"
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import PurePath
from typing import Iterable, Union

import tree_sitter_javascript as ts_javascript
import tree_sitter_typescript as ts_typescript
from tree_sitter import Language, Parser, Tree

logger = logging.getLogger(__name__)

DIALECTS = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "javascript",
}


@dataclass(frozen=True)
class SourceEdit:
    """Replace source bytes [start_byte, end_byte) with text."""

    start_byte: int
    end_byte: int
    text: str


def dialect_for_path(file_path: str) -> str:
    """Grammar name for a file; TypeScript for unknown suffixes."""
    return DIALECTS.get(PurePath(file_path).suffix.lower(), "typescript")


@lru_cache(maxsize=None)
def _language(dialect: str) -> Language:
    if dialect == "tsx":
        return Language(ts_typescript.language_tsx())
    if dialect == "javascript":
        return Language(ts_javascript.language())
    return Language(ts_typescript.language_typescript())


def parse_source(source: Union[str, bytes], file_path: str, target: str = "latest") -> Tree:
    """Parse source text into a tree-sitter Tree.

    A fresh Parser is created per call so parsing is safe from several
    threads at once.

    Args:
        source: Source text, str or UTF-8 bytes.
        file_path: Path used to pick the grammar and in diagnostics.
        target: Language version token from the compiler options.

    Returns:
        The parsed tree. Trees with syntax errors are returned as well.
    """
    if isinstance(source, str):
        source = source.encode("utf-8")
    dialect = dialect_for_path(file_path)
    logger.debug("parsing %s as %s (target %s)", file_path, dialect, target)

    tree = Parser(_language(dialect)).parse(source)
    if tree.root_node.has_error:
        logger.warning("syntax errors in %s, rewriting what could be parsed", file_path)
    return tree


def apply_edits(source: bytes, edits: Iterable[SourceEdit]) -> str:
    """Splice edits into the original bytes and decode the result.

    Edits must not overlap; they may be given in any order.
    """
    out = []
    position = 0
    for edit in sorted(edits, key=lambda e: e.start_byte):
        if edit.start_byte < position:
            raise ValueError(f"Overlapping edit at byte {edit.start_byte}")
        out.append(source[position : edit.start_byte])
        out.append(edit.text.encode("utf-8"))
        position = edit.end_byte
    out.append(source[position:])
    return b"".join(out).decode("utf-8")
