"""Find and rewrite module specifiers in a tree-sitter syntax tree.

Every node falls into one of four shapes. Import declarations, export-from
declarations and dynamic import calls have their specifier rewritten; all
other nodes are walked to reach nested dynamic imports. The result is a list
of SourceEdit objects covering only specifier string literals.

Example:
    >>> transform = TreeTransform(SpecifierRewriter())
    >>> tree = parse_source(source, 'src/app/x.ts')
    >>> edits = transform.transform(tree, source, ctx)
    >>> apply_edits(source, edits)
"""

import re
from enum import Enum
from typing import TYPE_CHECKING, List, Tuple

from .errors import UnsupportedSyntaxError
from .rewriter import RewriteContext, SpecifierRewriter
from .syntax import SourceEdit

if TYPE_CHECKING:
    from tree_sitter import Node, Tree


class NodeShape(Enum):
    """Closed set of node shapes the transform distinguishes."""

    IMPORT_DECL = "import_decl"
    EXPORT_FROM_DECL = "export_from_decl"
    DYNAMIC_IMPORT = "dynamic_import"
    OTHER = "other"


_TYPE_KEYWORD = re.compile(rb"(?:typeof|type)\b")


def _is_type_only(node: "Node", source: bytes) -> bool:
    # `import type ...`, `import typeof ...`, `export type {...} from ...`
    children = node.children
    if any(not child.is_named and child.type in ("type", "typeof") for child in children):
        return True
    # `export type * from ...` parses with the keyword wrapped in an ERROR node
    if len(children) > 1 and children[1].type == "ERROR":
        head = source[children[1].start_byte : children[1].end_byte]
        return _TYPE_KEYWORD.match(head) is not None
    return False


def classify_node(node: "Node") -> NodeShape:
    """Map a tree-sitter node onto a NodeShape."""
    if node.type == "import_statement" and node.child_by_field_name("source") is not None:
        return NodeShape.IMPORT_DECL
    if node.type == "export_statement" and node.child_by_field_name("source") is not None:
        return NodeShape.EXPORT_FROM_DECL
    if node.type == "call_expression":
        function = node.child_by_field_name("function")
        if function is not None and function.type == "import":
            return NodeShape.DYNAMIC_IMPORT
    return NodeShape.OTHER


class TreeTransform:
    """Collects specifier edits for one parsed file.

    Attributes:
        rewriter: SpecifierRewriter applied to each specifier.
    """

    def __init__(self, rewriter: SpecifierRewriter):
        self.rewriter = rewriter

    def transform(self, tree: "Tree", source: bytes, ctx: RewriteContext) -> List[SourceEdit]:
        """Walk the tree and rewrite every rewritable specifier.

        Args:
            tree: Tree produced by parse_source.
            source: The exact bytes that were parsed.
            ctx: Context of the file being converted.

        Returns:
            Edits replacing changed specifier literals.

        Raises:
            UnsupportedSyntaxError: If a dynamic import does not have exactly
                one argument.
        """
        edits: List[SourceEdit] = []
        # (node, inside a non-literal dynamic import argument)
        stack: List[Tuple["Node", bool]] = [(tree.root_node, False)]

        while stack:
            node, in_argument = stack.pop()
            shape = classify_node(node)

            if shape is NodeShape.IMPORT_DECL or shape is NodeShape.EXPORT_FROM_DECL:
                if not _is_type_only(node, source):
                    self._rewrite_literal(node.child_by_field_name("source"), source, ctx, edits)
            elif shape is NodeShape.DYNAMIC_IMPORT:
                argument = self._single_argument(node, source, ctx)
                if argument.type == "string":
                    self._rewrite_literal(argument, source, ctx, edits)
                else:
                    stack.append((argument, True))
            elif in_argument and node.type == "string":
                self._rewrite_literal(node, source, ctx, edits)
            else:
                stack.extend((child, in_argument) for child in reversed(node.children))

        return edits

    def _single_argument(self, node: "Node", source: bytes, ctx: RewriteContext) -> "Node":
        arguments = node.child_by_field_name("arguments")
        args = []
        if arguments is not None and arguments.type == "arguments":
            args = [c for c in arguments.named_children if c.type != "comment"]
        if len(args) != 1:
            row, column = node.start_point
            snippet = source[node.start_byte : node.end_byte].decode("utf-8", "replace")
            raise UnsupportedSyntaxError(ctx.file_path, row + 1, column + 1, snippet)
        return args[0]

    def _rewrite_literal(
        self, node: "Node", source: bytes, ctx: RewriteContext, edits: List[SourceEdit]
    ) -> None:
        raw = source[node.start_byte : node.end_byte].decode("utf-8")
        new = self.rewriter.rewrite(raw, ctx)
        if new != raw:
            edits.append(SourceEdit(node.start_byte, node.end_byte, new))
