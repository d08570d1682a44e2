"""tsrewrite - Rewrite path aliases and extensionless imports in TS/JS sources.

Source files that import through tsconfig path aliases (``@lib/util``) or
extensionless relative paths (``./thing``) do not run as native ES modules.
tsrewrite rewrites those specifiers into relative paths carrying the emitted
extension, touching nothing else in the file.

Components:
    - Converter: Owns a project's configuration; converts files
    - AliasTable: Alias prefix -> absolute directory lookup
    - FileResolver: Picks the concrete file an import refers to
    - SpecifierRewriter: Rewrites a single specifier
    - TreeTransform: Finds specifiers in a tree-sitter syntax tree

Quick Start:
    >>> from tsrewrite import Converter
    >>> converter = Converter('tsconfig.json')
    >>> print(converter.convert('src/app/main.ts'))
    import { helper } from "../lib/helper.js";
"""

from .alias_table import AliasEntry, AliasTable
from .config import ResolvedConfig, TargetExtension, load_config
from .converter import ConversionResult, Converter, ConvertStep, SourceItem, StepResult
from .errors import (
    ConfigError,
    ResolutionMiss,
    RewriteError,
    UndecodableSourceError,
    UnsupportedInputError,
    UnsupportedSyntaxError,
)
from .file_resolver import FileResolver, LocalStorage, PathStat, ResolveResult, ResolveStrategy, Storage
from .rewriter import RewriteContext, SpecifierKind, SpecifierRewriter, classify_specifier
from .transform import NodeShape, TreeTransform

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = [
    "__version__",
    "__license__",
    # Facade
    "Converter",
    "ConversionResult",
    "ConvertStep",
    "SourceItem",
    "StepResult",
    # Configuration
    "ResolvedConfig",
    "TargetExtension",
    "load_config",
    "AliasEntry",
    "AliasTable",
    # Resolution
    "FileResolver",
    "ResolveResult",
    "ResolveStrategy",
    "Storage",
    "LocalStorage",
    "PathStat",
    # Rewriting
    "SpecifierRewriter",
    "SpecifierKind",
    "RewriteContext",
    "classify_specifier",
    "TreeTransform",
    "NodeShape",
    # Errors
    "RewriteError",
    "ConfigError",
    "UnsupportedSyntaxError",
    "UnsupportedInputError",
    "UndecodableSourceError",
    "ResolutionMiss",
]
