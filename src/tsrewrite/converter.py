"""Converter facade: one per project, many files.

The converter owns the resolved configuration and the alias table. Both are
built once in the constructor and only read afterwards, so one Converter can
serve concurrent convert() calls from several threads.

Example:
    >>> converter = Converter('tsconfig.json', target_ext='.mjs')
    >>> print(converter.convert('src/app/main.ts'))

    Pipeline usage:
    >>> step = converter.stream_step()
    >>> for result in step(items):
    ...     if result.error:
    ...         print(result.error)
"""

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import PurePath
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Sequence, Union

from .alias_table import AliasTable
from .config import ResolvedConfig, TargetExtension, load_config
from .errors import ResolutionMiss, RewriteError, UndecodableSourceError, UnsupportedInputError
from .file_resolver import FileResolver, LocalStorage, Storage
from .rewriter import SpecifierRewriter
from .syntax import SourceEdit, apply_edits, parse_source
from .transform import TreeTransform

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_EXTENSIONS = (".ts", ".tsx")

ConfigInput = Union[ResolvedConfig, Mapping[str, Any], str, os.PathLike]


@dataclass
class ConversionResult:
    """Output of one conversion.

    Attributes:
        text: The rewritten source text.
        edits: Specifier edits that were applied.
        misses: Specifiers that could not be confirmed on disk.
    """

    text: str
    edits: List[SourceEdit] = field(default_factory=list)
    misses: List[ResolutionMiss] = field(default_factory=list)


@dataclass
class SourceItem:
    """A file travelling through a build pipeline.

    Attributes:
        path: Path of the file.
        contents: bytes or str when buffered, None to read from storage,
            or a stream object (anything with a read method).
        extension: File suffix, derived from path when not given.
    """

    path: str
    contents: Any = None
    extension: str = ""

    def __post_init__(self):
        if not self.extension:
            self.extension = PurePath(self.path).suffix

    @property
    def is_stream(self) -> bool:
        return hasattr(self.contents, "read")


@dataclass
class StepResult:
    """Outcome of the pipeline step for one item; error is set on failure."""

    item: SourceItem
    error: Optional[Exception] = None


class ConvertStep:
    """Per-item pipeline transform created by Converter.stream_step."""

    def __init__(
        self,
        converter: "Converter",
        target_ext: Optional[TargetExtension],
        extensions: Sequence[str],
    ):
        self.converter = converter
        self.target_ext = target_ext
        self.extensions = tuple(extensions)

    def process(self, item: SourceItem) -> StepResult:
        """Convert one item, reporting per-file failures in the result."""
        if item.extension not in self.extensions:
            return StepResult(item)
        if item.is_stream:
            return StepResult(item, UnsupportedInputError(PurePath(item.path).name))
        try:
            text = self.converter.convert(item.path, item.contents, self.target_ext)
        except (RewriteError, OSError) as e:
            logger.error("%s", e)
            return StepResult(item, e)
        return StepResult(replace(item, contents=text.encode("utf-8")))

    def __call__(self, items: Iterable[SourceItem]) -> Iterator[StepResult]:
        for item in items:
            yield self.process(item)


class Converter:
    """Rewrites aliased and relative specifiers for one project.

    Attributes:
        config: The resolved compiler configuration.
        aliases: Alias table built from config.paths.
        target_ext: Default extension for resolved specifiers.
    """

    def __init__(
        self,
        config: ConfigInput,
        target_ext: Union[str, TargetExtension] = TargetExtension.JS,
        *,
        root: str = None,
        storage: Storage = None,
        path_module=os.path,
    ):
        """Initialize the converter.

        Args:
            config: ResolvedConfig, a compilerOptions mapping, or the path
                of a tsconfig file.
            target_ext: Default extension ('.js', '.mjs' or '.cjs').
            root: Directory used as config directory when config is not a
                file path (defaults to the current working directory).
            storage: Storage for reads and probes (local filesystem default).
            path_module: Path flavour used for path arithmetic.

        Raises:
            ConfigError: If the configuration is malformed.
        """
        if isinstance(config, (str, os.PathLike)):
            config = load_config(config)
        elif not isinstance(config, ResolvedConfig):
            config = ResolvedConfig.from_compiler_options(config, root)
        self.config = config
        logger.debug("config dir: %s", config.config_dir)

        self.storage = storage or LocalStorage()
        self.path_module = path_module
        self.aliases = AliasTable.build(
            config.paths, config.resolve_base_dir(path_module), path_module
        )
        self.target_ext = TargetExtension.parse(target_ext)
        self._rewriter = SpecifierRewriter(
            FileResolver(self.storage, path_module), path_module
        )
        self._transform = TreeTransform(self._rewriter)

    def convert_with_report(
        self,
        file_path: str,
        contents: Union[str, bytes, None] = None,
        target_ext: Union[str, TargetExtension, None] = None,
    ) -> ConversionResult:
        """Convert one file and report what changed.

        Args:
            file_path: Path of the file; relative specifiers resolve from
                its directory.
            contents: Source text; read from storage when None.
            target_ext: Overrides the converter's default extension.

        Returns:
            ConversionResult with the new text, edits and misses.

        Raises:
            UnsupportedSyntaxError: If a dynamic import has zero or several
                arguments.
            UndecodableSourceError: If the contents are not valid UTF-8.
            OSError: If contents is None and the file cannot be read.
        """
        try:
            if contents is None:
                contents = self.storage.read_text(file_path)
            source = contents.encode("utf-8") if isinstance(contents, str) else bytes(contents)
            source.decode("utf-8")
        except UnicodeError as e:
            raise UndecodableSourceError(file_path, str(e)) from e

        ext = self.target_ext if target_ext is None else TargetExtension.parse(target_ext)
        ctx = self._rewriter.context_for(file_path, self.aliases, ext)
        tree = parse_source(source, file_path, self.config.target)
        edits = self._transform.transform(tree, source, ctx)
        return ConversionResult(apply_edits(source, edits), edits, ctx.misses)

    def convert(
        self,
        file_path: str,
        contents: Union[str, bytes, None] = None,
        target_ext: Union[str, TargetExtension, None] = None,
    ) -> str:
        """Convert one file and return the rewritten text."""
        return self.convert_with_report(file_path, contents, target_ext).text

    def stream_step(
        self,
        target_ext: Union[str, TargetExtension, None] = None,
        extensions: Sequence[str] = DEFAULT_SOURCE_EXTENSIONS,
    ) -> ConvertStep:
        """Adapt convert() into a pipeline step over SourceItem objects.

        Args:
            target_ext: Overrides the converter's default extension.
            extensions: Suffixes that are converted; other items pass through.
        """
        ext = None if target_ext is None else TargetExtension.parse(target_ext)
        return ConvertStep(self, ext, extensions)
