"""Compiler configuration for the rewriter.

Loads tsconfig.json / jsconfig.json files (comments, trailing commas and the
"extends" directive included) into a ResolvedConfig, and defines the closed
set of extensions an emitted specifier may carry.

Example:
    >>> config = load_config('/my/project/tsconfig.json')
    >>> config.paths
    {'@app/*': ['src/app/*']}
    >>> config.base_dir
    '/my/project'
"""

import json
import logging
import os
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Set, Union

from .errors import ConfigError

logger = logging.getLogger(__name__)

# Strings are matched first so comment markers inside them survive.
_COMMENT_RE = re.compile(r'"(?:\\.|[^"\\])*"|//[^\n]*|/\*.*?\*/', re.DOTALL)
_TRAILING_COMMA_RE = re.compile(r'"(?:\\.|[^"\\])*"|,(\s*[}\]])')


class TargetExtension(Enum):
    """Extension given to a resolved specifier in the emitted output."""

    JS = ".js"
    MJS = ".mjs"
    CJS = ".cjs"

    @classmethod
    def parse(cls, value: Union[str, "TargetExtension"]) -> "TargetExtension":
        """Accept an enum member, '.mjs' or 'mjs'.

        Raises:
            ConfigError: If the value is not one of the supported extensions.
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        if not text.startswith("."):
            text = "." + text
        try:
            return cls(text)
        except ValueError:
            choices = ", ".join(member.value for member in cls)
            raise ConfigError(f"Unsupported target extension {value!r} (expected one of {choices})")


@dataclass(frozen=True)
class ResolvedConfig:
    """Compiler options the rewriter cares about.

    Attributes:
        target: Language version token (informational for tree-sitter).
        base_url: Directory alias targets are resolved against, if set.
        paths: Raw alias mapping {pattern: [replacement]}.
        config_dir: Directory of the config file, or the project root.
    """

    target: str = "latest"
    base_url: Optional[str] = None
    paths: Mapping[str, List[str]] = field(default_factory=dict)
    config_dir: str = field(default_factory=os.getcwd)

    @property
    def base_dir(self) -> str:
        """Directory alias targets are resolved against."""
        return self.resolve_base_dir()

    def resolve_base_dir(self, path_module=os.path) -> str:
        """Explicit baseUrl joined to config_dir, else config_dir itself."""
        if self.base_url is None:
            return self.config_dir
        return path_module.normpath(path_module.join(self.config_dir, self.base_url))

    @classmethod
    def from_compiler_options(
        cls, options: Mapping[str, Any], config_dir: str = None
    ) -> "ResolvedConfig":
        """Build a config from a compilerOptions mapping.

        Args:
            options: The compilerOptions object of a tsconfig.
            config_dir: Directory relative values are resolved against
                (defaults to the current working directory).

        Raises:
            ConfigError: If an option has the wrong shape.
        """
        _validate_compiler_options(options, "<compilerOptions>")
        return cls(
            target=options.get("target", "latest"),
            base_url=options.get("baseUrl"),
            paths=dict(options.get("paths") or {}),
            config_dir=os.path.abspath(config_dir or os.getcwd()),
        )


def strip_json_comments(text: str) -> str:
    """Remove comments and trailing commas from JSON-with-comments text."""

    def _comment(match):
        token = match.group(0)
        return token if token.startswith('"') else ""

    def _comma(match):
        return match.group(1) if match.group(1) is not None else match.group(0)

    text = _COMMENT_RE.sub(_comment, text)
    return _TRAILING_COMMA_RE.sub(_comma, text)


def _validate_compiler_options(options: Any, source: str) -> None:
    if not isinstance(options, Mapping):
        raise ConfigError(f"Config file parse fails: compilerOptions must be an object in {source}")

    paths = options.get("paths")
    if paths is not None:
        if not isinstance(paths, Mapping):
            raise ConfigError(f"Config file parse fails: 'paths' must be an object in {source}")
        for key, targets in paths.items():
            if not isinstance(targets, list) or not all(isinstance(t, str) for t in targets):
                raise ConfigError(
                    f"Config file parse fails: 'paths' entry {key!r} must be a list of strings in {source}"
                )

    for name in ("baseUrl", "target"):
        value = options.get(name)
        if value is not None and not isinstance(value, str):
            raise ConfigError(f"Config file parse fails: '{name}' must be a string in {source}")


def _read_config_file(config_path: Path) -> Dict[str, Any]:
    try:
        content = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}") from e

    try:
        config = json.loads(strip_json_comments(content))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Config file parse fails: {config_path}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigError(f"Config file parse fails: {config_path} must contain a JSON object")
    return config


def _parse_tsconfig(config_path: Path, seen: Set[str]) -> Dict[str, Any]:
    """Parse a tsconfig, following "extends" (child overrides parent).

    Returns:
        Merged compilerOptions, with baseUrl made absolute against the file
        that declared it.
    """
    config_str = str(config_path.resolve())
    if config_str in seen:
        raise ConfigError(f"Circular 'extends' in config file {config_path}")
    seen.add(config_str)

    config = _read_config_file(config_path)
    options = config.get("compilerOptions", {})
    _validate_compiler_options(options, str(config_path))
    options = dict(options)
    if "baseUrl" in options:
        options["baseUrl"] = os.path.normpath(
            os.path.join(str(config_path.parent), options["baseUrl"])
        )

    extends = config.get("extends")
    if extends:
        if not isinstance(extends, str):
            raise ConfigError(f"Config file parse fails: 'extends' must be a string in {config_path}")
        parent_path = Path(extends)
        if not parent_path.is_absolute():
            parent_path = config_path.parent / extends
        if not parent_path.suffix:
            parent_path = parent_path.with_suffix(".json")

        merged = _parse_tsconfig(parent_path, seen)
        merged.update(options)
        options = merged

    return options


def load_config(config_path: Union[str, os.PathLike]) -> ResolvedConfig:
    """Load a tsconfig.json or jsconfig.json file.

    Args:
        config_path: Path to the config file.

    Returns:
        ResolvedConfig whose config_dir is the file's directory.

    Raises:
        ConfigError: If the file is missing, malformed, or has invalid
            compiler options.
    """
    path = Path(os.path.abspath(config_path))
    options = _parse_tsconfig(path, set())
    logger.debug("loaded %s (baseUrl=%s)", path, options.get("baseUrl"))
    return ResolvedConfig(
        target=options.get("target", "latest"),
        base_url=options.get("baseUrl"),
        paths=dict(options.get("paths") or {}),
        config_dir=str(path.parent),
    )
