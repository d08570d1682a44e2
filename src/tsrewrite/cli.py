#!/usr/bin/env python3
"""Command-line interface for tsrewrite.

Subcommands:
    - tsrewrite convert: Rewrite the specifiers of one or more files
    - tsrewrite aliases: Show the alias table built from a tsconfig

Example:
    $ tsrewrite convert src/app/main.ts -p tsconfig.json
    $ tsrewrite convert src/**/*.ts -p tsconfig.json -e .mjs -o build/
    $ tsrewrite aliases -p tsconfig.json
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from . import __version__
from .colors import get_colors
from .config import TargetExtension
from .converter import Converter
from .errors import ConfigError, RewriteError

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _configure_logging(args) -> None:
    if getattr(args, "verbose", False):
        level = logging.DEBUG
    elif getattr(args, "quiet", False):
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-p",
        "--project",
        default="tsconfig.json",
        help="Path to tsconfig.json (default: tsconfig.json)",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log every rewrite")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log errors")


def add_convert_arguments(parser: argparse.ArgumentParser) -> None:
    """Add arguments for the convert subcommand."""
    parser.add_argument("files", nargs="+", help="Source files to convert")
    _add_common_arguments(parser)
    parser.add_argument(
        "-e",
        "--ext",
        choices=[e.value for e in TargetExtension],
        default=TargetExtension.JS.value,
        help="Extension for resolved specifiers (default: .js)",
    )
    parser.add_argument(
        "-o",
        "--out-dir",
        help="Write converted files here, mirroring their project-relative paths",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 if any specifier could not be resolved",
    )


def _output_path(out_dir: str, file_path: str, project_dir: str) -> Path:
    relative = os.path.relpath(os.path.abspath(file_path), project_dir)
    if relative.startswith(".."):
        relative = os.path.basename(file_path)
    return Path(out_dir) / relative


def run_convert(args) -> int:
    """Run the convert subcommand and return the exit status."""
    c = get_colors(no_color=args.no_color)
    if len(args.files) > 1 and not args.out_dir:
        print(c.error("error:"), "--out-dir is required when converting several files", file=sys.stderr)
        return 2

    try:
        converter = Converter(args.project, args.ext)
    except ConfigError as e:
        print(c.error("error:"), e, file=sys.stderr)
        return 1

    failed = 0
    misses = 0
    for file_path in args.files:
        try:
            result = converter.convert_with_report(file_path)
        except (RewriteError, OSError) as e:
            print(c.error("error:"), e, file=sys.stderr)
            failed += 1
            continue

        misses += len(result.misses)
        if args.out_dir:
            dest = _output_path(args.out_dir, file_path, converter.config.config_dir)
            dest.parent.mkdir(parents=True, exist_ok=True)
            dest.write_text(result.text, encoding="utf-8")
            logger.info("%s -> %s", file_path, dest)
        else:
            sys.stdout.write(result.text)

    if misses:
        print(c.warning(f"{misses} specifier(s) could not be resolved"), file=sys.stderr)
    if failed or (args.strict and misses):
        return 1
    return 0


def run_aliases(args) -> int:
    """Print the alias table of a project."""
    c = get_colors(no_color=args.no_color, stream=sys.stdout)
    try:
        converter = Converter(args.project)
    except ConfigError as e:
        print(c.error("error:"), e, file=sys.stderr)
        return 1

    if not len(converter.aliases):
        print(c.dim("no aliases configured"))
    for entry in converter.aliases:
        print(f"{c.success(entry.prefix)} -> {c.path(entry.target_dir)}")
    return 0


def main():
    """Entry point for the tsrewrite command.

    Usage:
        tsrewrite convert FILE... [-p TSCONFIG] [-e EXT] [-o OUT_DIR] [--strict]
        tsrewrite aliases [-p TSCONFIG]
    """
    parser = argparse.ArgumentParser(
        prog="tsrewrite",
        description="Rewrite path aliases and extensionless imports into relative specifiers",
        epilog="Run 'tsrewrite <command> --help' for more information on a command.",
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")

    convert_parser = subparsers.add_parser(
        "convert",
        help="Rewrite the specifiers of source files",
        description="Rewrite aliased and relative specifiers into resolvable relative paths.",
        epilog="Example: tsrewrite convert src/app/main.ts -p tsconfig.json",
    )
    add_convert_arguments(convert_parser)

    aliases_parser = subparsers.add_parser(
        "aliases",
        help="Show the alias table of a project",
        description="Print every alias prefix and the directory it resolves to.",
        epilog="Example: tsrewrite aliases -p tsconfig.json",
    )
    _add_common_arguments(aliases_parser)

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    _configure_logging(args)
    if args.command == "convert":
        sys.exit(run_convert(args))
    elif args.command == "aliases":
        sys.exit(run_aliases(args))


if __name__ == "__main__":
    main()
