"""Shared fixtures for tsrewrite tests."""

import json
from typing import Dict, Optional

import pytest

from tsrewrite.file_resolver import PathStat, Storage


@pytest.fixture
def ts_project(tmp_path):
    """Create a TypeScript project using path aliases."""
    for directory in ("src/app/things", "src/lib/widgets", "src/core", "src/shared"):
        (tmp_path / directory).mkdir(parents=True)

    (tmp_path / "src" / "app" / "x.ts").write_text("import { util } from '@lib/util';\n")
    (tmp_path / "src" / "app" / "thing.ts").write_text("export const thing = 1;\n")
    (tmp_path / "src" / "app" / "things" / "index.ts").write_text("export const all = [];\n")
    (tmp_path / "src" / "app" / "View.tsx").write_text("export const View = () => null;\n")
    (tmp_path / "src" / "app" / "legacy.js").write_text("module.exports = {};\n")
    (tmp_path / "src" / "app" / "data.json").write_text("{}\n")
    (tmp_path / "src" / "lib" / "util.ts").write_text("export const util = 1;\n")
    (tmp_path / "src" / "lib" / "widgets" / "index.ts").write_text("export {};\n")
    (tmp_path / "src" / "core" / "engine.ts").write_text("export class Engine {}\n")
    (tmp_path / "src" / "shared" / "types.ts").write_text("export type Id = string;\n")

    tsconfig = """{
  // Path aliases used by the app
  "compilerOptions": {
    "target": "ES2020",
    "baseUrl": ".",
    "paths": {
      "@lib/*": ["src/lib/*"],
      "@app/core/*": ["src/core/*"],
      "@/*": ["src/*"], /* catch-all */
    },
  },
}
"""
    (tmp_path / "tsconfig.json").write_text(tsconfig)
    return tmp_path


class DictStorage(Storage):
    """In-memory storage keyed by path strings, in any path flavour."""

    def __init__(self, files: Dict[str, str] = None, directories=()):
        self.files = dict(files or {})
        self.directories = set(directories)
        self.reads = []

    def read_text(self, path: str) -> str:
        self.reads.append(path)
        try:
            return self.files[path]
        except KeyError:
            raise FileNotFoundError(path)

    def stat(self, path: str) -> Optional[PathStat]:
        if path in self.directories:
            return PathStat(is_directory=True, is_file=False)
        if path in self.files:
            return PathStat(is_directory=False, is_file=True)
        return None


@pytest.fixture
def dict_storage():
    return DictStorage


@pytest.fixture
def write_tsconfig(tmp_path):
    """Write a tsconfig.json (dict or raw text) and return its path."""

    def _write(config, name="tsconfig.json"):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        text = config if isinstance(config, str) else json.dumps(config, indent=2)
        path.write_text(text)
        return path

    return _write
