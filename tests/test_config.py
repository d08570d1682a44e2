"""Tests for configuration loading."""

import os

import pytest

from tsrewrite.config import ResolvedConfig, TargetExtension, load_config, strip_json_comments
from tsrewrite.errors import ConfigError


class TestStripJsonComments:
    """Tests for JSON-with-comments cleanup."""

    def test_line_and_block_comments(self):
        text = '{\n  // line\n  "a": 1, /* block */\n  "b": 2\n}'
        assert strip_json_comments(text).replace(" ", "").replace("\n", "") == '{"a":1,"b":2}'

    def test_comment_markers_inside_strings_survive(self):
        text = '{"@/*": ["src/*"], "url": "http://example.com"}'
        assert strip_json_comments(text) == text

    def test_trailing_commas(self):
        text = '{"a": [1, 2,], "b": {"c": 3,},}'
        assert strip_json_comments(text) == '{"a": [1, 2], "b": {"c": 3}}'

    def test_comma_inside_string_kept(self):
        text = '{"a": ",]"}'
        assert strip_json_comments(text) == text


class TestTargetExtension:
    """Tests for TargetExtension parsing."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (".js", TargetExtension.JS),
            ("mjs", TargetExtension.MJS),
            (".CJS", TargetExtension.CJS),
            (TargetExtension.MJS, TargetExtension.MJS),
        ],
    )
    def test_parse(self, value, expected):
        assert TargetExtension.parse(value) is expected

    def test_unknown_extension(self):
        with pytest.raises(ConfigError, match="Unsupported target extension"):
            TargetExtension.parse(".ts")


class TestResolvedConfig:
    """Tests for ResolvedConfig."""

    def test_defaults(self):
        config = ResolvedConfig(config_dir="/project")
        assert config.target == "latest"
        assert config.base_dir == "/project"
        assert dict(config.paths) == {}

    def test_base_url_relative_to_config_dir(self):
        config = ResolvedConfig(base_url="src", config_dir="/project")
        assert config.base_dir == os.path.normpath("/project/src")

    def test_from_compiler_options(self, tmp_path):
        config = ResolvedConfig.from_compiler_options(
            {"target": "ES2022", "paths": {"@lib/*": ["lib/*"]}}, str(tmp_path)
        )
        assert config.target == "ES2022"
        assert config.base_url is None
        assert config.config_dir == str(tmp_path)
        assert config.paths == {"@lib/*": ["lib/*"]}

    def test_from_compiler_options_defaults_to_cwd(self):
        config = ResolvedConfig.from_compiler_options({})
        assert config.config_dir == os.getcwd()

    def test_from_compiler_options_rejects_bad_paths(self):
        with pytest.raises(ConfigError):
            ResolvedConfig.from_compiler_options({"paths": ["@lib"]})


class TestLoadConfig:
    """Tests for load_config."""

    def test_load_project_config(self, ts_project):
        config = load_config(ts_project / "tsconfig.json")
        assert config.target == "ES2020"
        assert config.config_dir == str(ts_project)
        assert config.base_dir == str(ts_project)
        assert config.paths["@lib/*"] == ["src/lib/*"]
        assert config.paths["@/*"] == ["src/*"]

    def test_missing_base_url_uses_config_dir(self, tmp_path, write_tsconfig):
        path = write_tsconfig({"compilerOptions": {"paths": {"@a/*": ["a/*"]}}})
        config = load_config(path)
        assert config.base_url is None
        assert config.base_dir == str(tmp_path)

    def test_no_compiler_options(self, write_tsconfig):
        config = load_config(write_tsconfig({"include": ["src"]}))
        assert config.paths == {}
        assert config.target == "latest"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read config file"):
            load_config(tmp_path / "nope.json")

    def test_malformed_json_includes_parse_message(self, write_tsconfig):
        path = write_tsconfig('{"compilerOptions": {"paths": }')
        with pytest.raises(ConfigError) as exc_info:
            load_config(path)
        assert "Config file parse fails" in str(exc_info.value)
        assert "Expecting value" in str(exc_info.value)

    def test_invalid_compiler_options(self, write_tsconfig):
        with pytest.raises(ConfigError, match="baseUrl"):
            load_config(write_tsconfig({"compilerOptions": {"baseUrl": 3}}))

    def test_extends_merges_child_over_parent(self, tmp_path, write_tsconfig):
        write_tsconfig(
            {
                "compilerOptions": {
                    "target": "ES2019",
                    "baseUrl": ".",
                    "paths": {"@base/*": ["base/*"]},
                }
            },
            name="configs/base.json",
        )
        path = write_tsconfig(
            {
                "extends": "./configs/base",
                "compilerOptions": {"paths": {"@lib/*": ["lib/*"]}},
            }
        )
        config = load_config(path)
        assert config.target == "ES2019"
        # child "paths" replaces the parent's
        assert config.paths == {"@lib/*": ["lib/*"]}
        # baseUrl resolved against the file that declared it
        assert config.base_dir == str(tmp_path / "configs")

    def test_circular_extends(self, write_tsconfig):
        write_tsconfig({"extends": "./b.json"}, name="a.json")
        path = write_tsconfig({"extends": "./a.json"}, name="b.json")
        with pytest.raises(ConfigError, match="Circular"):
            load_config(path)
