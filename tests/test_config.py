"""Tests for stencil.yaml and variable file loading."""

import textwrap
from pathlib import Path

import pytest

from stencil.config import StencilConfig, load_config, load_vars
from stencil.errors import ConfigError
from stencil.template.template import NullPolicy

from tests.infrastructure.file_utils import write


class TestLoadConfig:

    def test_missing_file_gives_defaults(self, tmp_path: Path):
        cfg = load_config(tmp_path / "stencil.yaml")
        assert cfg == StencilConfig()
        assert cfg.encoding == "utf-8"
        assert cfg.null_policy == NullPolicy.ERROR
        assert cfg.vars == {}

    def test_empty_file_gives_defaults(self, tmp_path: Path):
        path = write(tmp_path / "stencil.yaml", "")
        assert load_config(path) == StencilConfig()

    def test_full_config(self, tmp_path: Path):
        path = write(tmp_path / "stencil.yaml", textwrap.dedent("""
            encoding: latin-1
            null_policy: empty
            vars:
              name: World
              count: 3
              flags: [a, b]
        """))
        cfg = load_config(path)
        assert cfg.encoding == "latin-1"
        assert cfg.null_policy == NullPolicy.EMPTY
        assert cfg.vars == {"name": "World", "count": 3, "flags": ["a", "b"]}

    def test_partial_config_keeps_other_defaults(self, tmp_path: Path):
        path = write(tmp_path / "stencil.yaml", "null_policy: empty\n")
        cfg = load_config(path)
        assert cfg.null_policy == NullPolicy.EMPTY
        assert cfg.encoding == "utf-8"

    def test_project_fixture_config(self, tmpproj: Path):
        cfg = load_config(tmpproj / "stencil.yaml")
        assert cfg.vars == {"name": "World", "greeting": "Hello"}

    @pytest.mark.parametrize(
        "content, field",
        [
            ("bogus: 1\n", "bogus"),
            ("null_policy: sometimes\n", "null_policy"),
            ("vars: [1, 2]\n", "vars"),
            ("encoding: no-such-codec\n", "encoding"),
        ],
    )
    def test_invalid_field_is_named(self, tmp_path: Path, content, field):
        path = write(tmp_path / "stencil.yaml", content)
        with pytest.raises(ConfigError, match=field):
            load_config(path)

    def test_top_level_must_be_mapping(self, tmp_path: Path):
        path = write(tmp_path / "stencil.yaml", "- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_invalid_yaml(self, tmp_path: Path):
        path = write(tmp_path / "stencil.yaml", "vars: [unclosed\n")
        with pytest.raises(ConfigError, match="invalid YAML"):
            load_config(path)


class TestLoadVars:

    def test_mapping(self, tmpproj: Path):
        assert load_vars(tmpproj / "vars.yaml") == {
            "name": "Stencil",
            "items": ["one", "two", "three"],
        }

    def test_empty_file(self, tmp_path: Path):
        assert load_vars(write(tmp_path / "v.yaml", "")) == {}

    def test_null_values_are_kept(self, tmp_path: Path):
        assert load_vars(write(tmp_path / "v.yaml", "v: null\n")) == {"v": None}

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_vars(tmp_path / "absent.yaml")

    def test_not_a_mapping(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="must contain a mapping"):
            load_vars(write(tmp_path / "v.yaml", "just text\n"))

    def test_keys_must_be_strings(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="must be strings"):
            load_vars(write(tmp_path / "v.yaml", "1: one\n"))

    def test_encoding(self, tmp_path: Path):
        path = write(tmp_path / "v.yaml", "name: café\n", encoding="latin-1")
        assert load_vars(path, "latin-1") == {"name": "café"}
