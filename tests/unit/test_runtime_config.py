"""
Tests for runtime configuration loading.
"""

import json

import pytest

from imt.config import (
    RuntimeConfig,
    TreeConfig,
    build_tree,
    get_default_config,
    get_default_config_template,
    load_config,
    set_default_config,
)
from imt.merkle import IMT, LeanIMT
from imt.schemas.errors import ParameterError


class TestRuntimeConfig:
    """Tests for RuntimeConfig construction."""

    def test_defaults(self):
        """Defaults match the documented values."""
        config = RuntimeConfig()

        assert config.tree.kind == "lean"
        assert config.tree.depth == 16
        assert config.tree.arity == 2
        assert config.tree.zero_value == 0
        assert config.tree.hash == "sha256"
        assert config.log_level == "INFO"
        assert config.api.port == 8000

    def test_unknown_kind(self):
        """Unknown tree kind raises ParameterError."""
        with pytest.raises(ParameterError):
            TreeConfig(kind="sparse")

    def test_from_dict_partial(self):
        """Partial dicts keep defaults and decode the zero value."""
        config = RuntimeConfig.from_dict({"tree": {"kind": "fixed", "zero_value": "7"}})

        assert config.tree.kind == "fixed"
        assert config.tree.zero_value == 7
        assert config.tree.depth == 16

    def test_to_dict_round_trip(self):
        """to_dict output loads back to an equal config."""
        config = RuntimeConfig.from_dict({"tree": {"arity": 4}, "log_level": "DEBUG"})

        assert RuntimeConfig.from_dict(config.to_dict()) == config

    def test_from_env(self, monkeypatch):
        """IMT_* variables populate the config."""
        monkeypatch.setenv("IMT_TREE_KIND", "fixed")
        monkeypatch.setenv("IMT_TREE_DEPTH", "4")
        monkeypatch.setenv("IMT_ZERO_VALUE", "11")
        monkeypatch.setenv("IMT_HASH", "blake2s")
        monkeypatch.setenv("IMT_API_PORT", "9001")

        config = RuntimeConfig.from_env()

        assert config.tree.kind == "fixed"
        assert config.tree.depth == 4
        assert config.tree.zero_value == 11
        assert config.tree.hash == "blake2s"
        assert config.api.port == 9001

    def test_env_overrides_file_values(self, monkeypatch):
        """Env overrides return a new config."""
        config = RuntimeConfig.from_dict({"tree": {"depth": 8}, "log_level": "WARNING"})
        monkeypatch.setenv("IMT_LOG_LEVEL", "DEBUG")

        overridden = config.with_env_overrides()

        assert overridden.log_level == "DEBUG"
        assert overridden.tree.depth == 8
        assert config.log_level == "WARNING"

    def test_env_override_invalid_kind(self, monkeypatch):
        """Invalid kind from env raises ParameterError."""
        monkeypatch.setenv("IMT_TREE_KIND", "sparse")

        with pytest.raises(ParameterError):
            RuntimeConfig().with_env_overrides()


class TestLoadConfig:
    """Tests for load_config file discovery."""

    def test_json_path(self, tmp_path):
        """Explicit JSON path is loaded."""
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"tree": {"hash": "sha3_256"}}))

        assert load_config(path).tree.hash == "sha3_256"

    def test_yaml_path(self, tmp_path):
        """Explicit YAML path is loaded."""
        path = tmp_path / "imt.yaml"
        path.write_text("tree:\n  kind: fixed\n  depth: 3\nlog_level: ERROR\n")

        config = load_config(path)

        assert config.tree.kind == "fixed"
        assert config.tree.depth == 3
        assert config.log_level == "ERROR"

    def test_missing_path(self, tmp_path):
        """Missing explicit path raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.json")

    def test_search_order(self, tmp_path, monkeypatch):
        """./imt.json wins over ./.imt.json."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path / "home"))
        (tmp_path / ".imt.json").write_text(json.dumps({"tree": {"arity": 5}}))
        assert load_config().tree.arity == 5

        (tmp_path / "imt.json").write_text(json.dumps({"tree": {"arity": 3}}))
        assert load_config().tree.arity == 3

    def test_no_file(self, tmp_path, monkeypatch):
        """No config file gives the defaults."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path / "home"))

        assert load_config() == RuntimeConfig()

    def test_template_is_loadable(self, tmp_path):
        """The config template loads as the defaults."""
        path = tmp_path / "imt.json"
        path.write_text(get_default_config_template())

        assert load_config(path) == RuntimeConfig()

    def test_default_config(self):
        """set_default_config replaces the global default."""
        custom = RuntimeConfig.from_dict({"tree": {"depth": 2}})
        set_default_config(custom)
        try:
            assert get_default_config() is custom
        finally:
            set_default_config(None)


class TestBuildTree:
    """Tests for build_tree."""

    def test_lean(self):
        """Lean kind builds a LeanIMT."""
        tree = build_tree(TreeConfig(), [1, 2, 3])

        assert isinstance(tree, LeanIMT)
        assert tree.size == 3

    def test_fixed(self):
        """Fixed kind builds an IMT with the configured shape."""
        tree = build_tree(TreeConfig(kind="fixed", depth=3, arity=3, zero_value=0), [1, 2])

        assert isinstance(tree, IMT)
        assert tree.depth == 3
        assert tree.arity == 3

    def test_unknown_hash(self):
        """Unknown hash raises ParameterError."""
        with pytest.raises(ParameterError):
            build_tree(TreeConfig(hash="md5"))
