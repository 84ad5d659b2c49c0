"""
Config system (config.py).

Tests ScanConfig, ConfigLoader and the process-wide default.
"""

import json
from pathlib import Path

import pytest

from reflectkit.config import ConfigLoader, ScanConfig, get_default_config, set_default_config
from reflectkit.faults import ConfigInvalid


# ============================================================================
# ScanConfig
# ============================================================================

class TestScanConfig:

    def test_defaults(self):
        config = ScanConfig()
        assert config.source_root == "src"
        assert config.source_suffix == ".py"
        assert config.root_path == Path("src")

    def test_with_overrides_ignores_none(self):
        config = ScanConfig().with_overrides(source_root="lib", source_suffix=None)
        assert config == ScanConfig(source_root="lib")

    def test_frozen(self):
        with pytest.raises(AttributeError):
            ScanConfig().source_root = "lib"


# ============================================================================
# ConfigLoader sources
# ============================================================================

class TestConfigLoader:

    def test_empty(self):
        assert ConfigLoader.load(env_prefix="RKTEST_").to_scan_config() == ScanConfig()

    def test_env_nesting(self, monkeypatch):
        monkeypatch.setenv("RKTEST_SCAN__SOURCE_ROOT", "lib")
        loader = ConfigLoader.load(env_prefix="RKTEST_")
        assert loader.get("scan.source_root") == "lib"
        assert loader.to_scan_config().source_root == "lib"

    def test_parse_value(self):
        loader = ConfigLoader()
        assert loader._parse_value("yes") is True
        assert loader._parse_value("False") is False
        assert loader._parse_value('{"a": 1}') == {"a": 1}
        assert loader._parse_value("[1, 2]") == [1, 2]
        assert loader._parse_value("src") == "src"

    def test_json_file(self, tmp_path):
        path = tmp_path / "rk.json"
        path.write_text(json.dumps({"scan": {"source_root": "json_src"}}))
        loader = ConfigLoader.load(paths=[str(path)], env_prefix="RKTEST_")
        assert loader.to_scan_config().source_root == "json_src"

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "rk.yaml"
        path.write_text("scan:\n  source_root: yaml_src\n  source_suffix: .pyw\n")
        config = ConfigLoader.load(paths=[str(path)], env_prefix="RKTEST_").to_scan_config()
        assert config == ScanConfig(source_root="yaml_src", source_suffix=".pyw")

    def test_glob_pattern(self, tmp_path):
        (tmp_path / "a.json").write_text(json.dumps({"scan": {"source_root": "a"}}))
        (tmp_path / "b.json").write_text(json.dumps({"scan": {"source_suffix": ".pyx"}}))
        config = ConfigLoader.load(paths=[str(tmp_path / "*.json")], env_prefix="RKTEST_").to_scan_config()
        assert config == ScanConfig(source_root="a", source_suffix=".pyx")

    def test_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("RKTEST_SCAN__SOURCE_ROOT=dotenv_src\nOTHER=ignored\n")
        loader = ConfigLoader.load(env_prefix="RKTEST_", env_file=str(env_file))
        assert loader.to_scan_config().source_root == "dotenv_src"
        assert loader.get("other") is None

    def test_missing_env_file_is_ignored(self, tmp_path):
        loader = ConfigLoader.load(env_prefix="RKTEST_", env_file=str(tmp_path / "absent.env"))
        assert loader.config_data == {}

    def test_precedence(self, tmp_path, monkeypatch):
        path = tmp_path / "rk.json"
        path.write_text(json.dumps({"scan": {"source_root": "file", "source_suffix": ".pyx"}}))
        env_file = tmp_path / ".env"
        env_file.write_text("RKTEST_SCAN__SOURCE_ROOT=dotenv\n")
        monkeypatch.setenv("RKTEST_SCAN__SOURCE_ROOT", "environ")

        loader = ConfigLoader.load(paths=[str(path)], env_prefix="RKTEST_", env_file=str(env_file))
        assert loader.get("scan.source_root") == "environ"
        assert loader.get("scan.source_suffix") == ".pyx"

        loader = ConfigLoader.load(
            paths=[str(path)],
            env_prefix="RKTEST_",
            overrides={"scan": {"source_root": "override"}},
        )
        assert loader.get("scan.source_root") == "override"
        assert loader.get("scan.source_suffix") == ".pyx"

    def test_get_default(self):
        loader = ConfigLoader.load(env_prefix="RKTEST_")
        assert loader.get("scan.source_root", "fallback") == "fallback"


# ============================================================================
# Validation
# ============================================================================

class TestValidation:

    def test_unknown_key(self):
        loader = ConfigLoader.load(env_prefix="RKTEST_", overrides={"scan": {"colour": "red"}})
        with pytest.raises(ConfigInvalid) as exc:
            loader.to_scan_config()
        assert exc.value.metadata["key"] == "scan.colour"

    def test_non_string_value(self, monkeypatch):
        monkeypatch.setenv("RKTEST_SCAN__SOURCE_ROOT", "true")
        with pytest.raises(ConfigInvalid, match="expected a string"):
            ConfigLoader.load(env_prefix="RKTEST_").to_scan_config()

    def test_suffix_needs_dot(self):
        loader = ConfigLoader.load(env_prefix="RKTEST_", overrides={"scan": {"source_suffix": "py"}})
        with pytest.raises(ConfigInvalid, match="must start with"):
            loader.to_scan_config()

    def test_section_must_be_mapping(self):
        loader = ConfigLoader.load(env_prefix="RKTEST_", overrides={"scan": "src"})
        with pytest.raises(ConfigInvalid, match="expected a mapping"):
            loader.to_scan_config()


# ============================================================================
# Process-wide default
# ============================================================================

class TestDefaultConfig:

    def test_loaded_from_environment(self, monkeypatch):
        monkeypatch.setenv("RK_SCAN__SOURCE_ROOT", "from_env")
        assert get_default_config().source_root == "from_env"

    def test_cached_until_reset(self, monkeypatch):
        first = get_default_config()
        monkeypatch.setenv("RK_SCAN__SOURCE_SUFFIX", ".pyx")
        assert get_default_config() is first
        set_default_config(None)
        assert get_default_config().source_suffix == ".pyx"

    def test_explicit_default(self):
        config = ScanConfig(source_root="explicit")
        set_default_config(config)
        assert get_default_config() is config
