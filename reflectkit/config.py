"""
Config system - Layered scan configuration with validation.

The scanner maps a namespace ``a.b.c`` onto ``<source_root>/a/b/c`` and
treats entries ending in ``source_suffix`` as type-bearing modules. Both are
configurable here instead of being fixed conventions.
"""

from typing import Any, Dict, Optional
from dataclasses import dataclass, fields, replace
from pathlib import Path
import os
import json

from .faults import ConfigInvalid


@dataclass(frozen=True)
class ScanConfig:
    """Settings consumed by the package scanner."""
    source_root: str = "src"
    source_suffix: str = ".py"

    @property
    def root_path(self) -> Path:
        return Path(self.source_root)

    def with_overrides(self, **changes: Any) -> "ScanConfig":
        """Copy with the non-None entries of ``changes`` applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


class ConfigLoader:
    """
    Loads and merges configuration from multiple sources with precedence:
    overrides > environment variables > .env file > config files > defaults
    """

    def __init__(self, env_prefix: str = "RK_"):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = {}

    @classmethod
    def load(
        cls,
        paths: Optional[list[str]] = None,
        env_prefix: str = "RK_",
        env_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> "ConfigLoader":
        """
        Load configuration from multiple sources.

        Merge order (later overrides earlier):
        1. Config files (YAML or JSON, glob patterns supported)
        2. .env file
        3. Environment variables (RK_* prefix)
        4. Manual overrides

        Args:
            paths: List of config file paths (glob patterns supported)
            env_prefix: Prefix for environment variables
            env_file: Path to .env file
            overrides: Manual overrides (highest precedence)

        Returns:
            Configured ConfigLoader instance
        """
        loader = cls(env_prefix=env_prefix)

        for pattern in paths or []:
            loader._load_from_files(pattern)

        if env_file:
            loader._load_env_file(env_file)

        loader._load_from_env()

        if overrides:
            loader._merge_dict(loader.config_data, overrides)

        return loader

    def _load_from_files(self, pattern: str):
        """Load config from JSON or YAML files."""
        from glob import glob

        for path_str in sorted(glob(pattern)):
            path = Path(path_str)

            if path.suffix == ".json":
                self._load_json_file(path)
            elif path.suffix in (".yaml", ".yml"):
                self._load_yaml_file(path)

    def _load_json_file(self, path: Path):
        """Load config from JSON file."""
        with open(path) as f:
            data = json.load(f)
            self._merge_dict(self.config_data, data)

    def _load_yaml_file(self, path: Path):
        """Load config from YAML file."""
        import yaml
        with open(path) as f:
            data = yaml.safe_load(f)
            if data:
                self._merge_dict(self.config_data, data)

    def _load_env_file(self, path: str):
        """Load prefixed keys from a .env file."""
        from dotenv import dotenv_values

        env_path = Path(path)
        if not env_path.exists():
            return

        for key, value in dotenv_values(env_path).items():
            if value is not None and key.startswith(self.env_prefix):
                self._set_nested(key, value)

    def _load_from_env(self):
        """Load config from environment variables."""
        for key, value in os.environ.items():
            if key.startswith(self.env_prefix):
                self._set_nested(key, value)

    def _set_nested(self, key: str, value: str):
        """Convert RK_SCAN__SOURCE_ROOT to nested dict."""
        key = key[len(self.env_prefix):]

        # Split by double underscore for nested keys
        parts = key.lower().split("__")

        current = self.config_data
        for part in parts[:-1]:
            if part not in current:
                current[part] = {}
            current = current[part]

        current[parts[-1]] = self._parse_value(value)

    def _parse_value(self, value: str) -> Any:
        """Parse string value to appropriate type."""
        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False

        if value.startswith(("{", "[")):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass

        return value

    def _merge_dict(self, target: dict, source: dict):
        """Deep merge source into target."""
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._merge_dict(target[key], value)
            else:
                target[key] = value

    def get(self, path: str, default: Any = None) -> Any:
        """Get config value by dot-separated path."""
        parts = path.split(".")
        current = self.config_data

        for part in parts:
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default

        return current

    def to_scan_config(self) -> ScanConfig:
        """
        Validate the ``scan`` section into a ScanConfig.

        Raises:
            ConfigInvalid: On unknown keys or values of the wrong shape
        """
        section = self.get("scan", {})
        if not isinstance(section, dict):
            raise ConfigInvalid("scan", "expected a mapping")

        known = {f.name for f in fields(ScanConfig)}
        for key in section:
            if key not in known:
                raise ConfigInvalid(f"scan.{key}", "unknown key")

        values: Dict[str, Any] = {}
        for key, value in section.items():
            if not isinstance(value, (str, os.PathLike)):
                raise ConfigInvalid(f"scan.{key}", f"expected a string, got {type(value).__name__}")
            values[key] = os.fspath(value)

        suffix = values.get("source_suffix")
        if suffix is not None and not suffix.startswith("."):
            raise ConfigInvalid("scan.source_suffix", "must start with '.'")

        return ScanConfig(**values)


_default_config: Optional[ScanConfig] = None


def get_default_config() -> ScanConfig:
    """Process-wide scan config, loaded from the environment on first use."""
    global _default_config
    if _default_config is None:
        _default_config = ConfigLoader.load().to_scan_config()
    return _default_config


def set_default_config(config: Optional[ScanConfig]) -> None:
    """Replace the process-wide scan config (None reloads it on next use)."""
    global _default_config
    _default_config = config
