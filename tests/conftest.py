"""
Shared test fixtures and helpers for the reflectkit test suite.
"""

import importlib
import sys
import textwrap
import uuid
from pathlib import Path
from typing import Dict

import pytest

from reflectkit.config import set_default_config


class PackageFactory:
    """Writes throwaway packages under ``<tmp>/src`` and imports from there."""

    def __init__(self, root: Path):
        self.root = root
        self.top = f"rkpkg_{uuid.uuid4().hex[:8]}"
        (root / self.top).mkdir(parents=True)
        (root / self.top / "__init__.py").write_text("")

    def write(self, relative: str, files: Dict[str, str]) -> str:
        """
        Create ``<top>.<relative>`` with the given files.

        Returns the dotted namespace of the created package.
        """
        namespace = f"{self.top}.{relative}" if relative else self.top
        package_dir = self.root.joinpath(*namespace.split("."))
        package_dir.mkdir(parents=True, exist_ok=True)
        for name, source in files.items():
            (package_dir / name).write_text(textwrap.dedent(source))
        importlib.invalidate_caches()
        return namespace

    def load(self, dotted: str):
        """Import ``<top>.<module>:<Name>``."""
        module, _, name = dotted.partition(":")
        obj = importlib.import_module(f"{self.top}.{module}")
        return getattr(obj, name) if name else obj


@pytest.fixture
def packages(tmp_path, monkeypatch):
    """Factory for packages importable from ``tmp_path / 'src'``."""
    root = tmp_path / "src"
    root.mkdir()
    monkeypatch.syspath_prepend(str(root))
    factory = PackageFactory(root)
    yield factory
    for name in list(sys.modules):
        if name == factory.top or name.startswith(factory.top + "."):
            del sys.modules[name]


@pytest.fixture(autouse=True)
def _reset_default_config():
    """Each test starts from the environment-derived default config."""
    set_default_config(None)
    yield
    set_default_config(None)


PLUGIN_BASE = """
    class Plugin:
        def __init__(self, name: str):
            self.name = name

        def __eq__(self, other):
            return type(self) is type(other) and self.name == other.name

        def __hash__(self):
            return hash((type(self), self.name))
"""
