"""
Package Scanner.

Walks the on-disk directory of a package, imports every source module in it
and yields the classes those modules define that subclass a base type.

The namespace ``a.b.c`` is expected at ``<source_root>/a/b/c``. Nothing is
cached: every call lists the directory and resolves the modules again.
"""

import importlib
import inspect
import logging
from pathlib import Path
from types import ModuleType
from typing import Callable, Iterator, List, Optional, Set, Type

from .config import ScanConfig, get_default_config
from .faults import (
    EmptyOrUnreadable,
    NotADirectory,
    PathNotFound,
    TypeResolutionFailed,
    log_fault,
)
from .results import ScanReport

logger = logging.getLogger("reflectkit.scanner")

Loader = Callable[[str], ModuleType]


class PackageScanner:
    """
    Scanner for discovering subclasses in a package directory.

    Features:
    - Configurable source root and source-file suffix
    - Pluggable module loader (defaults to ``importlib.import_module``)
    - Per-entry fault tolerance: a module that fails to import is reported
      and skipped, the scan carries on
    - Optional ``ScanReport`` describing every entry
    """

    def __init__(self, config: Optional[ScanConfig] = None, loader: Optional[Loader] = None):
        self.config = config
        self.loader = loader or importlib.import_module

    def package_dir(self, namespace: str, source_root: Optional[Path] = None) -> Path:
        """Physical directory of ``namespace`` under the source root."""
        root = Path(source_root) if source_root is not None else self._config().root_path
        return root.joinpath(*namespace.split("."))

    def scan_package(
        self,
        namespace: str,
        base_type: Type,
        *,
        source_root: Optional[Path] = None,
        report: Optional[ScanReport] = None,
    ) -> Iterator[Type]:
        """
        Scan a package directory for subclasses of ``base_type``.

        Args:
            namespace: Dotted package path (e.g. 'app.plugins')
            base_type: Base class to filter by (``issubclass``, so reflexive)
            source_root: Directory holding the top-level package, overriding config
            report: Optional report filled in as the scan proceeds

        Returns:
            Lazy iterator of discovered classes

        Raises:
            PathNotFound: The package directory does not exist
            NotADirectory: The package path is not a directory
            EmptyOrUnreadable: The package directory cannot be listed
        """
        package_dir = self.package_dir(namespace, source_root)

        if not package_dir.exists():
            raise PathNotFound(namespace, package_dir)

        if not package_dir.is_dir():
            raise NotADirectory(namespace, package_dir)

        try:
            entries = sorted(package_dir.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise EmptyOrUnreadable(namespace, package_dir, reason=str(e)) from e

        return self._iter_classes(namespace, base_type, entries, report)

    def _iter_classes(
        self,
        namespace: str,
        base_type: Type,
        entries: List[Path],
        report: Optional[ScanReport],
    ) -> Iterator[Type]:
        suffix = self._config().source_suffix
        seen: Set[Type] = set()

        for entry in entries:
            if not entry.name.endswith(suffix) or entry.name == suffix:
                logger.info(f"Skipping non-source entry: {entry.name}")
                if report is not None:
                    report.skipped.append(entry.name)
                continue

            stem = entry.name[: -len(suffix)]
            module_name = namespace if stem == "__init__" else f"{namespace}.{stem}"

            try:
                module = self.loader(module_name)
            except Exception as e:
                fault = TypeResolutionFailed(module_name, f"{type(e).__name__}: {e}")
                fault.__cause__ = e
                log_fault(logger, fault)
                if report is not None:
                    report.faults.append(fault)
                continue

            for cls in self._scan_module(module, base_type):
                if cls in seen:
                    continue
                seen.add(cls)
                if report is not None:
                    report.found.append(cls)
                yield cls

    def _scan_module(self, module: ModuleType, base_type: Type) -> List[Type]:
        """Classes defined in ``module`` that subclass ``base_type``."""
        discovered = []
        for _, obj in inspect.getmembers(module, inspect.isclass):
            # Only classes defined here, not ones the module imported
            if obj.__module__ != module.__name__:
                continue
            if not issubclass(obj, base_type):
                continue
            discovered.append(obj)
        return discovered

    def _config(self) -> ScanConfig:
        return self.config if self.config is not None else get_default_config()


def scan_package(
    namespace: str,
    base_type: Type,
    *,
    loader: Optional[Loader] = None,
    source_root: Optional[Path] = None,
    suffix: Optional[str] = None,
    report: Optional[ScanReport] = None,
) -> Iterator[Type]:
    """
    Lazily yield the subclasses of ``base_type`` found in ``namespace``.

    Setup faults are raised by this call, before iteration starts.
    """
    config = get_default_config().with_overrides(source_suffix=suffix)
    scanner = PackageScanner(config=config, loader=loader)
    return scanner.scan_package(namespace, base_type, source_root=source_root, report=report)


def get_classes(namespace: str, base_type: Type, **options) -> Set[Type]:
    """All subclasses of ``base_type`` found in ``namespace``, as a set."""
    return set(scan_package(namespace, base_type, **options))
