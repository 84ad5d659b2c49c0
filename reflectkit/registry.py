"""
Explicit type registry.

An alternative to rescanning a package on every call: factories are bound to
stable keys once (by decorator, by hand, or by a single ``populate`` scan)
and looked up by key afterwards.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterator, List, Optional, Type

from .faults import DuplicateRegistration, UnknownKey
from .scanner import scan_package

logger = logging.getLogger("reflectkit.registry")

Factory = Callable[..., Any]


def qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


class TypeRegistry:
    """
    Mapping from key to factory.

    Usage:
        ```python
        plugins = TypeRegistry()

        @plugins.register("csv")
        class CsvExporter(Exporter):
            ...

        exporter = plugins.create("csv", settings)
        ```
    """

    def __init__(self) -> None:
        self._factories: Dict[str, Factory] = {}

    def register(self, key: str, factory: Optional[Factory] = None):
        """
        Bind ``factory`` to ``key``. Without a factory, returns a decorator.

        Raises:
            DuplicateRegistration: When ``key`` is already bound
        """
        if factory is None:
            def decorator(target: Factory) -> Factory:
                self.register(key, target)
                return target
            return decorator

        if key in self._factories:
            raise DuplicateRegistration(key)
        self._factories[key] = factory
        logger.debug(f"Registered {key!r}")
        return factory

    def unregister(self, key: str) -> Factory:
        try:
            return self._factories.pop(key)
        except KeyError:
            raise UnknownKey(key, list(self._factories)) from None

    def factory(self, key: str) -> Factory:
        try:
            return self._factories[key]
        except KeyError:
            raise UnknownKey(key, list(self._factories)) from None

    def create(self, key: str, *args: Any, **kwargs: Any) -> Any:
        """Call the factory bound to ``key``."""
        return self.factory(key)(*args, **kwargs)

    def populate(
        self,
        namespace: str,
        base_type: Type,
        *,
        key: Callable[[type], str] = qualified_name,
        **scan_options: Any,
    ) -> List[str]:
        """
        Scan ``namespace`` once and register every subclass found.

        Returns:
            Keys registered by this call
        """
        registered = []
        for cls in scan_package(namespace, base_type, **scan_options):
            name = key(cls)
            self.register(name, cls)
            registered.append(name)
        logger.info(f"Registered {len(registered)} types from {namespace}")
        return registered

    def keys(self) -> List[str]:
        return sorted(self._factories)

    def __contains__(self, key: object) -> bool:
        return key in self._factories

    def __len__(self) -> int:
        return len(self._factories)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())
