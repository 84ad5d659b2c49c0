"""
Per-item results for bulk operations.

Bulk operations never raise for a single failing item. Each item gets an
``Outcome`` instead, so callers can tell "no candidates were found" from
"every candidate failed" without reading the logs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

from .faults import Fault


@dataclass(frozen=True)
class Outcome:
    """
    Result of one construction or invocation.

    Attributes:
        subject: The class constructed or the method invoked
        value: The constructed instance (always None for invocations)
        fault: The fault that stopped the operation, if any
    """
    subject: Any
    value: Any = None
    fault: Optional[Fault] = None

    @property
    def ok(self) -> bool:
        return self.fault is None

    @classmethod
    def success(cls, subject: Any, value: Any = None) -> "Outcome":
        return cls(subject=subject, value=value)

    @classmethod
    def failure(cls, subject: Any, fault: Fault) -> "Outcome":
        return cls(subject=subject, fault=fault)

    def unwrap(self) -> Any:
        """Return the value, raising the fault if the operation failed."""
        if self.fault is not None:
            raise self.fault
        return self.value


@dataclass
class ScanReport:
    """What a package scan saw, entry by entry."""
    namespace: str
    skipped: List[str] = field(default_factory=list)
    faults: List[Fault] = field(default_factory=list)
    found: List[type] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "namespace": self.namespace,
            "skipped": list(self.skipped),
            "faults": [f.to_dict() for f in self.faults],
            "found": [f"{t.__module__}.{t.__qualname__}" for t in self.found],
        }


@dataclass
class PipelineReport:
    """Scan report plus one outcome per candidate class."""
    scan: ScanReport
    outcomes: List[Outcome] = field(default_factory=list)

    @property
    def succeeded(self) -> List[Outcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> List[Outcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def instances(self) -> List[Any]:
        return [o.value for o in self.outcomes if o.ok]

    @property
    def complete(self) -> bool:
        """True when every candidate was constructed and every entry resolved."""
        return not self.failed and not self.scan.faults
