"""
reflectkit faults - Core types and fault taxonomy.

Defines:
- Fault base class (structured fault objects)
- FaultDomain (explicit fault domains)
- Severity levels
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional


# ============================================================================
# Severity & Domain Enums
# ============================================================================

class Severity(str, Enum):
    """
    Fault severity levels.

    Determines the logging level used when a fault is reported.
    """
    INFO = "info"       # Informational, no action needed
    WARN = "warn"       # Warning, should be reviewed
    ERROR = "error"     # Error, the operation did not happen
    FATAL = "fatal"     # Fatal, the whole call is aborted


class FaultDomain:
    """
    Fault domains (taxonomy).

    Identifies the toolkit layer where a fault occurred.
    """

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.value = name
        self.description = description

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"FaultDomain(name='{self.name}')"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, FaultDomain):
            return self.name == other.name
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(self.name)


# Standard Domains
FaultDomain.CONFIG = FaultDomain("config", "Configuration errors")
FaultDomain.SCAN = FaultDomain("scan", "Package scan setup errors")
FaultDomain.RESOLVE = FaultDomain("resolve", "Type resolution errors")
FaultDomain.CONSTRUCT = FaultDomain("construct", "Dynamic construction errors")
FaultDomain.INVOKE = FaultDomain("invoke", "Method invocation errors")
FaultDomain.ACCESS = FaultDomain("access", "Member access errors")
FaultDomain.REGISTRY = FaultDomain("registry", "Type registry errors")


# Domain defaults
DOMAIN_DEFAULTS = {
    FaultDomain.CONFIG: {"severity": Severity.FATAL, "retryable": False},
    FaultDomain.SCAN: {"severity": Severity.FATAL, "retryable": False},
    FaultDomain.RESOLVE: {"severity": Severity.WARN, "retryable": False},
    FaultDomain.CONSTRUCT: {"severity": Severity.ERROR, "retryable": False},
    FaultDomain.INVOKE: {"severity": Severity.ERROR, "retryable": False},
    FaultDomain.ACCESS: {"severity": Severity.ERROR, "retryable": False},
    FaultDomain.REGISTRY: {"severity": Severity.ERROR, "retryable": False},
}


# ============================================================================
# Fault - Base Class
# ============================================================================

class Fault(Exception):
    """
    Base fault class - structured, typed fault object.

    A fault is a first-class value with:
    - Stable machine-readable code
    - Human-readable message
    - Severity level
    - Domain classification
    - Retry semantics

    Faults are raised for setup errors and returned inside an ``Outcome``
    for per-item errors of bulk operations.

    Attributes:
        code: Stable machine-readable identifier (e.g., "PATH_NOT_FOUND")
        message: Human-readable summary
        severity: Fault severity (INFO, WARN, ERROR, FATAL)
        domain: Fault domain (SCAN, CONSTRUCT, INVOKE, etc.)
        retryable: Whether this fault can be retried
        metadata: Additional context data

    Example:
        ```python
        raise Fault(
            code="PATH_NOT_FOUND",
            message="Package path does not exist: app.plugins",
            domain=FaultDomain.SCAN,
        )
        ```
    """

    def __init__(
        self,
        code: str | None = None,
        message: str | None = None,
        *,
        domain: FaultDomain | None = None,
        severity: Optional[Severity] = None,
        retryable: Optional[bool] = None,
        metadata: Optional[dict[str, Any]] = None,
    ):
        # Fallback to class attributes if not provided
        self.code = code if code is not None else getattr(self, "code", None)
        self.message = message if message is not None else getattr(self, "message", None)
        self.domain = domain if domain is not None else getattr(self, "domain", None)

        if self.code is None or self.message is None or self.domain is None:
            raise TypeError(f"{self.__class__.__name__} missing required code, message, or domain")

        super().__init__(self.message)

        # Default to ERROR/non-retryable for custom domains
        defaults = DOMAIN_DEFAULTS.get(self.domain, {"severity": Severity.ERROR, "retryable": False})
        self.severity = severity or defaults["severity"]
        self.retryable = retryable if retryable is not None else defaults["retryable"]

        self.metadata = metadata or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"Fault(code={self.code!r}, domain={self.domain.value}, "
            f"severity={self.severity.value})"
        )

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize fault to dictionary.

        Returns:
            Dictionary representation suitable for logging/serialization
        """
        return {
            "code": self.code,
            "message": self.message,
            "domain": self.domain.value,
            "severity": self.severity.value,
            "retryable": self.retryable,
            "metadata": self.metadata,
            "cause": repr(self.__cause__) if self.__cause__ else None,
        }


# ============================================================================
# Reporting
# ============================================================================

_LOG_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.WARN: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.FATAL: logging.CRITICAL,
}


def log_fault(logger: logging.Logger, fault: Fault) -> None:
    """Log a fault at the level its severity maps to, with structured metadata."""
    logger.log(
        _LOG_LEVELS[fault.severity],
        f"[{fault.domain.value}] {fault.code}: {fault.message}",
        extra={"fault": fault.to_dict()},
    )
