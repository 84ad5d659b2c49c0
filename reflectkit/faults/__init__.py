"""
reflectkit faults - Typed fault signals.

Setup errors (a bad package path, an invalid configuration) are raised.
Per-item errors of bulk operations (one class failing to resolve or
construct) are wrapped in an ``Outcome`` and the operation moves on.

Core exports:
- Fault: Base fault class
- FaultDomain: Domain enumeration
- Severity: Severity levels
"""

from .core import (
    DOMAIN_DEFAULTS,
    Fault,
    FaultDomain,
    Severity,
    log_fault,
)

from .domains import (
    AccessDenied,
    ConfigFault,
    ConfigInvalid,
    ConstructFault,
    ConstructionDenied,
    ConstructionFailed,
    DuplicateRegistration,
    EmptyOrUnreadable,
    InvocationDenied,
    InvocationFailed,
    MemberNotFound,
    NoMatchingConstructor,
    NotADirectory,
    PathNotFound,
    ScanFault,
    TypeResolutionFailed,
    UnknownKey,
)

__all__ = [
    # Core types
    "DOMAIN_DEFAULTS",
    "Fault",
    "FaultDomain",
    "Severity",
    "log_fault",

    # Config
    "ConfigFault",
    "ConfigInvalid",

    # Scan
    "ScanFault",
    "PathNotFound",
    "NotADirectory",
    "EmptyOrUnreadable",
    "TypeResolutionFailed",

    # Construct / invoke
    "ConstructFault",
    "NoMatchingConstructor",
    "ConstructionDenied",
    "ConstructionFailed",
    "InvocationDenied",
    "InvocationFailed",

    # Access
    "AccessDenied",
    "MemberNotFound",

    # Registry
    "DuplicateRegistration",
    "UnknownKey",
]
