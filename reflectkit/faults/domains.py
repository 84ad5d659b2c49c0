"""
reflectkit faults - Domain-specific fault types.

Provides concrete fault classes for each domain:
- CONFIG faults
- SCAN faults
- RESOLVE faults
- CONSTRUCT faults
- INVOKE faults
- ACCESS faults
- REGISTRY faults
"""

from typing import Any, Optional

from .core import Fault, FaultDomain, Severity


def _qualname(obj: Any) -> str:
    module = getattr(obj, "__module__", None)
    name = getattr(obj, "__qualname__", None) or repr(obj)
    return f"{module}.{name}" if module else name


# ============================================================================
# CONFIG Faults
# ============================================================================

class ConfigFault(Fault):
    """Base class for configuration faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.FATAL,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.CONFIG,
            severity=severity,
            retryable=False,
            metadata=metadata,
        )


class ConfigInvalid(ConfigFault):
    """Configuration value is invalid."""

    def __init__(self, key: str, reason: str, **kwargs):
        super().__init__(
            code="CONFIG_INVALID",
            message=f"Configuration key '{key}' is invalid: {reason}",
            metadata={"key": key, "reason": reason, **kwargs.get("metadata", {})},
        )


# ============================================================================
# SCAN Faults
# ============================================================================

class ScanFault(Fault):
    """Base class for scan setup faults. Always raised, never collected."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.SCAN,
            severity=Severity.FATAL,
            retryable=False,
            metadata=metadata,
        )


class PathNotFound(ScanFault):
    """The namespace maps to a directory that does not exist."""

    def __init__(self, namespace: str, path: Any, **kwargs):
        super().__init__(
            code="PATH_NOT_FOUND",
            message=f"Package path does not exist: {namespace} ({path})",
            metadata={"namespace": namespace, "path": str(path), **kwargs.get("metadata", {})},
        )


class NotADirectory(ScanFault):
    """The namespace maps to something that is not a directory."""

    def __init__(self, namespace: str, path: Any, **kwargs):
        super().__init__(
            code="NOT_A_DIRECTORY",
            message=f"Package path is not a directory: {namespace} ({path})",
            metadata={"namespace": namespace, "path": str(path), **kwargs.get("metadata", {})},
        )


class EmptyOrUnreadable(ScanFault):
    """The package directory could not be listed."""

    def __init__(self, namespace: str, path: Any, reason: str = "", **kwargs):
        super().__init__(
            code="EMPTY_OR_UNREADABLE",
            message=f"Package path could not be listed: {namespace} ({path})"
            + (f": {reason}" if reason else ""),
            metadata={
                "namespace": namespace,
                "path": str(path),
                "reason": reason,
                **kwargs.get("metadata", {}),
            },
        )


# ============================================================================
# RESOLVE Faults
# ============================================================================

class TypeResolutionFailed(Fault):
    """A source entry did not resolve to a loadable module."""

    def __init__(self, name: str, reason: str, **kwargs):
        super().__init__(
            code="TYPE_RESOLUTION_FAILED",
            message=f"Could not resolve '{name}': {reason}",
            domain=FaultDomain.RESOLVE,
            metadata={"name": name, "reason": reason, **kwargs.get("metadata", {})},
        )


# ============================================================================
# CONSTRUCT Faults
# ============================================================================

class ConstructFault(Fault):
    """Base class for construction faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.CONSTRUCT,
            metadata=metadata,
        )


class NoMatchingConstructor(ConstructFault):
    """No constructor overload takes exactly the given argument types."""

    def __init__(self, cls: type, arg_types: tuple, **kwargs):
        names = ", ".join(t.__name__ for t in arg_types)
        super().__init__(
            code="NO_MATCHING_CONSTRUCTOR",
            message=f"{_qualname(cls)} has no constructor taking ({names})",
            metadata={
                "type": _qualname(cls),
                "arg_types": [t.__name__ for t in arg_types],
                **kwargs.get("metadata", {}),
            },
        )


class ConstructionDenied(ConstructFault):
    """The constructor may not be called by this accessor."""

    def __init__(self, cls: type, reason: str, **kwargs):
        super().__init__(
            code="CONSTRUCTION_DENIED",
            message=f"Cannot construct {_qualname(cls)}: {reason}",
            metadata={"type": _qualname(cls), "reason": reason, **kwargs.get("metadata", {})},
        )


class ConstructionFailed(ConstructFault):
    """The constructor itself raised."""

    def __init__(self, cls: type, reason: str, **kwargs):
        super().__init__(
            code="CONSTRUCTION_FAILED",
            message=f"Constructor of {_qualname(cls)} raised: {reason}",
            metadata={"type": _qualname(cls), "reason": reason, **kwargs.get("metadata", {})},
        )


# ============================================================================
# INVOKE Faults
# ============================================================================

class InvocationDenied(Fault):
    """The method may not be called by this accessor."""

    def __init__(self, method: str, reason: str, **kwargs):
        super().__init__(
            code="INVOCATION_DENIED",
            message=f"Cannot invoke {method}: {reason}",
            domain=FaultDomain.INVOKE,
            metadata={"method": method, "reason": reason, **kwargs.get("metadata", {})},
        )


class InvocationFailed(Fault):
    """The arguments did not bind, or the method raised."""

    def __init__(self, method: str, reason: str, **kwargs):
        super().__init__(
            code="INVOCATION_FAILED",
            message=f"Invocation of {method} failed: {reason}",
            domain=FaultDomain.INVOKE,
            metadata={"method": method, "reason": reason, **kwargs.get("metadata", {})},
        )


# ============================================================================
# ACCESS Faults
# ============================================================================

class AccessDenied(Fault):
    """A restricted member was used without access or a live grant."""

    def __init__(self, member: str, accessor: Any = None, **kwargs):
        super().__init__(
            code="ACCESS_DENIED",
            message=f"Member {member} is not accessible to {accessor!r}",
            domain=FaultDomain.ACCESS,
            metadata={"member": member, "accessor": repr(accessor), **kwargs.get("metadata", {})},
        )


class MemberNotFound(Fault):
    """The named member is not declared by the class."""

    def __init__(self, cls: type, name: str, kind: str = "member", **kwargs):
        super().__init__(
            code="MEMBER_NOT_FOUND",
            message=f"{_qualname(cls)} declares no {kind} named '{name}'",
            domain=FaultDomain.ACCESS,
            metadata={"type": _qualname(cls), "name": name, "kind": kind, **kwargs.get("metadata", {})},
        )


# ============================================================================
# REGISTRY Faults
# ============================================================================

class DuplicateRegistration(Fault):
    """A key is already bound to a factory."""

    def __init__(self, key: str, **kwargs):
        super().__init__(
            code="DUPLICATE_REGISTRATION",
            message=f"Key '{key}' is already registered",
            domain=FaultDomain.REGISTRY,
            metadata={"key": key, **kwargs.get("metadata", {})},
        )


class UnknownKey(Fault):
    """No factory is registered under the key."""

    def __init__(self, key: str, known: Optional[list[str]] = None, **kwargs):
        known = known or []
        message = f"No factory registered under '{key}'"
        if known:
            message += f" (known: {', '.join(sorted(known))})"
        super().__init__(
            code="UNKNOWN_KEY",
            message=message,
            domain=FaultDomain.REGISTRY,
            metadata={"key": key, "known": known, **kwargs.get("metadata", {})},
        )
