"""
reflectkit - Runtime introspection toolkit.

Discover the subclasses of a base type in a package directory, construct
them from argument vectors matched by runtime type, and reach members that
the naming convention marks as protected or private, one guarded call at a
time.

Modules:
- modifiers: Modifier flags and predicates
- members: Field, method and constructor descriptors
- access: Per-call access grants
- scanner: Package directory scanning
- instantiate: Constructor selection by argument types
- invoke: Method invocation for effect
- pipeline: Scan, construct, consume
- registry: Explicit key-to-factory registry
"""

__version__ = "0.3.0"

from .access import AccessGrant, can_access, consume_accessible_field, with_accessible_member
from .config import ConfigLoader, ScanConfig, get_default_config, set_default_config
from .instantiate import construct, find_constructor, try_construct
from .invoke import invoke
from .members import (
    Member,
    MemberKind,
    get_constructors,
    get_field,
    get_fields,
    get_method,
    get_methods,
)
from .modifiers import (
    Modifier,
    has_any_modifier,
    has_modifier,
    has_prefix,
    is_final,
    is_private,
    is_protected,
    is_public,
    is_static,
    is_static_final,
    modifier_string,
)
from .pipeline import collect_instances, create_instances, for_each_instance
from .registry import TypeRegistry
from .results import Outcome, PipelineReport, ScanReport
from .scanner import PackageScanner, get_classes, scan_package

__all__ = [
    "__version__",
    # Modifiers
    "Modifier",
    "has_any_modifier",
    "has_modifier",
    "has_prefix",
    "is_final",
    "is_private",
    "is_protected",
    "is_public",
    "is_static",
    "is_static_final",
    "modifier_string",
    # Members
    "Member",
    "MemberKind",
    "get_constructors",
    "get_field",
    "get_fields",
    "get_method",
    "get_methods",
    # Access
    "AccessGrant",
    "can_access",
    "consume_accessible_field",
    "with_accessible_member",
    # Scanning
    "PackageScanner",
    "get_classes",
    "scan_package",
    # Construction and invocation
    "construct",
    "find_constructor",
    "try_construct",
    "invoke",
    # Pipeline
    "collect_instances",
    "create_instances",
    "for_each_instance",
    # Registry
    "TypeRegistry",
    # Results and config
    "Outcome",
    "PipelineReport",
    "ScanReport",
    "ConfigLoader",
    "ScanConfig",
    "get_default_config",
    "set_default_config",
]
