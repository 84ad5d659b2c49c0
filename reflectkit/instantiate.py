"""
Dynamic instantiation by runtime argument types.

The runtime type of every argument selects the constructor overload: an
overload matches only when each argument's type *is* the declared parameter
type at that position. There is no subclass, protocol or numeric widening,
so ``True`` does not match an ``int`` parameter.

Failures never propagate out of this layer. They are logged and returned in
an ``Outcome``; ``construct`` maps a failed outcome to None.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, TypeVar

from .access import AccessGrant, can_access
from .faults import (
    ConstructionDenied,
    ConstructionFailed,
    NoMatchingConstructor,
    log_fault,
)
from .members import Member, get_constructors
from .modifiers import is_abstract
from .results import Outcome

logger = logging.getLogger("reflectkit.instantiate")

T = TypeVar("T")


def argument_types(args: Iterable[Any]) -> tuple[type, ...]:
    """Runtime types of an argument vector, in order."""
    return tuple(type(arg) for arg in args)


def find_constructor(cls: type, arg_types: tuple[type, ...]) -> Optional[Member]:
    """First constructor overload of ``cls`` accepting exactly ``arg_types``."""
    for constructor in get_constructors(cls):
        if constructor.accepts(arg_types):
            return constructor
    return None


def try_construct(
    cls: type[T],
    args: Iterable[Any] = (),
    *,
    accessor: Any = None,
    grant: Optional[AccessGrant] = None,
) -> Outcome:
    """
    Construct ``cls`` from positional ``args``.

    Args:
        cls: Class to instantiate
        args: Argument vector (any iterable)
        accessor: Object or class performing the construction
        grant: Grant for a restricted constructor

    Returns:
        Outcome holding the instance, or a NoMatchingConstructor,
        ConstructionDenied or ConstructionFailed fault
    """
    args = tuple(args)
    arg_types = argument_types(args)

    try:
        constructor = find_constructor(cls, arg_types)
    except Exception as e:
        fault = ConstructionFailed(cls, f"constructor lookup failed: {type(e).__name__}: {e}")
        fault.__cause__ = e
        return _fail(cls, fault)

    if constructor is None:
        return _fail(cls, NoMatchingConstructor(cls, arg_types))

    if is_abstract(constructor):
        return _fail(cls, ConstructionDenied(cls, "class is abstract"))

    if not can_access(constructor, accessor) and not (grant is not None and grant.covers(constructor)):
        return _fail(cls, ConstructionDenied(cls, f"constructor is not accessible to {accessor!r}"))

    try:
        instance = cls(*args)
    except Exception as e:
        fault = ConstructionFailed(cls, f"{type(e).__name__}: {e}")
        fault.__cause__ = e
        return _fail(cls, fault)

    return Outcome.success(cls, instance)


def construct(
    cls: type[T],
    args: Iterable[Any] = (),
    *,
    accessor: Any = None,
    grant: Optional[AccessGrant] = None,
) -> Optional[T]:
    """Construct ``cls`` from ``args``, returning None on any failure."""
    return try_construct(cls, args, accessor=accessor, grant=grant).value


def _fail(cls: type, fault) -> Outcome:
    log_fault(logger, fault)
    return Outcome.failure(cls, fault)
