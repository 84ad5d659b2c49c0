"""
Scoped accessibility for restricted members.

Visibility follows the naming convention: protected members are open to the
declaring class and its subclasses, private members to the declaring class
only. Anything else needs an ``AccessGrant``.

A grant is a capability token bound to one member and alive for exactly one
``with_accessible_member`` call. Member descriptors are never mutated, so
concurrent guarded calls on the same member do not interfere.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, TypeVar

from .faults import AccessDenied, MemberNotFound, log_fault
from .modifiers import Modifier

logger = logging.getLogger("reflectkit.access")

R = TypeVar("R")


class AccessGrant:
    """
    Per-call permission to use one member.

    Issued and revoked by ``with_accessible_member``; using a revoked grant
    raises ``AccessDenied``.
    """

    __slots__ = ("_member", "_accessor", "_forced", "_live")

    def __init__(self, member: Any, accessor: Any = None, forced: bool = False):
        self._member = member
        self._accessor = accessor
        self._forced = forced
        self._live = True

    @property
    def member(self) -> Any:
        return self._member

    @property
    def accessor(self) -> Any:
        return self._accessor

    @property
    def forced(self) -> bool:
        """True when the accessor could not reach the member on its own."""
        return self._forced

    @property
    def live(self) -> bool:
        return self._live

    def covers(self, member: Any) -> bool:
        return self._live and member == self._member

    def revoke(self) -> None:
        self._live = False

    def __repr__(self) -> str:
        state = "live" if self._live else "revoked"
        return f"AccessGrant({self._member}, {state})"


def _accessor_class(accessor: Any) -> Optional[type]:
    if accessor is None:
        return None
    return accessor if isinstance(accessor, type) else type(accessor)


def can_access(member: Any, accessor: Any = None) -> bool:
    """
    Whether ``accessor`` (an object or a class) may use ``member`` unaided.

    ``accessor=None`` stands for code outside any class and sees only
    public members.
    """
    modifiers = member.modifiers
    if Modifier.PUBLIC in modifiers:
        return True
    accessor_cls = _accessor_class(accessor)
    if accessor_cls is None:
        return False
    if accessor_cls is member.declaring:
        return True
    if Modifier.PROTECTED in modifiers:
        return issubclass(accessor_cls, member.declaring)
    return False


def check_access(member: Any, accessor: Any = None, grant: Optional[AccessGrant] = None) -> None:
    """
    Raises:
        AccessDenied: When neither ``accessor`` nor ``grant`` opens ``member``
    """
    if can_access(member, accessor):
        return
    if grant is not None and grant.covers(member):
        return
    reason = "grant revoked" if grant is not None and not grant.live else "restricted member"
    raise AccessDenied(str(member), accessor, metadata={"reason": reason})


def with_accessible_member(
    member: Any,
    accessor: Any,
    operation: Callable[[Any, AccessGrant], R],
) -> R:
    """
    Run ``operation(member, grant)`` once with ``member`` opened for it.

    The grant is revoked when the operation returns or raises, restoring
    the member to whatever ``can_access(member, accessor)`` says.
    Exceptions from ``operation`` propagate.
    """
    forced = not can_access(member, accessor)
    grant = AccessGrant(member, accessor, forced=forced)
    if forced:
        logger.debug("Opening %s for %r", member, accessor)
    try:
        return operation(member, grant)
    finally:
        grant.revoke()


def consume_accessible_field(
    field_name: str,
    cls: type,
    accessor: Any,
    consumer: Callable[[Any, AccessGrant], R],
) -> Optional[R]:
    """
    Look up a declared field and run ``consumer`` with it opened.

    A missing field is reported and yields None.
    """
    from .members import get_field

    try:
        field = get_field(cls, field_name)
    except MemberNotFound as fault:
        log_fault(logger, fault)
        return None

    return with_accessible_member(field, accessor, consumer)
