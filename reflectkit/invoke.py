"""
Method invocation for effect.

``invoke`` calls a resolved method descriptor and reports, rather than
raises, access and invocation failures. The method's return value is not
passed back.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Iterable, Optional

from .access import AccessGrant, can_access
from .faults import InvocationDenied, InvocationFailed, log_fault
from .members import Member
from .results import Outcome

logger = logging.getLogger("reflectkit.invoke")


def try_bind(method: Member, target: Any, args: tuple) -> Optional[str]:
    """Why ``args`` cannot bind to the method's signature, or None."""
    try:
        sig = inspect.signature(method.bound(target))
    except (TypeError, ValueError):
        return None
    try:
        sig.bind(*args)
    except TypeError as e:
        return str(e)
    return None


def invoke(
    method: Member,
    target: Any,
    args: Iterable[Any] = (),
    *,
    accessor: Any = None,
    grant: Optional[AccessGrant] = None,
) -> Outcome:
    """
    Invoke ``method`` on ``target`` with positional ``args``.

    Static methods and classmethods ignore ``target``.

    Returns:
        Outcome with no value, carrying InvocationDenied or
        InvocationFailed when the call did not complete
    """
    args = tuple(args)

    if not can_access(method, accessor) and not (grant is not None and grant.covers(method)):
        reason = "grant revoked" if grant is not None and not grant.live else "restricted method"
        return _fail(method, InvocationDenied(method.qualname, reason))

    problem = try_bind(method, target, args)
    if problem is not None:
        return _fail(method, InvocationFailed(method.qualname, f"arguments do not bind: {problem}"))

    try:
        method.bound(target)(*args)
    except Exception as e:
        fault = InvocationFailed(method.qualname, f"{type(e).__name__}: {e}")
        fault.__cause__ = e
        return _fail(method, fault)

    return Outcome.success(method)


def _fail(method: Member, fault) -> Outcome:
    log_fault(logger, fault)
    return Outcome.failure(method, fault)
