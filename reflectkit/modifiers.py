"""
Member modifier predicates.

Python has no declared modifiers, so members carry a ``Modifier`` flag set
derived from naming and decorator conventions (see ``reflectkit.members``).
The predicates below are pure functions over anything exposing ``name`` and
``modifiers``.
"""

from __future__ import annotations

import enum
from typing import Iterable, Protocol, Union


class Modifier(enum.IntFlag):
    """Modifier flags. Values are stable and combine as plain integer codes."""
    PUBLIC = 0x0001
    PRIVATE = 0x0002
    PROTECTED = 0x0004
    STATIC = 0x0008
    FINAL = 0x0010
    ABSTRACT = 0x0400

    NONE = 0


# Rendering order used by ``modifier_string``
CANONICAL_ORDER = (
    Modifier.PUBLIC,
    Modifier.PROTECTED,
    Modifier.PRIVATE,
    Modifier.ABSTRACT,
    Modifier.STATIC,
    Modifier.FINAL,
)

_BY_NAME = {flag.name.lower(): flag for flag in CANONICAL_ORDER}


class HasModifiers(Protocol):
    name: str
    modifiers: Modifier


ModifierSpec = Union[Modifier, int, str]


def parse_modifier(spec: ModifierSpec) -> Modifier:
    """
    Turn a flag, an integer code, or modifier names into a flag set.

    ``"static final"`` and ``Modifier.STATIC | Modifier.FINAL`` are the same
    spec. Unknown names or bits raise ``ValueError``.
    """
    if isinstance(spec, Modifier):
        return spec
    if isinstance(spec, int):
        unknown = spec & ~sum(CANONICAL_ORDER)
        if unknown:
            raise ValueError(f"Unknown modifier bits: {unknown:#x}")
        return Modifier(spec)
    if isinstance(spec, str):
        flags = Modifier.NONE
        for word in spec.split():
            try:
                flags |= _BY_NAME[word.lower()]
            except KeyError:
                raise ValueError(f"Unknown modifier name: {word!r}") from None
        return flags
    raise TypeError(f"Expected Modifier, int or str, got {type(spec).__name__}")


def modifier_names(flags: Modifier) -> list[str]:
    return [flag.name.lower() for flag in CANONICAL_ORDER if flag in flags]


def modifier_string(member: HasModifiers) -> str:
    """Canonical text of a member's modifiers, e.g. ``"public static final"``."""
    return " ".join(modifier_names(member.modifiers))


def has_modifier(member: HasModifiers, modifier: ModifierSpec) -> bool:
    """
    Whether every flag in ``modifier`` is set on the member.

    Flags are compared as a set, so a member that is only ``protected``
    is never reported as ``private``.
    """
    wanted = parse_modifier(modifier)
    return (member.modifiers & wanted) == wanted


def has_any_modifier(member: HasModifiers, modifiers: Iterable[ModifierSpec]) -> bool:
    return any(has_modifier(member, m) for m in modifiers)


def is_public(member: HasModifiers) -> bool:
    return has_modifier(member, Modifier.PUBLIC)


def is_protected(member: HasModifiers) -> bool:
    return has_modifier(member, Modifier.PROTECTED)


def is_private(member: HasModifiers) -> bool:
    return has_modifier(member, Modifier.PRIVATE)


def is_static(member: HasModifiers) -> bool:
    return has_modifier(member, Modifier.STATIC)


def is_final(member: HasModifiers) -> bool:
    return has_modifier(member, Modifier.FINAL)


def is_abstract(member: HasModifiers) -> bool:
    return has_modifier(member, Modifier.ABSTRACT)


def is_static_final(member: HasModifiers) -> bool:
    """Conjunction of ``is_static`` and ``is_final``."""
    return is_static(member) and is_final(member)


def has_prefix(prefix: str, member: HasModifiers) -> bool:
    return member.name.startswith(prefix)


def visibility_of(name: str) -> Modifier:
    """
    Visibility implied by a Python name.

    ``__name`` (mangled) is private, ``_name`` is protected, anything else,
    dunders included, is public.
    """
    if name.startswith("__") and not name.endswith("__"):
        return Modifier.PRIVATE
    if name.startswith("_") and not (name.startswith("__") and name.endswith("__")):
        return Modifier.PROTECTED
    return Modifier.PUBLIC
