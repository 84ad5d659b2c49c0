"""
Member descriptors - fields, methods and constructors declared by a class.

A ``Member`` is an immutable view over one declared member. Modifiers are
derived from Python conventions:

- visibility from the name (``__x`` private, ``_x`` protected, else public)
- STATIC for staticmethods, classmethods and class-level attributes
- FINAL for ``typing.Final`` fields and ``@typing.final`` methods
- ABSTRACT for abstract methods and constructors of abstract classes

Constructors are the declared ``__init__`` or, when it carries
``typing.overload`` variants, one descriptor per variant.
"""

from __future__ import annotations

import enum
import inspect
import logging
import sys
import types
import typing
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence

from .access import check_access
from .faults import AccessDenied, MemberNotFound
from .modifiers import Modifier, is_final, is_static, visibility_of

logger = logging.getLogger("reflectkit.members")


class MemberKind(str, enum.Enum):
    FIELD = "field"
    METHOD = "method"
    CONSTRUCTOR = "constructor"


@dataclass(frozen=True)
class Member:
    """
    Handle to a field, method or constructor of ``declaring``.

    Attributes:
        name: Declared name (``__secret``, not ``_Vault__secret``)
        attribute: Attribute name as stored on the class
        declaring: Class that declares the member
        kind: FIELD, METHOD or CONSTRUCTOR
        modifiers: Modifier flags
        parameter_types: Declared positional parameter types (methods, constructors)
        required: Number of leading parameters without a default
        varargs: Declared type of ``*args``, None when there is none
        keyword_required: A keyword-only parameter has no default
        field_type: Declared field type, None when unannotated
        target: Underlying function, property or descriptor
    """
    name: str
    attribute: str
    declaring: type
    kind: MemberKind
    modifiers: Modifier
    parameter_types: tuple = ()
    required: int = 0
    varargs: Any = None
    keyword_required: bool = False
    field_type: Any = None
    target: Any = field(default=None, compare=False, hash=False, repr=False)

    @property
    def qualname(self) -> str:
        return f"{self.declaring.__module__}.{self.declaring.__qualname__}.{self.name}"

    def __str__(self) -> str:
        return self.qualname

    # ------------------------------------------------------------------
    # Signature matching
    # ------------------------------------------------------------------

    def accepts(self, arg_types: Sequence[type]) -> bool:
        """
        Whether positional arguments of exactly these runtime types bind.

        Each runtime type must *be* the declared type at its position.
        Trailing parameters with defaults may be left out.
        """
        if self.keyword_required:
            return False
        fixed = len(self.parameter_types)
        if len(arg_types) < self.required:
            return False
        if len(arg_types) > fixed and self.varargs is None:
            return False
        for position, actual in enumerate(arg_types):
            declared = self.parameter_types[position] if position < fixed else self.varargs
            if not type_matches(declared, actual):
                return False
        return True

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def get(self, instance: Any = None, *, accessor: Any = None, grant: Any = None) -> Any:
        """Read the field from ``instance`` (or the class for static fields)."""
        self._expect(MemberKind.FIELD)
        check_access(self, accessor, grant)
        return getattr(self._owner(instance), self.attribute)

    def set(self, instance: Any, value: Any, *, accessor: Any = None, grant: Any = None) -> None:
        """
        Write the field.

        Final fields need a live grant; static final fields cannot be written.
        """
        self._expect(MemberKind.FIELD)
        check_access(self, accessor, grant)
        if is_final(self):
            if is_static(self):
                raise AccessDenied(self.qualname, accessor, metadata={"reason": "static final field"})
            if grant is None or not grant.covers(self):
                raise AccessDenied(self.qualname, accessor, metadata={"reason": "final field"})
        setattr(self._owner(instance), self.attribute, value)

    def call(self, instance: Any, *args: Any, accessor: Any = None, grant: Any = None) -> Any:
        """Call the method on ``instance`` (ignored for static methods)."""
        self._expect(MemberKind.METHOD)
        check_access(self, accessor, grant)
        return getattr(self._owner(instance), self.attribute)(*args)

    def bound(self, instance: Any) -> Callable[..., Any]:
        """The callable that ``call`` would invoke, without access checks."""
        return getattr(self._owner(instance), self.attribute)

    def _owner(self, instance: Any) -> Any:
        if instance is None or is_static(self):
            return self.declaring
        return instance

    def _expect(self, kind: MemberKind) -> None:
        if self.kind is not kind:
            raise TypeError(f"{self.qualname} is a {self.kind.value}, not a {kind.value}")


# ============================================================================
# Type matching
# ============================================================================

_UNION_TYPES = (typing.Union, types.UnionType)


def type_matches(declared: Any, actual: type) -> bool:
    """
    Exact runtime-type match.

    ``Any`` matches everything, ``None`` means ``NoneType``, a parameterized
    generic matches its origin, a union matches any of its members exactly.
    """
    if declared is Any:
        return True
    if declared is None:
        declared = type(None)
    origin = typing.get_origin(declared)
    if origin in _UNION_TYPES:
        return any(type_matches(arg, actual) for arg in typing.get_args(declared))
    if origin is typing.Annotated:
        return type_matches(typing.get_args(declared)[0], actual)
    if origin is not None:
        declared = origin
    return declared is actual


# ============================================================================
# Annotation helpers
# ============================================================================

def _demangle(cls: type, attribute: str) -> str:
    prefix = f"_{cls.__name__.lstrip('_')}__"
    if attribute.startswith(prefix) and not attribute.endswith("__"):
        return "__" + attribute[len(prefix):]
    return attribute


def _annotations(obj: Any) -> dict[str, Any]:
    """
    Declared annotations, resolved when possible.

    When one string annotation cannot be evaluated the others are still
    resolved one by one; only the failing entries stay strings.
    """
    try:
        return inspect.get_annotations(obj, eval_str=True)
    except Exception as e:
        logger.debug("Resolving annotations of %r one by one: %s", obj, e)

    try:
        raw = inspect.get_annotations(obj)
    except Exception:
        return {}

    globals_, locals_ = _annotation_namespaces(obj)
    resolved: dict[str, Any] = {}
    for name, annotation in raw.items():
        if isinstance(annotation, str):
            try:
                annotation = eval(annotation, globals_, locals_)
            except Exception:
                logger.debug("Unresolved annotation %r on %r", annotation, obj)
        resolved[name] = annotation
    return resolved


def _annotation_namespaces(obj: Any) -> tuple[dict[str, Any], dict[str, Any]]:
    """Globals and locals that ``inspect.get_annotations`` would evaluate in."""
    if isinstance(obj, type):
        module = sys.modules.get(obj.__module__)
        return dict(getattr(module, "__dict__", {})), dict(vars(obj))
    unwrapped = inspect.unwrap(obj)
    return dict(getattr(unwrapped, "__globals__", {})), {}


def _qualifiers(annotation: Any) -> tuple[set[str], Any]:
    """Peel ClassVar/Final wrappers off an annotation."""
    found: set[str] = set()
    while True:
        if isinstance(annotation, str):
            text = annotation.replace("typing.", "")
            for qualifier in ("ClassVar", "Final"):
                if text == qualifier:
                    found.add(qualifier)
                    return found, None
                if text.startswith(qualifier + "["):
                    found.add(qualifier)
                    annotation = text[len(qualifier) + 1:-1]
                    break
            else:
                return found, annotation
            continue
        if annotation is typing.Final:
            found.add("Final")
            return found, None
        if annotation is typing.ClassVar:
            found.add("ClassVar")
            return found, None
        origin = typing.get_origin(annotation)
        if origin is typing.ClassVar:
            found.add("ClassVar")
        elif origin is typing.Final:
            found.add("Final")
        else:
            return found, annotation
        annotation = typing.get_args(annotation)[0]


# ============================================================================
# Signature extraction
# ============================================================================

@dataclass
class _Signature:
    parameter_types: tuple = ()
    required: int = 0
    varargs: Any = None
    keyword_required: bool = False


def _signature(func: Any, skip_first: bool) -> _Signature:
    """
    Extract positional parameter types from a function.

    Unannotated parameters declare ``Any``. Functions without an
    inspectable signature accept ``*args: Any``.
    """
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return _Signature(varargs=Any)

    hints = _annotations(func)

    params = list(sig.parameters.values())
    if skip_first and params and params[0].kind in (
        inspect.Parameter.POSITIONAL_ONLY,
        inspect.Parameter.POSITIONAL_OR_KEYWORD,
    ):
        params = params[1:]

    result = _Signature()
    types_: list[Any] = []
    for param in params:
        annotation = hints.get(param.name, param.annotation)
        if annotation is inspect.Parameter.empty or isinstance(annotation, str):
            annotation = Any
        if param.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            types_.append(annotation)
            if param.default is inspect.Parameter.empty:
                result.required = len(types_)
        elif param.kind is inspect.Parameter.VAR_POSITIONAL:
            result.varargs = annotation
        elif param.kind is inspect.Parameter.KEYWORD_ONLY and param.default is inspect.Parameter.empty:
            result.keyword_required = True
    result.parameter_types = tuple(types_)
    return result


def _unwrap_method(value: Any) -> tuple[Any, bool, bool]:
    """Return (function, is_static, is_classmethod) for a class-dict entry."""
    if isinstance(value, staticmethod):
        return value.__func__, True, False
    if isinstance(value, classmethod):
        return value.__func__, True, True
    return value, False, False


def _is_method_entry(value: Any) -> bool:
    return isinstance(value, (staticmethod, classmethod)) or inspect.isfunction(value)


_IGNORED_ATTRIBUTES = frozenset({
    "__dict__", "__weakref__", "__module__", "__qualname__", "__doc__",
    "__annotations__", "__slots__", "__dataclass_fields__", "__dataclass_params__",
    "__match_args__", "__abstractmethods__", "_abc_impl", "__orig_bases__",
    "__parameters__", "__final__", "__static_attributes__", "__firstlineno__",
    "__annotate__", "__annotations_cache__",
})

_CONSTRUCTOR_NAMES = frozenset({"__init__", "__new__"})


# ============================================================================
# Enumeration
# ============================================================================

def get_fields(cls: type, predicate: Optional[Callable[[Member], bool]] = None) -> list[Member]:
    """
    Fields declared by ``cls``: annotated names, class attributes and properties.

    Inherited fields are not included.
    """
    annotations = _annotations(cls)
    namespace = vars(cls)
    found: list[Member] = []
    seen: set[str] = set()

    def add(attribute: str, modifiers: Modifier, field_type: Any, target: Any = None) -> None:
        name = _demangle(cls, attribute)
        member = Member(
            name=name,
            attribute=attribute,
            declaring=cls,
            kind=MemberKind.FIELD,
            modifiers=modifiers | visibility_of(name),
            field_type=field_type,
            target=target,
        )
        seen.add(attribute)
        if predicate is None or predicate(member):
            found.append(member)

    for attribute, annotation in annotations.items():
        qualifiers, field_type = _qualifiers(annotation)
        modifiers = Modifier.NONE
        if "ClassVar" in qualifiers:
            modifiers |= Modifier.STATIC
        if "Final" in qualifiers:
            modifiers |= Modifier.FINAL
            # A Final with a class-level value is a class constant
            if attribute in namespace and not _is_dataclass_field(cls, attribute):
                modifiers |= Modifier.STATIC
        add(attribute, modifiers, field_type if not isinstance(field_type, str) else None)

    for attribute, value in namespace.items():
        if attribute in seen or attribute in _IGNORED_ATTRIBUTES:
            continue
        if attribute.startswith("__") and attribute.endswith("__"):
            continue
        if _is_method_entry(value) or isinstance(value, type):
            continue
        if isinstance(value, property):
            add(attribute, Modifier.NONE, None, target=value)
        else:
            add(attribute, Modifier.STATIC, None)

    return found


def _is_dataclass_field(cls: type, attribute: str) -> bool:
    return attribute in getattr(cls, "__dataclass_fields__", {})


def get_methods(cls: type, predicate: Optional[Callable[[Member], bool]] = None) -> list[Member]:
    """Methods declared by ``cls`` (constructors excluded)."""
    found: list[Member] = []
    for attribute, value in vars(cls).items():
        if attribute in _CONSTRUCTOR_NAMES or not _is_method_entry(value):
            continue
        func, static, is_classmethod = _unwrap_method(value)
        name = _demangle(cls, attribute)

        modifiers = visibility_of(name)
        if static:
            modifiers |= Modifier.STATIC
        if getattr(func, "__final__", False):
            modifiers |= Modifier.FINAL
        if getattr(func, "__isabstractmethod__", False):
            modifiers |= Modifier.ABSTRACT

        sig = _signature(func, skip_first=not static or is_classmethod)
        member = Member(
            name=name,
            attribute=attribute,
            declaring=cls,
            kind=MemberKind.METHOD,
            modifiers=modifiers,
            parameter_types=sig.parameter_types,
            required=sig.required,
            varargs=sig.varargs,
            keyword_required=sig.keyword_required,
            target=func,
        )
        if predicate is None or predicate(member):
            found.append(member)
    return found


def get_constructors(cls: type, predicate: Optional[Callable[[Member], bool]] = None) -> list[Member]:
    """
    Constructor overloads of ``cls``.

    A class that declares no ``__init__`` reuses the nearest inherited one;
    when that is ``object.__init__`` there is a single zero-argument
    constructor.
    """
    modifiers = visibility_of(cls.__name__)
    if inspect.isabstract(cls):
        modifiers |= Modifier.ABSTRACT
    if getattr(cls, "__final__", False):
        modifiers |= Modifier.FINAL

    init = None
    for klass in cls.__mro__:
        if "__init__" in vars(klass):
            init = vars(klass)["__init__"]
            break

    if init is None or init is object.__init__:
        variants = [None]
    elif inspect.isfunction(init):
        variants = list(typing.get_overloads(init)) or [init]
    else:
        # Builtin slot wrappers (Exception, dict, ...) carry no overload registry
        variants = [init]

    found: list[Member] = []
    for variant in variants:
        sig = _Signature() if variant is None else _signature(variant, skip_first=True)
        member = Member(
            name="__init__",
            attribute="__init__",
            declaring=cls,
            kind=MemberKind.CONSTRUCTOR,
            modifiers=modifiers,
            parameter_types=sig.parameter_types,
            required=sig.required,
            varargs=sig.varargs,
            keyword_required=sig.keyword_required,
            target=variant or object.__init__,
        )
        if predicate is None or predicate(member):
            found.append(member)
    return found


def get_field(cls: type, name: str) -> Member:
    """
    Declared field by name (``__secret`` or its mangled form).

    Raises:
        MemberNotFound: When ``cls`` declares no such field
    """
    for member in get_fields(cls):
        if name in (member.name, member.attribute):
            return member
    raise MemberNotFound(cls, name, kind="field")


def get_method(cls: type, name: str) -> Member:
    """
    Declared method by name (``__hidden`` or its mangled form).

    Raises:
        MemberNotFound: When ``cls`` declares no such method
    """
    for member in get_methods(cls):
        if name in (member.name, member.attribute):
            return member
    raise MemberNotFound(cls, name, kind="method")
