# File: src/mstair/beanpath/access/member_resolver.py
"""
Resolution of fields, getters and setters on classes.

Fields are the annotated names and ``__slots__`` entries of a class and its
bases; getters are zero-argument methods and property getters; setters are
one-argument methods and property setters. Members are searched in MRO order,
so a subclass member shadows a base class member of the same name.

Resolution modes:

| mode  | field                        | getter/setter                          |
|-------|------------------------------|----------------------------------------|
| KNOWN | exact name, exact type       | exact name, exact type                 |
| NAMED | exact name, assignable type  | exact name, assignable type            |
| TYPED | exact name, exact type       | candidate names, exact type            |
| AUTO  | exact name, assignable type  | candidate names, assignable type       |

Candidate names for ``value`` are ``value``, ``get_value`` and ``getValue``
(``set_value``/``setValue`` for setters); boolean or untyped properties add the
``is``/``has`` forms. Unannotated members have an unknown type, which matches
any requested type.
"""

from __future__ import annotations

import inspect
import typing
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Final

from mstair.beanpath.access.failure import AccessFailure, FailureKind, invoke_target
from mstair.beanpath.access.type_coercer import find_class
from mstair.beanpath.base.string_helpers import dedupe, details, to_capfirst, to_lowerfirst
from mstair.beanpath.base.types import NONE_TYPE, is_union, runtime_class, unwrap_annotation
from mstair.beanpath.xlogging.logger_factory import create_logger


__all__ = [
    "FieldMember",
    "MethodMember",
    "ResolveMode",
    "TypeRelation",
    "find_fields",
    "find_methods",
    "getter_names",
    "instance_field",
    "is_assignable",
    "matches",
    "property_name",
    "resolve_field",
    "resolve_getter",
    "resolve_setter",
    "setter_names",
]

_LOG = create_logger(__name__)

_NUMERIC_PROMOTIONS: Final[dict[type, tuple[type, ...]]] = {
    float: (int,),
    complex: (int, float),
}

# (prefix, camel) pairs, longest first so that "setIs" wins over "set".
_SETTER_PREFIXES: Final[tuple[tuple[str, bool], ...]] = (
    ("set_is_", False),
    ("set_has_", False),
    ("setIs", True),
    ("setHas", True),
    ("set_", False),
    ("set", True),
)
_GETTER_PREFIXES: Final[tuple[tuple[str, bool], ...]] = (
    ("get_", False),
    ("is_", False),
    ("has_", False),
    ("get", True),
    ("is", True),
    ("has", True),
)


class ResolveMode(Enum):
    """Strictness of member name and type matching."""

    KNOWN = "KNOWN"
    NAMED = "NAMED"
    TYPED = "TYPED"
    AUTO = "AUTO"


class TypeRelation(Enum):
    """Required relation between a declared and a requested type."""

    EXACT = "EXACT"
    SUPER = "SUPER"
    CHILD = "CHILD"


@dataclass(frozen=True, slots=True)
class FieldMember:
    """A data attribute declared on `owner`; `type` is None when unannotated."""

    owner: type
    name: str
    type: Any = None

    def __str__(self) -> str:
        return f"{self.owner.__qualname__}.{self.name}"

    def get(self, target: Any) -> Any:
        """Return the attribute value; an unset declared attribute reads as None."""
        if target is None:
            raise AccessFailure(FailureKind.ARGUMENT, "target must not be null")
        return getattr(target, self.name, None)

    def set(self, target: Any, value: Any) -> Any:
        """
        Assign the attribute and return its previous value.

        :raises AccessFailure: ARGUMENT for a None target, ACCESS if the
            attribute is read-only (frozen dataclass, property without setter).
        """
        before = self.get(target)
        try:
            setattr(target, self.name, value)
        except AttributeError as exc:
            raise AccessFailure(
                FailureKind.ACCESS, details(field=self, target=target, value=value), exc
            ) from exc
        return before


@dataclass(frozen=True, slots=True)
class MethodMember:
    """
    A getter or setter callable declared on `owner`.

    `params` holds the annotations of the positional parameters after ``self``
    (None where unannotated); `returns` is None when the return is unannotated.
    """

    owner: type
    name: str
    function: Callable[..., Any]
    params: tuple[Any, ...] = ()
    returns: Any = None

    def __str__(self) -> str:
        return f"{self.owner.__qualname__}.{self.name}()"

    @property
    def type(self) -> Any:
        """Property type: the return type of a getter, the argument type of a setter."""
        return self.params[0] if self.params else self.returns

    @property
    def is_getter(self) -> bool:
        return not self.params

    @property
    def is_setter(self) -> bool:
        return len(self.params) == 1

    def invoke(self, target: Any, *args: Any) -> Any:
        """
        Call the member on `target`.

        :raises AccessFailure: ARGUMENT for a None target, TARGET if the call raises.
        """
        if target is None:
            raise AccessFailure(FailureKind.ARGUMENT, "target must not be null")
        return invoke_target(
            self.function,
            target,
            *args,
            message=details(target=target, method=self, args=list(args)),
        )


# ----------------------------------------------------------------------
# Type relations
# ----------------------------------------------------------------------


def is_assignable(base: Any, ref: Any) -> bool:
    """
    Return True if a value of type `ref` may be stored where `base` is declared.

    Unknown types on either side are assignable. ``int`` is assignable to
    ``float`` and ``complex``, ``float`` to ``complex``. Union arms are checked
    individually.
    """
    base = unwrap_annotation(base)
    ref = unwrap_annotation(ref)
    if _unknown(base) or _unknown(ref) or base == ref:
        return True
    if is_union(base):
        return any(is_assignable(arm, ref) for arm in typing.get_args(base))
    if is_union(ref):
        return all(is_assignable(base, arm) for arm in typing.get_args(ref))
    base_cls, ref_cls = runtime_class(base), runtime_class(ref)
    if base_cls is None or ref_cls is None:
        return True
    if ref_cls in _NUMERIC_PROMOTIONS.get(base_cls, ()):
        return True
    try:
        return issubclass(ref_cls, base_cls)
    except TypeError:
        return False


def matches(relation: TypeRelation, declared: Any, requested: Any) -> bool:
    """
    Check a declared member type against a requested type.

    :raises AccessFailure: SUPPORT for an unknown relation value.
    """
    match relation:
        case TypeRelation.EXACT:
            return _exact(declared, requested)
        case TypeRelation.SUPER:
            return is_assignable(declared, requested)
        case TypeRelation.CHILD:
            return is_assignable(requested, declared)
        case _:
            raise AccessFailure.unsupported_mode(relation)


def _unknown(annotation: Any) -> bool:
    return annotation is None or annotation is Any or annotation is object or isinstance(annotation, typing.TypeVar)


def _exact(declared: Any, requested: Any) -> bool:
    declared = unwrap_annotation(declared)
    requested = unwrap_annotation(requested)
    if declared is None or requested is None or declared == requested:
        return True
    declared_cls = runtime_class(declared)
    return declared_cls is not None and declared_cls is runtime_class(requested)


# ----------------------------------------------------------------------
# Member discovery
# ----------------------------------------------------------------------


def _hints(obj: Any) -> dict[str, Any]:
    """Return evaluated annotations, falling back to raw ones with names looked up by find_class()."""
    try:
        return typing.get_type_hints(obj)
    except (NameError, TypeError, AttributeError) as exc:
        _LOG.debug("raw annotations used for %s: %s", obj, exc)
    try:
        raw = inspect.get_annotations(obj)
    except NameError:
        return {}
    return {name: _raw_type(value) for name, value in raw.items()}


def _raw_type(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    try:
        return find_class(value)
    except AccessFailure:
        return None


def _is_class_var(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return annotation.startswith(("ClassVar", "typing.ClassVar"))
    return annotation is ClassVar or typing.get_origin(annotation) is ClassVar


def _declared_fields(cls: type) -> Iterator[FieldMember]:
    """Yield the fields declared directly on `cls`."""
    try:
        own = inspect.get_annotations(cls)
    except NameError:
        own = {}
    hints = _hints(cls) if own else {}
    seen: set[str] = set()
    for name, raw in own.items():
        if _is_class_var(raw) or _is_class_var(hints.get(name)):
            continue
        seen.add(name)
        yield FieldMember(cls, name, hints.get(name))
    slots = cls.__dict__.get("__slots__", ())
    for name in (slots,) if isinstance(slots, str) else slots:
        if name not in seen and name not in ("__dict__", "__weakref__"):
            seen.add(name)
            yield FieldMember(cls, name, None)


def _declared_methods(cls: type) -> Iterator[MethodMember]:
    """Yield getters and setters declared directly on `cls`."""
    for name, value in cls.__dict__.items():
        if name.startswith("__") and name.endswith("__"):
            continue
        if isinstance(value, property):
            if value.fget is not None:
                yield MethodMember(cls, name, value.fget, (), _hints(value.fget).get("return"))
            setter = _method_member(cls, name, value.fset) if value.fset is not None else None
            if setter is not None:
                yield setter
        elif inspect.isfunction(value):
            member = _method_member(cls, name, value)
            if member is not None and len(member.params) <= 1:
                yield member


def _method_member(cls: type, name: str, function: Callable[..., Any]) -> MethodMember | None:
    """Describe a plain function as a member; None if it takes keyword-only or variadic arguments."""
    try:
        signature = inspect.signature(function)
    except (TypeError, ValueError):
        return None
    parameters = list(signature.parameters.values())[1:]
    positional = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    if any(p.kind not in positional for p in parameters):
        return None
    hints = _hints(function)
    required = [p for p in parameters if p.default is inspect.Parameter.empty]
    return MethodMember(
        cls,
        name,
        function,
        tuple(hints.get(p.name) for p in required),
        hints.get("return"),
    )


def _owner_class(owner: Any) -> type:
    if owner is None:
        raise AccessFailure(FailureKind.ARGUMENT, "owner must not be null")
    cls = runtime_class(owner)
    if cls is None:
        raise AccessFailure(FailureKind.ARGUMENT, f"owner must be a class {details(owner=owner)}")
    return cls


def find_fields(
    owner: Any,
    names: Iterable[str] | None = None,
    field_type: Any = None,
    relation: TypeRelation = TypeRelation.SUPER,
) -> list[FieldMember]:
    """
    List the fields of `owner` and its bases, own class first.

    :param owner: Class (or generic alias) to search.
    :param names: Field names to accept; None accepts every name.
    :param field_type: Requested type; None accepts every type.
    :param relation: Required relation of the declared to the requested type.
    :return: Matching fields; a shadowed base field is not listed.
    """
    wanted = None if names is None else set(names)
    found: list[FieldMember] = []
    seen: set[str] = set()
    for cls in inspect.getmro(_owner_class(owner)):
        for member in _declared_fields(cls):
            if member.name in seen:
                continue
            seen.add(member.name)
            if wanted is not None and member.name not in wanted:
                continue
            if field_type is None or matches(relation, member.type, field_type):
                found.append(member)
    return found


def find_methods(
    owner: Any,
    name: str,
    arg_types: tuple[Any, ...] = (),
    return_type: Any = None,
    *,
    relation: TypeRelation = TypeRelation.SUPER,
) -> list[MethodMember]:
    """
    List the methods called `name` on `owner` and its bases that accept `arg_types`.

    An argument type of None accepts any declared parameter type; a
    `return_type` of None accepts any return.
    """
    found: list[MethodMember] = []
    for cls in inspect.getmro(_owner_class(owner)):
        for member in _declared_methods(cls):
            if member.name != name or len(member.params) != len(arg_types):
                continue
            if not all(arg is None or matches(relation, param, arg) for param, arg in zip(member.params, arg_types)):
                continue
            if return_type is None or is_assignable(member.returns, return_type):
                found.append(member)
    return found


def instance_field(target: Any, name: str) -> FieldMember | None:
    """Return an untyped field for an entry of the instance ``__dict__``, if there is one."""
    attributes = getattr(target, "__dict__", None)
    if isinstance(attributes, dict) and name in attributes:
        return FieldMember(type(target), name, None)
    return None


# ----------------------------------------------------------------------
# Naming conventions
# ----------------------------------------------------------------------


def _boolean_like(type_: Any) -> bool:
    annotation = unwrap_annotation(type_)
    return _unknown(annotation) or runtime_class(annotation) is bool


def getter_names(name: str, type_: Any = None) -> list[str]:
    """Return the getter candidate names for a property, most specific first."""
    camel = to_capfirst(name)
    names = [name, f"get_{name}", f"get{camel}"]
    if _boolean_like(type_):
        names += [f"is_{name}", f"is{camel}", f"has_{name}", f"has{camel}"]
    return dedupe(names)


def setter_names(name: str, type_: Any = None) -> list[str]:
    """Return the setter candidate names for a property, most specific first."""
    camel = to_capfirst(name)
    names = [name, f"set_{name}", f"set{camel}"]
    if _boolean_like(type_):
        names += [f"set_is_{name}", f"setIs{camel}", f"set_has_{name}", f"setHas{camel}"]
    return dedupe(names)


def property_name(method_name: str) -> str:
    """
    Strip a getter or setter prefix from a method name.

    >>> property_name("getValue"), property_name("set_is_open"), property_name("items")
    ('value', 'open', 'items')
    """
    for prefix, camel in _SETTER_PREFIXES + _GETTER_PREFIXES:
        rest = method_name[len(prefix) :]
        if not method_name.startswith(prefix) or not rest:
            continue
        if camel and rest[0].isupper():
            return to_lowerfirst(rest)
        if not camel:
            return rest
    return method_name


# ----------------------------------------------------------------------
# Resolution
# ----------------------------------------------------------------------


def _check_mode(mode: ResolveMode, expected_type: Any) -> None:
    if not isinstance(mode, ResolveMode):
        raise AccessFailure.unsupported_mode(mode)
    if mode in (ResolveMode.KNOWN, ResolveMode.TYPED) and expected_type is None:
        raise AccessFailure(FailureKind.ARGUMENT, "type must not be null")


def resolve_field(owner: Any, expected_type: Any, name: str, mode: ResolveMode) -> FieldMember | None:
    """
    Resolve the field `name` of `owner` under `mode`.

    :return: The field, or None if there is no match.
    :raises AccessFailure: ARGUMENT if KNOWN/TYPED lack a type, SUPPORT for an
        unknown mode.
    """
    _check_mode(mode, expected_type)
    fields = find_fields(owner, (name,))
    if not fields:
        return None
    field = fields[0]
    if mode in (ResolveMode.KNOWN, ResolveMode.TYPED):
        return field if _exact(field.type, expected_type) else None
    return field if expected_type is None or is_assignable(field.type, expected_type) else None


def resolve_getter(owner: Any, expected_type: Any, name: str, mode: ResolveMode) -> MethodMember | None:
    """Resolve a getter for property `name` of `owner` under `mode`."""
    _check_mode(mode, expected_type)
    candidates = [name] if mode in (ResolveMode.KNOWN, ResolveMode.NAMED) else getter_names(name, expected_type)
    for candidate in candidates:
        for method in find_methods(owner, candidate):
            if mode in (ResolveMode.KNOWN, ResolveMode.TYPED):
                if _exact(method.returns, expected_type):
                    return method
            elif expected_type is None or is_assignable(method.returns, expected_type):
                return method
            break
    return None


def resolve_setter(owner: Any, expected_type: Any, name: str, mode: ResolveMode) -> MethodMember | None:
    """
    Resolve a setter for property `name` of `owner` under `mode`.

    NAMED and AUTO setters must return None (unannotated or ``-> None``).
    """
    _check_mode(mode, expected_type)
    strict = mode in (ResolveMode.KNOWN, ResolveMode.TYPED)
    candidates = [name] if mode in (ResolveMode.KNOWN, ResolveMode.NAMED) else setter_names(name, expected_type)
    for candidate in candidates:
        methods = find_methods(
            owner,
            candidate,
            (expected_type,),
            None if strict else NONE_TYPE,
            relation=TypeRelation.EXACT if strict else TypeRelation.SUPER,
        )
        if methods:
            return methods[0]
    return None


# End of file: src/mstair/beanpath/access/member_resolver.py
