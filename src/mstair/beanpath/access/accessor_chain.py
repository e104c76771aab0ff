# File: src/mstair/beanpath/access/accessor_chain.py
"""
Compiled property accessors.

A PropertyDefinition names a property by field, getter and setter paths; build()
resolves those names against an owner class once and returns an Accessor chain
that reads and writes instances without parsing again.

Example:
    >>> definition = create_property(int, "base.value")
    >>> accessor = build(Holder, definition)
    >>> _ = accessor.set(holder, 3)
    >>> accessor.get(holder)
    3

Each dotted level of the names becomes one Accessor layer whose parent is the
previous level. A bracket group (``values[0]``) becomes the layer's key: the
layer first reads its own member, then reads or writes the key path inside it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Final

from mstair.beanpath.access import property_path
from mstair.beanpath.access.failure import AccessFailure, FailureKind
from mstair.beanpath.access.member_resolver import (
    FieldMember,
    MethodMember,
    ResolveMode,
    is_assignable,
    property_name,
    resolve_field,
    resolve_getter,
    resolve_setter,
)
from mstair.beanpath.access.path_parser import Segment, parse
from mstair.beanpath.base.string_helpers import details
from mstair.beanpath.base.types import is_unknown
from mstair.beanpath.xlogging.logger_factory import create_logger


__all__ = [
    "AUTO",
    "Accessor",
    "PropertyDefinition",
    "build",
    "create_property",
    "property_from_field",
    "property_from_method",
]

_LOG = create_logger(__name__)

AUTO: Final[str] = "*"


@dataclass(frozen=True, slots=True)
class PropertyDefinition:
    """
    Declared property: its type plus field, getter and setter names.

    A name of AUTO (``"*"``) or None lets build() derive it from the other names.
    """

    type: Any
    field: str | None = AUTO
    getter: str | None = AUTO
    setter: str | None = AUTO

    def __str__(self) -> str:
        return details(type=self.type, field=self.field, getter=self.getter, setter=self.setter)


def create_property(
    type_: Any,
    field: str | None,
    getter: str | None = AUTO,
    setter: str | None = AUTO,
) -> PropertyDefinition:
    """
    Validate and return a property definition.

    :raises AccessFailure: ACCESS if the type is None, or if there is neither a
        field nor both a getter and a setter.
    """
    if type_ is None:
        raise AccessFailure(FailureKind.ACCESS, "type must not be null")
    if not field and not (getter and setter):
        raise AccessFailure(
            FailureKind.ACCESS, f"incomplete property {details(field=field, getter=getter, setter=setter)}"
        )
    return PropertyDefinition(type_, field, getter, setter)


def property_from_field(member: FieldMember) -> PropertyDefinition:
    """Return the definition of the property backed by a field."""
    return create_property(member.type, member.name)


def property_from_method(member: MethodMember) -> PropertyDefinition:
    """
    Return the definition of the property read or written by a getter or setter.

    :raises AccessFailure: METHOD if the member takes more than one argument.
    """
    if not (member.is_getter or member.is_setter):
        raise AccessFailure(FailureKind.METHOD, f"method is no getter/setter {details(method=member)}")
    return create_property(member.type, property_name(member.name))


@dataclass(frozen=True, slots=True)
class Accessor:
    """
    One resolved level of a property path.

    `definition` carries the layer type and the qualified member names, such
    as ``base.value[0]``.
    """

    definition: PropertyDefinition
    parent: Accessor | None = None
    field: FieldMember | None = None
    getter: MethodMember | None = None
    setter: MethodMember | None = None
    key: str | None = None

    def __str__(self) -> str:
        return f"Accessor{details(name=self.name, type=self.definition.type)}"

    @property
    def name(self) -> str:
        definition = self.definition
        return definition.getter or definition.field or definition.setter or ""

    def get(self, target: Any) -> Any:
        """Read the property, raising the exception of user code when it raised one."""
        try:
            return self.read(target)
        except AccessFailure as failure:
            raise failure.get_target()

    def set(self, target: Any, value: Any) -> Any:
        """Write the property and return the previous value, raising user code exceptions directly."""
        try:
            return self.write(target, value)
        except AccessFailure as failure:
            raise failure.get_target()

    def read(self, target: Any) -> Any:
        """
        Read the property of `target`.

        :raises AccessFailure: ACCESS "access without getter" if the layer has
            neither getter nor field; ARGUMENT if an intermediate value is None.
        """
        if self.parent is not None:
            target = self.parent.read(target)
        return self._read(target, self.key)

    def write(self, target: Any, value: Any) -> Any:
        """
        Write the property of `target` and return the previous value.

        A setter write reads the previous value through the getter or field first.

        :raises AccessFailure: ACCESS "access without setter" if the layer has
            neither setter nor field; ACCESS "access without getter" if a setter
            has no getter or field to read the previous value from.
        """
        if self.parent is not None:
            target = self.parent.read(target)
        return self._write(target, self.key, value)

    def _read(self, target: Any, key: str | None) -> Any:
        if key:
            return property_path.read(self._read(target, None), key)
        if self.getter is not None:
            return self.getter.invoke(target)
        if self.field is not None:
            return self.field.get(target)
        raise AccessFailure(
            FailureKind.ACCESS, f"access without getter {details(field=self.field, getter=self.getter)}"
        )

    def _write(self, target: Any, key: str | None, value: Any) -> Any:
        if key:
            return property_path.write(self._read(target, None), key, value)
        if self.setter is not None:
            before = self._read(target, None)
            self.setter.invoke(target, value)
            return before
        if self.field is not None:
            return self.field.set(target, value)
        raise AccessFailure(
            FailureKind.ACCESS, f"access without setter {details(field=self.field, setter=self.setter)}"
        )


def build(owner: Any, definition: PropertyDefinition) -> Accessor:
    """
    Resolve `definition` against `owner` and return the last Accessor layer.

    :raises AccessFailure: ``creation failure [owner=..., property=...]``
        wrapping the cause: ARGUMENT for inconsistent keys or undeterminable
        types, ACCESS for incompatible member types or empty definitions.
    """
    try:
        accessor = _build(owner, definition)
    except Exception as exc:
        raise AccessFailure.wrap(f"creation failure {details(owner=owner, property=definition)}", exc)
    _LOG.construct(Accessor, accessor.name, owner, definition)
    return accessor


def _segments(name: str | None) -> list[Segment]:
    if not name or name == AUTO:
        return []
    return parse(name).segments()


def _build(owner: Any, definition: PropertyDefinition) -> Accessor:
    streams = [_segments(definition.field), _segments(definition.getter), _segments(definition.setter)]
    depth = max(len(stream) for stream in streams)
    if depth == 0:
        raise AccessFailure(FailureKind.ACCESS, f"incomplete property {details(property=definition)}")

    accessor: Accessor | None = None
    for level in range(depth):
        f_seg, g_seg, s_seg = (stream[level] if level < len(stream) else None for stream in streams)
        key = _key(definition, f_seg, g_seg, s_seg)
        member_type = definition.type if level == depth - 1 and key is None else None

        field_name = _base_name(f_seg)
        getter_name = _base_name(g_seg) or field_name
        setter_name = _base_name(s_seg) or field_name
        field = resolve_field(owner, member_type, field_name, ResolveMode.AUTO) if field_name else None
        getter = resolve_getter(owner, member_type, getter_name, ResolveMode.AUTO) if getter_name else None
        setter = resolve_setter(owner, member_type, setter_name, ResolveMode.AUTO) if setter_name else None

        layer_type = _layer_type(owner, member_type, field, getter, setter, field_name or getter_name or setter_name)
        accessor = Accessor(
            PropertyDefinition(
                layer_type,
                _qualified(accessor, field.name if field else None, key),
                _qualified(accessor, property_name(getter.name) if getter else None, key),
                _qualified(accessor, property_name(setter.name) if setter else None, key),
            ),
            accessor,
            field,
            getter,
            setter,
            key,
        )
        owner = property_path.resolve_type(layer_type, key) if key else layer_type
    assert accessor is not None
    return accessor


def _base_name(segment: Segment | None) -> str | None:
    if segment is None or segment.base.is_empty or segment.base.is_wildcard:
        return None
    return segment.base.text


def _key(definition: PropertyDefinition, *segments: Segment | None) -> str | None:
    """Return the common bracket key of the three name streams at one level."""
    keys = [segment.key for segment in segments if segment is not None and segment.key]
    for key in keys[1:]:
        if key != keys[0]:
            raise AccessFailure(
                FailureKind.ARGUMENT,
                f"inconsistent sub-property {details(name=keys[0], field=key, property=definition)}",
            )
    return keys[0] if keys else None


def _layer_type(
    owner: Any,
    member_type: Any,
    field: FieldMember | None,
    getter: MethodMember | None,
    setter: MethodMember | None,
    name: str | None,
) -> Any:
    """Return the layer type, checking that every resolved member is compatible with it."""
    layer_type = member_type
    for member in (field, getter, setter):
        if layer_type is None and member is not None and not is_unknown(member.type):
            layer_type = member.type
    if layer_type is None:
        raise AccessFailure(FailureKind.ARGUMENT, f"property type failure {details(type=owner, name=name)}")
    if field is not None and not is_assignable(layer_type, field.type):
        raise AccessFailure(FailureKind.ACCESS, f"incompatible types {details(type=layer_type, field=field)}")
    if getter is not None and not is_assignable(layer_type, getter.returns):
        raise AccessFailure(FailureKind.ACCESS, f"incompatible types {details(type=layer_type, getter=getter)}")
    if setter is not None and not is_assignable(setter.type, layer_type):
        raise AccessFailure(FailureKind.ACCESS, f"incompatible types {details(type=layer_type, setter=setter)}")
    return layer_type


def _qualified(parent: Accessor | None, name: str | None, key: str | None) -> str | None:
    """Return ``parentName.name[key]`` for the resolved definition of a layer."""
    if name is None:
        return None
    if key:
        name = f"{name}[{key}]"
    if parent is not None:
        prefix = parent.definition.getter or parent.definition.field
        if prefix:
            return f"{prefix}.{name}"
    return name


# End of file: src/mstair/beanpath/access/accessor_chain.py
