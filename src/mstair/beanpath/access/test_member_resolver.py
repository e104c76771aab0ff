# File: src/mstair/beanpath/access/test_member_resolver.py
"""
Tests for field, getter and setter resolution.

Covers:
- Field discovery: annotations, slots, ClassVar exclusion, MRO order, shadowing
- Type relations and numeric promotion
- Candidate names and property name recovery
- Resolution modes KNOWN, NAMED, TYPED, AUTO
- Member get/set/invoke failures
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

import pytest

from mstair.beanpath.access.failure import AccessFailure, FailureKind
from mstair.beanpath.access.member_resolver import (
    FieldMember,
    ResolveMode,
    TypeRelation,
    find_fields,
    find_methods,
    getter_names,
    instance_field,
    is_assignable,
    matches,
    property_name,
    resolve_field,
    resolve_getter,
    resolve_setter,
    setter_names,
)


# ---------- Models ----------


@dataclass
class Base:
    value: int = 0
    name: str = ""
    flag: bool = False
    label: ClassVar[str] = "base"


@dataclass
class Child(Base):
    extra: float = 0.0
    name: str = "child"


@dataclass(frozen=True)
class Point:
    x: int = 0


class Slotted:
    __slots__ = ("x", "y")


class Bean:
    def __init__(self) -> None:
        self._count = 0
        self._open = False
        self._size = 1

    def getCount(self) -> int:
        return self._count

    def setCount(self, count: int) -> None:
        if count < 0:
            raise ValueError("negative count")
        self._count = count

    def isOpen(self) -> bool:
        return self._open

    def setOpen(self, open: bool) -> None:
        self._open = open

    def get_title(self) -> str:
        return "bean"

    def setLimit(self, limit: int) -> int:
        return limit

    def compute(self, a: int, b: int) -> int:
        return a + b

    @property
    def size(self) -> int:
        return self._size

    @size.setter
    def size(self, value: int) -> None:
        self._size = value


class Forward:
    ref: NotDefinedAnywhere  # noqa: F821  # pyright: ignore[reportUndefinedVariable]
    count: int


# ---------- Field discovery ----------


class TestFindFields:
    def test_own_fields_first_and_class_vars_skipped(self) -> None:
        assert [f.name for f in find_fields(Child)] == ["extra", "name", "value", "flag"]

    def test_shadowing_field_owned_by_subclass(self) -> None:
        (field,) = find_fields(Child, ("name",))
        assert field.owner is Child

    def test_inherited_field_owned_by_base(self) -> None:
        (field,) = find_fields(Child, ("value",))
        assert field == FieldMember(Base, "value", int)

    def test_type_filter_uses_numeric_promotion(self) -> None:
        assert [f.name for f in find_fields(Child, field_type=int)] == ["extra", "value"]
        assert [f.name for f in find_fields(Child, field_type=int, relation=TypeRelation.EXACT)] == ["value"]

    def test_slots(self) -> None:
        assert find_fields(Slotted) == [FieldMember(Slotted, "x"), FieldMember(Slotted, "y")]

    def test_unresolvable_annotations_fall_back(self) -> None:
        assert [(f.name, f.type) for f in find_fields(Forward)] == [("ref", None), ("count", int)]

    def test_none_owner(self) -> None:
        with pytest.raises(AccessFailure) as info:
            find_fields(None)
        assert info.value.message == "owner must not be null"

    def test_generic_alias_owner(self) -> None:
        assert find_fields(list[int]) == []


def test_find_methods_skips_multi_argument_methods() -> None:
    assert find_methods(Bean, "compute", (None, None)) == []
    assert [m.name for m in find_methods(Bean, "size")] == ["size"]
    assert [m.params for m in find_methods(Bean, "size", (int,))] == [(int,)]


def test_instance_field() -> None:
    bean = Bean()
    assert instance_field(bean, "_count") == FieldMember(Bean, "_count")
    assert instance_field(bean, "missing") is None
    assert instance_field(Slotted(), "x") is None


# ---------- Type relations ----------


class TestTypeRelations:
    @pytest.mark.parametrize(
        ("base", "ref", "expected"),
        [
            (int, bool, True),
            (bool, int, False),
            (float, int, True),
            (complex, float, True),
            (int, float, False),
            (int | str, str, True),
            (int, int | str, False),
            (int | None, int, True),
            (list[int], list, True),
            (Any, str, True),
            (None, str, True),
            (object, bytes, True),
        ],
    )
    def test_is_assignable(self, base: Any, ref: Any, expected: bool) -> None:
        assert is_assignable(base, ref) is expected

    def test_relations(self) -> None:
        assert matches(TypeRelation.EXACT, int, int)
        assert not matches(TypeRelation.EXACT, bool, int)
        assert matches(TypeRelation.SUPER, float, int)
        assert matches(TypeRelation.CHILD, int, float)
        assert not matches(TypeRelation.CHILD, float, int)

    def test_unknown_relation_is_support(self) -> None:
        with pytest.raises(AccessFailure) as info:
            matches("SIBLING", int, int)  # pyright: ignore[reportArgumentType]
        assert info.value.kind is FailureKind.SUPPORT
        assert "SIBLING" in info.value.message


# ---------- Naming ----------


def test_getter_names() -> None:
    assert getter_names("value", int) == ["value", "get_value", "getValue"]
    assert getter_names("open") == ["open", "get_open", "getOpen", "is_open", "isOpen", "has_open", "hasOpen"]


def test_setter_names() -> None:
    assert setter_names("count", int) == ["count", "set_count", "setCount"]
    assert setter_names("open", bool)[3:] == ["set_is_open", "setIsOpen", "set_has_open", "setHasOpen"]


@pytest.mark.parametrize(
    ("method", "expected"),
    [
        ("getValue", "value"),
        ("get_title", "title"),
        ("isOpen", "open"),
        ("setIsOpen", "open"),
        ("set_is_open", "open"),
        ("setCount", "count"),
        ("items", "items"),
        ("settle", "settle"),
        ("hash", "hash"),
        ("get", "get"),
    ],
)
def test_property_name(method: str, expected: str) -> None:
    assert property_name(method) == expected


# ---------- Resolution ----------


class TestResolveField:
    def test_auto(self) -> None:
        assert resolve_field(Base, None, "value", ResolveMode.AUTO) == FieldMember(Base, "value", int)
        assert resolve_field(Base, bool, "value", ResolveMode.AUTO) is not None
        assert resolve_field(Base, str, "value", ResolveMode.AUTO) is None
        assert resolve_field(Base, None, "missing", ResolveMode.AUTO) is None

    def test_known_requires_exact_type(self) -> None:
        assert resolve_field(Base, int, "value", ResolveMode.KNOWN) is not None
        assert resolve_field(Base, bool, "value", ResolveMode.KNOWN) is None

    @pytest.mark.parametrize("mode", [ResolveMode.KNOWN, ResolveMode.TYPED])
    def test_strict_modes_require_type(self, mode: ResolveMode) -> None:
        with pytest.raises(AccessFailure) as info:
            resolve_field(Base, None, "value", mode)
        assert info.value.kind is FailureKind.ARGUMENT
        assert info.value.message == "type must not be null"

    def test_unknown_mode_is_support(self) -> None:
        with pytest.raises(AccessFailure) as info:
            resolve_field(Base, None, "value", "AUTO")  # pyright: ignore[reportArgumentType]
        assert info.value.kind is FailureKind.SUPPORT


class TestResolveGetter:
    def test_candidate_names(self) -> None:
        assert resolve_getter(Bean, None, "count", ResolveMode.AUTO).name == "getCount"
        assert resolve_getter(Bean, None, "open", ResolveMode.AUTO).name == "isOpen"
        assert resolve_getter(Bean, str, "title", ResolveMode.AUTO).name == "get_title"

    def test_named_uses_exact_name(self) -> None:
        assert resolve_getter(Bean, None, "count", ResolveMode.NAMED) is None
        assert resolve_getter(Bean, None, "getCount", ResolveMode.NAMED) is not None

    def test_typed(self) -> None:
        getter = resolve_getter(Bean, int, "size", ResolveMode.TYPED)
        assert getter is not None and getter.is_getter and getter.returns is int
        assert resolve_getter(Bean, float, "size", ResolveMode.TYPED) is None

    def test_incompatible_return(self) -> None:
        assert resolve_getter(Bean, str, "count", ResolveMode.AUTO) is None

    def test_idempotent(self) -> None:
        first = resolve_getter(Bean, None, "count", ResolveMode.AUTO)
        assert first == resolve_getter(Bean, None, "count", ResolveMode.AUTO)


class TestResolveSetter:
    def test_auto(self) -> None:
        setter = resolve_setter(Bean, None, "count", ResolveMode.AUTO)
        assert setter is not None and setter.name == "setCount" and setter.type is int
        assert resolve_setter(Bean, bool, "open", ResolveMode.AUTO).name == "setOpen"

    def test_property_setter(self) -> None:
        setter = resolve_setter(Bean, int, "size", ResolveMode.TYPED)
        assert setter is not None and setter.is_setter

    def test_typed_requires_exact_parameter(self) -> None:
        assert resolve_setter(Bean, str, "count", ResolveMode.TYPED) is None
        assert resolve_setter(Bean, bool, "count", ResolveMode.TYPED) is None

    def test_auto_accepts_assignable_parameter(self) -> None:
        assert resolve_setter(Bean, bool, "count", ResolveMode.AUTO) is not None

    def test_value_returning_method_is_no_auto_setter(self) -> None:
        assert resolve_setter(Bean, None, "limit", ResolveMode.AUTO) is None
        assert resolve_setter(Bean, int, "limit", ResolveMode.TYPED) is not None

    def test_idempotent(self) -> None:
        query = (Bean, int, "size", ResolveMode.AUTO)
        assert resolve_setter(*query) == resolve_setter(*query)


# ---------- Members ----------


class TestMembers:
    def test_field_get_set(self) -> None:
        base = Base(value=3)
        field = FieldMember(Base, "value", int)
        assert field.set(base, 4) == 3
        assert field.get(base) == 4
        assert str(field) == "Base.value"

    def test_field_none_target(self) -> None:
        with pytest.raises(AccessFailure) as info:
            FieldMember(Base, "value", int).get(None)
        assert info.value.message == "target must not be null"

    def test_frozen_field_is_access_failure(self) -> None:
        with pytest.raises(AccessFailure) as info:
            FieldMember(Point, "x", int).set(Point(1), 2)
        assert info.value.kind is FailureKind.ACCESS

    def test_unset_slot_reads_none(self) -> None:
        assert FieldMember(Slotted, "x").get(Slotted()) is None

    def test_invoke_failure_is_target(self) -> None:
        setter = resolve_setter(Bean, int, "setCount", ResolveMode.KNOWN)
        assert setter is not None
        with pytest.raises(AccessFailure) as info:
            setter.invoke(Bean(), -1)
        assert info.value.kind is FailureKind.TARGET
        assert str(info.value.get_target()) == "negative count"

    def test_invoke_none_target(self) -> None:
        getter = resolve_getter(Bean, None, "count", ResolveMode.AUTO)
        with pytest.raises(AccessFailure) as info:
            getter.invoke(None)
        assert info.value.kind is FailureKind.ARGUMENT


# End of file: src/mstair/beanpath/access/test_member_resolver.py
