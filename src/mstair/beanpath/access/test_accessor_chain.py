# File: src/mstair/beanpath/access/test_accessor_chain.py
"""
Tests for property definitions and compiled accessor chains.

Covers:
- create_property() validation and definitions derived from members
- Field and getter/setter accessors; setter-only accessors refusing both directions
- Dotted chains, including a None intermediate
- Bracket keys into sequences and mappings
- Construction failures: inconsistent keys, undeterminable and incompatible types
- get()/set() surfacing user exceptions, read()/write() keeping failures
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

import pytest

from mstair.beanpath.access.accessor_chain import (
    AUTO,
    Accessor,
    PropertyDefinition,
    build,
    create_property,
    property_from_field,
    property_from_method,
)
from mstair.beanpath.access.failure import AccessFailure, FailureKind
from mstair.beanpath.access.member_resolver import FieldMember, MethodMember, ResolveMode, resolve_getter
from mstair.beanpath.base import config as cfg
from mstair.beanpath.xlogging.logger_constants import CONSTRUCT


# ---------- Models ----------


@dataclass
class Base:
    value: int = 0


@dataclass
class Holder:
    base: Base | None = None
    values: list[int] = field(default_factory=list)
    bases: list[Base] = field(default_factory=list)
    scores: dict[str, int] = field(default_factory=dict)


class Gauge:
    def __init__(self, level: int = 0) -> None:
        self._level = level

    def getLevel(self) -> int:
        return self._level

    def setLevel(self, level: int) -> None:
        if level < 0:
            raise ValueError("level below zero")
        self._level = level

    def compute(self, a: int, b: int) -> int:
        return a * b


class Sink:
    def __init__(self) -> None:
        self.received: list[str] = []

    def setData(self, data: str) -> None:
        self.received.append(data)


class Mixed:
    count: int = 0

    def getCount(self) -> str:
        return str(self.count)


class Loose:
    def __init__(self) -> None:
        self.thing = Base(1)


@pytest.fixture(autouse=True)
def wrapped_style() -> Iterator[None]:
    with cfg.failure_style_context("WRAPPED"):
        yield


def failure_of(call: Any, *args: Any) -> AccessFailure:
    with pytest.raises(AccessFailure) as info:
        call(*args)
    return info.value


# ---------- Definitions ----------


class TestDefinitions:
    def test_create_property_defaults(self) -> None:
        definition = create_property(int, "value")
        assert definition == PropertyDefinition(int, "value", AUTO, AUTO)
        assert str(definition) == "[type=int, field=value, getter=*, setter=*]"

    def test_type_required(self) -> None:
        failure = failure_of(create_property, None, "value")
        assert failure.kind is FailureKind.ACCESS
        assert failure.message == "type must not be null"

    @pytest.mark.parametrize(("getter", "setter"), [(None, None), ("level", None), (None, "level")])
    def test_incomplete(self, getter: str | None, setter: str | None) -> None:
        failure = failure_of(create_property, int, None, getter, setter)
        assert failure.kind is FailureKind.ACCESS
        assert failure.message.startswith("incomplete property")

    def test_from_field(self) -> None:
        assert property_from_field(FieldMember(Base, "value", int)) == PropertyDefinition(int, "value")

    def test_from_method(self) -> None:
        getter = resolve_getter(Gauge, None, "level", ResolveMode.AUTO)
        assert getter is not None
        assert property_from_method(getter) == PropertyDefinition(int, "level")

    def test_from_method_needs_getter_or_setter(self) -> None:
        member = MethodMember(Gauge, "compute", Gauge.compute, (int, int), int)
        failure = failure_of(property_from_method, member)
        assert failure.kind is FailureKind.METHOD
        assert failure.message.startswith("method is no getter/setter")


# ---------- Single level ----------


class TestSingleLevel:
    def test_field_accessor(self) -> None:
        accessor = build(Base, create_property(int, "value"))
        base = Base(1)
        assert accessor.name == "value"
        assert accessor.set(base, 2) == 1
        assert accessor.get(base) == 2
        assert accessor.parent is None and accessor.key is None

    def test_getter_setter_accessor(self) -> None:
        accessor = build(Gauge, create_property(int, None, "level", "level"))
        gauge = Gauge(3)
        assert accessor.field is None
        assert accessor.getter is not None and accessor.getter.name == "getLevel"
        assert accessor.set(gauge, 4) == 3
        assert accessor.get(gauge) == 4

    def test_user_exception_raised_directly(self) -> None:
        accessor = build(Gauge, create_property(int, None, "level", "level"))
        with pytest.raises(ValueError, match="level below zero"):
            accessor.set(Gauge(), -1)

    def test_write_keeps_target_failure(self) -> None:
        accessor = build(Gauge, create_property(int, None, "level", "level"))
        failure = failure_of(accessor.write, Gauge(), -1)
        assert failure.kind is FailureKind.TARGET

    def test_setter_only(self) -> None:
        accessor = build(Sink, create_property(str, None, "data", "data"))
        sink = Sink()
        failure = failure_of(accessor.set, sink, "x")
        assert failure.kind is FailureKind.ACCESS
        assert failure.message.startswith("access without getter")
        assert sink.received == []
        failure = failure_of(accessor.get, sink)
        assert failure.kind is FailureKind.ACCESS
        assert failure.message.startswith("access without getter")

    def test_type_mismatch_leaves_no_members(self) -> None:
        accessor = build(Base, create_property(str, "value"))
        assert accessor.field is None
        assert failure_of(accessor.get, Base()).message.startswith("access without getter")
        assert failure_of(accessor.set, Base(), "x").message.startswith("access without setter")


# ---------- Chains ----------


class TestChains:
    def test_dotted_field_chain(self) -> None:
        accessor = build(Holder, create_property(int, "base.value"))
        holder = Holder(base=Base(1))
        assert accessor.name == "base.value"
        assert accessor.parent is not None and accessor.parent.name == "base"
        assert accessor.set(holder, 3) == 1
        assert accessor.get(holder) == 3

    @pytest.mark.parametrize("call", ["get", "set"])
    def test_none_intermediate(self, call: str) -> None:
        accessor = build(Holder, create_property(int, "base.value"))
        args: tuple[Any, ...] = (Holder(),) if call == "get" else (Holder(), 3)
        failure = failure_of(getattr(accessor, call), *args)
        assert failure.kind is FailureKind.ARGUMENT
        assert failure.message == "target must not be null"

    def test_accessor_is_reusable(self) -> None:
        accessor = build(Holder, create_property(int, "base.value"))
        first, second = Holder(base=Base(1)), Holder(base=Base(2))
        assert [accessor.get(first), accessor.get(second)] == [1, 2]

    def test_sequence_key(self) -> None:
        accessor = build(Holder, create_property(int, "values[1]"))
        holder = Holder(values=[5, 6])
        assert accessor.key == "1"
        assert accessor.definition.field == "values[1]"
        assert accessor.set(holder, 7) == 6
        assert holder.values == [5, 7]

    def test_mapping_key(self) -> None:
        accessor = build(Holder, create_property(int, "scores[ann]"))
        holder = Holder(scores={"ann": 1})
        assert accessor.get(holder) == 1
        assert accessor.set(holder, 2) == 1
        assert accessor.get(Holder()) is None

    def test_key_then_field(self) -> None:
        accessor = build(Holder, create_property(int, "bases[0].value"))
        holder = Holder(bases=[Base(8)])
        assert accessor.name == "bases[0].value"
        assert accessor.definition.type is int
        assert accessor.get(holder) == 8

    def test_key_out_of_bounds(self) -> None:
        accessor = build(Holder, create_property(int, "values[3]"))
        failure = failure_of(accessor.get, Holder(values=[1]))
        assert failure.kind is FailureKind.BOUNDS


# ---------- Construction failures ----------


class TestConstruction:
    def test_inconsistent_keys(self) -> None:
        definition = create_property(int, "values[0]", "values[1]")
        failure = failure_of(build, Holder, definition)
        assert failure.kind is FailureKind.ARGUMENT
        assert failure.message.startswith("creation failure")
        assert any(f.message.startswith("inconsistent sub-property") for f in failure.failures())

    def test_undeterminable_type(self) -> None:
        failure = failure_of(build, Loose, create_property(int, "thing.value"))
        assert failure.kind is FailureKind.ARGUMENT
        assert any(f.message.startswith("property type failure") for f in failure.failures())

    def test_incompatible_member_types(self) -> None:
        failure = failure_of(build, Mixed, create_property(int, "count.real"))
        assert failure.kind is FailureKind.ACCESS
        assert any(f.message.startswith("incompatible types") for f in failure.failures())

    def test_empty_definition(self) -> None:
        failure = failure_of(build, Base, PropertyDefinition(int, None, None, None))
        assert failure.kind is FailureKind.ACCESS

    def test_none_owner(self) -> None:
        assert failure_of(build, None, create_property(int, "value")).kind is FailureKind.ARGUMENT


def test_construction_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(CONSTRUCT, logger="mstair.beanpath.access.accessor_chain")
    accessor = build(Holder, create_property(int, "base.value"))
    assert isinstance(accessor, Accessor)
    records = [r for r in caplog.records if r.levelno == CONSTRUCT]
    assert records and "base.value" in records[-1].getMessage()
    assert logging.getLevelName(CONSTRUCT) == "CONSTRUCT"


# End of file: src/mstair/beanpath/access/test_accessor_chain.py
