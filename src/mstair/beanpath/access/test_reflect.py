# File: src/mstair/beanpath/access/test_reflect.py
"""
Tests for the reflective helpers.

Covers:
- get_field()/set_field() on declared and instance fields
- invoke() for getters and multi-argument methods
- create_instance() from classes, class names and Enum names
- FailureMode.RETURN_NONE suppression
- inject() by declared field type
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

import pytest

from mstair.beanpath.access.failure import AccessFailure, FailureKind, FailureMode
from mstair.beanpath.access.reflect import create_instance, get_field, inject, invoke, set_field


class Color(Enum):
    RED = 1
    GREEN = 2


@dataclass
class Service:
    name: str = ""
    alias: str = ""
    count: int = 0


class Guarded:
    def __init__(self) -> None:
        self._secret = 1

    def setSecret(self, secret: int) -> None:
        raise PermissionError("read only")


class Calculator:
    def total(self) -> int:
        return 42

    def add(self, a: int, b: int) -> int:
        return a + b

    def explode(self) -> None:
        raise KeyError("boom")


class Shape(ABC):
    @abstractmethod
    def area(self) -> float: ...


class Fragile:
    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError("negative size")
        self.size = size


# ---------- Fields ----------


class TestFields:
    def test_declared_field(self) -> None:
        service = Service("api")
        assert get_field(service, "name") == "api"
        assert set_field(service, "name", "web") == "api"
        assert service.name == "web"

    def test_instance_field_bypasses_setter(self) -> None:
        guarded = Guarded()
        assert set_field(guarded, "_secret", 2) == 1
        assert get_field(guarded, "_secret") == 2

    def test_missing_field(self) -> None:
        with pytest.raises(AccessFailure) as info:
            get_field(Service(), "missing")
        assert info.value.kind is FailureKind.FIELD
        assert "name=missing" in info.value.message

    def test_return_none(self) -> None:
        assert get_field(Service(), "missing", FailureMode.RETURN_NONE) is None
        assert set_field(None, "name", 1, FailureMode.RETURN_NONE) is None

    def test_none_target(self) -> None:
        with pytest.raises(AccessFailure) as info:
            get_field(None, "name")
        assert info.value.kind is FailureKind.ARGUMENT


# ---------- Methods ----------


class TestInvoke:
    def test_getter(self) -> None:
        assert invoke(Calculator(), "total") == 42

    def test_multi_argument_method(self) -> None:
        assert invoke(Calculator(), "add", 2, 3) == 5

    def test_missing_method(self) -> None:
        with pytest.raises(AccessFailure) as info:
            invoke(Calculator(), "missing", 1)
        assert info.value.kind is FailureKind.METHOD

    def test_raising_method_is_target(self) -> None:
        with pytest.raises(AccessFailure) as info:
            invoke(Calculator(), "explode")
        assert info.value.kind is FailureKind.TARGET
        assert isinstance(info.value.get_target(), KeyError)

    def test_return_none(self) -> None:
        assert invoke(Calculator(), "explode", mode=FailureMode.RETURN_NONE) is None

    def test_unsupported_mode(self) -> None:
        with pytest.raises(AccessFailure) as info:
            invoke(Calculator(), "missing", mode="IGNORE")  # pyright: ignore[reportArgumentType]
        assert info.value.kind is FailureKind.SUPPORT


# ---------- Instances ----------


class TestCreateInstance:
    def test_class(self) -> None:
        assert create_instance(Service, "api") == Service("api")

    def test_class_name(self) -> None:
        assert create_instance("decimal.Decimal", "1.5") == Decimal("1.5")

    def test_enum_by_name(self) -> None:
        assert create_instance(Color, "GREEN") is Color.GREEN

    def test_enum_needs_single_name(self) -> None:
        with pytest.raises(AccessFailure) as info:
            create_instance(Color, 1)
        assert info.value.kind is FailureKind.SUPPORT

    def test_abstract_class(self) -> None:
        with pytest.raises(AccessFailure) as info:
            create_instance(Shape)
        assert info.value.kind is FailureKind.CREATION

    def test_constructor_failure_is_merged_target(self) -> None:
        with pytest.raises(AccessFailure) as info:
            create_instance(Fragile, -1)
        failure = info.value
        assert failure.kind is FailureKind.TARGET
        assert isinstance(failure.cause, ValueError)
        assert str(failure.get_target()) == "negative size"
        assert "args=[-1]" in failure.message

    def test_unknown_class_name(self) -> None:
        with pytest.raises(AccessFailure) as info:
            create_instance("no_such_module.Missing")
        assert info.value.kind is FailureKind.CLASS
        assert create_instance("no_such_module.Missing", mode=FailureMode.RETURN_NONE) is None


# ---------- Injection ----------


class TestInject:
    def test_by_type(self) -> None:
        service = inject(Service(), "x")
        assert service == Service("x", "x", 0)

    def test_by_name(self) -> None:
        assert inject(Service(), "x", "alias") == Service("", "x", 0)

    def test_no_matching_field(self) -> None:
        assert inject(Service(), b"raw") == Service()

    def test_none_target(self) -> None:
        with pytest.raises(AccessFailure) as info:
            inject(None, "x")
        assert info.value.kind is FailureKind.ARGUMENT


# End of file: src/mstair/beanpath/access/test_reflect.py
