# File: src/mstair/beanpath/access/reflect.py
"""
Reflective helpers for tests: field access, method invocation, instantiation
and value injection, each with a per-call FailureMode.

FailureMode.RETURN_NONE turns any AccessFailure into a None result, which
suits probing code such as "does this class have a usable setter?".
"""

from __future__ import annotations

import inspect
from enum import Enum
from typing import Any

from mstair.beanpath.access.failure import (
    AccessFailure,
    FailureKind,
    FailureMode,
    WrapStyle,
    handle_failure,
    invoke_target,
)
from mstair.beanpath.access.member_resolver import find_fields, find_methods, instance_field
from mstair.beanpath.access.type_coercer import coerce, find_class
from mstair.beanpath.base.string_helpers import details


__all__ = ["create_instance", "get_field", "inject", "invoke", "set_field"]


def _field(target: Any, name: str) -> Any:
    if target is None:
        raise AccessFailure(FailureKind.ARGUMENT, "target must not be null")
    fields = find_fields(type(target), (name,))
    field = fields[0] if fields else instance_field(target, name)
    if field is None:
        raise AccessFailure(FailureKind.FIELD, details(type=type(target), name=name))
    return field


def get_field(target: Any, name: str, mode: FailureMode = FailureMode.DEFAULT) -> Any:
    """
    Return the value of the declared or instance field `name` of `target`.

    :raises AccessFailure: FIELD if there is no such field, unless `mode` is RETURN_NONE.
    """
    try:
        return _field(target, name).get(target)
    except AccessFailure as failure:
        handle_failure(mode, failure)
        return None


def set_field(target: Any, name: str, value: Any, mode: FailureMode = FailureMode.DEFAULT) -> Any:
    """Assign the field `name` of `target`, bypassing setters, and return the previous value."""
    try:
        return _field(target, name).set(target, value)
    except AccessFailure as failure:
        handle_failure(mode, failure)
        return None


def invoke(target: Any, name: str, *args: Any, mode: FailureMode = FailureMode.DEFAULT) -> Any:
    """
    Call the method `name` of `target` with positional `args`.

    Methods taking any number of arguments are found, not only getters and setters.

    :raises AccessFailure: METHOD if `target` has no callable `name`, TARGET if
        the call raises, unless `mode` is RETURN_NONE.
    """
    try:
        if target is None:
            raise AccessFailure(FailureKind.ARGUMENT, "target must not be null")
        methods = find_methods(type(target), name, (None,) * len(args))
        if methods:
            return methods[0].invoke(target, *args)
        function = getattr(target, name, None)
        if not callable(function):
            raise AccessFailure(FailureKind.METHOD, details(type=type(target), name=name, args=list(args)))
        return invoke_target(function, *args)
    except AccessFailure as failure:
        handle_failure(mode, failure)
        return None


def create_instance(type_or_name: type | str, *args: Any, mode: FailureMode = FailureMode.DEFAULT) -> Any:
    """
    Create an instance of a class given as class or name.

    An Enum class with a single text argument returns the member of that name.

    :raises AccessFailure: CLASS for an unknown class name, CREATION for an
        abstract class, TARGET (merged) if the constructor raises, unless `mode`
        is RETURN_NONE.
    """
    try:
        cls = find_class(type_or_name) if isinstance(type_or_name, str) else type_or_name
        if not isinstance(cls, type):
            raise AccessFailure(FailureKind.ARGUMENT, f"not a class {details(type=cls)}")
        if issubclass(cls, Enum):
            if len(args) != 1 or not isinstance(args[0], str):
                raise AccessFailure(FailureKind.SUPPORT, details(type=cls, args=list(args)))
            return coerce(args[0], cls)
        if inspect.isabstract(cls):
            raise AccessFailure(FailureKind.CREATION, f"abstract class {details(type=cls)}")
        try:
            return invoke_target(cls, *args)
        except AccessFailure as failure:
            raise AccessFailure.wrap(details(type=cls, args=list(args)), failure, WrapStyle.MERGED)
    except AccessFailure as failure:
        handle_failure(mode, failure)
        return None


def inject(target: Any, value: Any, name: str | None = None) -> Any:
    """
    Assign `value` to every field of `target` whose declared type accepts it.

    With `name`, only the field of that name is assigned.

    :return: `target`.
    """
    if target is None:
        raise AccessFailure(FailureKind.ARGUMENT, "target must not be null")
    value_type = type(value) if value is not None else None
    names = None if name is None else (name,)
    for field in find_fields(type(target), names, value_type):
        field.set(target, value)
    return target


# End of file: src/mstair/beanpath/access/reflect.py
