# File: src/mstair/beanpath/access/property_path.py
"""
Read and write elements of an object graph by path expression.

Example:
    >>> from dataclasses import dataclass, field
    >>> @dataclass
    ... class Order:
    ...     items: list[str] = field(default_factory=list)
    >>> order = Order(["apple", "pear"])
    >>> read(order, "items[1]")
    'pear'
    >>> write(order, "items,0", "plum")
    'apple'
    >>> write(order, "items[*]", "fig")
    >>> order.items
    ['plum', 'pear', 'fig']

Every name but the last is read; the last name of the last segment is written.
Failures raised below are wrapped with the root target, the path and (for
writes) the value, using the configured wrapping style.
"""

from __future__ import annotations

import typing
from collections.abc import Collection, Iterable, Mapping
from typing import Any

from mstair.beanpath.access.container_dispatcher import get, put
from mstair.beanpath.access.failure import AccessFailure, FailureKind
from mstair.beanpath.access.member_resolver import ResolveMode, resolve_field, resolve_getter
from mstair.beanpath.access.path_parser import PathName, Segment, is_index, parse
from mstair.beanpath.access.type_coercer import decode_int, find_class
from mstair.beanpath.base.string_helpers import details
from mstair.beanpath.base.types import SCALAR_SEQUENCE_TYPES, is_unknown, runtime_class, unwrap_annotation
from mstair.beanpath.xlogging.logger_factory import create_logger


__all__ = ["read", "resolve_type", "write"]

_LOG = create_logger(__name__)


def _check(root: Any, path: str) -> None:
    if root is None:
        raise AccessFailure(FailureKind.ARGUMENT, "target must not be null", stacklevel=2)
    if not path:
        raise AccessFailure(FailureKind.ARGUMENT, f"name must not be null or empty [{path or ''}]", stacklevel=2)


def _segments(path: str) -> list[Segment]:
    segments = parse(path).segments()
    if not segments:
        raise AccessFailure(FailureKind.ARGUMENT, f"name must not be null or empty [{path}]", stacklevel=2)
    return segments


def _read_segment(current: Any, segment: Segment) -> Any:
    for name in segment.names():
        current = get(current, name)
    return current


def read(root: Any, path: str) -> Any:
    """
    Return the element addressed by `path`, starting from `root`.

    Missing mapping keys and collection elements read as None.

    :raises AccessFailure: ARGUMENT for a None root or a path without names;
        any failure along the path, wrapped with ``[target=..., name=...]``.
    """
    _check(root, path)
    _LOG.trace("read %s", path)
    try:
        segments = _segments(path)
        current = root
        with _LOG.prefix_with(f"[read {path}]"):
            for segment in segments:
                current = _read_segment(current, segment)
        return current
    except Exception as exc:
        raise AccessFailure.wrap(details(target=root, name=path), exc)


def write(root: Any, path: str, value: Any) -> Any:
    """
    Store `value` at the element addressed by `path` and return the previous element.

    Intermediate names are read, never written. ``*`` as the last name appends
    to sequences and collections.

    :raises AccessFailure: As read(), wrapped with ``[target=..., name=..., value=...]``.
    """
    _check(root, path)
    _LOG.trace("write %s", path)
    try:
        segments = _segments(path)
        with _LOG.prefix_with(f"[write {path}]"):
            current = root
            for segment in segments[:-1]:
                current = _read_segment(current, segment)
            last = segments[-1]
            if not last.bracketed:
                return put(current, last.base, value)
            if not last.base.is_empty:
                current = get(current, last.base)
            for sub in last.subs[:-1]:
                if not sub.is_empty:
                    current = get(current, sub)
            return put(current, last.subs[-1], value)
    except Exception as exc:
        raise AccessFailure.wrap(details(target=root, name=path, value=value), exc)


def resolve_type(owner: Any, path: str) -> Any:
    """
    Return the declared type of the element `path` addresses inside `owner`.

    Uses type arguments of generic containers (``list[T]``, ``tuple[T, ...]``,
    ``dict[K, V]``), ``Type=name`` qualifiers, field annotations and getter
    return annotations. An empty path returns `owner`.

    :raises AccessFailure: ARGUMENT "property type failure" if a type cannot be
        determined, wrapped with ``[type=..., name=...]``.
    """
    if not path:
        return owner
    try:
        current = owner
        for segment in parse(path):
            for name in segment.names():
                current = _member_type(current, name)
        return current
    except Exception as exc:
        raise AccessFailure.wrap(details(type=owner, name=path), exc)


def _member_type(owner: Any, name: PathName) -> Any:
    if name.qualifier:
        return find_class(name.qualifier)
    annotation = unwrap_annotation(owner)
    cls = runtime_class(annotation)
    args = typing.get_args(annotation)
    if cls is not None and args and not issubclass(cls, SCALAR_SEQUENCE_TYPES):
        if issubclass(cls, tuple):
            if len(args) == 2 and args[1] is Ellipsis:
                return args[0]
            if is_index(name.text) and not name.is_wildcard:
                index = decode_int(name.text)
                if 0 <= index < len(args):
                    return args[index]
        elif issubclass(cls, Mapping) and len(args) == 2:
            return args[1]
        elif issubclass(cls, (Collection, Iterable)):
            return args[0]
    if cls is None:
        raise _type_failure(owner, name)
    field = resolve_field(cls, None, name.text, ResolveMode.AUTO)
    if field is not None and not is_unknown(field.type):
        return field.type
    getter = resolve_getter(cls, None, name.text, ResolveMode.AUTO)
    if getter is not None and not is_unknown(getter.returns):
        return getter.returns
    raise _type_failure(owner, name)


def _type_failure(owner: Any, name: PathName) -> AccessFailure:
    return AccessFailure(FailureKind.ARGUMENT, f"property type failure {details(type=owner, name=name.text)}")


# End of file: src/mstair/beanpath/access/property_path.py
