# File: src/mstair/beanpath/access/container_dispatcher.py
"""
Get and put of single elements by name, dispatched on the container shape.

Shapes, checked in registry order:

- IndexedShape: sequences other than str/bytes; names are integer indexes.
- KeyedShape: mappings; names are coerced to the mapping's key type.
- CollectionShape: sets and other sized collections; names are positions or
  element values.
- IterableShape: other iterables, read-only by position.
- BeanShape: everything else; names address fields, getters and setters.

Additional shapes can be placed in front of the defaults with register_shape().
"""

from __future__ import annotations

import typing
from abc import ABC, abstractmethod
from collections.abc import Collection, Iterable, Mapping, MutableMapping, MutableSequence, Sequence
from enum import Enum
from typing import Any, ClassVar

from mstair.beanpath.access.failure import AccessFailure, FailureKind
from mstair.beanpath.access.member_resolver import (
    FieldMember,
    ResolveMode,
    find_fields,
    instance_field,
    resolve_field,
    resolve_getter,
    resolve_setter,
)
from mstair.beanpath.access.path_parser import PathName, is_index, parse_name
from mstair.beanpath.access.type_coercer import coerce, find_class
from mstair.beanpath.base.string_helpers import details
from mstair.beanpath.base.types import MISSING, SCALAR_SEQUENCE_TYPES, runtime_class
from mstair.beanpath.xlogging.logger_factory import create_logger


__all__ = [
    "BeanShape",
    "CollectionShape",
    "ContainerShape",
    "IndexedShape",
    "IterableShape",
    "KeyedShape",
    "ShapeKind",
    "get",
    "put",
    "register_shape",
    "shape_of",
]

_LOG = create_logger(__name__)


class ShapeKind(Enum):
    INDEXED = "INDEXED"
    KEYED = "KEYED"
    COLLECTION = "COLLECTION"
    ITERABLE = "ITERABLE"
    BEAN = "BEAN"


class ContainerShape(ABC):
    """Capability variant: how elements of an accepted container are addressed."""

    kind: ClassVar[ShapeKind]

    @abstractmethod
    def accepts(self, container: Any) -> bool:
        """Return True if this shape handles `container`."""

    @abstractmethod
    def get(self, container: Any, name: PathName) -> Any:
        """Return the element addressed by `name`, or None if it is absent."""

    @abstractmethod
    def put(self, container: Any, name: PathName, value: Any) -> Any:
        """Store `value` at `name` and return the previous element."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def _is_scalar(container: Any) -> bool:
    return isinstance(container, SCALAR_SEQUENCE_TYPES)


def _index(name: PathName) -> int:
    return coerce(name.text, int)


def _immutable(container: Any) -> AccessFailure:
    return AccessFailure(FailureKind.SUPPORT, f"immutable container {details(type=type(container))}", stacklevel=2)


def _element_at(container: Iterable[Any], index: int) -> Any:
    """Return the element at an iteration position, raising BOUNDS past the end."""
    count = 0
    if index >= 0:
        for element in container:
            if count == index:
                return element
            count += 1
    else:
        count = sum(1 for _ in container)
    raise AccessFailure.bounds(index, count)


class IndexedShape(ContainerShape):
    """Sequences: ``list``, ``tuple``, ``deque``, ``range`` and friends."""

    kind = ShapeKind.INDEXED

    def accepts(self, container: Any) -> bool:
        return isinstance(container, Sequence) and not _is_scalar(container)

    def get(self, container: Sequence[Any], name: PathName) -> Any:
        if name.is_wildcard:
            raise AccessFailure(
                FailureKind.ARGUMENT, f"wildcard not readable {details(type=type(container), name=name)}"
            )
        index = self._checked(container, name)
        return container[index]

    def put(self, container: Sequence[Any], name: PathName, value: Any) -> Any:
        if name.is_wildcard:
            if not isinstance(container, MutableSequence):
                raise _immutable(container)
            container.append(value)
            return None
        index = self._checked(container, name)
        if not isinstance(container, MutableSequence):
            raise _immutable(container)
        before = container[index]
        container[index] = value
        return before

    @staticmethod
    def _checked(container: Sequence[Any], name: PathName) -> int:
        index, size = _index(name), len(container)
        if not 0 <= index < size:
            raise AccessFailure.bounds(index, size)
        return index


class KeyedShape(ContainerShape):
    """Mappings; keys are coerced from text to the inferred key type."""

    kind = ShapeKind.KEYED

    def accepts(self, container: Any) -> bool:
        return isinstance(container, Mapping)

    def get(self, container: Mapping[Any, Any], name: PathName) -> Any:
        return container.get(self.key(container, name))

    def put(self, container: Mapping[Any, Any], name: PathName, value: Any) -> Any:
        if not isinstance(container, MutableMapping):
            raise _immutable(container)
        key = self.key(container, name)
        before = container.get(key)
        container[key] = value
        return before

    @classmethod
    def key(cls, container: Mapping[Any, Any], name: PathName) -> Any:
        key_type = find_class(name.qualifier) if name.qualifier else cls.key_type(container)
        return coerce(name.text, key_type)

    @staticmethod
    def key_type(container: Mapping[Any, Any]) -> Any:
        """
        Infer the key type of a mapping.

        Order: type arguments of a parameterized instance or class, then the
        type of the first key, then ``str``.
        """
        args = typing.get_args(getattr(container, "__orig_class__", None))
        if not args:
            for base in getattr(type(container), "__orig_bases__", ()):
                base_cls = runtime_class(base)
                if base_cls is not None and issubclass(base_cls, Mapping):
                    args = typing.get_args(base)
                    break
        if args and runtime_class(args[0]) not in (None, object):
            return args[0]
        if container:
            return type(next(iter(container)))
        return str


class CollectionShape(ContainerShape):
    """
    Sized collections without index semantics, such as sets.

    Index-like names address positions in iteration order unless a type
    qualifier is given; other names are coerced to the element type and
    matched by equality.
    """

    kind = ShapeKind.COLLECTION

    def accepts(self, container: Any) -> bool:
        return isinstance(container, Collection) and not _is_scalar(container)

    def get(self, container: Collection[Any], name: PathName) -> Any:
        if name.is_wildcard:
            return None
        if name.qualifier is None and is_index(name.text):
            return _element_at(container, _index(name))
        probe = self._probe(container, name, None)
        return next((element for element in container if element == probe), None)

    def put(self, container: Collection[Any], name: PathName, value: Any) -> Any:
        if name.is_wildcard:
            self._add(container, value)
            return None
        if name.qualifier is None and is_index(name.text):
            found = _element_at(container, _index(name))
        else:
            probe = self._probe(container, name, value)
            found = next((element for element in container if element == probe), MISSING)
        if found is MISSING:
            if value is not None:
                self._add(container, value)
            return None
        self._remove(container, found)
        if value is not None:
            self._add(container, value)
        return found

    @staticmethod
    def _probe(container: Collection[Any], name: PathName, value: Any) -> Any:
        if name.qualifier:
            probe_type: Any = find_class(name.qualifier)
        elif container:
            probe_type = type(next(iter(container)))
        elif value is not None:
            probe_type = type(value)
        else:
            probe_type = None
        if probe_type is None or probe_type is object:
            raise AccessFailure(FailureKind.ARGUMENT, f"could not determine type {details(name=name)}")
        return coerce(name.text, probe_type)

    @staticmethod
    def _add(container: Any, value: Any) -> None:
        for method in ("add", "append"):
            if callable(getattr(container, method, None)):
                getattr(container, method)(value)
                return
        raise _immutable(container)

    @staticmethod
    def _remove(container: Any, element: Any) -> None:
        if not callable(getattr(container, "remove", None)):
            raise _immutable(container)
        container.remove(element)


class IterableShape(ContainerShape):
    """Other iterables: readable by position, otherwise treated as beans."""

    kind = ShapeKind.ITERABLE

    def __init__(self, bean: BeanShape) -> None:
        self.bean = bean

    def accepts(self, container: Any) -> bool:
        return isinstance(container, Iterable) and not _is_scalar(container)

    def get(self, container: Iterable[Any], name: PathName) -> Any:
        if name.is_wildcard:
            raise AccessFailure(
                FailureKind.ARGUMENT, f"wildcard not readable {details(type=type(container), name=name)}"
            )
        if name.qualifier is None and is_index(name.text):
            return _element_at(container, _index(name))
        return self.bean.get(container, name)

    def put(self, container: Iterable[Any], name: PathName, value: Any) -> Any:
        if name.qualifier is None and is_index(name.text):
            raise AccessFailure(
                FailureKind.SUPPORT, f"positional write not supported {details(type=type(container), name=name)}"
            )
        return self.bean.put(container, name, value)


class BeanShape(ContainerShape):
    """
    Plain objects, addressed through fields, getters and setters.

    A ``Type=name`` qualifier resolves members in TYPED mode against the named
    type; otherwise AUTO mode is used with the written value's type. Plain
    instance attributes are used only for names the class does not declare.
    A setter is used only together with a getter for the same property; the
    getter supplies the previous value. Otherwise writes go to the field.
    """

    kind = ShapeKind.BEAN

    def accepts(self, container: Any) -> bool:
        return True

    def get(self, container: Any, name: PathName) -> Any:
        owner = type(container)
        expected, mode = self._context(name, None)
        getter = resolve_getter(owner, expected, name.text, mode)
        if getter is not None:
            return getter.invoke(container)
        field = self._field(container, expected, name, mode)
        if field is not None:
            return field.get(container)
        raise self._invalid(owner, name)

    def put(self, container: Any, name: PathName, value: Any) -> Any:
        owner = type(container)
        expected, mode = self._context(name, type(value) if value is not None else None)
        setter = resolve_setter(owner, expected, name.text, mode)
        getter = resolve_getter(owner, expected, name.text, mode) if setter is not None else None
        if setter is not None and getter is not None:
            before = getter.invoke(container)
            setter.invoke(container, value)
            return before
        field = self._field(container, expected, name, mode)
        if field is not None:
            return field.set(container, value)
        raise self._invalid(owner, name)

    @staticmethod
    def _context(name: PathName, value_type: Any) -> tuple[Any, ResolveMode]:
        if name.qualifier:
            return find_class(name.qualifier), ResolveMode.TYPED
        return value_type, ResolveMode.AUTO

    @staticmethod
    def _field(container: Any, expected: Any, name: PathName, mode: ResolveMode) -> FieldMember | None:
        field = resolve_field(type(container), expected, name.text, mode)
        if field is None and mode is ResolveMode.AUTO and not find_fields(type(container), (name.text,)):
            field = instance_field(container, name.text)
        return field

    @staticmethod
    def _invalid(owner: type, name: PathName) -> AccessFailure:
        return AccessFailure(
            FailureKind.ARGUMENT, f"invalid property {details(type=owner, name=name.text)}", stacklevel=2
        )


_BEAN_SHAPE = BeanShape()
_SHAPES: list[ContainerShape] = [
    IndexedShape(),
    KeyedShape(),
    CollectionShape(),
    IterableShape(_BEAN_SHAPE),
    _BEAN_SHAPE,
]


def register_shape(shape: ContainerShape) -> None:
    """Place `shape` in front of the registered shapes."""
    _SHAPES.insert(0, shape)


def shape_of(container: Any) -> ContainerShape:
    """Return the first registered shape accepting `container`."""
    return next(shape for shape in _SHAPES if shape.accepts(container))


def _checked(container: Any, name: str | PathName | None) -> PathName:
    if container is None:
        raise AccessFailure(FailureKind.ARGUMENT, "target must not be null", stacklevel=2)
    path_name = parse_name(name) if isinstance(name, str) else name
    if path_name is None or path_name.is_empty:
        raise AccessFailure(
            FailureKind.ARGUMENT, f"name must not be null or empty [{name if name is not None else ''}]", stacklevel=2
        )
    return path_name


def get(container: Any, name: str | PathName) -> Any:
    """
    Return the element of `container` addressed by a single name.

    :raises AccessFailure: ARGUMENT for a None container or an empty name,
        plus the failures of the selected shape.
    """
    path_name = _checked(container, name)
    shape = shape_of(container)
    _LOG.trace("get %s from %s via %r", path_name, type(container), shape)
    return shape.get(container, path_name)


def put(container: Any, name: str | PathName, value: Any) -> Any:
    """Store `value` in `container` under a single name and return the previous element."""
    path_name = _checked(container, name)
    shape = shape_of(container)
    _LOG.trace("put %s into %s via %r", path_name, type(container), shape)
    return shape.put(container, path_name, value)


# End of file: src/mstair/beanpath/access/container_dispatcher.py
