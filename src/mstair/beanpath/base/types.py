# File: src/mstair/beanpath/base/types.py
"""
Sentinels and helpers for working with runtime type annotations.

Annotations found on fields and methods arrive in many shapes: plain classes,
parameterized generics (``list[int]``), unions (``int | None``),
``Annotated[...]`` wrappers, ``NewType`` and ``type`` alias statements. The
helpers here reduce them to something the access engine can compare.
"""

from __future__ import annotations

import types
from decimal import Decimal
from fractions import Fraction
from typing import (
    Annotated,
    Any,
    Final,
    NewType,
    Self,
    TypeAliasType,
    Union,  # pyright: ignore[reportDeprecated]
    get_args,
    get_origin,
)


PRIMITIVE_TYPES: Final[tuple[type, ...]] = (
    int,
    float,
    complex,
    bool,
    str,
    bytes,
    Decimal,
    Fraction,
    type(None),
)
SCALAR_SEQUENCE_TYPES: Final[tuple[type, ...]] = (str, bytes, bytearray, memoryview)
NONE_TYPE: Final[type] = type(None)


class Sentinel:
    """
    Singleton base class for sentinel markers.

    Behaves as a falsy, unique marker distinct from None.
    """

    __slots__ = ()

    _repr_name: str = "SENTINEL"

    def __new__(cls) -> Self:
        if "_instance" not in cls.__dict__:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return self._repr_name

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> Self:
        return self

    def __deepcopy__(self, _memo: dict[int, object]) -> Self:
        return self

    def __reduce__(self) -> tuple[type, tuple[()]]:
        return (type(self), ())


class Missing(Sentinel):
    """Singleton indicating an absent argument or value."""

    _repr_name = "MISSING"


MISSING: Final[Missing] = Missing()


def is_union(annotation: Any) -> bool:
    """Return True for ``X | Y`` and ``Union[X, Y]`` annotations."""
    origin = get_origin(annotation)
    return origin is Union or origin is types.UnionType  # pyright: ignore[reportDeprecated]


def unwrap_annotation(annotation: Any) -> Any:
    """
    Strip annotation wrappers that do not change the runtime type.

    - ``Annotated[T, ...]`` -> T
    - ``T | None`` -> T (only when exactly one non-None arm remains)
    - ``NewType("N", T)`` -> T
    - ``type N = T`` -> T

    :param annotation: Any annotation object, or None for "unknown".
    :return: The unwrapped annotation, or the input unchanged.
    """
    previous: Any = MISSING
    while annotation is not previous:
        previous = annotation
        if isinstance(annotation, TypeAliasType):
            annotation = annotation.__value__
        elif isinstance(annotation, NewType):
            annotation = annotation.__supertype__
        elif get_origin(annotation) is Annotated:
            annotation = get_args(annotation)[0]
        elif is_union(annotation):
            arms = [arm for arm in get_args(annotation) if arm is not NONE_TYPE]
            if len(arms) == 1:
                annotation = arms[0]
    return annotation


def runtime_class(annotation: Any) -> type | None:
    """
    Return the runtime class behind an annotation, or None if there is none.

    ``list[int]`` maps to ``list``; unions, type variables and strings map to None.
    """
    annotation = unwrap_annotation(annotation)
    if isinstance(annotation, type):
        return annotation
    origin = get_origin(annotation)
    if isinstance(origin, type):
        return origin
    return None


def is_unknown(annotation: Any) -> bool:
    """Return True when an annotation carries no usable type information."""
    annotation = unwrap_annotation(annotation)
    return annotation is None or annotation is Any or annotation is object


# End of file: src/mstair/beanpath/base/types.py
