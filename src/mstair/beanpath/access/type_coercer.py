# File: src/mstair/beanpath/access/type_coercer.py
"""
Conversion of path text into typed values.

Mapping keys and collection probes arrive as text and must be turned into
values of the container's key or element type before lookup. coerce() picks a
conversion by target type; find_class() turns a type name into a class.
"""

from __future__ import annotations

import builtins
import importlib
from collections.abc import Callable
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import Any, Final

from mstair.beanpath.access.failure import AccessFailure, FailureKind, NumberFormatError, invoke_target
from mstair.beanpath.base.string_helpers import details
from mstair.beanpath.base.types import NONE_TYPE, runtime_class


__all__ = ["Char", "coerce", "decode_int", "find_class"]


class Char(str):
    """Marker type for single-character keys; coerce() keeps the first character of the text."""


_DIGITS: Final[dict[int, frozenset[str]]] = {
    8: frozenset("01234567"),
    10: frozenset("0123456789"),
    16: frozenset("0123456789abcdefABCDEF"),
}

_CLASS_ALIASES: Final[dict[str, type]] = {
    "long": int,
    "Long": int,
    "Integer": int,
    "short": int,
    "Short": int,
    "byte": int,
    "Byte": int,
    "BigInteger": int,
    "double": float,
    "Double": float,
    "Float": float,
    "boolean": bool,
    "Boolean": bool,
    "char": Char,
    "Character": Char,
    "String": str,
    "Object": object,
    "class": type,
    "Class": type,
    "void": NONE_TYPE,
    "None": NONE_TYPE,
    "BigDecimal": Decimal,
    "Decimal": Decimal,
    "Fraction": Fraction,
}


def decode_int(text: str) -> int:
    """
    Decode an integer with an optional sign and radix prefix.

    ``0x``, ``0X`` and ``#`` select hexadecimal, a leading ``0`` selects octal,
    anything else is decimal. Whitespace and underscores are not accepted.

    :raises NumberFormatError: If the text is not a valid integer literal.
    """
    if not text:
        raise NumberFormatError("zero length string")
    index, sign = 0, 1
    if text[0] in "+-":
        sign = -1 if text[0] == "-" else 1
        index = 1
    if text.startswith(("0x", "0X"), index):
        radix, index = 16, index + 2
    elif text.startswith("#", index):
        radix, index = 16, index + 1
    elif text.startswith("0", index) and len(text) > index + 1:
        radix, index = 8, index + 1
    else:
        radix = 10
    digits = text[index:]
    if not digits or not set(digits) <= _DIGITS[radix]:
        raise NumberFormatError(f"for input string: {text!r}")
    return sign * int(digits, radix)


def find_class(name: str) -> type:
    """
    Return the class named by `name`.

    Lookup order: well-known aliases (``long``, ``String``, ``Decimal``, ...),
    then ``module.Qualified.Name`` with the longest importable module prefix,
    then the builtins namespace.

    :raises AccessFailure: CLASS if no class is found.
    """
    name = name.strip()
    if name in _CLASS_ALIASES:
        return _CLASS_ALIASES[name]
    if "." in name:
        found = _import_class(name)
        if found is not None:
            return found
    candidate = getattr(builtins, name, None)
    if isinstance(candidate, type):
        return candidate
    raise AccessFailure(FailureKind.CLASS, details(name=name))


def _import_class(name: str) -> type | None:
    parts = name.split(".")
    for cut in range(len(parts) - 1, 0, -1):
        try:
            value: Any = importlib.import_module(".".join(parts[:cut]))
        except ImportError:
            continue
        for attr in parts[cut:]:
            value = getattr(value, attr, None)
            if value is None:
                break
        if isinstance(value, type):
            return value
    return None


def coerce(text: str, target_type: Any) -> Any:
    """
    Convert `text` into a value of `target_type`.

    :param text: Text taken from a path expression.
    :param target_type: Target class or annotation (``int``, ``list[int]``, ...).
    :return: The converted value.
    :raises AccessFailure: NUMBER for malformed numbers, CLASS for unsupported
        target types, ARGUMENT for unknown enum members, TARGET when a
        constructor raises.
    """
    tp = runtime_class(target_type)
    if tp is None or tp is object or tp is NONE_TYPE:
        raise AccessFailure.unsupported_type(target_type)
    if tp is Char:
        if not text:
            raise AccessFailure(FailureKind.ARGUMENT, f"empty character {details(type=tp, text=text)}")
        return text[0]
    if issubclass(tp, str):
        return text if tp is str else invoke_target(tp, text)
    if issubclass(tp, bool):
        return text.strip().lower() == "true"
    if issubclass(tp, Enum):
        try:
            return tp[text]
        except KeyError as exc:
            raise AccessFailure(
                FailureKind.ARGUMENT, f"unknown constant {details(type=tp, name=text)}", exc
            ) from exc
    if issubclass(tp, int):
        value = _number(decode_int, tp, text)
        return value if tp is int else invoke_target(tp, value)
    if issubclass(tp, (float, complex, Decimal, Fraction)):
        return _number(tp, tp, text)
    if issubclass(tp, (bytes, bytearray)):
        return tp(text.encode("utf-8"))
    if issubclass(tp, type):
        return find_class(text)
    return invoke_target(tp, text, message=details(type=tp, text=text))


def _number(convert: Callable[[str], Any], tp: type, text: str) -> Any:
    try:
        return convert(text)
    except (ArithmeticError, ValueError) as exc:
        raise AccessFailure(FailureKind.NUMBER, details(type=tp, text=text), exc) from exc


# End of file: src/mstair/beanpath/access/type_coercer.py
