# File: src/mstair/beanpath/base/string_helpers.py
"""
String helpers used for member naming and for rendering objects into messages.
"""

from __future__ import annotations

import builtins
import types
from collections.abc import Iterable
from typing import Any

from mstair.beanpath.base import config as cfg


def to_capfirst(s: str) -> str:
    """Capitalize the first character of a string, leaving the rest unchanged."""
    return s[:1].upper() + s[1:]


def to_lowerfirst(s: str) -> str:
    """Lower-case the first character of a string, leaving the rest unchanged."""
    return s[:1].lower() + s[1:]


def dedupe(items: Iterable[str]) -> list[str]:
    """Return the items in first-seen order without duplicates."""
    return list(dict.fromkeys(items))


def maybe_truncate(text: str, max_len: int) -> str:
    """Truncate the text if it exceeds the maximum length."""
    if len(text) > max_len:
        text = text[: max_len - 15] + "... [TRUNCATED]"
    return text


def type_name(tp: type) -> str:
    """Return the qualified name of a class; builtins keep their short name."""
    module = getattr(tp, "__module__", None)
    qualname = getattr(tp, "__qualname__", None) or getattr(tp, "__name__", repr(tp))
    if not module or module == builtins.__name__:
        return qualname
    return f"{module}.{qualname}"


def pretty(value: Any) -> str:
    """
    Render a value for a failure or log message.

    Classes render by qualified name, functions by qualified name, everything
    else by ``str()``. Output is truncated to ``config.message_width()``.
    """
    text: str
    if isinstance(value, type):
        text = type_name(value)
    elif isinstance(value, (types.FunctionType, types.BuiltinFunctionType, types.MethodType)):
        text = getattr(value, "__qualname__", value.__name__)
    elif isinstance(value, str):
        text = value
    else:
        try:
            text = str(value)
        except Exception as exc:
            text = f"<{type(value).__name__}: {type(exc).__name__}>"
    return maybe_truncate(text, cfg.message_width())


def details(**pairs: Any) -> str:
    """
    Return a bracketed detail list such as ``[target=..., name=...]``.

    Values are rendered with pretty(), keys keep their argument order.
    """
    return "[" + ", ".join(f"{key}={pretty(value)}" for key, value in pairs.items()) + "]"


# End of file: src/mstair/beanpath/base/string_helpers.py
