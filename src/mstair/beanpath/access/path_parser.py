# File: src/mstair/beanpath/access/path_parser.py
"""
Tokenizer for property path expressions.

A path is a sequence of segments separated by ``.`` or ``,``. Each segment has a
base name followed by any number of bracket groups whose content is a ``,``
separated list of sub-names:

    items[0].name           base "items", sub "0", then base "name"
    matrix[1][2]            base "matrix", subs "1", "2"
    table[][key]            base "table", subs "", "key"
    int=12                  base "12" qualified by type name "int"
    (decimal.Decimal=1.5)   parenthesized base, may contain "." and ","

A backslash makes the next character literal. Empty names between adjacent
separators are dropped, so ``a,,b`` addresses the same element as ``a,b``.
Trailing empty entries of a bracket group are dropped too: ``a[b,]`` is ``a[b]``.

A qualifier reaches back to the start of its segment: ``a.int=1`` is the name
``1`` qualified by ``a.int``. Write ``a,int=1`` or ``a[int=1]`` instead.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Final

from mstair.beanpath.access.failure import AccessFailure, FailureKind
from mstair.beanpath.base.string_helpers import details


__all__ = [
    "PathExpression",
    "PathName",
    "Segment",
    "WILDCARD",
    "escape",
    "is_index",
    "parse",
    "parse_name",
    "split_qualifier",
]

WILDCARD: Final[str] = "*"

_SEPARATORS: Final[str] = ".,"
_RUN_STOPS: Final[str] = ".,()[]"
_QUALIFIER_STOPS: Final[str] = ",=()[]"
_ESCAPED_RX: Final[re.Pattern[str]] = re.compile(r"([.,()\[\]=\\])")
_UNESCAPE_RX: Final[re.Pattern[str]] = re.compile(r"\\(.)", re.DOTALL)
_INDEX_RX: Final[re.Pattern[str]] = re.compile(r"-?\d+|\*|(#|0x)[0-9a-fA-F]*|0[0-7]*")


@dataclass(frozen=True, slots=True)
class PathName:
    """A single name of a path, optionally qualified by a type name."""

    text: str
    qualifier: str | None = None

    def __str__(self) -> str:
        if self.qualifier is None:
            return escape(self.text)
        return f"{escape(self.qualifier)}={escape(self.text)}"

    @property
    def is_wildcard(self) -> bool:
        return self.text == WILDCARD and self.qualifier is None

    @property
    def is_empty(self) -> bool:
        return not self.text and self.qualifier is None


@dataclass(frozen=True, slots=True)
class Segment:
    """
    One path unit: a base name plus the sub-names of its bracket groups.

    An empty base with bracket groups addresses the current object.
    """

    base: PathName
    subs: tuple[PathName, ...] = ()
    separator: str = ""

    def __str__(self) -> str:
        text = str(self.base)
        if self.subs:
            text += f"[{self.key}]"
        return text + self.separator

    @property
    def bracketed(self) -> bool:
        return bool(self.subs)

    @property
    def key(self) -> str:
        """The bracket sub-names joined back into path text."""
        return ",".join(str(sub) for sub in self.subs)

    def names(self) -> Iterator[PathName]:
        """Yield the non-empty base and sub-names in access order."""
        if not self.base.is_empty:
            yield self.base
        for sub in self.subs:
            if not sub.is_empty:
                yield sub


@dataclass(frozen=True, slots=True)
class PathExpression:
    """
    Parsed view of a path string.

    Iteration tokenizes lazily and restarts from the beginning every time.
    """

    text: str

    def __iter__(self) -> Iterator[Segment]:
        return _Tokenizer(self.text).segments()

    def __str__(self) -> str:
        return self.text

    def segments(self) -> list[Segment]:
        return list(self)


def parse(text: str) -> PathExpression:
    """
    Return the path expression for `text`.

    :raises AccessFailure: ARGUMENT if `text` is not a string; syntax errors are
        raised while iterating.
    """
    if not isinstance(text, str):
        raise AccessFailure(FailureKind.ARGUMENT, f"path must be a string {details(path=text)}")
    return PathExpression(text)


def parse_name(text: str) -> PathName:
    """Return a single name, splitting off a ``Type=`` qualifier and removing escapes."""
    qualifier, name = split_qualifier(text)
    return PathName(name, qualifier)


def split_qualifier(text: str) -> tuple[str | None, str]:
    """
    Split escaped name text on its first unescaped ``=``.

    :return: (qualifier or None, name), both with escapes removed.
    """
    index = 0
    while index < len(text):
        char = text[index]
        if char == "\\":
            index += 2
            continue
        if char == "=":
            return _unescape(text[:index]).strip(), _unescape(text[index + 1 :])
        index += 1
    return None, _unescape(text)


def escape(text: str) -> str:
    """Escape every character that has a meaning in path syntax."""
    return _ESCAPED_RX.sub(r"\\\1", text)


def is_index(text: str) -> bool:
    """Return True if the text looks like a (possibly hex, octal or wildcard) index."""
    return _INDEX_RX.fullmatch(text) is not None


def _unescape(text: str) -> str:
    return _UNESCAPE_RX.sub(r"\1", text)


def _split_list(text: str) -> list[str]:
    """Split escaped bracket content on unescaped commas, dropping trailing empty parts."""
    parts: list[str] = []
    start = index = 0
    while index < len(text):
        char = text[index]
        if char == "\\":
            index += 2
            continue
        if char == ",":
            parts.append(text[start:index])
            start = index + 1
        index += 1
    parts.append(text[start:])
    # "[]" keeps its single empty part
    while len(parts) > 1 and not parts[-1]:
        parts.pop()
    return parts


class _Tokenizer:
    """Hand-written scanner producing Segments from path text."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def segments(self) -> Iterator[Segment]:
        while self.pos < len(self.text):
            if self._peek() in _SEPARATORS:
                self.pos += 1
                continue
            yield self._segment()

    def _peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def _fail(self, reason: str) -> AccessFailure:
        return AccessFailure(
            FailureKind.ARGUMENT,
            f"invalid path {details(path=self.text, position=self.pos, reason=reason)}",
            stacklevel=2,
        )

    def _scan(self, stops: str) -> str:
        """Advance to the next unescaped stop character and return the raw text passed."""
        start = self.pos
        while self.pos < len(self.text):
            char = self.text[self.pos]
            if char == "\\":
                self.pos = min(self.pos + 2, len(self.text))
                continue
            if char in stops:
                break
            self.pos += 1
        return self.text[start : self.pos]

    def _segment(self) -> Segment:
        base = self._base()
        subs: list[PathName] = []
        while self._peek() == "[":
            subs.extend(self._bracket())
        char = self._peek()
        if char in (")", "]"):
            raise self._fail(f"unexpected '{char}'")
        separator = ""
        if char and char in _SEPARATORS:
            separator = char
            self.pos += 1
        return Segment(base, tuple(subs), separator)

    def _base(self) -> PathName:
        if self._peek() == "(":
            self.pos += 1
            raw = self._scan(")")
            if self._peek() != ")":
                raise self._fail("unterminated '('")
            self.pos += 1
            return parse_name(raw)

        start = self.pos
        qualifier = self._scan(_QUALIFIER_STOPS)
        if self._peek() == "=":
            self.pos += 1
            return PathName(_unescape(self._scan(_RUN_STOPS)), _unescape(qualifier).strip())
        self.pos = start
        return PathName(_unescape(self._scan(_RUN_STOPS)))

    def _bracket(self) -> list[PathName]:
        self.pos += 1
        raw = self._scan("]")
        if self._peek() != "]":
            raise self._fail("unterminated '['")
        self.pos += 1
        return [parse_name(part) for part in _split_list(raw)]


# End of file: src/mstair/beanpath/access/path_parser.py
