# File: src/mstair/beanpath/access/failure.py
"""
Failure classification for reflective access.

Every error raised by the access engine is an AccessFailure carrying one
FailureKind out of a closed set. Foreign exceptions are classified when they
cross an access boundary and are kept as ``__cause__``, so the original error
stays reachable through the cause chain.

Wrapping styles (WrapStyle) decide how a boundary message combines with an
existing failure:

- WRAPPED / DEFAULT: a new failure of the same kind is chained on top.
- MERGED: the message replaces the inner failure's message, same kind and cause.
- UNWRAPPED: the inner failure is returned unchanged.

SUPPORT failures are never wrapped, whatever the style.

Example:
    >>> try:
    ...     read([1, 2], "5")
    ... except AccessFailure as failure:
    ...     failure.kind
    <FailureKind.BOUNDS: 'index out of bounds failure'>
"""

from __future__ import annotations

import inspect
import traceback
from collections.abc import Callable, Iterator
from decimal import InvalidOperation
from enum import Enum
from types import FrameType
from typing import Any, Final

from mstair.beanpath.base import config as cfg
from mstair.beanpath.base.string_helpers import details, pretty
from mstair.beanpath.xlogging.logger_factory import create_logger


__all__ = [
    "AccessFailure",
    "FailureKind",
    "FailureMode",
    "NumberFormatError",
    "WrapStyle",
    "classify",
    "handle_failure",
    "invoke_target",
]

_LOG = create_logger(__name__)


class FailureKind(Enum):
    """Closed set of access failure kinds; values are the kind messages."""

    UNKNOWN = "unknown failure"
    BOUNDS = "index out of bounds failure"
    NUMBER = "number format failure"
    ARGUMENT = "illegal argument failure"
    ACCESS = "illegal access failure"
    TARGET = "invocation target failure"
    FIELD = "invalid field failure"
    METHOD = "invalid method failure"
    CLASS = "invalid class failure"
    CREATION = "instantiation failure"
    SECURITY = "security failure"
    SUPPORT = "support failure"


class WrapStyle(Enum):
    """How a boundary message combines with an existing failure."""

    DEFAULT = "DEFAULT"
    MERGED = "MERGED"
    WRAPPED = "WRAPPED"
    UNWRAPPED = "UNWRAPPED"


class FailureMode(Enum):
    """Per-call failure handling for the reflective helpers."""

    DEFAULT = "DEFAULT"
    THROW_EXCEPTION = "THROW_EXCEPTION"
    RETURN_NONE = "RETURN_NONE"


UNWRAPPED_KINDS: Final[frozenset[FailureKind]] = frozenset({FailureKind.SUPPORT})


class NumberFormatError(ValueError):
    """Raised when text cannot be decoded as a number."""


class AccessFailure(Exception):
    """
    Classified access error.

    :ivar kind: The FailureKind of this failure.
    :ivar origin: Frame summary of the call site that created the failure,
        skipping the failure factory frames.
    """

    kind: FailureKind
    origin: traceback.FrameSummary | None

    def __init__(
        self,
        kind: FailureKind,
        message: str | None = None,
        cause: BaseException | None = None,
        *,
        stacklevel: int = 1,
    ) -> None:
        """
        Create a failure of the given kind.

        A message starting with ``[`` is prefixed with the kind message; an
        empty message is replaced by the kind message.

        :param kind: Failure kind.
        :param message: Detail message.
        :param cause: Underlying exception, stored as ``__cause__``.
        :param stacklevel: Frames above the caller to report as origin.
        """
        super().__init__(_compose(kind, message))
        self.kind = kind
        self.__cause__ = cause
        self.origin = _caller_origin(stacklevel + 1)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind.name}, {str(self)!r})"

    @property
    def cause(self) -> BaseException | None:
        """The exception this failure wraps, if any."""
        return self.__cause__

    @property
    def message(self) -> str:
        return str(self)

    @classmethod
    def bounds(cls, index: int, size: int) -> AccessFailure:
        """Return a BOUNDS failure reporting an index against a container size."""
        return cls(FailureKind.BOUNDS, f"index out of bounds {details(index=index, size=size)}", stacklevel=2)

    @classmethod
    def unsupported_type(cls, tp: Any) -> AccessFailure:
        """Return a CLASS failure for a type that cannot be handled."""
        return cls(FailureKind.CLASS, f"type not supported [{pretty(tp)}]", stacklevel=2)

    @classmethod
    def unsupported_mode(cls, mode: Any, cause: BaseException | None = None) -> AccessFailure:
        """Return a SUPPORT failure naming an unsupported mode or relation value."""
        return cls(FailureKind.SUPPORT, f"mode not supported [{mode}]", cause, stacklevel=2)

    @classmethod
    def wrap(
        cls,
        message: str,
        cause: BaseException,
        style: WrapStyle | None = None,
    ) -> AccessFailure:
        """
        Classify `cause` and combine it with a boundary `message`.

        :param message: Boundary message, usually a details() list.
        :param cause: Exception caught at the boundary.
        :param style: Wrapping style; defaults to config.failure_style().
        :return: The failure to raise.
        """
        style = style or WrapStyle(cfg.failure_style())
        if isinstance(cause, AccessFailure):
            if cause.kind in UNWRAPPED_KINDS or style is WrapStyle.UNWRAPPED:
                return cause
            if style is WrapStyle.MERGED:
                return cls(cause.kind, message, cause.cause, stacklevel=2)
            return cls(cause.kind, message, cause, stacklevel=2)
        kind = classify(cause)
        _LOG.debug("classified %s as %s", type(cause).__name__, kind.name)
        return cls(kind, message, cause, stacklevel=2)

    def failures(self) -> Iterator[AccessFailure]:
        """Yield this failure and every AccessFailure along its cause chain."""
        current: BaseException | None = self
        while isinstance(current, AccessFailure):
            yield current
            current = current.cause

    def get_target[E: BaseException](self, type_: type[E] = BaseException) -> E | AccessFailure:
        """
        Return the foreign exception behind a chain of TARGET failures.

        Non-TARGET failures, and chains that contain a non-TARGET failure or no
        foreign cause of the requested type, return this failure itself.
        """
        if self.kind is not FailureKind.TARGET:
            return self
        cause = self.cause
        while isinstance(cause, AccessFailure):
            if cause.kind is not FailureKind.TARGET:
                return self
            cause = cause.cause
        return cause if isinstance(cause, type_) else self

    def get_root[E: BaseException](self, type_: type[E] = BaseException) -> E | AccessFailure:
        """Return the first non-failure cause in the chain, or this failure if there is none."""
        cause = self.cause
        while isinstance(cause, AccessFailure):
            cause = cause.cause
        return cause if isinstance(cause, type_) else self


_KIND_BY_EXCEPTION: Final[tuple[tuple[type[BaseException], FailureKind], ...]] = (
    (NumberFormatError, FailureKind.NUMBER),
    (InvalidOperation, FailureKind.NUMBER),
    (IndexError, FailureKind.BOUNDS),
    (PermissionError, FailureKind.SECURITY),
    (ImportError, FailureKind.CLASS),
    (NotImplementedError, FailureKind.SUPPORT),
    (AttributeError, FailureKind.FIELD),
    (LookupError, FailureKind.ARGUMENT),
    (ValueError, FailureKind.ARGUMENT),
    (TypeError, FailureKind.ARGUMENT),
)


def classify(exc: BaseException) -> FailureKind:
    """Return the FailureKind for an exception; AccessFailure keeps its own kind."""
    if isinstance(exc, AccessFailure):
        return exc.kind
    for exc_type, kind in _KIND_BY_EXCEPTION:
        if isinstance(exc, exc_type):
            return kind
    return FailureKind.UNKNOWN


def invoke_target(function: Callable[..., Any], *args: Any, message: str | None = None) -> Any:
    """
    Call user code, raising a TARGET failure if it raises.

    :param function: Getter, setter, constructor or other user callable.
    :param args: Positional arguments for the call.
    :param message: Detail message for the failure; defaults to the function and args.
    :return: The call result.
    :raises AccessFailure: TARGET failure with the raised exception as cause.
    """
    try:
        return function(*args)
    except Exception as exc:
        raise AccessFailure(
            FailureKind.TARGET,
            message or details(function=function, args=list(args)),
            exc,
            stacklevel=2,
        ) from exc


def handle_failure(mode: FailureMode, failure: AccessFailure) -> None:
    """
    Apply a FailureMode to a failure raised by a reflective helper.

    Returns normally only for RETURN_NONE; the caller then returns None.

    :raises AccessFailure: The failure itself for DEFAULT/THROW_EXCEPTION, or a
        SUPPORT failure for any other mode value.
    """
    match mode:
        case FailureMode.DEFAULT | FailureMode.THROW_EXCEPTION:
            raise failure
        case FailureMode.RETURN_NONE:
            _LOG.debug("suppressed %r", failure)
            return
        case _:
            raise AccessFailure.unsupported_mode(mode, failure)


def _compose(kind: FailureKind, message: str | None) -> str:
    if not message:
        return kind.value
    if message.startswith("["):
        return f"{kind.value} {message}"
    return message


def _caller_origin(stacklevel: int) -> traceback.FrameSummary | None:
    """Return a FrameSummary for the frame `stacklevel` levels above this function."""
    frame: FrameType | None = inspect.currentframe()
    try:
        for _ in range(stacklevel):
            if frame is None:
                return None
            frame = frame.f_back
        if frame is None:
            return None
        return traceback.FrameSummary(
            frame.f_code.co_filename, frame.f_lineno, frame.f_code.co_name, lookup_line=False
        )
    finally:
        del frame


# End of file: src/mstair/beanpath/access/failure.py
