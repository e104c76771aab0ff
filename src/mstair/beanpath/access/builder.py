# File: src/mstair/beanpath/access/builder.py
"""
Fluent construction of object graphs for test fixtures.

Example:
    >>> tree = (
    ...     builder({"orders": []})
    ...     .enter("orders")
    ...     .push(Order())
    ...     .add("apple", "name")
    ...     .pop()
    ...     .build()
    ... )
"""

from __future__ import annotations

from collections import deque
from typing import Any, Self

from mstair.beanpath.access import property_path
from mstair.beanpath.access.failure import AccessFailure, FailureKind
from mstair.beanpath.access.path_parser import WILDCARD


__all__ = ["TreeBuilder", "builder"]


class TreeBuilder[T]:
    """
    Stack of write targets starting at a root object.

    add() writes into the current target, push() writes and makes the written
    value the current target, enter() makes an existing element current, and
    pop() returns to the previous target.
    """

    def __init__(self, root: T) -> None:
        self._root = root
        self._stack: deque[Any] = deque([root])

    @property
    def current(self) -> Any:
        return self._stack[-1]

    def add(self, value: Any, name: str = WILDCARD) -> Self:
        """Write `value` at path `name` of the current target; ``*`` appends."""
        property_path.write(self.current, name, value)
        return self

    def push(self, value: Any, name: str = WILDCARD) -> Self:
        """Write `value` like add(), then make it the current target."""
        self.add(value, name)
        self._stack.append(value)
        return self

    def enter(self, name: str) -> Self:
        """Make the element at path `name` of the current target current."""
        self._stack.append(property_path.read(self.current, name))
        return self

    def pop(self) -> Self:
        """
        Return to the previous target.

        :raises AccessFailure: BOUNDS if only the root is left.
        """
        if len(self._stack) == 1:
            raise AccessFailure(FailureKind.BOUNDS, "cannot pop the root target")
        self._stack.pop()
        return self

    def build(self) -> T:
        return self._root


def builder[T](root: T) -> TreeBuilder[T]:
    """Return a TreeBuilder writing into `root`."""
    return TreeBuilder(root)


# End of file: src/mstair/beanpath/access/builder.py
