"""
Core formula model: an editable TeX tree with an embedded cursor.

A formula is a tree of ``Node`` containers. Each node holds an ordered list
of elements, which are one of ``TeXLeaf`` (a plain TeX fragment),
``TeXFunction`` (a TeX command owning one argument node per ``TeXArg``) or
``Cursor`` (the transient marker of the edit position).

Back-references from a node to its function and from a function to its
parent node are weak references, so ownership only ever flows downwards.
"""

from __future__ import annotations

import weakref
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Union

from .exceptions import ConstructionError


class TeXArg(Enum):
    """How the argument of a function is delimited."""

    # In most of the cases braces will be used, e.g. the arguments of \frac.
    BRACES = "braces"
    # Brackets are used for the optional index of an nth root.
    BRACKETS = "brackets"
    # Separates two arguments with a bare ``^``: braces, power, braces
    # renders as {}^{}.
    POWER = "power"
    VERTICAL_BARS = "verticalBars"
    # Used for base n logarithms and plain function calls like f(x).
    PARENTHESES = "parentheses"

    @property
    def opening_char(self) -> Optional[str]:
        """Opening delimiter, or None when the slot renders no content."""
        return _OPENING_CHARS[self]

    @property
    def closing_char(self) -> str:
        return _CLOSING_CHARS[self]

    @property
    def renders_content(self) -> bool:
        return self is not TeXArg.POWER

    @classmethod
    def from_name(cls, name: str) -> TeXArg:
        """Look up an argument kind by its wire name (``braces``, ``verticalBars``...)."""
        for arg in cls:
            if arg.value == name:
                return arg
        raise KeyError(name)


_OPENING_CHARS = {
    TeXArg.BRACES: "{",
    TeXArg.BRACKETS: "[",
    TeXArg.VERTICAL_BARS: "|",
    TeXArg.PARENTHESES: "(",
    TeXArg.POWER: None,
}

_CLOSING_CHARS = {
    TeXArg.BRACES: "}",
    TeXArg.BRACKETS: "]",
    TeXArg.VERTICAL_BARS: "|",
    TeXArg.PARENTHESES: ")",
    TeXArg.POWER: "^",
}


class NavigationState(Enum):
    """Outcome of moving or deleting inside a single node."""

    # The element in the direction of travel is a function; the caller has to
    # continue inside one of its argument nodes.
    FUNC = "func"
    # The cursor is already at the boundary of this node.
    END = "end"
    # Navigating was successful.
    SUCCESS = "success"


@dataclass(frozen=True)
class TeXLeaf:
    """A single, immutable TeX fragment such as a digit or ``\\cdot``."""

    expression: str


@dataclass(frozen=True)
class Cursor:
    """Marker of the edit position inside the active node."""

    @property
    def expression(self) -> str:
        return ""


class TeXFunction:
    """
    A TeX command with one or more argument nodes.

    ``arg_nodes`` can be passed directly if the nodes are already known; their
    parent is then set to this function. When omitted, an empty node is
    created for each entry of ``args``.
    """

    def __init__(
        self,
        expression: str,
        parent: Optional[Node],
        args: Sequence[TeXArg],
        arg_nodes: Optional[Sequence[Node]] = None,
    ):
        if not args:
            raise ConstructionError("A function needs at least one argument.")
        for arg in args:
            if not isinstance(arg, TeXArg):
                raise ConstructionError(f"Invalid function argument kind: {arg!r}")
        if arg_nodes is not None and len(arg_nodes) != len(args):
            raise ConstructionError(
                f"Function {expression!r} declares {len(args)} arguments "
                f"but {len(arg_nodes)} argument nodes were given."
            )

        self.expression = expression
        self.args: List[TeXArg] = list(args)
        self._parent: Optional[weakref.ReferenceType[Node]] = None
        self.parent = parent

        if arg_nodes is None:
            self.arg_nodes: List[Node] = [Node(self) for _ in self.args]
        else:
            self.arg_nodes = list(arg_nodes)
            for node in self.arg_nodes:
                node.parent = self

    @property
    def parent(self) -> Optional[Node]:
        """The node holding this function (not owned)."""
        return self._parent() if self._parent is not None else None

    @parent.setter
    def parent(self, node: Optional[Node]) -> None:
        self._parent = weakref.ref(node) if node is not None else None

    def arg_index(self, node: Node) -> int:
        """Index of ``node`` among the argument nodes, by identity."""
        for index, arg_node in enumerate(self.arg_nodes):
            if arg_node is node:
                return index
        raise ValueError("Node is not an argument of this function")

    def __repr__(self) -> str:
        args = ", ".join(arg.value for arg in self.args)
        return f"TeXFunction({self.expression!r}, [{args}])"


Element = Union[TeXLeaf, TeXFunction, Cursor]


class Node:
    """
    An ordered list of TeX elements with a cursor position.

    The cursor is only materialized in ``children`` while the node is the
    active edit target. ``cursor_position`` is kept either way, so moving
    back into a node restores the previous edit position.
    """

    def __init__(self, parent: Optional[TeXFunction] = None):
        self._parent: Optional[weakref.ReferenceType[TeXFunction]] = None
        self.parent = parent
        self.cursor_position = 0
        self.children: List[Element] = []

    @property
    def parent(self) -> Optional[TeXFunction]:
        """The function owning this node as an argument, or None for the root."""
        return self._parent() if self._parent is not None else None

    @parent.setter
    def parent(self, function: Optional[TeXFunction]) -> None:
        self._parent = weakref.ref(function) if function is not None else None

    @property
    def is_active(self) -> bool:
        return self._cursor_index() is not None

    @property
    def is_empty(self) -> bool:
        return self.content_length == 0

    @property
    def content_length(self) -> int:
        """Number of children, not counting the cursor."""
        return len(self.children) - (1 if self.is_active else 0)

    def content(self) -> Iterator[Element]:
        """Iterate over the persistent children, skipping the cursor."""
        for child in self.children:
            if not isinstance(child, Cursor):
                yield child

    def index_of(self, element: Element) -> int:
        """Index of ``element`` among the children, by identity."""
        for index, child in enumerate(self.children):
            if child is element:
                return index
        raise ValueError(f"{element!r} is not a child of this node")

    def _cursor_index(self) -> Optional[int]:
        for index, child in enumerate(self.children):
            if isinstance(child, Cursor):
                return index
        return None

    def set_cursor(self) -> None:
        """Materialize the cursor at the current position."""
        if self.is_active:
            return
        self.cursor_position = max(0, min(self.cursor_position, len(self.children)))
        self.children.insert(self.cursor_position, Cursor())

    def remove_cursor(self) -> None:
        """Remove the cursor from the children, if present."""
        index = self._cursor_index()
        if index is not None:
            del self.children[index]

    def cursor_at_the_end(self) -> bool:
        """
        Returns whether the last child node is the cursor.

        This does not traverse the children recursively: a ``\\frac`` with a
        long numerator is not visually at the end just because the cursor is
        last inside its denominator.
        """
        if not self.children:
            return False
        return isinstance(self.children[-1], Cursor)

    def add_tex(self, tex: Element) -> None:
        """Insert ``tex`` at the cursor position and advance past it."""
        self.children.insert(self.cursor_position, tex)
        self.cursor_position += 1
        if isinstance(tex, TeXFunction):
            tex.parent = self

    def shift_cursor_left(self) -> NavigationState:
        if self.cursor_position == 0:
            return NavigationState.END
        self.remove_cursor()
        self.cursor_position -= 1
        if isinstance(self.children[self.cursor_position], TeXFunction):
            return NavigationState.FUNC
        self.set_cursor()
        return NavigationState.SUCCESS

    def shift_cursor_right(self) -> NavigationState:
        if self.cursor_position >= self.content_length:
            return NavigationState.END
        self.remove_cursor()
        self.cursor_position += 1
        if isinstance(self.children[self.cursor_position - 1], TeXFunction):
            return NavigationState.FUNC
        self.set_cursor()
        return NavigationState.SUCCESS

    def remove(self) -> NavigationState:
        """Delete the element before the cursor."""
        if self.cursor_position == 0:
            return NavigationState.END
        self.remove_cursor()
        self.cursor_position -= 1
        if isinstance(self.children[self.cursor_position], TeXFunction):
            return NavigationState.FUNC
        del self.children[self.cursor_position]
        self.set_cursor()
        return NavigationState.SUCCESS

    def build_tex_string(
        self,
        cursor_color: Optional[Union[int, str]] = None,
        placeholder_when_empty: bool = True,
    ) -> str:
        """Builds the TeX representation of this node and everything below it."""
        from .tex_builder import build_node

        return build_node(
            self,
            cursor_color=cursor_color,
            placeholder_when_empty=placeholder_when_empty,
        )

    def __repr__(self) -> str:
        return f"Node(cursor_position={self.cursor_position}, children={self.children!r})"
