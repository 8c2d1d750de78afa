"""
Editing controller driving a formula tree.

The controller owns the root node and the single active node. Each node only
knows how to move its own cursor; whenever a node reports ``FUNC`` or
``END`` the controller decides which node becomes active next.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Union

from ..converters.json_codec import FormulaJSONConverter
from ..core.formula_model import NavigationState, Node, TeXArg, TeXFunction, TeXLeaf
from .catalogue import FunctionSpec


class FormulaController:
    """
    Editing state of one formula.

    ``current_node`` is the node holding the cursor. Only the controller
    switches it; nodes never activate each other.
    """

    def __init__(self, root: Optional[Node] = None):
        self.logger = logging.getLogger(__name__)
        self._set_root(root or Node())

    @property
    def is_empty(self) -> bool:
        return self.root.is_empty

    def cursor_at_the_end(self) -> bool:
        """Whether the cursor is the last element of the root node."""
        return self.current_node is self.root and self.root.cursor_at_the_end()

    def add_leaf(self, tex: str) -> None:
        """Insert a plain TeX fragment at the cursor."""
        self._warn_power_slot()
        self.current_node.add_tex(TeXLeaf(tex))
        self.logger.debug(f"Inserted leaf {tex!r}")

    def add_function(self, tex: str, args: Sequence[TeXArg]) -> TeXFunction:
        """Insert a function and move the cursor into its first argument."""
        self._warn_power_slot()
        function = TeXFunction(tex, self.current_node, args)
        self.current_node.add_tex(function)
        arg_node = self._editable_arg(function, -1, 1)
        if arg_node is not None:
            self.current_node.remove_cursor()
            self._activate(arg_node, at_end=False)
        self.logger.debug(f"Inserted function {function!r}")
        return function

    def add(self, item: Union[FunctionSpec, str]) -> None:
        """Insert a catalogue entry: a function spec or a symbol's TeX."""
        if isinstance(item, FunctionSpec):
            self.add_function(item.expression, item.args)
        else:
            self.add_leaf(item)

    def go_back(self, delete_mode: bool = False) -> None:
        """Move the cursor one step to the left, deleting on the way if asked."""
        node = self.current_node
        state = node.remove() if delete_mode else node.shift_cursor_left()
        self.logger.debug(f"go_back(delete_mode={delete_mode}) -> {state.value}")

        if state is NavigationState.SUCCESS:
            return

        if state is NavigationState.FUNC:
            # Step into the function rather than skipping or deleting it.
            function = node.children[node.cursor_position]
            arg_node = self._editable_arg(function, len(function.arg_nodes), -1)
            if arg_node is not None:
                self._activate(arg_node, at_end=True)
            elif delete_mode:
                self._remove_function(function)
            else:
                self._activate(node)
            return

        function = node.parent
        if function is None:
            return
        node.remove_cursor()
        arg_node = self._editable_arg(function, function.arg_index(node), -1)
        if arg_node is not None:
            self._activate(arg_node, at_end=True)
        elif delete_mode:
            self._remove_function(function)
        else:
            parent = function.parent
            parent.cursor_position = parent.index_of(function)
            self._activate(parent)

    def go_next(self) -> None:
        """Move the cursor one step to the right."""
        node = self.current_node
        state = node.shift_cursor_right()
        self.logger.debug(f"go_next() -> {state.value}")

        if state is NavigationState.SUCCESS:
            return

        if state is NavigationState.FUNC:
            function = node.children[node.cursor_position - 1]
            arg_node = self._editable_arg(function, -1, 1)
            if arg_node is not None:
                self._activate(arg_node, at_end=False)
            else:
                self._activate(node)
            return

        function = node.parent
        if function is None:
            return
        node.remove_cursor()
        arg_node = self._editable_arg(function, function.arg_index(node), 1)
        if arg_node is not None:
            self._activate(arg_node, at_end=False)
        else:
            parent = function.parent
            parent.cursor_position = parent.index_of(function) + 1
            self._activate(parent)

    def delete(self) -> None:
        """Delete backwards from the cursor."""
        self.go_back(delete_mode=True)

    def clear(self) -> None:
        """Discard the whole formula."""
        self._set_root(Node())
        self.logger.debug("Cleared formula")

    def build_tex(
        self,
        cursor_color: Optional[Union[int, str]] = None,
        placeholder_when_empty: bool = True,
    ) -> str:
        """TeX string of the whole formula, including the cursor."""
        return self.root.build_tex_string(
            cursor_color=cursor_color,
            placeholder_when_empty=placeholder_when_empty,
        )

    def current_value(self, placeholder_when_empty: bool = True) -> str:
        """TeX string of the whole formula without the cursor."""
        self.current_node.remove_cursor()
        try:
            return self.root.build_tex_string(placeholder_when_empty=placeholder_when_empty)
        finally:
            self.current_node.set_cursor()

    def to_json(self) -> Dict[str, Any]:
        return FormulaJSONConverter().to_dict(self.root)

    def load_json(self, data: Dict[str, Any]) -> None:
        """Replace the formula with a decoded document; the root becomes active."""
        self._set_root(FormulaJSONConverter().from_dict(data))

    def load(self, path: Path) -> None:
        """Replace the formula with the document stored at ``path``."""
        self._set_root(FormulaJSONConverter().load(path))

    @classmethod
    def from_file(cls, path: Path) -> FormulaController:
        return cls(FormulaJSONConverter().load(path))

    def save(self, path: Path, indent: Optional[int] = 2) -> None:
        FormulaJSONConverter(indent=indent).save(self.root, path)

    def _set_root(self, root: Node) -> None:
        self.root = root
        self.current_node = root
        root.set_cursor()

    def _activate(self, node: Node, at_end: Optional[bool] = None) -> None:
        if at_end is True:
            node.cursor_position = node.content_length
        elif at_end is False:
            node.cursor_position = 0
        node.set_cursor()
        self.current_node = node

    def _editable_arg(self, function: TeXFunction, index: int, step: int) -> Optional[Node]:
        """Nearest rendered argument node from ``index`` in direction ``step``."""
        index += step
        while 0 <= index < len(function.arg_nodes):
            if function.args[index].renders_content:
                return function.arg_nodes[index]
            index += step
        return None

    def _remove_function(self, function: TeXFunction) -> None:
        parent = function.parent
        parent.cursor_position = parent.index_of(function)
        del parent.children[parent.cursor_position]
        self.logger.debug(f"Removed function {function!r}")
        self._activate(parent)

    def _warn_power_slot(self) -> None:
        function = self.current_node.parent
        if function is None:
            return
        if function.args[function.arg_index(self.current_node)] is TeXArg.POWER:
            self.logger.warning(
                f"Inserting into the power slot of {function.expression!r}; "
                "this slot is not rendered"
            )
