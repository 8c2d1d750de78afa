"""
TeX string builder for formula trees.

Walks a node's children in order and emits the TeX markup, delimiting each
function argument according to its ``TeXArg``.
"""

from __future__ import annotations

import re
from typing import List, Optional, Union

from .exceptions import CursorColorMissingError
from .formula_model import Cursor, Element, Node, TeXFunction, TeXLeaf

# Shown in place of a node without children.
EMPTY_PLACEHOLDER = "\\Box"

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


def color_to_hex(color: Union[int, str]) -> str:
    """
    Normalize a color to ``#rrggbb``.

    Integers are read as (A)RGB values and the alpha channel is dropped.
    Strings may be ``rrggbb``, ``#rrggbb`` or ``#aarrggbb``.
    """
    if isinstance(color, bool):
        raise ValueError(f"Invalid cursor color: {color!r}")
    if isinstance(color, int):
        return f"#{color & 0xFFFFFF:06x}"
    match = _HEX_COLOR.match(color.strip())
    if not match:
        raise ValueError(f"Invalid cursor color: {color!r}")
    return f"#{match.group(1)[-6:].lower()}"


def cursor_tex(cursor_color: Optional[Union[int, str]]) -> str:
    """Colored cursor token understood by the rendering side."""
    if cursor_color is None:
        raise CursorColorMissingError("Cursor rendered without a cursor color.")
    return f"\\textcolor{{{color_to_hex(cursor_color)}}}{{\\cursor}}"


def build_node(
    node: Node,
    cursor_color: Optional[Union[int, str]] = None,
    placeholder_when_empty: bool = True,
) -> str:
    """Build the TeX string of ``node``, or the placeholder when it is empty."""
    if not node.children:
        return EMPTY_PLACEHOLDER if placeholder_when_empty else ""
    return "".join(build_element(child, cursor_color) for child in node.children)


def build_element(element: Element, cursor_color: Optional[Union[int, str]] = None) -> str:
    if isinstance(element, TeXLeaf):
        return element.expression
    if isinstance(element, TeXFunction):
        return build_function(element, cursor_color)
    if isinstance(element, Cursor):
        return cursor_tex(cursor_color)
    raise TypeError(f"Unsupported TeX element: {element!r}")


def build_function(function: TeXFunction, cursor_color: Optional[Union[int, str]] = None) -> str:
    parts: List[str] = [function.expression]
    for arg, arg_node in zip(function.args, function.arg_nodes):
        # A power slot only contributes its separator; its node is skipped.
        if arg.renders_content:
            parts.append(arg.opening_char)
            parts.append(build_node(arg_node, cursor_color=cursor_color))
        parts.append(arg.closing_char)
    return "".join(parts)
