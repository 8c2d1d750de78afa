"""
Core formula model, TeX builder and error types.
"""

from .exceptions import ConstructionError, CursorColorMissingError, FormatError, FormulaError
from .formula_model import Cursor, Element, NavigationState, Node, TeXArg, TeXFunction, TeXLeaf
from .tex_builder import EMPTY_PLACEHOLDER, build_node

__all__ = [
    "Cursor",
    "Element",
    "NavigationState",
    "Node",
    "TeXArg",
    "TeXFunction",
    "TeXLeaf",
    "EMPTY_PLACEHOLDER",
    "build_node",
    "FormulaError",
    "ConstructionError",
    "CursorColorMissingError",
    "FormatError",
]
