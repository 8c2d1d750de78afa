"""
Formula CLI: an editable TeX formula tree with a cursor.
"""

from .converters.json_codec import FormulaJSONConverter
from .core.exceptions import ConstructionError, CursorColorMissingError, FormatError, FormulaError
from .core.formula_model import Cursor, NavigationState, Node, TeXArg, TeXFunction, TeXLeaf
from .editor.catalogue import FunctionCatalogue, FunctionSpec
from .editor.controller import FormulaController

__version__ = "0.1.0"

__all__ = [
    "Cursor",
    "NavigationState",
    "Node",
    "TeXArg",
    "TeXFunction",
    "TeXLeaf",
    "FormulaController",
    "FormulaJSONConverter",
    "FunctionCatalogue",
    "FunctionSpec",
    "FormulaError",
    "ConstructionError",
    "CursorColorMissingError",
    "FormatError",
]
