"""
Editing controller and insertable function catalogue.
"""

from .catalogue import DEFAULT_FUNCTIONS, DEFAULT_SYMBOLS, FunctionCatalogue, FunctionSpec
from .controller import FormulaController

__all__ = [
    "DEFAULT_FUNCTIONS",
    "DEFAULT_SYMBOLS",
    "FunctionCatalogue",
    "FunctionSpec",
    "FormulaController",
]
