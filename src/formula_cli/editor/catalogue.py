"""
Named TeX constructs that can be inserted into a formula.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..core.exceptions import ConstructionError
from ..core.formula_model import TeXArg


@dataclass(frozen=True)
class FunctionSpec:
    """A function that can be inserted by name."""

    name: str
    expression: str
    args: Tuple[TeXArg, ...]
    description: str = ""


_B = TeXArg.BRACES

DEFAULT_FUNCTIONS: Dict[str, FunctionSpec] = {
    spec.name: spec
    for spec in [
        FunctionSpec("frac", "\\frac", (_B, _B), "fraction"),
        FunctionSpec("sqrt", "\\sqrt", (_B,), "square root"),
        FunctionSpec("nthroot", "\\sqrt", (TeXArg.BRACKETS, _B), "nth root"),
        FunctionSpec("pow", "^", (_B,), "exponent"),
        FunctionSpec("log", "\\log_", (_B, TeXArg.PARENTHESES), "logarithm to base n"),
        FunctionSpec("ln", "\\ln", (TeXArg.PARENTHESES,), "natural logarithm"),
        FunctionSpec("abs", "", (TeXArg.VERTICAL_BARS,), "absolute value"),
        FunctionSpec("f", "f", (TeXArg.PARENTHESES,), "function call"),
        FunctionSpec("int", "\\int _", (_B, TeXArg.POWER, _B), "definite integral"),
        FunctionSpec("sum", "\\sum_", (_B, TeXArg.POWER, _B), "sum"),
    ]
}

DEFAULT_SYMBOLS: Dict[str, str] = {
    "cdot": "\\cdot",
    "times": "\\times",
    "div": "\\div",
    "pi": "{\\pi}",
    "e": "{e}",
    "infty": "\\infty",
    "le": "\\le",
    "ge": "\\ge",
    "deg": "^\\circ",
    "sin": "\\sin",
    "cos": "\\cos",
    "tan": "\\tan",
    "int": "\\int",
}


def parse_args(args: Sequence[Union[str, TeXArg]]) -> Tuple[TeXArg, ...]:
    """Convert argument kind names such as ``braces`` into ``TeXArg`` values."""
    parsed: List[TeXArg] = []
    for arg in args:
        if isinstance(arg, TeXArg):
            parsed.append(arg)
            continue
        try:
            parsed.append(TeXArg.from_name(arg))
        except KeyError:
            raise ConstructionError(f"Unknown argument kind: {arg!r}")
    if not parsed:
        raise ConstructionError("A function needs at least one argument.")
    return tuple(parsed)


class FunctionCatalogue:
    """
    Lookup table of insertable functions and symbols.

    Functions take precedence over symbols that share a name, so ``int``
    inserts the integral with bounds while ``\\int`` stays reachable as a
    plain symbol through ``symbol("int")``.
    """

    def __init__(
        self,
        functions: Optional[Mapping[str, FunctionSpec]] = None,
        symbols: Optional[Mapping[str, str]] = None,
    ):
        self.functions: Dict[str, FunctionSpec] = dict(DEFAULT_FUNCTIONS if functions is None else functions)
        self.symbols: Dict[str, str] = dict(DEFAULT_SYMBOLS if symbols is None else symbols)

    @classmethod
    def from_config(
        cls,
        functions: Mapping[str, Mapping[str, Any]],
        symbols: Mapping[str, str],
    ) -> FunctionCatalogue:
        """Default catalogue extended with configured functions and symbols."""
        catalogue = cls()
        for name, entry in functions.items():
            if not isinstance(entry, Mapping):
                raise ConstructionError(
                    f"Function {name!r} must be a mapping with expression and args, got {entry!r}"
                )
            catalogue.register_function(
                name,
                entry.get("expression", ""),
                entry.get("args") or [],
                entry.get("description", ""),
            )
        for name, tex in symbols.items():
            if not isinstance(tex, str):
                raise ConstructionError(f"Symbol {name!r} must map to a TeX string, got {tex!r}")
            catalogue.register_symbol(name, tex)
        return catalogue

    def register_function(
        self,
        name: str,
        expression: str,
        args: Sequence[Union[str, TeXArg]],
        description: str = "",
    ) -> FunctionSpec:
        spec = FunctionSpec(name, expression, parse_args(args), description)
        self.functions[name] = spec
        return spec

    def register_symbol(self, name: str, tex: str) -> None:
        self.symbols[name] = tex

    def function(self, name: str) -> FunctionSpec:
        return self.functions[name]

    def symbol(self, name: str) -> str:
        return self.symbols[name]

    def lookup(self, name: str) -> Union[FunctionSpec, str]:
        """Function spec or symbol TeX for ``name``; raises KeyError if unknown."""
        if name in self.functions:
            return self.functions[name]
        if name in self.symbols:
            return self.symbols[name]
        raise KeyError(name)

    def names(self) -> List[str]:
        return sorted(set(self.functions) | set(self.symbols))
