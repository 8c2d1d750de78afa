"""
Tests for the catalogue of insertable functions and symbols.
"""
import pytest

from formula_cli.core.exceptions import ConstructionError
from formula_cli.core.formula_model import TeXArg
from formula_cli.editor.catalogue import FunctionCatalogue, FunctionSpec, parse_args


class TestDefaults:
    """Built-in entries"""

    def test_fraction(self):
        spec = FunctionCatalogue().lookup("frac")
        assert spec == FunctionSpec("frac", "\\frac", (TeXArg.BRACES, TeXArg.BRACES), "fraction")

    def test_integral_with_bounds_uses_power_separator(self):
        spec = FunctionCatalogue().function("int")
        assert spec.args == (TeXArg.BRACES, TeXArg.POWER, TeXArg.BRACES)

    def test_function_wins_over_symbol_of_same_name(self):
        catalogue = FunctionCatalogue()
        assert isinstance(catalogue.lookup("int"), FunctionSpec)
        assert catalogue.symbol("int") == "\\int"

    def test_symbol(self):
        assert FunctionCatalogue().lookup("cdot") == "\\cdot"

    def test_unknown_name(self):
        with pytest.raises(KeyError):
            FunctionCatalogue().lookup("nope")

    def test_names_are_sorted_and_unique(self):
        names = FunctionCatalogue().names()
        assert names == sorted(set(names))
        assert "frac" in names and "pi" in names


class TestRegistration:
    """Extending the catalogue"""

    def test_register_function_from_names(self):
        catalogue = FunctionCatalogue()
        spec = catalogue.register_function("binom", "\\binom", ["braces", "braces"])
        assert catalogue.lookup("binom") is spec
        assert spec.args == (TeXArg.BRACES, TeXArg.BRACES)

    def test_register_function_with_unknown_kind(self):
        with pytest.raises(ConstructionError):
            FunctionCatalogue().register_function("bad", "\\bad", ["angles"])

    def test_register_function_without_arguments(self):
        with pytest.raises(ConstructionError):
            parse_args([])

    def test_from_config(self):
        catalogue = FunctionCatalogue.from_config(
            {"vec": {"expression": "\\vec", "args": ["braces"], "description": "vector"}},
            {"alpha": "\\alpha"},
        )
        assert catalogue.function("vec").description == "vector"
        assert catalogue.symbol("alpha") == "\\alpha"
        assert "frac" in catalogue.functions

    @pytest.mark.parametrize("functions,symbols", [
        ({"foo": "bar"}, {}),
        ({"foo": {"expression": "\\foo"}}, {}),
        ({}, {"alpha": 1}),
    ])
    def test_from_config_rejects_malformed_entries(self, functions, symbols):
        with pytest.raises(ConstructionError):
            FunctionCatalogue.from_config(functions, symbols)
