"""
Example usage of the Formula CLI editing API.

This demonstrates how to build, navigate and save a formula
programmatically, the same way the interactive editor does.
"""

from pathlib import Path

from formula_cli.converters.json_codec import FormulaJSONConverter
from formula_cli.editor.catalogue import FunctionCatalogue
from formula_cli.editor.controller import FormulaController


def example_formula_editing():
    """Build 1+\\frac{2}{3} and move the cursor around it."""

    catalogue = FunctionCatalogue()
    controller = FormulaController()

    print("Building formula...")
    controller.add_leaf("1")
    controller.add_leaf("+")
    controller.add(catalogue.lookup("frac"))
    controller.add_leaf("2")
    controller.go_next()
    controller.add_leaf("3")
    controller.go_next()

    print(f"✓ Formula: {controller.current_value()}")
    print(f"✓ With cursor: {controller.build_tex(cursor_color='#1e88e5')}")

    # Walk back into the denominator
    print("\n=== Navigation ===")
    for _ in range(3):
        controller.go_back()
        print(controller.build_tex(cursor_color="#1e88e5"))

    # Delete backwards until the fraction is gone
    print("\n=== Deletion ===")
    while controller.current_value() != "1+":
        controller.delete()
        print(controller.current_value())

    return controller


def example_json_document(controller: FormulaController):
    """Save the formula as JSON and load it back."""

    print("\n=== JSON Document ===")
    converter = FormulaJSONConverter()
    print(converter.dumps(controller.root))

    path = Path("example_formula.json")
    controller.save(path)
    loaded = FormulaController.from_file(path)
    print(f"✓ Reloaded from {path}: {loaded.current_value()}")


def example_catalogue():
    """List what can be inserted by name."""

    print("\n=== Catalogue ===")
    catalogue = FunctionCatalogue()
    for name in sorted(catalogue.functions):
        spec = catalogue.functions[name]
        kinds = ", ".join(arg.value for arg in spec.args)
        print(f"• {name}: {spec.expression} ({kinds})")

    print(f"\nTotal: {len(catalogue.names())} names available")


if __name__ == "__main__":
    print("Formula CLI Example")
    print("===================")

    example_catalogue()
    controller = example_formula_editing()
    example_json_document(controller)

    print("\nTo run the interactive editor:")
    print("1. Run: formula-cli edit formula.json")
    print("2. Type characters, \\frac, /left, /right or /del")
    print("3. Use /save to write the document")
