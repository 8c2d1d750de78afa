"""
Tests for the editing controller that moves the cursor across nodes.
"""
import logging

import pytest

from formula_cli.core.formula_model import Cursor, Node, TeXArg, TeXLeaf
from formula_cli.editor.catalogue import DEFAULT_FUNCTIONS
from formula_cli.editor.controller import FormulaController

B = TeXArg.BRACES
CURSOR = "\\textcolor{#000000}{\\cursor}"


def active_nodes(node):
    """All nodes below (and including) ``node`` that hold a cursor."""
    found = [node] if node.is_active else []
    for child in node.content():
        for arg_node in getattr(child, "arg_nodes", []):
            found.extend(active_nodes(arg_node))
    return found


@pytest.fixture
def controller():
    return FormulaController()


@pytest.fixture
def fraction_controller():
    """Controller holding ``1\\frac{2}{3}`` with the cursor at the end of the root."""
    controller = FormulaController()
    controller.add_leaf("1")
    controller.add_function("\\frac", [B, B])
    controller.add_leaf("2")
    controller.go_next()
    controller.add_leaf("3")
    controller.go_next()
    return controller


def tex(controller):
    return controller.build_tex(cursor_color="#000000")


class TestInsertion:
    """Adding leaves and functions"""

    def test_new_controller_is_empty_with_cursor(self, controller):
        assert controller.is_empty
        assert controller.current_node is controller.root
        assert tex(controller) == CURSOR
        assert controller.current_value() == "\\Box"
        assert controller.current_value(placeholder_when_empty=False) == ""

    def test_add_leaf(self, controller):
        controller.add_leaf("1")
        assert tex(controller) == "1" + CURSOR
        assert controller.current_value() == "1"

    def test_add_function_enters_first_argument(self, controller):
        function = controller.add_function("\\frac", [B, B])
        assert controller.current_node is function.arg_nodes[0]
        assert not controller.root.is_active
        assert tex(controller) == "\\frac{" + CURSOR + "}{\\Box}"
        assert controller.current_value() == "\\frac{\\Box}{\\Box}"

    def test_add_catalogue_entry(self, controller):
        controller.add(DEFAULT_FUNCTIONS["sqrt"])
        controller.add("\\pi")
        assert controller.current_value() == "\\sqrt{\\pi}"

    def test_function_without_editable_argument_keeps_cursor(self, controller):
        controller.add_function("x", [TeXArg.POWER])
        assert controller.current_node is controller.root
        assert tex(controller) == "x^" + CURSOR


class TestGoNext:
    """Moving right through arguments"""

    def test_leaving_last_argument_returns_to_parent(self, fraction_controller):
        controller = fraction_controller
        assert controller.current_node is controller.root
        assert controller.cursor_at_the_end()
        assert tex(controller) == "1\\frac{2}{3}" + CURSOR

    def test_entering_function_from_the_left(self, fraction_controller):
        controller = fraction_controller
        function = controller.root.children[1]
        controller.root.remove_cursor()
        controller.root.cursor_position = 1
        controller.root.set_cursor()
        controller.go_next()
        assert controller.current_node is function.arg_nodes[0]
        assert controller.current_node.cursor_position == 0
        assert tex(controller) == "1\\frac{" + CURSOR + "2}{3}"

    def test_end_of_root_does_nothing(self, controller):
        controller.add_leaf("1")
        controller.go_next()
        assert tex(controller) == "1" + CURSOR

    def test_power_slot_is_skipped(self, controller):
        function = controller.add_function("\\int _", [B, TeXArg.POWER, B])
        controller.add_leaf("0")
        controller.go_next()
        assert controller.current_node is function.arg_nodes[2]
        controller.add_leaf("1")
        assert controller.current_value() == "\\int _{0}^{1}"
        assert function.arg_nodes[1].is_empty


class TestGoBack:
    """Moving left through arguments"""

    def test_entering_function_from_the_right(self, fraction_controller):
        controller = fraction_controller
        function = controller.root.children[1]
        controller.go_back()
        assert controller.current_node is function.arg_nodes[1]
        assert tex(controller) == "1\\frac{2}{3" + CURSOR + "}"

    def test_walk_back_to_start(self, fraction_controller):
        controller = fraction_controller
        expected = [
            "1\\frac{2}{3" + CURSOR + "}",
            "1\\frac{2}{" + CURSOR + "3}",
            "1\\frac{2" + CURSOR + "}{3}",
            "1\\frac{" + CURSOR + "2}{3}",
            "1" + CURSOR + "\\frac{2}{3}",
            CURSOR + "1\\frac{2}{3}",
            CURSOR + "1\\frac{2}{3}",
        ]
        for step in expected:
            controller.go_back()
            assert tex(controller) == step
            assert active_nodes(controller.root) == [controller.current_node]

    def test_walk_forward_again(self, fraction_controller):
        controller = fraction_controller
        for _ in range(6):
            controller.go_back()
        for _ in range(6):
            controller.go_next()
        assert tex(controller) == "1\\frac{2}{3}" + CURSOR
        assert controller.current_node is controller.root

    def test_power_slot_is_skipped(self, controller):
        function = controller.add_function("\\sum_", [B, TeXArg.POWER, B])
        controller.go_next()
        controller.go_back()
        assert controller.current_node is function.arg_nodes[0]


class TestDelete:
    """Deleting backwards across nodes"""

    def test_delete_leaf(self, controller):
        controller.add_leaf("1")
        controller.add_leaf("2")
        controller.delete()
        assert controller.current_value() == "1"

    def test_delete_at_start_of_root(self, controller):
        controller.add_leaf("1")
        controller.go_back()
        controller.delete()
        assert controller.current_value() == "1"

    def test_delete_steps_into_function(self, fraction_controller):
        controller = fraction_controller
        function = controller.root.children[1]
        controller.delete()
        assert controller.current_node is function.arg_nodes[1]
        assert controller.current_value() == "1\\frac{2}{3}"

    def test_delete_whole_fraction(self, fraction_controller):
        controller = fraction_controller
        steps = [
            "1\\frac{2}{3}",
            "1\\frac{2}{\\Box}",
            "1\\frac{2}{\\Box}",
            "1\\frac{\\Box}{\\Box}",
            "1",
            "\\Box",
        ]
        for step in steps:
            controller.delete()
            assert controller.current_value() == step
        assert controller.current_node is controller.root
        assert controller.is_empty

    def test_delete_function_with_power_only(self, controller):
        controller.add_function("x", [TeXArg.POWER])
        controller.delete()
        assert controller.is_empty
        assert tex(controller) == CURSOR


class TestPowerSlotWarning:
    """Writing into a power slot is flagged"""

    def test_add_leaf_into_power_slot_warns(self, controller, caplog):
        function = controller.add_function("\\sum_", [B, TeXArg.POWER, B])
        controller.current_node.remove_cursor()
        controller.current_node = function.arg_nodes[1]
        controller.current_node.set_cursor()
        with caplog.at_level(logging.WARNING, logger="formula_cli.editor.controller"):
            controller.add_leaf("x")
        assert "power slot" in caplog.text
        assert controller.current_value() == "\\sum_{\\Box}^{\\Box}"


class TestPersistence:
    """Clearing, saving and loading"""

    def test_clear(self, fraction_controller):
        fraction_controller.clear()
        assert fraction_controller.is_empty
        assert tex(fraction_controller) == CURSOR

    def test_to_json_has_no_cursor(self, fraction_controller):
        data = fraction_controller.to_json()
        assert data["cursorPosition"] == 2
        assert len(data["children"]) == 2

    def test_load_json_activates_root(self, controller, fraction_controller):
        controller.load_json(fraction_controller.to_json())
        assert controller.current_node is controller.root
        assert tex(controller) == "1\\frac{2}{3}" + CURSOR

    def test_save_and_load(self, fraction_controller, tmp_path):
        path = tmp_path / "formula.json"
        fraction_controller.save(path)
        loaded = FormulaController.from_file(path)
        assert loaded.current_value() == "1\\frac{2}{3}"
        other = FormulaController()
        other.load(path)
        assert other.current_value() == "1\\frac{2}{3}"

    def test_current_value_keeps_cursor(self, fraction_controller):
        fraction_controller.go_back()
        fraction_controller.current_value()
        node = fraction_controller.current_node
        assert isinstance(node.children[node.cursor_position], Cursor)
