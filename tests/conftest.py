import pytest

from formula_cli import config as config_module
from formula_cli.core.formula_model import Node, TeXArg, TeXFunction, TeXLeaf


def leaves(*expressions):
    return [TeXLeaf(expression) for expression in expressions]


def make_function(expression, args, *contents, parent=None):
    """Function whose argument nodes hold the given leaf expressions."""
    function = TeXFunction(expression, parent, args)
    for arg_node, content in zip(function.arg_nodes, contents):
        arg_node.children.extend(leaves(*content))
        arg_node.cursor_position = len(arg_node.children)
    return function


@pytest.fixture
def fraction_tree():
    """Root node holding ``1 + \\frac{2}{3}``, with no cursor."""
    root = Node()
    root.children.extend(leaves("1", "+"))
    root.children.append(make_function("\\frac", [TeXArg.BRACES, TeXArg.BRACES], "2", "3", parent=root))
    root.cursor_position = 3
    return root


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """Point the config manager at an empty home directory."""
    monkeypatch.setenv("HOME", str(tmp_path))
    for name in ("FORMULA_CLI_CURSOR_COLOR", "FORMULA_CLI_PLACEHOLDER", "FORMULA_CLI_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config_module, "_config_manager", None)
    return tmp_path
