"""
Interactive editing session for Formula CLI.

Reads editing commands line by line, applies them to a formula and shows
the resulting TeX after every step.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from ..config import FormulaCLIConfig
from ..core.exceptions import FormulaError
from ..core.formula_model import Cursor, Node, TeXFunction, TeXLeaf
from ..editor.catalogue import FunctionCatalogue
from ..editor.controller import FormulaController

logger = logging.getLogger(__name__)


def formula_tree(node: Node, label: str = "formula") -> Tree:
    """Rich tree showing the structure of ``node``."""
    tree = Tree(f"[bold]{label}[/bold] [dim](cursor at {node.cursor_position})[/dim]")
    _add_children(tree, node)
    return tree


def _add_children(tree: Tree, node: Node) -> None:
    for child in node.children:
        if isinstance(child, TeXLeaf):
            tree.add(Text(child.expression, style="green"))
        elif isinstance(child, TeXFunction):
            branch = tree.add(Text(child.expression or "(no command)", style="cyan"))
            for index, (arg, arg_node) in enumerate(zip(child.args, child.arg_nodes)):
                arg_branch = branch.add(f"[magenta]{index}: {arg.value}[/magenta]")
                _add_children(arg_branch, arg_node)
        elif isinstance(child, Cursor):
            tree.add("[yellow]▌ cursor[/yellow]")


class UnknownCommandError(FormulaError):
    """An editing command that the session does not understand."""


class CommandProcessor:
    """
    Applies editing commands to a formula controller.

    ``/name`` runs a navigation command, ``\\name`` inserts a catalogue entry,
    anything else is inserted character by character as leaves.
    """

    def __init__(self, controller: FormulaController, catalogue: FunctionCatalogue):
        self.controller = controller
        self.catalogue = catalogue
        self._commands: Dict[str, Callable[[], None]] = {
            'left': controller.go_back,
            'right': controller.go_next,
            'del': controller.delete,
            'clear': controller.clear,
        }

    @property
    def command_names(self) -> List[str]:
        return sorted(self._commands)

    def execute(self, line: str) -> None:
        line = line.strip()
        if not line:
            return

        if line.startswith('/'):
            self._run_command(line[1:])
        elif line.startswith('\\') and len(line) > 1:
            self.insert_named(line[1:])
        else:
            for char in line:
                if not char.isspace():
                    self.controller.add_leaf(char)

    def _run_command(self, text: str) -> None:
        name, _, count_text = text.partition(' ')
        action = self._commands.get(name)
        if action is None:
            raise UnknownCommandError(f"Unknown command: /{name}")
        count = 1
        if count_text.strip():
            try:
                count = int(count_text)
            except ValueError:
                raise UnknownCommandError(f"Invalid repeat count for /{name}: {count_text.strip()!r}")
        for _ in range(count):
            action()

    def insert_named(self, name: str) -> None:
        try:
            item = self.catalogue.lookup(name)
        except KeyError:
            raise UnknownCommandError(f"Unknown function or symbol: \\{name}")
        self.controller.add(item)


@dataclass
class SessionState:
    """Current state of the interactive session."""

    document_path: Optional[Path] = None
    commands_run: int = 0
    is_modified: bool = False


class InteractiveSession:
    """Line based formula editor on top of ``FormulaController``."""

    def __init__(
        self,
        config: FormulaCLIConfig,
        console: Optional[Console] = None,
    ):
        self.config = config
        self.console = console or Console()
        self.catalogue = config.build_catalogue()
        self.controller = FormulaController()
        self.processor = CommandProcessor(self.controller, self.catalogue)
        self.state = SessionState()
        self.is_running = False

    def open(self, path: Path) -> None:
        """Load ``path`` if it exists, otherwise start an empty formula for it."""
        if path.exists():
            self.controller.load(path)
        self.state.document_path = path

    def save(self) -> None:
        if self.state.document_path is None:
            self.console.print("[red]No file to save to[/red]")
            return
        try:
            self.controller.save(self.state.document_path, indent=self.config.indent)
        except OSError as e:
            logger.error(f"Saving {self.state.document_path} failed: {e}")
            self.console.print(
                f"[red]Could not save {escape(str(self.state.document_path))}: {escape(str(e))}[/red]"
            )
            return
        self.state.is_modified = False
        self.console.print(f"[green]Saved {escape(str(self.state.document_path))}[/green]")

    def start(self) -> None:
        """Run the interaction loop until /quit or end of input."""
        self.is_running = True
        self._show_welcome()
        self._show_formula()

        while self.is_running:
            try:
                line = self.console.input("[bold blue]formula>[/bold blue] ")
            except (EOFError, KeyboardInterrupt):
                self.console.print()
                break
            self.handle_line(line)

        if self.state.is_modified:
            self.console.print("[yellow]Unsaved changes discarded. Use /save before /quit to keep them.[/yellow]")

    def handle_line(self, line: str) -> None:
        """Apply one line of input: session commands first, then editing commands."""
        command = line.strip()
        if command in ('/quit', '/exit'):
            self.is_running = False
            return
        if command == '/help':
            self._show_help()
            return
        if command == '/save':
            self.save()
            return
        if command == '/tree':
            self.console.print(formula_tree(self.controller.root))
            return
        if command == '/json':
            self.console.print_json(data=self.controller.to_json())
            return

        try:
            self.processor.execute(line)
        except FormulaError as e:
            logger.debug(f"Command {command!r} failed: {e.message}")
            self.console.print(f"[red]{escape(e.message)}[/red]")
            return

        if command:
            self.state.commands_run += 1
            self.state.is_modified = True
        self._show_formula()

    def _show_formula(self) -> None:
        tex = self.controller.build_tex(
            cursor_color=self.config.cursor_color,
            placeholder_when_empty=self.config.placeholder_when_empty,
        )
        self.console.print(Panel(Text(tex), title="TeX", border_style="cyan"))

    def _show_welcome(self) -> None:
        name = self.state.document_path.name if self.state.document_path else "untitled"
        self.console.print(Panel(
            f"Editing [bold]{escape(name)}[/bold]\nType [cyan]/help[/cyan] for commands.",
            title="Formula CLI",
            border_style="blue",
        ))

    def _show_help(self) -> None:
        table = Table(title="Commands", show_header=False)
        table.add_column("Command", style="cyan")
        table.add_column("Description")

        table.add_row(escape("/left [n], /right [n]"), "Move the cursor")
        table.add_row(escape("/del [n]"), "Delete backwards")
        table.add_row("/clear", "Discard the formula")
        table.add_row("/tree, /json", "Show the structure or the JSON document")
        table.add_row("/save, /quit", "Save to the opened file, leave the session")
        table.add_row("\\name", "Insert a function or symbol")
        table.add_row("anything else", "Insert each character as a symbol")
        self.console.print(table)

        names = ", ".join(self.catalogue.names())
        self.console.print(f"[dim]Available names: {names}[/dim]")
