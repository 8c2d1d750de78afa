"""
Main CLI application for Formula CLI.

Provides a Typer-based command-line interface for creating, editing and
rendering formula documents.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..config import get_config_manager, load_config
from ..converters.json_codec import FormulaJSONConverter
from ..core.exceptions import FormulaError
from ..core.formula_model import Node
from ..editor.controller import FormulaController
from .session import CommandProcessor, InteractiveSession, formula_tree

# Initialize Typer app
app = typer.Typer(
    name="formula-cli",
    help="Edit math formulas as TeX trees from the terminal",
    add_completion=False,
    rich_markup_mode="rich"
)

# Global console for rich output
console = Console()


def _fail(message: str) -> None:
    console.print(f"[red]Error: {escape(message)}[/red]")
    raise typer.Exit(1)


def _load_document(file_path: Path) -> Node:
    if not file_path.exists():
        _fail(f"File not found: {file_path}")
    try:
        return FormulaJSONConverter().load(file_path)
    except FormulaError as e:
        _fail(e.message)
    except OSError as e:
        _fail(f"Could not read {file_path}: {e}")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """
    Formula CLI keeps a formula as an editable tree with a cursor and
    renders it to TeX.
    """
    level = logging.DEBUG if verbose else getattr(logging, load_config().log_level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.command()
def new(
    file_path: Path = typer.Argument(..., help="Path of the formula document to create"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
) -> None:
    """
    Create an empty formula document.
    """
    if file_path.exists() and not force:
        _fail(f"{file_path} already exists. Use --force to overwrite it.")

    config = load_config()
    try:
        FormulaJSONConverter(indent=config.indent).save(Node(), file_path)
    except OSError as e:
        _fail(f"Could not write {file_path}: {e}")
    console.print(f"[green]Created {escape(str(file_path))}[/green]")


@app.command()
def render(
    file_path: Path = typer.Argument(..., help="Formula document to render"),
    cursor_color: Optional[str] = typer.Option(
        None, "--cursor-color", "-c", help="Show the cursor in this color (#rrggbb)"
    ),
    no_placeholder: bool = typer.Option(
        False, "--no-placeholder", help="Render an empty formula as an empty string"
    ),
) -> None:
    """
    Print the TeX string of a formula document.
    """
    root = _load_document(file_path)
    placeholder = load_config().placeholder_when_empty and not no_placeholder

    try:
        if cursor_color:
            tex = FormulaController(root).build_tex(
                cursor_color=cursor_color,
                placeholder_when_empty=placeholder,
            )
        else:
            tex = root.build_tex_string(placeholder_when_empty=placeholder)
    except ValueError as e:
        _fail(str(e))

    typer.echo(tex)


@app.command()
def show(
    file_path: Path = typer.Argument(..., help="Formula document to inspect"),
) -> None:
    """
    Show the tree structure of a formula document.
    """
    root = _load_document(file_path)
    console.print(formula_tree(root, label=file_path.name))


@app.command()
def apply(
    file_path: Path = typer.Argument(..., help="Formula document to edit (created if missing)"),
    commands: List[str] = typer.Argument(..., help="Editing commands, e.g. 1 /right \\frac 2"),
) -> None:
    """
    Apply editing commands to a formula document and save it.

    Uses the same commands as [cyan]formula-cli edit[/cyan].
    """
    config = load_config()
    controller = FormulaController(_load_document(file_path) if file_path.exists() else None)

    try:
        processor = CommandProcessor(controller, config.build_catalogue())
        for command in commands:
            processor.execute(command)
        controller.save(file_path, indent=config.indent)
    except FormulaError as e:
        _fail(e.message)
    except OSError as e:
        _fail(f"Could not write {file_path}: {e}")

    typer.echo(controller.current_value(placeholder_when_empty=config.placeholder_when_empty))


@app.command()
def edit(
    file_path: Path = typer.Argument(..., help="Formula document to edit (created on /save)"),
) -> None:
    """
    Edit a formula interactively.
    """
    config = load_config()
    try:
        session = InteractiveSession(config, console=console)
        session.open(file_path)
    except FormulaError as e:
        _fail(e.message)
    session.start()


@app.command()
def functions() -> None:
    """
    List the functions and symbols that can be inserted with \\name.
    """
    try:
        catalogue = load_config().build_catalogue()
    except FormulaError as e:
        _fail(e.message)

    table = Table(title="Functions")
    table.add_column("Name", style="cyan")
    table.add_column("TeX")
    table.add_column("Arguments", style="magenta")
    table.add_column("Description", style="dim")
    for name in sorted(catalogue.functions):
        spec = catalogue.functions[name]
        table.add_row(
            name,
            escape(spec.expression),
            ", ".join(arg.value for arg in spec.args),
            spec.description,
        )
    console.print(table)

    symbols = Table(title="Symbols")
    symbols.add_column("Name", style="cyan")
    symbols.add_column("TeX")
    for name in sorted(catalogue.symbols):
        symbols.add_row(name, escape(catalogue.symbols[name]))
    console.print(symbols)


@app.command()
def config(
    show: bool = typer.Option(False, "--show", help="Show current configuration"),
    create_default: bool = typer.Option(False, "--create-default", help="Create default config file"),
) -> None:
    """
    Manage Formula CLI configuration.
    """
    config_manager = get_config_manager()

    if create_default:
        config_manager.create_default_config()
        console.print(f"Created default configuration at {escape(str(config_manager.config_file))}")
        return

    if show:
        config_info = config_manager.get_config_info()
        current_config = load_config()

        config_display = f"""[bold]Formula CLI Configuration[/bold]

[bold cyan]Rendering:[/bold cyan]
• Cursor Color: {current_config.cursor_color}
• Placeholder When Empty: {current_config.placeholder_when_empty}
• JSON Indent: {current_config.indent}
• Log Level: {current_config.log_level}

[bold yellow]Catalogue Extensions:[/bold yellow]
• Functions: {', '.join(config_info['extra_functions']) or 'none'}
• Symbols: {', '.join(config_info['extra_symbols']) or 'none'}

[bold magenta]Files:[/bold magenta]
• Config File: {escape(config_info['config_file'])}
• Exists: {'Yes' if config_info['config_exists'] else 'No'}"""

        console.print(Panel(config_display, border_style="green"))
        return

    # Default: show basic info
    console.print("Use [cyan]formula-cli config --show[/cyan] to see full configuration")
    console.print("Use [cyan]formula-cli config --create-default[/cyan] to create a default config file")


if __name__ == "__main__":
    app()
