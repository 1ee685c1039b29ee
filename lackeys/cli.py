"""CLI for inspecting service registrations."""

import importlib
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from lackeys.lib.config_manager import config
from lackeys.lib.defaults import get_category
from lackeys.lib.logging_config import get_logger, setup_logging
from lackeys.registration import get_all_registrations, lookup

app = typer.Typer(help="Inspect view/service registrations")
console = Console()
logger = get_logger(__name__)


def _import_modules(modules: list[str]) -> None:
    """Import modules so their services register themselves."""
    for module_name in modules:
        try:
            importlib.import_module(module_name)
        except ImportError as e:
            console.print(f"[bold red]Could not import {module_name}:[/bold red] {e}")
            raise typer.Exit(1)
        logger.debug(f"Imported {module_name}")


def _resolve_class(path: str) -> type:
    """Resolve "package.module:ClassName" to a class."""
    module_name, sep, attr = path.partition(":")
    if not sep or not attr:
        console.print(f"[bold red]Expected module:Class, got {path}[/bold red]")
        raise typer.Exit(2)

    _import_modules([module_name])
    obj = importlib.import_module(module_name)
    for part in attr.split("."):
        obj = getattr(obj, part, None)
        if obj is None:
            console.print(f"[bold red]{attr} not found in {module_name}[/bold red]")
            raise typer.Exit(1)
    return obj


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output"),
):
    """Configure logging before any command runs."""
    setup_logging(level="DEBUG" if verbose else None, fmt="text")


@app.command()
def show(
    modules: list[str] = typer.Argument(..., help="Modules that declare services"),
):
    """List every registration made by the given modules."""
    _import_modules(modules)
    registrations = get_all_registrations()

    if not registrations:
        console.print("[dim]No registrations found[/dim]")
        return

    table = Table(title="Registrations")
    table.add_column("View", style="cyan")
    table.add_column("Service", style="green")
    table.add_column("Methods")
    table.add_column("Callbacks")

    for view_class, registration in sorted(
        registrations.items(), key=lambda item: item[0].__qualname__
    ):
        callbacks = ", ".join(
            f"{event} → {method}"
            for event, method in sorted(registration.callback_map.items())
        )
        table.add_row(
            f"{view_class.__module__}.{view_class.__qualname__}",
            registration.service_class.__qualname__,
            ", ".join(sorted(registration.method_names)),
            callbacks,
        )

    console.print(table)


@app.command()
def check(
    view: str = typer.Argument(..., help="View class as module:Class"),
    method: Optional[str] = typer.Option(None, "--method", "-m", help="Delegated method name"),
    event: Optional[str] = typer.Option(None, "--event", "-e", help="Lifecycle event name"),
):
    """Check whether a view class delegates a method or handles an event."""
    view_class = _resolve_class(view)
    registration = lookup(view_class)

    if registration is None:
        console.print(f"[yellow]{view_class.__qualname__} has no registration[/yellow]")
        raise typer.Exit(1)

    ok = True
    if method is not None:
        if registration.has_method(method):
            console.print(f"[green]{method}[/green] → {registration.service_class.__qualname__}")
        else:
            console.print(f"[red]{method} is not delegated[/red]")
            ok = False

    if event is not None:
        handler = registration.callback_for(event)
        if handler:
            console.print(f"[green]{event}[/green] → {registration.service_class.__qualname__}.{handler}")
        else:
            console.print(f"[red]{event} is not handled[/red]")
            ok = False

    if not ok:
        raise typer.Exit(1)


@app.command(name="config")
def show_config():
    """Show resolved configuration values."""
    table = Table(title="Configuration")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    table.add_column("Category", style="dim")

    for key, value in config.get_all().items():
        table.add_row(key, str(value), get_category(key))

    console.print(table)


if __name__ == "__main__":
    app()
