"""CLI interface for semattr using Typer framework."""

import importlib
import json as jsonlib
import logging
import sys
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.table import Table

from semattr import __description__, __version__
from semattr.attributes import attributes_for
from semattr.config import LogLevel, SemattrConfig, load_config
from semattr.engine import ValidationEngine
from semattr.errors import ConfigurationError
from semattr.predicates.base import Predicate
from semattr.predicates.catalog import default_catalog

app = typer.Typer(
    name="semattr",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()

LOG_LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"semattr version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, help="Show version and exit")
    ] = False,
) -> None:
    """semattr - Declarative predicate-based validation for record fields."""


def _configure_logging(config: SemattrConfig) -> None:
    logging.basicConfig(
        level=LOG_LEVELS[LogLevel(config.logging.level).value],
        format="%(levelname)s %(name)s: %(message)s"
    )


def _load_record_type(reference: str) -> type:
    """Import ``package.module:ClassName``."""
    module_name, _, class_name = reference.partition(":")
    if not module_name or not class_name:
        raise ValueError(f"Expected MODULE:CLASS, got '{reference}'")

    cwd = str(Path.cwd())
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ValueError(f"Cannot import module '{module_name}': {e}")

    record_type = getattr(module, class_name, None)
    if not isinstance(record_type, type):
        raise ValueError(f"'{class_name}' is not a class in module '{module_name}'")
    return record_type


def _parse_extra(pairs: list[str]) -> dict[str, str]:
    extra = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected key=value for --extra, got '{pair}'")
        extra[key] = value
    return extra


def _describe_condition(predicate: Predicate) -> str:
    condition = predicate.validate_if
    if condition is None:
        return ""
    if isinstance(condition, str):
        return condition
    return getattr(condition, "__name__", repr(condition))


def _predicate_to_dict(predicate: Predicate) -> dict[str, Any]:
    return {
        "name": predicate.name,
        "kind": predicate.kind,
        "errorMessage": predicate.error_message,
        "allowEmpty": predicate.allow_empty,
        "validateOn": predicate.validate_on.value,
        "validateIf": _describe_condition(predicate) or None,
    }


@app.command()
def predicates() -> None:
    """List the predicates available by name."""
    catalog = default_catalog()

    table = Table(title=f"Predicates ({catalog.count()})")
    table.add_column("Name", style="cyan")
    table.add_column("Class", style="yellow")
    table.add_column("Default Message", style="white")
    table.add_column("Allows Empty", style="dim")

    for name in catalog.names():
        predicate_class = catalog.resolve(name)
        table.add_row(
            name,
            predicate_class.__name__,
            predicate_class.default_error_message,
            "yes" if predicate_class.default_allow_empty else "no"
        )

    console.print(table)


@app.command()
def describe(
    record: Annotated[
        str,
        typer.Argument(help="Record type as MODULE:CLASS")
    ],
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: table, json (default: table)")
    ] = "table",
    config: Annotated[
        Path,
        typer.Option("--config", "-c", help="Configuration file path (default: search for .semattr.json)")
    ] = None,
) -> None:
    """Show the fields of a record type and their predicates."""
    if format not in ("table", "json"):
        console.print(f"[red]Error:[/red] Invalid format '{format}'. Must be one of: table, json")
        raise typer.Exit(1)

    try:
        _configure_logging(load_config(config))
        record_type = _load_record_type(record)
        attribute_set = attributes_for(record_type)
    except (ValueError, ConfigurationError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if format == "json":
        data = {
            registry.field: [_predicate_to_dict(p) for p in registry]
            for registry in attribute_set.fields()
        }
        print(jsonlib.dumps(data, indent=2))
        return

    if not len(attribute_set):
        console.print(f"[yellow]{record_type.__name__} declares no predicates[/yellow]")
        return

    table = Table(title=f"{record_type.__name__} ({len(attribute_set)} fields)")
    table.add_column("Field", style="cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Predicate", style="yellow")
    table.add_column("On", style="white")
    table.add_column("Empty", style="white")
    table.add_column("If", style="white")
    table.add_column("Message", style="green")

    for registry in attribute_set.fields():
        for position, predicate in enumerate(registry, start=1):
            table.add_row(
                registry.field if position == 1 else "",
                str(position),
                predicate.name,
                predicate.validate_on.value,
                "allowed" if predicate.allow_empty else "rejected",
                _describe_condition(predicate),
                predicate.error_message
            )

    console.print(table)


@app.command()
def check(
    record: Annotated[
        str,
        typer.Argument(help="Record type as MODULE:CLASS")
    ],
    field: Annotated[
        str,
        typer.Argument(help="Field to check the value against")
    ],
    value: Annotated[
        str,
        typer.Argument(help="Candidate value")
    ],
    extra: Annotated[
        list[str],
        typer.Option("--extra", "-e", help="Context value as key=value (repeatable)")
    ] = None,
    unify: Annotated[
        bool,
        typer.Option("--unify", help="Apply conditions and empty-value rules like full validation")
    ] = False,
    config: Annotated[
        Path,
        typer.Option("--config", "-c", help="Configuration file path (default: search for .semattr.json)")
    ] = None,
) -> None:
    """Report the error a value would produce on a field, out of context."""
    try:
        semattr_config = load_config(config)
        _configure_logging(semattr_config)
        record_type = _load_record_type(record)
        extra_values = _parse_extra(extra or [])

        engine = ValidationEngine(semattr_config)
        message = engine.expected_error_for(
            record_type, field, value, extra_values, unify=unify or None
        )
    except (ValueError, ConfigurationError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if message is None:
        console.print(f"[green]valid[/green] {record_type.__name__}.{field}")
        return

    console.print(f"[red]invalid[/red] {record_type.__name__}.{field} {message}")
    raise typer.Exit(1)


if __name__ == "__main__":
    app()
