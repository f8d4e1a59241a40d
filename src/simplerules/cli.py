"""CLI interface for simplerules using Typer framework."""

import json as jsonlib
import logging
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from simplerules import __description__, __version__
from simplerules.config import LogLevel, SimpleRulesConfig, load_config
from simplerules.engine import SimpleRulesEngine
from simplerules.exceptions import ConfigurationError
from simplerules.introspection import import_string
from simplerules.results import ValidationReport, ValidationStatus

app = typer.Typer(
    name="simplerules",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()

_LOG_LEVELS = {
    LogLevel.ERROR.value: logging.ERROR,
    LogLevel.WARN.value: logging.WARNING,
    LogLevel.INFO.value: logging.INFO,
    LogLevel.DEBUG.value: logging.DEBUG,
}

_STATUS_STYLES = {
    ValidationStatus.PASS: "green",
    ValidationStatus.WARN: "yellow",
    ValidationStatus.FAIL: "red",
}


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"simplerules version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True, help="Show version and exit")
    ] = False,
) -> None:
    """simplerules - declarative relational validation for Python objects."""


def _setup_logging(config: SimpleRulesConfig) -> None:
    logging.basicConfig(
        level=_LOG_LEVELS.get(config.logging.level, logging.WARNING),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _build_engine(config_path: Optional[Path], entity: str) -> tuple[SimpleRulesEngine, type]:
    """Load configuration, build the engine and resolve the entity class."""
    try:
        config = load_config(config_path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)

    _setup_logging(config)

    try:
        entity_type = import_string(entity)
        engine = SimpleRulesEngine.from_config(config)
    except (ImportError, ValueError, TypeError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(2)

    if not isinstance(entity_type, type):
        console.print(f"[red]Error:[/red] {entity} is not a class")
        raise typer.Exit(2)
    return engine, entity_type


def load_records(path: Path) -> list[dict[str, Any]]:
    """Read entity records from a JSON array/object or a JSONL file."""
    text = path.read_text(encoding="utf-8")
    if path.suffix == ".jsonl":
        records = [jsonlib.loads(line) for line in text.splitlines() if line.strip()]
    else:
        data = jsonlib.loads(text)
        records = data if isinstance(data, list) else [data]

    for i, record in enumerate(records):
        if not isinstance(record, dict):
            raise ValueError(f"Record {i} is not a JSON object")
    return records


def _print_report(report: ValidationReport) -> None:
    table = Table(title="Validation Results")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Key", style="cyan")
    table.add_column("Status")
    table.add_column("Failures")

    for i, result in enumerate(report.results):
        style = _STATUS_STYLES[result.status]
        failures = "\n".join(str(failure) for failure in result.failures) or "-"
        key = "" if result.key is None else str(result.key)
        table.add_row(str(i), key, f"[{style}]{result.status.value.upper()}[/{style}]", failures)

    console.print(table)

    counters = report.counters
    style = _STATUS_STYLES[report.status]
    console.print(
        f"[{style}]{report.status.value.upper()}[/{style}] "
        f"{counters['valid']}/{counters['entities']} valid, "
        f"{counters['errors']} errors, {counters['warnings']} warnings"
    )


@app.command()
def validate(
    data: Annotated[
        Path,
        typer.Argument(help="JSON (array or object) or JSONL file of entity records")
    ],
    entity: Annotated[
        str,
        typer.Option("--entity", "-e", help="Entity class as package.module:Class")
    ],
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: table, json (default: table)")
    ] = "table",
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .simplerules.json)")
    ] = None,
) -> None:
    """Validate entity records against their bound rules."""
    valid_formats = ["table", "json"]
    if format not in valid_formats:
        console.print(f"[red]Error:[/red] Invalid format '{format}'. Must be one of: {', '.join(valid_formats)}")
        raise typer.Exit(2)

    if not data.exists():
        console.print(f"[red]Error:[/red] Data file not found: {data}")
        raise typer.Exit(2)

    engine, entity_type = _build_engine(config, entity)

    try:
        records = load_records(data)
        entities = [entity_type(**record) for record in records]
    except (ValueError, TypeError) as e:
        console.print(f"[red]Error:[/red] Could not load {data}: {e}")
        raise typer.Exit(2)

    try:
        report = engine.report(entities, entity_type)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(2)
    except TypeError as e:
        console.print(f"[red]Input error:[/red] Records do not match {entity_type.__name__}: {e}")
        raise typer.Exit(2)

    if format == "json":
        console.print_json(jsonlib.dumps(report.to_dict(), default=str))
    else:
        _print_report(report)

    raise typer.Exit(report.exit_code)


@app.command()
def rules(
    entity: Annotated[
        str,
        typer.Option("--entity", "-e", help="Entity class as package.module:Class")
    ],
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .simplerules.json)")
    ] = None,
) -> None:
    """List the compiled rules of an entity type."""
    engine, entity_type = _build_engine(config, entity)

    try:
        rule_set = engine.rules_for(entity_type)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(2)

    table = Table(title=f"Rules for {entity_type.__name__} ({rule_set.metadata_type.__name__})")
    table.add_column("Property", style="cyan")
    table.add_column("Operator")
    table.add_column("Severity")
    table.add_column("Message")

    for rule in rule_set.rules:
        kind = getattr(rule.operator_kind, "value", rule.operator_kind)
        table.add_row(rule.property_name, str(kind), rule.severity.value, rule.message)

    console.print(table)
    if rule_set.key is not None:
        console.print(f"[dim]Entity key:[/dim] {rule_set.key.name}")


if __name__ == "__main__":
    app()
