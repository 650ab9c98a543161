"""Command-line interface for bindflow."""

import logging
import sys
from typing import NoReturn

import click

from .engine import BindingEngine
from .graph.node_types import EdgeType, ElementType
from .kinds.errors import ConfigurationError
from .output.formatter import format_connections, format_validation_result
from .schema.config import EngineConfig
from .schema.errors import SchemaError, SchemaValidationError
from .schema.loader import parse_config
from .validators.runner import validate_diagram_file

FORMAT_OPTION = click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)
CONFIG_OPTION = click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True),
    default=None,
    help="Engine config YAML file",
)


def _schema_error(e: SchemaError) -> NoReturn:
    """Report a file or schema error and exit with code 2."""
    if isinstance(e, SchemaValidationError):
        click.echo(f"Schema validation error: {e}", err=True)
        for line in e.lines():
            click.echo(f"  - {line}", err=True)
    else:
        click.echo(f"Error loading file: {e}", err=True)
    sys.exit(2)


def _load_config(config_file: str | None) -> EngineConfig:
    if config_file is None:
        return EngineConfig()
    try:
        return parse_config(config_file)
    except SchemaError as e:
        _schema_error(e)


def _load_engine(diagram_file: str, config: EngineConfig) -> BindingEngine:
    engine = BindingEngine(config=config)
    try:
        engine.modeler.import_file(diagram_file)
    except SchemaError as e:
        _schema_error(e)
    engine.settle()
    return engine


@click.group()
@click.version_option(package_name="bindflow")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging")
def main(verbose: bool):
    """bindflow: task kinds and message-flow classification for process diagrams."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("diagram_file", type=click.Path(exists=True))
@FORMAT_OPTION
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Exit with code 1 when there are warnings",
)
@CONFIG_OPTION
def validate(diagram_file: str, output_format: str, strict: bool, config_file: str | None):
    """Audit a diagram file.

    DIAGRAM_FILE is the path to a YAML diagram file.

    Exit codes:
      0 - Validation passed (warnings allowed)
      1 - Warnings found with --strict
      2 - File or schema error
    """
    config = _load_config(config_file)
    try:
        result = validate_diagram_file(diagram_file, config)
    except SchemaError as e:
        _schema_error(e)

    click.echo(format_validation_result(result, output_format))  # type: ignore

    if strict and result.warnings:
        sys.exit(1)
    sys.exit(0)


@main.command()
@click.argument("diagram_file", type=click.Path(exists=True))
@FORMAT_OPTION
@CONFIG_OPTION
def classify(diagram_file: str, output_format: str, config_file: str | None):
    """Classify every message flow of a diagram.

    Imports the diagram, lets the engine settle and lists each message flow
    with the classification it ends up with.

    Exit codes:
      0 - Success
      2 - File or schema error
    """
    engine = _load_engine(diagram_file, _load_config(config_file))

    connections = []
    for flow_id in engine.graph.iter_flows(EdgeType.MESSAGE_FLOW):
        source, target = engine.graph.get_flow_endpoints(flow_id)
        state = engine.classifier.stored_state(flow_id)
        connections.append(
            {
                "id": flow_id,
                "source": source,
                "target": target,
                "classification": state.classification,
                "participant1": state.source_pool,
                "participant2": state.target_pool,
            }
        )

    click.echo(format_connections(connections, output_format))  # type: ignore
    sys.exit(0)


@main.command("check-kind")
@click.argument("diagram_file", type=click.Path(exists=True))
@click.argument("task_id")
@click.argument("kind")
@FORMAT_OPTION
@CONFIG_OPTION
def check_kind(
    diagram_file: str,
    task_id: str,
    kind: str,
    output_format: str,
    config_file: str | None,
):
    """Show the advisories for changing a task's kind.

    KIND is one of movement, binding, unbinding or none.

    Exit codes:
      0 - Success (advisories never block a change)
      2 - File or schema error, unknown task or unknown kind
    """
    engine = _load_engine(diagram_file, _load_config(config_file))

    if engine.graph.element_type(task_id) != ElementType.TASK:
        click.echo(f"Unknown task: {task_id}", err=True)
        sys.exit(2)

    try:
        result = engine.validate_kind_change(task_id, kind)
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)

    click.echo(format_validation_result(result, output_format))  # type: ignore
    sys.exit(0)


if __name__ == "__main__":
    main()
