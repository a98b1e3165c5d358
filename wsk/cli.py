"""CLI interface for Wikibase Schema Kit."""

import json
import sys
from pathlib import Path

import click
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from wsk import __version__
from wsk.config.manager import ConfigManager
from wsk.config.settings import LOG_LEVELS, settings
from wsk.errors import ColumnNotFoundError, SchemaParseError
from wsk.export import WbiExporter, datatypes_from_schema
from wsk.logging_config import configure_logging
from wsk.mapping import EvaluationResult, SchemaEvaluator
from wsk.rows import DataFrameRowSource, FacetEngine
from wsk.schema import SchemaCodec

console = Console()
stderr_console = Console(file=sys.stderr)


@click.group()
@click.version_option(version=__version__)
@click.option(
    '--log-level',
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help='Logging level (defaults to WSK_LOG_LEVEL)'
)
def cli(log_level: str | None) -> None:
    """Wikibase Schema Kit - evaluate Wikibase schemas against tabular data"""
    configure_logging(log_level or settings.log_level)


@cli.command()
@click.option(
    '--path', '-p',
    'schema_path',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help='Path to schema JSON document'
)
@click.option(
    '--output', '-o',
    'output_path',
    type=click.Path(dir_okay=False, path_type=Path),
    help='Write the canonical schema here instead of stdout'
)
def normalize(schema_path: Path, output_path: Path | None) -> None:
    """Parse a schema (legacy layouts included) and print its canonical form."""
    codec = SchemaCodec()
    try:
        schema = codec.load(schema_path)
    except SchemaParseError as e:
        stderr_console.print(f"[red]✗ Invalid schema: {e}[/red]")
        raise click.Abort()

    if output_path is None:
        click.echo(codec.dumps(schema))
        return

    codec.dump(schema, output_path)
    console.print(
        f"[green]✓ Wrote {len(schema.statements)} statements and "
        f"{len(schema.terms)} terms to {output_path}[/green]"
    )


@cli.command()
@click.option(
    '--config', '-c',
    'config_path',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default='configs/project.yml',
    help='Path to project config'
)
@click.option(
    '--output', '-o',
    'output_path',
    type=click.Path(dir_okay=False, path_type=Path),
    help='Where to write item updates (overrides output_path in the config)'
)
@click.option(
    '--workers', '-w',
    type=int,
    default=None,
    help='Rows evaluated in parallel (defaults to WSK_EVALUATION_WORKERS)'
)
def evaluate(config_path: Path, output_path: Path | None, workers: int | None) -> None:
    """Evaluate the project's schema against its CSV file."""
    console.print("[blue]Starting schema evaluation...[/blue]")

    try:
        manager = ConfigManager(config_path)
        config = manager.config
        schema = SchemaCodec().load(manager.get_schema_path())

        matches_path = manager.get_matches_path()
        matches = (
            DataFrameRowSource.load_matches(matches_path, encoding=config.csv.encoding)
            if matches_path
            else None
        )
        rows = DataFrameRowSource.from_csv(
            manager.get_csv_path(),
            encoding=config.csv.encoding,
            delimiter=config.csv.delimiter,
            matches=matches,
            id_columns=config.reconciliation.id_columns,
        )
        row_filter = FacetEngine(rows, config.engine) if config.engine else None

        evaluator = SchemaEvaluator(max_workers=workers or settings.evaluation_workers)
        result = evaluator.evaluate(schema, rows, row_filter)
    except (
        FileNotFoundError,
        ValidationError,
        yaml.YAMLError,
        SchemaParseError,
        ColumnNotFoundError,
        ValueError,
    ) as e:
        stderr_console.print(f"[red]✗ Evaluation failed: {e}[/red]")
        raise click.Abort()

    _print_summary(config.name, result)

    exporter = WbiExporter(datatypes_from_schema(schema), entity_prefix=settings.entity_prefix)
    try:
        document = [exporter.to_json(update) for update in result.updates]
    except ValueError as e:
        stderr_console.print(f"[red]✗ Export failed: {e}[/red]")
        raise click.Abort()

    target = output_path or manager.get_output_path()
    if target is None:
        click.echo(json.dumps(document, indent=2, ensure_ascii=False))
        return

    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, 'w', encoding='utf-8') as f:
        json.dump(document, f, indent=2, ensure_ascii=False)
    console.print(f"[green]✓ Wrote {len(document)} item updates to {target}[/green]")


def _print_summary(project_name: str, result: EvaluationResult) -> None:
    table = Table(title=f"Evaluation of {project_name}")
    table.add_column("Subject")
    table.add_column("Statements", justify="right")
    table.add_column("Labels", justify="right")
    table.add_column("Descriptions", justify="right")
    table.add_column("Aliases", justify="right")
    for update in result.updates:
        table.add_row(
            update.subject_id,
            str(len(update.added_statements)),
            str(len(update.labels)),
            str(len(update.descriptions)),
            str(len(update.aliases)),
        )
    stderr_console.print(table)

    if result.issues:
        stderr_console.print(
            f"[yellow]! {len(result.issues)} statements or terms skipped "
            f"because a cell could not be parsed[/yellow]"
        )
        for issue in result.issues:
            stderr_console.print(f"  row {issue.row_index}: {issue.reason}")


if __name__ == "__main__":
    cli()
