"""Main CLI entry point for Baseline Sidekick."""

import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from . import __version__
from .analyzer import BaselineAnalyzer
from .config import Config
from .dataset import BaselineDataset
from .diagnostics import Diagnostic
from .errors import DataLoadError, ErrorInfo, ErrorReporter
from .extractors.registry import language_for_path
from .logging_setup import setup_logging
from .models import BaselineStatus


@click.group()
@click.version_option(__version__, prog_name="baseline")
def cli():
    """Baseline Sidekick - check web code against the Baseline compatibility data."""
    pass


@cli.command()
@click.argument(
    "files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option("--language", "-l", help="Language id for every file (default: from the file extension)")
@click.option(
    "--dataset",
    "-d",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Compatibility dataset (JSON or YAML) instead of the bundled one",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def check(files: tuple[Path, ...], language: Optional[str], dataset: Optional[Path], output_format: str, verbose: bool):
    """Report features in FILES that are not Baseline.

    Exits with status 1 when any diagnostic is found.

    Examples:
        baseline check styles.css app.ts index.html

        baseline check snippet.txt --language css --format json
    """
    config = _load_config(dataset)
    setup_logging(config.log_level, verbose)

    reporter = ErrorReporter(notifier=_notify)
    analyzer = BaselineAnalyzer(config, reporter=reporter)
    try:
        results = asyncio.run(_check_files(analyzer, files, language))
    except DataLoadError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(2)
    finally:
        analyzer.dispose()

    total = sum(len(diagnostics or []) for _, diagnostics in results)
    if output_format == "json":
        click.echo(json.dumps(_to_json(results), indent=2))
    else:
        _render_table(results, total)

    sys.exit(1 if total else 0)


@cli.command()
@click.argument("feature_id")
@click.option(
    "--dataset",
    "-d",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Compatibility dataset (JSON or YAML) instead of the bundled one",
)
def feature(feature_id: str, dataset: Optional[Path]):
    """Show the compatibility record for FEATURE_ID."""
    config = _load_config(dataset)
    setup_logging(config.log_level)

    data = BaselineDataset(config.dataset_path, ErrorReporter(notifier=_notify))
    try:
        data.load()
    except DataLoadError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(2)

    record = data.get_feature_data(feature_id)
    if record is None:
        click.echo(f"Unknown feature: {feature_id}", err=True)
        sys.exit(1)

    labels = {
        BaselineStatus.SUPPORTED: "[green]widely available[/green]",
        BaselineStatus.LIMITED: "[yellow]newly available[/yellow]",
        BaselineStatus.NOT_SUPPORTED: "[red]limited availability[/red]",
    }
    table = Table(title=record.name, show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("id", record.id)
    table.add_row("baseline", labels[record.baseline_status])
    table.add_row("low date", str(record.low_date) if record.low_date else "-")
    table.add_row("high date", str(record.high_date) if record.high_date else "-")
    table.add_row("spec", record.spec_url or "-")
    table.add_row("docs", record.doc_url or "-")
    Console().print(table)


def _load_config(dataset: Optional[Path]) -> Config:
    config = Config.from_env()
    if dataset is not None:
        config = config.model_copy(update={"dataset_path": dataset})
    return config


def _notify(info: ErrorInfo) -> None:
    click.echo(f"Error: {info.message}", err=True)


async def _check_files(
    analyzer: BaselineAnalyzer, files: tuple[Path, ...], language: Optional[str]
) -> list[tuple[Path, Optional[list[Diagnostic]]]]:
    results = []
    for path in files:
        language_id = language or language_for_path(str(path))
        if language_id is None:
            click.echo(f"Skipping {path}: unsupported file type", err=True)
            results.append((path, None))
            continue
        text = path.read_text(encoding="utf-8", errors="replace")
        diagnostics = await analyzer.analyze(str(path), text, language_id)
        if diagnostics is None:
            click.echo(f"Skipping {path}: could not be analyzed", err=True)
        results.append((path, diagnostics))
    return results


def _to_json(results: list[tuple[Path, Optional[list[Diagnostic]]]]) -> list[dict]:
    return [
        {
            "file": str(path),
            "analyzed": diagnostics is not None,
            "diagnostics": [d.to_dict() for d in diagnostics or []],
        }
        for path, diagnostics in results
    ]


def _render_table(results: list[tuple[Path, Optional[list[Diagnostic]]]], total: int) -> None:
    console = Console()
    if total:
        table = Table(title="Baseline diagnostics")
        table.add_column("File")
        table.add_column("Line", justify="right")
        table.add_column("Feature")
        table.add_column("Message")
        for path, diagnostics in results:
            for diagnostic in diagnostics or []:
                table.add_row(
                    str(path),
                    f"{diagnostic.range.start_line + 1}:{diagnostic.range.start_column + 1}",
                    diagnostic.feature_id,
                    diagnostic.message,
                )
        console.print(table)

    analyzed = sum(1 for _, diagnostics in results if diagnostics is not None)
    noun = "diagnostic" if total == 1 else "diagnostics"
    console.print(f"{total} {noun} in {analyzed} analyzed file(s)")


if __name__ == "__main__":
    cli()
