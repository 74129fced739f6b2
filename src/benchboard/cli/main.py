"""Main CLI entry point for benchboard.

This module defines the Typer application and all CLI commands.
Generated documents go to stdout (or ``--output``); diagnostics go
to stderr.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from benchboard import __version__
from benchboard.core.config import get_settings
from benchboard.core.exceptions import BenchboardError, ConfigurationError

logger = logging.getLogger(__name__)

# Create the main Typer app
app = typer.Typer(
    name="benchboard",
    help="benchboard: Benchmark history tracking, dashboards and CI reports.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"benchboard v{__version__}")
        raise typer.Exit()


_HANDLER_NAME = "benchboard-cli"


def _configure_logging(level: int | str) -> logging.Handler:
    # A fresh handler per invocation binds whatever sys.stderr is current.
    package_logger = logging.getLogger("benchboard")
    for old in [h for h in package_logger.handlers if h.get_name() == _HANDLER_NAME]:
        package_logger.removeHandler(old)
        old.close()

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    return handler


def _fail(error: Exception) -> typer.Exit:
    typer.echo(f"Error: {error}", err=True)
    return typer.Exit(1)


def _read_stdin() -> str:
    return typer.get_text_stream("stdin").read()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            help="Log debug diagnostics to stderr.",
        ),
    ] = False,
) -> None:
    """benchboard: Track benchmark results across commits.

    Append runs to a JSON history, render it as an interactive
    dashboard, and summarize it as Markdown for pull requests.
    """
    try:
        settings = get_settings()
    except ValidationError as e:
        raise _fail(ConfigurationError(f"Invalid settings: {e}")) from e
    handler = _configure_logging(logging.DEBUG if verbose else settings.log_level)
    ctx.call_on_close(lambda: logging.getLogger("benchboard").removeHandler(handler))


@app.command()
def version() -> None:
    """Show the current version."""
    typer.echo(f"benchboard v{__version__}")


@app.command()
def update(
    name: Annotated[str, typer.Argument(help="Name of the benchmark suite.")],
    metadata: Annotated[
        Path,
        typer.Option("--metadata", "-m", help="Path to the CI run metadata JSON."),
    ],
    results: Annotated[
        Path,
        typer.Option("--results", "-r", help="Path to the benchmark results JSON of the run."),
    ],
    history: Annotated[
        Path | None,
        typer.Option("--history", help="Path to the existing history JSON (missing file = empty history)."),
    ] = None,
    schema: Annotated[
        str | None,
        typer.Option("--schema", "-s", help="Comma-separated fields identifying a benchmark."),
    ] = None,
    group_by: Annotated[
        str | None,
        typer.Option("--group-by", "-g", help="Comma-separated fields splitting charts."),
    ] = None,
    bigger_is_better: Annotated[
        str,
        typer.Option("--bigger-is-better", help='Whether larger values are better: "true" or "false".'),
    ] = "false",
    max_items: Annotated[
        int | None,
        typer.Option("--max-items", help="Maximum runs kept for the suite."),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the updated history here instead of stdout."),
    ] = None,
) -> None:
    """Append a benchmark run to a suite of the history.

    Examples:
        benchboard update ML-KEM -m metadata.json -r results.json --history data.json -o data.json
        benchboard update ML-KEM -m metadata.json -r results.json --schema name,os,keySize --group-by os
    """
    from benchboard.core.types import HistoryDocument
    from benchboard.history import (
        HistoryStore,
        append_entry,
        load_metadata,
        load_results,
        new_entry,
        parse_bool,
        parse_group_by,
        parse_schema,
    )

    settings = get_settings()
    fields = parse_schema(schema) if schema is not None else list(settings.default_schema)
    groups = parse_group_by(group_by) if group_by is not None else list(settings.default_group_by)

    try:
        direction = parse_bool(bigger_is_better)
        run_metadata = load_metadata(metadata)
        entry = new_entry(run_metadata, load_results(results, fields), direction)
        document = HistoryStore(history).load() if history else HistoryDocument(entries={})
        previous = append_entry(
            document,
            name,
            entry,
            fields,
            groups,
            max_items if max_items is not None else settings.max_items,
        )
    except BenchboardError as e:
        raise _fail(e) from e

    if previous is not None:
        logger.info(f"Previous run of '{name}' was on commit {previous.commit.id}")

    if output:
        HistoryStore(output).save(document)
        logger.info(f"History written to {output}")
    else:
        typer.echo(document.to_json())


@app.command()
def dashboard(
    history: Annotated[
        Path | None,
        typer.Option("--history", help="Path to the history JSON."),
    ] = None,
    url: Annotated[
        str | None,
        typer.Option("--url", help="URL of the history JSON."),
    ] = None,
    metadata: Annotated[
        Path | None,
        typer.Option("--metadata", "-m", help="Path to the CI run metadata JSON for the header."),
    ] = None,
    title: Annotated[
        str,
        typer.Option("--title", help="Page title."),
    ] = "Benchmarks",
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the HTML page here instead of stdout."),
    ] = None,
) -> None:
    """Render the history as an interactive HTML dashboard.

    Examples:
        benchboard dashboard --history data.json -m metadata.json -o index.html
        benchboard dashboard --url https://example.org/bench/data.json
    """
    from benchboard.history import HistoryStore, load_history_url, load_metadata
    from benchboard.reporters import DashboardReporter

    if (history is None) == (url is None):
        typer.echo("Error: Exactly one of --history or --url is required.", err=True)
        raise typer.Exit(2)

    settings = get_settings()
    try:
        if history is not None:
            document = HistoryStore(history).load(missing_ok=False)
        else:
            document = load_history_url(url or "", timeout=settings.request_timeout_seconds)
        run_metadata = load_metadata(metadata) if metadata else None
    except BenchboardError as e:
        raise _fail(e) from e

    reporter = DashboardReporter(
        plotly_url=settings.plotly_cdn_url,
        title=title,
        default_schema=settings.default_schema,
        default_group_by=settings.default_group_by,
    )
    if output:
        reporter.report_to_file(document, output, run_metadata)
        logger.info(f"Dashboard written to {output}")
    else:
        typer.echo(reporter.report(document, run_metadata))


@app.command()
def compare(
    name: Annotated[
        str,
        typer.Option("--name", "-n", help="Name of the benchmark suite to compare."),
    ],
    history: Annotated[
        Path | None,
        typer.Option("--history", help="Path to the history JSON (default: read stdin)."),
    ] = None,
    schema: Annotated[
        str | None,
        typer.Option("--schema", "-s", help="Comma-separated fields identifying a benchmark."),
    ] = None,
    group_by: Annotated[
        str | None,
        typer.Option("--group-by", "-g", help="Comma-separated fields splitting tables (empty = one table)."),
    ] = None,
) -> None:
    """Compare the two most recent commits of a suite as Markdown.

    Examples:
        cat data.json | benchboard compare --name ML-KEM --schema category,keySize,name,os --group-by os,keySize
        benchboard compare --name ML-KEM --history data.json
    """
    from benchboard.charts.render import retrieve_group_by, retrieve_schema
    from benchboard.history import HistoryStore, parse_field_list, parse_history_text
    from benchboard.reporters import comparison_markdown

    settings = get_settings()
    try:
        if history is not None:
            document = HistoryStore(history).load(missing_ok=False)
        else:
            document = parse_history_text(_read_stdin())
    except BenchboardError as e:
        raise _fail(e) from e

    if schema is not None:
        fields = parse_field_list(schema, settings.default_schema)
    else:
        fields = retrieve_schema(document, name, settings.default_schema)
    if group_by is not None:
        groups = parse_field_list(group_by, [])
    else:
        groups = retrieve_group_by(document, name, settings.default_group_by)

    typer.echo(comparison_markdown(document, name, fields, groups, settings.change_threshold))


@app.command()
def summary(
    results: Annotated[
        Path | None,
        typer.Option("--results", "-r", help="Path to the benchmark results JSON (default: read stdin)."),
    ] = None,
    schema: Annotated[
        str | None,
        typer.Option("--schema", "-s", help="Comma-separated fields identifying a benchmark."),
    ] = None,
    group_by: Annotated[
        str | None,
        typer.Option("--group-by", "-g", help="Comma-separated fields splitting tables."),
    ] = None,
) -> None:
    """Summarize the results of a single run as Markdown tables.

    Example:
        cat results.json | benchboard summary --schema name,os,keySize --group-by os,keySize
    """
    from benchboard.history import parse_field_list, parse_results, read_json
    from benchboard.reporters import SummaryReport

    settings = get_settings()
    fields = parse_field_list(schema, settings.default_schema)
    groups = parse_field_list(group_by, settings.default_group_by)

    try:
        if results is not None:
            data = read_json(results)
        else:
            data = json.loads(_read_stdin())
        benches = parse_results(data, fields)
    except json.JSONDecodeError as e:
        raise _fail(BenchboardError(f"Benchmark results are not valid JSON: {e}")) from e
    except BenchboardError as e:
        raise _fail(e) from e

    typer.echo(SummaryReport(results=benches, schema=fields, group_by=groups).to_markdown())


if __name__ == "__main__":
    app()
