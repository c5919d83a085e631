"""Click CLI with info and serve subcommands."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from graph_report import __version__
from graph_report.documents import (
    DocumentError,
    load_graph,
    load_sizes,
    load_snapshot,
    read_json_file,
)
from graph_report.models import ReportConfig
from graph_report.report import Style, add_npm_packages_to_json, format_tree_report

logger = logging.getLogger(__name__)

_FILE = click.Path(exists=True, dir_okay=False, path_type=Path)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
def cli(verbose: bool):
    """graph-report: Show the dependency tree of a module graph."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("graph_file", type=_FILE)
@click.argument("snapshot_file", type=_FILE)
@click.option("--sizes", "sizes_file", type=_FILE, help="JSON map of npm package id to size in bytes")
@click.option("--json", "as_json", is_flag=True, help="Output the graph as JSON with npm packages attached")
@click.option("--color/--no-color", default=None, help="Force colored output on or off")
def info(graph_file: Path, snapshot_file: Path, sizes_file: Path | None, as_json: bool, color: bool | None):
    """Print the dependency tree of GRAPH_FILE using the npm SNAPSHOT_FILE."""
    try:
        graph_data = read_json_file(graph_file)
        graph = load_graph(graph_data)
        snapshot = load_snapshot(read_json_file(snapshot_file))
        sizes = load_sizes(read_json_file(sizes_file) if sizes_file else None)
    except DocumentError as e:
        raise click.ClickException(str(e))

    logger.info(
        "loaded %d modules, %d npm packages, %d package sizes",
        len(graph.modules), len(snapshot.packages), len(sizes),
    )

    if color is None:
        config = ReportConfig.from_env(is_tty=sys.stdout.isatty())
    else:
        config = ReportConfig(use_color=color)

    if as_json:
        # the document as read, unmodelled fields included
        document = add_npm_packages_to_json(graph_data, snapshot)
        output = json.dumps(document, indent=config.json_indent) + "\n"
    else:
        output = format_tree_report(graph, snapshot, sizes, Style(config.use_color))

    try:
        click.echo(output, nl=False, color=config.use_color)
    except BrokenPipeError:
        pass


@cli.command()
@click.option("--port", "-p", default=8430, help="Port number")
@click.option("--host", default="127.0.0.1", help="Host address")
def serve(port: int, host: str):
    """Start the report web API."""
    try:
        import uvicorn
    except ImportError:
        raise click.ClickException(
            "uvicorn is required for the web API. "
            "Install with: pip install 'graph-report[web]'"
        )

    from graph_report.web import create_app

    click.echo(f"Starting graph-report web API at http://{host}:{port}")
    uvicorn.run(create_app(), host=host, port=port, log_level="info")


if __name__ == "__main__":
    cli()
