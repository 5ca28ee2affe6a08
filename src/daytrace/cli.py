"""CLI interface for daytrace."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from daytrace.config import load_config, merge_cli_overrides
from daytrace.errors import DaytraceError
from daytrace.models import SemanticExtraction
from daytrace.services import SemanticExtractor, load_day

app = typer.Typer(
    name="daytrace",
    help="Extract reading clusters, task sessions and search missions from a day of activity.",
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from daytrace import __version__

        console.print(f"daytrace {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """daytrace - semantic groupings for daily activity."""
    pass


def _render_tables(result: SemanticExtraction) -> None:
    clusters = Table(title=f"Article clusters ({len(result.clusters)})")
    clusters.add_column("Label")
    clusters.add_column("Articles", justify="right")
    clusters.add_column("Intent")
    clusters.add_column("Engagement", justify="right")
    for c in result.clusters:
        clusters.add_row(
            c.label or "-", str(len(c.articles)), c.intent_signal.value, f"{c.engagement_score:.2f}"
        )
    console.print(clusters)

    tasks = Table(title=f"Task sessions ({len(result.task_sessions)})")
    tasks.add_column("Task")
    tasks.add_column("Type")
    tasks.add_column("Topic")
    tasks.add_column("Turns", justify="right")
    tasks.add_column("Mode")
    for s in result.task_sessions:
        tasks.add_row(
            s.task_title, s.task_type.value, s.topic_cluster, str(s.turn_count), s.interaction_mode.value
        )
    console.print(tasks)

    missions = Table(title=f"Search missions ({len(result.missions)})")
    missions.add_column("Mission")
    missions.add_column("Queries", justify="right")
    missions.add_column("Visits", justify="right")
    missions.add_column("Intent")
    for m in result.missions:
        missions.add_row(m.label, str(len(m.queries)), str(len(m.visits)), m.intent_type.value)
    console.print(missions)


@app.command(name="extract")
def extract_cmd(
    day_file: Annotated[
        Path,
        typer.Argument(help="JSON file with one day of visits, searches and turns."),
    ],
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to a .daytrace.toml file."),
    ] = None,
    session_gap: Annotated[
        Optional[float],
        typer.Option("--session-gap", help="Minutes allowed between clustered visits."),
    ] = None,
    similarity: Annotated[
        Optional[float],
        typer.Option("--similarity", help="Minimum cosine similarity to join a cluster."),
    ] = None,
    window: Annotated[
        Optional[float],
        typer.Option("--window", help="Minutes allowed between chained search queries."),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the result as JSON instead of tables."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable debug logging."),
    ] = False,
) -> None:
    """Run semantic extraction over a day file."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        config = merge_cli_overrides(
            load_config(config_path),
            session_gap=session_gap,
            similarity=similarity,
            window=window,
        )
        day = load_day(day_file)
    except DaytraceError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from exc

    result = SemanticExtractor(config).extract(day)

    if as_json:
        typer.echo(result.model_dump_json(indent=2))
    else:
        _render_tables(result)


if __name__ == "__main__":
    app()
