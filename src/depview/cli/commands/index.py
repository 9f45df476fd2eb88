"""
Index Command - Build the reverse dependency index.

Scans every project item in a manifest once and reports how many items are
referenced, by how many dependents, and which are referenced the most.
"""

import logging
import sys
from typing import List, Optional

import click
from pydantic import BaseModel
from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn
from rich.table import Table

from ...core.index import ReverseDependencyIndex
from ..utils import (
    cancel_on_interrupt,
    echo_info,
    echo_success,
    echo_warning,
    load_cli_config,
    load_repository,
)

logger = logging.getLogger(__name__)

console = Console()


# --- API Models ---
class RankedItem(BaseModel):
    path: str
    dependents: int


class IndexSummary(BaseModel):
    """
    Structured response for the index command.
    """
    status: str
    items_scanned: int = 0
    items_with_dependents: int = 0
    edges: int = 0
    duration_sec: float = 0.0
    most_depended_upon: List[RankedItem] = []
    message: Optional[str] = None


@click.command()
@click.argument("manifest", type=click.Path())
@click.option("-c", "--config", "config_file", default=None, help="Config file (default: .depview/config.yaml)")
@click.option("--prefix", default=None, help="Only scan items under this path prefix")
@click.option("--top", default=10, show_default=True, help="How many most-referenced items to list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def index(manifest: str, config_file: Optional[str], prefix: Optional[str], top: int, as_json: bool):
    """
    Build the reverse dependency index for MANIFEST.

    Press Ctrl-C to cancel the scan; the index is then discarded.
    """
    config = load_cli_config(config_file)
    if config is None:
        sys.exit(1)

    repository = load_repository(manifest)
    if repository is None:
        sys.exit(1)

    project_prefix = prefix if prefix is not None else config.index.project_prefix
    dependency_index = ReverseDependencyIndex(
        repository,
        project_prefix=project_prefix,
        progress_threshold=config.index.progress_threshold,
    )

    with cancel_on_interrupt() as cancel:
        if as_json:
            result = dependency_index.build(lambda processed, total: cancel.requested)
        else:
            click.echo(f"🔍 Scanning {len(repository)} items under '{project_prefix}'")
            with Progress(
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                MofNCompleteColumn(),
                console=console,
                transient=True,
            ) as progress:
                task = progress.add_task("Building dependency index", total=None)

                def report(processed: int, total: int) -> bool:
                    progress.update(task, completed=processed, total=total)
                    return cancel.requested

                result = dependency_index.build(report)

    if result.is_err():
        cancelled = result.unwrap_err()
        if as_json:
            click.echo(IndexSummary(status="cancelled", message=cancelled.message).model_dump_json(indent=2))
        else:
            echo_warning(cancelled.message)
        return

    stats = result.unwrap()
    ranked = [
        RankedItem(path=path, dependents=count)
        for path, count in dependency_index.most_depended_upon(top)
    ]

    if as_json:
        summary = IndexSummary(
            status="success",
            items_scanned=stats.items_scanned,
            items_with_dependents=stats.items_with_dependents,
            edges=stats.edges,
            duration_sec=stats.elapsed_sec,
            most_depended_upon=ranked,
        )
        click.echo(summary.model_dump_json(indent=2))
        return

    echo_success("Dependency index built")
    click.echo(f"   Items scanned: {stats.items_scanned}")
    click.echo(f"   Referenced items: {stats.items_with_dependents}")
    click.echo(f"   Reverse edges: {stats.edges}")
    echo_info(f"Took {stats.elapsed_sec:.2f}s")

    if ranked:
        table = Table(title="Most depended upon")
        table.add_column("Item", style="cyan")
        table.add_column("Dependents", justify="right")
        for item in ranked:
            table.add_row(item.path, str(item.dependents))
        console.print(table)
