"""
Graph Command - Build and lay out the dependency graph of one asset.

Prints the graph as a tree (dependencies above, dependents below) or emits
the laid-out nodes as JSON for a drawing front end.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

import click
from pydantic import BaseModel
from rich.console import Console
from rich.tree import Tree

from ...core.graph import DependencyGraph
from ...core.session import DependencyGraphSession
from ...core.types import GraphNode
from ..utils import (
    cancel_on_interrupt,
    echo_error,
    echo_info,
    echo_success,
    echo_warning,
    load_cli_config,
    load_repository,
)

logger = logging.getLogger(__name__)

console = Console()


# --- API Models ---
class NodeView(BaseModel):
    path: str
    depth: int
    is_root: bool
    x: float
    y: float
    dependencies: List[str]
    dependents: List[str]


class GraphResponse(BaseModel):
    """
    Structured response for the graph command.
    """
    root: str
    max_depth: int
    required_depth: int
    width: float
    height: float
    nodes: List[NodeView]
    stats: Dict[str, Any]


def to_response(session: DependencyGraphSession) -> GraphResponse:
    graph = session.graph
    nodes = [
        NodeView(
            path=node.path,
            depth=node.depth,
            is_root=node.is_root,
            x=node.position.x if node.position else 0.0,
            y=node.position.y if node.position else 0.0,
            dependencies=list(node.dependencies),
            dependents=list(node.dependents),
        )
        for node in graph.iter_nodes()
    ]
    return GraphResponse(
        root=session.root_path,
        max_depth=session.max_depth,
        required_depth=session.calculated_max_depth,
        width=session.width,
        height=session.height,
        nodes=nodes,
        stats=graph.get_stats(),
    )


def render_tree(graph: DependencyGraph) -> Tree:
    """Rich tree with one branch per direction. Repeated nodes are marked, not expanded."""
    root = graph.root
    tree = Tree(f"📦 [bold]{root.path}[/bold]")

    upward = tree.add("⬆ Dependencies")
    _add_branch(graph, upward, root, lambda n: graph.dependencies_of(n.path), {root.path})
    if not root.dependencies:
        upward.add("[dim]none[/dim]")

    downward = tree.add("⬇ Dependents")
    _add_branch(graph, downward, root, lambda n: graph.dependents_of(n.path), {root.path})
    if not root.dependents:
        downward.add("[dim]none[/dim]")

    return tree


def _add_branch(graph: DependencyGraph, branch: Tree, node: GraphNode, neighbours, seen: Set[str]) -> None:
    for other in neighbours(node):
        if other.path in seen:
            branch.add(f"[yellow]↻[/yellow] [dim]{other.path}[/dim]")
            continue
        seen.add(other.path)
        child = branch.add(f"[cyan]{other.path}[/cyan] [dim](depth {other.depth})[/dim]")
        _add_branch(graph, child, other, neighbours, seen)


@click.command()
@click.argument("manifest", type=click.Path())
@click.argument("root")
@click.option("-d", "--depth", type=click.IntRange(min=0), default=None, help="Levels to expand in each direction")
@click.option("--width", default=1280.0, show_default=True, help="Viewport width for layout")
@click.option("--height", default=720.0, show_default=True, help="Viewport height for layout")
@click.option("-c", "--config", "config_file", default=None, help="Config file (default: .depview/config.yaml)")
@click.option("--json", "as_json", is_flag=True, help="Output laid-out graph as JSON to stdout")
@click.option("-o", "--output", default=None, help="Write laid-out graph JSON to a file")
def graph(
    manifest: str,
    root: str,
    depth: Optional[int],
    width: float,
    height: float,
    config_file: Optional[str],
    as_json: bool,
    output: Optional[str],
):
    """
    Show the dependency graph of ROOT from MANIFEST.
    """
    if as_json and output:
        raise click.UsageError("--json and --output are mutually exclusive")

    config = load_cli_config(config_file)
    if config is None:
        sys.exit(1)

    repository = load_repository(manifest)
    if repository is None:
        sys.exit(1)

    session = DependencyGraphSession(repository, config=config, width=width, height=height)
    if depth is not None:
        session.max_depth = depth

    with cancel_on_interrupt() as cancel:
        result = session.build_index(lambda processed, total: cancel.requested)
    if result.is_err():
        echo_warning(result.unwrap_err().message)
        return

    if session.show(root) is None:
        echo_error(f"Asset not found: {root}")
        return

    response = to_response(session)

    if as_json:
        click.echo(response.model_dump_json(indent=2))
        return

    if output:
        output_path = Path(output)
        output_path.write_text(response.model_dump_json(indent=2))
        echo_success(f"Generated: {output_path}")
        return

    console.print(render_tree(session.graph))
    stats = response.stats
    click.echo(f"   Nodes: {stats['total_nodes']}  Edges: {stats['total_edges']}")
    click.echo(f"   Depth range: {stats['min_depth']} to {stats['max_depth']}")
    if stats["has_cycles"]:
        echo_warning("Dependency cycle detected: " + " -> ".join(session.graph.find_cycle()))
    reached = max(-stats["min_depth"], stats["max_depth"])
    if session.max_depth > 0 and reached >= session.max_depth:
        echo_info(f"Expansion stopped at the depth limit ({session.max_depth}); raise --depth to look further")
