"""
depview CLI - Main entry point.

This module registers all CLI commands. Each command is implemented
in its own module under cli/commands/.
"""

import logging

import click

from .commands import graph, index, initialize


@click.group()
@click.version_option(package_name="depview")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """depview: Dependency Graph Viewer.

    Shows what an asset depends on and what depends on it,
    laid out in rows by distance from the asset.

    \b
    Quick Start:
      depview init
      depview index assets.yaml
      depview graph assets.yaml Assets/Prefabs/Player.prefab
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register commands
main.add_command(index.index)
main.add_command(graph.graph)
main.add_command(initialize.init)

if __name__ == "__main__":
    main()
