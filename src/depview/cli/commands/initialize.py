"""
Init Command - Project configuration bootstrap.

This module handles the `depview init` command, which writes
`.depview/config.yaml` with every tunable default spelled out.
"""

from pathlib import Path

import click
import yaml
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm

from ...config import CONFIG_DIR, CONFIG_FILE, DepviewConfig

console = Console()


def create_gitignore(depview_dir: Path):
    """Ensure the .depview/ directory is ignored by git."""
    gitignore = depview_dir.parent / ".gitignore"
    entry = "\n# depview\n.depview/\n"

    if not gitignore.exists():
        with open(gitignore, "w") as f:
            f.write(entry)
    else:
        content = gitignore.read_text()
        if ".depview" not in content:
            with open(gitignore, "a") as f:
                f.write(entry)


def write_default_config(root_dir: Path) -> Path:
    """Write the default configuration under `root_dir` and return its path."""
    depview_dir = root_dir / CONFIG_DIR
    config_file = depview_dir / CONFIG_FILE

    depview_dir.mkdir(exist_ok=True)
    with open(config_file, "w") as f:
        yaml.dump(DepviewConfig().model_dump(), f, sort_keys=False, default_flow_style=False)

    create_gitignore(depview_dir)
    return config_file


@click.command()
@click.option("--force", is_flag=True, help="Overwrite existing configuration")
def init(force: bool):
    """
    Initialize depview in the current directory.
    """
    console.print(Panel.fit("🚀 [bold blue]depview Initialization[/bold blue]", border_style="blue"))

    root_dir = Path.cwd()
    config_file = root_dir / CONFIG_DIR / CONFIG_FILE

    if config_file.exists() and not force:
        console.print(f"[yellow]Configuration already exists at {config_file}[/yellow]")
        if not Confirm.ask("Do you want to overwrite it?"):
            console.print("Aborted.")
            return

    written = write_default_config(root_dir)

    console.print("\n✨ [bold green]Initialized successfully![/bold green]")
    console.print(f"   Config created at: [dim]{written}[/dim]")
