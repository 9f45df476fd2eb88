"""
CLI Utilities - Shared helper functions for command line operations.

This module provides formatted printing, manifest and config loading, and
the cooperative cancellation hook used while the index is being built.
"""

import signal
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import click

from ..config import DepviewConfig, load_config
from ..core.exceptions import ConfigError, ManifestFormatError, ManifestNotFoundError
from ..core.repository import ManifestRepository


def echo_success(message: str) -> None:
    """
    Print a success message with a green checkmark.

    Args:
        message (str): The message to display.
    """
    click.echo(click.style(f"✅ {message}", fg="green"))


def echo_error(message: str) -> None:
    """
    Print an error message with a red cross.

    Args:
        message (str): The error message to display.
    """
    click.echo(click.style(f"❌ {message}", fg="red"), err=True)


def echo_warning(message: str) -> None:
    """
    Print a warning message with a yellow alert symbol.

    Args:
        message (str): The warning message to display.
    """
    click.echo(click.style(f"⚠️  {message}", fg="yellow"))


def echo_info(message: str) -> None:
    """
    Print an informational message, dimmed.

    Args:
        message (str): The info message to display.
    """
    click.echo(click.style(f"   {message}", dim=True))


def load_repository(manifest_file: str) -> Optional[ManifestRepository]:
    """
    Load a ManifestRepository, reporting problems to the user.

    Args:
        manifest_file (str): Path to a YAML or JSON manifest.

    Returns:
        Optional[ManifestRepository]: The repository, or None if loading failed.
    """
    try:
        return ManifestRepository.load(Path(manifest_file))
    except ManifestNotFoundError:
        echo_error(f"Manifest not found: {manifest_file}")
        click.echo("Provide a YAML or JSON manifest mapping asset paths to their dependencies.")
    except ManifestFormatError as e:
        echo_error(str(e))
    return None


def load_cli_config(config_file: Optional[str]) -> Optional[DepviewConfig]:
    """Load the project config (or defaults), reporting validation errors."""
    try:
        return load_config(Path(config_file) if config_file else None)
    except ConfigError as e:
        echo_error(str(e))
        return None


class CancelFlag:
    """Set by Ctrl-C while a scan runs; polled by the progress callback."""

    def __init__(self):
        self.requested = False

    def request(self, *_args) -> None:
        self.requested = True


@contextmanager
def cancel_on_interrupt() -> Iterator[CancelFlag]:
    """
    Turn SIGINT into a cancellation request for the duration of the block.

    The previous handler is restored on exit.
    """
    flag = CancelFlag()
    previous = signal.signal(signal.SIGINT, flag.request)
    try:
        yield flag
    finally:
        signal.signal(signal.SIGINT, previous)
