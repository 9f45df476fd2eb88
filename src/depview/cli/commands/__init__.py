"""
CLI Commands Package.

Each command is implemented in its own module for maintainability.
"""

from . import graph
from . import index
from . import initialize

__all__ = [
    "graph",
    "index",
    "initialize",
]
