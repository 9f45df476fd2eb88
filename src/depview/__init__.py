"""
depview - Dependency Graph Viewer.

depview shows where one item sits in a corpus of assets that reference each
other by path: everything it depends on above it, everything that depends on
it below it, laid out in rows by distance.

Key Components:
- core: Reverse dependency index, graph builder, session
- graph: Layered layout, viewport transform, text fitting, scene commands
- cli: `depview index`, `depview graph`, `depview init`

Usage:
    from depview import DependencyGraphSession, ManifestRepository

    repo = ManifestRepository.load(Path("assets.yaml"))
    session = DependencyGraphSession(repo)
    graph = session.show("Assets/Prefabs/Player.prefab")
"""

__version__ = "0.1.0"

from .core.builder import ExpansionPolicy, GraphBuilder
from .core.graph import DependencyGraph
from .core.index import ReverseDependencyIndex
from .core.repository import ManifestRepository
from .core.session import DependencyGraphSession
from .core.types import AssetMetadata, GraphNode, Vec2
from .graph.layout import layout
from .graph.text_fit import TruncateFrom, fit_text
from .graph.viewport import Viewport

__all__ = [
    "__version__",
    "AssetMetadata",
    "DependencyGraph",
    "DependencyGraphSession",
    "ExpansionPolicy",
    "GraphBuilder",
    "GraphNode",
    "ManifestRepository",
    "ReverseDependencyIndex",
    "TruncateFrom",
    "Vec2",
    "Viewport",
    "fit_text",
    "layout",
]
