"""
Graph Builder.

Expands a root item into a bounded, bidirectional dependency graph:
- Upward through forward dependencies, asked of the Asset Repository
  (negative depths).
- Downward through dependents, read from the Reverse Dependency Index
  (positive depths).

Each path is expanded at most once per build, so cycles produce cyclic edge
lists but never unbounded work.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, FrozenSet, Optional, Sequence

from ..config import DEFAULT_MAX_DEPTH, EXCLUDED_EXTENSIONS, is_excluded_extension
from .graph import DependencyGraph
from .index import ReverseDependencyIndex
from .interfaces import IAssetRepository
from .types import EdgeKind, GraphNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExpansionPolicy:
    """
    Which items may be traversed.

    Binary/library items (by extension) are filtered from both directions
    before traversal. Items outside the project namespace can still show up
    as forward dependencies; they never appear as dependents because the
    index only scans project items.
    """
    excluded_extensions: FrozenSet[str] = field(default_factory=lambda: frozenset(EXCLUDED_EXTENSIONS))

    def allows(self, path: str) -> bool:
        return bool(path) and not is_excluded_extension(path, self.excluded_extensions)


class GraphBuilder:
    """
    Builds a DependencyGraph around one root item.

    Example:
        ```python
        builder = GraphBuilder(repository, index)
        graph = builder.build("Assets/Prefabs/Player.prefab", max_depth=5)
        ```
    """

    def __init__(
        self,
        repository: IAssetRepository,
        index: ReverseDependencyIndex,
        policy: Optional[ExpansionPolicy] = None,
    ):
        self.repository = repository
        self.index = index
        self.policy = policy or ExpansionPolicy()

    def build(self, root_path: str, max_depth: int = DEFAULT_MAX_DEPTH) -> Optional[DependencyGraph]:
        """
        Expand the graph from `root_path`, at most `max_depth` levels each way.

        Returns None for an empty root or one the repository does not know.
        """
        if not root_path:
            logger.debug("No root path given, nothing to build")
            return None
        if not self.repository.contains(root_path):
            logger.debug(f"Root not found in repository: {root_path}")
            return None

        graph = DependencyGraph()
        graph.add_node(GraphNode(path=root_path, depth=0, is_root=True))

        self._expand(graph, root_path, max_depth, EdgeKind.DEPENDENCY, self._forward_edges)
        self._expand(graph, root_path, max_depth, EdgeKind.DEPENDENT, self.index.dependents_of)

        logger.debug(
            f"Built graph for {root_path}: {graph.node_count} nodes, "
            f"{graph.edge_count} edges (max depth {max_depth})"
        )
        return graph

    def _forward_edges(self, path: str) -> Sequence[str]:
        return self.repository.get_direct_dependencies(path)

    def _expand(
        self,
        graph: DependencyGraph,
        root_path: str,
        max_depth: int,
        kind: EdgeKind,
        neighbours: Callable[[str], Sequence[str]],
    ) -> None:
        """
        Breadth-first expansion in one direction.

        The work queue carries (path, remaining depth budget); the graph's
        path lookup doubles as the visited set.
        """
        step = -1 if kind == EdgeKind.DEPENDENCY else 1
        queue = deque([(root_path, max_depth)])

        while queue:
            path, remaining = queue.popleft()
            if remaining <= 0:
                continue

            node = graph.get_node(path)
            for other in neighbours(path):
                if other == path or not self.policy.allows(other):
                    continue

                if graph.has_node(other):
                    graph.add_edge(path, other, kind)
                    continue

                graph.add_node(GraphNode(path=other, depth=node.depth + step))
                graph.add_edge(path, other, kind)
                queue.append((other, remaining - 1))
