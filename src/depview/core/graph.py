"""
Dependency Graph backed by rustworkx.

Holds the nodes discovered for one root item. It manages:
- The bimap between item paths and rustworkx integer indices.
- The discovery order of nodes, which drives left-to-right layout.
- Ordered per-node edge lists (`dependencies` / `dependents`), stored as
  path keys so each path resolves to a single shared GraphNode.

Every edge is also stored in the rustworkx graph in "depends on" direction
(dependent -> dependency) for structural queries such as cycle detection.
"""

from typing import Any, Dict, Iterator, List, Optional

import rustworkx as rx

from .types import EdgeKind, GraphNode


class DependencyGraph:
    """
    Arena of GraphNodes indexed by path.

    Features:
    - O(1) node lookup via path-to-index bimap
    - Discovery-ordered node iteration
    - Duplicate-free, self-reference-free edge lists
    """

    def __init__(self):
        self._graph = rx.PyDiGraph(multigraph=False)
        self._path_to_idx: Dict[str, int] = {}
        self._idx_to_path: Dict[int, str] = {}
        self._nodes: List[GraphNode] = []

    def add_node(self, node: GraphNode) -> GraphNode:
        """
        Register a node. Returns the existing instance if the path is known,
        leaving its depth untouched.
        """
        existing = self.get_node(node.path)
        if existing is not None:
            return existing

        idx = self._graph.add_node(node)
        self._path_to_idx[node.path] = idx
        self._idx_to_path[idx] = node.path
        self._nodes.append(node)
        return node

    def add_edge(self, source_path: str, target_path: str, kind: EdgeKind) -> bool:
        """
        Connect two known nodes.

        DEPENDENCY: source depends on target, appended to source.dependencies.
        DEPENDENT: target depends on source, appended to source.dependents.
        Returns False for self edges, unknown nodes or an edge already listed.
        """
        if source_path == target_path:
            return False
        source = self.get_node(source_path)
        if source is None or target_path not in self._path_to_idx:
            return False

        connections = source.dependencies if kind == EdgeKind.DEPENDENCY else source.dependents
        if target_path in connections:
            return False
        connections.append(target_path)

        if kind == EdgeKind.DEPENDENCY:
            u, v = self._path_to_idx[source_path], self._path_to_idx[target_path]
        else:
            u, v = self._path_to_idx[target_path], self._path_to_idx[source_path]
        if not self._graph.has_edge(u, v):
            self._graph.add_edge(u, v, kind)
        return True

    def get_node(self, path: str) -> Optional[GraphNode]:
        idx = self._path_to_idx.get(path)
        if idx is None:
            return None
        return self._graph[idx]

    def has_node(self, path: str) -> bool:
        return path in self._path_to_idx

    def has_edge(self, dependent_path: str, dependency_path: str) -> bool:
        """Check whether `dependent_path` was found to depend on `dependency_path`."""
        if dependent_path not in self._path_to_idx or dependency_path not in self._path_to_idx:
            return False
        return self._graph.has_edge(
            self._path_to_idx[dependent_path],
            self._path_to_idx[dependency_path],
        )

    def dependencies_of(self, path: str) -> List[GraphNode]:
        node = self.get_node(path)
        if node is None:
            return []
        return [self._graph[self._path_to_idx[p]] for p in node.dependencies]

    def dependents_of(self, path: str) -> List[GraphNode]:
        node = self.get_node(path)
        if node is None:
            return []
        return [self._graph[self._path_to_idx[p]] for p in node.dependents]

    @property
    def root(self) -> Optional[GraphNode]:
        for node in self._nodes:
            if node.is_root:
                return node
        return None

    @property
    def nodes(self) -> List[GraphNode]:
        """All nodes in discovery order."""
        return list(self._nodes)

    def iter_nodes(self) -> Iterator[GraphNode]:
        return iter(self._nodes)

    @property
    def node_count(self) -> int:
        return self._graph.num_nodes()

    @property
    def edge_count(self) -> int:
        return self._graph.num_edges()

    def has_cycles(self) -> bool:
        return not rx.is_directed_acyclic_graph(self._graph)

    def find_cycle(self) -> List[str]:
        """Paths along one dependency cycle, or an empty list."""
        for idx in self._graph.node_indices():
            edges = rx.digraph_find_cycle(self._graph, idx)
            if len(edges) > 0:
                return [self._idx_to_path[u] for u, _ in edges]
        return []

    def depth_range(self) -> tuple:
        """(min depth, max depth); (0, 0) for an empty graph."""
        if not self._nodes:
            return (0, 0)
        depths = [n.depth for n in self._nodes]
        return (min(depths), max(depths))

    def calculate_required_depth(self, min_depth: int = 5) -> int:
        """
        Depth a depth control needs to reach every layer of this graph.

        Never less than `min_depth`. Does not change the graph.
        """
        if not self._nodes:
            return min_depth
        lowest, highest = self.depth_range()
        return max(abs(lowest), abs(highest), min_depth)

    def get_stats(self) -> Dict[str, Any]:
        lowest, highest = self.depth_range()
        return {
            "total_nodes": self.node_count,
            "total_edges": self.edge_count,
            "min_depth": lowest,
            "max_depth": highest,
            "has_cycles": self.has_cycles(),
            "backend": "rustworkx",
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [node.model_dump() for node in self._nodes],
            "stats": self.get_stats(),
        }

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, path: str) -> bool:
        return self.has_node(path)
