"""
Layered Layout Engine.

One row per depth: ancestors above the root, dependents below. Within a row
nodes keep discovery order from the graph and are centered horizontally,
with spacing that tightens as the row fills up.
"""

from collections import defaultdict
from typing import Dict, List, Optional

from ..config import LayoutSettings
from ..core.graph import DependencyGraph
from ..core.types import GraphNode, Vec2


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


class LayeredLayout:
    """
    Deterministic depth-based placement.

    Spacing interpolates from `max_spacing_x` (rows of 2 or fewer nodes) down
    to `min_spacing_x` (rows of 6 or more).
    """

    def __init__(self, settings: Optional[LayoutSettings] = None):
        self.settings = settings or LayoutSettings()

    def row_spacing_for(self, count: int) -> float:
        t = clamp01((count - 2) / 4)
        return lerp(self.settings.max_spacing_x, self.settings.min_spacing_x, t)

    def apply(self, graph: DependencyGraph, width: float, height: float) -> None:
        """Assign `position` to every node of `graph` in place."""
        center_x = width / 2
        center_y = height / 2

        for depth, row in sorted(self.group_by_depth(graph.nodes).items()):
            spacing = self.row_spacing_for(len(row))
            start_x = center_x - (len(row) - 1) * spacing / 2
            y = center_y + depth * self.settings.row_spacing

            for i, node in enumerate(row):
                node.position = Vec2(start_x + i * spacing, y)

    @staticmethod
    def group_by_depth(nodes: List[GraphNode]) -> Dict[int, List[GraphNode]]:
        rows: Dict[int, List[GraphNode]] = defaultdict(list)
        for node in nodes:
            rows[node.depth].append(node)
        return dict(rows)


def layout(
    graph: DependencyGraph,
    width: float,
    height: float,
    settings: Optional[LayoutSettings] = None,
) -> None:
    """Lay out `graph` for a viewport of `width` x `height`."""
    LayeredLayout(settings).apply(graph, width, height)
