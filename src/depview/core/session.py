"""
Dependency Graph Session.

Composes the index, builder, layout and viewport for one focused item, the
way a host window uses them: pick a root, rebuild the index when it is stale,
build and lay out the graph, then feed input events and render requests.
"""

import logging
from dataclasses import replace
from typing import Dict, Optional, Tuple

from ..config import DepviewConfig
from ..graph.interaction import (
    ContextAction,
    InputEvent,
    InteractionResult,
    InteractionState,
    handle_event,
)
from ..graph.layout import LayeredLayout
from ..graph.scene import Scene, TextMeasurer, approximate_measure, build_scene, build_tooltip
from ..graph.viewport import Viewport
from .builder import ExpansionPolicy, GraphBuilder
from .graph import DependencyGraph
from .index import IndexStats, ProgressCallback, ReverseDependencyIndex, ScanCancelled
from .interfaces import IAssetRepository
from .result import Result
from .types import Vec2

logger = logging.getLogger(__name__)


class DependencyGraphSession:
    """
    State of one dependency graph view.

    Example:
        ```python
        session = DependencyGraphSession(repository, width=1280, height=720)
        session.show("Assets/Prefabs/Player.prefab")
        for node in session.graph.nodes:
            print(node.path, node.depth, node.position)
        ```
    """

    def __init__(
        self,
        repository: IAssetRepository,
        config: Optional[DepviewConfig] = None,
        width: float = 1280.0,
        height: float = 720.0,
        index: Optional[ReverseDependencyIndex] = None,
    ):
        self.repository = repository
        self.config = config or DepviewConfig()
        self.width = width
        self.height = height

        self.index = index or ReverseDependencyIndex(
            repository,
            project_prefix=self.config.index.project_prefix,
            progress_threshold=self.config.index.progress_threshold,
        )
        self.builder = GraphBuilder(
            repository,
            self.index,
            ExpansionPolicy(frozenset(self.config.graph.excluded_extensions)),
        )
        self.layout_engine = LayeredLayout(self.config.layout)

        self.root_path: Optional[str] = None
        self.graph: Optional[DependencyGraph] = None
        self.max_depth = self.config.graph.max_depth
        self.calculated_max_depth = self.config.graph.min_depth
        self.interaction = InteractionState(
            viewport=self._default_viewport(),
            graph_origin=Vec2(0.0, self.config.viewport.toolbar_height),
        )
        self._preview_cache: Dict[str, Optional[bytes]] = {}

    def _default_viewport(self) -> Viewport:
        settings = self.config.viewport
        return Viewport(
            min_zoom=settings.min_zoom,
            max_zoom=settings.max_zoom,
            zoom_sensitivity=settings.zoom_sensitivity,
            node_size=settings.node_size,
        )

    @property
    def viewport(self) -> Viewport:
        return self.interaction.viewport

    @property
    def is_index_valid(self) -> bool:
        return self.index.is_valid

    @property
    def is_empty(self) -> bool:
        """True while there is nothing to draw (idle state)."""
        return self.graph is None or not self.root_path

    @property
    def show_depth_control(self) -> bool:
        return self.calculated_max_depth > self.config.graph.min_depth

    # --- Index ---

    def build_index(self, progress: Optional[ProgressCallback] = None) -> Result[IndexStats, ScanCancelled]:
        return self.index.build(progress)

    def invalidate_index(self) -> None:
        self.index.invalidate()

    def notify_corpus_changed(self) -> None:
        """The corpus may have changed; the index must be rebuilt before next use."""
        self.index.invalidate()

    def rebuild_index(self, progress: Optional[ProgressCallback] = None) -> Result[IndexStats, ScanCancelled]:
        """Full rebuild of the index, then of the current graph."""
        self.index.invalidate()
        result = self.index.build(progress)
        self.rebuild_graph()
        return result

    # --- Graph ---

    def show(self, path: str, progress: Optional[ProgressCallback] = None) -> Optional[DependencyGraph]:
        """
        Focus the view on `path`.

        Resets pan, zoom and hover, drops cached previews, rebuilds the index
        if it is invalid, then builds and lays out the graph.
        """
        self.root_path = path
        self.interaction = replace(self.interaction, viewport=self.viewport.reset(), hovered=None)
        self._preview_cache.clear()

        if not self.index.is_valid:
            result = self.index.build(progress)
            if result.is_err():
                logger.warning(result.unwrap_err().message)

        return self.rebuild_graph()

    recenter = show

    def rebuild_graph(self) -> Optional[DependencyGraph]:
        """Discard the current graph and build a fresh one for the current root."""
        if not self.root_path:
            self.graph = None
            return None

        self.graph = self.builder.build(self.root_path, self.max_depth)
        if self.graph is None:
            return None

        self.calculated_max_depth = self.graph.calculate_required_depth(self.config.graph.min_depth)
        self.layout_engine.apply(self.graph, self.width, self.height)
        return self.graph

    def set_max_depth(self, depth: int) -> Optional[DependencyGraph]:
        """Change the expansion depth, clamped to the depth control range."""
        depth = max(self.config.graph.min_depth, min(self.calculated_max_depth, depth))
        if depth == self.max_depth:
            return self.graph
        self.max_depth = depth
        return self.rebuild_graph()

    def resize(self, width: float, height: float) -> None:
        self.width = width
        self.height = height
        if self.graph is not None:
            self.layout_engine.apply(self.graph, width, height)

    # --- View ---

    def reset_view(self) -> None:
        self.interaction = replace(self.interaction, viewport=self.viewport.reset())

    def handle(self, event: InputEvent) -> InteractionResult:
        result = handle_event(self.interaction, event, self.graph)
        self.interaction = result.state
        return result

    def apply_context_action(self, action: ContextAction, path: str) -> Optional[str]:
        """
        Run a context menu entry.

        Re-centering is handled here; ping and select are host operations,
        so the path is handed back for the host to act on.
        """
        if action == ContextAction.RECENTER:
            self.show(path)
            return None
        if action == ContextAction.SELECT:
            self.interaction = replace(self.interaction, selected=path)
        return path

    def preview(self, path: str) -> Optional[bytes]:
        """Preview image for a node, cached until the root changes."""
        if path not in self._preview_cache:
            self._preview_cache[path] = self.repository.load_preview(path)
        return self._preview_cache[path]

    def render(self, mouse: Optional[Vec2] = None, measure: TextMeasurer = approximate_measure) -> Scene:
        """
        Render commands for the current frame.

        `mouse` is in window coordinates; when it hovers a node the scene
        carries a tooltip for it.
        """
        if self.is_empty:
            return Scene()

        graph_size = Vec2(self.width, self.height - self.interaction.graph_origin.y)
        scene = build_scene(
            self.graph,
            self.viewport,
            graph_size,
            measure=measure,
            hovered=self.interaction.hovered,
            selected=self.interaction.selected,
            has_preview=lambda p: self.preview(p) is not None,
            text=self.config.text,
        )

        if mouse is not None and self.interaction.hovered is not None:
            scene.tooltip = build_tooltip(
                self.interaction.hovered,
                self.repository.load_item_metadata(self.interaction.hovered),
                mouse,
                Vec2(self.width, self.height),
                measure=measure,
                text=self.config.text,
            )
        return scene

    def depth_range(self) -> Tuple[int, int]:
        """Bounds for a depth control: (minimum, calculated maximum)."""
        return (self.config.graph.min_depth, self.calculated_max_depth)
