"""
Scene construction.

Turns a laid-out graph plus the current viewport into plain render commands
(background grid, connections, node frames, labels, tooltip). A host drawing
surface only has to paint these; nothing here touches a real canvas.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ..config import (
    BEZIER_TANGENT_STRENGTH,
    CONNECTION_LINE_WIDTH,
    GRID_SPACING_LARGE,
    GRID_SPACING_SMALL,
    LABEL_FONT_SIZE,
    LABEL_HEIGHT,
    LABEL_SPACING,
    LABEL_WIDTH_MULTIPLIER,
    MIN_GRID_SPACING,
    TOOLTIP_FONT_SIZE,
    TOOLTIP_MAX_WIDTH_RATIO,
    TOOLTIP_OFFSET_X,
    TOOLTIP_OFFSET_Y,
    TextSettings,
)
from ..core.graph import DependencyGraph
from ..core.types import AssetMetadata, GraphNode, Rect, Vec2
from .text_fit import TruncateFrom, fit_text
from .viewport import Viewport

# (text, font size) -> width in pixels
TextMeasurer = Callable[[str, int], float]

TOOLTIP_PADDING_X = 8.0
TOOLTIP_PADDING_Y = 6.0
TOOLTIP_LINE_HEIGHT = 15.0
TOOLTIP_EDGE_MARGIN = 5.0


@dataclass(frozen=True)
class Color:
    r: float
    g: float
    b: float
    a: float = 1.0

    def lerp(self, other: "Color", t: float) -> "Color":
        t = max(0.0, min(1.0, t))
        return Color(
            self.r + (other.r - self.r) * t,
            self.g + (other.g - self.g) * t,
            self.b + (other.b - self.b) * t,
            self.a + (other.a - self.a) * t,
        )


WHITE = Color(1.0, 1.0, 1.0, 1.0)
BLACK = Color(0.0, 0.0, 0.0, 1.0)
DEPENDENCY_LINE_COLOR = Color(0.4, 0.75, 1.0, 1.0)
DEPENDENT_LINE_COLOR = Color(1.0, 0.75, 0.4, 1.0)
SELECTED_NODE_COLOR = Color(1.0, 1.0, 0.3, 0.8)
NODE_BACKGROUND_COLOR = Color(0.2, 0.2, 0.2, 0.9)
PLACEHOLDER_COLOR = Color(0.3, 0.3, 0.3, 1.0)
GRAPH_BACKGROUND_COLOR = Color(0.15, 0.15, 0.15, 1.0)
GRID_COLOR_SMALL = Color(0.2, 0.2, 0.2, 0.4)
GRID_COLOR_LARGE = Color(0.3, 0.3, 0.3, 0.6)


@dataclass(frozen=True)
class GridLineCommand:
    start: Vec2
    end: Vec2
    color: Color
    width: float


@dataclass(frozen=True)
class ConnectionCommand:
    """Cubic bezier between two node centers."""
    start: Vec2
    end: Vec2
    start_tangent: Vec2
    end_tangent: Vec2
    color: Color
    width: float = CONNECTION_LINE_WIDTH


@dataclass(frozen=True)
class NodeCommand:
    path: str
    preview_rect: Rect
    border_rect: Rect
    background_rect: Rect
    background_color: Color
    has_preview: bool
    placeholder_color: Color = PLACEHOLDER_COLOR


@dataclass(frozen=True)
class LabelCommand:
    rect: Rect
    text: str
    font_size: int
    color: Color = WHITE


@dataclass(frozen=True)
class TooltipCommand:
    rect: Rect
    border_rect: Rect
    text: str
    font_size: int = TOOLTIP_FONT_SIZE


@dataclass
class Scene:
    background: Color = GRAPH_BACKGROUND_COLOR
    grid: List[GridLineCommand] = field(default_factory=list)
    connections: List[ConnectionCommand] = field(default_factory=list)
    nodes: List[NodeCommand] = field(default_factory=list)
    labels: List[LabelCommand] = field(default_factory=list)
    tooltip: Optional[TooltipCommand] = None


def approximate_measure(text: str, font_size: int) -> float:
    """Rough width for proportional UI fonts when no real metrics exist."""
    return len(text) * font_size * 0.6


def connection(
    source: Vec2,
    target: Vec2,
    viewport: Viewport,
    color: Color,
) -> ConnectionCommand:
    """Bezier whose tangents leave and enter the nodes vertically, toward each other."""
    start = viewport.node_center(source)
    end = viewport.node_center(target)
    strength = BEZIER_TANGENT_STRENGTH * viewport.zoom

    # screen y grows downward
    if end.y < start.y:
        start_tangent = start + Vec2(0.0, -strength)
        end_tangent = end + Vec2(0.0, strength)
    else:
        start_tangent = start + Vec2(0.0, strength)
        end_tangent = end + Vec2(0.0, -strength)

    return ConnectionCommand(start, end, start_tangent, end_tangent, color)


def node_color(node: GraphNode, hovered: Optional[str], selected: Optional[str]) -> Color:
    base = SELECTED_NODE_COLOR if node.is_root else NODE_BACKGROUND_COLOR
    if hovered == node.path:
        return base.lerp(WHITE, 0.2)
    if selected == node.path and not node.is_root:
        return base.lerp(SELECTED_NODE_COLOR, 0.5)
    return base


def build_grid(viewport: Viewport, graph_size: Vec2) -> List[GridLineCommand]:
    """
    Background grid lines for the graph area: minor lines every 20 world
    units, major lines every 100.

    Lines follow the pan offset and wrap, so the first line of each family
    sits within one spacing of the area origin. No grid when zoomed out so
    far that minor lines would crowd together.
    """
    small = GRID_SPACING_SMALL * viewport.zoom
    if small < MIN_GRID_SPACING:
        return []

    offset = viewport.pan_offset * viewport.zoom
    lines: List[GridLineCommand] = []
    for spacing, color, width in (
        (small, GRID_COLOR_SMALL, 1.0),
        (GRID_SPACING_LARGE * viewport.zoom, GRID_COLOR_LARGE, 2.0),
    ):
        for x in _grid_stops(offset.x % spacing, spacing, graph_size.x):
            lines.append(GridLineCommand(Vec2(x, 0.0), Vec2(x, graph_size.y), color, width))
        for y in _grid_stops(offset.y % spacing, spacing, graph_size.y):
            lines.append(GridLineCommand(Vec2(0.0, y), Vec2(graph_size.x, y), color, width))
    return lines


def _grid_stops(start: float, spacing: float, limit: float) -> List[float]:
    stops = []
    i = 0
    while start + i * spacing < limit:
        stops.append(start + i * spacing)
        i += 1
    return stops


def build_scene(
    graph: DependencyGraph,
    viewport: Viewport,
    graph_size: Vec2,
    measure: TextMeasurer = approximate_measure,
    hovered: Optional[str] = None,
    selected: Optional[str] = None,
    has_preview: Callable[[str], bool] = lambda path: False,
    text: Optional[TextSettings] = None,
) -> Scene:
    """
    Render commands for every positioned node and edge.

    Coordinates are relative to the graph area; nodes whose frame (preview
    plus label) falls outside `graph_size` are culled. Draw order is grid,
    connections, then nodes, so edges sit behind nodes.
    """
    text = text or TextSettings()
    scene = Scene(grid=build_grid(viewport, graph_size))
    bounds = Rect(0.0, 0.0, graph_size.x, graph_size.y)

    for node in graph.iter_nodes():
        if node.position is None:
            continue
        for other in graph.dependencies_of(node.path):
            if other.position is not None:
                scene.connections.append(
                    connection(node.position, other.position, viewport, DEPENDENCY_LINE_COLOR)
                )
        for other in graph.dependents_of(node.path):
            if other.position is not None:
                scene.connections.append(
                    connection(node.position, other.position, viewport, DEPENDENT_LINE_COLOR)
                )

    size = viewport.node_size * viewport.zoom
    label_height = LABEL_HEIGHT * viewport.zoom
    label_spacing = LABEL_SPACING * viewport.zoom
    label_width = size * LABEL_WIDTH_MULTIPLIER
    font_size = round(LABEL_FONT_SIZE * viewport.zoom)

    for node in graph.iter_nodes():
        if node.position is None:
            continue

        preview = viewport.node_rect(node.position)
        frame = Rect(preview.x, preview.y, size, size + label_spacing + label_height)
        if not frame.overlaps(bounds):
            continue

        scene.nodes.append(NodeCommand(
            path=node.path,
            preview_rect=preview,
            border_rect=_grow(preview, 1.0),
            background_rect=_grow(preview, 2.0),
            background_color=node_color(node, hovered, selected),
            has_preview=has_preview(node.path),
        ))

        label_rect = Rect(
            preview.x - (label_width - size) / 2,
            preview.y + size + label_spacing,
            label_width,
            label_height,
        )
        label = fit_text(
            node.name,
            label_rect.width,
            lambda s: measure(s, font_size),
            TruncateFrom.END,
            ellipsis=text.ellipsis,
            fallback_length=text.fallback_length,
        )
        scene.labels.append(LabelCommand(rect=label_rect, text=label, font_size=font_size))

    return scene


def build_tooltip(
    path: str,
    metadata: AssetMetadata,
    mouse: Vec2,
    window_size: Vec2,
    measure: TextMeasurer = approximate_measure,
    text: Optional[TextSettings] = None,
) -> TooltipCommand:
    """
    Tooltip for a hovered item: path, kind and size, one per line.

    The path keeps its tail and the kind keeps its head when either is wider
    than half the window. The box follows the mouse and is kept on screen.
    """
    text = text or TextSettings()
    max_width = window_size.x * TOOLTIP_MAX_WIDTH_RATIO

    def m(s: str) -> float:
        return measure(s, TOOLTIP_FONT_SIZE)

    display_path = fit_text(path, max_width, m, TruncateFrom.START, text.ellipsis, text.fallback_length)
    display_type = fit_text(metadata.kind, max_width, m, TruncateFrom.END, text.ellipsis, text.fallback_length)
    lines = [display_path, f"Type: {display_type}", f"Size: {metadata.size_human}"]

    width = max(m(line) for line in lines) + 2 * TOOLTIP_PADDING_X
    height = len(lines) * TOOLTIP_LINE_HEIGHT + 2 * TOOLTIP_PADDING_Y

    rect = Rect(mouse.x + TOOLTIP_OFFSET_X, mouse.y + TOOLTIP_OFFSET_Y, width, height)
    rect = clamp_tooltip(rect, mouse, window_size)

    return TooltipCommand(rect=rect, border_rect=_grow(rect, 1.0), text="\n".join(lines))


def clamp_tooltip(rect: Rect, mouse: Vec2, window_size: Vec2) -> Rect:
    """Flip a tooltip left of the window edge or above the mouse when it would overflow."""
    x, y = rect.x, rect.y
    if rect.x_max > window_size.x:
        x = window_size.x - rect.width - TOOLTIP_EDGE_MARGIN
    if rect.y_max > window_size.y:
        y = mouse.y - rect.height - TOOLTIP_EDGE_MARGIN
    return Rect(x, y, rect.width, rect.height)


def _grow(rect: Rect, amount: float) -> Rect:
    return Rect(rect.x - amount, rect.y - amount, rect.width + 2 * amount, rect.height + 2 * amount)
