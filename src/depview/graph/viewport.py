"""
Viewport Transform.

Maps world-space node positions to screen space and back:

    screen = world * zoom + pan_offset * zoom
    world  = screen / zoom - pan_offset

The pan offset lives in world units, so dragging feels the same at any zoom
level. Viewports are immutable; every operation returns a new one.
"""

from dataclasses import dataclass, field, replace
from typing import Iterable, Optional

from ..config import MAX_ZOOM, MIN_ZOOM, NODE_SIZE, ZOOM_SENSITIVITY
from ..core.types import GraphNode, Rect, Vec2


@dataclass(frozen=True)
class Viewport:
    zoom: float = 1.0
    pan_offset: Vec2 = field(default_factory=Vec2)
    min_zoom: float = MIN_ZOOM
    max_zoom: float = MAX_ZOOM
    zoom_sensitivity: float = ZOOM_SENSITIVITY
    node_size: float = NODE_SIZE

    def clamp_zoom(self, zoom: float) -> float:
        return max(self.min_zoom, min(self.max_zoom, zoom))

    def world_to_screen(self, point: Vec2) -> Vec2:
        return point * self.zoom + self.pan_offset * self.zoom

    def screen_to_world(self, point: Vec2) -> Vec2:
        return point / self.zoom - self.pan_offset

    def pan(self, delta: Vec2) -> "Viewport":
        """Move the view by a screen-space drag delta."""
        return replace(self, pan_offset=self.pan_offset + delta / self.zoom)

    def zoom_at(self, cursor: Vec2, new_zoom: float) -> "Viewport":
        """
        Change zoom while keeping the world point under `cursor` in place.

        `cursor` is relative to the graph area origin. The zoom is clamped
        before the pan correction is computed.
        """
        old_zoom = self.zoom
        zoom = self.clamp_zoom(new_zoom)

        world_before = (cursor - self.pan_offset * old_zoom) / old_zoom
        world_after = (cursor - self.pan_offset * zoom) / zoom

        return replace(self, zoom=zoom, pan_offset=self.pan_offset + (world_after - world_before))

    def scroll(self, cursor: Vec2, wheel_delta_y: float) -> "Viewport":
        """Zoom from a mouse wheel step; scrolling up (negative delta) zooms in."""
        return self.zoom_at(cursor, self.zoom - wheel_delta_y * self.zoom_sensitivity)

    def reset(self) -> "Viewport":
        return replace(self, zoom=1.0, pan_offset=Vec2())

    def node_rect(self, position: Vec2) -> Rect:
        """Screen rectangle of a node's preview square."""
        origin = self.world_to_screen(position)
        size = self.node_size * self.zoom
        return Rect(origin.x, origin.y, size, size)

    def node_center(self, position: Vec2) -> Vec2:
        return self.node_rect(position).center

    def hit_test(self, nodes: Iterable[GraphNode], point: Vec2) -> Optional[GraphNode]:
        """
        Node under `point`, or None.

        Nodes later in draw order sit on top, so the last match wins. Nodes
        without a position are ignored.
        """
        hit = None
        for node in nodes:
            if node.position is not None and self.node_rect(node.position).contains(point):
                hit = node
        return hit
