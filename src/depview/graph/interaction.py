"""
Input handling as a pure function.

`handle_event(state, event, graph)` returns the next interaction state plus
what the host should do about it. Event positions are window coordinates;
the graph area starts `graph_origin` below the window origin (the toolbar).
"""

from dataclasses import dataclass, field, replace
from enum import IntEnum, StrEnum
from typing import List, Optional, Tuple, Union

from ..config import TOOLBAR_HEIGHT
from ..core.graph import DependencyGraph
from ..core.types import Vec2
from .viewport import Viewport


class MouseButton(IntEnum):
    LEFT = 0
    RIGHT = 1
    MIDDLE = 2


class ContextAction(StrEnum):
    """Entries of a node's context menu."""
    PING = "ping"
    RECENTER = "recenter"
    SELECT = "select"


CONTEXT_MENU: List[Tuple[str, ContextAction]] = [
    ("Ping in Project", ContextAction.PING),
    ("Re-center Graph on This Asset", ContextAction.RECENTER),
    ("Select in Project", ContextAction.SELECT),
]


@dataclass(frozen=True)
class MouseMove:
    position: Vec2


@dataclass(frozen=True)
class MouseDrag:
    position: Vec2
    delta: Vec2
    button: MouseButton = MouseButton.MIDDLE
    alt: bool = False


@dataclass(frozen=True)
class MouseDown:
    position: Vec2
    button: MouseButton = MouseButton.LEFT


@dataclass(frozen=True)
class ScrollWheel:
    position: Vec2
    delta_y: float


InputEvent = Union[MouseMove, MouseDrag, MouseDown, ScrollWheel]


@dataclass(frozen=True)
class InteractionState:
    viewport: Viewport = field(default_factory=Viewport)
    hovered: Optional[str] = None
    selected: Optional[str] = None
    graph_origin: Vec2 = field(default_factory=lambda: Vec2(0.0, TOOLBAR_HEIGHT))

    def to_graph_space(self, window_point: Vec2) -> Vec2:
        return window_point - self.graph_origin


@dataclass(frozen=True)
class InteractionResult:
    state: InteractionState
    consumed: bool = False
    context_menu_for: Optional[str] = None
    needs_repaint: bool = False


def is_pan_drag(event: MouseDrag) -> bool:
    return event.button == MouseButton.MIDDLE or (event.button == MouseButton.LEFT and event.alt)


def handle_event(
    state: InteractionState,
    event: InputEvent,
    graph: Optional[DependencyGraph],
) -> InteractionResult:
    """
    Apply one input event.

    - Middle drag, or alt + left drag: pan.
    - Wheel: zoom about the cursor.
    - Left click on a node: select it.
    - Right click on a node: ask the host for its context menu.

    Hover is recomputed from the event position every time, against the
    viewport the event leaves behind.
    """
    local = state.to_graph_space(event.position)
    consumed = False
    context_menu_for = None

    if isinstance(event, MouseDrag) and is_pan_drag(event):
        state = replace(state, viewport=state.viewport.pan(event.delta))
        consumed = True

    elif isinstance(event, ScrollWheel):
        state = replace(state, viewport=state.viewport.scroll(local, event.delta_y))
        consumed = True

    hovered = _hovered_path(state.viewport, graph, local)
    state = replace(state, hovered=hovered)

    if isinstance(event, MouseDown) and hovered is not None:
        if event.button == MouseButton.RIGHT:
            context_menu_for = hovered
            consumed = True
        elif event.button == MouseButton.LEFT:
            state = replace(state, selected=hovered)
            consumed = True

    # keep repainting while a tooltip follows the mouse
    return InteractionResult(
        state=state,
        consumed=consumed,
        context_menu_for=context_menu_for,
        needs_repaint=consumed or hovered is not None,
    )


def _hovered_path(viewport: Viewport, graph: Optional[DependencyGraph], point: Vec2) -> Optional[str]:
    if graph is None:
        return None
    node = viewport.hit_test(graph.iter_nodes(), point)
    return node.path if node is not None else None
