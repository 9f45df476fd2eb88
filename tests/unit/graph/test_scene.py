"""Unit tests for render command construction."""

import pytest

from depview.core.graph import DependencyGraph
from depview.core.types import AssetMetadata, EdgeKind, GraphNode, Rect, Vec2
from depview.graph.scene import (
    DEPENDENCY_LINE_COLOR,
    DEPENDENT_LINE_COLOR,
    NODE_BACKGROUND_COLOR,
    SELECTED_NODE_COLOR,
    WHITE,
    GRID_COLOR_LARGE,
    GRID_COLOR_SMALL,
    approximate_measure,
    build_grid,
    build_scene,
    build_tooltip,
    clamp_tooltip,
    connection,
    node_color,
)
from depview.graph.viewport import Viewport

GRAPH_SIZE = Vec2(1280.0, 702.0)


@pytest.fixture
def graph():
    graph = DependencyGraph()
    root = graph.add_node(GraphNode(path="Assets/Root.prefab", depth=0, is_root=True))
    dep = graph.add_node(GraphNode(path="Assets/Materials/PlayerController.mat", depth=-1))
    user = graph.add_node(GraphNode(path="Assets/Scene.unity", depth=1))
    graph.add_edge(root.path, dep.path, EdgeKind.DEPENDENCY)
    graph.add_edge(root.path, user.path, EdgeKind.DEPENDENT)
    root.position = Vec2(600.0, 300.0)
    dep.position = Vec2(600.0, 60.0)
    user.position = Vec2(600.0, 540.0)
    return graph


class TestConnections:
    def test_tangents_point_toward_each_other_upward(self):
        cmd = connection(Vec2(100.0, 300.0), Vec2(100.0, 60.0), Viewport(), DEPENDENCY_LINE_COLOR)

        assert cmd.start == Vec2(132.0, 332.0)
        assert cmd.end == Vec2(132.0, 92.0)
        assert cmd.start_tangent == Vec2(132.0, 232.0)
        assert cmd.end_tangent == Vec2(132.0, 192.0)

    def test_tangents_point_toward_each_other_downward(self):
        cmd = connection(Vec2(0.0, 0.0), Vec2(0.0, 240.0), Viewport(zoom=0.5), DEPENDENT_LINE_COLOR)

        assert cmd.start_tangent.y == cmd.start.y + 50.0
        assert cmd.end_tangent.y == cmd.end.y - 50.0

    def test_edges_are_colored_by_kind(self, graph):
        scene = build_scene(graph, Viewport(), GRAPH_SIZE)

        assert [c.color for c in scene.connections] == [DEPENDENCY_LINE_COLOR, DEPENDENT_LINE_COLOR]
        assert all(c.width == 6.0 for c in scene.connections)


class TestNodes:
    def test_every_visible_node_is_drawn(self, graph):
        scene = build_scene(graph, Viewport(), GRAPH_SIZE)

        assert [n.path for n in scene.nodes] == [n.path for n in graph.nodes]
        assert scene.nodes[0].preview_rect == Rect(600.0, 300.0, 64.0, 64.0)
        assert scene.nodes[0].background_rect == Rect(598.0, 298.0, 68.0, 68.0)

    def test_offscreen_nodes_are_culled(self, graph):
        scene = build_scene(graph, Viewport(pan_offset=Vec2(0.0, -420.0)), GRAPH_SIZE)

        assert [n.path for n in scene.nodes] == ["Assets/Scene.unity"]

    def test_preview_flag(self, graph):
        scene = build_scene(graph, Viewport(), GRAPH_SIZE, has_preview=lambda p: p.endswith(".prefab"))

        assert [n.has_preview for n in scene.nodes] == [True, False, False]

    def test_colors(self, graph):
        root = graph.root
        other = graph.get_node("Assets/Scene.unity")

        assert node_color(root, None, None) == SELECTED_NODE_COLOR
        assert node_color(other, None, None) == NODE_BACKGROUND_COLOR
        assert node_color(root, root.path, None) == SELECTED_NODE_COLOR.lerp(WHITE, 0.2)
        assert node_color(other, None, other.path) == NODE_BACKGROUND_COLOR.lerp(SELECTED_NODE_COLOR, 0.5)


class TestLabels:
    def test_labels_show_truncated_names(self, graph):
        scene = build_scene(graph, Viewport(), GRAPH_SIZE)

        assert [label.text for label in scene.labels] == ["Root", "PlayerCon...", "Scene"]

    def test_label_sits_under_the_node(self, graph):
        label = build_scene(graph, Viewport(), GRAPH_SIZE).labels[0]

        assert label.rect.x == pytest.approx(593.6)
        assert label.rect.y == pytest.approx(372.0)
        assert label.rect.width == pytest.approx(76.8)
        assert label.font_size == 10

    def test_labels_scale_with_zoom(self, graph):
        labels = build_scene(graph, Viewport(zoom=0.5), GRAPH_SIZE).labels

        assert labels[0].font_size == 5
        assert labels[0].rect.height == pytest.approx(15.0)


class TestTooltip:
    def test_lines(self):
        tooltip = build_tooltip(
            "Assets/Root.prefab",
            AssetMetadata(kind="GameObject", size_bytes=2048),
            Vec2(100.0, 100.0),
            Vec2(1280.0, 720.0),
        )

        assert tooltip.text == "Assets/Root.prefab\nType: GameObject\nSize: 2 KB"
        assert tooltip.rect.x == 115.0
        assert tooltip.rect.y == 115.0
        assert tooltip.rect.height == 57.0

    def test_unknown_metadata(self):
        tooltip = build_tooltip("Assets/X", AssetMetadata(), Vec2(), Vec2(1280.0, 720.0))

        assert tooltip.text.splitlines()[1:] == ["Type: Unknown", "Size: N/A"]

    def test_long_path_keeps_its_tail(self):
        path = "Assets/" + "Deeply/Nested/" * 20 + "Player.prefab"

        tooltip = build_tooltip(path, AssetMetadata(), Vec2(), Vec2(400.0, 720.0))

        first = tooltip.text.splitlines()[0]
        assert first.startswith("...")
        assert first.endswith("Player.prefab")
        assert approximate_measure(first, 11) <= 200.0

    def test_flips_at_window_edges(self):
        rect = Rect(1265.0, 715.0, 100.0, 57.0)

        clamped = clamp_tooltip(rect, Vec2(1250.0, 700.0), Vec2(1280.0, 720.0))

        assert clamped.x == 1175.0
        assert clamped.y == 638.0

    def test_fits_unchanged_when_room(self):
        rect = Rect(115.0, 115.0, 100.0, 57.0)

        assert clamp_tooltip(rect, Vec2(100.0, 100.0), Vec2(1280.0, 720.0)) == rect


def vertical_stops(lines, color):
    """x of each vertical grid line of one family."""
    return [line.start.x for line in lines if line.color == color and line.start.x == line.end.x]


class TestGrid:
    def test_line_counts(self):
        lines = build_grid(Viewport(), Vec2(200.0, 100.0))

        small = [line for line in lines if line.color == GRID_COLOR_SMALL]
        large = [line for line in lines if line.color == GRID_COLOR_LARGE]
        # minor: 10 vertical + 5 horizontal, major: 2 vertical + 1 horizontal
        assert len(small) == 15
        assert len(large) == 3
        assert all(line.width == 1.0 for line in small)
        assert all(line.width == 2.0 for line in large)

    def test_lines_span_the_graph_area(self):
        lines = build_grid(Viewport(), Vec2(200.0, 100.0))

        assert lines[0].start == Vec2(0.0, 0.0)
        assert lines[0].end == Vec2(0.0, 100.0)
        assert lines[10].end == Vec2(200.0, 0.0)

    def test_grid_wraps_with_pan(self):
        lines = build_grid(Viewport(pan_offset=Vec2(-7.0, 0.0)), Vec2(200.0, 100.0))

        small = vertical_stops(lines, GRID_COLOR_SMALL)
        large = vertical_stops(lines, GRID_COLOR_LARGE)
        assert small[0] == pytest.approx(13.0)
        assert large == pytest.approx([93.0, 193.0])

    def test_grid_scales_with_zoom(self):
        lines = build_grid(Viewport(zoom=2.0), Vec2(200.0, 100.0))

        assert vertical_stops(lines, GRID_COLOR_SMALL) == pytest.approx([0.0, 40.0, 80.0, 120.0, 160.0])

    def test_hidden_when_zoomed_far_out(self):
        viewport = Viewport(zoom=0.2, min_zoom=0.1)

        assert build_grid(viewport, Vec2(200.0, 100.0)) == []

    def test_scene_carries_grid(self, graph):
        scene = build_scene(graph, Viewport(), GRAPH_SIZE)

        assert scene.grid == build_grid(Viewport(), GRAPH_SIZE)
