"""Unit tests for DependencyGraphSession."""

from unittest.mock import MagicMock

import pytest

from depview.config import DepviewConfig, GraphSettings
from depview.core.repository import ManifestRepository
from depview.core.session import DependencyGraphSession
from depview.core.types import Vec2
from depview.graph.interaction import ContextAction, MouseMove, ScrollWheel


@pytest.fixture
def repo():
    return ManifestRepository.from_mapping({
        "Assets/Root.prefab": ["Assets/Mat.mat", "Assets/Script.cs"],
        "Assets/Mat.mat": ["Assets/Tex.png"],
        "Assets/Scene.unity": ["Assets/Root.prefab"],
    })


@pytest.fixture
def session(repo):
    return DependencyGraphSession(repo, width=1280, height=720)


def chain_repo(length):
    return ManifestRepository.from_mapping({
        f"Assets/n{i}.asset": [f"Assets/n{i + 1}.asset"] for i in range(length)
    })


class TestShow:
    def test_starts_idle(self, session):
        assert session.is_empty
        assert not session.is_index_valid
        assert session.render().nodes == []

    def test_builds_index_and_graph(self, session):
        graph = session.show("Assets/Root.prefab")

        assert session.is_index_valid
        assert not session.is_empty
        assert graph.root.dependents == ["Assets/Scene.unity"]
        assert graph.get_node("Assets/Tex.png").depth == -2

    def test_root_is_centered(self, session):
        graph = session.show("Assets/Root.prefab")

        assert graph.root.position == Vec2(640.0, 360.0)

    def test_every_node_is_positioned(self, session):
        graph = session.show("Assets/Root.prefab")

        assert all(node.position is not None for node in graph.nodes)

    def test_unknown_root(self, session):
        assert session.show("Assets/Nope.prefab") is None
        assert session.is_empty

    def test_index_is_reused(self, session):
        session.show("Assets/Root.prefab")
        session.index.build = MagicMock(wraps=session.index.build)

        session.show("Assets/Mat.mat")

        session.index.build.assert_not_called()

    def test_resets_view(self, session):
        session.show("Assets/Root.prefab")
        session.handle(ScrollWheel(Vec2(100.0, 100.0), -5.0))
        assert session.viewport.zoom != 1.0

        session.show("Assets/Mat.mat")

        assert session.viewport.zoom == 1.0
        assert session.viewport.pan_offset == Vec2()
        assert session.interaction.hovered is None

    def test_cancelled_index_still_shows_forward_graph(self, repo):
        config = DepviewConfig()
        config.index.progress_threshold = 0
        session = DependencyGraphSession(repo, config)

        graph = session.show("Assets/Root.prefab", progress=lambda processed, total: True)

        assert not session.is_index_valid
        assert graph.root.dependencies == ["Assets/Mat.mat", "Assets/Script.cs"]
        assert graph.root.dependents == []


class TestIndexLifecycle:
    def test_corpus_change_invalidates(self, session):
        session.show("Assets/Root.prefab")

        session.notify_corpus_changed()

        assert not session.is_index_valid

    def test_rebuild_index_rebuilds_graph(self, session):
        session.show("Assets/Root.prefab")
        old_graph = session.graph

        result = session.rebuild_index()

        assert result.is_ok()
        assert session.is_index_valid
        assert session.graph is not old_graph
        assert session.graph.node_count == old_graph.node_count


class TestDepthControl:
    def test_shallow_graph_hides_control(self, session):
        session.show("Assets/Root.prefab")

        assert session.calculated_max_depth == 5
        assert not session.show_depth_control
        assert session.depth_range() == (5, 5)

    def test_set_max_depth_is_clamped(self):
        config = DepviewConfig(graph=GraphSettings(max_depth=8))
        session = DependencyGraphSession(chain_repo(12), config)
        session.show("Assets/n0.asset")
        assert session.calculated_max_depth == 8
        assert session.show_depth_control

        session.set_max_depth(100)
        assert session.max_depth == 8

        graph = session.set_max_depth(6)
        assert session.max_depth == 6
        assert graph.depth_range() == (-6, 0)

        session.set_max_depth(1)
        assert session.max_depth == 5


class TestInteraction:
    def test_hover_and_tooltip(self, session):
        graph = session.show("Assets/Root.prefab")
        # node squares start at their position; window space adds the toolbar
        mouse = graph.root.position + Vec2(10.0, 10.0 + session.interaction.graph_origin.y)

        result = session.handle(MouseMove(mouse))
        scene = session.render(mouse)

        assert result.state.hovered == "Assets/Root.prefab"
        assert scene.tooltip is not None
        assert scene.tooltip.text.splitlines()[1] == "Type: GameObject"

    def test_no_tooltip_without_hover(self, session):
        session.show("Assets/Root.prefab")

        scene = session.render(Vec2(1.0, 1.0))

        assert scene.tooltip is None

    def test_recenter_action(self, session):
        session.show("Assets/Root.prefab")

        assert session.apply_context_action(ContextAction.RECENTER, "Assets/Mat.mat") is None
        assert session.root_path == "Assets/Mat.mat"
        assert session.graph.root.path == "Assets/Mat.mat"

    def test_select_action(self, session):
        session.show("Assets/Root.prefab")

        assert session.apply_context_action(ContextAction.SELECT, "Assets/Mat.mat") == "Assets/Mat.mat"
        assert session.interaction.selected == "Assets/Mat.mat"

    def test_ping_is_left_to_host(self, session):
        session.show("Assets/Root.prefab")

        assert session.apply_context_action(ContextAction.PING, "Assets/Mat.mat") == "Assets/Mat.mat"
        assert session.root_path == "Assets/Root.prefab"


class TestPreviewCache:
    def test_previews_are_loaded_once_per_root(self, repo):
        repo.load_preview = MagicMock(return_value=b"png")
        session = DependencyGraphSession(repo)
        session.show("Assets/Root.prefab")

        scene = session.render()
        session.render()
        loads = repo.load_preview.call_count

        assert loads == len(scene.nodes)
        assert all(node.has_preview for node in scene.nodes)

        session.show("Assets/Root.prefab")
        session.render()

        assert repo.load_preview.call_count == 2 * loads

    def test_resize_relayouts(self, session):
        graph = session.show("Assets/Root.prefab")

        session.resize(800, 600)

        assert graph.root.position == Vec2(400.0, 300.0)
