"""Unit tests for the graph builder."""

from collections import Counter
from unittest.mock import MagicMock

import pytest

from depview.core.builder import ExpansionPolicy, GraphBuilder
from depview.core.graph import DependencyGraph
from depview.core.index import ReverseDependencyIndex
from depview.core.repository import ManifestRepository


def make_builder(mapping, build_index=True):
    repo = ManifestRepository.from_mapping(mapping)
    index = ReverseDependencyIndex(repo, project_prefix="")
    if build_index:
        index.build()
    return GraphBuilder(repo, index), repo


def count_expansions(repo):
    """Wrap get_direct_dependencies with a call counter."""
    repo.get_direct_dependencies = MagicMock(side_effect=repo.get_direct_dependencies)
    return repo.get_direct_dependencies


class TestScenarios:
    def test_single_dependency(self):
        builder, _ = make_builder({"root": ["X"], "X": []}, build_index=False)

        graph = builder.build("root", 5)

        assert len(graph) == 2
        root, x = graph.get_node("root"), graph.get_node("X")
        assert root.depth == 0 and root.is_root
        assert x.depth == -1 and not x.is_root
        assert root.dependencies == ["X"]
        assert graph.dependencies_of("root") == [x]

    def test_zero_depth_only_root(self):
        builder, _ = make_builder({"root": ["X"], "X": ["Y"], "P": ["root"]})

        graph = builder.build("root", 0)

        assert [n.path for n in graph.nodes] == ["root"]
        assert graph.root.dependencies == []
        assert graph.root.dependents == []

    def test_empty_root_gives_no_graph(self):
        builder, _ = make_builder({"root": ["X"]})
        assert builder.build("", 5) is None

    def test_unknown_root_gives_no_graph(self):
        builder, _ = make_builder({"root": ["X"]})
        assert builder.build("missing", 5) is None


class TestExpansion:
    def test_dependents_get_positive_depths(self):
        builder, _ = make_builder({"root": [], "P1": ["root"], "P2": ["P1"]})

        graph = builder.build("root", 5)

        assert graph.get_node("P1").depth == 1
        assert graph.get_node("P2").depth == 2
        assert graph.root.dependents == ["P1"]
        assert graph.get_node("P1").dependents == ["P2"]

    def test_discovery_order_is_repository_order(self):
        builder, _ = make_builder({"root": ["Z", "A", "M"]})

        graph = builder.build("root", 5)

        assert [n.path for n in graph.nodes] == ["root", "Z", "A", "M"]

    def test_self_references_are_filtered(self):
        builder, _ = make_builder({"root": ["root", "X"]})

        graph = builder.build("root", 5)

        assert graph.root.dependencies == ["X"]

    def test_excluded_extensions_are_not_traversed(self):
        builder, _ = make_builder({"root": ["Plugins/Native.dll", "X"], "Plugins/Native.dll": ["Y"]})

        graph = builder.build("root", 5)

        assert not graph.has_node("Plugins/Native.dll")
        assert not graph.has_node("Y")

    def test_custom_policy(self):
        repo = ManifestRepository.from_mapping({"root": ["a.txt", "b.bin"]})
        index = ReverseDependencyIndex(repo, project_prefix="")
        builder = GraphBuilder(repo, index, ExpansionPolicy(frozenset({".bin"})))

        graph = builder.build("root", 3)

        assert graph.root.dependencies == ["a.txt"]

    def test_excluded_items_never_appear_as_dependents(self):
        builder, _ = make_builder({"Editor.dll": ["root"], "root": []})

        graph = builder.build("root", 5)

        assert len(graph) == 1


class TestInvariants:
    def test_cycle_terminates_with_unique_nodes(self):
        builder, _ = make_builder({"A": ["B"], "B": ["A"]})

        graph = builder.build("A", 3)

        assert sorted(n.path for n in graph.nodes) == ["A", "B"]
        assert graph.get_node("A").dependencies == ["B"]
        assert graph.get_node("B").dependencies == ["A"]
        assert graph.has_cycles()

    def test_depth_bound(self):
        chain = {f"n{i}": [f"n{i + 1}"] for i in range(10)}
        chain.update({f"p{i}": [f"p{i - 1}" if i else "n0"] for i in range(10)})
        builder, _ = make_builder(chain)

        graph = builder.build("n0", 3)

        assert all(abs(n.depth) <= 3 for n in graph.nodes)
        assert sorted(n.depth for n in graph.nodes) == [-3, -2, -1, 0, 1, 2, 3]

    def test_depth_is_stable_and_nodes_expand_once(self):
        builder, repo = make_builder({
            "root": ["A", "B"],
            "A": ["C"],
            "B": ["C"],
            "C": ["D"],
        })
        calls = count_expansions(repo)

        graph = builder.build("root", 5)

        assert graph.get_node("C").depth == -2
        assert graph.get_node("B").dependencies == ["C"]
        assert graph.get_node("D").depth == -3
        expanded = Counter(call.args[0] for call in calls.call_args_list)
        assert expanded == Counter({"root": 1, "A": 1, "B": 1, "C": 1, "D": 1})

    def test_reencounter_across_directions_adds_edge_only(self):
        # X is both a dependency and a dependent of root
        builder, repo = make_builder({"root": ["X"], "X": ["root"]})
        calls = count_expansions(repo)

        graph = builder.build("root", 5)

        x = graph.get_node("X")
        assert x.depth == -1
        assert graph.root.dependents == ["X"]
        assert x.dependents == []
        assert [c.args[0] for c in calls.call_args_list] == ["root", "X"]

    def test_no_duplicate_paths_in_dense_graph(self):
        names = [f"n{i}" for i in range(12)]
        mapping = {
            name: [names[(i * 3 + k) % len(names)] for k in range(1, 5)]
            for i, name in enumerate(names)
        }
        builder, _ = make_builder(mapping)

        graph = builder.build("n0", 4)

        paths = [n.path for n in graph.nodes]
        assert len(set(paths)) == len(paths)
        for node in graph.nodes:
            assert node.path not in node.dependencies
            assert len(set(node.dependencies)) == len(node.dependencies)
            assert len(set(node.dependents)) == len(node.dependents)
            assert all(graph.has_node(p) for p in node.dependencies + node.dependents)


class TestRequiredDepth:
    def test_floor_applies_to_shallow_graphs(self):
        builder, _ = make_builder({"root": ["X"]})
        assert builder.build("root", 5).calculate_required_depth(5) == 5

    def test_deep_graphs_report_their_depth(self):
        chain = {f"n{i}": [f"n{i + 1}"] for i in range(10)}
        builder, _ = make_builder(chain)

        graph = builder.build("n0", 8)

        assert graph.calculate_required_depth(5) == 8

    def test_empty_graph(self):
        assert DependencyGraph().calculate_required_depth(5) == 5
