"""Tests for LayoutPatcher — best-effort structural updates."""

from __future__ import annotations

from sdui.domain.catalog import Catalog
from sdui.domain.models import Node
from sdui.domain.types import DiagnosticCode
from sdui.engine.layout_patcher import LayoutPatcher
from sdui.infrastructure.graph.engine import LayoutGraph
from tests.conftest import layout_update


def _graph(*nodes: Node, catalog: Catalog | None = None) -> LayoutGraph:
    return LayoutGraph("root", nodes, catalog=catalog)


def _three_nodes() -> LayoutGraph:
    return _graph(
        Node(id="root", type="Column", properties={"children": ["child1", "child2"]}),
        Node(id="child1", type="Text", properties={"text": "one"}),
        Node(id="child2", type="Text", properties={"text": "two"}),
    )


class TestAdd:
    def test_appends_to_existing_list(self) -> None:
        graph = _three_nodes()
        report = LayoutPatcher().apply(
            graph,
            layout_update(
                {
                    "op": "add",
                    "nodes": [{"id": "child3", "type": "Text"}],
                    "targetNodeId": "root",
                    "targetProperty": "children",
                }
            ),
        )
        assert report.applied == 1
        assert graph.get("root").properties["children"] == ["child1", "child2", "child3"]
        assert "child3" in graph

    def test_promotes_scalar_child_to_list(self) -> None:
        graph = _graph(
            Node(id="root", type="Container", properties={"child": "old"}),
            Node(id="old", type="Text"),
        )
        LayoutPatcher().apply(
            graph,
            layout_update(
                {
                    "op": "add",
                    "nodes": [{"id": "new1", "type": "Text"}, {"id": "new2", "type": "Text"}],
                    "targetNodeId": "root",
                    "targetProperty": "child",
                }
            ),
        )
        assert graph.get("root").properties["child"] == ["old", "new1", "new2"]

    def test_absent_property_becomes_list(self) -> None:
        graph = _graph(Node(id="root", type="Column"))
        LayoutPatcher().apply(
            graph,
            layout_update(
                {
                    "op": "add",
                    "nodes": [{"id": "a", "type": "Text"}],
                    "targetNodeId": "root",
                    "targetProperty": "children",
                }
            ),
        )
        assert graph.get("root").properties == {"children": ["a"]}

    def test_target_record_is_replaced_not_mutated(self) -> None:
        graph = _three_nodes()
        before = graph.get("root")
        LayoutPatcher().apply(
            graph,
            layout_update(
                {
                    "op": "add",
                    "nodes": [{"id": "x", "type": "Text"}],
                    "targetNodeId": "root",
                    "targetProperty": "children",
                }
            ),
        )
        assert before.properties["children"] == ["child1", "child2"]
        assert graph.get("root") is not before

    def test_missing_target_still_inserts_nodes(self) -> None:
        graph = _three_nodes()
        report = LayoutPatcher().apply(
            graph,
            layout_update(
                {
                    "op": "add",
                    "nodes": [{"id": "orphan", "type": "Text"}],
                    "targetNodeId": "ghost",
                    "targetProperty": "children",
                }
            ),
        )
        assert "orphan" in graph
        assert report.diagnostics[0].code == DiagnosticCode.MISSING_TARGET
        assert graph.get("root").properties["children"] == ["child1", "child2"]

    def test_overwrites_and_resurrects(self) -> None:
        graph = _three_nodes()
        patcher = LayoutPatcher()
        patcher.apply(graph, layout_update({"op": "remove", "nodeIds": ["child1"]}))
        patcher.apply(
            graph,
            layout_update({"op": "add", "nodes": [{"id": "child1", "type": "Text", "properties": {"text": "back"}}]}),
        )
        assert graph.get("child1").properties == {"text": "back"}


class TestRemove:
    def test_only_untouched_node_remains(self) -> None:
        graph = _three_nodes()
        LayoutPatcher().apply(graph, layout_update({"op": "remove", "nodeIds": ["child1", "child2"]}))
        assert list(graph) == ["root"]

    def test_absent_ids_are_silent(self) -> None:
        graph = _three_nodes()
        report = LayoutPatcher().apply(graph, layout_update({"op": "remove", "nodeIds": ["nope"]}))
        assert len(graph) == 3
        assert report.diagnostics == []

    def test_dangling_references_are_left(self) -> None:
        graph = _three_nodes()
        LayoutPatcher().apply(graph, layout_update({"op": "remove", "nodeIds": ["child2"]}))
        assert graph.get("root").properties["children"] == ["child1", "child2"]


class TestReplace:
    def test_overwrites_existing(self) -> None:
        graph = _three_nodes()
        LayoutPatcher().apply(
            graph,
            layout_update({"op": "replace", "nodes": [{"id": "child1", "type": "Button"}]}),
        )
        assert graph.get("child1").type == "Button"

    def test_never_creates(self) -> None:
        graph = _three_nodes()
        LayoutPatcher().apply(
            graph,
            layout_update({"op": "replace", "nodes": [{"id": "new", "type": "Text"}]}),
        )
        assert "new" not in graph


class TestUnknownOperation:
    def test_is_skipped_with_diagnostic(self) -> None:
        graph = _three_nodes()
        report = LayoutPatcher().apply(
            graph,
            layout_update(
                {"op": "teleport", "nodeIds": ["child1"]},
                {"op": "remove", "nodeIds": ["child1"]},
            ),
        )
        assert report.skipped == 1
        assert report.applied == 1
        assert report.diagnostics[0].code == DiagnosticCode.UNKNOWN_OPERATION
        assert "Ignoring unknown layout operation" in report.messages[0]
        assert "child1" not in graph
