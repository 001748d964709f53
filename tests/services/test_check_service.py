"""Tests for CheckService — structure and catalog conformance issues."""

from __future__ import annotations

from typing import Any

from sdui.domain.catalog import Catalog
from sdui.domain.models import Packet
from sdui.infrastructure.surface import Surface
from sdui.services.check import CAT_CATALOG, CAT_STRUCTURE, CheckService


def _check(nodes: list[dict[str, Any]], catalog: Catalog | None = None) -> dict[str, Any]:
    packet = Packet.from_wire({"layout": {"root": "root", "nodes": nodes}})
    result = CheckService(Surface(packet, catalog=catalog)).check()
    assert result.ok
    return result.data


def _messages(data: dict[str, Any], category: str) -> list[str]:
    return [i["message"] for i in data["issues"] if i["category"] == category]


class TestStructure:
    def test_clean(self, surface: Surface) -> None:
        data = CheckService(surface).check().data
        assert data == {"issues": [], "count": 0, "errors": 0, "node_count": 3}

    def test_missing_root(self) -> None:
        data = _check([{"id": "a", "type": "Text"}])
        assert data["errors"] == 1
        assert data["issues"][0]["node_id"] == "root"
        # unreachable is only reported relative to a present root
        assert len(data["issues"]) == 1

    def test_cycle(self, catalog: Catalog) -> None:
        data = _check(
            [
                {"id": "root", "type": "Container", "properties": {"child": "a"}},
                {"id": "a", "type": "Container", "properties": {"child": "root"}},
            ],
            catalog,
        )
        messages = _messages(data, CAT_STRUCTURE)
        assert len(messages) == 1
        assert messages[0].startswith("Cyclical layout:")
        assert data["errors"] == 1

    def test_dangling_and_unreachable(self, catalog: Catalog) -> None:
        data = _check(
            [
                {"id": "root", "type": "Column", "properties": {"children": ["ghost"]}},
                {"id": "orphan", "type": "Text"},
            ],
            catalog,
        )
        severities = {(i["node_id"], i["severity"]) for i in data["issues"]}
        assert severities == {("root", "error"), ("orphan", "warning")}
        assert data["errors"] == 1
        assert data["count"] == 2


class TestCatalogConformance:
    def test_unknown_widget_type(self, catalog: Catalog) -> None:
        data = _check([{"id": "root", "type": "Slider"}], catalog)
        assert _messages(data, CAT_CATALOG) == [
            "Widget type 'Slider' is not defined in the catalog"
        ]
        assert data["errors"] == 0

    def test_non_conforming_static_property(self, catalog: Catalog) -> None:
        data = _check(
            [{"id": "root", "type": "Text", "properties": {"text": "ok", "visible": "yes"}}],
            catalog,
        )
        assert _messages(data, CAT_CATALOG) == [
            "Property 'visible' does not conform to type 'bool'"
        ]

    def test_custom_data_type(self, catalog_data: dict[str, Any]) -> None:
        catalog_data["items"]["PriceTag"] = {"properties": {"price": {"type": "Price"}}}
        catalog = Catalog.from_wire(catalog_data)
        data = _check(
            [{"id": "root", "type": "PriceTag", "properties": {"price": {"amount": "free"}}}],
            catalog,
        )
        assert len(_messages(data, CAT_CATALOG)) == 1

    def test_skipped_without_catalog(self) -> None:
        data = _check([{"id": "root", "type": "Anything", "properties": {"x": 1}}])
        assert data["issues"] == []
