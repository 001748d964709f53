"""Tests for Surface — construction, configuration and packet snapshots."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from sdui.config.models import BindingsConfig, ResolverConfig, SduiConfig
from sdui.domain.catalog import Catalog
from sdui.domain.errors import MalformedDocumentError
from sdui.domain.models import Packet
from sdui.domain.types import TypeCheckMode
from sdui.infrastructure.surface import Surface
from sdui.plugins import hookimpl
from sdui.plugins.manager import PluginManager
from tests.conftest import state_update, write_json


class TestConstruction:
    def test_owns_state_and_graph(self, surface: Surface) -> None:
        assert surface.store.get("user.name") == "Alice"
        assert surface.graph.root_id == "root"
        assert surface.store.catalog is surface.catalog
        assert surface.store.type_checker is surface.type_checker

    def test_default_catalog_is_empty(self, packet: Packet) -> None:
        surface = Surface(packet)
        assert surface.catalog.items == {}
        assert surface.plugins is None

    def test_from_wire(self, packet_data: dict[str, Any]) -> None:
        surface = Surface.from_wire(packet_data)
        assert len(surface.graph) == 3

    def test_from_wire_malformed(self) -> None:
        with pytest.raises(MalformedDocumentError):
            Surface.from_wire({"state": {}})

    def test_from_files(
        self, tmp_path: Path, packet_data: dict[str, Any], catalog_data: dict[str, Any]
    ) -> None:
        packet_path = write_json(tmp_path / "packet.json", packet_data)
        catalog_path = write_json(tmp_path / "catalog.json", catalog_data)
        surface = Surface.from_files(packet_path, catalog_path=catalog_path)
        assert "Column" in surface.catalog.items

    def test_extra_reference_types(self, packet: Packet) -> None:
        config = SduiConfig(resolver=ResolverConfig(reference_types=["NodeRef"]))
        surface = Surface(packet, catalog=Catalog(), config=config)
        assert surface.catalog.reference_types == ["WidgetId", "NodeRef"]

    def test_plugin_value_types_reach_checker(self, packet: Packet) -> None:
        class PositiveTypes:
            @hookimpl
            def register_value_types(self) -> dict[str, Any]:
                return {"Positive": lambda v: isinstance(v, int) and v > 0}

        plugins = PluginManager()
        plugins.register_plugin(PositiveTypes())
        surface = Surface(packet, plugins=plugins)
        assert surface.type_checker.conforms("Positive", 3)
        assert not surface.type_checker.conforms("Positive", -1)


class TestResolution:
    def test_layout_resolver(self, surface: Surface) -> None:
        tree = surface.layout_resolver().resolve()
        assert tree.find("greeting").properties["text"] == "Hi, Alice!"

    def test_resolve_sees_state_updates(self, surface: Surface) -> None:
        surface.state_patcher.apply(
            surface.store,
            state_update({"op": "patch", "patch": {"op": "replace", "path": "/user/name", "value": "Bob"}}),
        )
        tree = surface.layout_resolver().resolve()
        assert tree.find("greeting").properties["text"] == "Hi, Bob!"

    def test_type_check_mode_from_config(self, packet_data: dict[str, Any], catalog: Catalog) -> None:
        packet_data["layout"]["nodes"].append(
            {"id": "count", "type": "Counter", "bindings": {"count": {"path": "user.name"}}}
        )
        packet_data["layout"]["nodes"][0]["properties"]["children"].append("count")
        config = SduiConfig(bindings=BindingsConfig(type_check=TypeCheckMode.REJECT))
        surface = Surface(Packet.from_wire(packet_data), catalog=catalog, config=config)
        tree = surface.layout_resolver().resolve()
        assert tree.find("count").properties == {"count": None}
        assert len(tree.diagnostics) == 1


class TestToPacket:
    def test_unmodified_round_trip(self, surface: Surface, packet_data: dict[str, Any]) -> None:
        assert surface.to_packet().to_wire() == packet_data

    def test_reflects_live_state(self, surface: Surface) -> None:
        surface.store.replace({"user": {"name": "Zed"}})
        packet = surface.to_packet()
        assert packet.state == {"user": {"name": "Zed"}}
        assert packet.metadata == {"source": "tests"}
