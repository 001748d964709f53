"""Shared pytest fixtures and test helpers for sdui tests."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from sdui.domain.catalog import Catalog
from sdui.domain.models import Packet
from sdui.infrastructure.surface import Surface


@pytest.fixture
def cli_runner() -> Generator[CliRunner]:
    """Provide a Click CLI test runner.

    The CLI reconfigures logging on every invocation; the root handlers
    are restored afterwards so later tests do not log to a closed stream.
    """
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield CliRunner()
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def catalog_data() -> dict[str, Any]:
    """A small catalog: containers hold WidgetId children, Text has typed props."""
    return {
        "catalogVersion": "1.0.0",
        "dataTypes": {
            "Price": {"type": "object", "required": ["amount"], "properties": {"amount": {"type": "number"}}},
        },
        "items": {
            "Column": {
                "properties": {
                    "children": {"type": "array", "items": {"type": "WidgetId"}},
                },
            },
            "Container": {
                "properties": {"child": {"type": "WidgetId"}},
            },
            "Text": {
                "properties": {"text": {"type": "String"}, "visible": {"type": "bool"}},
            },
            "Counter": {
                "properties": {"count": {"type": "int"}},
            },
            "ListView": {
                "properties": {"data": {"type": "List"}},
            },
        },
    }


@pytest.fixture
def catalog(catalog_data: dict[str, Any]) -> Catalog:
    return Catalog.from_wire(catalog_data)


@pytest.fixture
def packet_data() -> dict[str, Any]:
    """A three-node packet: a Column with a greeting and a status line."""
    return {
        "formatVersion": "1.0.0",
        "layout": {
            "root": "root",
            "nodes": [
                {
                    "id": "root",
                    "type": "Column",
                    "properties": {"children": ["greeting", "status"]},
                },
                {
                    "id": "greeting",
                    "type": "Text",
                    "bindings": {"text": {"path": "user.name", "format": "Hi, {}!"}},
                },
                {
                    "id": "status",
                    "type": "Text",
                    "bindings": {
                        "text": {
                            "path": "user.status",
                            "map": {"mapping": {"active": "Online"}, "fallback": "Offline"},
                        },
                    },
                },
            ],
        },
        "state": {"user": {"name": "Alice", "status": "active"}, "tags": ["a", "b"]},
        "metadata": {"source": "tests"},
    }


@pytest.fixture
def packet(packet_data: dict[str, Any]) -> Packet:
    return Packet.from_wire(packet_data)


@pytest.fixture
def surface(packet: Packet, catalog: Catalog) -> Surface:
    """Live surface over the sample packet and catalog, without plugins."""
    return Surface(packet, catalog=catalog)


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run in an empty temp dir so no stray sdui.toml is discovered."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("SDUI_CONFIG", raising=False)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def write_json(path: Path, data: Any) -> Path:
    """Write *data* as JSON to *path* and return the path."""
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def state_update(*operations: dict[str, Any]) -> dict[str, Any]:
    return {"operations": list(operations)}


def layout_update(*operations: dict[str, Any]) -> dict[str, Any]:
    return {"operations": list(operations)}
