"""LayoutGraph — the live flat node map plus a lazy NetworkX view.

The node map (id -> Node) is the source of truth. Parent/child edges are
never stored: they are derived from property values that name other node
ids, either because the catalog declares the property as a reference
type or, for widget types the catalog does not know, heuristically.

The DiGraph used for integrity analysis is rebuilt lazily from the node
map and invalidated on every mutation. Layouts are small (hundreds of
nodes), so a rebuild is effectively free.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from itertools import islice
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

import networkx as nx

from sdui.domain.models import Layout, Node

if TYPE_CHECKING:
    from sdui.domain.catalog import Catalog

logger = logging.getLogger(__name__)

type _Graph = nx.DiGraph

ITEM_TEMPLATE = "itemTemplate"
MAX_REPORTED_CYCLES = 20


@dataclass(frozen=True)
class DanglingReference:
    """A property value naming a node id that is not in the map."""

    node_id: str
    property: str
    target_id: str


@dataclass(frozen=True)
class GraphReport:
    """Integrity summary of a layout graph."""

    root_id: str
    root_present: bool
    node_count: int
    unreachable: list[str] = field(default_factory=list)
    dangling: list[DanglingReference] = field(default_factory=list)
    cycles: list[list[str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.root_present and not self.dangling and not self.cycles


class LayoutGraph:
    """Flat id -> Node table with a declared root id.

    Args:
        root_id: Id of the root node. Need not exist yet.
        nodes: Initial nodes; a later duplicate id replaces an earlier one.
        catalog: Used to find reference-typed properties.
        heuristic_references: Detect children by value for widget types
            the catalog does not define.
    """

    def __init__(
        self,
        root_id: str,
        nodes: Iterable[Node] = (),
        *,
        catalog: Catalog | None = None,
        heuristic_references: bool = True,
    ) -> None:
        self.root_id = root_id
        self.catalog = catalog
        self.heuristic_references = heuristic_references
        self._nodes: dict[str, Node] = {}
        self._graph: _Graph | None = None
        for node in nodes:
            if node.id in self._nodes:
                logger.warning("Duplicate node id %s in layout; keeping the last one", node.id)
            self._nodes[node.id] = node

    @classmethod
    def from_layout(cls, layout: Layout, **kwargs: Any) -> LayoutGraph:
        return cls(layout.root, layout.nodes, **kwargs)

    def to_layout(self) -> Layout:
        """Serialize the live map back to a Layout, in map order."""
        return Layout(root=self.root_id, nodes=list(self._nodes.values()))

    # ------------------------------------------------------------------
    # Node map access
    # ------------------------------------------------------------------

    @property
    def nodes(self) -> Mapping[str, Node]:
        """Read-only view of the live node map."""
        return MappingProxyType(self._nodes)

    def get(self, node_id: str) -> Node | None:
        return self._nodes.get(node_id)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def put(self, node: Node) -> None:
        """Insert or overwrite a node by id."""
        self._nodes[node.id] = node
        self.invalidate()

    def remove(self, node_id: str) -> bool:
        """Delete a node; returns False if it was not present."""
        if self._nodes.pop(node_id, None) is None:
            return False
        self.invalidate()
        return True

    # ------------------------------------------------------------------
    # Child references
    # ------------------------------------------------------------------

    def references(self, node: Node) -> dict[str, list[str]]:
        """Map each child-bearing property of *node* to the ids it names.

        Catalog-declared reference properties are returned as written
        (dangling ids included). Without a catalog definition, a string
        naming a known id counts, as does a list of strings with at least
        one known id. Property order follows the node's own properties.
        """
        properties = node.properties or {}
        declared = self.catalog.reference_properties(node.type) if self.catalog else None

        refs: dict[str, list[str]] = {}
        for name, value in properties.items():
            if declared is not None:
                if name in declared:
                    ids = _as_id_list(value)
                    if ids:
                        refs[name] = ids
                continue
            if not self.heuristic_references:
                continue
            if isinstance(value, str) and value in self._nodes:
                refs[name] = [value]
            elif (
                isinstance(value, list)
                and value
                and all(isinstance(v, str) for v in value)
                and any(v in self._nodes for v in value)
            ):
                refs[name] = list(value)
        return refs

    # ------------------------------------------------------------------
    # NetworkX view and analysis
    # ------------------------------------------------------------------

    @property
    def graph(self) -> _Graph:
        """Return the DiGraph, building it from the node map on first access."""
        if self._graph is None:
            self._graph = self._build()
        return self._graph

    def invalidate(self) -> None:
        """Clear the cached graph, forcing rebuild on next access."""
        self._graph = None

    def dangling_references(self) -> list[DanglingReference]:
        dangling: list[DanglingReference] = []
        for node_id, prop, target in self._edges():
            if target not in self._nodes:
                dangling.append(DanglingReference(node_id=node_id, property=prop, target_id=target))
        return dangling

    def analyze(self) -> GraphReport:
        """Report unreachable nodes, dangling references and cycles."""
        g = self.graph
        root_present = self.root_id in self._nodes
        reachable: set[str] = set()
        if root_present:
            reachable = nx.descendants(g, self.root_id) | {self.root_id}
        unreachable = [node_id for node_id in self._nodes if node_id not in reachable]
        cycles = [list(c) for c in islice(nx.simple_cycles(g), MAX_REPORTED_CYCLES)]
        return GraphReport(
            root_id=self.root_id,
            root_present=root_present,
            node_count=len(self._nodes),
            unreachable=unreachable,
            dangling=self.dangling_references(),
            cycles=cycles,
        )

    def _edges(self) -> Iterator[tuple[str, str, str]]:
        """Yield ``(owner_id, property, target_id)`` for every reference.

        References made from an owner's item template count as the owner's.
        """
        for node in self._nodes.values():
            for prop, ids in self.references(node).items():
                for target in ids:
                    yield node.id, prop, target
            template = node.item_template
            if template is not None:
                for ids in self.references(template).values():
                    for target in ids:
                        yield node.id, ITEM_TEMPLATE, target

    def _build(self) -> _Graph:
        g: _Graph = nx.DiGraph()
        for node in self._nodes.values():
            g.add_node(node.id, type=node.type)
        for owner, prop, target in self._edges():
            if target in self._nodes:
                g.add_edge(owner, target, property=prop)
        return g


def _as_id_list(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [v for v in value if isinstance(v, str)]
    return []
