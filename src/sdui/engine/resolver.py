"""LayoutResolver — build the render tree from the flat node map.

A depth-first walk from the root follows each node's child references
(see :meth:`LayoutGraph.references`). The ids on the active path are
tracked explicitly: reaching one of them again raises
:class:`CyclicalLayoutError` and no partial tree is returned. A missing
root raises :class:`MissingRootError`; a reference to an id that is not
in the map is skipped with a diagnostic.

Item templates are never resolved on their own. They are instantiated
once per element of the list the owner's source binding produces, and
each instance resolves its bindings with that element as the item
scope. Instance ids are derived from position under the owner's own
instance id: ``"{owner}.{template}[{index}]"``, so a template nested in
another template yields ``"root.group[0].row[1]"``.

Resolution depth is capped at ``max_depth`` nodes on the active path;
deeper layouts raise :class:`LayoutTooDeepError`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from sdui.domain.errors import (
    CyclicalLayoutError,
    Diagnostic,
    LayoutTooDeepError,
    MissingRootError,
)
from sdui.domain.types import DiagnosticCode

if TYPE_CHECKING:
    from sdui.domain.models import Node
    from sdui.engine.bindings import BindingResolver
    from sdui.infrastructure.graph.engine import LayoutGraph

logger = logging.getLogger(__name__)

DEFAULT_ITEM_SOURCE = "data"
SCALAR_ITEM_FIELD = "value"
DEFAULT_MAX_DEPTH = 256


@dataclass(frozen=True)
class ResolvedNode:
    """A node with concrete property values and resolved children."""

    id: str
    type: str
    properties: dict[str, Any] = field(default_factory=dict)
    children: dict[str, list[ResolvedNode]] = field(default_factory=dict)
    items: list[ResolvedNode] = field(default_factory=list)

    def walk(self) -> Iterator[ResolvedNode]:
        """Yield this node and every descendant, depth first."""
        stack: list[ResolvedNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            below = [child for nodes in node.children.values() for child in nodes]
            stack.extend(reversed([*below, *node.items]))

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "type": self.type, "properties": self.properties}
        if self.children:
            data["children"] = {
                prop: [child.to_dict() for child in nodes] for prop, nodes in self.children.items()
            }
        if self.items:
            data["items"] = [item.to_dict() for item in self.items]
        return data


@dataclass(frozen=True)
class ResolvedTree:
    """Result of one successful resolve pass."""

    root: ResolvedNode
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def find(self, node_id: str) -> ResolvedNode | None:
        return next((n for n in self.root.walk() if n.id == node_id), None)

    @property
    def node_count(self) -> int:
        return sum(1 for _ in self.root.walk())


class LayoutResolver:
    """Resolves a :class:`LayoutGraph` into a :class:`ResolvedTree`.

    Args:
        graph: The live node map.
        bindings: Computes bound property values per node.
        item_source_property: Name of the owner binding that supplies the
            list an item template is instantiated over. When the owner has
            no such binding, its first list-valued binding is used.
        max_depth: Longest active path (in nodes) a resolve may follow.
    """

    def __init__(
        self,
        graph: LayoutGraph,
        bindings: BindingResolver,
        *,
        item_source_property: str = DEFAULT_ITEM_SOURCE,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self._graph = graph
        self._bindings = bindings
        self._item_source = item_source_property
        self._max_depth = max_depth

    def resolve(self, root_id: str | None = None) -> ResolvedTree:
        """Resolve the tree under *root_id* (the graph's root by default).

        Raises:
            MissingRootError: If the root id is not in the node map.
            CyclicalLayoutError: If any node is reachable from itself.
            LayoutTooDeepError: If the tree is deeper than ``max_depth``.
        """
        root_id = root_id or self._graph.root_id
        root = self._graph.get(root_id)
        if root is None:
            raise MissingRootError(root_id)

        diagnostics: list[Diagnostic] = []
        resolved = self._resolve_node(root, root.id, [], None, diagnostics)
        return ResolvedTree(root=resolved, diagnostics=diagnostics)

    def _resolve_node(
        self,
        node: Node,
        instance_id: str,
        path: list[str],
        scope: Mapping[str, Any] | None,
        diagnostics: list[Diagnostic],
    ) -> ResolvedNode:
        if node.id in path:
            raise CyclicalLayoutError(node.id, path)
        if len(path) >= self._max_depth:
            raise LayoutTooDeepError(node.id, self._max_depth)
        path.append(node.id)

        bound, type_diagnostics = self._bindings.process_with_diagnostics(node, scope)
        diagnostics.extend(type_diagnostics)
        properties = {**(node.properties or {}), **bound}

        children: dict[str, list[ResolvedNode]] = {}
        for prop, ids in self._graph.references(node).items():
            resolved: list[ResolvedNode] = []
            for child_id in ids:
                child = self._graph.get(child_id)
                if child is None:
                    diagnostics.append(_dangling(node.id, prop, child_id))
                    continue
                resolved.append(self._resolve_node(child, child.id, path, scope, diagnostics))
            children[prop] = resolved

        items: list[ResolvedNode] = []
        if node.item_template is not None:
            items = self._instantiate(node, instance_id, bound, path, diagnostics)

        path.pop()
        return ResolvedNode(
            id=instance_id,
            type=node.type,
            properties=properties,
            children=children,
            items=items,
        )

    def _instantiate(
        self,
        owner: Node,
        owner_instance_id: str,
        bound: Mapping[str, Any],
        path: list[str],
        diagnostics: list[Diagnostic],
    ) -> list[ResolvedNode]:
        template = owner.item_template
        source = self._item_list(bound)
        if template is None or source is None:
            logger.debug("No list binding on %s; item template not instantiated", owner.id)
            return []

        instances: list[ResolvedNode] = []
        for index, element in enumerate(source):
            scope = element if isinstance(element, Mapping) else {SCALAR_ITEM_FIELD: element}
            instance_id = f"{owner_instance_id}.{template.id}[{index}]"
            instances.append(self._resolve_node(template, instance_id, path, scope, diagnostics))
        return instances

    def _item_list(self, bound: Mapping[str, Any]) -> list[Any] | None:
        value = bound.get(self._item_source)
        if isinstance(value, list):
            return value
        return next((v for v in bound.values() if isinstance(v, list)), None)


def _dangling(node_id: str, prop: str, target_id: str) -> Diagnostic:
    message = f"Node '{node_id}' references missing node '{target_id}' in '{prop}'"
    logger.warning(message)
    return Diagnostic(
        code=DiagnosticCode.DANGLING_REFERENCE,
        message=message,
        detail={"node_id": node_id, "property": prop, "target_id": target_id},
    )
