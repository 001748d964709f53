"""LayoutPatcher — apply a LayoutUpdate to the live node map.

Best-effort and non-transactional: operations are applied in order
directly to the :class:`LayoutGraph` and nothing is rolled back. Each
recoverable mismatch produces a diagnostic and the batch continues:

- unknown op code -> no effect;
- ``add`` with an absent target -> nodes are inserted, linking skipped.

``remove`` leaves references held by other nodes in place; the resolver
reports them as dangling.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from sdui.domain.errors import Diagnostic, PatchReport
from sdui.domain.operations import LayoutOperation, LayoutUpdate, parse_layout_update
from sdui.domain.types import DiagnosticCode, LayoutOpKind

if TYPE_CHECKING:
    from sdui.infrastructure.graph.engine import LayoutGraph

logger = logging.getLogger(__name__)


class LayoutPatcher:
    """Applies ordered structural operations to a layout graph."""

    def apply(
        self,
        graph: LayoutGraph,
        update: LayoutUpdate | Mapping[str, Any] | str | bytes,
    ) -> PatchReport:
        """Apply *update* to *graph*.

        Raises:
            MalformedDocumentError: If *update* does not parse at all.
        """
        parsed = parse_layout_update(update)
        applied = 0
        skipped = 0
        diagnostics: list[Diagnostic] = []

        for operation in parsed.operations:
            match operation.op:
                case LayoutOpKind.ADD:
                    self._add(graph, operation, diagnostics)
                case LayoutOpKind.REMOVE:
                    self._remove(graph, operation)
                case LayoutOpKind.REPLACE:
                    self._replace(graph, operation)
                case _:
                    message = f"Ignoring unknown layout operation '{operation.op}'"
                    logger.warning(message)
                    diagnostics.append(
                        Diagnostic(
                            code=DiagnosticCode.UNKNOWN_OPERATION,
                            message=message,
                            detail={"op": operation.op},
                        )
                    )
                    skipped += 1
                    continue
            applied += 1

        return PatchReport(applied=applied, skipped=skipped, diagnostics=diagnostics)

    def _add(
        self,
        graph: LayoutGraph,
        operation: LayoutOperation,
        diagnostics: list[Diagnostic],
    ) -> None:
        nodes = operation.nodes or []
        if not nodes:
            return

        for node in nodes:
            graph.put(node)

        target_id = operation.target_node_id
        target_property = operation.target_property
        if target_id is None or target_property is None:
            return

        target = graph.get(target_id)
        if target is None:
            message = f"Target node '{target_id}' not found for 'add' operation"
            logger.warning(message)
            diagnostics.append(
                Diagnostic(
                    code=DiagnosticCode.MISSING_TARGET,
                    message=message,
                    detail={
                        "target_node_id": target_id,
                        "target_property": target_property,
                        "node_ids": [n.id for n in nodes],
                    },
                )
            )
            return

        new_ids = [n.id for n in nodes]
        current = (target.properties or {}).get(target_property)
        if isinstance(current, list):
            children = [*current, *new_ids]
        elif isinstance(current, str):
            children = [current, *new_ids]
        else:
            children = new_ids
        graph.put(target.with_property(target_property, children))

    def _remove(self, graph: LayoutGraph, operation: LayoutOperation) -> None:
        for node_id in operation.node_ids or []:
            graph.remove(node_id)

    def _replace(self, graph: LayoutGraph, operation: LayoutOperation) -> None:
        for node in operation.nodes or []:
            if node.id in graph:
                graph.put(node)
