"""CheckService — layout integrity and catalog conformance.

Single command following the linter pattern. Two categories:

- Layout structure: missing root, cycles, dangling references,
  nodes unreachable from the root.
- Catalog conformance: widget types the catalog does not define and
  static property values that do not conform to their declared type.

Nothing is modified. Each issue is a flat dict so the CLI can render it
as a table row or dump it as JSON unchanged.
"""

from __future__ import annotations

from typing import Any

from sdui.services.base import BaseService
from sdui.services.result import ServiceResult

SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"

CAT_STRUCTURE = "layout_structure"
CAT_CATALOG = "catalog_conformance"


class CheckService(BaseService):
    """Reports integrity issues of the surface's current layout."""

    def check(self) -> ServiceResult:
        issues: list[dict[str, Any]] = []
        issues.extend(self._check_structure())
        issues.extend(self._check_catalog())

        errors = sum(1 for i in issues if i["severity"] == SEVERITY_ERROR)
        return ServiceResult(
            ok=True,
            op="check",
            data={
                "issues": issues,
                "count": len(issues),
                "errors": errors,
                "node_count": len(self._surface.graph),
            },
        )

    def _check_structure(self) -> list[dict[str, Any]]:
        report = self._surface.graph.analyze()
        issues: list[dict[str, Any]] = []

        if not report.root_present:
            issues.append(
                _issue(
                    CAT_STRUCTURE,
                    SEVERITY_ERROR,
                    report.root_id,
                    f"Root node '{report.root_id}' is not in the layout",
                )
            )
        for cycle in report.cycles:
            trail = " -> ".join([*cycle, cycle[0]])
            issues.append(
                _issue(CAT_STRUCTURE, SEVERITY_ERROR, cycle[0], f"Cyclical layout: {trail}")
            )
        for ref in report.dangling:
            issues.append(
                _issue(
                    CAT_STRUCTURE,
                    SEVERITY_ERROR,
                    ref.node_id,
                    f"Property '{ref.property}' references missing node '{ref.target_id}'",
                )
            )
        if report.root_present:
            for node_id in report.unreachable:
                issues.append(
                    _issue(
                        CAT_STRUCTURE,
                        SEVERITY_WARNING,
                        node_id,
                        f"Node is not reachable from root '{report.root_id}'",
                    )
                )
        return issues

    def _check_catalog(self) -> list[dict[str, Any]]:
        catalog = self._surface.catalog
        checker = self._surface.type_checker
        issues: list[dict[str, Any]] = []
        if not catalog.items:
            return issues

        for node in self._surface.graph.nodes.values():
            definition = catalog.definition(node.type)
            if definition is None:
                issues.append(
                    _issue(
                        CAT_CATALOG,
                        SEVERITY_WARNING,
                        node.id,
                        f"Widget type '{node.type}' is not defined in the catalog",
                    )
                )
                continue
            for prop, value in (node.properties or {}).items():
                schema = definition.property_schema(prop)
                if schema is None or checker.conforms_schema(schema, value):
                    continue
                issues.append(
                    _issue(
                        CAT_CATALOG,
                        SEVERITY_WARNING,
                        node.id,
                        f"Property '{prop}' does not conform to type '{schema.get('type')}'",
                    )
                )
        return issues


def _issue(category: str, severity: str, node_id: str, message: str) -> dict[str, Any]:
    return {
        "category": category,
        "severity": severity,
        "node_id": node_id,
        "message": message,
    }
